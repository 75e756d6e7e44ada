"""
Concurrent workloads and benchmark regression tracking
Runs blocking python-arango calls concurrently and keeps timing baselines in
SQLite so slow runs can be flagged against previous ones.
"""

import asyncio
import logging
import sqlite3
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from statistics import mean
from typing import Any, Callable, Dict, List, Optional

from ..config import TestConfig, get_config

logger = logging.getLogger(__name__)

SEVERITY_NONE = "none"
SEVERITY_MINOR = "minor"
SEVERITY_MAJOR = "major"
SEVERITY_CRITICAL = "critical"

# Slowdown against the baseline average, in percent
MINOR_THRESHOLD = 20.0
MAJOR_THRESHOLD = 50.0
CRITICAL_THRESHOLD = 100.0

MIN_BASELINE_SAMPLES = 5


@dataclass
class WorkloadResult:
    """Outcome of a concurrent workload"""
    operations: int
    durations: List[float] = field(default_factory=list)
    errors: List[BaseException] = field(default_factory=list)
    wall_time: float = 0.0

    @property
    def succeeded(self) -> int:
        return len(self.durations)

    @property
    def throughput(self) -> float:
        """Successful operations per second"""
        if self.wall_time <= 0:
            return 0.0
        return self.succeeded / self.wall_time

    @property
    def avg_duration(self) -> float:
        return mean(self.durations) if self.durations else 0.0


@dataclass
class ProducerConsumerResult:
    created: int = 0
    read: int = 0
    errors: List[BaseException] = field(default_factory=list)


class WorkloadRunner:
    """Runs blocking calls in worker threads with bounded concurrency"""

    def __init__(self, config: Optional[TestConfig] = None):
        self.config = config or get_config()

    async def time_operation(self, fn: Callable[..., Any], *args) -> float:
        """Run fn in a worker thread and return its duration"""
        start_time = time.perf_counter()
        await asyncio.to_thread(fn, *args)
        return time.perf_counter() - start_time

    async def run(self, fn: Callable[[int], Any], count: int, concurrency: Optional[int] = None) -> WorkloadResult:
        """Call fn(i) for i in range(count), at most `concurrency` at a time"""
        semaphore = asyncio.Semaphore(concurrency or self.config.max_concurrent_tests)
        result = WorkloadResult(operations=count)

        async def one(i: int):
            async with semaphore:
                try:
                    result.durations.append(await self.time_operation(fn, i))
                except Exception as e:
                    result.errors.append(e)

        started = time.perf_counter()
        await asyncio.gather(*(one(i) for i in range(count)))
        result.wall_time = time.perf_counter() - started

        logger.info(
            f"Workload finished: {result.succeeded}/{count} ok, "
            f"{len(result.errors)} errors, {result.throughput:.1f} ops/s"
        )
        return result


# End-of-work marker for consumers; metadata returned by create() may be None
_STOP = object()


async def run_producers_consumers(
    create: Callable[[int, int], Any],
    read: Callable[[Any], Any],
    creators: int,
    readers: int,
    per_creator: int,
    queue_size: int = 16 * 1024,
) -> ProducerConsumerResult:
    """
    Run `creators` producers calling create(creator_index, i) `per_creator` times
    each, feeding the returned metadata to `readers` consumers calling read(meta).

    A producer stops at its first error; consumers keep draining the queue.
    """
    queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
    result = ProducerConsumerResult()

    async def producer(index: int):
        for i in range(per_creator):
            try:
                meta = await asyncio.to_thread(create, index, i)
            except Exception as e:
                result.errors.append(e)
                return
            result.created += 1
            await queue.put(meta)

    async def consumer():
        while True:
            meta = await queue.get()
            try:
                if meta is _STOP:
                    return
                await asyncio.to_thread(read, meta)
                result.read += 1
            except Exception as e:
                result.errors.append(e)
            finally:
                queue.task_done()

    consumer_tasks = [asyncio.create_task(consumer()) for _ in range(readers)]
    await asyncio.gather(*(producer(i) for i in range(creators)))
    for _ in range(readers):
        await queue.put(_STOP)
    await asyncio.gather(*consumer_tasks)

    logger.info(f"Created {result.created}, read {result.read}, {len(result.errors)} errors")
    return result


@dataclass
class PerformanceMetric:
    """Individual benchmark measurement"""
    timestamp: str
    benchmark: str
    operation: str
    duration: float
    success: bool
    environment: str = "single"


@dataclass
class PerformanceBaseline:
    benchmark: str
    operation: str
    avg_duration: float
    p95_duration: float
    p99_duration: float
    sample_count: int
    last_updated: str


@dataclass
class RegressionResult:
    """Result of comparing a measurement against its baseline"""
    benchmark: str
    operation: str
    current_duration: float
    baseline_avg: float
    baseline_p95: float
    regression_detected: bool
    severity: str
    change_percent: float


def calculate_percentile(values: List[float], percentile: int) -> float:
    """Linear interpolation percentile"""
    if not values:
        return 0.0

    values_sorted = sorted(values)
    k = (len(values_sorted) - 1) * percentile / 100
    f = int(k)
    c = k - f

    if f == len(values_sorted) - 1:
        return values_sorted[f]

    return values_sorted[f] * (1 - c) + values_sorted[f + 1] * c


def classify_change(change_percent: float) -> str:
    if change_percent > CRITICAL_THRESHOLD:
        return SEVERITY_CRITICAL
    if change_percent > MAJOR_THRESHOLD:
        return SEVERITY_MAJOR
    if change_percent > MINOR_THRESHOLD:
        return SEVERITY_MINOR
    return SEVERITY_NONE


class PerformanceTracker:
    """Stores benchmark metrics in SQLite and detects regressions"""

    def __init__(self, db_path: Optional[str] = None, environment: str = "single"):
        if db_path is None:
            db_path = Path.cwd() / "performance_metrics.db"

        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.environment = environment
        self._init_database()

    def _init_database(self):
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS benchmark_metrics (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    benchmark TEXT NOT NULL,
                    operation TEXT NOT NULL,
                    duration REAL NOT NULL,
                    success INTEGER NOT NULL,
                    environment TEXT DEFAULT 'single'
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS benchmark_baselines (
                    benchmark TEXT NOT NULL,
                    operation TEXT NOT NULL,
                    avg_duration REAL NOT NULL,
                    p95_duration REAL NOT NULL,
                    p99_duration REAL NOT NULL,
                    sample_count INTEGER NOT NULL,
                    last_updated TEXT NOT NULL,
                    PRIMARY KEY (benchmark, operation)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_metrics_benchmark_op
                ON benchmark_metrics(benchmark, operation)
            """)
            conn.commit()

    def record(self, benchmark: str, operation: str, duration: float, success: bool = True):
        metric = PerformanceMetric(
            timestamp=datetime.now().isoformat(),
            benchmark=benchmark,
            operation=operation,
            duration=duration,
            success=success,
            environment=self.environment,
        )
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT INTO benchmark_metrics (timestamp, benchmark, operation, duration, success, environment)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (metric.timestamp, metric.benchmark, metric.operation,
                  metric.duration, int(metric.success), metric.environment))
            conn.commit()
        return metric

    def get_recent_metrics(self, benchmark: str, operation: str, days: int = 30) -> List[PerformanceMetric]:
        """Successful measurements of the last `days` days, newest first"""
        cutoff_date = (datetime.now() - timedelta(days=days)).isoformat()

        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("""
                SELECT timestamp, benchmark, operation, duration, success, environment
                FROM benchmark_metrics
                WHERE benchmark = ? AND operation = ? AND timestamp >= ? AND success = 1
                ORDER BY timestamp DESC
            """, (benchmark, operation, cutoff_date))
            return [
                PerformanceMetric(row[0], row[1], row[2], row[3], bool(row[4]), row[5])
                for row in cursor.fetchall()
            ]

    def update_baseline(self, benchmark: str, operation: str) -> Optional[PerformanceBaseline]:
        durations = [m.duration for m in self.get_recent_metrics(benchmark, operation)]
        if len(durations) < MIN_BASELINE_SAMPLES:
            return None

        baseline = PerformanceBaseline(
            benchmark=benchmark,
            operation=operation,
            avg_duration=mean(durations),
            p95_duration=calculate_percentile(durations, 95),
            p99_duration=calculate_percentile(durations, 99),
            sample_count=len(durations),
            last_updated=datetime.now().isoformat(),
        )
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                INSERT OR REPLACE INTO benchmark_baselines
                (benchmark, operation, avg_duration, p95_duration, p99_duration, sample_count, last_updated)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (baseline.benchmark, baseline.operation, baseline.avg_duration, baseline.p95_duration,
                  baseline.p99_duration, baseline.sample_count, baseline.last_updated))
            conn.commit()
        return baseline

    def get_baseline(self, benchmark: str, operation: str) -> Optional[PerformanceBaseline]:
        with sqlite3.connect(self.db_path) as conn:
            row = conn.execute("""
                SELECT benchmark, operation, avg_duration, p95_duration, p99_duration, sample_count, last_updated
                FROM benchmark_baselines
                WHERE benchmark = ? AND operation = ?
            """, (benchmark, operation)).fetchone()
        return PerformanceBaseline(*row) if row else None

    def detect_regression(self, benchmark: str, operation: str, current_duration: float) -> RegressionResult:
        """Compare a measurement with the stored baseline"""
        baseline = self.get_baseline(benchmark, operation)

        if baseline is None or baseline.avg_duration <= 0:
            return RegressionResult(
                benchmark=benchmark,
                operation=operation,
                current_duration=current_duration,
                baseline_avg=current_duration,
                baseline_p95=current_duration,
                regression_detected=False,
                severity=SEVERITY_NONE,
                change_percent=0.0,
            )

        change_percent = ((current_duration - baseline.avg_duration) / baseline.avg_duration) * 100
        severity = classify_change(change_percent)
        return RegressionResult(
            benchmark=benchmark,
            operation=operation,
            current_duration=current_duration,
            baseline_avg=baseline.avg_duration,
            baseline_p95=baseline.p95_duration,
            regression_detected=severity != SEVERITY_NONE,
            severity=severity,
            change_percent=change_percent,
        )

    def track(self, benchmark: str, operation: str, duration: float) -> RegressionResult:
        """Check a measurement, record it and refresh the baseline when it is not a regression"""
        regression = self.detect_regression(benchmark, operation, duration)
        self.record(benchmark, operation, duration)
        if not regression.regression_detected:
            self.update_baseline(benchmark, operation)
        else:
            logger.warning(
                f"{regression.severity.upper()} regression in {benchmark}/{operation}: "
                f"{regression.change_percent:.1f}% slower than baseline"
            )
        return regression

    def summarize(self, results: List[RegressionResult]) -> Dict[str, Any]:
        counts = {s: len([r for r in results if r.severity == s])
                  for s in (SEVERITY_CRITICAL, SEVERITY_MAJOR, SEVERITY_MINOR)}
        counts["total"] = sum(counts.values())
        return {
            "total_analyzed": len(results),
            "regressions": counts,
            "regression_details": [asdict(r) for r in results if r.regression_detected],
        }

    def cleanup_old_metrics(self, days_to_keep: int = 90) -> int:
        cutoff_date = (datetime.now() - timedelta(days=days_to_keep)).isoformat()
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM benchmark_metrics WHERE timestamp < ?", (cutoff_date,))
            conn.commit()
            return cursor.rowcount
