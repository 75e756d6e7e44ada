"""
Workload runner and benchmark regression tracking
"""

import threading

import pytest

from arangotest.core.performance_tracker import (
    PerformanceTracker,
    WorkloadRunner,
    calculate_percentile,
    classify_change,
    run_producers_consumers,
)


class TestWorkloadRunner:

    async def test_runs_every_operation(self, test_config):
        seen = []
        lock = threading.Lock()

        def op(i):
            with lock:
                seen.append(i)

        result = await WorkloadRunner(test_config).run(op, 20)

        assert sorted(seen) == list(range(20))
        assert result.succeeded == 20
        assert result.errors == []
        assert result.throughput > 0

    async def test_collects_errors(self, test_config):
        def op(i):
            if i % 2:
                raise ValueError(i)

        result = await WorkloadRunner(test_config).run(op, 10, concurrency=3)
        assert result.succeeded == 5
        assert len(result.errors) == 5

    async def test_respects_concurrency_limit(self, test_config):
        active = []
        peak = []
        lock = threading.Lock()
        release = threading.Event()

        def op(i):
            with lock:
                active.append(i)
                peak.append(len(active))
            release.wait(0.01)
            with lock:
                active.remove(i)

        await WorkloadRunner(test_config).run(op, 12, concurrency=2)
        assert max(peak) <= 2


class TestProducersConsumers:

    async def test_every_created_document_is_read(self):
        created = []
        read = []
        lock = threading.Lock()

        def create(creator, i):
            meta = {"_key": f"{creator}-{i}"}
            with lock:
                created.append(meta["_key"])
            return meta

        def read_doc(meta):
            with lock:
                read.append(meta["_key"])

        result = await run_producers_consumers(create, read_doc, creators=3, readers=4, per_creator=5)

        assert result.created == 15
        assert result.read == 15
        assert sorted(read) == sorted(created)
        assert result.errors == []

    async def test_failing_creator_stops(self):
        def create(creator, i):
            if creator == 0 and i == 2:
                raise RuntimeError("insert failed")
            return {"_key": f"{creator}-{i}"}

        result = await run_producers_consumers(create, lambda meta: None, creators=2, readers=1, per_creator=4)

        assert result.created == 6
        assert result.read == 6
        assert len(result.errors) == 1

    async def test_none_metadata_is_still_read(self):
        seen = []

        result = await run_producers_consumers(
            lambda creator, i: None, seen.append, creators=2, readers=1, per_creator=4, queue_size=2
        )

        assert result.created == 8
        assert result.read == 8
        assert seen == [None] * 8
        assert result.errors == []


class TestRegressionTracking:

    def test_percentile(self):
        assert calculate_percentile([], 95) == 0.0
        assert calculate_percentile([1.0], 99) == 1.0
        assert calculate_percentile([1.0, 2.0, 3.0, 4.0, 5.0], 50) == 3.0

    @pytest.mark.parametrize("change,severity", [
        (10.0, "none"),
        (20.0, "none"),
        (25.0, "minor"),
        (75.0, "major"),
        (150.0, "critical"),
    ])
    def test_classify_change(self, change, severity):
        assert classify_change(change) == severity

    def test_no_baseline_no_regression(self, tmp_path):
        tracker = PerformanceTracker(str(tmp_path / "metrics.db"))
        result = tracker.detect_regression("bulk_insert", "insert_many", 2.0)
        assert not result.regression_detected
        assert result.severity == "none"

    def test_baseline_requires_samples(self, tmp_path):
        tracker = PerformanceTracker(str(tmp_path / "metrics.db"))
        for _ in range(4):
            tracker.record("bulk_insert", "insert_many", 1.0)
        assert tracker.update_baseline("bulk_insert", "insert_many") is None

    def test_detects_regression_against_baseline(self, tmp_path):
        tracker = PerformanceTracker(str(tmp_path / "metrics.db"))
        for _ in range(5):
            tracker.track("bulk_insert", "insert_many", 1.0)

        baseline = tracker.get_baseline("bulk_insert", "insert_many")
        assert baseline.sample_count == 5
        assert baseline.avg_duration == pytest.approx(1.0)

        result = tracker.track("bulk_insert", "insert_many", 2.5)
        assert result.regression_detected
        assert result.severity == "critical"
        assert result.change_percent == pytest.approx(150.0)

        summary = tracker.summarize([result])
        assert summary["regressions"]["critical"] == 1
        assert summary["regressions"]["total"] == 1

    def test_cleanup_old_metrics(self, tmp_path):
        tracker = PerformanceTracker(str(tmp_path / "metrics.db"))
        tracker.record("b", "op", 1.0)
        assert tracker.cleanup_old_metrics(days_to_keep=1) == 0
        assert len(tracker.get_recent_metrics("b", "op")) == 1
