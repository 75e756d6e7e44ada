"""
Pytest configuration shared by unit and integration suites
"""

import os
import uuid

import pytest

from arangotest.config import TEST_MODE_CLUSTER, configure_logging


def pytest_configure(config):
    """Configure logging and CI friendly defaults"""
    configure_logging()
    if os.getenv("CI"):
        config.option.tb = "short"


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location and names"""
    for item in items:
        path = str(item.fspath)
        name = item.name.lower()

        if f"{os.sep}unit{os.sep}" in path:
            item.add_marker(pytest.mark.fast)
            continue

        item.add_marker(pytest.mark.integration)

        if any(word in name for word in ["version", "connectivity", "create_database", "server_role"]):
            item.add_marker(pytest.mark.smoke)
            item.add_marker(pytest.mark.fast)
        elif any(word in name for word in ["concurrent", "benchmark", "bulk_load"]):
            item.add_marker(pytest.mark.performance)
            item.add_marker(pytest.mark.slow)
        elif any(word in name for word in ["create", "read", "update", "replace", "remove", "import"]):
            item.add_marker(pytest.mark.crud)
            item.add_marker(pytest.mark.regression)
        else:
            item.add_marker(pytest.mark.regression)


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--fast",
        action="store_true",
        default=False,
        help="Run only fast tests"
    )
    parser.addoption(
        "--smoke-only",
        action="store_true",
        default=False,
        help="Run only smoke tests"
    )
    parser.addoption(
        "--skip-slow",
        action="store_true",
        default=False,
        help="Skip slow running tests"
    )


def pytest_runtest_setup(item):
    if item.config.getoption("--skip-slow") and item.get_closest_marker("slow"):
        pytest.skip("Skipping slow test")

    if item.config.getoption("--smoke-only") and not item.get_closest_marker("smoke"):
        pytest.skip("Skipping non-smoke test")

    if item.config.getoption("--fast") and not item.get_closest_marker("fast"):
        pytest.skip("Skipping non-fast test")

    if item.get_closest_marker("cluster") and os.getenv("TEST_MODE", "").strip() != TEST_MODE_CLUSTER:
        pytest.skip("Cluster only")


@pytest.fixture(scope="session")
def test_isolation_prefix():
    """Unique prefix for names created by this session"""
    worker_id = os.getenv("PYTEST_XDIST_WORKER", "main")
    return f"{os.getenv('TEST_DATA_PREFIX', 'arangotest')}_{worker_id}_{uuid.uuid4().hex[:8]}"
