"""
Fixtures for suites running against a live deployment (TEST_ENDPOINTS)
"""

import logging

import pytest

from arangotest.core import DataFactory, create_client, ensure_collection, ensure_database, ensure_version

logger = logging.getLogger(__name__)


@pytest.fixture(scope="session")
def client():
    """Client for the configured deployment; skips the suites when none is configured"""
    test_client = create_client()
    yield test_client
    test_client.close()


@pytest.fixture(scope="session")
def data_factory(client):
    factory = DataFactory(client.config)
    yield factory
    leftovers = factory.get_cleanup_names().get("user", [])
    for name in leftovers:
        client.system_db.delete_user(name, ignore_missing=True)


@pytest.fixture(scope="session")
def version_check(client):
    return ensure_version(client)


@pytest.fixture(scope="module")
def database(client, data_factory):
    """Database private to the test module, dropped afterwards"""
    name = data_factory.unique_name("db")
    db = ensure_database(client, name)
    yield db
    client.system_db.delete_database(name, ignore_missing=True)
    logger.debug(f"Dropped database {name}")


@pytest.fixture
def collection(database, data_factory):
    """Fresh document collection, dropped after the test"""
    name = data_factory.unique_name("col")
    col = ensure_collection(database, name)
    yield col
    database.delete_collection(name, ignore_missing=True)


@pytest.fixture
def edge_collection(database, data_factory):
    name = data_factory.unique_name("edges")
    col = ensure_collection(database, name, {"edge": True})
    yield col
    database.delete_collection(name, ignore_missing=True)
