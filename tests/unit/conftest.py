"""
Fixtures for harness unit tests (no server required)
"""

import httpx
import pytest
from arango.exceptions import ArangoServerError
from arango.request import Request
from arango.response import Response

from arangotest.config import TestConfig


def build_server_error(status_code, error_num=None, message="error", cls=ArangoServerError):
    """Build a python-arango server error the way the driver raises it"""
    resp = Response(
        method="get",
        url="http://localhost:8529/_api/test",
        headers=httpx.Headers({}),
        status_code=status_code,
        status_text="Error",
        raw_body="",
    )
    resp.error_code = error_num
    resp.error_message = message
    return cls(resp, Request(method="get", endpoint="/_api/test"))


@pytest.fixture
def server_error():
    """Factory for ArangoServerError instances"""
    return build_server_error


@pytest.fixture
def test_config():
    """Configuration independent of the caller's environment"""
    return TestConfig(
        endpoints=["http://localhost:8529"],
        mode="single",
        authentication="basic:root:rootpw",
        auth_profile="none",
        ssl="",
        content_type="json",
        connection="http",
        request_timeout=5,
        wait_timeout=2,
        retry_503=3,
        log_requests=True,
        log_level="DEBUG",
        test_data_prefix="unittest",
        creators=2,
        readers=3,
        documents_per_creator=5,
        max_concurrent_tests=2,
    )


class FakeClock:
    """Stand-in for the time module: sleep() advances monotonic() instantly"""

    def __init__(self):
        self.now = 1000.0
        self.sleeps = []

    def monotonic(self):
        return self.now

    def perf_counter(self):
        return self.now

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock(monkeypatch):
    """Replace the time module used by the client and transport modules"""
    clock = FakeClock()
    monkeypatch.setattr("arangotest.core.client.time", clock)
    monkeypatch.setattr("arangotest.core.http_client.time", clock)
    return clock
