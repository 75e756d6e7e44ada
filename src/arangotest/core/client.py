"""
Test client construction and server readiness helpers
create_client() builds a python-arango client from the environment and waits
until the deployment answers before handing it to a test.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

import pytest
from arango import ArangoClient
from arango.database import StandardDatabase

from ..config import (
    CONNECTION_HTTP,
    CONTENT_TYPE_JSON,
    TEST_MODE_SINGLE,
    TestConfig,
    get_config,
)
from ..utils.error_handling import (
    InvalidArgumentError,
    describe,
    is_no_leader_or_ongoing,
    is_service_unavailable,
)
from ..utils.version import Version
from .auth import AuthSpec, parse_authentication
from .http_client import HttpxHTTPClient

logger = logging.getLogger(__name__)

SYSTEM_DATABASE = "_system"
ROLE_SINGLE = "SINGLE"
ROLE_COORDINATOR = "COORDINATOR"
LICENSE_ENTERPRISE = "enterprise"
LICENSE_COMMUNITY = "community"


class Interrupt(Exception):
    """Raised from a retry() callback to stop retrying successfully"""


@dataclass
class VersionInfo:
    """Server version and license"""
    version: Version
    server: str = "arango"
    license: str = LICENSE_COMMUNITY

    @property
    def is_enterprise(self) -> bool:
        return self.license == LICENSE_ENTERPRISE


class ArangoTestClient:
    """python-arango client bundled with the auth and config it was built from"""

    def __init__(self, client: ArangoClient, http: HttpxHTTPClient, config: TestConfig,
                 auth: Optional[AuthSpec] = None):
        self.client = client
        self.http = http
        self.config = config
        self.auth = auth
        self.synced_endpoints: List[str] = []

    @property
    def endpoints(self) -> List[str]:
        return list(self.client.hosts)

    @property
    def last_response(self):
        return self.http.last_response

    def db(self, name: str = SYSTEM_DATABASE) -> StandardDatabase:
        """Open a database handle using the configured authentication"""
        kwargs = self.auth.db_kwargs() if self.auth else {}
        return self.client.db(name, verify=False, **kwargs)

    @property
    def system_db(self) -> StandardDatabase:
        return self.db(SYSTEM_DATABASE)

    def version(self) -> VersionInfo:
        body = self.system_db.version(details=True)
        raw_version = body.get("version") or body.get("server-version", "")
        license_name = body.get("license") or body.get("details", {}).get("license", LICENSE_COMMUNITY)
        return VersionInfo(
            version=Version(raw_version),
            server=body.get("server", "arango"),
            license=license_name,
        )

    def server_role(self) -> str:
        return self.system_db.role()

    def is_cluster(self) -> bool:
        return self.server_role() == ROLE_COORDINATOR

    def close(self):
        self.client.close()
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def retry(interval: float, timeout: float, fn: Callable[[], Any]) -> None:
    """
    Call fn every `interval` seconds until it raises Interrupt.

    A normal return from fn means "not yet". Any other exception is propagated
    immediately. Raises TimeoutError once `timeout` seconds have passed.
    """
    deadline = time.monotonic() + timeout
    while True:
        time.sleep(interval)
        if time.monotonic() > deadline:
            raise TimeoutError(f"function timeout after {timeout}s")
        try:
            fn()
        except Interrupt:
            return


def retry_on_503(fn: Callable[[], Any], interval: float = 0.5, timeout: float = 30) -> Any:
    """Call fn until it stops failing with HTTP 503 and return its result"""
    deadline = time.monotonic() + timeout
    while True:
        try:
            return fn()
        except Exception as e:
            if not is_service_unavailable(e) or time.monotonic() > deadline:
                raise
            logger.debug(f"Service unavailable, retrying: {describe(e)}")
        time.sleep(interval)


def wait_until_server_available(client: ArangoTestClient, timeout: float = 60, interval: float = 1) -> None:
    """Wait until the server reports its version and a settled role"""

    def attempt():
        try:
            client.system_db.version()
        except Exception as e:
            logger.debug(f"Server not answering yet: {describe(e)}")
            return
        try:
            role = client.server_role()
        except Exception as e:
            if is_no_leader_or_ongoing(e):
                logger.debug("Leadership challenge ongoing, waiting")
                return
            raise
        logger.info(f"Server available with role {role}")
        raise Interrupt()

    retry(interval, timeout, attempt)


def wait_until_endpoint_synchronized(client: ArangoTestClient, timeout: float = 60, interval: float = 1) -> None:
    """Wait until the cluster reports its coordinator endpoints"""

    def attempt():
        try:
            endpoints = client.system_db.cluster.endpoints()
        except Exception as e:
            logger.debug(f"Endpoint synchronization failed: {describe(e)}")
            return
        client.synced_endpoints = list(endpoints)
        raise Interrupt()

    retry(interval, timeout, attempt)
    logger.info(f"Synchronized endpoints: {', '.join(client.synced_endpoints)}")


def wait_until_cluster_healthy(client: ArangoTestClient, timeout: float = 60, interval: float = 1) -> None:
    """Wait until every server in the cluster health report is GOOD"""
    if client.server_role() == ROLE_SINGLE:
        return

    def attempt():
        health = client.system_db.cluster.health()
        servers = health.get("Health", {})
        unhealthy = [sid for sid, info in servers.items() if info.get("Status") != "GOOD"]
        if unhealthy:
            logger.debug(f"Cluster not healthy yet: {', '.join(unhealthy)}")
            return
        raise Interrupt()

    retry(interval, timeout, attempt)


def build_client(config: TestConfig) -> ArangoTestClient:
    """Build a client from configuration without contacting the server"""
    if not config.endpoints:
        raise InvalidArgumentError("TEST_ENDPOINTS is not set")
    if config.content_type != CONTENT_TYPE_JSON:
        raise InvalidArgumentError(f"Content type '{config.content_type}' is not supported by python-arango")
    if config.connection != CONNECTION_HTTP:
        raise InvalidArgumentError(f"Connection '{config.connection}' is not supported by python-arango")

    auth = parse_authentication(config.effective_authentication)
    http = HttpxHTTPClient(
        request_timeout=config.request_timeout,
        verify=not config.ssl_enabled,
        retry_503=config.retry_503,
        log_requests=config.log_requests,
    )
    arango_client = ArangoClient(
        hosts=config.resolved_endpoints,
        http_client=http,
        request_timeout=config.request_timeout,
    )
    client = ArangoTestClient(arango_client, http, config, auth)
    logger.debug(f"Created client for {', '.join(client.endpoints)} (mode {config.mode})")
    return client


def create_client(config: Optional[TestConfig] = None, wait_until_ready: bool = True) -> ArangoTestClient:
    """Create a test client from the environment, skipping when it cannot be used"""
    config = config or get_config()

    try:
        client = build_client(config)
    except InvalidArgumentError as e:
        pytest.skip(e.message)

    if wait_until_ready:
        try:
            wait_until_server_available(client, timeout=config.wait_timeout)
        except TimeoutError:
            client.close()
            pytest.fail(f"Server at {', '.join(client.endpoints)} not available within {config.wait_timeout}s")
        except Exception as e:
            client.close()
            pytest.fail(f"Failed to connect to {', '.join(client.endpoints)}: {describe(e)}")

        if config.mode != TEST_MODE_SINGLE:
            try:
                wait_until_endpoint_synchronized(client, timeout=config.wait_timeout)
            except TimeoutError:
                logger.warning("Failed to synchronize endpoints")

    return client
