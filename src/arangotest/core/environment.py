"""
Deployment gating for tests
Skips tests whose server version, edition or topology does not match.
"""

import logging
import os
from dataclasses import dataclass
from typing import Union

import pytest

from ..config import TEST_MODE_CLUSTER, TEST_MODE_SINGLE
from ..utils.error_handling import describe
from ..utils.version import Version, VersionChecker
from .client import ArangoTestClient, VersionInfo

logger = logging.getLogger(__name__)


def get_test_mode() -> str:
    """TEST_MODE as configured, possibly empty"""
    return os.getenv("TEST_MODE", "").strip()


def _version_info(client: ArangoTestClient) -> VersionInfo:
    try:
        return client.version()
    except Exception as e:
        pytest.fail(f"Failed to get version info: {describe(e)}")


@dataclass(frozen=True)
class VersionCheck:
    """Version, edition and topology of the deployment a test runs against"""
    version: Version
    enterprise: bool
    mode: str

    def check_version(self, checker: VersionChecker) -> "VersionCheck":
        logger.debug(f"Version check: {checker.describe(self.version)}")
        if not checker.check(self.version):
            pytest.skip(f"Version check failed: {checker.describe(self.version)}")
        return self

    def enterprise_only(self) -> "VersionCheck":
        if not self.enterprise:
            pytest.skip("Required enterprise version")
        return self

    def community_only(self) -> "VersionCheck":
        if self.enterprise:
            pytest.skip("Required community version")
        return self

    def cluster(self) -> "VersionCheck":
        if self.mode != TEST_MODE_CLUSTER:
            pytest.skip(f"Required cluster mode, got {self.mode}")
        return self

    def not_cluster(self) -> "VersionCheck":
        if self.mode == TEST_MODE_CLUSTER:
            pytest.skip("Test should not run on cluster")
        return self


def ensure_version(client: ArangoTestClient) -> VersionCheck:
    """Inspect the deployment and return a VersionCheck for fluent gating"""
    info = _version_info(client)
    try:
        mode = TEST_MODE_CLUSTER if client.is_cluster() else TEST_MODE_SINGLE
    except Exception as e:
        pytest.fail(f"Failed to get server role: {describe(e)}")
    return VersionCheck(version=info.version, enterprise=info.is_enterprise, mode=mode)


def skip_below_version(client: ArangoTestClient, version: Union[Version, str]) -> VersionInfo:
    info = _version_info(client)
    if info.version.compare_to(version) < 0:
        pytest.skip(f"Skipping below version '{version}', got version '{info.version}'")
    return info


def skip_between_version(client: ArangoTestClient, min_version: Union[Version, str],
                         max_version: Union[Version, str]) -> VersionInfo:
    """Skip unless min_version <= server version < max_version"""
    info = _version_info(client)
    if info.version.compare_to(min_version) < 0:
        pytest.skip(f"Skipping below version '{min_version}', got version '{info.version}'")
    if info.version.compare_to(max_version) >= 0:
        pytest.skip(f"Skipping above version '{max_version}', got version '{info.version}'")
    return info


def skip_no_enterprise(client: ArangoTestClient) -> None:
    if not _version_info(client).is_enterprise:
        pytest.skip("Enterprise only")


def skip_no_cluster() -> None:
    if get_test_mode() != TEST_MODE_CLUSTER:
        pytest.skip("Cluster only")


def skip_cluster() -> None:
    if get_test_mode() == TEST_MODE_CLUSTER:
        pytest.skip("Not supported in cluster mode")
