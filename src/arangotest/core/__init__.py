from .auth import AuthSpec, create_superuser_token, parse_authentication
from .client import (
    ArangoTestClient,
    Interrupt,
    VersionInfo,
    build_client,
    create_client,
    retry,
    retry_on_503,
    wait_until_cluster_healthy,
    wait_until_endpoint_synchronized,
    wait_until_server_available,
)
from .data_factory import BULK_SIZE, DataFactory, send_bulks
from .environment import (
    VersionCheck,
    ensure_version,
    get_test_mode,
    skip_below_version,
    skip_between_version,
    skip_cluster,
    skip_no_cluster,
    skip_no_enterprise,
)
from .http_client import HttpxHTTPClient
from .provisioning import (
    assert_collection,
    clean,
    create_document,
    ensure_analyzer,
    ensure_arangosearch_view,
    ensure_collection,
    ensure_database,
    ensure_edge_collection,
    ensure_graph,
    ensure_search_alias_view,
    ensure_user,
    ensure_vertex_collection,
    skip_if_engine_type,
)

__all__ = [
    "ArangoTestClient",
    "AuthSpec",
    "BULK_SIZE",
    "DataFactory",
    "HttpxHTTPClient",
    "Interrupt",
    "VersionCheck",
    "VersionInfo",
    "assert_collection",
    "clean",
    "build_client",
    "create_client",
    "create_document",
    "create_superuser_token",
    "ensure_analyzer",
    "ensure_arangosearch_view",
    "ensure_collection",
    "ensure_database",
    "ensure_edge_collection",
    "ensure_graph",
    "ensure_search_alias_view",
    "ensure_user",
    "ensure_version",
    "ensure_vertex_collection",
    "get_test_mode",
    "parse_authentication",
    "retry",
    "retry_on_503",
    "send_bulks",
    "skip_below_version",
    "skip_between_version",
    "skip_cluster",
    "skip_if_engine_type",
    "skip_no_cluster",
    "skip_no_enterprise",
    "wait_until_cluster_healthy",
    "wait_until_endpoint_synchronized",
    "wait_until_server_available",
]
