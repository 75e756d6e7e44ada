from .settings import (
    CONNECTION_HTTP,
    CONNECTION_VST,
    CONTENT_TYPE_JSON,
    CONTENT_TYPE_VPACK,
    TEST_MODE_CLUSTER,
    TEST_MODE_RESILIENT_SINGLE,
    TEST_MODE_SINGLE,
    TEST_MODES,
    TestConfig,
    configure_logging,
    get_config,
    get_int_from_env,
)

__all__ = [
    "CONNECTION_HTTP",
    "CONNECTION_VST",
    "CONTENT_TYPE_JSON",
    "CONTENT_TYPE_VPACK",
    "TEST_MODE_CLUSTER",
    "TEST_MODE_RESILIENT_SINGLE",
    "TEST_MODE_SINGLE",
    "TEST_MODES",
    "TestConfig",
    "configure_logging",
    "get_config",
    "get_int_from_env",
]
