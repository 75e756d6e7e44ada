"""
Configuration settings for the ArangoDB integration test harness
Everything is read from the environment (optionally seeded from a .env file)
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

TEST_MODE_SINGLE = "single"
TEST_MODE_CLUSTER = "cluster"
TEST_MODE_RESILIENT_SINGLE = "resilientsingle"
TEST_MODES = (TEST_MODE_SINGLE, TEST_MODE_CLUSTER, TEST_MODE_RESILIENT_SINGLE)

CONTENT_TYPE_JSON = "json"
CONTENT_TYPE_VPACK = "vpack"

CONNECTION_HTTP = "http"
CONNECTION_VST = "vst"

# TEST_AUTH profiles, used when TEST_AUTHENTICATION is not given explicitly
AUTH_PROFILES = {
    "none": "",
    "rootpw": "basic:root:rootpw",
    "jwt": "jwt:root:rootpw",
}


def get_int_from_env(env_key: str, default_value: int) -> int:
    """Parse an int from the environment, falling back to the default on empty or bad values"""
    value = os.getenv(env_key, "").strip()
    if value:
        try:
            return int(value)
        except ValueError:
            logger.debug(f"Ignoring non-integer value for {env_key}: {value!r}")
    return default_value


def get_bool_from_env(env_key: str, default_value: bool = False) -> bool:
    value = os.getenv(env_key, "").strip().lower()
    if not value:
        return default_value
    return value in ("1", "true", "yes", "on")


def _split_endpoints(raw: str) -> List[str]:
    return [ep.strip() for ep in raw.split(",") if ep.strip()]


@dataclass
class TestConfig:
    """Connection and workload settings for the integration suites"""

    __test__ = False

    endpoints: List[str] = field(default_factory=lambda: _split_endpoints(os.getenv("TEST_ENDPOINTS", "")))
    mode: str = field(default_factory=lambda: os.getenv("TEST_MODE", TEST_MODE_SINGLE).strip() or TEST_MODE_SINGLE)

    # Authentication
    authentication: str = field(default_factory=lambda: os.getenv("TEST_AUTHENTICATION", "").strip())
    auth_profile: str = field(default_factory=lambda: os.getenv("TEST_AUTH", "none").strip() or "none")

    # Transport
    ssl: str = field(default_factory=lambda: os.getenv("TEST_SSL", "").strip())
    content_type: str = field(default_factory=lambda: os.getenv("TEST_CONTENT_TYPE", CONTENT_TYPE_JSON).strip() or CONTENT_TYPE_JSON)
    connection: str = field(default_factory=lambda: os.getenv("TEST_CONNECTION", CONNECTION_HTTP).strip() or CONNECTION_HTTP)
    request_timeout: int = field(default_factory=lambda: get_int_from_env("TEST_REQUEST_TIMEOUT", 60))
    wait_timeout: int = field(default_factory=lambda: get_int_from_env("TEST_WAIT_TIMEOUT", 60))
    retry_503: int = field(default_factory=lambda: get_int_from_env("TEST_RETRY_503", 3))
    log_requests: bool = field(default_factory=lambda: get_bool_from_env("TEST_LOG_REQUESTS"))
    log_level: str = field(default_factory=lambda: os.getenv("TEST_LOG_LEVEL", "INFO").upper())

    # Test data
    test_data_prefix: str = field(default_factory=lambda: os.getenv("TEST_DATA_PREFIX", "arangotest"))

    # Concurrency Control
    creators: int = field(default_factory=lambda: get_int_from_env("NOCREATORS", 25))
    readers: int = field(default_factory=lambda: get_int_from_env("NOREADERS", 50))
    documents_per_creator: int = field(default_factory=lambda: get_int_from_env("NODOCUMENTS", 1000))
    max_concurrent_tests: int = field(default_factory=lambda: get_int_from_env("MAX_CONCURRENT_TESTS", 5))

    @property
    def effective_authentication(self) -> str:
        """Explicit TEST_AUTHENTICATION wins over the TEST_AUTH profile"""
        if self.authentication:
            return self.authentication
        return AUTH_PROFILES.get(self.auth_profile, "")

    @property
    def ssl_enabled(self) -> bool:
        return self.ssl.lower() in ("auto", "true", "1", "yes")

    @property
    def resolved_endpoints(self) -> List[str]:
        """Endpoints with the scheme adjusted for TEST_SSL"""
        if not self.ssl_enabled:
            return list(self.endpoints)
        resolved = []
        for endpoint in self.endpoints:
            if endpoint.startswith("http://"):
                endpoint = "https://" + endpoint[len("http://"):]
            elif "://" not in endpoint:
                endpoint = "https://" + endpoint
            resolved.append(endpoint)
        return resolved

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.mode not in TEST_MODES:
            errors.append(f"Unknown TEST_MODE '{self.mode}', expected one of {', '.join(TEST_MODES)}")

        if not self.authentication and self.auth_profile not in AUTH_PROFILES:
            errors.append(f"Unknown TEST_AUTH profile '{self.auth_profile}'")

        if self.content_type not in (CONTENT_TYPE_JSON, CONTENT_TYPE_VPACK):
            errors.append(f"Unknown content type '{self.content_type}'")

        if self.connection not in (CONNECTION_HTTP, CONNECTION_VST):
            errors.append(f"Unknown connection type '{self.connection}'")

        auth = self.effective_authentication
        if auth:
            parts = auth.split(":")
            if parts[0] in ("basic", "jwt") and len(parts) != 3:
                errors.append(f"Expected username & password for {parts[0]} authentication")
            elif parts[0] == "super" and len(parts) != 2:
                errors.append("Expected 'super' and jwt secret")
            elif parts[0] not in ("basic", "jwt", "super"):
                errors.append(f"Unknown authentication: '{parts[0]}'")

        if self.request_timeout <= 0:
            errors.append("TEST_REQUEST_TIMEOUT must be positive")

        return errors


def get_config() -> TestConfig:
    """Get validated test configuration"""
    config = TestConfig()
    errors = config.validate()

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    return config


def configure_logging(config: Optional[TestConfig] = None) -> None:
    """Configure root logging for runners and the pytest session"""
    level_name = config.log_level if config else os.getenv("TEST_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
