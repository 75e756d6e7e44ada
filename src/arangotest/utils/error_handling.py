"""
Error classification and description for driver errors
Predicates mirror the server's HTTP codes and errorNum values so tests can
assert on the kind of failure instead of on message text.
"""

import json
import logging
from typing import Any, Dict, Iterator, Optional, Union

import httpx
import requests
from arango.exceptions import ArangoClientError, ArangoServerError

logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_REQUEST_TIMEOUT = 408
HTTP_CONFLICT = 409
HTTP_PRECONDITION_FAILED = 412
HTTP_SERVICE_UNAVAILABLE = 503
HTTP_GATEWAY_TIMEOUT = 504

# ArangoDB errorNum values
ERR_ARANGO_READ_ONLY = 1004
ERR_ARANGO_CORRUPTED_DATAFILE = 1100
ERR_ARANGO_ILLEGAL_PARAMETER_FILE = 1101
ERR_ARANGO_CORRUPTED_COLLECTION = 1102
ERR_ARANGO_FILESYSTEM_FULL = 1104
ERR_ARANGO_DATADIR_LOCKED = 1107
ERR_ARANGO_CONFLICT = 1200
ERR_ARANGO_DOCUMENT_NOT_FOUND = 1202
ERR_ARANGO_DATA_SOURCE_NOT_FOUND = 1203
ERR_ARANGO_ILLEGAL_NAME = 1208
ERR_ARANGO_UNIQUE_CONSTRAINT_VIOLATED = 1210
ERR_ARANGO_DATABASE_NOT_FOUND = 1228
ERR_ARANGO_DATABASE_NAME_INVALID = 1229
ERR_VALIDATION_FAILED = 1620
ERR_CLUSTER_WRITE_CONCERN_NOT_FULFILLED = 1429
ERR_CLUSTER_LEADERSHIP_CHALLENGE_ONGOING = 1495
ERR_CLUSTER_NOT_LEADER = 1496
ERR_USER_DUPLICATE = 1702


class InvalidArgumentError(Exception):
    """Raised by the harness when a caller passes an unusable argument"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ErrorHandlingConfig:
    """Centralized configuration for error description and request logging"""

    # Security settings
    SANITIZE_SENSITIVE_FIELDS = True
    SENSITIVE_FIELD_PATTERNS = [
        'password', 'passwd', 'token', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'jwt'
    ]

    # Logging settings
    MAX_BODY_LOG_SIZE = 128

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        """Check if a field contains sensitive data"""
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively sanitize sensitive data from logs"""
        if not cls.SANITIZE_SENSITIVE_FIELDS:
            return data

        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(str(key)) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_BODY_LOG_SIZE:
            return data[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        else:
            return data


def iter_causes(err: Optional[BaseException]) -> Iterator[BaseException]:
    """Yield the error followed by its explicit or implicit causes"""
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        yield err
        err = err.__cause__ or err.__context__


def root_cause(err: BaseException) -> BaseException:
    cause = err
    for cause in iter_causes(err):
        pass
    return cause


def as_arango_error(err: Optional[BaseException]) -> Optional[ArangoServerError]:
    """Return the first server error in the cause chain, if any"""
    for cause in iter_causes(err):
        if isinstance(cause, ArangoServerError):
            return cause
    return None


def is_arango_error_with_code(err: Optional[BaseException], code: int) -> bool:
    """True when the error is (or is caused by) a server error with the given HTTP code"""
    arango_error = as_arango_error(err)
    return arango_error is not None and arango_error.http_code == code


def is_arango_error_with_error_num(err: Optional[BaseException], *error_nums: int) -> bool:
    """True when the error is (or is caused by) a server error with one of the given errorNum values"""
    arango_error = as_arango_error(err)
    return arango_error is not None and arango_error.error_code in error_nums


def is_invalid_request(err: Optional[BaseException]) -> bool:
    return is_arango_error_with_code(err, HTTP_BAD_REQUEST)


def is_unauthorized(err: Optional[BaseException]) -> bool:
    return is_arango_error_with_code(err, HTTP_UNAUTHORIZED)


def is_forbidden(err: Optional[BaseException]) -> bool:
    return is_arango_error_with_code(err, HTTP_FORBIDDEN)


def is_not_found(err: Optional[BaseException]) -> bool:
    return (is_arango_error_with_code(err, HTTP_NOT_FOUND) or
            is_arango_error_with_error_num(err, ERR_ARANGO_DOCUMENT_NOT_FOUND, ERR_ARANGO_DATA_SOURCE_NOT_FOUND))


def is_conflict(err: Optional[BaseException]) -> bool:
    return is_arango_error_with_code(err, HTTP_CONFLICT) or is_arango_error_with_error_num(err, ERR_USER_DUPLICATE)


def is_precondition_failed(err: Optional[BaseException]) -> bool:
    return (is_arango_error_with_code(err, HTTP_PRECONDITION_FAILED) or
            is_arango_error_with_error_num(err, ERR_ARANGO_CONFLICT, ERR_ARANGO_UNIQUE_CONSTRAINT_VIOLATED))


def is_validation_failed(err: Optional[BaseException]) -> bool:
    """True when a document was rejected by the collection schema"""
    return is_arango_error_with_error_num(err, ERR_VALIDATION_FAILED)


def is_service_unavailable(err: Optional[BaseException]) -> bool:
    return is_arango_error_with_code(err, HTTP_SERVICE_UNAVAILABLE)


def is_no_leader(err: Optional[BaseException]) -> bool:
    return is_service_unavailable(err) and is_arango_error_with_error_num(err, ERR_CLUSTER_NOT_LEADER)


def is_no_leader_or_ongoing(err: Optional[BaseException]) -> bool:
    return (is_service_unavailable(err) and
            is_arango_error_with_error_num(err, ERR_CLUSTER_LEADERSHIP_CHALLENGE_ONGOING, ERR_CLUSTER_NOT_LEADER))


def is_external_storage_error(err: Optional[BaseException]) -> bool:
    """True when the server reports a problem reading or writing its storage"""
    return is_arango_error_with_error_num(
        err,
        ERR_ARANGO_CORRUPTED_DATAFILE,
        ERR_ARANGO_ILLEGAL_PARAMETER_FILE,
        ERR_ARANGO_CORRUPTED_COLLECTION,
        ERR_ARANGO_FILESYSTEM_FULL,
        ERR_ARANGO_DATADIR_LOCKED,
    )


def is_invalid_argument(err: Optional[BaseException]) -> bool:
    """True for harness argument errors and client-side driver errors"""
    return any(isinstance(cause, (InvalidArgumentError, ArangoClientError)) for cause in iter_causes(err))


def is_response_error(err: Optional[BaseException]) -> bool:
    """True when the request never produced a server response (network failure)"""
    # ConnectionAbortedError: python-arango ran out of hosts to try
    transport_errors = (httpx.TransportError, requests.ConnectionError, ConnectionAbortedError)
    return any(isinstance(cause, transport_errors) for cause in iter_causes(err))


def is_timeout(err: Optional[BaseException]) -> bool:
    if is_arango_error_with_code(err, HTTP_REQUEST_TIMEOUT) or is_arango_error_with_code(err, HTTP_GATEWAY_TIMEOUT):
        return True
    return any(isinstance(cause, (httpx.TimeoutException, TimeoutError)) for cause in iter_causes(err))


def _describe_single(err: BaseException) -> str:
    if isinstance(err, ArangoServerError):
        return f"HTTP {err.http_code}, errorNum {err.error_code}: {err.error_message}"
    try:
        return json.dumps({"type": type(err).__name__, "message": str(err)})
    except (TypeError, ValueError):
        return repr(err)


def describe(err: Optional[BaseException]) -> str:
    """Return a one-line description of an error, including its root cause"""
    if err is None:
        return "nil"
    cause = root_cause(err)
    msg = _describe_single(cause)
    if cause is not err and str(cause) != str(err):
        return f"{err} caused by {cause} ({msg})"
    return f"{err} ({msg})"


def format_raw_response(raw: bytes) -> str:
    """Render a raw body for diagnostics: JSON looking payloads as text, anything else as hex"""
    if len(raw) < 2:
        return raw.hex()
    first, last = raw[:1], raw[-1:]
    if (first == b"{" and last == b"}") or (first == b"[" and last == b"]"):
        return raw.decode("utf-8", errors="replace")
    return raw.hex()
