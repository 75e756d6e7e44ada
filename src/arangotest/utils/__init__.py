from .error_handling import (
    InvalidArgumentError,
    describe,
    is_conflict,
    is_invalid_argument,
    is_not_found,
    is_precondition_failed,
)
from .version import Version

__all__ = [
    "InvalidArgumentError",
    "Version",
    "describe",
    "is_conflict",
    "is_invalid_argument",
    "is_not_found",
    "is_precondition_failed",
]
