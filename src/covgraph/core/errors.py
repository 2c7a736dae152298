"""covgraph error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Input (artifact acquisition, format detection, run options)
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Input (3xxx)
    INPUT_FILE_NOT_FOUND = 3001
    UNSUPPORTED_FORMAT = 3002
    INVALID_OPTIONS = 3003


# Not frozen: raise/re-raise machinery (contextlib, asyncio) assigns __traceback__.
# eq=False keeps identity equality and hashing, like any other exception.
@dataclass(slots=True, eq=False)
class CovGraphError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'UNSUPPORTED_FORMAT')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(CovGraphError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class InputError(CovGraphError):
    """Coverage artifact could not be acquired.

    This is the file-not-found error of the pipeline. It does not derive
    from the builtin FileNotFoundError (OSError's instance layout can't be
    combined with slotted fields); catch InputError or CovGraphError and
    check ``code == ErrorCode.INPUT_FILE_NOT_FOUND``.
    """

    @classmethod
    def file_not_found(cls, path: str) -> "InputError":
        return cls(
            code=ErrorCode.INPUT_FILE_NOT_FOUND,
            message=f"Coverage file not found: {path}",
            details={"path": path},
        )


class UnsupportedFormatError(CovGraphError):
    """No normalizer strategy accepted the artifact."""

    @classmethod
    def exhausted(
        cls, hint: str, attempted: Sequence[str], supported: str
    ) -> "UnsupportedFormatError":
        return cls(
            code=ErrorCode.UNSUPPORTED_FORMAT,
            message=f"Unable to parse coverage file format. Supported formats: {supported}",
            details={"hint": hint, "attempted": list(attempted)},
        )


class InvalidOptionsError(CovGraphError):
    """Run options failed validation."""

    @classmethod
    def invalid(cls, field: str, value: Any, reason: str) -> "InvalidOptionsError":
        return cls(
            code=ErrorCode.INVALID_OPTIONS,
            message=f"Invalid option '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )
