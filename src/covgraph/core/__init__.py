"""Core module exports."""

from covgraph.core.errors import (
    ConfigError,
    CovGraphError,
    ErrorCode,
    InputError,
    InvalidOptionsError,
    UnsupportedFormatError,
)
from covgraph.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "CovGraphError",
    "ErrorCode",
    "InputError",
    "InvalidOptionsError",
    "UnsupportedFormatError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
