"""Config module exports."""

from covgraph.config.loader import load_config
from covgraph.config.models import (
    ChartVariant,
    CovGraphConfig,
    DiagramDefaults,
    LoggingConfig,
    RunOptions,
)

__all__ = [
    "load_config",
    "ChartVariant",
    "CovGraphConfig",
    "DiagramDefaults",
    "LoggingConfig",
    "RunOptions",
]
