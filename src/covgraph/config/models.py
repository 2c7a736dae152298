"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI flags)
2. Environment variables (COVGRAPH__SECTION__KEY)
3. Project YAML (.covgraph.yaml)
4. Global YAML (~/.config/covgraph/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVGRAPH__<SECTION>__<KEY>=<VALUE>

Examples:
    COVGRAPH__LOGGING__LEVEL=DEBUG
    COVGRAPH__DEFAULTS__MAX_DEPTH=3
    COVGRAPH__DEFAULTS__CHART_VARIANT=tree
"""

from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from covgraph.config.constants import DEFAULT_SRC_ONLY_EXCLUDES
from covgraph.core.errors import InvalidOptionsError

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVGRAPH__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. INFO reports each run; DEBUG traces format detection.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ChartVariant(str, Enum):
    """Diagram layouts the synthesizer can produce."""

    PROPORTIONAL = "proportional"
    RANGE_BUCKET = "range-bucket"
    BARS = "bars"
    TREE = "tree"


class RunOptions(BaseModel):
    """Typed options for one pipeline run.

    Immutable; build with ``RunOptions.build(...)`` to get
    InvalidOptionsError instead of a raw pydantic ValidationError.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_path: str = Field(
        default="src/",
        description="Prefix stripped from file paths before folder derivation.",
    )
    max_depth: int = Field(
        default=5,
        ge=1,
        description="Maximum folder depth kept in folder paths.",
    )
    min_coverage_percent: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Folders below this coverage are dropped before synthesis.",
    )
    exclude_paths: tuple[str, ...] = Field(
        default=(),
        description="Path prefixes or segments to exclude (e.g. tests, vendor).",
    )
    src_only: bool = Field(
        default=False,
        description="Keep only library/source files. Implies default exclusions "
        "when exclude_paths is empty.",
    )
    chart_variant: ChartVariant = Field(
        default=ChartVariant.BARS,
        description="Diagram layout: proportional, range-bucket, bars, tree.",
    )
    per_folder_output: bool = Field(
        default=False,
        description="Produce one range-bucket diagram per folder.",
    )
    source_extension: str = Field(
        default=".php",
        min_length=1,
        description="Extension recognized as source code by the src_only heuristic.",
    )

    @field_validator("exclude_paths")
    @classmethod
    def validate_exclude_paths(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        # An empty entry would prefix-match every path
        return tuple(p.rstrip("/") for p in v if p.strip("/"))

    @property
    def effective_exclude_paths(self) -> tuple[str, ...]:
        """Exclusions actually applied during aggregation."""
        if self.src_only and not self.exclude_paths:
            return DEFAULT_SRC_ONLY_EXCLUDES
        return self.exclude_paths

    @property
    def wants_folder_breakdown(self) -> bool:
        """Whether the run yields one range-bucket diagram per folder."""
        return self.per_folder_output or self.chart_variant is ChartVariant.RANGE_BUCKET

    @classmethod
    def build(cls, **values: Any) -> "RunOptions":
        """Validate and construct, raising InvalidOptionsError on failure."""
        try:
            return cls(**values)
        except ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(loc) for loc in err["loc"])
            raise InvalidOptionsError.invalid(field, err.get("input"), err["msg"]) from e


class DiagramDefaults(RunOptions):
    """Defaults for the diagram command.

    Env vars:
        COVGRAPH__DEFAULTS__BASE_PATH: Prefix stripped from file paths
        COVGRAPH__DEFAULTS__MAX_DEPTH: Maximum folder depth
        COVGRAPH__DEFAULTS__MIN_COVERAGE_PERCENT: Post-filter threshold
        COVGRAPH__DEFAULTS__CHART_VARIANT: Default diagram layout
        COVGRAPH__DEFAULTS__OUTPUT: Default output file
    """

    output: str = Field(
        default="coverage-diagram.json",
        description="Output file for the diagram description.",
    )

    def run_options(self, **overrides: Any) -> RunOptions:
        """Merge CLI overrides (None means 'not given') onto these defaults."""
        values = self.model_dump(exclude={"output"})
        values.update({k: v for k, v in overrides.items() if v is not None})
        return RunOptions.build(**values)


class CovGraphConfig(BaseModel):
    """Root configuration for covgraph.

    All settings can be configured via:
    1. Environment variables: COVGRAPH__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    defaults: DiagramDefaults = Field(default_factory=DiagramDefaults)
