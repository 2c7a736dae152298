"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are fixed lookup tables for diagram synthesis and folder aggregation.

For configurable values, see models.py (RunOptions, DiagramDefaults).
"""

from dataclasses import dataclass

# =============================================================================
# Folder Aggregation
# =============================================================================

ROOT_FOLDER = "src"
"""Sentinel folder for files that sit directly under the base path."""

DEFAULT_SRC_ONLY_EXCLUDES: tuple[str, ...] = (
    "tests",
    "test",
    "vendor",
    "var",
    "public",
    "bin",
    "config",
)
"""Exclusions applied when src_only is on and no explicit list is given."""

NON_SOURCE_SEGMENTS: tuple[str, ...] = ("/tests/", "/test/", "/vendor/")
"""Path segments that disqualify a file from the src_only heuristic."""

SAMPLE_FILES_SHOWN = 3
"""Sample file names listed per folder in the summary table."""

# =============================================================================
# Proportional Pie
# =============================================================================

MAX_PIE_SLICES = 8
"""Above this many folders, the tail is merged into one slice."""

OTHERS_LABEL = "Others"

# =============================================================================
# Coverage Range Buckets
# =============================================================================


@dataclass(frozen=True, slots=True)
class CoverageRange:
    """One fixed bucket of the per-folder file distribution.

    ``minimum``/``maximum`` are the integer bounds shown in labels.
    ``floor`` is the inclusive lower bound used for matching; ranges are
    tried in table order and the first one whose floor is reached wins,
    which keeps fractional percentages (89.5) inside a bucket.
    """

    name: str
    minimum: int
    maximum: int
    floor: float

    @property
    def label(self) -> str:
        if self.minimum == self.maximum:
            return f"{self.name} ({self.minimum}%)"
        return f"{self.name} ({self.minimum}-{self.maximum}%)"

    def contains(self, percent: float) -> bool:
        return percent >= self.floor


COVERAGE_RANGES: tuple[CoverageRange, ...] = (
    CoverageRange("Excellent", 90, 100, 90.0),
    CoverageRange("Good", 80, 89, 80.0),
    CoverageRange("Fair", 70, 79, 70.0),
    CoverageRange("Poor", 50, 69, 50.0),
    # Percentages carry two decimals, so 0.01 is the smallest non-zero value
    CoverageRange("Bad", 1, 49, 0.01),
    CoverageRange("Untested", 0, 0, 0.0),
)

# =============================================================================
# Tree Coverage Classes
# =============================================================================

TREE_CLASS_THRESHOLDS: tuple[tuple[str, float], ...] = (
    ("high", 80.0),
    ("medium", 60.0),
)
"""(class, inclusive floor) pairs; below them non-zero is "low", zero is "none"."""

# =============================================================================
# Format Detection
# =============================================================================

SUPPORTED_FORMATS = (
    "Clover XML (.xml), JSON (.json), PHP arrays (.php), "
    "and serialized PHPUnit data (.cov)"
)

EMBEDDED_CODE_SUFFIXES: tuple[str, ...] = (".php", ".cov")
"""Hint suffixes that mark the artifact as executable coverage snapshot code."""

INSPECT_HEAD_BYTES = 1000
"""Bytes read by artifact inspection."""
