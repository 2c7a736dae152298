"""Coverage ingestion and per-folder aggregation.

This package provides:
- Format detection and normalization (Clover XML, JSON, PHP snapshot
  scripts, PHP-serialized data) into one CoverageMap
- Per-folder aggregation with filtering and depth limits

Usage:
    from covgraph.coverage import normalize, aggregate_folders

    coverage = normalize(Path("coverage.xml").read_bytes(), "coverage.xml")
    folders = aggregate_folders(coverage, RunOptions())
"""

from covgraph.coverage.aggregate import (
    FileStats,
    FolderStats,
    aggregate_folders,
    apply_min_coverage,
    files_in_folder,
)
from covgraph.coverage.models import (
    CoverageMap,
    CoverageParseError,
    FileCoverage,
    LineMap,
)
from covgraph.coverage.parsers import PARSER_REGISTRY, normalize

__all__ = [
    # Models
    "CoverageMap",
    "CoverageParseError",
    "FileCoverage",
    "LineMap",
    # Parsers
    "PARSER_REGISTRY",
    "normalize",
    # Aggregation
    "FileStats",
    "FolderStats",
    "aggregate_folders",
    "apply_min_coverage",
    "files_in_folder",
]
