"""Pipeline orchestration: artifact bytes to diagram descriptions.

normalize -> aggregate_folders -> apply_min_coverage -> synthesize

Every run is pure and in-memory. The only I/O lives in load_artifact and
inspect_artifact, which callers use to obtain the bytes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from covgraph.config.constants import INSPECT_HEAD_BYTES
from covgraph.config.models import RunOptions
from covgraph.core.errors import InputError
from covgraph.core.logging import clear_run_id, get_logger, set_run_id
from covgraph.coverage.aggregate import (
    FolderStats,
    aggregate_folders,
    apply_min_coverage,
    files_in_folder,
    percent,
)
from covgraph.coverage.models import CoverageMap
from covgraph.coverage.parsers import normalize
from covgraph.diagrams.models import DiagramDescription, RangeBucketSlices
from covgraph.diagrams.synthesize import range_bucket_slices, synthesize

log = get_logger("pipeline")

_PREVIEW_CHARS = 50


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Outcome of one run: ordered folder stats plus the diagram(s).

    ``diagrams`` holds a single description, or one RangeBucketSlices per
    folder when a folder breakdown was requested. Both may be empty.
    """

    source_format: str
    files_parsed: int
    folders: tuple[FolderStats, ...]
    diagrams: tuple[DiagramDescription, ...]

    @property
    def total_lines(self) -> int:
        return sum(f.total_lines for f in self.folders)

    @property
    def covered_lines(self) -> int:
        return sum(f.covered_lines for f in self.folders)

    @property
    def file_count(self) -> int:
        return sum(f.file_count for f in self.folders)

    @property
    def coverage_percent(self) -> float:
        return percent(self.covered_lines, self.total_lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_format": self.source_format,
            "files_parsed": self.files_parsed,
            "overall": {
                "coverage_percent": self.coverage_percent,
                "covered_lines": self.covered_lines,
                "total_lines": self.total_lines,
                "file_count": self.file_count,
            },
            "folders": [
                {
                    "path": f.path,
                    "coverage_percent": f.coverage_percent,
                    "covered_lines": f.covered_lines,
                    "total_lines": f.total_lines,
                    "file_count": f.file_count,
                    "sample_file_names": list(f.sample_file_names),
                }
                for f in self.folders
            ],
            "diagrams": [d.to_dict() for d in self.diagrams],
        }


@dataclass(frozen=True, slots=True)
class ArtifactInfo:
    """What an artifact looks like before any parser touches it."""

    path: str
    size: int
    extension: str
    preview: str
    looks_like_xml: bool
    looks_like_json: bool
    looks_like_code: bool
    looks_like_serialized: bool

    def rows(self) -> list[tuple[str, str]]:
        """(property, value) pairs for display."""

        def yes_no(flag: bool) -> str:
            return "Yes" if flag else "No"

        return [
            ("File", self.path),
            ("Size", f"{self.size} bytes"),
            ("Extension", self.extension or "(none)"),
            ("Starts with", self.preview + "..."),
            ("Contains XML?", yes_no(self.looks_like_xml)),
            ("Contains JSON?", yes_no(self.looks_like_json)),
            ("Contains PHP?", yes_no(self.looks_like_code)),
            ("Contains serialized?", yes_no(self.looks_like_serialized)),
        ]


def load_artifact(path: Path) -> bytes:
    """Read a coverage artifact.

    Raises:
        InputError: If the file does not exist.
    """
    if not path.is_file():
        raise InputError.file_not_found(str(path))
    return path.read_bytes()


def inspect_artifact(path: Path) -> ArtifactInfo:
    """Sniff an artifact's head without parsing it."""
    data = load_artifact(path)
    head = data[:INSPECT_HEAD_BYTES]
    stripped = head.strip()

    return ArtifactInfo(
        path=str(path),
        size=len(data),
        extension=path.suffix.lstrip("."),
        preview=data[:_PREVIEW_CHARS].decode("utf-8", errors="replace"),
        looks_like_xml=b"<?xml" in head,
        looks_like_json=stripped.startswith((b"{", b"[")),
        looks_like_code=b"<?php" in head,
        looks_like_serialized=b"a:" in head or b"O:" in head,
    )


def _folder_breakdown(
    folders: list[FolderStats], coverage: CoverageMap, options: RunOptions
) -> list[RangeBucketSlices]:
    diagrams = []
    for folder in folders:
        files = files_in_folder(coverage, folder.path, options)
        if not files:
            continue
        diagrams.append(range_bucket_slices(folder.path, files))
    return diagrams


def run_pipeline(data: bytes, filename_hint: str, options: RunOptions) -> PipelineResult:
    """Run the full pipeline over raw artifact bytes.

    Args:
        data: Raw artifact bytes.
        filename_hint: Name or extension the bytes came from.
        options: Validated run options.

    Returns:
        PipelineResult. No surviving folders is not an error; the result
        then carries empty folders and empty diagram payloads.

    Raises:
        UnsupportedFormatError: If no parser accepts the input.
    """
    set_run_id()
    try:
        log.info(
            "run_started",
            hint=filename_hint,
            bytes=len(data),
            variant=options.chart_variant.value,
        )

        coverage = normalize(data, filename_hint)
        folders = aggregate_folders(coverage, options)
        aggregated = len(folders)
        folders = apply_min_coverage(folders, options.min_coverage_percent)

        diagrams: Sequence[DiagramDescription]
        if options.wants_folder_breakdown:
            diagrams = _folder_breakdown(folders, coverage, options)
        else:
            diagrams = [synthesize(folders, options.chart_variant)]

        log.info(
            "run_finished",
            format=coverage.source_format,
            files=len(coverage),
            folders=len(folders),
            below_threshold=aggregated - len(folders),
            diagrams=len(diagrams),
        )
        return PipelineResult(
            source_format=coverage.source_format,
            files_parsed=len(coverage),
            folders=tuple(folders),
            diagrams=tuple(diagrams),
        )
    finally:
        clear_run_id()


def run_file(path: Path, options: RunOptions) -> PipelineResult:
    """Load an artifact from disk and run the pipeline on it."""
    return run_pipeline(load_artifact(path), path.name, options)
