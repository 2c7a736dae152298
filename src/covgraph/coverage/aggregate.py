"""Per-folder coverage aggregation.

Files are filtered (src_only heuristic, exclusions), stripped of the base
path, assigned to a depth-capped folder, and summed. The result is sorted
by coverage descending; folders with equal coverage keep the order in
which they were first seen.

Output of aggregate_folders:
[
    FolderStats(path="Domain", total_lines=2, covered_lines=1, file_count=1,
                sample_file_names=("User.php",)),   # coverage_percent == 50.0
    ...
]
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from covgraph.config.constants import NON_SOURCE_SEGMENTS, ROOT_FOLDER
from covgraph.config.models import RunOptions
from covgraph.core.logging import get_logger
from covgraph.coverage.models import CoverageMap, FileCoverage

log = get_logger("coverage.aggregate")


def percent(covered: int, total: int) -> float:
    """Coverage percentage rounded to two decimals; 0 when nothing is executable."""
    return round(covered / total * 100, 2) if total > 0 else 0.0


@dataclass(frozen=True, slots=True)
class FolderStats:
    """Aggregate coverage of all files sharing a depth-capped folder."""

    path: str
    total_lines: int
    covered_lines: int
    file_count: int
    sample_file_names: tuple[str, ...] = ()

    @property
    def coverage_percent(self) -> float:
        return percent(self.covered_lines, self.total_lines)

    @property
    def name(self) -> str:
        """Last path segment, used in diagram labels."""
        return posixpath.basename(self.path)


@dataclass(frozen=True, slots=True)
class FileStats:
    """Coverage of a single file within a folder breakdown."""

    name: str  # base name without the source extension
    path: str  # as recorded in the artifact
    total_lines: int
    covered_lines: int

    @property
    def coverage_percent(self) -> float:
        return percent(self.covered_lines, self.total_lines)


@dataclass(slots=True)
class _FolderAccumulator:
    total_lines: int = 0
    covered_lines: int = 0
    file_names: list[str] = field(default_factory=list)

    def add(self, total: int, covered: int, name: str) -> None:
        self.total_lines += total
        self.covered_lines += covered
        self.file_names.append(name)


def is_source_file(path: str, source_extension: str) -> bool:
    """Heuristic: under a src/ segment, or a source file outside tests and vendor."""
    if path.startswith(("src/", "/src/")) or "/src/" in path:
        return True
    return path.endswith(source_extension) and not any(seg in path for seg in NON_SOURCE_SEGMENTS)


def is_excluded(path: str, exclude_paths: Iterable[str]) -> bool:
    """Whether path starts with, or contains as a segment, any exclusion."""
    return any(path.startswith(ex) or f"/{ex}/" in path for ex in exclude_paths)


def strip_base_path(path: str, base_path: str) -> str | None:
    """Remove base_path; None when nothing assignable to a folder remains."""
    if base_path and path.startswith(base_path):
        path = path[len(base_path) :]
    if not path or path == "/":
        return None
    return path


def _folder_segments(relative_path: str) -> list[str]:
    return [seg for seg in posixpath.dirname(relative_path).split("/") if seg not in ("", ".")]


def folder_for(relative_path: str, max_depth: int | None = None) -> str:
    """Depth-capped folder of a base-stripped path; ROOT_FOLDER at top level."""
    segments = _folder_segments(relative_path)
    if max_depth is not None:
        segments = segments[:max_depth]
    return "/".join(segments) if segments else ROOT_FOLDER


def _relative_paths(coverage: CoverageMap, options: RunOptions) -> Iterable[tuple[str, FileCoverage]]:
    """Yield (base-stripped path, file) for files that pass the filters."""
    excludes = options.effective_exclude_paths
    skipped = 0

    for path, file_cov in coverage.files.items():
        if options.src_only and not is_source_file(path, options.source_extension):
            skipped += 1
            continue
        if excludes and is_excluded(path, excludes):
            skipped += 1
            continue
        relative = strip_base_path(path, options.base_path)
        if relative is None:
            skipped += 1
            continue
        yield relative, file_cov

    if skipped:
        log.debug("files_filtered", skipped=skipped, total=len(coverage.files))


def aggregate_folders(coverage: CoverageMap, options: RunOptions) -> list[FolderStats]:
    """Fold per-file coverage into per-folder statistics.

    Args:
        coverage: Normalized coverage artifact.
        options: Run options (base_path, max_depth, exclude_paths, src_only).

    Returns:
        FolderStats sorted by coverage percent, highest first (stable).
        Files with no executable lines never create a folder.
    """
    folders: dict[str, _FolderAccumulator] = {}

    for relative, file_cov in _relative_paths(coverage, options):
        total = file_cov.executable_lines
        if total == 0:
            continue
        folder = folder_for(relative, options.max_depth)
        folders.setdefault(folder, _FolderAccumulator()).add(
            total, file_cov.covered_lines, posixpath.basename(file_cov.path)
        )

    result = [
        FolderStats(
            path=folder,
            total_lines=acc.total_lines,
            covered_lines=acc.covered_lines,
            file_count=len(acc.file_names),
            sample_file_names=tuple(acc.file_names),
        )
        for folder, acc in folders.items()
    ]
    # sorted() is stable with reverse=True: ties keep discovery order
    return sorted(result, key=lambda f: f.coverage_percent, reverse=True)


def apply_min_coverage(folders: Sequence[FolderStats], threshold: float) -> list[FolderStats]:
    """Drop folders strictly below the coverage threshold, keeping order."""
    return [f for f in folders if f.coverage_percent >= threshold]


def files_in_folder(
    coverage: CoverageMap, folder: str, options: RunOptions
) -> list[FileStats]:
    """Per-file stats for every file in folder or beneath it.

    Membership uses each file's full (uncapped) folder, so a depth-capped
    folder collects the files of all its subfolders.
    """
    files: list[FileStats] = []
    prefix = folder + "/"

    for relative, file_cov in _relative_paths(coverage, options):
        current = folder_for(relative)
        if current != folder and not current.startswith(prefix):
            continue
        total = file_cov.executable_lines
        if total == 0:
            continue
        name = posixpath.basename(file_cov.path)
        if name.endswith(options.source_extension) and name != options.source_extension:
            name = name[: -len(options.source_extension)]
        files.append(
            FileStats(
                name=name,
                path=file_cov.path,
                total_lines=total,
                covered_lines=file_cov.covered_lines,
            )
        )

    return sorted(files, key=lambda f: f.coverage_percent, reverse=True)
