"""Diagram synthesis from per-folder aggregates.

All variants degrade to an empty description on empty input.
"""

from __future__ import annotations

from collections.abc import Sequence

from covgraph.config.constants import (
    COVERAGE_RANGES,
    MAX_PIE_SLICES,
    OTHERS_LABEL,
    ROOT_FOLDER,
    TREE_CLASS_THRESHOLDS,
)
from covgraph.config.models import ChartVariant
from covgraph.coverage.aggregate import FileStats, FolderStats
from covgraph.diagrams.models import (
    Bar,
    Bars,
    DiagramDescription,
    ProportionalSlices,
    RangeBucketSlices,
    RangeSlice,
    Slice,
    TreeEdge,
    TreeNode,
    TreeNodes,
)

PIE_TITLE = "Code Coverage by Directory"
BARS_TITLE = "Code Coverage by Directory"


def _share(part: int, whole: int) -> float:
    return round(part / whole * 100, 1) if whole > 0 else 0.0


def _merge_overflow(folders: Sequence[FolderStats]) -> list[FolderStats]:
    """Keep the first MAX_PIE_SLICES - 1 folders and fold the rest into one."""
    if len(folders) <= MAX_PIE_SLICES:
        return list(folders)

    kept = list(folders[: MAX_PIE_SLICES - 1])
    rest = folders[MAX_PIE_SLICES - 1 :]
    rest_total = sum(f.total_lines for f in rest)
    if rest_total > 0:
        kept.append(
            FolderStats(
                path=OTHERS_LABEL,
                total_lines=rest_total,
                covered_lines=sum(f.covered_lines for f in rest),
                file_count=sum(f.file_count for f in rest),
            )
        )
    return kept


def proportional_slices(folders: Sequence[FolderStats]) -> ProportionalSlices:
    """Pie of the codebase by folder size, labeled with folder coverage."""
    project_total = sum(f.total_lines for f in folders)

    slices = tuple(
        Slice(
            label=f"{folder.name} ({folder.coverage_percent}%)",
            folder=folder.path,
            coverage_percent=folder.coverage_percent,
            total_lines=folder.total_lines,
            covered_lines=folder.covered_lines,
            weight=_share(folder.total_lines, project_total),
        )
        for folder in _merge_overflow(folders)
    )
    return ProportionalSlices(title=PIE_TITLE, slices=slices)


def range_bucket_slices(folder: str, files: Sequence[FileStats]) -> RangeBucketSlices:
    """Pie of one folder's files grouped by coverage range.

    Each file lands in the first range whose floor it reaches; empty
    ranges are omitted.
    """
    counts = [0] * len(COVERAGE_RANGES)
    lines = [0] * len(COVERAGE_RANGES)

    for file_stats in files:
        pct = file_stats.coverage_percent
        idx = next(i for i, r in enumerate(COVERAGE_RANGES) if r.contains(pct))
        counts[idx] += 1
        lines[idx] += file_stats.total_lines

    folder_total = sum(lines)
    slices = tuple(
        RangeSlice(
            label=f"{rng.label} ({counts[i]} files)",
            bucket=rng.name,
            file_count=counts[i],
            total_lines=lines[i],
            weight=_share(lines[i], folder_total),
        )
        for i, rng in enumerate(COVERAGE_RANGES)
        if counts[i] > 0
    )
    return RangeBucketSlices(
        folder=folder,
        title=f"{folder} - File Coverage Distribution",
        slices=slices,
    )


def bars(folders: Sequence[FolderStats]) -> Bars:
    """One bar per folder, in aggregate order."""
    return Bars(
        title=BARS_TITLE,
        bars=tuple(Bar(label=f.name, folder=f.path, value=f.coverage_percent) for f in folders),
    )


def coverage_class(percent: float) -> str:
    for name, floor in TREE_CLASS_THRESHOLDS:
        if percent >= floor:
            return name
    return "low" if percent > 0 else "none"


def tree_nodes(folders: Sequence[FolderStats]) -> TreeNodes:
    """Folder hierarchy.

    A folder links to its parent folder when that parent is itself a node;
    top-level folders link to the ROOT_FOLDER node when it exists. Each
    parent/child pair is emitted once.
    """
    node_ids = {f.path: f"node{i}" for i, f in enumerate(folders, start=1)}

    nodes = tuple(
        TreeNode(
            id=node_ids[f.path],
            folder=f.path,
            label=f"{f.name} {f.coverage_percent}% ({f.file_count} files)",
            coverage_percent=f.coverage_percent,
            file_count=f.file_count,
            coverage_class=coverage_class(f.coverage_percent),
        )
        for f in folders
    )

    edges: list[TreeEdge] = []
    seen: set[tuple[str, str]] = set()
    for folder in node_ids:
        if folder == ROOT_FOLDER:
            continue
        parent = folder.rsplit("/", 1)[0] if "/" in folder else ROOT_FOLDER
        if parent not in node_ids or (parent, folder) in seen:
            continue
        seen.add((parent, folder))
        edges.append(TreeEdge(parent=node_ids[parent], child=node_ids[folder]))

    return TreeNodes(nodes=nodes, edges=tuple(edges))


def synthesize(
    folders: Sequence[FolderStats],
    variant: ChartVariant,
    *,
    folder: str | None = None,
    files: Sequence[FileStats] = (),
) -> DiagramDescription:
    """Build the requested diagram.

    Args:
        folders: Aggregated folders in display order.
        variant: Diagram layout.
        folder: Target folder (range-bucket only).
        files: Per-file stats of the target folder (range-bucket only).
    """
    if variant is ChartVariant.PROPORTIONAL:
        return proportional_slices(folders)
    if variant is ChartVariant.RANGE_BUCKET:
        return range_bucket_slices(folder or "", files)
    if variant is ChartVariant.BARS:
        return bars(folders)
    return tree_nodes(folders)
