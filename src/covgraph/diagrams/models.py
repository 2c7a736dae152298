"""Structured diagram descriptions.

Each chart layout is its own immutable type carrying only its payload;
DiagramDescription is the union of them. Rendering to a concrete markup
dialect is left to consumers of ``to_dict()``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class Slice:
    """One folder's share of the codebase."""

    label: str  # "<folder name> (<coverage>%)"
    folder: str
    coverage_percent: float
    total_lines: int
    covered_lines: int
    weight: float  # percent of all executable lines, one decimal


@dataclass(frozen=True, slots=True)
class ProportionalSlices:
    """Whole-project pie: slice size by line count, label by coverage."""

    kind: ClassVar[str] = "proportional"

    title: str
    slices: tuple[Slice, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "slices": [asdict(s) for s in self.slices],
        }


@dataclass(frozen=True, slots=True)
class RangeSlice:
    """Files of one coverage bucket."""

    label: str  # "<bucket label> (<n> files)"
    bucket: str
    file_count: int
    total_lines: int
    weight: float  # percent of the folder's executable lines, one decimal


@dataclass(frozen=True, slots=True)
class RangeBucketSlices:
    """Per-folder pie: files grouped into fixed coverage ranges."""

    kind: ClassVar[str] = "range-bucket"

    folder: str
    title: str
    slices: tuple[RangeSlice, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "folder": self.folder,
            "title": self.title,
            "slices": [asdict(s) for s in self.slices],
        }


@dataclass(frozen=True, slots=True)
class Bar:
    label: str
    folder: str
    value: float


@dataclass(frozen=True, slots=True)
class Bars:
    """Coverage per folder on a fixed 0-100 axis."""

    kind: ClassVar[str] = "bars"

    title: str
    bars: tuple[Bar, ...] = ()
    axis_label: str = "Coverage %"
    axis_min: float = 0.0
    axis_max: float = 100.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "axis": {"label": self.axis_label, "min": self.axis_min, "max": self.axis_max},
            "bars": [asdict(b) for b in self.bars],
        }


@dataclass(frozen=True, slots=True)
class TreeNode:
    id: str
    folder: str
    label: str
    coverage_percent: float
    file_count: int
    coverage_class: str  # high, medium, low, none


@dataclass(frozen=True, slots=True)
class TreeEdge:
    parent: str  # node id
    child: str  # node id


@dataclass(frozen=True, slots=True)
class TreeNodes:
    """Folder hierarchy with per-node coverage."""

    kind: ClassVar[str] = "tree"

    nodes: tuple[TreeNode, ...] = ()
    edges: tuple[TreeEdge, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [asdict(e) for e in self.edges],
        }


DiagramDescription = ProportionalSlices | RangeBucketSlices | Bars | TreeNodes
