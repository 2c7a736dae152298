"""Diagram synthesis.

This package turns per-folder aggregates into structured, renderer-neutral
diagram descriptions (proportional pie, range-bucket pie, bars, tree).
"""

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
from covgraph.diagrams.synthesize import (
    bars,
    coverage_class,
    proportional_slices,
    range_bucket_slices,
    synthesize,
    tree_nodes,
)

__all__ = [
    # Models
    "Bar",
    "Bars",
    "DiagramDescription",
    "ProportionalSlices",
    "RangeBucketSlices",
    "RangeSlice",
    "Slice",
    "TreeEdge",
    "TreeNode",
    "TreeNodes",
    # Synthesis
    "bars",
    "coverage_class",
    "proportional_slices",
    "range_bucket_slices",
    "synthesize",
    "tree_nodes",
]
