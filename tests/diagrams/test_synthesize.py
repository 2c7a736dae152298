"""Tests for diagram synthesis."""

from __future__ import annotations

import pytest

from covgraph.config.models import ChartVariant
from covgraph.coverage.aggregate import FileStats, FolderStats
from covgraph.diagrams import (
    Bars,
    ProportionalSlices,
    RangeBucketSlices,
    TreeNodes,
    bars,
    coverage_class,
    proportional_slices,
    range_bucket_slices,
    synthesize,
    tree_nodes,
)


def _folder(path: str, covered: int, total: int, files: int = 1) -> FolderStats:
    return FolderStats(path=path, total_lines=total, covered_lines=covered, file_count=files)


def _file(name: str, covered: int, total: int) -> FileStats:
    return FileStats(name=name, path=f"src/X/{name}.php", total_lines=total, covered_lines=covered)


@pytest.fixture
def ten_folders() -> list[FolderStats]:
    """Ten 100-line folders with strictly decreasing coverage."""
    return [_folder(f"F{i}", covered=100 - i * 10 - 1, total=100) for i in range(10)]


class TestProportionalSlices:
    """Whole-project pie."""

    def test_overflow_merged_into_others(self, ten_folders: list[FolderStats]) -> None:
        result = proportional_slices(ten_folders)

        assert len(result.slices) == 8
        others = result.slices[-1]
        assert others.folder == "Others"
        assert others.label.startswith("Others (")
        assert others.total_lines == sum(f.total_lines for f in ten_folders[7:])
        assert others.covered_lines == sum(f.covered_lines for f in ten_folders[7:])

    def test_others_percentage_recomputed_from_sums(self, ten_folders: list[FolderStats]) -> None:
        others = proportional_slices(ten_folders).slices[-1]
        expected = round(others.covered_lines / others.total_lines * 100, 2)
        assert others.coverage_percent == expected

    def test_weights_sum_to_hundred(self, ten_folders: list[FolderStats]) -> None:
        result = proportional_slices(ten_folders)
        assert abs(sum(s.weight for s in result.slices) - 100.0) <= 0.2

    def test_eight_or_fewer_folders_not_merged(self) -> None:
        folders = [_folder(f"F{i}", 1, 3) for i in range(8)]

        result = proportional_slices(folders)

        assert [s.folder for s in result.slices] == [f.path for f in folders]

    def test_empty_remainder_skips_others(self) -> None:
        folders = [_folder(f"F{i}", 1, 2) for i in range(7)]
        folders += [_folder("Z1", 0, 0), _folder("Z2", 0, 0)]

        result = proportional_slices(folders)

        assert len(result.slices) == 7
        assert all(s.folder != "Others" for s in result.slices)

    def test_label_and_weight(self) -> None:
        folders = [_folder("App/Domain", 1, 3), _folder("Infra", 1, 1)]

        result = proportional_slices(folders)

        assert result.title == "Code Coverage by Directory"
        assert result.slices[0].label == "Domain (33.33%)"
        assert result.slices[0].weight == 75.0
        assert result.slices[1].weight == 25.0

    def test_empty_input(self) -> None:
        assert proportional_slices([]).slices == ()


class TestRangeBucketSlices:
    """Per-folder distribution over the six fixed ranges."""

    def test_each_file_in_exactly_one_bucket(self) -> None:
        files = [
            _file("A", 10, 10),
            _file("B", 85, 100),
            _file("C", 0, 5),
            _file("D", 0, 5),
            _file("E", 91, 200),
        ]

        result = range_bucket_slices("Domain", files)

        assert result.folder == "Domain"
        assert result.title == "Domain - File Coverage Distribution"
        assert [(s.bucket, s.file_count) for s in result.slices] == [
            ("Excellent", 1),
            ("Good", 1),
            ("Bad", 1),
            ("Untested", 2),
        ]
        assert sum(s.file_count for s in result.slices) == len(files)

    def test_labels_and_weights(self) -> None:
        files = [_file("A", 1, 1), _file("B", 0, 3)]

        result = range_bucket_slices("X", files)

        assert [s.label for s in result.slices] == [
            "Excellent (90-100%) (1 files)",
            "Untested (0%) (1 files)",
        ]
        assert [s.weight for s in result.slices] == [25.0, 75.0]

    def test_fractional_percentage_between_ranges(self) -> None:
        result = range_bucket_slices("X", [_file("A", 179, 200)])  # 89.5%
        assert result.slices[0].bucket == "Good"

    def test_weights_sum_to_hundred(self) -> None:
        files = [_file(f"f{i}", i, 7) for i in range(8)]
        result = range_bucket_slices("X", files)
        assert abs(sum(s.weight for s in result.slices) - 100.0) <= 0.2

    def test_empty_input(self) -> None:
        assert range_bucket_slices("X", []).slices == ()


class TestBars:
    """Bar chart per folder."""

    def test_order_and_values(self) -> None:
        folders = [_folder("A", 2, 2), _folder("B/C", 1, 2)]

        result = bars(folders)

        assert [(b.label, b.folder, b.value) for b in result.bars] == [
            ("A", "A", 100.0),
            ("C", "B/C", 50.0),
        ]
        assert (result.axis_min, result.axis_max) == (0.0, 100.0)

    def test_empty_input(self) -> None:
        assert bars([]).bars == ()


class TestTreeNodes:
    """Folder hierarchy."""

    def test_edges_link_to_present_parents(self) -> None:
        folders = [
            _folder("src", 1, 1),
            _folder("Domain", 1, 2),
            _folder("Domain/User", 0, 2),
            _folder("Infra/Http", 1, 4),
        ]

        result = tree_nodes(folders)

        ids = {n.folder: n.id for n in result.nodes}
        assert ids == {"src": "node1", "Domain": "node2", "Domain/User": "node3", "Infra/Http": "node4"}
        edges = {(e.parent, e.child) for e in result.edges}
        assert edges == {("node1", "node2"), ("node2", "node3")}

    def test_no_src_node_means_top_level_roots(self) -> None:
        result = tree_nodes([_folder("Domain", 1, 1), _folder("Infra", 1, 1)])
        assert result.edges == ()

    def test_src_node_has_no_self_edge(self) -> None:
        result = tree_nodes([_folder("src", 1, 1)])
        assert result.edges == ()

    def test_edges_unique(self) -> None:
        folders = [_folder("src", 1, 1), _folder("A", 1, 1), _folder("A/B", 1, 1), _folder("A/C", 1, 1)]

        result = tree_nodes(folders)

        pairs = [(e.parent, e.child) for e in result.edges]
        assert len(pairs) == len(set(pairs)) == 3

    def test_node_label_and_class(self) -> None:
        node = tree_nodes([_folder("App/Domain", 3, 4, files=2)]).nodes[0]

        assert node.label == "Domain 75.0% (2 files)"
        assert node.coverage_class == "medium"

    @pytest.mark.parametrize(
        ("percent", "expected"),
        [(100.0, "high"), (80.0, "high"), (79.99, "medium"), (60.0, "medium"), (0.5, "low"), (0.0, "none")],
    )
    def test_coverage_class(self, percent: float, expected: str) -> None:
        assert coverage_class(percent) == expected

    def test_empty_input(self) -> None:
        result = tree_nodes([])
        assert result.nodes == () and result.edges == ()


class TestSynthesize:
    """Variant dispatch."""

    @pytest.mark.parametrize(
        ("variant", "expected_type"),
        [
            (ChartVariant.PROPORTIONAL, ProportionalSlices),
            (ChartVariant.RANGE_BUCKET, RangeBucketSlices),
            (ChartVariant.BARS, Bars),
            (ChartVariant.TREE, TreeNodes),
        ],
    )
    def test_dispatch(self, variant: ChartVariant, expected_type: type) -> None:
        result = synthesize([_folder("A", 1, 1)], variant, folder="A", files=[_file("a", 1, 1)])
        assert isinstance(result, expected_type)

    @pytest.mark.parametrize("variant", list(ChartVariant))
    def test_every_variant_degrades_on_empty_input(self, variant: ChartVariant) -> None:
        payload = synthesize([], variant).to_dict()
        assert payload["kind"] == variant.value
        assert all(payload[key] == [] for key in ("slices", "bars", "nodes", "edges") if key in payload)

    def test_to_dict_is_plain_data(self) -> None:
        payload = synthesize([_folder("A", 1, 2)], ChartVariant.BARS).to_dict()

        assert payload == {
            "kind": "bars",
            "title": "Code Coverage by Directory",
            "axis": {"label": "Coverage %", "min": 0.0, "max": 100.0},
            "bars": [{"label": "A", "folder": "A", "value": 50.0}],
        }
