"""Tests for summary formatting helpers."""

import pytest

from covgraph.core.formatting import (
    format_percent,
    format_sample_files,
    pluralize,
    sanitize_filename,
)


class TestFormatSampleFiles:
    """format_sample_files collapses long lists."""

    def test_empty(self) -> None:
        assert format_sample_files([]) == ""

    def test_short_list_shown_in_full(self) -> None:
        assert format_sample_files(["a.php", "b.php"]) == "a.php, b.php"

    def test_exactly_max_shown(self) -> None:
        assert format_sample_files(["a", "b", "c"]) == "a, b, c"

    def test_tail_collapsed(self) -> None:
        names = ["a.php", "b.php", "c.php", "d.php", "e.php"]
        assert format_sample_files(names) == "a.php, b.php, c.php, +2 more"

    def test_custom_max_shown(self) -> None:
        assert format_sample_files(["a", "b", "c"], max_shown=1) == "a, +2 more"


class TestPluralize:
    """pluralize picks the right word form."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 files"), (1, "1 file"), (2, "2 files")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        assert pluralize(count, "file") == expected

    def test_explicit_plural(self) -> None:
        assert pluralize(3, "directory", "directories") == "3 directories"


class TestFormatPercent:
    """format_percent drops float noise."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(50.0, "50%"), (66.67, "66.67%"), (0.0, "0%"), (100.0, "100%")],
    )
    def test_format(self, value: float, expected: str) -> None:
        assert format_percent(value) == expected


class TestSanitizeFilename:
    """sanitize_filename keeps only safe characters."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Domain", "Domain"),
            ("Domain/User", "Domain_User"),
            ("Infra.Http v2", "Infra_Http_v2"),
            ("a-b_c", "a-b_c"),
        ],
    )
    def test_sanitize(self, name: str, expected: str) -> None:
        assert sanitize_filename(name) == expected
