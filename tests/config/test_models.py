"""Tests for configuration models."""

import pytest
from pydantic import ValidationError

from covgraph.config.constants import DEFAULT_SRC_ONLY_EXCLUDES
from covgraph.config.models import (
    ChartVariant,
    CovGraphConfig,
    DiagramDefaults,
    LogOutputConfig,
    RunOptions,
)
from covgraph.core.errors import ErrorCode, InvalidOptionsError


class TestRunOptionsDefaults:
    """Default option values."""

    def test_defaults(self) -> None:
        options = RunOptions()

        assert options.base_path == "src/"
        assert options.max_depth == 5
        assert options.min_coverage_percent == 0.0
        assert options.exclude_paths == ()
        assert options.src_only is False
        assert options.chart_variant is ChartVariant.BARS
        assert options.per_folder_output is False
        assert options.source_extension == ".php"

    def test_immutable(self) -> None:
        options = RunOptions()
        with pytest.raises(ValidationError):
            options.max_depth = 2  # type: ignore[misc]


class TestRunOptionsValidation:
    """RunOptions.build converts validation failures."""

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("max_depth", 0),
            ("min_coverage_percent", -1.0),
            ("min_coverage_percent", 100.5),
            ("chart_variant", "donut"),
            ("unknown_field", True),
        ],
    )
    def test_invalid_values_raise_invalid_options(self, field: str, value: object) -> None:
        with pytest.raises(InvalidOptionsError) as exc_info:
            RunOptions.build(**{field: value})

        assert exc_info.value.code == ErrorCode.INVALID_OPTIONS
        assert exc_info.value.details["field"] == field

    def test_chart_variant_from_string(self) -> None:
        options = RunOptions.build(chart_variant="range-bucket")
        assert options.chart_variant is ChartVariant.RANGE_BUCKET

    def test_exclude_paths_trailing_slash_and_empty_entries(self) -> None:
        options = RunOptions.build(exclude_paths=["tests/", "", "/", "vendor"])
        assert options.exclude_paths == ("tests", "vendor")


class TestEffectiveExcludes:
    """src_only implies the default exclusion set."""

    def test_src_only_without_excludes_uses_defaults(self) -> None:
        options = RunOptions(src_only=True)
        assert options.effective_exclude_paths == DEFAULT_SRC_ONLY_EXCLUDES

    def test_explicit_excludes_win(self) -> None:
        options = RunOptions(src_only=True, exclude_paths=("legacy",))
        assert options.effective_exclude_paths == ("legacy",)

    def test_no_src_only_no_excludes(self) -> None:
        assert RunOptions().effective_exclude_paths == ()


class TestFolderBreakdown:
    """wants_folder_breakdown follows per_folder_output and the variant."""

    @pytest.mark.parametrize(
        ("variant", "per_folder", "expected"),
        [
            (ChartVariant.BARS, False, False),
            (ChartVariant.BARS, True, True),
            (ChartVariant.RANGE_BUCKET, False, True),
            (ChartVariant.TREE, False, False),
        ],
    )
    def test_breakdown(self, variant: ChartVariant, per_folder: bool, expected: bool) -> None:
        options = RunOptions(chart_variant=variant, per_folder_output=per_folder)
        assert options.wants_folder_breakdown is expected


class TestDiagramDefaults:
    """Defaults merge CLI overrides."""

    def test_none_overrides_are_ignored(self) -> None:
        defaults = DiagramDefaults(max_depth=3)

        options = defaults.run_options(max_depth=None, base_path=None)

        assert options.max_depth == 3
        assert options.base_path == "src/"

    def test_overrides_win(self) -> None:
        defaults = DiagramDefaults(max_depth=3)

        options = defaults.run_options(max_depth=1, chart_variant="tree")

        assert options.max_depth == 1
        assert options.chart_variant is ChartVariant.TREE

    def test_result_has_no_output_field(self) -> None:
        options = DiagramDefaults(output="out.json").run_options()
        assert type(options) is RunOptions

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(InvalidOptionsError):
            DiagramDefaults().run_options(max_depth=0)


class TestLoggingModels:
    """Logging configuration models."""

    def test_default_config(self) -> None:
        config = CovGraphConfig()
        assert config.logging.level == "WARNING"
        assert config.logging.outputs[0].destination == "stderr"
        assert config.defaults.output == "coverage-diagram.json"

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValueError):
            LogOutputConfig(destination="relative/path.log")
