"""Human-readable run summaries."""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from covgraph.config.constants import SAMPLE_FILES_SHOWN
from covgraph.core.formatting import format_percent, format_sample_files, pluralize
from covgraph.coverage.aggregate import FolderStats
from covgraph.pipeline import ArtifactInfo, PipelineResult


def _coverage_style(percent: float) -> str:
    if percent >= 80:
        return "green"
    if percent >= 60:
        return "yellow"
    return "red"


def make_summary_table(folders: Sequence[FolderStats]) -> Table:
    """Per-folder coverage table, in aggregate order."""
    table = Table(title="Coverage Summary by Directory", pad_edge=False)
    table.add_column("Directory", style="cyan")
    table.add_column("Coverage", justify="right")
    table.add_column("Lines (Covered/Total)", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("Sample Files", style="dim")

    for folder in folders:
        pct = folder.coverage_percent
        table.add_row(
            folder.path,
            f"[{_coverage_style(pct)}]{format_percent(pct)}[/]",
            f"{folder.covered_lines}/{folder.total_lines}",
            str(folder.file_count),
            format_sample_files(folder.sample_file_names, max_shown=SAMPLE_FILES_SHOWN),
        )
    return table


def make_artifact_table(info: ArtifactInfo) -> Table:
    """Two-column property table for --debug output."""
    table = Table(title="Coverage File Debug Info", show_header=True, pad_edge=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    for prop, value in info.rows():
        table.add_row(prop, Text(value))  # raw artifact text, never markup
    return table


def print_summary(result: PipelineResult, console: Console) -> None:
    """Print the folder table and the overall line."""
    if not result.folders:
        console.print("[yellow]No folders matched the filters[/yellow]")
        return

    console.print(make_summary_table(result.folders))
    console.print(
        f"Overall: {format_percent(result.coverage_percent)} coverage "
        f"({result.covered_lines}/{result.total_lines} lines in "
        f"{pluralize(result.file_count, 'file')})",
        highlight=False,
    )
