"""covgraph diagram command - coverage artifact to diagram description."""

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from covgraph.cli.summary import make_artifact_table, print_summary
from covgraph.config import ChartVariant, RunOptions, load_config
from covgraph.core.errors import CovGraphError
from covgraph.core.formatting import pluralize, sanitize_filename
from covgraph.core.logging import configure_logging
from covgraph.diagrams.models import RangeBucketSlices
from covgraph.pipeline import PipelineResult, inspect_artifact, run_file


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def folder_output_path(output: Path, folder: str) -> Path:
    """Sibling of output named <stem>_<sanitized folder><suffix>."""
    return output.with_name(f"{output.stem}_{sanitize_filename(folder)}{output.suffix}")


def write_result(result: PipelineResult, output: Path, *, separate_files: bool) -> list[Path]:
    """Write the run result as JSON.

    With separate_files, each diagram goes to its own file next to output
    and the combined document is not written.

    Returns:
        Paths written, in order.
    """
    if not separate_files:
        _write_json(output, result.to_dict())
        return [output]

    written = []
    for diagram in result.diagrams:
        if not isinstance(diagram, RangeBucketSlices):
            continue
        target = folder_output_path(output, diagram.folder)
        _write_json(target, diagram.to_dict())
        written.append(target)
    return written


def build_run_options(
    config_path: Path | None,
    *,
    verbose: bool = False,
    **overrides: Any,
) -> tuple[RunOptions, Path]:
    """Resolve run options and output path from config plus CLI flags.

    None-valued overrides mean the flag was not given.
    """
    config = load_config(config_path=config_path)
    if not verbose:
        configure_logging(config=config.logging)

    output = overrides.pop("output", None)
    options = config.defaults.run_options(**overrides)
    return options, output or Path(config.defaults.output)


@click.command()
@click.argument("coverage_file", type=click.Path(path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Output file")
@click.option("--max-depth", type=int, default=None, help="Maximum folder depth")
@click.option("--min-coverage", type=float, default=None, help="Minimum coverage percent to show")
@click.option("--base-path", default=None, help="Path prefix stripped before grouping")
@click.option("--src-only", is_flag=True, help="Only count library/source files")
@click.option(
    "--exclude-path",
    "exclude_paths",
    multiple=True,
    help="Exclude paths starting with or containing this segment (repeatable)",
)
@click.option(
    "--chart-type",
    type=click.Choice([v.value for v in ChartVariant]),
    default=None,
    help="Diagram layout",
)
@click.option("--separate-files", is_flag=True, help="One output file per folder")
@click.option("--debug", is_flag=True, help="Show information about the coverage file format")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ./.covgraph.yaml)",
)
@click.pass_context
def diagram_command(
    ctx: click.Context,
    coverage_file: Path,
    output: Path | None,
    max_depth: int | None,
    min_coverage: float | None,
    base_path: str | None,
    src_only: bool,
    exclude_paths: tuple[str, ...],
    chart_type: str | None,
    separate_files: bool,
    debug: bool,
    config_path: Path | None,
) -> None:
    """Generate a coverage diagram description from a coverage artifact.

    COVERAGE_FILE may be Clover XML, JSON, a PHP coverage snapshot script
    (.php/.cov) or PHP-serialized coverage data.
    """
    console = Console()
    verbose = bool((ctx.find_root().obj or {}).get("verbose"))

    try:
        options, output_path = build_run_options(
            config_path,
            verbose=verbose,
            output=output,
            max_depth=max_depth,
            min_coverage_percent=min_coverage,
            base_path=base_path,
            src_only=True if src_only else None,
            exclude_paths=exclude_paths or None,
            chart_variant=chart_type,
            per_folder_output=True if separate_files else None,
        )

        if debug:
            console.print(make_artifact_table(inspect_artifact(coverage_file)))

        result = run_file(coverage_file, options)
    except CovGraphError as e:
        raise click.ClickException(e.message) from e

    if debug:
        console.print(
            f"Parsed {pluralize(result.files_parsed, 'file')} as {result.source_format}",
            highlight=False,
        )

    written = write_result(result, output_path, separate_files=separate_files)
    if separate_files:
        console.print(f"[green]Wrote {pluralize(len(written), 'folder diagram')}[/green]")
    else:
        console.print(f"[green]Diagram written:[/green] {output_path}", highlight=False, soft_wrap=True)

    print_summary(result, console)
