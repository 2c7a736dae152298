"""covgraph CLI - coverage artifacts to diagram descriptions."""

import click

from covgraph.cli.diagram import diagram_command
from covgraph.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="covgraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """covgraph - Folder-level coverage diagrams from test coverage data."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(diagram_command, name="diagram")


if __name__ == "__main__":
    cli()
