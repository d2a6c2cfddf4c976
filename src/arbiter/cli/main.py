"""Arbiter CLI entry point."""

import typer

from arbiter import __version__
from arbiter.cli.score_cmd import score
from arbiter.cli.validate_cmd import validate

app = typer.Typer(
    name="arbiter",
    help="Scoring engine for evaluating LLM outputs",
    no_args_is_help=True,
)

# Register subcommands
app.command()(score)
app.command()(validate)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"arbiter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Scoring engine for evaluating LLM outputs."""
