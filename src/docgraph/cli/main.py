"""docgraph CLI entry point."""

import sys

import typer
from loguru import logger

from .. import __version__
from ..config.settings import get_settings
from ..core.exceptions import ConfigError
from .commands import build, layout, watch
from .output import print_error

app = typer.Typer(
    name="docgraph",
    help="Build and lay out link graphs of markdown document trees",
    no_args_is_help=True,
)

app.command(name="build")(build.main)
app.command(name="layout")(layout.main)
app.command(name="watch")(watch.main)


def setup_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docgraph {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug logging and per-file progress"
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    try:
        settings = get_settings()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1)

    setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = {"settings": settings, "verbose": verbose}


if __name__ == "__main__":
    app()
