from __future__ import annotations

from pathlib import Path

import typer

from cactus import __version__
from cactus.cli.commands.release_cmd import cut, tag
from cactus.cli.context import GlobalOptions

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help=(
        "Cut release branches and tag patch releases.\n\n"
        "Examples: [bold]git cactus cut[/bold] (minor), "
        "[bold]git cactus tag[/bold] (patch).\n\n"
        "Do not run two invocations against the same checkout at once."
    ),
)

app.command()(cut)
app.command()(tag)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
    upstream: str | None = typer.Option(
        None,
        "--upstream",
        help="Upstream remote name (default: origin, or release.upstream in .cactus.toml)",
        rich_help_panel="Git Options",
    ),
    repo: Path = typer.Option(
        Path("."),
        "--repo",
        help="Repository to release (default: current directory)",
        rich_help_panel="Git Options",
    ),
) -> None:
    del version
    ctx.obj = GlobalOptions(repo=repo, upstream=upstream)


def main() -> None:
    app()
