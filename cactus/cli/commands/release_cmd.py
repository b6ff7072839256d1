from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from cactus.cli.commands.release_common import finish
from cactus.cli.context import GlobalOptions, build_context
from cactus.release.contracts import CutRequest, TagRequest
from cactus.services.release.driver import cut_release_branch, tag_release


class CutLevelChoice(str, Enum):
    major = "major"
    minor = "minor"
    premajor = "premajor"
    preminor = "preminor"
    prerelease = "prerelease"


def _global_options(ctx: typer.Context) -> GlobalOptions:
    obj: object = ctx.obj
    if isinstance(obj, GlobalOptions):
        return obj
    return GlobalOptions(repo=Path("."))


def cut(
    ctx: typer.Context,
    level: CutLevelChoice = typer.Argument(
        CutLevelChoice.minor, help="The level of the release", show_default=True
    ),
    preid: str | None = typer.Option(None, "--preid", help="Add preid to prereleases"),
) -> None:
    """Cut a release branch from the upstream mainline."""
    cli = build_context(_global_options(ctx))
    result = cut_release_branch(
        CutRequest(
            repo_root=cli.repo_root,
            upstream=cli.upstream,
            level=level.value,
            pre_id=preid,
        ),
        config=cli.config,
        console=cli.console,
    )
    finish(result, cli.console)


def tag(ctx: typer.Context) -> None:
    """Tag the next patch version on the checked-out release branch."""
    cli = build_context(_global_options(ctx))
    result = tag_release(
        TagRequest(repo_root=cli.repo_root, upstream=cli.upstream),
        config=cli.config,
        console=cli.console,
    )
    finish(result, cli.console)
