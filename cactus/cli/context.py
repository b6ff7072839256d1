from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from cactus.core.config import ReleaseConfig, load_config_or_default
from cactus.core.errors import ErrorCode
from cactus.core.result import Err
from cactus.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class GlobalOptions:
    """Options given before the subcommand."""

    repo: Path
    upstream: str | None = None


@dataclass(frozen=True, slots=True)
class CLIContext:
    repo_root: Path
    upstream: str
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(options: GlobalOptions) -> CLIContext:
    try:
        repo_root = options.repo.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --repo: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not (repo_root / ".git").exists():
        typer.echo(f"error: not a git repository: {repo_root}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config_result = load_config_or_default(repo_root)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    config = config_result.value

    return CLIContext(
        repo_root=repo_root,
        upstream=options.upstream or config.upstream,
        config=config,
        console=RichConsole(),
    )
