"""Git repository abstraction.

This module is the one place where ``git`` command lines are composed. Every
operation returns a Result so release services can map failures onto their
own error kinds.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.remote_url("origin"):
        case Ok(url):
            print(f"origin: {url}")
        case Err(e):
            print(f"Error: {e.message}")

    match repo.log_range("v1.2.0..master", LOG_FORMAT):
        case Ok(raw):
            ...
        case Err(e):
            print(f"log failed: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from cactus.core.result import Err, Ok, Result
from cactus.platform.process import ProcessError
from cactus.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_GIT_CLONE_TIMEOUT_SECONDS = 15 * 60.0

_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "credential"})

__all__ = [
    "GitError",
    "Repository",
    "clone",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message (stderr, or a fallback description)
        returncode: Process return code
        stdout: Captured stdout; ``push --porcelain`` reports per-ref status
            there even when the push as a whole fails
    """

    command: str
    message: str
    returncode: int = 1
    stdout: str = ""


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
        stdout=e.stdout,
    )


def _config_args(config: Sequence[tuple[str, str]]) -> list[str]:
    args: list[str] = []
    for key, value in config:
        args.extend(["-c", f"{key}={value}"])
    return args


def clone(
    url: str,
    dest: Path,
    *,
    branch: str | None = None,
    config: Sequence[tuple[str, str]] = (),
    env: dict[str, str] | None = None,
) -> Result[Repository, GitError]:
    """Clone ``url`` into ``dest`` (which must not exist or be empty).

    ``branch`` is checked out instead of the remote HEAD when given.

    ``config`` entries are passed as ``git -c key=value`` so they apply to the
    clone transfer only and are not written into the new repository.
    """
    cmd = ["git", *_config_args(config), "clone", "--quiet"]
    if branch is not None:
        cmd.extend(["--branch", branch])
    cmd.extend([url, str(dest)])
    result = run_process(cmd, cwd=dest.parent, env=env, timeout=_GIT_CLONE_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(_git_error("clone", result.error, "clone failed"))
    return Ok(Repository(dest))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a git repository (``.git`` dir or worktree file)."""
        return (self.path / ".git").exists()

    def remote_url(self, name: str) -> Result[str, GitError]:
        """Get the fetch URL configured for remote ``name``."""
        result = self._run(["remote", "get-url", name])
        match result:
            case Err(e):
                return Err(_git_error("remote get-url", e, f"no such remote: {name}"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def config_get_all(self, key: str) -> Result[tuple[str, ...], GitError]:
        """Read every value of a (possibly multi-valued) config key.

        A key that is not set is not an error: git exits 1 with no output and
        this returns an empty tuple.
        """
        result = self._run(["config", "--get-all", key])
        match result:
            case Err(e):
                if e.returncode == 1 and not e.stderr.strip():
                    return Ok(())
                return Err(_git_error("config", e, f"failed to read {key}"))
            case Ok(stdout):
                return Ok(tuple(v.strip() for v in stdout.splitlines() if v.strip()))

    def credential_fill(
        self, description: str, *, env: dict[str, str] | None = None
    ) -> Result[str, GitError]:
        """Ask the configured credential helpers to fill ``description``.

        ``description`` uses git's credential key=value format. The raw answer
        is returned for the caller to parse.
        """
        result = self._run(["credential", "fill"], env=env, input=description)
        match result:
            case Err(e):
                return Err(_git_error("credential fill", e, "credential fill failed"))
            case Ok(stdout):
                return Ok(stdout)

    def log_range(self, revision_range: str, fmt: str) -> Result[str, GitError]:
        """Run ``git log`` over ``revision_range`` with a custom pretty format."""
        result = self._run(["log", f"--format={fmt}", revision_range, "--"])
        match result:
            case Err(e):
                return Err(_git_error("log", e, f"git log {revision_range} failed"))
            case Ok(stdout):
                return Ok(stdout)

    def head_sha(self) -> Result[str, GitError]:
        result = self._run(["rev-parse", "HEAD"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e, "failed to resolve HEAD"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def current_branch(self) -> str | None:
        """Get current branch name.

        Returns None if detached HEAD or error.
        """
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Ok(stdout):
                branch = stdout.strip()
                return None if branch == "HEAD" else branch
            case Err(_):
                return None

    def push(
        self,
        remote: str,
        refspecs: Sequence[str],
        *,
        config: Sequence[tuple[str, str]] = (),
        env: dict[str, str] | None = None,
        atomic: bool = False,
    ) -> Result[str, GitError]:
        """Push ``refspecs`` to ``remote`` in one ``git push --porcelain`` call.

        Returns the porcelain stdout. On failure the GitError still carries
        the stdout so per-ref status can be inspected.
        """
        args = ["push", "--porcelain"]
        if atomic:
            args.append("--atomic")
        args.extend([remote, *refspecs])
        result = self._run(args, config=config, env=env)
        match result:
            case Err(e):
                return Err(_git_error("push", e, "push failed"))
            case Ok(stdout):
                return Ok(stdout)

    def _run(
        self,
        args: list[str],
        *,
        config: Sequence[tuple[str, str]] = (),
        env: dict[str, str] | None = None,
        input: str | None = None,
    ) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        cmd = ["git", *_config_args(config), "-C", str(self.path), *args]
        return run_process(cmd, cwd=self.path, env=env, timeout=timeout, input=input)
