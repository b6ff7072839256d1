from __future__ import annotations

from pathlib import Path

from cactus.core.result import Err, Ok, Result
from cactus.git.remote import Remote
from cactus.git.repository import clone
from cactus.output.console import ConsoleProtocol, Style
from cactus.platform.process import merged_env
from cactus.release.errors import ReleaseError
from cactus.services.release.auth import GitTransport
from cactus.services.release.publish import is_auth_error


def clone_repository(
    remote: Remote,
    dest: Path,
    transport: GitTransport,
    *,
    branch: str,
    console: ConsoleProtocol,
) -> Result[Path, ReleaseError]:
    """Clone a fresh copy of ``remote`` with ``branch`` checked out."""
    console.print(f"clone {remote.url} ({branch}) -> {dest}", Style.DIM)
    result = clone(
        remote.url,
        dest,
        branch=branch,
        config=transport.git_config(),
        env=merged_env(transport.env()),
    )
    if isinstance(result, Err):
        message = result.error.message
        if is_auth_error(message):
            return Err(
                ReleaseError(
                    kind="remote_auth_failure",
                    message=f"authentication to {remote.url} failed",
                    hint=message,
                )
            )
        return Err(
            ReleaseError(
                kind="clone_failure",
                message=f"failed to clone {remote.url}",
                hint=message,
            )
        )
    return Ok(result.value.path)
