"""Version bump collaborator.

The release workflows never edit manifests themselves. A VersionBumpTool
writes the new version, creates the release commit and the ``v{version}``
tag, and does not push. The stock implementation runs a command template,
``npm version`` by default.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from cactus.core.config import DEFAULT_BUMP_COMMAND, DEFAULT_MANIFEST
from cactus.core.result import Err, Ok, Result
from cactus.git.repository import Repository
from cactus.platform.process import run as run_process
from cactus.release.errors import ReleaseError
from cactus.services.release.manifest import read_manifest_version
from cactus.services.release.model import BumpOutcome, ReleaseLevel

_BUMP_TIMEOUT_SECONDS = 5 * 60.0


class VersionBumpTool(Protocol):
    def bump(
        self, path: Path, level: ReleaseLevel, pre_id: str | None = None
    ) -> Result[BumpOutcome, ReleaseError]: ...


def render_command(
    template: Sequence[str], *, level: ReleaseLevel, pre_id: str | None
) -> list[str]:
    """Fill ``{level}`` / ``{preid}`` placeholders.

    Arguments that mention ``{preid}`` are dropped when there is no pre id.
    """
    cmd: list[str] = []
    for arg in template:
        if "{preid}" in arg:
            if pre_id is None:
                continue
            arg = arg.replace("{preid}", pre_id)
        cmd.append(arg.replace("{level}", level))
    return cmd


def _bump_failed(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="bump_failed", message=message, hint=hint))


class CommandVersionBump:
    """Bump by running an external command inside the repository."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_BUMP_COMMAND,
        *,
        manifest: str = DEFAULT_MANIFEST,
    ) -> None:
        self._command = tuple(command)
        self._manifest = manifest

    def bump(
        self, path: Path, level: ReleaseLevel, pre_id: str | None = None
    ) -> Result[BumpOutcome, ReleaseError]:
        cmd = render_command(self._command, level=level, pre_id=pre_id)
        result = run_process(cmd, cwd=path, timeout=_BUMP_TIMEOUT_SECONDS)
        if isinstance(result, Err):
            e = result.error
            return _bump_failed(
                f"version bump failed: {' '.join(cmd)}",
                hint=e.stderr.strip() or e.stdout.strip() or None,
            )

        version = read_manifest_version(path / self._manifest)
        if isinstance(version, Err):
            return version

        head = Repository(path).head_sha()
        if isinstance(head, Err):
            return _bump_failed("cannot resolve the bump commit", hint=head.error.message)

        return Ok(BumpOutcome(new_version=version.value, commit_id=head.value))
