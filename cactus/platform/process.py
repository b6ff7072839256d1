"""The single subprocess entry point.

Every external command (``git``, the version bump tool) runs through
``run``, which never raises: failures come back as a ProcessError value with
whatever the child managed to print.

Usage:
    match run(["git", "remote", "get-url", "origin"], cwd=repo_root):
        case Ok(stdout):
            url = stdout.strip()
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from cactus.core.result import Err, Ok, Result

__all__ = ["ProcessError", "merged_env", "run"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A command that exited non-zero, timed out or could not start.

    ``returncode`` is -1 when the process never produced an exit status.
    ``stdout`` is kept because some tools (``git push --porcelain``) report
    useful detail there even on failure.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3])
        if len(self.command) > 3:
            shown += " ..."
        return f"{shown} failed (exit {self.returncode})"


def merged_env(extra: Mapping[str, str] | None) -> dict[str, str] | None:
    """Current environment plus ``extra``; None (inherit as-is) when empty."""
    if not extra:
        return None
    return {**os.environ, **extra}


def _failure(cmd: list[str], returncode: int, stdout: object, stderr: str) -> Err[ProcessError]:
    return Err(
        ProcessError(
            command=tuple(cmd),
            returncode=returncode,
            stdout=stdout if isinstance(stdout, str) else "",
            stderr=stderr,
        )
    )


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
    input: str | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and capture its text output.

    Args:
        cmd: Program and arguments.
        cwd: Working directory.
        env: Complete child environment; None inherits ours.
        timeout: Seconds before the child is killed (None waits forever).
        input: Text fed to the child's stdin.

    Returns:
        Ok(stdout) on exit status 0, otherwise Err(ProcessError).
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            input=input,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return _failure(cmd, -1, e.stdout, f"Command timed out after {timeout}s")
    except OSError as e:
        return _failure(cmd, -1, "", str(e))

    if proc.returncode != 0:
        return _failure(cmd, proc.returncode, proc.stdout, proc.stderr)
    return Ok(proc.stdout)
