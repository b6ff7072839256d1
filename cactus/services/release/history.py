from __future__ import annotations

from datetime import datetime
from pathlib import Path

from cactus.core.result import Err, Ok, Result
from cactus.git.repository import Repository
from cactus.release.errors import ReleaseError
from cactus.services.release.model import CommitLogEntry

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
LOG_FORMAT = "%H%x1f%an%x1f%cn%x1f%cI%x1f%B%x1e"


def commit_range(from_ref: str, to_ref: str) -> str:
    return f"{from_ref}..{to_ref}"


def parse_log(raw: str) -> tuple[CommitLogEntry, ...]:
    """Parse output produced with LOG_FORMAT.

    Raises:
        ValueError: A record does not have the expected fields.
    """
    entries: list[CommitLogEntry] = []
    for record in raw.split(_RECORD_SEP):
        record = record.lstrip("\n")
        if not record.strip():
            continue
        fields = record.split(_FIELD_SEP, 4)
        if len(fields) != 5:
            raise ValueError(f"malformed log record: {record[:60]!r}")
        sha, author, committer, date, message = fields
        entries.append(
            CommitLogEntry(
                sha=sha.strip(),
                message=message.rstrip("\n"),
                author=author,
                committer=committer,
                timestamp=datetime.fromisoformat(date.strip()),
            )
        )
    return tuple(entries)


def list_commits(
    repo_root: Path,
    from_ref: str,
    to_ref: str,
) -> Result[tuple[CommitLogEntry, ...], ReleaseError]:
    """Commits reachable from ``to_ref`` but not from ``from_ref``.

    Order is whatever ``git log`` yields (newest first). Read-only.
    """
    revision_range = commit_range(from_ref, to_ref)
    raw = Repository(repo_root).log_range(revision_range, LOG_FORMAT)
    if isinstance(raw, Err):
        return Err(
            ReleaseError(
                kind="history_walk_failure",
                message=f"failed to read commit log {revision_range}",
                hint=raw.error.message,
            )
        )

    try:
        return Ok(parse_log(raw.value))
    except ValueError as e:
        return Err(
            ReleaseError(
                kind="history_walk_failure",
                message=f"unexpected git log output for {revision_range}",
                hint=str(e),
            )
        )
