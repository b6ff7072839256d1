"""Cross-layer contracts for the release bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from cactus.release.errors import ReleaseError, ReleaseErrorKind

CutLevel = Literal["major", "minor", "premajor", "preminor", "prerelease"]
ReleaseStatus = Literal["published", "aborted", "failed"]


@dataclass(frozen=True, slots=True)
class CutRequest:
    """Normalized ``cut`` invocation."""

    repo_root: Path
    upstream: str
    level: CutLevel = "minor"
    pre_id: str | None = None


@dataclass(frozen=True, slots=True)
class TagRequest:
    """Normalized ``tag`` invocation."""

    repo_root: Path
    upstream: str


@dataclass(frozen=True, slots=True)
class ReleaseResult:
    """The one outcome every workflow run ends with."""

    status: ReleaseStatus
    summary: str
    hint: str | None = None
    details: tuple[str, ...] = ()
    error_kind: ReleaseErrorKind | None = None

    @property
    def success(self) -> bool:
        return self.status == "published"

    @classmethod
    def published(cls, summary: str, *, details: tuple[str, ...] = ()) -> ReleaseResult:
        return cls(status="published", summary=summary, details=details)

    @classmethod
    def aborted(cls, summary: str, *, hint: str | None = None) -> ReleaseResult:
        return cls(status="aborted", summary=summary, hint=hint)

    @classmethod
    def failed(cls, error: ReleaseError) -> ReleaseResult:
        details = tuple(f"not published: {ref}" for ref in error.refs)
        return cls(
            status="failed",
            summary=error.message,
            hint=error.hint,
            details=details,
            error_kind=error.kind,
        )
