from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

ReleaseLevel = Literal["major", "minor", "patch", "premajor", "preminor", "prerelease"]

RELEASE_LEVELS: tuple[ReleaseLevel, ...] = (
    "major",
    "minor",
    "patch",
    "premajor",
    "preminor",
    "prerelease",
)


def version_tag(version: str) -> str:
    return f"v{version}"


@dataclass(frozen=True, slots=True)
class VersionTransition:
    """Current version, requested level and everything derived from them."""

    current_version: str
    level: ReleaseLevel
    pre_id: str | None
    next_version: str
    minor_version_label: str  # v{major}.{minor}
    release_branch_name: str

    @property
    def current_tag(self) -> str:
        return version_tag(self.current_version)

    @property
    def next_tag(self) -> str:
        return version_tag(self.next_version)


@dataclass(frozen=True, slots=True)
class CommitLogEntry:
    sha: str
    message: str
    author: str
    committer: str
    timestamp: datetime

    @property
    def short_sha(self) -> str:
        return self.sha[:8]

    @property
    def subject(self) -> str:
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ""


@dataclass(frozen=True, slots=True)
class ReviewDecision:
    approved: bool = False


@dataclass(frozen=True, slots=True)
class RefSpec:
    source: str
    destination: str

    def __str__(self) -> str:
        return f"{self.source}:{self.destination}"


def branch_ref(name: str) -> str:
    return f"refs/heads/{name}"


def tag_ref(name: str) -> str:
    return f"refs/tags/{name}"


@dataclass(frozen=True, slots=True)
class PushPlan:
    """Refs to publish to one remote in a single request."""

    refspecs: tuple[RefSpec, ...]

    @property
    def destinations(self) -> tuple[str, ...]:
        return tuple(r.destination for r in self.refspecs)

    def __len__(self) -> int:
        return len(self.refspecs)


@dataclass(frozen=True, slots=True)
class PushReport:
    """Per-ref outcome of a push."""

    accepted: tuple[str, ...] = ()
    rejected: tuple[str, ...] = ()
    # destination ref -> reason reported by git
    reasons: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.rejected


@dataclass(frozen=True, slots=True)
class BumpOutcome:
    new_version: str
    commit_id: str
