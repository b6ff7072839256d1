"""Error types for the release bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_version_input",
    "credential_helper_unavailable",
    "remote_auth_failure",
    "remote_not_found",
    "clone_failure",
    "history_walk_failure",
    "manifest_invalid",
    "bump_failed",
    "push_failure",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    ``refs`` is only populated for ``push_failure`` and names the destination
    refs that did not land on the remote.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
    refs: tuple[str, ...] = ()

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
