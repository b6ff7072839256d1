"""Authentication material for a release remote.

ssh-style and local remotes need nothing up front: the push authenticates
through the ssh agent (or not at all for a filesystem remote). https remotes
need a configured git credential helper, which is asked once, silently,
before anything touches the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit

from cactus.core.result import Err, Ok, Result
from cactus.git.remote import Remote, infer_protocol
from cactus.git.repository import Repository
from cactus.platform.process import merged_env
from cactus.release.errors import ReleaseError

__all__ = [
    "CredentialHelper",
    "Credentials",
    "GitCredentialHelper",
    "NoCredentials",
    "PlaintextUserPass",
    "SshAgent",
    "resolve_credentials",
    "resolve_remote",
]


@dataclass(frozen=True, slots=True)
class NoCredentials:
    """Nothing resolved up front; the push falls back to the ssh agent."""


@dataclass(frozen=True, slots=True)
class SshAgent:
    """Authenticate with keys held by the running ssh agent."""


@dataclass(frozen=True, slots=True)
class PlaintextUserPass:
    username: str
    password: str = field(repr=False)


Credentials = NoCredentials | SshAgent | PlaintextUserPass


class CredentialHelper(Protocol):
    def available(self) -> Result[bool, ReleaseError]:
        """Whether a credential helper is configured at all."""
        ...

    def fill(self, url: str) -> Result[PlaintextUserPass, ReleaseError]:
        """Fetch username/password for ``url`` without prompting."""
        ...


# Never fall back to an interactive username/password prompt.
_SILENT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


def _credential_description(url: str) -> str:
    parts = urlsplit(url)
    lines = [f"protocol={parts.scheme}", f"host={parts.netloc.rsplit('@', 1)[-1]}"]
    path = parts.path.lstrip("/")
    if path:
        lines.append(f"path={path}")
    if parts.username:
        lines.append(f"username={parts.username}")
    return "\n".join(lines) + "\n\n"


def _parse_credential_answer(raw: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for line in raw.splitlines():
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        out[key.strip()] = value
    return out


class GitCredentialHelper:
    """Credential helper backed by ``git credential``."""

    def __init__(self, repo_root: Path) -> None:
        self._repo = Repository(repo_root)

    def available(self) -> Result[bool, ReleaseError]:
        helpers = self._repo.config_get_all("credential.helper")
        if isinstance(helpers, Err):
            return Err(
                ReleaseError(
                    kind="credential_helper_unavailable",
                    message="failed to read git credential.helper config",
                    hint=helpers.error.message,
                )
            )
        return Ok(any(h for h in helpers.value))

    def fill(self, url: str) -> Result[PlaintextUserPass, ReleaseError]:
        answer = self._repo.credential_fill(
            _credential_description(url), env=merged_env(_SILENT_ENV)
        )
        if isinstance(answer, Err):
            return Err(
                ReleaseError(
                    kind="remote_auth_failure",
                    message=f"credential helper has no credentials for {url}",
                    hint=answer.error.message,
                )
            )

        values = _parse_credential_answer(answer.value)
        username = values.get("username")
        password = values.get("password")
        if not username or password is None:
            return Err(
                ReleaseError(
                    kind="remote_auth_failure",
                    message=f"credential helper returned incomplete credentials for {url}",
                    hint="Store a username and password/token for this host first.",
                )
            )
        return Ok(PlaintextUserPass(username=username, password=password))


def _anchor_local_url(repo_root: Path, url: str) -> str:
    if infer_protocol(url) != "local" or url.lower().startswith("file://"):
        return url
    path = Path(url).expanduser()
    if path.is_absolute():
        return url
    return str((repo_root / path).resolve())


def resolve_remote(repo_root: Path, name: str) -> Result[Remote, ReleaseError]:
    """Look up remote ``name`` in the repository at ``repo_root``.

    A relative filesystem URL (``../up.git``) is made absolute against
    ``repo_root`` so it still points at the same place from a scratch clone.
    """
    url = Repository(repo_root).remote_url(name)
    if isinstance(url, Err):
        return Err(
            ReleaseError(
                kind="remote_not_found",
                message=f"cannot resolve remote '{name}' in {repo_root}",
                hint=url.error.message,
            )
        )
    return Ok(Remote(name=name, url=_anchor_local_url(repo_root, url.value)))


def resolve_credentials(
    remote: Remote,
    *,
    helper: CredentialHelper,
) -> Result[Credentials, ReleaseError]:
    """Decide how to authenticate against ``remote``.

    Only https remotes consult ``helper``; for them a missing helper is an
    error because the alternative would be an interactive password prompt.
    """
    if not remote.is_https:
        return Ok(NoCredentials())

    available = helper.available()
    if isinstance(available, Err):
        return available
    if not available.value:
        return Err(
            ReleaseError(
                kind="credential_helper_unavailable",
                message="Using https remote but git credential helper not available!",
                hint="Configure one (git config --global credential.helper ...) or use an ssh remote.",
            )
        )

    filled = helper.fill(remote.url)
    if isinstance(filled, Err):
        return filled
    return Ok(filled.value)
