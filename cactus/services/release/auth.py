"""Authentication strategies and certificate policies for git transfers.

A strategy contributes ``git -c`` settings and child environment variables
to a clone or push. Secrets only ever travel through the environment, never
through argv, so they do not show up in process listings.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from cactus.core.config import CertificateCheck
from cactus.core.result import Err, Ok, Result
from cactus.git.remote import Remote
from cactus.release.errors import ReleaseError
from cactus.services.release.credentials import Credentials, PlaintextUserPass

__all__ = [
    "AuthStrategy",
    "BypassCertificateCheck",
    "CertificatePolicy",
    "GitTransport",
    "SshAgentAuth",
    "UserPassAuth",
    "auth_for",
    "certificate_policy",
    "transport_for",
]

_USERNAME_VAR = "CACTUS_GIT_USERNAME"
_PASSWORD_VAR = "CACTUS_GIT_PASSWORD"

# Inline credential helper: answers "get" from the environment.
_ENV_CREDENTIAL_HELPER = (
    "!f() { test \"$1\" = get || exit 0; "
    f'echo "username=${_USERNAME_VAR}"; echo "password=${_PASSWORD_VAR}"; }}; f'
)


class AuthStrategy(Protocol):
    name: str

    def prepare(self, remote: Remote) -> Result[None, ReleaseError]:
        """Check the strategy can work for ``remote`` before any transfer."""
        ...

    def git_config(self) -> tuple[tuple[str, str], ...]: ...

    def env(self) -> dict[str, str]: ...


class CertificatePolicy(Protocol):
    name: str

    def git_config(self) -> tuple[tuple[str, str], ...]: ...


@dataclass(frozen=True, slots=True)
class BypassCertificateCheck:
    """Accept any TLS certificate.

    Hardening gap: only acceptable for trusted internal remotes. Switch to
    ``certificate_check = "verify"`` in ``.cactus.toml`` otherwise.
    """

    name: str = "bypass"

    def git_config(self) -> tuple[tuple[str, str], ...]:
        return (("http.sslVerify", "false"),)


@dataclass(frozen=True, slots=True)
class VerifyCertificates:
    """Leave TLS verification to git's configured defaults."""

    name: str = "verify"

    def git_config(self) -> tuple[tuple[str, str], ...]:
        return ()


def certificate_policy(check: CertificateCheck) -> CertificatePolicy:
    if check == "verify":
        return VerifyCertificates()
    return BypassCertificateCheck()


def _agent_socket(environ: Mapping[str, str]) -> str | None:
    sock = environ.get("SSH_AUTH_SOCK", "").strip()
    return sock or None


@dataclass(frozen=True, slots=True)
class SshAgentAuth:
    """Sign with keys from the running ssh agent, never prompting."""

    name: str = "ssh-agent"
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def prepare(self, remote: Remote) -> Result[None, ReleaseError]:
        if remote.is_ssh and _agent_socket(self.environ) is None:
            return Err(
                ReleaseError(
                    kind="remote_auth_failure",
                    message=f"no ssh agent available for {remote.url}",
                    hint="Start ssh-agent and ssh-add your key (SSH_AUTH_SOCK is not set).",
                )
            )
        return Ok(None)

    def git_config(self) -> tuple[tuple[str, str], ...]:
        return ()

    def env(self) -> dict[str, str]:
        # Keep the user's ssh command (keys, ports) and only forbid prompts.
        command = self.environ.get("GIT_SSH_COMMAND", "").strip() or "ssh"
        if "BatchMode" not in command:
            command += " -o BatchMode=yes"
        return {"GIT_TERMINAL_PROMPT": "0", "GIT_SSH_COMMAND": command}


@dataclass(frozen=True, slots=True)
class UserPassAuth:
    """Plaintext username/password served by an inline credential helper."""

    credentials: PlaintextUserPass
    name: str = "userpass"

    def prepare(self, remote: Remote) -> Result[None, ReleaseError]:
        return Ok(None)

    def git_config(self) -> tuple[tuple[str, str], ...]:
        # The empty value resets helpers from user config so only ours answers.
        return (("credential.helper", ""), ("credential.helper", _ENV_CREDENTIAL_HELPER))

    def env(self) -> dict[str, str]:
        return {
            "GIT_TERMINAL_PROMPT": "0",
            _USERNAME_VAR: self.credentials.username,
            _PASSWORD_VAR: self.credentials.password,
        }


def auth_for(credentials: Credentials) -> AuthStrategy:
    """Plaintext credentials when resolved, otherwise the ssh agent."""
    if isinstance(credentials, PlaintextUserPass):
        return UserPassAuth(credentials=credentials)
    return SshAgentAuth()


@dataclass(frozen=True, slots=True)
class GitTransport:
    """Everything a clone or push needs to authenticate."""

    auth: AuthStrategy
    certificates: CertificatePolicy

    def git_config(self) -> tuple[tuple[str, str], ...]:
        return (*self.certificates.git_config(), *self.auth.git_config())

    def env(self) -> dict[str, str]:
        return self.auth.env()


def transport_for(
    remote: Remote,
    credentials: Credentials,
    *,
    certificate_check: CertificateCheck = "bypass",
) -> Result[GitTransport, ReleaseError]:
    auth = auth_for(credentials)
    ready = auth.prepare(remote)
    if isinstance(ready, Err):
        return ready
    return Ok(GitTransport(auth=auth, certificates=certificate_policy(certificate_check)))
