"""Tests for authentication strategies and certificate policies."""

from __future__ import annotations

from cactus.core.result import Err, Ok
from cactus.git.remote import Remote
from cactus.services.release.auth import (
    BypassCertificateCheck,
    GitTransport,
    SshAgentAuth,
    UserPassAuth,
    VerifyCertificates,
    auth_for,
    certificate_policy,
    transport_for,
)
from cactus.services.release.credentials import NoCredentials, PlaintextUserPass

SSH_REMOTE = Remote(name="origin", url="git@github.com:acme/widget.git")
HTTPS_REMOTE = Remote(name="origin", url="https://github.com/acme/widget.git")


class TestCertificatePolicy:
    def test_bypass_is_default(self) -> None:
        policy = certificate_policy("bypass")
        assert isinstance(policy, BypassCertificateCheck)
        assert policy.git_config() == (("http.sslVerify", "false"),)

    def test_verify_adds_nothing(self) -> None:
        policy = certificate_policy("verify")
        assert isinstance(policy, VerifyCertificates)
        assert policy.git_config() == ()


class TestSshAgentAuth:
    def test_requires_agent_for_ssh(self) -> None:
        result = SshAgentAuth(environ={}).prepare(SSH_REMOTE)
        assert isinstance(result, Err)
        assert result.error.kind == "remote_auth_failure"
        assert "SSH_AUTH_SOCK" in (result.error.hint or "")

    def test_agent_present(self) -> None:
        auth = SshAgentAuth(environ={"SSH_AUTH_SOCK": "/tmp/agent.sock"})
        assert auth.prepare(SSH_REMOTE) == Ok(None)

    def test_local_remote_needs_no_agent(self) -> None:
        local = Remote(name="origin", url="/srv/git/widget.git")
        assert SshAgentAuth(environ={}).prepare(local) == Ok(None)

    def test_never_prompts(self) -> None:
        env = SshAgentAuth(environ={}).env()
        assert env["GIT_TERMINAL_PROMPT"] == "0"
        assert env["GIT_SSH_COMMAND"] == "ssh -o BatchMode=yes"

    def test_keeps_existing_ssh_command(self) -> None:
        auth = SshAgentAuth(environ={"GIT_SSH_COMMAND": "ssh -i ~/.ssh/release_key -p 2222"})
        assert auth.env()["GIT_SSH_COMMAND"] == (
            "ssh -i ~/.ssh/release_key -p 2222 -o BatchMode=yes"
        )

    def test_existing_batch_mode_not_duplicated(self) -> None:
        auth = SshAgentAuth(environ={"GIT_SSH_COMMAND": "ssh -o BatchMode=yes -i key"})
        assert auth.env()["GIT_SSH_COMMAND"] == "ssh -o BatchMode=yes -i key"


class TestUserPassAuth:
    def test_secret_only_in_env(self) -> None:
        auth = UserPassAuth(PlaintextUserPass(username="bot", password="hunter2"))
        config = auth.git_config()

        assert all("hunter2" not in value for _, value in config)
        assert config[0] == ("credential.helper", "")
        assert auth.env()["CACTUS_GIT_PASSWORD"] == "hunter2"
        assert auth.env()["CACTUS_GIT_USERNAME"] == "bot"


class TestTransport:
    def test_auth_for(self) -> None:
        assert isinstance(auth_for(NoCredentials()), SshAgentAuth)
        assert isinstance(
            auth_for(PlaintextUserPass(username="bot", password="x")), UserPassAuth
        )

    def test_transport_combines_config(self) -> None:
        result = transport_for(
            HTTPS_REMOTE,
            PlaintextUserPass(username="bot", password="x"),
            certificate_check="bypass",
        )
        assert isinstance(result, Ok)
        transport = result.value
        assert isinstance(transport, GitTransport)
        assert transport.git_config()[0] == ("http.sslVerify", "false")
        assert ("credential.helper", "") in transport.git_config()
        assert transport.env()["GIT_TERMINAL_PROMPT"] == "0"

    def test_transport_fails_without_agent(self, monkeypatch) -> None:
        monkeypatch.delenv("SSH_AUTH_SOCK", raising=False)
        result = transport_for(SSH_REMOTE, NoCredentials())
        assert isinstance(result, Err)
        assert result.error.kind == "remote_auth_failure"
