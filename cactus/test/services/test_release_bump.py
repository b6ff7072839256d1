"""Tests for the command-based version bump."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

import cactus.git.repository as repository_mod
import cactus.services.release.bump as bump_mod
from cactus.core.config import DEFAULT_BUMP_COMMAND
from cactus.core.result import Err, Ok
from cactus.platform.process import ProcessError
from cactus.services.release.bump import CommandVersionBump, render_command
from cactus.services.release.model import BumpOutcome


class TestRenderCommand:
    def test_default_with_preid(self) -> None:
        cmd = render_command(DEFAULT_BUMP_COMMAND, level="prerelease", pre_id="beta")
        assert cmd == ["npm", "version", "prerelease", "--preid=beta", "-m", "Release v%s"]

    def test_default_without_preid(self) -> None:
        cmd = render_command(DEFAULT_BUMP_COMMAND, level="minor", pre_id=None)
        assert cmd == ["npm", "version", "minor", "-m", "Release v%s"]


def _write_version(root: Path, version: str) -> None:
    (root / "package.json").write_text(json.dumps({"version": version}), encoding="utf-8")


class TestCommandVersionBump:
    def test_reports_new_version_and_commit(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_version(tmp_path, "1.2.3")
        ran: list[list[str]] = []

        def fake_bump(cmd, cwd, env=None, *, timeout=None, input=None):
            ran.append(cmd)
            _write_version(cwd, "1.3.0")
            return Ok("v1.3.0\n")

        monkeypatch.setattr(bump_mod, "run_process", fake_bump)
        monkeypatch.setattr(repository_mod, "run_process", lambda *a, **k: Ok("abc123\n"))

        result = CommandVersionBump().bump(tmp_path, "minor")

        assert result == Ok(BumpOutcome(new_version="1.3.0", commit_id="abc123"))
        assert ran == [["npm", "version", "minor", "-m", "Release v%s"]]

    def test_custom_command(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nversion = "0.2.0"\n', encoding="utf-8"
        )
        ran: list[list[str]] = []

        def fake_bump(cmd, cwd, env=None, *, timeout=None, input=None):
            ran.append(cmd)
            return Ok("")

        monkeypatch.setattr(bump_mod, "run_process", fake_bump)
        monkeypatch.setattr(repository_mod, "run_process", lambda *a, **k: Ok("def456\n"))

        tool = CommandVersionBump(["bump-my-version", "bump", "{level}"], manifest="pyproject.toml")
        result = tool.bump(tmp_path, "patch")

        assert isinstance(result, Ok)
        assert ran == [["bump-my-version", "bump", "patch"]]
        assert result.value.new_version == "0.2.0"

    def test_command_failure(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        failure = Err(
            ProcessError(
                command=("npm",), returncode=1, stdout="", stderr="npm ERR! Git working directory not clean."
            )
        )
        monkeypatch.setattr(bump_mod, "run_process", lambda *a, **k: failure)

        result = CommandVersionBump().bump(tmp_path, "minor")

        assert isinstance(result, Err)
        assert result.error.kind == "bump_failed"
        assert "not clean" in (result.error.hint or "")
