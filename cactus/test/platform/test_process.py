"""Tests for cactus.platform.process."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

from cactus.core.result import Err, Ok
from cactus.platform.process import ProcessError, merged_env, run


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)
        assert isinstance(result, Ok)
        assert result.value.strip() == "hello"

    def test_input_is_written_to_stdin(self, tmp_path: Path) -> None:
        script = "import sys; print(sys.stdin.read().upper())"
        result = run([sys.executable, "-c", script], cwd=tmp_path, input="protocol=https\n")
        assert isinstance(result, Ok)
        assert "PROTOCOL=HTTPS" in result.value

    def test_failure_keeps_stdout_and_stderr(self, tmp_path: Path) -> None:
        script = "import sys; print('out'); print('bad', file=sys.stderr); sys.exit(3)"
        result = run([sys.executable, "-c", script], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stdout.strip() == "out"
        assert result.error.stderr.strip() == "bad"

    def test_missing_executable(self, tmp_path: Path) -> None:
        result = run(["definitely-not-a-real-binary-xyz"], cwd=tmp_path)
        assert isinstance(result, Err)
        assert result.error.returncode == -1

    @patch("subprocess.run")
    def test_timeout(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd=["git"], timeout=1.0)
        result = run(["git", "push"], cwd=tmp_path, timeout=1.0)
        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr


class TestProcessError:
    def test_str_truncates_long_commands(self) -> None:
        error = ProcessError(
            command=("git", "push", "--porcelain", "origin", "master"),
            returncode=1,
            stdout="",
            stderr="",
        )
        assert str(error) == "git push --porcelain ... failed (exit 1)"


class TestMergedEnv:
    def test_none_when_nothing_to_add(self) -> None:
        assert merged_env(None) is None
        assert merged_env({}) is None

    def test_overlays_current_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("CACTUS_TEST_BASE", "1")
        env = merged_env({"GIT_TERMINAL_PROMPT": "0"})
        assert env is not None
        assert env["CACTUS_TEST_BASE"] == "1"
        assert env["GIT_TERMINAL_PROMPT"] == "0"
