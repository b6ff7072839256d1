"""Tests for the commit review gate."""

from __future__ import annotations

import sys
from datetime import datetime, timezone

import pytest
import typer

import cactus.services.release.review as review_mod
from cactus.output.console import MockConsole, Style
from cactus.services.release.model import CommitLogEntry
from cactus.services.release.review import (
    REVIEW_QUESTION,
    format_commit_line,
    prompt_confirm,
    render_commit_log,
    review_commits,
)


class FakeStdin:
    def __init__(self, tty: bool) -> None:
        self._tty = tty

    def isatty(self) -> bool:
        return self._tty


def make_commit(n: int, author: str = "Ada") -> CommitLogEntry:
    return CommitLogEntry(
        sha=f"{n:040x}",
        message=f"change number {n}\n\ndetails",
        author=author,
        committer=author,
        timestamp=datetime(2024, 1, 1, 12, 0, n % 60, tzinfo=timezone.utc),
    )


class TestRender:
    def test_markers_frame_the_log(self) -> None:
        console = MockConsole()
        render_commit_log([make_commit(1)], range_label="v1.0.0..master", console=console)

        assert console.messages[0] == "--- START COMMIT LOG v1.0.0..master ---"
        assert console.messages[-1] == "--- END COMMIT LOG v1.0.0..master ---"
        assert console.count(Style.RULE) == 2
        assert console.messages[1] == "[2024-01-01T12:00:01+00:00] (Ada) change number 1"

    def test_empty_range(self) -> None:
        console = MockConsole()
        render_commit_log([], range_label="v1.0.0..master", console=console)
        assert "(no commits in range)" in console.messages

    def test_long_log_is_truncated(self) -> None:
        console = MockConsole()
        commits = [make_commit(n) for n in range(12)]
        render_commit_log(commits, range_label="a..b", console=console, max_commits=5)

        assert len(console.find("change number")) == 5
        assert "... 7 more commits" in console.messages

    def test_format_uses_subject_only(self) -> None:
        line = format_commit_line(make_commit(3, author="Grace"))
        assert line.endswith("(Grace) change number 3")
        assert "details" not in line


class TestReviewCommits:
    def test_approval(self) -> None:
        questions: list[str] = []

        def confirm(question: str) -> bool:
            questions.append(question)
            return True

        decision = review_commits(
            [make_commit(1)], range_label="a..b", console=MockConsole(), confirm=confirm
        )
        assert decision.approved
        assert questions == [REVIEW_QUESTION]

    def test_rejection(self) -> None:
        decision = review_commits(
            [make_commit(1)], range_label="a..b", console=MockConsole(), confirm=lambda _: False
        )
        assert not decision.approved

    def test_log_is_shown_before_the_question(self) -> None:
        console = MockConsole()
        shown: list[int] = []

        def confirm(_: str) -> bool:
            shown.append(len(console.outputs))
            return True

        review_commits([make_commit(1)], range_label="a..b", console=console, confirm=confirm)
        assert shown == [3]

    def test_non_interactive_stdin_rejects(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", FakeStdin(tty=False))
        console = MockConsole()
        decision = review_commits([make_commit(1)], range_label="a..b", console=console)

        assert not decision.approved
        assert console.has_warning()


class TestPromptConfirm:
    def test_not_a_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", FakeStdin(tty=False))
        assert prompt_confirm("ok?") is False

    def test_abort_is_no(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def aborting(*_args: object, **_kwargs: object) -> bool:
            raise typer.Abort()

        monkeypatch.setattr(sys, "stdin", FakeStdin(tty=True))
        monkeypatch.setattr(review_mod.typer, "confirm", aborting)
        assert prompt_confirm("ok?") is False

    def test_yes(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "stdin", FakeStdin(tty=True))
        monkeypatch.setattr(review_mod.typer, "confirm", lambda *a, **k: True)
        assert prompt_confirm("ok?") is True
