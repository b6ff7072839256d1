"""Human sign-off on the commits a release would publish.

The gate is fail-closed: anything other than an explicit "yes" (no answer,
EOF, Ctrl-C, a non-interactive stdin) rejects the release.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence

import typer

from cactus.output.console import ConsoleProtocol, Style
from cactus.services.release.model import CommitLogEntry, ReviewDecision

Confirm = Callable[[str], bool]

REVIEW_QUESTION = "Does the commit log look good?"
DEFAULT_MAX_COMMITS = 200


def format_commit_line(commit: CommitLogEntry) -> str:
    return f"[{commit.timestamp.isoformat()}] ({commit.author}) {commit.subject}"


def render_commit_log(
    commits: Sequence[CommitLogEntry],
    *,
    range_label: str,
    console: ConsoleProtocol,
    max_commits: int = DEFAULT_MAX_COMMITS,
) -> None:
    console.rule(f"--- START COMMIT LOG {range_label} ---")
    if not commits:
        console.print("(no commits in range)", Style.DIM)
    for commit in commits[:max_commits]:
        console.print(format_commit_line(commit))
    hidden = len(commits) - max_commits
    if hidden > 0:
        console.print(f"... {hidden} more commits", Style.DIM)
    console.rule(f"--- END COMMIT LOG {range_label} ---")


def prompt_confirm(question: str) -> bool:
    """Ask on the terminal; default and every non-answer is "no"."""
    if not sys.stdin.isatty():
        return False
    try:
        return typer.confirm(question, default=False)
    except typer.Abort:
        return False


def review_commits(
    commits: Sequence[CommitLogEntry],
    *,
    range_label: str,
    console: ConsoleProtocol,
    confirm: Confirm = prompt_confirm,
    max_commits: int = DEFAULT_MAX_COMMITS,
) -> ReviewDecision:
    render_commit_log(commits, range_label=range_label, console=console, max_commits=max_commits)
    if confirm is prompt_confirm and not sys.stdin.isatty():
        console.warning("stdin is not interactive; treating review as rejected")
        return ReviewDecision(approved=False)
    return ReviewDecision(approved=confirm(REVIEW_QUESTION) is True)
