"""Publish a PushPlan to a remote and verify every ref landed.

git may accept some refs of a push and reject others, so the exit status
alone does not say what happened. The push runs with ``--porcelain`` and the
per-ref status lines decide the outcome. Accepted refs are never rolled back;
a partial failure is reported with both lists so the operator can repair it.
"""

from __future__ import annotations

from pathlib import Path

from cactus.core.result import Err, Ok, Result
from cactus.git.remote import Remote
from cactus.git.repository import Repository
from cactus.output.console import ConsoleProtocol, Style
from cactus.platform.process import merged_env
from cactus.release.errors import ReleaseError
from cactus.services.release.auth import GitTransport
from cactus.services.release.model import PushPlan, PushReport

_REJECTED_FLAG = "!"
_AUTH_MARKERS = (
    "authentication failed",
    "permission denied",
    "could not read username",
    "could not read password",
    "terminal prompts disabled",
    "invalid username or password",
    "host key verification failed",
)


def is_auth_error(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _AUTH_MARKERS)


def parse_porcelain(output: str) -> dict[str, tuple[str, str]]:
    """Map destination ref -> (flag, summary) from ``git push --porcelain``.

    Status lines look like ``<flag>\\t<src>:<dst>\\t<summary>``; the flag for a
    fast-forward is a single space, so lines must not be stripped first.
    """
    statuses: dict[str, tuple[str, str]] = {}
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 2 or len(parts[0]) != 1:
            continue
        flag, refs = parts[0], parts[1]
        if ":" not in refs:
            continue
        destination = refs.split(":", 1)[1]
        summary = parts[2].strip() if len(parts) > 2 else ""
        statuses[destination] = (flag, summary)
    return statuses


def build_report(plan: PushPlan, output: str) -> PushReport:
    statuses = parse_porcelain(output)
    accepted: list[str] = []
    rejected: list[str] = []
    reasons: dict[str, str] = {}

    for destination in plan.destinations:
        status = statuses.get(destination)
        if status is None:
            rejected.append(destination)
            reasons[destination] = "no status reported by remote"
            continue
        flag, summary = status
        if flag == _REJECTED_FLAG:
            rejected.append(destination)
            reasons[destination] = summary or "rejected"
        else:
            accepted.append(destination)

    return PushReport(accepted=tuple(accepted), rejected=tuple(rejected), reasons=reasons)


def push_refs(
    repo_root: Path,
    remote: Remote,
    plan: PushPlan,
    transport: GitTransport,
    *,
    console: ConsoleProtocol,
    atomic: bool = False,
) -> Result[PushReport, ReleaseError]:
    """Push every refspec of ``plan`` to ``remote`` in one request.

    Returns Ok only when every destination ref was accepted.
    """
    refspecs = [str(r) for r in plan.refspecs]
    for spec in refspecs:
        console.print(f"push {remote.name} {spec}", Style.DIM)

    result = Repository(repo_root).push(
        remote.name,
        refspecs,
        config=transport.git_config(),
        env=merged_env(transport.env()),
        atomic=atomic,
    )

    if isinstance(result, Ok):
        output = result.value
    else:
        output = result.error.stdout
        if not parse_porcelain(output):
            message = result.error.message
            if is_auth_error(message):
                return Err(
                    ReleaseError(
                        kind="remote_auth_failure",
                        message=f"authentication to {remote.url} failed",
                        hint=message,
                    )
                )
            return Err(
                ReleaseError(
                    kind="push_failure",
                    message=f"push to {remote.name} failed",
                    hint=message,
                    refs=plan.destinations,
                )
            )

    report = build_report(plan, output)
    if report.rejected:
        reasons = "; ".join(f"{ref}: {report.reasons[ref]}" for ref in report.rejected)
        accepted = ", ".join(report.accepted) or "none"
        return Err(
            ReleaseError(
                kind="push_failure",
                message=f"remote rejected {', '.join(report.rejected)}",
                hint=f"{reasons}. Already published (not rolled back): {accepted}",
                refs=report.rejected,
            )
        )
    return Ok(report)
