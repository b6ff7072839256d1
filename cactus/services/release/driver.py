"""The two release workflows.

Both follow the same shape: resolve auth, (clone,) plan, list commits,
review, bump, then publish only if the reviewer approved.

``cut`` works in a throwaway clone, so a rejection leaves nothing behind.
``tag`` bumps the caller's own checkout before the review, so a rejection
leaves the bump commit and tag in place for the maintainer to undo.

Neither workflow locks the repository: running two of them against the same
checkout at once is unsupported.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from cactus.core.config import ReleaseConfig
from cactus.core.result import Err, Ok, Result
from cactus.git.remote import Remote
from cactus.git.repository import Repository
from cactus.output.console import ConsoleProtocol
from cactus.release.contracts import CutRequest, ReleaseResult, TagRequest
from cactus.release.errors import ReleaseError
from cactus.services.release.auth import GitTransport, transport_for
from cactus.services.release.bump import CommandVersionBump, VersionBumpTool
from cactus.services.release.clone import clone_repository
from cactus.services.release.credentials import (
    CredentialHelper,
    GitCredentialHelper,
    resolve_credentials,
    resolve_remote,
)
from cactus.services.release.history import commit_range, list_commits
from cactus.services.release.manifest import read_manifest_version
from cactus.services.release.model import (
    PushPlan,
    PushReport,
    RefSpec,
    VersionTransition,
    branch_ref,
    tag_ref,
)
from cactus.services.release.planner import plan_version
from cactus.services.release.publish import push_refs
from cactus.services.release.review import Confirm, prompt_confirm, review_commits

DONE = "Done!"
CUT_ABORTED = "Aborted branch cut! Phew, that was a close one..."
TAG_ABORTED = "Aborted push! Local changes not reverted, you must now do surgery!"

_SCRATCH_PREFIX = "cactus-cut-"
_CLONE_DIRNAME = "repo"


def cut_plan(mainline: str, transition: VersionTransition) -> PushPlan:
    """mainline -> mainline, mainline -> release branch, new tag -> new tag."""
    return PushPlan(
        refspecs=(
            RefSpec(branch_ref(mainline), branch_ref(mainline)),
            RefSpec(branch_ref(mainline), branch_ref(transition.release_branch_name)),
            RefSpec(tag_ref(transition.next_tag), tag_ref(transition.next_tag)),
        )
    )


def tag_plan(transition: VersionTransition) -> PushPlan:
    """release branch -> release branch, new tag -> new tag."""
    branch = branch_ref(transition.release_branch_name)
    return PushPlan(
        refspecs=(
            RefSpec(branch, branch),
            RefSpec(tag_ref(transition.next_tag), tag_ref(transition.next_tag)),
        )
    )


def _prepare_transport(
    repo_root: Path,
    upstream: str,
    *,
    config: ReleaseConfig,
    helper: CredentialHelper | None,
) -> Result[tuple[Remote, GitTransport], ReleaseError]:
    remote = resolve_remote(repo_root, upstream)
    if isinstance(remote, Err):
        return remote

    credentials = resolve_credentials(
        remote.value, helper=helper or GitCredentialHelper(repo_root)
    )
    if isinstance(credentials, Err):
        return credentials

    transport = transport_for(
        remote.value, credentials.value, certificate_check=config.certificate_check
    )
    if isinstance(transport, Err):
        return transport
    return Ok((remote.value, transport.value))


def _plan_from_manifest(
    repo_root: Path,
    *,
    config: ReleaseConfig,
    level: str,
    pre_id: str | None,
) -> Result[VersionTransition, ReleaseError]:
    current = read_manifest_version(repo_root / config.manifest)
    if isinstance(current, Err):
        return current
    return plan_version(current.value, level, pre_id)


def _run_bump(
    bump_tool: VersionBumpTool,
    repo_root: Path,
    transition: VersionTransition,
) -> Result[None, ReleaseError]:
    bumped = bump_tool.bump(repo_root, transition.level, transition.pre_id)
    if isinstance(bumped, Err):
        return bumped
    if bumped.value.new_version != transition.next_version:
        return Err(
            ReleaseError(
                kind="bump_failed",
                message=(
                    f"bump tool wrote {bumped.value.new_version}, "
                    f"expected {transition.next_version}"
                ),
                hint="The bump tool and the planned release disagree; nothing was pushed.",
            )
        )
    return Ok(None)


def _published(summary: str, report: PushReport) -> ReleaseResult:
    return ReleaseResult.published(
        summary, details=tuple(f"published: {ref}" for ref in report.accepted)
    )


def _cut_in_clone(
    clone_root: Path,
    remote: Remote,
    transport: GitTransport,
    request: CutRequest,
    *,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    bump_tool: VersionBumpTool,
    confirm: Confirm,
) -> Result[ReleaseResult, ReleaseError]:
    cloned = clone_repository(
        remote, clone_root, transport, branch=config.mainline, console=console
    )
    if isinstance(cloned, Err):
        return cloned

    transition = _plan_from_manifest(
        clone_root, config=config, level=request.level, pre_id=request.pre_id
    )
    if isinstance(transition, Err):
        return transition
    t = transition.value
    console.info(f"Incrementing {t.current_version} to {t.next_version}")
    console.info(f"Cutting branch {t.release_branch_name}")

    commits = list_commits(clone_root, t.current_tag, config.mainline)
    if isinstance(commits, Err):
        return commits

    decision = review_commits(
        commits.value,
        range_label=commit_range(t.current_tag, config.mainline),
        console=console,
        confirm=confirm,
        max_commits=config.max_review_commits,
    )

    bumped = _run_bump(bump_tool, clone_root, t)
    if isinstance(bumped, Err):
        return bumped

    if not decision.approved:
        return Ok(ReleaseResult.aborted(CUT_ABORTED))

    console.info(f"Pushing branch {t.release_branch_name} & tag {t.next_tag}")
    origin = Remote(name="origin", url=remote.url)
    pushed = push_refs(
        clone_root,
        origin,
        cut_plan(config.mainline, t),
        transport,
        console=console,
        atomic=config.atomic_push,
    )
    if isinstance(pushed, Err):
        return pushed
    return Ok(_published(DONE, pushed.value))


def cut_release_branch(
    request: CutRequest,
    *,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    bump_tool: VersionBumpTool | None = None,
    confirm: Confirm = prompt_confirm,
    helper: CredentialHelper | None = None,
) -> ReleaseResult:
    """Cut ``release-vX.Y`` from the upstream mainline.

    The work happens in a fresh clone inside a temporary directory that is
    removed however the workflow ends.
    """
    prepared = _prepare_transport(
        request.repo_root, request.upstream, config=config, helper=helper
    )
    if isinstance(prepared, Err):
        return ReleaseResult.failed(prepared.error)
    remote, transport = prepared.value

    tool = bump_tool or CommandVersionBump(config.bump_command, manifest=config.manifest)
    with tempfile.TemporaryDirectory(prefix=_SCRATCH_PREFIX) as scratch:
        outcome = _cut_in_clone(
            Path(scratch) / _CLONE_DIRNAME,
            remote,
            transport,
            request,
            config=config,
            console=console,
            bump_tool=tool,
            confirm=confirm,
        )

    if isinstance(outcome, Err):
        return ReleaseResult.failed(outcome.error)
    return outcome.value


def _tag_in_place(
    request: TagRequest,
    remote: Remote,
    transport: GitTransport,
    *,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    bump_tool: VersionBumpTool,
    confirm: Confirm,
) -> Result[ReleaseResult, ReleaseError]:
    repo_root = request.repo_root
    transition = _plan_from_manifest(repo_root, config=config, level="patch", pre_id=None)
    if isinstance(transition, Err):
        return transition
    t = transition.value

    branch = Repository(repo_root).current_branch()
    if branch != t.release_branch_name:
        console.warning(
            f"checked out {branch or '(detached HEAD)'}, "
            f"but {t.next_version} belongs on {t.release_branch_name}"
        )

    console.info(f"Tagging version {t.next_version}")
    bumped = _run_bump(bump_tool, repo_root, t)
    if isinstance(bumped, Err):
        return bumped

    commits = list_commits(repo_root, t.current_tag, t.next_tag)
    if isinstance(commits, Err):
        return commits

    decision = review_commits(
        commits.value,
        range_label=commit_range(t.current_tag, t.next_tag),
        console=console,
        confirm=confirm,
        max_commits=config.max_review_commits,
    )
    if not decision.approved:
        return Ok(
            ReleaseResult.aborted(
                TAG_ABORTED,
                hint=f"git tag -d {t.next_tag} && git reset --hard HEAD~1",
            )
        )

    console.info(f"Pushing tagged version {t.next_version}")
    pushed = push_refs(
        repo_root,
        remote,
        tag_plan(t),
        transport,
        console=console,
        atomic=config.atomic_push,
    )
    if isinstance(pushed, Err):
        return pushed
    return Ok(_published(DONE, pushed.value))


def tag_release(
    request: TagRequest,
    *,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    bump_tool: VersionBumpTool | None = None,
    confirm: Confirm = prompt_confirm,
    helper: CredentialHelper | None = None,
) -> ReleaseResult:
    """Tag the next patch version on the checked-out release branch."""
    prepared = _prepare_transport(
        request.repo_root, request.upstream, config=config, helper=helper
    )
    if isinstance(prepared, Err):
        return ReleaseResult.failed(prepared.error)
    remote, transport = prepared.value

    tool = bump_tool or CommandVersionBump(config.bump_command, manifest=config.manifest)
    outcome = _tag_in_place(
        request,
        remote,
        transport,
        config=config,
        console=console,
        bump_tool=tool,
        confirm=confirm,
    )
    if isinstance(outcome, Err):
        return ReleaseResult.failed(outcome.error)
    return outcome.value
