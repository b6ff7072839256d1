from __future__ import annotations

import re

from semver import Version

from cactus.core.result import Err, Ok, Result
from cactus.release.errors import ReleaseError
from cactus.services.release.model import RELEASE_LEVELS, ReleaseLevel, VersionTransition

_PRE_ID_RE = re.compile(r"^[0-9A-Za-z-]+$")
_DIGIT_RE = re.compile(r"\d")
_PRERELEASE_LEVELS = frozenset({"premajor", "preminor", "prerelease"})


def _invalid(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="invalid_version_input", message=message, hint=hint))


def parse_version(raw: str) -> Result[Version, ReleaseError]:
    text = raw.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    try:
        return Ok(Version.parse(text))
    except (TypeError, ValueError):
        return _invalid(
            f"not a semantic version: {raw!r}",
            hint="Expected MAJOR.MINOR.PATCH[-PRERELEASE] in the project manifest.",
        )


def _first_prerelease(pre_id: str | None) -> str:
    return f"{pre_id}.0" if pre_id else "0"


def _next_prerelease(current: Version, pre_id: str | None) -> Version:
    if current.prerelease is None:
        return current.bump_patch().replace(prerelease=_first_prerelease(pre_id))
    if pre_id and current.prerelease.split(".")[0] != pre_id:
        return current.replace(prerelease=_first_prerelease(pre_id))
    if not _DIGIT_RE.search(current.prerelease):
        return current.replace(prerelease=f"{current.prerelease}.0")
    return current.bump_prerelease()


def _increment(current: Version, level: ReleaseLevel, pre_id: str | None) -> Version:
    # Same rules as `npm version`, the default bump tool, so the planned
    # version is the one the bump actually writes.
    match level:
        case "major" | "minor" | "patch":
            return current.next_version(part=level)
        case "premajor":
            return current.bump_major().replace(prerelease=_first_prerelease(pre_id))
        case "preminor":
            return current.bump_minor().replace(prerelease=_first_prerelease(pre_id))
        case "prerelease":
            return _next_prerelease(current, pre_id)


def minor_version_label(version: Version) -> str:
    return f"v{version.major}.{version.minor}"


def release_branch_name(version: Version) -> str:
    name = f"release-{minor_version_label(version)}"
    if version.prerelease:
        name += f"-{version.prerelease.split('.')[0]}"
    return name


def plan_version(
    current_version: str,
    level: str,
    pre_id: str | None = None,
) -> Result[VersionTransition, ReleaseError]:
    """Compute the next version for ``level`` and the names derived from it.

    Increments follow semver rules: a prerelease of the target version is
    finalized rather than skipped (``1.3.0-rc.1`` + minor is ``1.3.0``), and
    ``pre_id`` names the prerelease identifier for the pre* levels (bare
    numeric ``-0`` without one). Pure: identical inputs always give identical
    transitions.
    """
    if level not in RELEASE_LEVELS:
        return _invalid(
            f"unknown release level: {level!r}",
            hint=f"Expected one of: {', '.join(RELEASE_LEVELS)}",
        )
    lvl: ReleaseLevel = level  # pyright: ignore[reportAssignmentType]

    if pre_id is not None and not _PRE_ID_RE.match(pre_id):
        return _invalid(
            f"invalid prerelease id: {pre_id!r}",
            hint="Use letters, digits and hyphens only (e.g. beta, rc).",
        )

    parsed = parse_version(current_version)
    if isinstance(parsed, Err):
        return parsed
    current = parsed.value

    nxt = _increment(current, lvl, pre_id if lvl in _PRERELEASE_LEVELS else None)
    if not nxt > current:
        return _invalid(f"{level} increment of {current} did not produce a higher version")

    return Ok(
        VersionTransition(
            current_version=str(current),
            level=lvl,
            pre_id=pre_id if lvl in _PRERELEASE_LEVELS else None,
            next_version=str(nxt),
            minor_version_label=minor_version_label(nxt),
            release_branch_name=release_branch_name(nxt),
        )
    )
