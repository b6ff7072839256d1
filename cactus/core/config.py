"""Typed release configuration.

An optional ``.cactus.toml`` at the repository root tunes the release
workflows. Every key has a default, so a repository without the file behaves
like the stock ``npm version`` flow:

    [release]
    upstream = "origin"
    mainline = "master"
    manifest = "package.json"
    certificate_check = "bypass"
    atomic_push = false
    max_review_commits = 200
    bump_command = ["npm", "version", "{level}", "--preid={preid}", "-m", "Release v%s"]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILENAME",
    "CertificateCheck",
    "ConfigError",
    "ReleaseConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = ".cactus.toml"

CertificateCheck = Literal["bypass", "verify"]

DEFAULT_UPSTREAM = "origin"
DEFAULT_MAINLINE = "master"
DEFAULT_MANIFEST = "package.json"
DEFAULT_MAX_REVIEW_COMMITS = 200
DEFAULT_BUMP_COMMAND: tuple[str, ...] = (
    "npm",
    "version",
    "{level}",
    "--preid={preid}",
    "-m",
    "Release v%s",
)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for the cut and tag workflows."""

    upstream: str = DEFAULT_UPSTREAM
    mainline: str = DEFAULT_MAINLINE
    manifest: str = DEFAULT_MANIFEST
    certificate_check: CertificateCheck = "bypass"
    atomic_push: bool = False
    max_review_commits: int = DEFAULT_MAX_REVIEW_COMMITS
    bump_command: tuple[str, ...] = DEFAULT_BUMP_COMMAND

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseConfig:
        """Create config from parsed TOML.

        Raises:
            ValueError: A key is present but holds an unusable value.
        """
        release: StrDict = get_table(data, "release") or {}

        check = get_str(release, "certificate_check") or "bypass"
        if check not in ("bypass", "verify"):
            raise ValueError(f"certificate_check must be 'bypass' or 'verify', got {check!r}")

        max_commits = get_int(release, "max_review_commits")
        if max_commits is not None and max_commits < 1:
            raise ValueError("max_review_commits must be >= 1")

        bump_command = get_str_list(release, "bump_command")
        if bump_command is not None and not bump_command:
            raise ValueError("bump_command must not be empty")

        atomic = get_bool(release, "atomic_push")

        return cls(
            upstream=get_str(release, "upstream") or DEFAULT_UPSTREAM,
            mainline=get_str(release, "mainline") or DEFAULT_MAINLINE,
            manifest=get_str(release, "manifest") or DEFAULT_MANIFEST,
            certificate_check="verify" if check == "verify" else "bypass",
            atomic_push=False if atomic is None else atomic,
            max_review_commits=max_commits or DEFAULT_MAX_REVIEW_COMMITS,
            bump_command=tuple(bump_command) if bump_command else DEFAULT_BUMP_COMMAND,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to ``.cactus.toml``

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ReleaseConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(repo_root: Path) -> Result[ReleaseConfig, ConfigError]:
    """Load ``.cactus.toml`` from a repository, defaulting when it is absent.

    A present but broken file is still an error: silently ignoring it would
    publish with settings the maintainer did not ask for.
    """
    path = repo_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(ReleaseConfig())
    return load_config(path)
