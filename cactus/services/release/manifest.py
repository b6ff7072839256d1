"""Read the version recorded in a project manifest.

The manifest is the single source of truth for the current version:
``package.json`` (top-level ``version``) or ``pyproject.toml``
(``[project].version``, falling back to ``[tool.poetry].version``).
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

from cactus.core.result import Err, Ok, Result
from cactus.core.structured import StrDict, as_str_dict, get_str, get_table
from cactus.release.errors import ReleaseError


def _manifest_error(path: Path, message: str) -> Err[ReleaseError]:
    return Err(
        ReleaseError(
            kind="manifest_invalid",
            message=f"{path.name}: {message}",
            hint=f"Set `manifest` in .cactus.toml if the version lives elsewhere ({path}).",
        )
    )


def _load(path: Path) -> Result[StrDict, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return _manifest_error(path, "manifest not found")
    except (OSError, UnicodeDecodeError) as e:
        return _manifest_error(path, f"cannot read manifest: {e}")

    try:
        if path.suffix == ".toml":
            data_obj: object = tomllib.loads(text)
        else:
            data_obj = json.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        return _manifest_error(path, f"invalid syntax: {e}")

    data = as_str_dict(data_obj)
    if data is None:
        return _manifest_error(path, "manifest root must be an object/table")
    return Ok(data)


def read_manifest_version(path: Path) -> Result[str, ReleaseError]:
    loaded = _load(path)
    if isinstance(loaded, Err):
        return loaded
    data = loaded.value

    if path.suffix == ".toml":
        project: StrDict = get_table(data, "project") or {}
        poetry: StrDict = get_table(get_table(data, "tool") or {}, "poetry") or {}
        version = get_str(project, "version") or get_str(poetry, "version")
    else:
        version = get_str(data, "version")

    if version is None:
        return _manifest_error(path, "no version recorded")
    return Ok(version)
