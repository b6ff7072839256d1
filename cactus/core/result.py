"""Ok/Err values for steps that can fail.

Release steps hand back ``Ok(value)`` or ``Err(error)``; the workflow driver
checks with ``isinstance(x, Err)`` and returns early, so a run always ends in
a single outcome.

Usage:
    remote = resolve_remote(repo_root, "origin")
    if isinstance(remote, Err):
        return remote
    print(remote.value.url)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E


Result: TypeAlias = Ok[T] | Err[E]
