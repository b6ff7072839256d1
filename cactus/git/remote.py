"""Remote descriptors and URL protocol inference."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

RemoteProtocol = Literal["ssh", "https", "local"]

_SSH_PREFIXES = ("git@", "ssh://", "git://", "git+ssh://", "ssh+git://")
_HTTPS_PREFIXES = ("https://", "http://")
# scp-like syntax: [user@]host:path, but not a Windows drive letter (C:\repo)
_SCP_LIKE_RE = re.compile(r"^(?:[^@/:\s]+@)?[^@/:\s]{2,}:(?!//)")


@dataclass(frozen=True, slots=True)
class Remote:
    """A configured git remote."""

    name: str
    url: str

    @property
    def protocol(self) -> RemoteProtocol:
        return infer_protocol(self.url)

    @property
    def is_ssh(self) -> bool:
        return self.protocol == "ssh"

    @property
    def is_https(self) -> bool:
        return self.protocol == "https"


def infer_protocol(url: str) -> RemoteProtocol:
    """Classify a remote URL by its prefix.

    Anything that is neither an http(s) URL, an ssh-style URL nor scp-like
    shorthand is treated as a local path (including ``file://``).
    """
    u = url.strip()
    lowered = u.lower()
    if lowered.startswith(_HTTPS_PREFIXES):
        return "https"
    if lowered.startswith(_SSH_PREFIXES):
        return "ssh"
    if lowered.startswith("file://"):
        return "local"
    if _SCP_LIKE_RE.match(u):
        return "ssh"
    return "local"
