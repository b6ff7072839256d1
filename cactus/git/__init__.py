"""Git operations module.

Usage:
    from cactus.git import Repository

    repo = Repository(Path("/path/to/repo"))
    url = repo.remote_url("origin")
    if isinstance(url, Ok):
        print(url.value)
"""

from cactus.git.remote import Remote, RemoteProtocol, infer_protocol
from cactus.git.repository import GitError, Repository, clone

__all__ = [
    "GitError",
    "Remote",
    "RemoteProtocol",
    "Repository",
    "clone",
    "infer_protocol",
]
