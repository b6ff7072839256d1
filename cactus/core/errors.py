"""Process exit codes of ``git-cactus``.

Scripts branch on these, so the numbers must not change.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0  # release published
    USER_ERROR = 1  # bad level or unusable version input
    ENV_ERROR = 2  # credential helper, config, manifest, bump tool
    NETWORK_ERROR = 4  # auth, clone, push
    IO_ERROR = 5  # reading repository history
    ABORTED = 6  # reviewer said no
