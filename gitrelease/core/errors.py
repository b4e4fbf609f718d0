"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable:
- 0: Success
- 1: User error (bad flags, invalid manifest)
- 2: Environment error (not a git repository, dirty or unsynced working copy)
- 3: Build error (build command failed, checksum or upload failed)
- 4: Network error (pull, fetch, clone, push failed)
- 5: Release error (tag exists, unreleased dependency, lock held)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    BUILD_ERROR = 3
    NETWORK_ERROR = 4
    RELEASE_ERROR = 5
