"""Error presentation utilities.

Centralized release error formatting and exit code mapping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitrelease.core.errors import ErrorCode
from gitrelease.output.console import Style
from gitrelease.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from gitrelease.output.console import ConsoleProtocol

__all__ = ["print_release_error", "release_error_exit_code"]

_HINTS: dict[str, str] = {
    "dirty_working_copy": "Commit or stash your changes, or pass --dirty.",
    "unpushed_commits": "Push your local commits, then retry.",
    "tag_already_exists": "Bump the project version in release.toml.",
    "unreleased_dependency": "Depend on released versions only.",
    "lock_failure": "Wait for the other release to finish.",
}


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a release error, the captured command output and a hint."""
    console.error(error.message)
    if error.output:
        console.print("output:", Style.DIM)
        for line in error.output.splitlines():
            console.print(f"  {line}", Style.DIM)
    hint = _HINTS.get(error.kind)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "invalid_config":
            return int(ErrorCode.USER_ERROR)
        case "not_a_git_repository" | "unpushed_commits" | "dirty_working_copy":
            return int(ErrorCode.ENV_ERROR)
        case "build_failure" | "checksum_failure" | "upload_failure":
            return int(ErrorCode.BUILD_ERROR)
        case "sync_failure" | "clone_failure" | "publish_failure" | "tag_failure":
            return int(ErrorCode.NETWORK_ERROR)
        case "tag_already_exists" | "unreleased_dependency" | "lock_failure":
            return int(ErrorCode.RELEASE_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.RELEASE_ERROR)
