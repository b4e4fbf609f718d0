from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from gitrelease.git.repository import GitError

ReleaseErrorKind = Literal[
    "not_a_git_repository",
    "sync_failure",
    "unpushed_commits",
    "dirty_working_copy",
    "tag_already_exists",
    "unreleased_dependency",
    "clone_failure",
    "publish_failure",
    "tag_failure",
    "build_failure",
    "checksum_failure",
    "upload_failure",
    "lock_failure",
    "invalid_config",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    # Captured output of the failing command, shown to the operator
    output: str | None = None

    @classmethod
    def from_git(cls, kind: ReleaseErrorKind, message: str, e: GitError) -> ReleaseError:
        return cls(kind=kind, message=message, output=e.output.strip() or None)
