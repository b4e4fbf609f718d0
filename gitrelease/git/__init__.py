"""Git operations.

Usage:
    from gitrelease.git import Repository

    repo = Repository(Path("/path/to/repo"))
    match repo.status():
        case Ok(status):
            print(f"Branch: {status.branch}")
        case Err(e):
            print(e.output)
"""

from gitrelease.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]
