"""Exclusive file lock around the shared artifact repository clone.

Two releases writing to the same clone would interleave pulls, copies and
commits. The lock is a non-blocking `fcntl.flock` on a sibling lock file, so
a second release fails fast instead of waiting.
"""

from __future__ import annotations

import fcntl
from dataclasses import dataclass
from pathlib import Path
from typing import IO, TYPE_CHECKING, Self

from gitrelease.core.result import Err, Ok, Result

if TYPE_CHECKING:
    import types

__all__ = ["FileLock", "LockError", "acquire_lock"]


@dataclass(frozen=True, slots=True)
class LockError:
    """Error when the lock cannot be acquired."""

    path: Path
    message: str


class FileLock:
    """A held lock. Release it with `release()` or use it as a context manager.

    Example:
        match acquire_lock(Path("/tmp/artifact-repo.lock")):
            case Ok(lock):
                with lock:
                    ...
            case Err(e):
                print(e.message)
    """

    def __init__(self, path: Path, handle: IO[str]) -> None:
        self.path = path
        self._handle: IO[str] | None = handle

    @property
    def held(self) -> bool:
        return self._handle is not None

    def release(self) -> None:
        """Release the lock. Safe to call more than once."""
        if self._handle is None:
            return
        fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        self._handle.close()
        self._handle = None

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.release()


def acquire_lock(path: Path) -> Result[FileLock, LockError]:
    """Take an exclusive non-blocking lock on `path`.

    Creates the parent directory if needed.

    Returns:
        Ok(FileLock) when acquired, Err(LockError) if another process holds it
        or the lock file cannot be opened.
    """
    handle: IO[str] | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handle = path.open("w", encoding="utf-8")
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
    except BlockingIOError:
        if handle is not None:
            handle.close()
        return Err(LockError(path=path, message=f"another release holds {path}"))
    except OSError as e:
        if handle is not None:
            handle.close()
        return Err(LockError(path=path, message=f"failed to acquire lock {path}: {e}"))

    return Ok(FileLock(path, handle))
