"""Process execution and file locking."""

from gitrelease.platform.locking import FileLock, LockError, acquire_lock
from gitrelease.platform.process import ProcessError, run, run_silent

__all__ = [
    "FileLock",
    "LockError",
    "ProcessError",
    "acquire_lock",
    "run",
    "run_silent",
]
