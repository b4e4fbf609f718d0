"""Git repository abstraction.

Wraps the git commands a release needs: status, pull, tag lookup and
creation, and the add/commit/push cycle of the artifact repository. All
operations return Result types; a failure carries the captured git output.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.status():
        case Ok(status):
            if status.ahead:
                print("unpushed commits")
        case Err(e):
            print(e.output)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from gitrelease.core.result import Err, Ok, Result
from gitrelease.platform.process import ProcessError
from gitrelease.platform.process import run as run_process

# Local operations (status, tag -l, tag -a, add)
GIT_TIMEOUT_SECONDS = 30.0
# Network-bound operations; commit is included because hooks may reach out
GIT_NETWORK_TIMEOUT_SECONDS = 20.0
GIT_CLONE_TIMEOUT_SECONDS = 15 * 60.0

_NETWORK_COMMANDS = frozenset({"pull", "fetch", "push", "commit"})

__all__ = [
    "GIT_CLONE_TIMEOUT_SECONDS",
    "GIT_NETWORK_TIMEOUT_SECONDS",
    "GIT_TIMEOUT_SECONDS",
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed (e.g. "pull", "push origin master")
        output: Captured stdout/stderr of the failed process
        returncode: Process return code
    """

    command: str
    output: str
    returncode: int = 1

    @classmethod
    def from_process(cls, command: str, e: ProcessError) -> GitError:
        return cls(
            command=command,
            output=e.output or f"git {command} failed",
            returncode=e.returncode,
        )


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"


@dataclass(frozen=True, slots=True)
class GitStatus:
    """Parsed `git status -sb` output.

    Attributes:
        branch: Current branch name
        upstream: Upstream branch (e.g., "origin/main"), None if not set
        ahead: Number of commits ahead of upstream
        behind: Number of commits behind upstream
        entries: Working tree entries
    """

    branch: str
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0
    entries: tuple[StatusEntry, ...] = field(default_factory=tuple)

    @property
    def is_clean(self) -> bool:
        return len(self.entries) == 0


class Repository:
    """A git working copy.

    Attributes:
        path: Path to the repository root
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def clone(cls, url: str, dest: Path) -> Result[Repository, GitError]:
        """Clone `url` into `dest`, creating parent directories.

        Returns:
            Ok(Repository) for the new clone, Err(GitError) on failure
        """
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(GitError(command="clone", output=str(e), returncode=-1))

        result = run_process(
            ["git", "clone", url, str(dest)],
            cwd=dest.parent,
            timeout=GIT_CLONE_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(GitError.from_process("clone", result.error))
        return Ok(cls(dest))

    def exists(self) -> bool:
        """Check if this is a git working copy (.git dir or worktree file)."""
        return (self.path / ".git").exists()

    def status(self) -> Result[GitStatus, GitError]:
        """Run `git status -sb` and parse branch divergence and entries."""
        result = self._run(["status", "-sb"])
        match result:
            case Err(e):
                return Err(GitError.from_process("status -sb", e))
            case Ok(stdout):
                return Ok(self._parse_status(stdout))

    def porcelain_status(self) -> Result[str, GitError]:
        """Run `git status --porcelain`; empty output means a clean tree."""
        result = self._run(["status", "--porcelain"])
        match result:
            case Err(e):
                return Err(GitError.from_process("status --porcelain", e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def pull(self) -> Result[str, GitError]:
        """Pull from the configured upstream."""
        return self._simple(["pull"], "pull")

    def fetch_tags(self) -> Result[str, GitError]:
        """Fetch tags from the remote (`git fetch -t`)."""
        return self._simple(["fetch", "-t"], "fetch -t")

    def list_tags(self, pattern: str) -> Result[list[str], GitError]:
        """List local tags matching `pattern` (`git tag -l`)."""
        result = self._run(["tag", "-l", pattern])
        match result:
            case Err(e):
                return Err(GitError.from_process("tag -l", e))
            case Ok(stdout):
                return Ok([ln.strip() for ln in stdout.splitlines() if ln.strip()])

    def tag_exists(self, tag: str) -> Result[bool, GitError]:
        """True if `tag` is known locally. Call `fetch_tags` first for remote tags."""
        return self.list_tags(tag).map(lambda tags: tag in tags)

    def create_tag(self, tag: str, message: str) -> Result[str, GitError]:
        """Create an annotated tag at HEAD."""
        return self._simple(["tag", "-a", tag, "-m", message], f"tag -a {tag}")

    def push_tags(self) -> Result[str, GitError]:
        return self._simple(["push", "--tags"], "push --tags")

    def add_all(self) -> Result[str, GitError]:
        """Stage everything under the repository root (`git add .`)."""
        return self._simple(["add", "."], "add .")

    def commit_all(self, message: str) -> Result[str, GitError]:
        """Commit all tracked changes (`git commit -a -m`)."""
        return self._simple(["commit", "-a", "-m", message], "commit -a")

    def push(self, remote: str, branch: str) -> Result[str, GitError]:
        return self._simple(["push", remote, branch], f"push {remote} {branch}")

    def _simple(self, args: list[str], label: str) -> Result[str, GitError]:
        result = self._run(args)
        match result:
            case Err(e):
                return Err(GitError.from_process(label, e))
            case Ok(stdout):
                return Ok(stdout.strip())

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)

    def _parse_status(self, output: str) -> GitStatus:
        """Parse `git status -sb` output."""
        lines = [ln for ln in output.splitlines() if ln.strip()]

        if not lines or not lines[0].startswith("##"):
            return GitStatus(branch="", entries=self._parse_entries(lines))

        # First line is branch info: ## branch...upstream [ahead N, behind M]
        branch_line = lines[0]
        branch, upstream = self._parse_branch_line(branch_line)
        ahead, behind = self._parse_ahead_behind(branch_line)

        return GitStatus(
            branch=branch,
            upstream=upstream,
            ahead=ahead,
            behind=behind,
            entries=self._parse_entries(lines[1:]),
        )

    def _parse_branch_line(self, line: str) -> tuple[str, str | None]:
        s = line.strip()[2:].lstrip()
        s = s.split(" [", 1)[0].strip()

        if "..." in s:
            left, right = s.split("...", 1)
            return (left.strip(), right.strip())

        return (s, None)

    def _parse_ahead_behind(self, line: str) -> tuple[int, int]:
        match = re.search(r"\[([^\]]+)\]", line)
        if not match:
            return (0, 0)

        inside = match.group(1).lower()
        ahead_match = re.search(r"ahead\s+(\d+)", inside)
        behind_match = re.search(r"behind\s+(\d+)", inside)

        ahead = int(ahead_match.group(1)) if ahead_match else 0
        behind = int(behind_match.group(1)) if behind_match else 0
        return (ahead, behind)

    def _parse_entries(self, lines: list[str]) -> tuple[StatusEntry, ...]:
        entries: list[StatusEntry] = []
        for line in lines:
            if len(line) < 4:
                continue
            entries.append(StatusEntry(xy=line[:2], path=line[3:]))
        return tuple(entries)
