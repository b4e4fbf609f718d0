"""Release preflight: refuse to release from an unsafe working copy.

Runs before anything is built. The only local mutation is the initial pull.
"""

from __future__ import annotations

from gitrelease.core.config import ReleaseConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.git.repository import GitStatus, Repository
from gitrelease.output.console import ConsoleProtocol, Style
from gitrelease.services.release.errors import ReleaseError
from gitrelease.services.release.host import BuildHost
from gitrelease.services.release.model import SNAPSHOT_MARKER, is_snapshot_version


def check_project_version(version: str) -> Result[None, ReleaseError]:
    if is_snapshot_version(version):
        return Err(
            ReleaseError(
                kind="unreleased_dependency",
                message=(
                    f"Invalid version [{version}]. You cannot release a version that "
                    f"contains the integration designator '{SNAPSHOT_MARKER}'"
                ),
            )
        )
    return Ok(None)


def ensure_working_copy(repo: Repository) -> Result[None, ReleaseError]:
    if not repo.exists():
        return Err(
            ReleaseError(
                kind="not_a_git_repository",
                message=f"You can only run a release from a Git repository: {repo.path}",
            )
        )
    return Ok(None)


def pull_working_copy(repo: Repository, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    console.print("git pull", Style.DIM)
    result = repo.pull()
    if isinstance(result, Err):
        return Err(
            ReleaseError.from_git(
                "sync_failure", "Unable to pull from remote Git repository", result.error
            )
        )
    return Ok(None)


def _branch_line(status: GitStatus) -> str:
    """Render the `## branch...upstream [ahead N, behind M]` line of `git status -sb`."""
    line = f"## {status.branch}"
    if status.upstream:
        line += f"...{status.upstream}"
    counts = [f"ahead {status.ahead}"] if status.ahead else []
    if status.behind:
        counts.append(f"behind {status.behind}")
    if counts:
        line += " [" + ", ".join(counts) + "]"
    return line


def ensure_pushed(repo: Repository) -> Result[None, ReleaseError]:
    status = repo.status()
    if isinstance(status, Err):
        return Err(
            ReleaseError.from_git("sync_failure", "Unable to read git status", status.error)
        )

    if status.value.ahead:
        return Err(
            ReleaseError(
                kind="unpushed_commits",
                message=(
                    f"Your git working copy has {status.value.ahead} local commit(s) "
                    "that haven't been pushed"
                ),
                output=_branch_line(status.value),
            )
        )
    return Ok(None)


def ensure_clean(
    repo: Repository, config: ReleaseConfig, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    status = repo.porcelain_status()
    if isinstance(status, Err):
        return Err(
            ReleaseError.from_git("sync_failure", "Unable to read git status", status.error)
        )

    if not status.value:
        return Ok(None)

    if config.release_dirty:
        console.warning("releasing from a dirty working copy")
        return Ok(None)

    return Err(
        ReleaseError(
            kind="dirty_working_copy",
            message="Cannot release from a dirty directory",
            output=status.value,
        )
    )


def ensure_tag_available(repo: Repository, tag: str) -> Result[None, ReleaseError]:
    fetched = repo.fetch_tags()
    if isinstance(fetched, Err):
        return Err(
            ReleaseError.from_git(
                "sync_failure", "Unable to fetch tags from remote Git repository", fetched.error
            )
        )

    exists = repo.tag_exists(tag)
    if isinstance(exists, Err):
        return Err(ReleaseError.from_git("sync_failure", "Unable to list tags", exists.error))

    if exists.value:
        return Err(ReleaseError(kind="tag_already_exists", message=f"Version {tag} already exists"))
    return Ok(None)


def check_dependencies(host: BuildHost, scopes: tuple[str, ...]) -> Result[None, ReleaseError]:
    """Fail if any dependency of `scopes` is an integration build; lists all of them."""
    # a dependency declared in several scopes is reported once
    offenders = list(
        dict.fromkeys(
            dep for scope in scopes for dep in host.dependencies(scope) if dep.is_unreleased
        )
    )
    if not offenders:
        return Ok(None)

    first = offenders[0]
    more = f" and {len(offenders) - 1} more" if len(offenders) > 1 else ""
    return Err(
        ReleaseError(
            kind="unreleased_dependency",
            message=f"Invalid integration version for release: [{first}]{more}",
            output="\n".join(str(dep) for dep in offenders),
        )
    )


def run_preflight(
    *,
    repo: Repository,
    host: BuildHost,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Validate that a release of `host.project` can proceed.

    Order matters: the version format is checked before any git call, and
    the tag lookup runs only against a pulled, clean working copy.
    """
    version = host.project.version

    ok = check_project_version(version)
    if isinstance(ok, Err):
        return ok

    ok = ensure_working_copy(repo)
    if isinstance(ok, Err):
        return ok

    console.print("Updating working copy", Style.DIM)
    ok = pull_working_copy(repo, console)
    if isinstance(ok, Err):
        return ok

    ok = ensure_pushed(repo)
    if isinstance(ok, Err):
        return ok

    ok = ensure_clean(repo, config, console)
    if isinstance(ok, Err):
        return ok

    ok = ensure_tag_available(repo, version)
    if isinstance(ok, Err):
        return ok

    ok = check_dependencies(host, config.dependency_scopes)
    if isinstance(ok, Err):
        return ok

    console.success(f"preflight: {host.project.name} {version}")
    return Ok(None)
