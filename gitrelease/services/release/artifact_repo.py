"""The git-backed artifact repository: clone/pull before upload, commit/push after."""

from __future__ import annotations

from gitrelease.core.config import ProjectConfig, ReleaseConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.git.repository import Repository
from gitrelease.output.console import ConsoleProtocol, Style
from gitrelease.services.release.errors import ReleaseError

ARTIFACT_REMOTE_NAME = "origin"


def publish_message(project: ProjectConfig) -> str:
    return f"Publishing {project.name} {project.version}"


def sync_artifact_repo(
    *,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[Repository, ReleaseError]:
    """Clone the artifact repository on first use, otherwise pull it.

    Runs in dry-run mode too; later steps write into the clone.
    """
    repo = Repository(config.repo_path)

    if not config.repo_path.exists():
        if config.artifact_remote is None:
            return Err(
                ReleaseError(
                    kind="invalid_config",
                    message=f"{config.repo_path} does not exist and no artifact_remote is set",
                )
            )
        console.print(
            f"Cloning {config.artifact_remote} for the first time. This could take a while...",
            Style.DIM,
        )
        cloned = Repository.clone(config.artifact_remote, config.repo_path)
        if isinstance(cloned, Err):
            return Err(
                ReleaseError.from_git(
                    "clone_failure",
                    f"Unable to clone {config.artifact_remote}",
                    cloned.error,
                )
            )
        return Ok(cloned.value)

    console.print(f"Pulling {config.repo_path} to synchronize local to remote...", Style.DIM)
    pulled = repo.pull()
    if isinstance(pulled, Err):
        return Err(
            ReleaseError.from_git(
                "sync_failure", "Unable to pull the artifact repository", pulled.error
            )
        )
    return Ok(repo)


def publish_artifact_repo(
    *,
    repo: Repository,
    project: ProjectConfig,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Stage, commit and push the artifact repository.

    Each command must succeed before the next runs; a failed commit is never
    followed by a push.
    """
    message = publish_message(project)
    console.print("git add .", Style.DIM)
    console.print(f"git commit -a -m '{message}'", Style.DIM)
    console.print(f"git push {ARTIFACT_REMOTE_NAME} {config.remote_branch}", Style.DIM)
    if config.test_release:
        console.info("test release: artifact repository not published")
        return Ok(None)

    console.print("Publishing artifacts to remote repository...", Style.DIM)

    added = repo.add_all()
    if isinstance(added, Err):
        return Err(
            ReleaseError.from_git("publish_failure", "Unable to stage artifacts", added.error)
        )

    committed = repo.commit_all(message)
    if isinstance(committed, Err):
        return Err(
            ReleaseError.from_git(
                "publish_failure", "Unable to commit to the artifact repository", committed.error
            )
        )

    pushed = repo.push(ARTIFACT_REMOTE_NAME, config.remote_branch)
    if isinstance(pushed, Err):
        return Err(
            ReleaseError.from_git(
                "publish_failure", "Unable to push the artifact repository", pushed.error
            )
        )

    console.success(f"published {project.name} {project.version}")
    return Ok(None)
