"""Release orchestration: a fixed, ordered list of named steps.

    preflight -> build -> sync -> checksums -> upload -> publish -> tag

Steps run strictly in order and the first failure stops the run. Nothing is
rolled back: a pushed artifact repository stays pushed if tagging fails.
Steps touching the shared artifact repository clone run under a file lock.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gitrelease.core.config import ReleaseConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.git.repository import Repository
from gitrelease.output.console import ConsoleProtocol
from gitrelease.platform.locking import FileLock, acquire_lock
from gitrelease.services.release.artifact_repo import publish_artifact_repo, sync_artifact_repo
from gitrelease.services.release.checksums import generate_checksums
from gitrelease.services.release.errors import ReleaseError
from gitrelease.services.release.host import BuildHost
from gitrelease.services.release.preflight import run_preflight
from gitrelease.services.release.tagging import create_release_tag
from gitrelease.services.release.upload import upload_artifacts

__all__ = [
    "CHECK_STEPS",
    "RELEASE_STEPS",
    "ReleaseContext",
    "ReleaseOutcome",
    "ReleaseStep",
    "run_release",
    "run_steps",
]


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Everything a step needs; built once per run."""

    host: BuildHost
    config: ReleaseConfig
    console: ConsoleProtocol
    working_copy: Path

    @property
    def repo(self) -> Repository:
        return Repository(self.working_copy)


@dataclass(frozen=True, slots=True)
class ReleaseStep:
    name: str
    title: str
    run: Callable[[ReleaseContext], Result[None, ReleaseError]]
    # Holds the artifact repository lock while running
    locked: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    version: str
    steps: tuple[str, ...]
    dry_run: bool


def _preflight(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return run_preflight(repo=ctx.repo, host=ctx.host, config=ctx.config, console=ctx.console)


def _build(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return ctx.host.build(ctx.console)


def _sync(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return sync_artifact_repo(config=ctx.config, console=ctx.console).map(lambda _: None)


def _checksums(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return generate_checksums(host=ctx.host, config=ctx.config, console=ctx.console).map(
        lambda _: None
    )


def _upload(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return upload_artifacts(host=ctx.host, config=ctx.config, console=ctx.console).map(
        lambda _: None
    )


def _publish(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return publish_artifact_repo(
        repo=Repository(ctx.config.repo_path),
        project=ctx.host.project,
        config=ctx.config,
        console=ctx.console,
    )


def _tag(ctx: ReleaseContext) -> Result[None, ReleaseError]:
    return create_release_tag(
        repo=ctx.repo,
        version=ctx.host.project.version,
        config=ctx.config,
        console=ctx.console,
    )


RELEASE_STEPS: tuple[ReleaseStep, ...] = (
    ReleaseStep("preflight", "Checking working copy", _preflight),
    ReleaseStep("build", "Building artifacts", _build),
    ReleaseStep("sync", "Synchronizing artifact repository", _sync, locked=True),
    ReleaseStep("checksums", "Generating checksums", _checksums, locked=True),
    ReleaseStep("upload", "Uploading artifacts", _upload, locked=True),
    ReleaseStep("publish", "Publishing artifact repository", _publish, locked=True),
    ReleaseStep("tag", "Tagging release", _tag),
)

CHECK_STEPS: tuple[ReleaseStep, ...] = RELEASE_STEPS[:1]


def run_steps(
    ctx: ReleaseContext, steps: tuple[ReleaseStep, ...]
) -> Result[tuple[str, ...], ReleaseError]:
    """Run `steps` in order, stopping at the first failure.

    Returns the names of the completed steps.
    """
    done: list[str] = []
    lock: FileLock | None = None
    try:
        for step in steps:
            if step.locked and lock is None:
                acquired = acquire_lock(ctx.config.lock_path)
                if isinstance(acquired, Err):
                    return Err(
                        ReleaseError(kind="lock_failure", message=acquired.error.message)
                    )
                lock = acquired.value
            elif not step.locked and lock is not None:
                lock.release()
                lock = None

            ctx.console.header(step.title)
            result = step.run(ctx)
            if isinstance(result, Err):
                return result
            done.append(step.name)
    finally:
        if lock is not None:
            lock.release()

    return Ok(tuple(done))


def run_release(
    ctx: ReleaseContext, steps: tuple[ReleaseStep, ...] = RELEASE_STEPS
) -> Result[ReleaseOutcome, ReleaseError]:
    """Run the full release of `ctx.host.project`."""
    return run_steps(ctx, steps).map(
        lambda done: ReleaseOutcome(
            version=ctx.host.project.version,
            steps=done,
            dry_run=ctx.config.test_release,
        )
    )
