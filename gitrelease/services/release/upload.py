"""Copy artifacts into the artifact repository clone.

Layout (relative to the clone root):

    repository/<public|private>/<organisation>/<module>/<revision>/<type>s/<artifact>-<revision>.<ext>
"""

from __future__ import annotations

import shutil
from pathlib import Path

from gitrelease.core.config import ProjectConfig, ReleaseConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.output.console import ConsoleProtocol, Style
from gitrelease.services.release.errors import ReleaseError
from gitrelease.services.release.host import BuildHost
from gitrelease.services.release.model import ARCHIVES, DIGEST, SOURCES, Artifact

UPLOAD_GROUPS: tuple[str, ...] = (ARCHIVES, SOURCES, DIGEST)


def module_dir(config: ReleaseConfig, project: ProjectConfig) -> Path:
    return (
        config.repo_path
        / "repository"
        / config.visibility
        / project.organisation
        / project.name
        / project.version
    )


def artifact_destination(
    artifact: Artifact, *, config: ReleaseConfig, project: ProjectConfig
) -> Path:
    filename = f"{artifact.name}-{project.version}.{artifact.extension}"
    return module_dir(config, project) / f"{artifact.type}s" / filename


def upload_artifacts(
    *,
    host: BuildHost,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    groups: tuple[str, ...] = UPLOAD_GROUPS,
) -> Result[tuple[Path, ...], ReleaseError]:
    """Copy every artifact of `groups` into the clone; returns the written paths.

    Destinations are resolved up front; two artifacts mapping to the same
    file fail the upload before anything is copied.
    """
    project = host.project
    console.print(f"Releasing to the {config.visibility} artifact repository", Style.DIM)

    planned: dict[Path, Artifact] = {}
    for group in groups:
        for artifact in host.artifacts(group):
            dest = artifact_destination(artifact, config=config, project=project)
            other = planned.get(dest)
            if other is not None:
                return Err(
                    ReleaseError(
                        kind="upload_failure",
                        message=(
                            f"{artifact.file.name} and {other.file.name} would both be "
                            f"uploaded as {dest.name}; give one of them a distinct name"
                        ),
                        output=str(dest),
                    )
                )
            planned[dest] = artifact

    written: list[Path] = []
    for dest, artifact in planned.items():
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(artifact.file, dest)
        except OSError as e:
            return Err(
                ReleaseError(
                    kind="upload_failure",
                    message=f"Unable to upload {artifact.file.name}",
                    output=str(e),
                )
            )
        console.print(str(dest.relative_to(config.repo_path)), Style.DIM)
        written.append(dest)

    return Ok(tuple(written))
