"""Build host: the collaborator that builds the project and owns its artifacts.

The release steps only need a project's coordinates, the artifacts of each
named group, the dependencies of each scope, and a way to register new
artifacts (digests). ManifestHost provides these from `release.toml` and runs
the manifest's build command.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from gitrelease.core.config import ArtifactEntry, Manifest, ProjectConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.output.console import ConsoleProtocol, Style
from gitrelease.platform.process import run_silent
from gitrelease.services.release.errors import ReleaseError
from gitrelease.services.release.model import Artifact, Dependency

__all__ = ["BuildHost", "ManifestHost"]


class BuildHost(Protocol):
    @property
    def project(self) -> ProjectConfig: ...

    @property
    def root(self) -> Path: ...

    def build(self, console: ConsoleProtocol) -> Result[None, ReleaseError]: ...

    def artifacts(self, group: str) -> tuple[Artifact, ...]: ...

    def dependencies(self, scope: str) -> tuple[Dependency, ...]: ...

    def add_artifact(self, group: str, artifact: Artifact) -> None: ...


class ManifestHost:
    """BuildHost backed by a parsed release manifest."""

    def __init__(self, manifest: Manifest) -> None:
        self._manifest = manifest
        self._artifacts: dict[str, list[Artifact]] = {
            group: [self._to_artifact(e) for e in entries]
            for group, entries in manifest.artifacts.items()
        }
        self._dependencies: Mapping[str, tuple[Dependency, ...]] = {
            scope: tuple(Dependency.parse(c) for c in coords)
            for scope, coords in manifest.dependencies.items()
        }

    @property
    def project(self) -> ProjectConfig:
        return self._manifest.project

    @property
    def root(self) -> Path:
        return self._manifest.root

    def build(self, console: ConsoleProtocol) -> Result[None, ReleaseError]:
        """Run the manifest's build command, then check every artifact exists."""
        cmd = list(self.project.build)
        if cmd:
            console.print(" ".join(cmd), Style.DIM)
            result = run_silent(cmd, cwd=self.root)
            if isinstance(result, Err):
                e = result.error
                return Err(
                    ReleaseError(
                        kind="build_failure",
                        message=f"build command failed: {e}",
                        output=e.output or None,
                    )
                )

        missing = [
            a.file for group in self._artifacts.values() for a in group if not a.file.is_file()
        ]
        if missing:
            return Err(
                ReleaseError(
                    kind="build_failure",
                    message="build did not produce the declared artifacts",
                    output="\n".join(str(p) for p in missing),
                )
            )
        return Ok(None)

    def artifacts(self, group: str) -> tuple[Artifact, ...]:
        return tuple(self._artifacts.get(group, ()))

    def dependencies(self, scope: str) -> tuple[Dependency, ...]:
        return self._dependencies.get(scope, ())

    def add_artifact(self, group: str, artifact: Artifact) -> None:
        self._artifacts.setdefault(group, []).append(artifact)

    def _to_artifact(self, entry: ArtifactEntry) -> Artifact:
        return Artifact(
            name=entry.name or self.project.name,
            extension=entry.extension,
            type=entry.type,
            file=entry.file,
        )
