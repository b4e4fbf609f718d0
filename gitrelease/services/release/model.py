from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

ARCHIVES = "archives"
SOURCES = "sources"
DIGEST = "digest"

# Marker of an integration (unreleased) build
SNAPSHOT_MARKER = "SNAPSHOT"

ChecksumAlgorithm = Literal["sha1", "md5"]

# Generation order is fixed: sha1 first, then md5.
CHECKSUM_ALGORITHMS: tuple[ChecksumAlgorithm, ...] = ("sha1", "md5")


@dataclass(frozen=True, slots=True)
class Artifact:
    """A publishable file: build output or generated digest."""

    name: str
    extension: str
    type: str
    file: Path


@dataclass(frozen=True, slots=True)
class ChecksumArtifact(Artifact):
    """Digest file for a build artifact.

    `extension` is the source extension plus the algorithm ("jar.sha1") and
    `file` is `<digest dir>/<source file name>.<algorithm>`.
    """

    algorithm: ChecksumAlgorithm = "sha1"


@dataclass(frozen=True, slots=True)
class Dependency:
    """A declared dependency, `group:name:version`."""

    group: str | None
    name: str
    version: str

    @classmethod
    def parse(cls, coordinate: str) -> Dependency:
        """Parse `group:name:version`, `name:version` or a bare name.

        A bare name (local file, sibling project) has an empty version.
        """
        parts = [p.strip() for p in coordinate.split(":")]
        if len(parts) >= 3:
            return cls(group=parts[0] or None, name=parts[1], version=":".join(parts[2:]))
        if len(parts) == 2:
            return cls(group=None, name=parts[0], version=parts[1])
        return cls(group=None, name=parts[0], version="")

    @property
    def is_unreleased(self) -> bool:
        return SNAPSHOT_MARKER.lower() in self.version.lower()

    def __str__(self) -> str:
        coordinate = f"{self.name}:{self.version}"
        return f"{self.group}:{coordinate}" if self.group else coordinate


def is_snapshot_version(version: str) -> bool:
    """True if a project version denotes an integration build (any case)."""
    return SNAPSHOT_MARKER.lower() in version.lower()
