"""Digest files (sha1, md5) for every published artifact.

Each artifact file `X` gets `X.sha1` and `X.md5` in the digest directory,
and each digest is registered in the host's `digest` group so the upload
step publishes it next to the artifact.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from gitrelease.core.config import ReleaseConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.output.console import ConsoleProtocol, Style
from gitrelease.services.release.errors import ReleaseError
from gitrelease.services.release.host import BuildHost
from gitrelease.services.release.model import (
    CHECKSUM_ALGORITHMS,
    DIGEST,
    Artifact,
    ChecksumAlgorithm,
    ChecksumArtifact,
)

_CHUNK_SIZE = 1024 * 1024


def file_digest(path: Path, algorithm: ChecksumAlgorithm) -> str:
    h = hashlib.new(algorithm)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def write_checksum(
    artifact: Artifact, algorithm: ChecksumAlgorithm, digest_dir: Path
) -> ChecksumArtifact:
    """Write `<digest_dir>/<file name>.<algorithm>` and describe it.

    Raises:
        OSError: If the artifact cannot be read or the digest written.
    """
    target = digest_dir / f"{artifact.file.name}.{algorithm}"
    target.write_text(file_digest(artifact.file, algorithm), encoding="ascii")
    return ChecksumArtifact(
        name=artifact.name,
        extension=f"{artifact.extension}.{algorithm}",
        type=artifact.type,
        file=target,
        algorithm=algorithm,
    )


def generate_checksums(
    *,
    host: BuildHost,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[tuple[ChecksumArtifact, ...], ReleaseError]:
    """Digest the artifacts of each checksum group and register them.

    Groups are processed in configured order, algorithms sha1 then md5.
    Returns the registered digests (empty when checksums are disabled).
    """
    if not config.add_checksums:
        return Ok(())

    digest_dir = config.digest_dir
    if not digest_dir.is_absolute():
        digest_dir = host.root / digest_dir

    checksums: list[ChecksumArtifact] = []
    try:
        digest_dir.mkdir(parents=True, exist_ok=True)
        for group in config.checksum_groups:
            for artifact in host.artifacts(group):
                for algorithm in CHECKSUM_ALGORITHMS:
                    checksums.append(write_checksum(artifact, algorithm, digest_dir))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="checksum_failure",
                message="Unable to write checksum files",
                output=str(e),
            )
        )

    for checksum in checksums:
        console.print(f"digest {checksum.file.name}", Style.DIM)
        host.add_artifact(DIGEST, checksum)

    return Ok(tuple(checksums))
