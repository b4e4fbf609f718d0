from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from gitrelease.core.config import ArtifactEntry
from gitrelease.core.result import Err, Ok
from gitrelease.output.console import MockConsole
from gitrelease.services.release.checksums import generate_checksums
from gitrelease.services.release.host import ManifestHost
from gitrelease.services.release.upload import upload_artifacts

from ._fakes import make_manifest


def test_upload_uses_repository_layout(tmp_path: Path) -> None:
    manifest = make_manifest(tmp_path / "project")
    host = ManifestHost(manifest)
    config = manifest.release
    assert isinstance(generate_checksums(host=host, config=config, console=MockConsole()), Ok)

    result = upload_artifacts(host=host, config=config, console=MockConsole())

    assert isinstance(result, Ok)
    module = config.repo_path / "repository" / "public" / "org.example" / "widget" / "1.2.3"
    assert [p.relative_to(module).as_posix() for p in result.value] == [
        "jars/widget-1.2.3.jar",
        "sources/widget-1.2.3.zip",
        "jars/widget-1.2.3.jar.sha1",
        "jars/widget-1.2.3.jar.md5",
        "sources/widget-1.2.3.zip.sha1",
        "sources/widget-1.2.3.zip.md5",
    ]
    assert (module / "jars" / "widget-1.2.3.jar").read_bytes() == b"jar-bytes"


def test_private_repository_segment(tmp_path: Path) -> None:
    manifest = make_manifest(tmp_path / "project")
    config = replace(manifest.release, public_repo=False)

    result = upload_artifacts(host=ManifestHost(manifest), config=config, console=MockConsole())

    assert isinstance(result, Ok)
    assert all("repository/private/" in p.as_posix() for p in result.value)


def test_missing_artifact_fails(tmp_path: Path) -> None:
    manifest = make_manifest(tmp_path / "project", write_artifacts=False)

    result = upload_artifacts(
        host=ManifestHost(manifest), config=manifest.release, console=MockConsole()
    )

    assert isinstance(result, Err)
    assert result.error.kind == "upload_failure"
    assert "widget-1.2.3.jar" in result.error.message


def test_colliding_destinations_fail_before_copying(tmp_path: Path) -> None:
    manifest = make_manifest(tmp_path / "project")
    tests_jar = manifest.root / "build" / "widget-tests.jar"
    tests_jar.write_bytes(b"test-jar-bytes")
    archives = manifest.artifacts["archives"] + (
        ArtifactEntry(file=tests_jar, type="jar", extension="jar"),
    )
    manifest = replace(manifest, artifacts={**manifest.artifacts, "archives": archives})

    result = upload_artifacts(
        host=ManifestHost(manifest), config=manifest.release, console=MockConsole()
    )

    assert isinstance(result, Err)
    assert result.error.kind == "upload_failure"
    assert "widget-tests.jar" in result.error.message
    assert result.error.output is not None
    assert result.error.output.endswith("jars/widget-1.2.3.jar")
    assert not (manifest.release.repo_path / "repository").exists()


def test_explicit_name_avoids_collision(tmp_path: Path) -> None:
    manifest = make_manifest(tmp_path / "project")
    tests_jar = manifest.root / "build" / "widget-tests.jar"
    tests_jar.write_bytes(b"test-jar-bytes")
    archives = manifest.artifacts["archives"] + (
        ArtifactEntry(file=tests_jar, type="jar", extension="jar", name="widget-tests"),
    )
    manifest = replace(manifest, artifacts={**manifest.artifacts, "archives": archives})

    result = upload_artifacts(
        host=ManifestHost(manifest), config=manifest.release, console=MockConsole()
    )

    assert isinstance(result, Ok)
    assert len(set(result.value)) == len(result.value) == 3
