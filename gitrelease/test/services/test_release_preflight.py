from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from gitrelease.core.result import Err, Ok
from gitrelease.git.repository import Repository
from gitrelease.output.console import MockConsole
from gitrelease.services.release.host import ManifestHost
from gitrelease.services.release.preflight import check_dependencies, run_preflight

from ._fakes import FakeGit, fail, install_fake_git, make_manifest, make_working_copy


def _run(tmp_path: Path, fake: FakeGit, **manifest_kwargs: object):
    root = make_working_copy(tmp_path / "project")
    manifest = make_manifest(root, **manifest_kwargs)  # type: ignore[arg-type]
    console = MockConsole()
    result = run_preflight(
        repo=Repository(root),
        host=ManifestHost(manifest),
        config=manifest.release,
        console=console,
    )
    return result, console


def test_preflight_passes_on_clean_synced_copy(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(
        monkeypatch,
        FakeGit({("status", "-sb"): Ok("## master...origin/master\n")}),
    )

    result, console = _run(tmp_path, fake)

    assert isinstance(result, Ok)
    assert fake.commands == [
        ("pull",),
        ("status", "-sb"),
        ("status", "--porcelain"),
        ("fetch", "-t"),
        ("tag", "-l", "1.2.3"),
    ]
    assert "preflight: widget 1.2.3" in console.text


def test_preflight_rejects_missing_working_copy(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(monkeypatch, FakeGit())
    root = tmp_path / "project"
    root.mkdir()
    manifest = make_manifest(root)

    result = run_preflight(
        repo=Repository(root),
        host=ManifestHost(manifest),
        config=manifest.release,
        console=MockConsole(),
    )

    assert isinstance(result, Err)
    assert result.error.kind == "not_a_git_repository"
    assert fake.commands == []


def test_preflight_pull_failure_carries_git_output(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(
        monkeypatch,
        FakeGit({("pull",): fail("fatal: Could not read from remote repository.")}),
    )

    result, _ = _run(tmp_path, fake)

    assert isinstance(result, Err)
    assert result.error.kind == "sync_failure"
    assert result.error.output is not None
    assert "Could not read from remote repository" in result.error.output
    assert not fake.ran("status")


def test_preflight_rejects_unpushed_commits(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(
        monkeypatch,
        FakeGit({("status", "-sb"): Ok("## master...origin/master [ahead 2]\n")}),
    )

    result, _ = _run(tmp_path, fake)

    assert isinstance(result, Err)
    assert result.error.kind == "unpushed_commits"
    assert result.error.output == "## master...origin/master [ahead 2]"
    assert not fake.ran("fetch")


def test_preflight_rejects_dirty_copy_before_tag_lookup(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(
        monkeypatch,
        FakeGit({("status", "--porcelain"): Ok(" M src/widget.py\n?? notes.txt\n")}),
    )

    result, _ = _run(tmp_path, fake)

    assert isinstance(result, Err)
    assert result.error.kind == "dirty_working_copy"
    assert result.error.output == "M src/widget.py\n?? notes.txt"
    assert not fake.ran("fetch")
    assert not fake.ran("tag", "-a")


def test_preflight_allows_dirty_copy_when_configured(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(
        monkeypatch,
        FakeGit({("status", "--porcelain"): Ok(" M src/widget.py\n")}),
    )
    root = make_working_copy(tmp_path / "project")
    manifest = make_manifest(root)
    console = MockConsole()

    result = run_preflight(
        repo=Repository(root),
        host=ManifestHost(manifest),
        config=replace(manifest.release, release_dirty=True),
        console=console,
    )

    assert isinstance(result, Ok)
    assert console.has_warning()
    assert fake.ran("fetch", "-t")


def test_preflight_rejects_existing_tag(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    fake = install_fake_git(monkeypatch, FakeGit({("tag", "-l"): Ok("1.2.3\n")}))

    result, _ = _run(tmp_path, fake)

    assert isinstance(result, Err)
    assert result.error.kind == "tag_already_exists"
    assert "1.2.3" in result.error.message
    assert not fake.ran("tag", "-a")


def test_preflight_fetch_tags_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    fake = install_fake_git(monkeypatch, FakeGit({("fetch", "-t"): fail("timed out")}))

    result, _ = _run(tmp_path, fake)

    assert isinstance(result, Err)
    assert result.error.kind == "sync_failure"
    assert result.error.output == "timed out"


def test_preflight_snapshot_version_fails_before_any_git_call(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(monkeypatch, FakeGit())

    result, _ = _run(tmp_path, fake, version="2.0.0-SNAPSHOT")

    assert isinstance(result, Err)
    assert result.error.kind == "unreleased_dependency"
    assert "2.0.0-SNAPSHOT" in result.error.message
    assert fake.commands == []


def test_preflight_snapshot_version_marker_ignores_case(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(monkeypatch, FakeGit())

    result, _ = _run(tmp_path, fake, version="2.0.0-snapshot")

    assert isinstance(result, Err)
    assert result.error.kind == "unreleased_dependency"
    assert fake.commands == []


def test_preflight_rejects_snapshot_dependency(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    fake = install_fake_git(monkeypatch, FakeGit())

    result, _ = _run(
        tmp_path,
        fake,
        dependencies={
            "compile": ("org.example:lib:1.0.0",),
            "runtime": ("org.example:driver:3.1-snapshot",),
        },
    )

    assert isinstance(result, Err)
    assert result.error.kind == "unreleased_dependency"
    assert "org.example:driver:3.1-snapshot" in result.error.message


def test_check_dependencies_ignores_unconfigured_scopes(tmp_path: Path) -> None:
    manifest = make_manifest(
        tmp_path, dependencies={"test": ("org.example:fixture:1.0-SNAPSHOT",)}
    )

    result = check_dependencies(ManifestHost(manifest), ("compile", "runtime"))

    assert isinstance(result, Ok)


def test_check_dependencies_reports_every_offender(tmp_path: Path) -> None:
    manifest = make_manifest(
        tmp_path,
        dependencies={
            "compile": ("a:x:1-SNAPSHOT", "a:y:2-SNAPSHOT", "a:z:1.0"),
            "runtime": ("lib:3-SNAPSHOT", "a:x:1-SNAPSHOT"),
        },
    )

    result = check_dependencies(ManifestHost(manifest), ("compile", "runtime"))

    assert isinstance(result, Err)
    assert result.error.kind == "unreleased_dependency"
    assert "[a:x:1-SNAPSHOT] and 2 more" in result.error.message
    assert result.error.output == "a:x:1-SNAPSHOT\na:y:2-SNAPSHOT\nlib:3-SNAPSHOT"


def test_check_dependencies_includes_dependencies_without_group(tmp_path: Path) -> None:
    manifest = make_manifest(tmp_path, dependencies={"compile": ("lib:3-SNAPSHOT",)})

    result = check_dependencies(ManifestHost(manifest), ("compile",))

    assert isinstance(result, Err)
    assert result.error.message == "Invalid integration version for release: [lib:3-SNAPSHOT]"
    assert result.error.output == "lib:3-SNAPSHOT"
