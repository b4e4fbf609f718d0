from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import typer

from gitrelease.core.config import MANIFEST_NAME, Manifest, ReleaseConfig, load_manifest
from gitrelease.core.errors import ErrorCode
from gitrelease.core.result import Err
from gitrelease.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class ConfigOverrides:
    """Command-line overrides of the manifest's [release] table (None = keep)."""

    repo_path: Path | None = None
    public_repo: bool | None = None
    release_dirty: bool | None = None
    test_release: bool | None = None
    add_checksums: bool | None = None

    def apply(self, config: ReleaseConfig) -> ReleaseConfig:
        changes: dict[str, object] = {}
        if self.repo_path is not None:
            changes["repo_path"] = self.repo_path.expanduser().resolve()
        for name in ("public_repo", "release_dirty", "test_release", "add_checksums"):
            value = getattr(self, name)
            if value is not None:
                changes[name] = value
        return replace(config, **changes)


@dataclass(frozen=True, slots=True)
class CLIContext:
    manifest: Manifest
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(config_path: Path | None, overrides: ConfigOverrides) -> CLIContext:
    path = config_path if config_path is not None else Path.cwd() / MANIFEST_NAME
    result = load_manifest(path)
    if isinstance(result, Err):
        typer.echo(f"error: {result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    manifest = result.value
    return CLIContext(
        manifest=manifest,
        config=overrides.apply(manifest.release),
        console=RichConsole(),
    )
