from __future__ import annotations

from pathlib import Path

import typer

from gitrelease.cli.context import CLIContext, ConfigOverrides, build_context
from gitrelease.core.result import Err
from gitrelease.output.console import Style
from gitrelease.output.errors import print_release_error, release_error_exit_code
from gitrelease.services.release.host import ManifestHost
from gitrelease.services.release.pipeline import (
    CHECK_STEPS,
    ReleaseContext,
    run_release,
    run_steps,
)

_CONFIG_OPTION = typer.Option(
    None, "--config", "-c", help="Path to release.toml (default: ./release.toml)"
)


def _release_context(ctx: CLIContext) -> ReleaseContext:
    return ReleaseContext(
        host=ManifestHost(ctx.manifest),
        config=ctx.config,
        console=ctx.console,
        working_copy=ctx.manifest.root,
    )


def release(
    config_path: Path | None = _CONFIG_OPTION,
    repo_path: Path | None = typer.Option(
        None, "--repo-path", help="Local clone of the artifact repository"
    ),
    public: bool | None = typer.Option(
        None, "--public/--private", help="Publish to the public or private repository"
    ),
    dirty: bool | None = typer.Option(
        None, "--dirty/--no-dirty", help="Allow releasing from a dirty working copy"
    ),
    test_release: bool | None = typer.Option(
        None, "--test-release/--no-test-release", help="Dry run: skip publish and tag"
    ),
    checksums: bool | None = typer.Option(
        None, "--checksums/--no-checksums", help="Generate sha1/md5 digests"
    ),
) -> None:
    """Check, build, publish and tag a release."""
    ctx = build_context(
        config_path,
        ConfigOverrides(
            repo_path=repo_path,
            public_repo=public,
            release_dirty=dirty,
            test_release=test_release,
            add_checksums=checksums,
        ),
    )
    project = ctx.manifest.project
    ctx.console.print(f"release: {project.organisation}:{project.name}:{project.version}")
    ctx.console.print(f"artifact repository: {ctx.config.repo_path}", Style.DIM)

    result = run_release(_release_context(ctx))
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))

    outcome = result.value
    ctx.console.newline()
    if outcome.dry_run:
        ctx.console.success(f"test release of {outcome.version} complete (nothing published)")
    else:
        ctx.console.success(f"released {outcome.version}")


def check(config_path: Path | None = _CONFIG_OPTION) -> None:
    """Run the release preflight checks only."""
    ctx = build_context(config_path, ConfigOverrides())

    result = run_steps(_release_context(ctx), CHECK_STEPS)
    if isinstance(result, Err):
        print_release_error(result.error, ctx.console)
        raise typer.Exit(code=release_error_exit_code(result.error))
