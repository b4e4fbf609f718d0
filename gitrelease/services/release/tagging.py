from __future__ import annotations

from gitrelease.core.config import ReleaseConfig
from gitrelease.core.result import Err, Ok, Result
from gitrelease.git.repository import Repository
from gitrelease.output.console import ConsoleProtocol, Style
from gitrelease.services.release.errors import ReleaseError


def tag_message(version: str) -> str:
    return f"Tagging {version}"


def create_release_tag(
    *,
    repo: Repository,
    version: str,
    config: ReleaseConfig,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Create an annotated tag for `version` and push it.

    A failed tag or push is fatal. Dry runs only print the commands.
    """
    message = tag_message(version)
    console.print(f"git tag -a {version} -m '{message}'", Style.DIM)
    console.print("git push --tags", Style.DIM)
    if config.test_release:
        console.info(f"test release: tag {version} not created")
        return Ok(None)

    created = repo.create_tag(version, message)
    if isinstance(created, Err):
        return Err(
            ReleaseError.from_git("tag_failure", f"Unable to create tag {version}", created.error)
        )

    pushed = repo.push_tags()
    if isinstance(pushed, Err):
        return Err(
            ReleaseError.from_git("tag_failure", f"Unable to push tag {version}", pushed.error)
        )

    console.success(f"tagged {version}")
    return Ok(None)
