"""Tests for gitrelease.output (console and error presentation)."""

from __future__ import annotations

import pytest

from gitrelease.core.errors import ErrorCode
from gitrelease.output.console import MockConsole, RichConsole, Style
from gitrelease.output.errors import print_release_error, release_error_exit_code
from gitrelease.services.release.errors import ReleaseError


class TestMockConsole:
    def test_records_styles(self) -> None:
        console = MockConsole()
        console.print("git pull", Style.DIM)
        console.success("done")
        console.warning("dirty")
        console.error("failed")

        assert console.messages == ["git pull", "OK done", "warning: dirty", "error: failed"]
        assert console.outputs[0].style == Style.DIM
        assert console.has_warning()
        assert console.has_error()

    def test_find(self) -> None:
        console = MockConsole()
        console.info("tag 1.2.3 not created")
        assert len(console.find("1.2.3")) == 1
        assert console.find("absent") == []


def test_rich_console_does_not_interpret_git_output(capsys: pytest.CaptureFixture[str]) -> None:
    console = RichConsole()
    console.print("! [rejected] master -> master (fetch first)", Style.DIM)
    console.error("push failed [remote]")

    out = capsys.readouterr().out
    assert "[rejected]" in out
    assert "[remote]" in out


class TestPrintReleaseError:
    def test_prints_output_and_hint(self) -> None:
        console = MockConsole()
        error = ReleaseError(
            kind="dirty_working_copy",
            message="Cannot release from a dirty directory",
            output=" M a.py\n?? b.txt",
        )

        print_release_error(error, console)

        assert console.messages[0] == "error: Cannot release from a dirty directory"
        assert "   M a.py" in console.messages
        assert "  ?? b.txt" in console.messages
        assert console.find("--dirty")

    def test_without_output(self) -> None:
        console = MockConsole()
        print_release_error(ReleaseError(kind="build_failure", message="build failed"), console)
        assert console.messages == ["error: build failed"]


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("invalid_config", ErrorCode.USER_ERROR),
        ("not_a_git_repository", ErrorCode.ENV_ERROR),
        ("dirty_working_copy", ErrorCode.ENV_ERROR),
        ("unpushed_commits", ErrorCode.ENV_ERROR),
        ("build_failure", ErrorCode.BUILD_ERROR),
        ("checksum_failure", ErrorCode.BUILD_ERROR),
        ("sync_failure", ErrorCode.NETWORK_ERROR),
        ("publish_failure", ErrorCode.NETWORK_ERROR),
        ("tag_failure", ErrorCode.NETWORK_ERROR),
        ("tag_already_exists", ErrorCode.RELEASE_ERROR),
        ("unreleased_dependency", ErrorCode.RELEASE_ERROR),
        ("lock_failure", ErrorCode.RELEASE_ERROR),
    ],
)
def test_exit_codes(kind: str, code: ErrorCode) -> None:
    error = ReleaseError(kind=kind, message="x")  # type: ignore[arg-type]
    assert release_error_exit_code(error) == int(code)
