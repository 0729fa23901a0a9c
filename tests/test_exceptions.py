"""
Tests for the releasesmith exception hierarchy.
"""

import pytest

from releasesmith.command_runner import CommandResult, CommandSpec
from releasesmith.exceptions import (
    BuildError,
    ConfigFileError,
    ConfigurationError,
    ConfigValidationError,
    CredentialError,
    ExternalToolError,
    InvalidTargetError,
    LedgerError,
    ReleaseHostError,
    ReleasesmithError,
    ReleaseStateError,
    UnrecognizedChannelError,
)


class TestReleasesmithError:
    def test_basic_message(self):
        error = ReleasesmithError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.details is None

    def test_message_with_details(self):
        error = ReleasesmithError("Operation failed", details="exit code 1")
        assert str(error) == "Operation failed - exit code 1"


@pytest.mark.parametrize(
    "cls, parent",
    [
        (ConfigFileError, ConfigurationError),
        (ConfigValidationError, ConfigurationError),
        (InvalidTargetError, ConfigurationError),
        (ConfigurationError, ReleasesmithError),
        (CredentialError, ReleasesmithError),
        (ExternalToolError, ReleasesmithError),
        (ReleaseHostError, ReleasesmithError),
        (ReleaseStateError, ReleasesmithError),
        (UnrecognizedChannelError, ReleaseStateError),
        (LedgerError, ReleasesmithError),
        (BuildError, ReleasesmithError),
    ],
)
def test_hierarchy(cls, parent):
    assert issubclass(cls, parent)


def test_external_tool_error_exposes_attempts():
    first = CommandResult(CommandSpec("rcedit"), 1, stderr="not found")
    second = CommandResult(CommandSpec("wine"), 2, stdout="wine: crashed")
    error = ExternalToolError("Failed to set icon", results=[first, second])

    assert error.result is second
    assert error.output == "not found\nwine: crashed"


def test_external_tool_error_without_results():
    error = ExternalToolError("failed")
    assert error.result is None
    assert error.output == ""


def test_release_host_error_attributes():
    error = ReleaseHostError("GET failed", status_code=404, url="https://x")
    assert error.status_code == 404
    assert error.url == "https://x"


def test_build_error_attributes():
    error = BuildError("Expected artifact osu.iOS.ipa was not produced", path="/staging/osu.iOS.ipa")
    assert error.path == "/staging/osu.iOS.ipa"
    assert str(error) == "Expected artifact osu.iOS.ipa was not produced"


def test_unrecognized_channel_message():
    error = UnrecognizedChannelError("win-x64", ["win", "win-arm64"])
    assert str(error) == "Unrecognised channel: win-x64 - expected one of win, win-arm64"
    assert error.expected == ["win", "win-arm64"]
