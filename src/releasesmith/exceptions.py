"""
Custom exceptions for releasesmith.

This module defines domain-specific exceptions that map onto the failure
categories of a deployment run: configuration problems, external tool
failures, release host failures and remote protocol violations.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from releasesmith.command_runner import CommandResult


class ReleasesmithError(Exception):
    """
    Base exception for all releasesmith errors.

    All custom exceptions should inherit from this class so that the CLI can
    turn any of them into a fatal, clearly marked termination.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ReleasesmithError):
    """
    Exception raised when configuration is invalid or missing.

    This includes:
    - Missing required configuration keys
    - Invalid configuration values
    - Configuration file parsing errors
    """

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when the configuration file cannot be read or parsed."""

    pass


class ConfigValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    pass


class InvalidTargetError(ConfigurationError):
    """Exception raised for an unknown platform or architecture."""

    pass


class CredentialError(ReleasesmithError):
    """
    Exception raised when a required secret cannot be obtained.

    Attributes:
        purpose: What the secret was requested for (e.g. "code-signing").
    """

    def __init__(
        self, message: str, purpose: Optional[str] = None, details: Optional[str] = None
    ) -> None:
        super().__init__(message, details)
        self.purpose = purpose


# =============================================================================
# External Tool Errors
# =============================================================================


class ExternalToolError(ReleasesmithError):
    """
    Exception raised when an external command exits unsuccessfully.

    Attributes:
        results: Results of every attempt that was made. A single command has
            one entry; an ordered list of alternative strategies has one entry
            per strategy tried.
    """

    def __init__(
        self,
        message: str,
        results: Sequence["CommandResult"] = (),
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.results: List["CommandResult"] = list(results)

    @property
    def result(self) -> Optional["CommandResult"]:
        """The last attempt made, if any."""
        return self.results[-1] if self.results else None

    @property
    def output(self) -> str:
        """Combined captured output of every attempt."""
        return "\n".join(r.output for r in self.results if r.output)


# =============================================================================
# Build Errors
# =============================================================================


class BuildError(ReleasesmithError):
    """
    Exception raised when a local build step cannot complete.

    This includes:
    - A missing or unreadable template directory
    - An expected artifact that the compiler did not produce
    - A runtime archive that cannot be extracted

    Attributes:
        path: The file or directory involved, if any.
    """

    def __init__(
        self, message: str, path: Optional[str] = None, details: Optional[str] = None
    ) -> None:
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Release Host Errors
# =============================================================================


class ReleaseHostError(ReleasesmithError):
    """
    Exception raised when a release host request fails.

    Attributes:
        status_code: The HTTP status code returned by the server, if any.
        url: The URL that was being accessed.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code
        self.url = url


class ReleaseStateError(ReleasesmithError):
    """
    Exception raised when the remote release is not in the expected state.

    This includes:
    - Attaching assets to a release that is no longer a draft
    - An expected asset missing after packaging
    - The release for a version missing after upload
    """

    pass


class UnrecognizedChannelError(ReleaseStateError):
    """Exception raised when an uploader is handed a channel it does not know."""

    def __init__(self, channel: str, expected: Sequence[str]) -> None:
        super().__init__(
            f"Unrecognised channel: {channel}",
            details=f"expected one of {', '.join(expected)}",
        )
        self.channel = channel
        self.expected = list(expected)


# =============================================================================
# Ledger Errors
# =============================================================================


class LedgerError(ReleasesmithError):
    """
    Exception raised for a malformed ledger or a ledger entry without a local file.

    Attributes:
        filename: The ledger entry filename involved, if any.
    """

    def __init__(
        self, message: str, filename: Optional[str] = None, details: Optional[str] = None
    ) -> None:
        super().__init__(message, details)
        self.filename = filename
