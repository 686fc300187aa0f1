"""Failure types raised by the modularize pipeline.

Every error is fatal for the run. The CLI turns any ``ModularizeError`` into a
clean non-zero exit with the underlying cause message.
"""

from __future__ import annotations


class ModularizeError(RuntimeError):
    """Base class for all pipeline failures."""


class ConfigurationError(ModularizeError):
    """Raised when a required directory is unset or has the wrong type."""


class ArchiveOpenError(ModularizeError):
    """Raised when an artifact cannot be opened as a zip archive."""


class CopyError(ModularizeError):
    """Raised when copying an artifact into an output area fails."""


class ToolInvocationError(ModularizeError):
    """Raised when an external tool is missing or exits non-zero."""

    def __init__(self, message: str, *, command: list[str] | None = None, returncode: int | None = None) -> None:
        super().__init__(message)
        self.command = list(command or [])
        self.returncode = returncode


class DescriptorNotFoundError(ModularizeError):
    """Raised when no work-area entry matches an artifact."""


class InvalidDescriptorError(ModularizeError):
    """Raised when descriptor text has no module declaration."""


class ReportWriteError(ModularizeError):
    """Raised when the run inventory or summary cannot be written."""
