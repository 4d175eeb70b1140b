"""Custom exceptions for rnapipe."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class RnaPipeError(Exception):
    """Base exception for all rnapipe errors."""

    pass


class ConfigurationError(RnaPipeError):
    """Raised when configuration is invalid or missing."""

    pass


class ConditionAssignmentError(ConfigurationError):
    """Raised when samples cannot be mapped to experimental conditions."""

    pass


class DependencyError(RnaPipeError):
    """Raised when required external tools are missing."""

    def __init__(self, message: str = "", missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class SampleDiscoveryError(RnaPipeError):
    """Raised when the raw-input area does not form a valid sample set."""

    pass


class NoInputSamplesError(SampleDiscoveryError):
    """Raised when a project has no mate-1 read files."""

    pass


class IncompleteSamplePairError(SampleDiscoveryError):
    """Raised when a read file has no mate counterpart."""

    pass


class UnrecognizedReadFileError(SampleDiscoveryError):
    """Raised when a read file does not follow the mate naming convention."""

    pass


class ExternalToolError(RnaPipeError):
    """Raised when an external tool execution fails."""

    def __init__(self, message="", command=None, returncode=None, stderr=None):
        """Initialize ExternalToolError with optional command details.

        Args:
            message: Error message
            command: Command that was executed (list of strings)
            returncode: Exit code from the command
            stderr: Standard error output from the command
        """
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class StageExecutionError(RnaPipeError):
    """Raised when a stage fails or leaves invalid output artifacts."""

    def __init__(
        self,
        message: str,
        stage: str,
        sample: Optional[str] = None,
        project: Optional[Path] = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.sample = sample
        self.project = project


class OptionalToolUnavailable(UserWarning):
    """Warning category for optional tools that were not found."""

    pass


class OutputValidationError(RnaPipeError):
    """Raised when a collaborator's output has unexpected content."""

    pass
