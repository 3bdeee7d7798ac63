"""
Exception hierarchy for TagPatch.

Setup, resolution and git errors are fatal and abort the run.
Patch document errors are recorded on the document outcome and the
run continues with the next document.
"""

from typing import Optional


class TagpatchError(Exception):
    """Base class for every TagPatch failure."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class SetupError(TagpatchError):
    """Invalid repository, missing patch directory, or similar."""


class ConfigError(SetupError):
    """Invalid command-line or environment configuration."""


class ResolutionError(TagpatchError):
    """Tag enumeration failed."""


class GitOperationError(TagpatchError):
    """A git command failed."""

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        stderr: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.command = command
        self.stderr = stderr

    def __str__(self) -> str:
        if self.stderr:
            return f"{self.message}: {self.stderr.strip()}"
        return self.message


class PatchDocumentError(TagpatchError):
    """Reading or writing the target of one patch document failed."""

    def __init__(self, target_path: str, message: str, cause: Optional[Exception] = None):
        super().__init__(f"{target_path}: {message}", cause=cause)
        self.target_path = target_path
