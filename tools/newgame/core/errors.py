"""Error types raised while creating a new game."""

from __future__ import annotations


class NewGameError(Exception):
    """Base class for every failure that ends a new-game run."""


class ConfigurationError(NewGameError):
    """Raised when a required input or substitution value is missing."""


class InvalidInputError(NewGameError):
    """Raised when the game prefix is malformed."""


class CredentialError(NewGameError):
    """Raised when a live credential check fails."""

    def __init__(self, check: str, message: str):
        self.check = check
        super().__init__(message)


class ExternalToolError(NewGameError):
    """Raised when a delegated command exits non-zero."""

    def __init__(self, step: str, returncode: int, output: str = ""):
        self.step = step
        self.returncode = returncode
        self.output = output
        super().__init__(f"step '{step}' failed with exit code {returncode}")


class RunDeclined(NewGameError):
    """Raised when the user answers anything but 'y' to the confirmation."""
