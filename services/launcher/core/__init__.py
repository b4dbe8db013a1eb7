"""
Launcher core modules.
"""

from .exceptions import ConflictError, LauncherError, MissingCredentialsError
from .run_state import RunGuard, RunState

__all__ = [
    "ConflictError",
    "LauncherError",
    "MissingCredentialsError",
    "RunGuard",
    "RunState",
]
