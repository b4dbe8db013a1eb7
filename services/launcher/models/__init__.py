"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .schemas import EnvStatus, LaunchRequest, LaunchResponse

__all__ = [
    "EnvStatus",
    "LaunchRequest",
    "LaunchResponse",
]
