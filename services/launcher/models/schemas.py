"""
Pydantic schema definitions.

Request/response data models for the launcher API.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LaunchRequest(BaseModel):
    """Launch request; every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    game_prefix: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("game_prefix", "namePrefix")
    )

    @field_validator("game_prefix")
    @classmethod
    def reject_option_like_prefix(cls, v: Optional[str]) -> Optional[str]:
        # The prefix is appended to argv; it must never parse as an option.
        if v and v.startswith("-"):
            raise ValueError("game_prefix must not start with '-'")
        return v


class LaunchResponse(BaseModel):
    """Result of a buffered launch."""

    success: bool
    message: str
    output: Optional[str] = None


class EnvStatus(BaseModel):
    """Whether one required environment variable is set."""

    variable: str
    is_set: bool
