"""
Launcher configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from pathlib import Path

from pydantic import Field

from services.common.core.config import BaseAppConfig

_PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_REQUIRED_ENV_VARS = [
    "TF_VAR_github_org",
    "TF_VAR_github_pat",
    "TF_VAR_source_owner",
    "ARM_SUBSCRIPTION_ID",
    "TF_VAR_subscription_id",
]


class LauncherConfig(BaseAppConfig):
    """
    Configuration management for the Launcher service.
    """

    # Server settings
    BIND_HOST: str = Field(default="0.0.0.0", description="Listen host")
    PORT: int = Field(default=8080, description="Listen port")

    # Script settings
    LAUNCH_COMMAND: list[str] = Field(
        default_factory=lambda: [sys.executable, "-m", "tools.newgame.cli", "run"],
        description="Command that creates a game; the optional prefix is appended",
    )
    LAUNCH_WORKDIR: str = Field(default=".", description="Working directory for the command")
    REQUIRED_ENV_VARS: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_ENV_VARS),
        description="Variables that must be set before a launch is accepted",
    )

    # Path settings
    STATIC_DIR: str = Field(default=str(_PACKAGE_DIR / "static"), description="Static files")
    LOG_CONFIG_PATH: str = Field(
        default=str(_PACKAGE_DIR / "logging.yml"), description="YAML logging config file path"
    )

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = LauncherConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
