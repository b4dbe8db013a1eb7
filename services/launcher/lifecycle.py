"""
Where: services/launcher/lifecycle.py
What: Launcher startup/shutdown for the run guard and script launcher.
Why: Keep main.py focused on app assembly.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .config import LauncherConfig
from .core.env import missing_env_vars
from .core.run_state import RunGuard
from .services.script_runner import ScriptLauncher

logger = logging.getLogger("launcher.main")


@asynccontextmanager
async def manage_lifespan(app: FastAPI, launcher_config: LauncherConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    missing = missing_env_vars(launcher_config.REQUIRED_ENV_VARS)
    if missing:
        logger.warning(f"Missing environment variables: {missing}")
        logger.warning(
            "The server will start, but launching games will fail until these are set."
        )

    app.state.run_guard = RunGuard()
    app.state.script_launcher = ScriptLauncher(
        launcher_config.LAUNCH_COMMAND, workdir=launcher_config.LAUNCH_WORKDIR
    )
    logger.info(
        "Launcher initialized",
        extra={"launch_command": launcher_config.LAUNCH_COMMAND},
    )

    yield

    if app.state.run_guard.running:
        logger.warning("Launcher shutting down; waiting for the running game launch to exit.")
    await app.state.script_launcher.wait_idle()
    logger.info("Launcher shutting down.")
