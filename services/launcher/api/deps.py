"""
Dependency Injection for Launcher API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated

from fastapi import Depends, Request

from ..core.run_state import RunGuard
from ..services.script_runner import ScriptLauncher


def get_run_guard(request: Request) -> RunGuard:
    return request.app.state.run_guard


def get_script_launcher(request: Request) -> ScriptLauncher:
    return request.app.state.script_launcher


RunGuardDep = Annotated[RunGuard, Depends(get_run_guard)]
ScriptLauncherDep = Annotated[ScriptLauncher, Depends(get_script_launcher)]
