"""
Game Launcher - one-button web front end for the new-game command.

Serves a static page, reports which required environment variables are set,
and runs the new-game command (buffered or streamed) with at most one run in
flight at a time.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, AsyncIterator, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse

from services.common.core.logging_config import setup_logging

from .api.deps import RunGuardDep, ScriptLauncherDep
from .config import config
from .core.env import env_statuses, missing_env_vars
from .core.exceptions import MissingCredentialsError
from .core.run_state import RunGuard
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import access_log_middleware
from .models import EnvStatus, LaunchRequest, LaunchResponse
from .services.script_runner import LaunchEvent, exit_message

# Logger setup
setup_logging(config.LOG_CONFIG_PATH)
logger = logging.getLogger("launcher.main")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}

LaunchBody = Annotated[Optional[LaunchRequest], Body()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with manage_lifespan(app, config):
        yield


app = FastAPI(title="Game Launcher", version="1.0.0", lifespan=lifespan, root_path=config.root_path)
app.middleware("http")(access_log_middleware)
register_exception_handlers(app)


def _begin_launch(guard: RunGuard) -> None:
    """Take the run guard, then assert required variables are present."""
    guard.acquire()
    missing = missing_env_vars(config.REQUIRED_ENV_VARS)
    if missing:
        guard.release()
        raise MissingCredentialsError(missing)


def _launch_response(status_code: int, body: LaunchResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _event_stream(events: AsyncIterator[LaunchEvent]) -> StreamingResponse:
    async def body():
        async for event in events:
            yield event.encode()

    return StreamingResponse(body(), media_type="text/event-stream", headers=SSE_HEADERS)


async def _single_event(event: LaunchEvent) -> AsyncIterator[LaunchEvent]:
    yield event


# ===========================================
# Endpoint definitions.
# ===========================================


@app.get("/", include_in_schema=False)
async def serve_index():
    index_path = Path(config.STATIC_DIR) / "index.html"
    try:
        content = index_path.read_text(encoding="utf-8")
    except OSError:
        raise HTTPException(status_code=500, detail="Failed to load page")
    return HTMLResponse(content)


@app.get("/health")
async def health_check(guard: RunGuardDep):
    """Health check endpoint."""
    return {"status": "healthy", "run_state": guard.state.value}


@app.get("/api/env-status", response_model=list[EnvStatus])
async def env_status():
    """Report whether each required environment variable is set."""
    return env_statuses(config.REQUIRED_ENV_VARS)


@app.post("/api/launch", response_model=LaunchResponse)
async def launch(
    guard: RunGuardDep, launcher: ScriptLauncherDep, launch_request: LaunchBody = None
):
    """
    Run the new-game command to completion and return its full output.

    409 while another launch runs, 400 when required variables are missing,
    500 when the command cannot start or exits non-zero.
    """
    _begin_launch(guard)
    game_prefix = launch_request.game_prefix if launch_request else None

    try:
        process = await launcher.spawn(game_prefix)
    except OSError as e:
        guard.release()
        logger.error(f"Failed to start launch script: {e}")
        return _launch_response(
            500, LaunchResponse(success=False, message=f"Failed to start script: {e}")
        )
    except BaseException:
        guard.release()
        raise

    result = await launcher.collect(process, on_exit=guard.release)
    if not result.success:
        return _launch_response(
            500,
            LaunchResponse(
                success=False, message=exit_message(result.returncode), output=result.output
            ),
        )

    return _launch_response(
        200,
        LaunchResponse(
            success=True, message="Game launch completed successfully", output=result.output
        ),
    )


@app.post("/api/launch-stream")
async def launch_stream(
    guard: RunGuardDep, launcher: ScriptLauncherDep, launch_request: LaunchBody = None
):
    """
    Run the new-game command and stream its output as server-sent events.

    Events: ``start``, one ``output`` per line (stderr lines prefixed), then
    exactly one ``complete`` or ``error``.
    """
    _begin_launch(guard)
    game_prefix = launch_request.game_prefix if launch_request else None

    try:
        process = await launcher.spawn(game_prefix)
    except OSError as e:
        guard.release()
        logger.error(f"Failed to start launch script: {e}")
        return _event_stream(_single_event(LaunchEvent("error", f"Failed to start script: {e}")))
    except BaseException:
        guard.release()
        raise

    stream = launcher.relay(process, on_exit=guard.release)
    return _event_stream(stream.events())


def run() -> None:
    import uvicorn

    logger.info(f"Starting server on {config.BIND_HOST}:{config.PORT}")
    uvicorn.run(app, host=config.BIND_HOST, port=config.PORT, log_config=None)


if __name__ == "__main__":
    run()
