"""
Where: services/launcher/exceptions.py
What: Launcher exception handler registration and custom HTTP mappings.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.exceptions import (
    ConflictError,
    MissingCredentialsError,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)


async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(
        status_code=409,
        content={"success": False, "message": str(exc)},
    )


async def missing_credentials_handler(request: Request, exc: MissingCredentialsError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": str(exc), "missing": exc.missing},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ConflictError, conflict_handler)
    app.add_exception_handler(MissingCredentialsError, missing_credentials_handler)
