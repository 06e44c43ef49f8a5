"""Turn ``AppError`` and HTTP exceptions into JSON responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from formaflow.core.errors import AppError
from formaflow.core.logging import get_logger

logger = get_logger(__name__)


def _log_for(status_code: int):
    return logger.error if status_code >= 500 else logger.info


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Body is ``{"code", "message", "details"?}``; ``details`` is omitted when empty."""
    _log_for(exc.status_code)(
        "app_error",
        code=exc.code,
        status_code=exc.status_code,
        message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(exclude_none=True),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    _log_for(exc.status_code)(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
