from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from jobswipe.errors import JobSwipeError


logger = logging.getLogger(__name__)


async def job_swipe_error_handler(request: Request, exc: JobSwipeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(
            "Request failed",
            extra={"path": request.url.path, "kind": exc.kind, "error": exc.message},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "kind": exc.kind},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception occurred", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "kind": "internal"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JobSwipeError, job_swipe_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
