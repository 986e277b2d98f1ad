"""Exception handlers for the FastAPI application."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nutrition_engine.domain.errors import InvalidArgumentError

_logger = logging.getLogger(__name__)


async def invalid_argument_handler(
    request: Request, exc: InvalidArgumentError
) -> JSONResponse:
    """Return a 400 response naming the offending fields."""
    _logger.warning(
        "Invalid argument on %s %s: %s",
        request.method,
        request.url.path,
        exc.message,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "invalid-argument",
                "message": exc.message,
                "fields": exc.fields,
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register engine exception handlers on the app."""
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
