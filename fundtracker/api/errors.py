"""
Domain error -> HTTP response mapping
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fundtracker.domain.exceptions import (
    DuplicateUser,
    FundTrackerError,
    InsufficientUnits,
    InvalidAmount,
    InvalidReference,
    NotFound,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    NotFound: 404,
    InvalidReference: 404,
    InvalidAmount: 400,
    InsufficientUnits: 400,
    DuplicateUser: 409,
}


def status_for(exc: FundTrackerError) -> int:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


async def fundtracker_error_handler(request: Request, exc: FundTrackerError) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning("%s %s -> %s %s: %s", request.method, request.url.path, status_code, exc.code, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(FundTrackerError, fundtracker_error_handler)
