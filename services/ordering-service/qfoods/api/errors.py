"""Translation of service errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..domain.errors import ServiceError

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "server error"


def http_error(exc: ServiceError) -> HTTPException:
    """Map a service error to an ``HTTPException`` without leaking internals on 5xx."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("request failed: %s", exc)
        return HTTPException(status_code=exc.status_code, detail=GENERIC_SERVER_ERROR)
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Basic"}
    return HTTPException(status_code=exc.status_code, detail=str(exc), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for malformed bodies and faults that escaped the routes."""

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError) -> JSONResponse:
        error = http_error(exc)
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": error.detail},
            headers=error.headers,
        )

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": GENERIC_SERVER_ERROR},
        )
