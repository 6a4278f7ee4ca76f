"""API error envelope

Every error leaves the API as {"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any, Dict, Optional
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from invoice_tracker.shared.result import Error
from invoice_tracker.shared.validation import validation_details

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """Use case error rendered with the given HTTP status"""

    def __init__(
        self,
        error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code
        self.details = details
        self.headers = headers


def error_response(
    code: str,
    message: str,
    status_code: int,
    details: Optional[Any] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    body: Dict[str, Any] = {"error": {"code": code, "message": message}}
    if details is not None:
        body["error"]["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


async def _client_error_handler(request: Request, exc: ClientError):
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} -> {exc.status_code} "
            f"{exc.error.code}: {exc.error.reason or exc.error.message}"
        )
    else:
        logger.warning(
            f"{request.method} {request.url.path} -> {exc.status_code} {exc.error.code}"
        )
    return error_response(
        exc.error.code, exc.error.message, exc.status_code, exc.details, exc.headers
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = validation_details(exc.errors())
    logger.warning(f"validation_error | {request.method} {request.url.path} errors={errors}")
    return error_response(
        "VALIDATION_ERROR",
        "Invalid request parameters",
        status.HTTP_400_BAD_REQUEST,
        details=errors,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClientError, _client_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
