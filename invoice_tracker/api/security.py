"""Shared-secret authentication for workflow callbacks and event envelopes"""

import hmac
import logging
from typing import List
from fastapi import Request, status
from invoice_tracker.api.error import ClientError
from invoice_tracker.shared.result import Error

logger = logging.getLogger(__name__)

AUTH_MODES = ("bearer", "api_key", "any")


def _unauthorized(message: str) -> ClientError:
    return ClientError(
        Error(code="UNAUTHORIZED", message=message),
        status_code=status.HTTP_401_UNAUTHORIZED,
    )


def _presented_credentials(request: Request, mode: str) -> List[str]:
    credentials = []
    if mode in ("bearer", "any"):
        authorization = request.headers.get("authorization", "")
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            credentials.append(token.strip())
    if mode in ("api_key", "any"):
        api_key = request.headers.get("x-api-key")
        if api_key:
            credentials.append(api_key)
    return credentials


async def verify_callback_secret(request: Request) -> None:
    """
    FastAPI dependency guarding the callback and workflow event endpoints

    Accepts the configured secret as a bearer token and/or an X-API-Key
    header depending on CALLBACK_AUTH_MODE. An unconfigured secret
    rejects every request.
    """
    config = request.app.state.config
    secret = config.CALLBACK_SECRET or ""
    mode = config.CALLBACK_AUTH_MODE if config.CALLBACK_AUTH_MODE in AUTH_MODES else "any"

    credentials = _presented_credentials(request, mode)
    if not credentials:
        logger.warning(f"Missing callback credentials from {request.client.host if request.client else 'unknown'}")
        raise _unauthorized("Authorization header is required")

    if not secret:
        logger.error("CALLBACK_SECRET is not configured; rejecting callback")
        raise _unauthorized("Invalid authorization token")

    expected = secret.encode("utf-8")
    if not any(hmac.compare_digest(c.encode("utf-8"), expected) for c in credentials):
        logger.warning("Invalid callback authorization token")
        raise _unauthorized("Invalid authorization token")
