"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Ce module convertit les erreurs du fournisseur astronomique (`ProviderError`) et les
`HTTPException` en réponses JSON homogènes `{code, message, request_id}`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from panchang_backend.core.http_constants import (
    HTTP_BAD_GATEWAY,
    HTTP_STATUS_ERROR_MAX,
    HTTP_STATUS_ERROR_MIN,
)
from panchang_backend.infra.http_clients import ProviderError

log = structlog.get_logger(__name__)

# Map common HTTP status codes to error codes
ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    408: "REQUEST_TIMEOUT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
    500: "INTERNAL_ERROR",
    502: "BAD_GATEWAY",
    503: "SERVICE_UNAVAILABLE",
    504: "GATEWAY_TIMEOUT",
}


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    request_id: str | None = None
    details: dict[str, Any] | None = None


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    request_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    envelope = ErrorEnvelope(code=code, message=message, request_id=request_id, details=details)
    return JSONResponse(
        status_code=status_code,
        content={
            "code": envelope.code,
            "message": envelope.message,
            "request_id": envelope.request_id,
            **({"details": envelope.details} if envelope.details else {}),
        },
    )


def extract_request_id(request: Request) -> str | None:
    """Identifiant posé par `RequestIDMiddleware`, sinon l'en-tête entrant."""
    return getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")


def provider_status(exc: ProviderError) -> int:
    """Statut HTTP renvoyé au client pour une erreur du fournisseur.

    Un statut hors de la plage 4xx-5xx devient 502.
    """
    if HTTP_STATUS_ERROR_MIN <= exc.status <= HTTP_STATUS_ERROR_MAX:
        return exc.status
    return HTTP_BAD_GATEWAY


def handle_provider_error(request: Request, exc: ProviderError) -> JSONResponse:
    """Handle ProviderError exceptions with standard envelope."""
    status = provider_status(exc)
    code = exc.code or ERROR_CODES.get(status, "PROVIDER_ERROR")
    log.error(
        "provider_error_response",
        code=code,
        status_code=status,
        error=exc.message,
        path=request.url.path,
    )
    return create_error_response(
        status_code=status,
        code=code,
        message=exc.message,
        request_id=extract_request_id(request),
    )


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with standard envelope."""
    code = ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    log.info("http_exception", code=code, status_code=exc.status_code, path=request.url.path)
    return create_error_response(
        status_code=exc.status_code,
        code=code,
        message=str(exc.detail),
        request_id=extract_request_id(request),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProviderError, handle_provider_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
