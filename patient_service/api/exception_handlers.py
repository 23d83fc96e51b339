"""Translate errors into HTTP responses.

This is the only place where exceptions become status codes; routers and the
service let everything propagate. Log lines carry request metadata and field
names only, never submitted values.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from patient_service.api.schemas import ErrorOut
from patient_service.core.metrics import record_error
from patient_service.core.middleware.http_logging import (
    REQUEST_ID_HEADER,
    get_or_create_request_id,
)
from patient_service.domain.exceptions import (
    EmailAlreadyExistsError,
    MalformedInputError,
    PatientNotFoundError,
    ValidationFailedError,
)

logger = logging.getLogger("patient_service.errors")


def error_response(
    *,
    status_code: int,
    message: str,
    details: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorOut(
        timestamp=datetime.now(tz=UTC),
        status=status_code,
        error=HTTPStatus(status_code).phrase,
        message=message,
        details=details,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


def _log_extra(request: Request, *, status_code: int, error: str, **fields: Any) -> dict[str, Any]:
    request_id = getattr(request.state, "request_id", None) or request.headers.get("X-Request-ID")
    return {
        "request_id": request_id,
        "http_method": request.method,
        "request_path": request.url.path,  # no query string
        "status_code": status_code,
        "error": error,
        **fields,
    }


def _client_error(
    request: Request,
    *,
    status_code: int,
    error: str,
    message: str,
    details: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    logger.warning(
        message,
        extra=_log_extra(
            request,
            status_code=status_code,
            error=error,
            fields=sorted(details) if details else None,
        ),
    )
    record_error(error=error, status_code=status_code)
    return error_response(
        status_code=status_code, message=message, details=details, headers=headers
    )


def _request_validation_details(exc: RequestValidationError) -> tuple[str, dict[str, str]]:
    details: dict[str, str] = {}
    in_body = False
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        in_body = in_body or (bool(loc) and loc[0] == "body")
        key = loc[-1] if loc else "request"
        details.setdefault(key, str(err.get("msg", "Invalid value")))
    message = "Validation failed" if in_body else "Malformed request"
    return message, details


def register_exception_handlers(app: FastAPI) -> None:
    """Register application exception handlers."""

    @app.exception_handler(ValidationFailedError)
    async def handle_validation_failed(
        request: Request, exc: ValidationFailedError
    ) -> JSONResponse:
        return _client_error(
            request,
            status_code=400,
            error="validation_failed",
            message=exc.message,
            details=exc.details,
        )

    @app.exception_handler(PatientNotFoundError)
    async def handle_patient_not_found(request: Request, exc: PatientNotFoundError) -> JSONResponse:
        return _client_error(
            request, status_code=404, error="patient_not_found", message="Patient not found"
        )

    @app.exception_handler(EmailAlreadyExistsError)
    async def handle_email_conflict(request: Request, exc: EmailAlreadyExistsError) -> JSONResponse:
        return _client_error(
            request, status_code=409, error="email_conflict", message="Email address already exists"
        )

    @app.exception_handler(MalformedInputError)
    async def handle_malformed_input(request: Request, exc: MalformedInputError) -> JSONResponse:
        return _client_error(request, status_code=400, error="malformed_input", message=exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message, details = _request_validation_details(exc)
        return _client_error(
            request,
            status_code=400,
            error="request_validation",
            message=message,
            details=details,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _client_error(
            request,
            status_code=exc.status_code,
            error="http",
            message=str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        # Runs outside the middleware stack, so the request id header is set here.
        request_id = getattr(request.state, "request_id", None) or get_or_create_request_id(
            request=request
        )
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            extra={
                **_log_extra(request, status_code=500, error="internal"),
                "request_id": request_id,
            },
        )
        record_error(error="internal", status_code=500)
        return error_response(
            status_code=500,
            message="An unexpected error occurred",
            headers={REQUEST_ID_HEADER: request_id},
        )
