"""
Custom exception hierarchy for the console engine.

Rule: every error has a machine-readable `code` string so the browser shell
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class ConsoleException(Exception):
    """Base class for all console-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ConfigurationAbsentError(ConsoleException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "CONFIGURATION_ABSENT"

    def __init__(self, resource: str, operation: str):
        super().__init__(
            message=f"No {operation} screen is configured for {resource}.",
            details={"resource": resource, "operation": operation},
        )


class ScreenNotFoundError(ConsoleException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "SCREEN_NOT_FOUND"

    def __init__(self, pathname: str):
        super().__init__(
            message=f"No console screen matches {pathname!r}.",
            details={"pathname": pathname},
        )


class ScreenSessionNotFoundError(ConsoleException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "SCREEN_SESSION_NOT_FOUND"

    def __init__(self, screen_id: str):
        super().__init__(
            message=f"Screen {screen_id} is not mounted.",
            details={"screen_id": screen_id},
        )


class FormNotFoundError(ConsoleException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "FORM_NOT_FOUND"

    def __init__(self, form_id: str):
        super().__init__(
            message=f"Form {form_id} is not mounted.",
            details={"form_id": form_id},
        )


class FieldNotFoundError(ConsoleException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "FIELD_NOT_FOUND"

    def __init__(self, key: str):
        super().__init__(
            message=f"Form has no field {key!r}.",
            details={"key": key},
        )


class PathParamMissingError(ConsoleException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "PATH_PARAM_MISSING"

    def __init__(self, param: str, template: str):
        super().__init__(
            message=f"Path parameter {param!r} is required to build {template!r}.",
            details={"param": param, "template": template},
        )


class ValidationFailedError(ConsoleException):
    http_status = 422
    code = "VALIDATION_FAILED"

    def __init__(self, field: str, invalid: list[str]):
        super().__init__(
            message=f"Field {field!r} is invalid.",
            details={"field": field, "invalid": invalid},
        )


class FetchFailedError(ConsoleException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "FETCH_FAILED"

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        details: dict[str, Any] = {"url": url, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message=f"Failed to fetch {url}: {reason}", details=details)


class MalformedResponseError(FetchFailedError):
    code = "MALFORMED_RESPONSE"

    def __init__(self, url: str, reason: str = "response is not valid JSON"):
        super().__init__(url=url, reason=reason)


class SubmitFailedError(ConsoleException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "SUBMIT_FAILED"

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        details: dict[str, Any] = {"url": url, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message=f"Failed to submit to {url}: {reason}", details=details)


class SubmitInFlightError(ConsoleException):
    http_status = status.HTTP_409_CONFLICT
    code = "SUBMIT_IN_FLIGHT"

    def __init__(self, form_id: str):
        super().__init__(
            message=f"Form {form_id} already has a submit in flight.",
            details={"form_id": form_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def console_exception_handler(request: Request, exc: ConsoleException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=422,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
