"""Ready-made classifiers and unknown-error listeners for FastAPI applications."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Mapping, Sequence

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from errormapper.core.errors import HttpError
from errormapper.mapper import UnknownErrorListener

VALIDATION_ERROR_CODE = "VALIDATION_ERROR"
VALIDATION_ERROR_MESSAGE = "Validation failed"


def http_exception_classifier(error: object) -> HttpError | None:
    """Classify Starlette/FastAPI ``HTTPException`` instances with an error status."""
    if not isinstance(error, StarletteHTTPException) or error.status_code < 400:
        return None

    detail = error.detail
    data: dict[str, object] | None = None
    if isinstance(detail, Mapping):
        message = detail.get("message")
        data = {key: value for key, value in detail.items() if key != "message"}
    else:
        message = detail

    return HttpError(
        str(message) if message else None,
        status_code=error.status_code,
        data=data or None,
        headers=error.headers,
    )


def request_validation_classifier(error: object) -> HttpError | None:
    """Classify request validation failures as 422 with per-field details."""
    if not isinstance(error, RequestValidationError):
        return None

    return HttpError(
        VALIDATION_ERROR_MESSAGE,
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY.value,
        data={
            "code": VALIDATION_ERROR_CODE,
            "details": format_validation_errors(error.errors()),
        },
    )


def format_validation_errors(errors: Sequence[Mapping[str, object]]) -> dict[str, str]:
    formatted: dict[str, str] = {}
    for error in errors:
        loc = error.get("loc") or ()
        field = _format_error_location(loc)  # type: ignore[arg-type]
        message = str(error.get("msg", "Invalid value"))
        if field in formatted:
            formatted[field] = f"{formatted[field]}; {message}"
        else:
            formatted[field] = message
    return formatted


def _format_error_location(location: Sequence[object]) -> str:
    filtered = [
        str(part)
        for part in location
        if part not in {"body", "query", "path"}  # hide transport-specific prefixes
    ]
    if not filtered:
        filtered = [str(part) for part in location]
    return ".".join(filtered) if filtered else "_schema"


def log_unknown_error(logger: logging.Logger | None = None) -> UnknownErrorListener:
    """Return a listener logging unknown errors with their traceback."""
    target = logger or logging.getLogger("errormapper.unknown")

    def listener(error: object) -> None:
        if isinstance(error, BaseException):
            target.error(
                "Unhandled exception mapped to internal error",
                exc_info=(error.__class__, error, error.__traceback__),
                extra={"error_type": type(error).__name__},
            )
        else:
            target.error(
                "Unknown error value mapped to internal error",
                extra={"error_type": type(error).__name__, "error_value": repr(error)},
            )

    return listener


__all__ = [
    "VALIDATION_ERROR_CODE",
    "VALIDATION_ERROR_MESSAGE",
    "format_validation_errors",
    "http_exception_classifier",
    "log_unknown_error",
    "request_validation_classifier",
]
