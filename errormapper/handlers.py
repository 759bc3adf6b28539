"""FastAPI exception handlers rendering mapped error outputs."""

from __future__ import annotations

from typing import Awaitable, Callable, cast

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from errormapper.core.output import ErrorOutput, HeaderValue
from errormapper.mapper import Mapper

ExceptionHandlerCallable = Callable[[Request, Exception], Awaitable[Response]]


def register_error_mapper(app: FastAPI, mapper: Mapper) -> None:
    """Route every exception raised by ``app`` through ``mapper``."""

    async def mapped_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        return error_output_response(mapper(exc))

    handler = cast(ExceptionHandlerCallable, mapped_exception_handler)
    app.add_exception_handler(RequestValidationError, handler)
    app.add_exception_handler(StarletteHTTPException, handler)
    app.add_exception_handler(Exception, handler)


def error_output_response(output: ErrorOutput) -> JSONResponse:
    """Return JSONResponse carrying the status, payload and headers of ``output``."""
    headers = _normalize_headers(output.get("headers") or {})
    return JSONResponse(
        content=jsonable_encoder(output["payload"]),
        status_code=output["status_code"],
        headers=headers or None,
    )


def _normalize_headers(headers: dict[str, HeaderValue]) -> dict[str, str]:
    normalized: dict[str, str] = {}
    for name, value in headers.items():
        if value is None:
            continue
        if isinstance(value, list):
            normalized[name] = ", ".join(str(item) for item in value)
        else:
            normalized[name] = str(value)
    return normalized


__all__ = ["error_output_response", "register_error_mapper"]
