"""HTTP error primitives used as the classified form of every mapped error."""

from __future__ import annotations

import copy
from http import HTTPStatus
from typing import Mapping

from fastapi import status

from errormapper.core.output import ErrorOutput, HeaderValue

INTERNAL_ERROR_MESSAGE = "An internal server error occurred"


def status_phrase(status_code: int) -> str:
    """Return the HTTP reason phrase for ``status_code`` or ``"Unknown"``."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


class HttpError(Exception):
    """Error carrying a definite HTTP status, message, data and rendered output."""

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        data: object | None = None,
        headers: Mapping[str, HeaderValue] | None = None,
    ) -> None:
        if status_code < 400:
            raise ValueError("HTTP errors must use a status code >= 400.")
        resolved_message = message or status_phrase(status_code)
        super().__init__(resolved_message)
        self.message = resolved_message
        self.status_code = status_code
        self.data = data
        # Set by the mapper on fallback errors built for unrecognized input.
        self.unknown = False
        self.output: ErrorOutput = {
            "status_code": status_code,
            "payload": {"message": resolved_message},
            "headers": dict(headers or {}),
        }
        self.reformat()

    def reformat(self, debug: bool = False) -> None:
        """
        Rebuild the default payload from the current status and message.

        A 500 hides its message unless ``debug`` is set; the reason phrase
        in ``payload["error"]`` never carries the message.
        """
        status_code = self.output["status_code"]
        payload = self.output["payload"]
        payload["status_code"] = status_code
        payload["error"] = status_phrase(status_code)
        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR and not debug:
            payload["message"] = INTERNAL_ERROR_MESSAGE
        elif self.message:
            payload["message"] = self.message

    def render(self) -> ErrorOutput:
        """Return a deep copy of the default output safe to hand to transformers."""
        return copy.deepcopy(self.output)

    @property
    def code(self) -> object | None:
        if isinstance(self.data, Mapping):
            return self.data.get("code")
        return getattr(self.data, "code", None)

    @classmethod
    def wrap(
        cls,
        exc: BaseException,
        *,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        message: str | None = None,
        data: object | None = None,
    ) -> HttpError:
        """Classify an existing exception, keeping it as ``__cause__``."""
        if isinstance(exc, HttpError):
            return exc
        error = cls(message or str(exc) or None, status_code=status_code, data=data)
        error.__cause__ = exc
        return error


def is_http_error(value: object) -> bool:
    return isinstance(value, HttpError)


def bad_request(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_400_BAD_REQUEST, data=data)


def unauthorized(
    message: str | None = None,
    scheme: str | None = None,
    data: object | None = None,
) -> HttpError:
    headers = {"WWW-Authenticate": scheme} if scheme else None
    return HttpError(
        message,
        status_code=status.HTTP_401_UNAUTHORIZED,
        data=data,
        headers=headers,
    )


def forbidden(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_403_FORBIDDEN, data=data)


def not_found(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_404_NOT_FOUND, data=data)


def method_not_allowed(
    message: str | None = None,
    data: object | None = None,
    allow: list[str] | None = None,
) -> HttpError:
    headers = {"Allow": ", ".join(allow)} if allow else None
    return HttpError(
        message,
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        data=data,
        headers=headers,
    )


def conflict(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_409_CONFLICT, data=data)


def payload_too_large(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=HTTPStatus.REQUEST_ENTITY_TOO_LARGE.value, data=data)


def unprocessable_entity(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=HTTPStatus.UNPROCESSABLE_ENTITY.value, data=data)


def too_many_requests(
    message: str | None = None,
    data: object | None = None,
    retry_after: int | None = None,
) -> HttpError:
    if retry_after is not None and retry_after < 0:
        raise ValueError("retry_after must be >= 0.")
    headers = {"Retry-After": retry_after} if retry_after is not None else None
    return HttpError(
        message,
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        data=data,
        headers=headers,
    )


def internal(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, data=data)


def bad_gateway(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_502_BAD_GATEWAY, data=data)


def service_unavailable(message: str | None = None, data: object | None = None) -> HttpError:
    return HttpError(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, data=data)


__all__ = [
    "INTERNAL_ERROR_MESSAGE",
    "HttpError",
    "bad_gateway",
    "bad_request",
    "conflict",
    "forbidden",
    "internal",
    "is_http_error",
    "method_not_allowed",
    "not_found",
    "payload_too_large",
    "service_unavailable",
    "status_phrase",
    "too_many_requests",
    "unauthorized",
    "unprocessable_entity",
]
