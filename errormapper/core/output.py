"""Shapes of the client-facing error output."""

from __future__ import annotations

from typing import NotRequired, TypedDict

HeaderValue = str | list[str] | int


class ErrorPayload(TypedDict, total=False):
    """JSON body returned to the client; transformers may add extra keys."""

    message: str
    code: str
    name: str
    stack: str
    error: str
    status_code: int


class ErrorOutput(TypedDict):
    status_code: int
    payload: ErrorPayload
    headers: NotRequired[dict[str, HeaderValue]]


__all__ = ["ErrorOutput", "ErrorPayload", "HeaderValue"]
