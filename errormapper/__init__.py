"""
Map arbitrary raised values to normalized HTTP error outputs.

The package exposes the ``ErrorMapperBuilder`` pipeline, the ``HttpError``
classification primitives and FastAPI glue for rendering the result.
"""

from __future__ import annotations

from errormapper.core.errors import HttpError, is_http_error
from errormapper.core.output import ErrorOutput, ErrorPayload
from errormapper.core.version import __version__
from errormapper.mapper import (
    UNKNOWN_ERROR_MESSAGE,
    ErrorMapperBuilder,
    Mapper,
    MapperOptions,
)

__all__ = [
    "UNKNOWN_ERROR_MESSAGE",
    "ErrorMapperBuilder",
    "ErrorOutput",
    "ErrorPayload",
    "HttpError",
    "Mapper",
    "MapperOptions",
    "__version__",
    "is_http_error",
]
