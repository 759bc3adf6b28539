"""
Error mapper pipeline.

An ``ErrorMapperBuilder`` collects custom classifiers, unknown-error
observers and output transformers, then ``get()`` produces a function that
turns any raised value into an ``ErrorOutput``:

1. already-classified ``HttpError`` values are used as-is;
2. otherwise custom classifiers run in order and the first match wins;
3. otherwise every unknown-error observer is notified and a generic 500 is
   built from the raw value;
4. the classified error's default output is folded through the output
   transformers in registration order.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Protocol

from errormapper.core.config import get_settings
from errormapper.core.errors import HttpError, internal, is_http_error
from errormapper.core.logging import configure_logging
from errormapper.core.output import ErrorOutput

UNKNOWN_ERROR_MESSAGE = "Internal server error. Please try again later."

ErrorClassifier = Callable[[object], HttpError | None]
UnknownErrorListener = Callable[[object], None]
OutputTransformer = Callable[[ErrorOutput, object, HttpError | None], ErrorOutput]
Mapper = Callable[[object], ErrorOutput]

logger = logging.getLogger("errormapper.mapper")


@dataclass(frozen=True)
class MapperOptions:
    show_stack_trace: bool
    """Whether to include the stack trace of every exception."""

    show_unknown_error_message: bool
    """Whether to expose the message of errors no classifier recognized."""


class EnvironmentFlags(Protocol):
    @property
    def is_development(self) -> bool: ...

    @property
    def is_test(self) -> bool: ...


class ErrorMapperBuilder:
    """Fluent builder for the error mapping function."""

    def __init__(self, options: MapperOptions) -> None:
        self.options = options
        self._classifiers: list[ErrorClassifier] = []
        self._unknown_error_listeners: list[UnknownErrorListener] = []
        self._output_transformers: list[OutputTransformer] = []

        self.run_if(
            options.show_stack_trace,
            lambda builder: builder.register_output_transformer(stack_transformer),
        )
        self.register_output_transformer(code_transformer)
        self.run_if(
            not options.show_unknown_error_message,
            lambda builder: builder.register_output_transformer(unknown_message_transformer),
        )

    @classmethod
    def from_env(cls, environment: EnvironmentFlags | None = None) -> ErrorMapperBuilder:
        """
        Build with options derived from the runtime environment.

        Stack traces and unknown error messages are shown in development and
        test environments only. When no flags are injected the cached
        ``Settings`` are used, its explicit overrides take precedence and
        root logging is configured at its ``LOG_LEVEL``.
        """
        if environment is not None:
            verbose = environment.is_development or environment.is_test
            show_stack_trace = show_unknown_error_message = verbose
        else:
            settings = get_settings()
            configure_logging(settings.log_level)
            verbose = settings.is_development or settings.is_test
            show_stack_trace = _override(settings.show_stack_trace, verbose)
            show_unknown_error_message = _override(settings.show_unknown_error_message, verbose)

        return cls(
            MapperOptions(
                show_stack_trace=show_stack_trace,
                show_unknown_error_message=show_unknown_error_message,
            )
        )

    def run_if(
        self,
        condition: bool,
        callback: Callable[[ErrorMapperBuilder], object],
    ) -> ErrorMapperBuilder:
        if condition:
            callback(self)
        return self

    def register_error_classifier(self, classifier: ErrorClassifier) -> ErrorMapperBuilder:
        self._classifiers.append(classifier)
        return self

    def on_unknown_error(self, listener: UnknownErrorListener) -> ErrorMapperBuilder:
        self._unknown_error_listeners.append(listener)
        return self

    def register_output_transformer(self, transformer: OutputTransformer) -> ErrorMapperBuilder:
        self._output_transformers.append(transformer)
        return self

    def get(self) -> Mapper:
        classifiers = tuple(self._classifiers)
        listeners = tuple(self._unknown_error_listeners)
        transformers = tuple(self._output_transformers)

        def classify(error: object) -> HttpError:
            if is_http_error(error):
                return error  # type: ignore[return-value]

            for classifier in classifiers:
                result = classifier(error)
                if result is not None:
                    return result

            logger.debug(
                "Unknown error, falling back to internal error",
                extra={"error_type": type(error).__name__},
            )
            for listener in listeners:
                listener(error)

            fallback = internal(_describe(error))
            fallback.unknown = True
            fallback.reformat(debug=True)
            return fallback

        def map_error(error: object) -> ErrorOutput:
            classified = classify(error)
            output = classified.render()
            for transformer in transformers:
                output = transformer(output, error, classified)
            return output

        return map_error


def stack_transformer(
    output: ErrorOutput,
    error: object,
    classified: HttpError | None = None,
) -> ErrorOutput:
    """Add ``payload.stack`` for exceptions."""
    if not isinstance(error, BaseException):
        return output
    try:
        stack = getattr(error, "stack", None)
    except Exception:  # noqa: BLE001
        stack = None
    if not isinstance(stack, str):
        stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return {**output, "payload": {**output["payload"], "stack": stack}}


def code_transformer(
    output: ErrorOutput,
    error: object,
    classified: HttpError | None = None,
) -> ErrorOutput:
    """Forward an error ``code`` into ``payload.code``."""
    if isinstance(error, HttpError):
        code = error.code
    else:
        code = _read_code(error)
        if not code and classified is not None:
            code = classified.code
    if code:
        return {**output, "payload": {**output["payload"], "code": code}}
    return output


def unknown_message_transformer(
    output: ErrorOutput,
    error: object,
    classified: HttpError | None = None,
) -> ErrorOutput:
    """Replace the message of unknown errors with a generic one."""
    if classified is not None and classified.unknown and classified.status_code == 500:
        return {**output, "payload": {**output["payload"], "message": UNKNOWN_ERROR_MESSAGE}}
    return output


def _override(value: bool | None, default: bool) -> bool:
    return default if value is None else value


def _read_code(error: object) -> object | None:
    try:
        if isinstance(error, Mapping):
            return error.get("code")
        return getattr(error, "code", None)
    except Exception:  # noqa: BLE001
        logger.debug("Error code is unreadable", extra={"error_type": type(error).__name__})
        return None


def _describe(error: object) -> str:
    """
    Return the fallback message for an unknown error.

    An empty result lets ``HttpError`` fall back to the reason phrase.
    """
    try:
        text = str(error)
    except Exception:  # noqa: BLE001
        logger.debug("Error value is unprintable", extra={"error_type": type(error).__name__})
        return type(error).__name__
    if not text and isinstance(error, BaseException):
        return type(error).__name__
    return text


__all__ = [
    "UNKNOWN_ERROR_MESSAGE",
    "EnvironmentFlags",
    "ErrorClassifier",
    "ErrorMapperBuilder",
    "Mapper",
    "MapperOptions",
    "OutputTransformer",
    "UnknownErrorListener",
    "code_transformer",
    "stack_transformer",
    "unknown_message_transformer",
]
