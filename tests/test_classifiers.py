from __future__ import annotations

import logging
import warnings

import pytest
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError

from errormapper.classifiers import (
    VALIDATION_ERROR_CODE,
    format_validation_errors,
    http_exception_classifier,
    log_unknown_error,
    request_validation_classifier,
)
from errormapper.mapper import ErrorMapperBuilder, MapperOptions


def test_http_exception_classifier_ignores_other_errors() -> None:
    assert http_exception_classifier(RuntimeError("boom")) is None
    assert http_exception_classifier(HTTPException(status_code=304)) is None


def test_http_exception_classifier_keeps_status_detail_and_headers() -> None:
    classified = http_exception_classifier(
        HTTPException(status_code=403, detail="Forbidden area", headers={"X-Reason": "scope"})
    )

    assert classified is not None
    assert classified.status_code == 403
    assert classified.output["payload"]["message"] == "Forbidden area"
    assert classified.output["headers"] == {"X-Reason": "scope"}


def test_http_exception_classifier_unpacks_mapping_detail() -> None:
    classified = http_exception_classifier(
        HTTPException(
            status_code=409,
            detail={
                "code": "DUPLICATE_LANGUAGE",
                "message": "Language profile already exists",
                "details": {"language": "en"},
            },
        )
    )

    assert classified is not None
    assert classified.message == "Language profile already exists"
    assert classified.data == {"code": "DUPLICATE_LANGUAGE", "details": {"language": "en"}}
    assert classified.code == "DUPLICATE_LANGUAGE"


def test_request_validation_classifier_formats_fields() -> None:
    error = RequestValidationError(
        [
            {"loc": ("body", "text"), "msg": "String should have at least 1 character"},
            {"loc": ("body", "text"), "msg": "Value error"},
            {"loc": ("query", "page"), "msg": "Input should be a valid integer"},
        ]
    )

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        classified = request_validation_classifier(error)

    assert classified is not None
    assert classified.status_code == 422
    assert classified.code == VALIDATION_ERROR_CODE
    assert classified.data["details"] == {
        "text": "String should have at least 1 character; Value error",
        "page": "Input should be a valid integer",
    }


def test_format_validation_errors_keeps_prefix_only_locations() -> None:
    assert format_validation_errors([{"loc": ("body",), "msg": "Field required"}]) == {
        "body": "Field required"
    }
    assert format_validation_errors([{"loc": (), "msg": "Invalid"}]) == {"_schema": "Invalid"}


def test_validation_code_reaches_payload_through_mapper() -> None:
    mapper = (
        ErrorMapperBuilder(MapperOptions(show_stack_trace=False, show_unknown_error_message=False))
        .register_error_classifier(request_validation_classifier)
        .get()
    )

    output = mapper(RequestValidationError([{"loc": ("body", "name"), "msg": "Field required"}]))

    assert output["status_code"] == 422
    assert output["payload"]["code"] == VALIDATION_ERROR_CODE


def test_log_unknown_error_logs_exceptions_with_traceback(caplog: pytest.LogCaptureFixture) -> None:
    listener = log_unknown_error(logging.getLogger("tests.unknown"))

    with caplog.at_level(logging.ERROR, logger="tests.unknown"):
        listener(RuntimeError("kaboom"))

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None
    assert record.error_type == "RuntimeError"


def test_log_unknown_error_logs_plain_values(caplog: pytest.LogCaptureFixture) -> None:
    listener = log_unknown_error()

    with caplog.at_level(logging.ERROR, logger="errormapper.unknown"):
        listener({"reason": "dict"})

    record = caplog.records[-1]
    assert record.exc_info is None
    assert record.error_value == "{'reason': 'dict'}"
