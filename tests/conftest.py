from __future__ import annotations

import logging
from typing import Callable, Iterator

import pytest

from errormapper.core import logging as logging_module
from errormapper.core.config import get_settings

_SETTINGS_ENV_VARS = (
    "APP_ENV",
    "LOG_LEVEL",
    "ERROR_MAPPER_SHOW_STACK_TRACE",
    "ERROR_MAPPER_SHOW_UNKNOWN_ERROR_MESSAGE",
)


@pytest.fixture()
def settings_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[..., None]]:
    """Set settings environment variables and reset cached Settings and root logging."""
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level

    for key in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", False)
    get_settings.cache_clear()

    def apply(**values: str) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        get_settings.cache_clear()

    yield apply

    get_settings.cache_clear()
    root_logger.handlers = original_handlers
    root_logger.setLevel(original_level)
