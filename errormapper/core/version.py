"""Installed version of the package."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from typing import Final

DISTRIBUTION_NAME: Final[str] = "http-error-mapper"


def resolve_version(distribution: str = DISTRIBUTION_NAME) -> str:
    """Return the installed version, or ``0.0.0`` when running from a bare checkout."""
    try:
        return version(distribution)
    except PackageNotFoundError:
        return "0.0.0"


__version__: Final[str] = resolve_version()

__all__ = ["DISTRIBUTION_NAME", "__version__", "resolve_version"]
