"""Typed readers for ``TRUTHTALLY_*`` and related environment variables."""

from __future__ import annotations

import logging
import os

from .errors import ConfigurationError


def env_str(name: str) -> str | None:
    """Return the stripped value of ``name``; unset and blank both read as ``None``."""

    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def env_int(
    name: str,
    default: int,
    *,
    minimum: int = 1,
    maximum: int | None = None,
) -> int:
    raw = env_str(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ConfigurationError(f"{name} must be <= {maximum}, got {value}")
    return value


def env_log_level(name: str, default: int) -> int:
    """Parse a level name such as ``debug`` or ``WARNING``."""

    raw = env_str(name)
    if raw is None:
        return default
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"{name} must be a logging level name, got {raw!r}")
    return level
