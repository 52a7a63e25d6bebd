"""Logging configuration for upserter entry points."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from .env import ENV_PREFIX, optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = f"{ENV_PREFIX}LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATE_FORMAT: Final[str] = "%H:%M:%S"


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: int = logging.INFO


def parse_log_level(value: str) -> int:
    """Accept a level name (``debug``) or number (``10``)."""

    normalized = value.strip()
    if normalized.isdigit():
        return int(normalized)
    level = logging.getLevelNamesMapping().get(normalized.upper())
    if level is None:
        raise ConfigurationError(f"Unknown log level: {value}")
    return level


def get_logging_config() -> LoggingConfig:
    raw_level = optional_env_var(LOG_LEVEL_ENV)
    if raw_level is None:
        return LoggingConfig()
    return LoggingConfig(level=parse_log_level(raw_level))


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=force,
    )
