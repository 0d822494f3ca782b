"""Process-wide default logger and free functions that mirror its API.

`DEFAULT_LOGGER` is created once at import, named "", at threshold INFO and
writing to the colored stderr console. It is reconfigured in place (see
`configure`) and never replaced. Code that needs isolation should hold its
own `Logger`.
"""

from __future__ import annotations

from typing import Any

from .config import LoggingConfig, build_sink, load_config
from .levels import Level
from .logger import Logger
from .sinks import Sink

DEFAULT_LOGGER = Logger("")

# Free functions add one frame above the logger's public method.
_STACKLEVEL = 2


def configure(config: LoggingConfig | None = None) -> Logger:
    """Apply *config* (or the environment's) to the default logger.

    The logger name is fixed at creation; only level and sink change.
    """
    config = config or load_config()
    DEFAULT_LOGGER.set_level(config.level)
    DEFAULT_LOGGER.set_sink(build_sink(config))
    return DEFAULT_LOGGER


def set_level(level: Level) -> None:
    DEFAULT_LOGGER.set_level(level)


def set_sink(sink: Sink) -> None:
    DEFAULT_LOGGER.set_sink(sink)


def close() -> None:
    DEFAULT_LOGGER.close()


def fatal(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.fatal(format, *args, stacklevel=_STACKLEVEL)


def panic(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.panic(format, *args, stacklevel=_STACKLEVEL)


def critical(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.critical(format, *args, stacklevel=_STACKLEVEL)


def error(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.error(format, *args, stacklevel=_STACKLEVEL)


def warning(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.warning(format, *args, stacklevel=_STACKLEVEL)


def notice(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.notice(format, *args, stacklevel=_STACKLEVEL)


def info(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.info(format, *args, stacklevel=_STACKLEVEL)


def debug(format: str, *args: Any) -> None:
    DEFAULT_LOGGER.debug(format, *args, stacklevel=_STACKLEVEL)
