"""Severity levels and their display tables.

Levels are ordered from most to least severe. A larger value is more
permissive, so a logger with threshold `INFO` emits everything from
`CRITICAL` through `INFO` and suppresses `DEBUG`.

`LEVEL_NAMES` and `LEVEL_COLORS` are total over `Level`; looking up a value
that is not a `Level` is a programming error and raises `KeyError`.
"""

from __future__ import annotations

from enum import IntEnum
from types import MappingProxyType
from typing import Final, Mapping


class Color(IntEnum):
    """ANSI SGR foreground color codes."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37


class Level(IntEnum):
    """Log severity, most severe first."""

    CRITICAL = 0
    ERROR = 1
    WARNING = 2
    NOTICE = 3
    INFO = 4
    DEBUG = 5

    @classmethod
    def parse(cls, value: Level | int | str) -> Level:
        """Resolve a level from a `Level`, its int value, or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        if not isinstance(value, str):
            raise ValueError(f"Log level must be a Level, int or name. Got: {value!r}")
        normalized = value.strip().upper()
        try:
            return cls[normalized]
        except KeyError:
            names = ", ".join(level.name for level in cls)
            raise ValueError(f"Unknown log level {value!r}. Expected one of: {names}") from None


LEVEL_NAMES: Mapping[Level, str] = MappingProxyType(
    {
        Level.CRITICAL: "CRITICAL",
        Level.ERROR: "ERROR",
        Level.WARNING: "WARNING",
        Level.NOTICE: "NOTICE",
        Level.INFO: "INFO",
        Level.DEBUG: "DEBUG",
    }
)

LEVEL_COLORS: Mapping[Level, Color] = MappingProxyType(
    {
        Level.CRITICAL: Color.MAGENTA,
        Level.ERROR: Color.RED,
        Level.WARNING: Color.YELLOW,
        Level.NOTICE: Color.GREEN,
        Level.INFO: Color.WHITE,
        Level.DEBUG: Color.CYAN,
    }
)

DEFAULT_LEVEL: Final = Level.INFO
