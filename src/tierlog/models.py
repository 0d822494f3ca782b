"""Per-call log metadata.

A `Context` is built once per emitted log call, before any sink sees it, so
every sink that receives the call observes the same name, level, timestamp
and call site.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .levels import Level

UNKNOWN_FILENAME = "???"


def local_now() -> datetime:
    """Return the current local wall-clock time as a timezone-aware datetime."""
    return datetime.now().astimezone()


class Context(BaseModel):
    """Immutable metadata describing one log call."""

    model_config = ConfigDict(frozen=True)

    # Logger name; the default logger uses "".
    name: str
    level: Level

    # Captured when the leveled method was invoked, not at delivery.
    time: datetime = Field(default_factory=local_now)

    # Call site of the code that invoked the logger.
    filename: str = UNKNOWN_FILENAME
    line: int = 0
