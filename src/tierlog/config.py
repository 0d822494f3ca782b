"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting `TIERLOG_*` environment variables into a typed Pydantic model.
- Building the sink and logger that a configuration describes.
"""

from __future__ import annotations

import os
from typing import Literal

import dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from .fanout import FanoutSink
from .levels import DEFAULT_LEVEL, Level
from .logger import Logger
from .sinks import STDERR_SINK, STDOUT_SINK, Sink, SyslogSink

SinkName = Literal["stderr", "stdout", "syslog"]


def _get_env_list(name: str, default: list[str]) -> list[str]:
    """Read a comma-separated env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class LoggingConfig(BaseModel):
    """Configuration for a logger and its sinks."""

    name: str = Field(default="", description="Logger name")
    level: Level = Field(default=DEFAULT_LEVEL, description="Threshold; less severe calls are dropped")
    sinks: list[SinkName] = Field(default_factory=lambda: ["stderr"], description="Output destinations")
    syslog_tag: str | None = Field(default=None, description="Syslog identifier, required for the syslog sink")
    syslog_address: str | None = Field(default=None, description="Syslog unix socket path")

    @field_validator("level", mode="before")
    def validate_level(cls, v: Level | int | str) -> Level:
        """Accept level names case-insensitively."""
        return Level.parse(v)

    @field_validator("sinks")
    def validate_sinks(cls, v: list[SinkName]) -> list[SinkName]:
        """Require at least one sink and reject duplicates."""
        if not v:
            raise ValueError("TIERLOG_SINKS must name at least one sink (stderr, stdout, syslog).")
        if len(set(v)) != len(v):
            raise ValueError(f"TIERLOG_SINKS lists a sink more than once. Got: {','.join(v)}")
        return v

    @model_validator(mode="after")
    def validate_syslog_tag(self) -> LoggingConfig:
        """A syslog sink needs a tag."""
        if "syslog" in self.sinks and not self.syslog_tag:
            raise ValueError("TIERLOG_SYSLOG_TAG is required when TIERLOG_SINKS includes syslog.")
        return self


def load_config() -> LoggingConfig:
    """Load logging configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` (pydantic's `ValidationError`) with actionable messages
      for unknown levels or sinks.
    """
    dotenv.load_dotenv()

    return LoggingConfig(
        name=os.getenv("TIERLOG_NAME", ""),
        level=os.getenv("TIERLOG_LEVEL", "") or DEFAULT_LEVEL,
        sinks=_get_env_list("TIERLOG_SINKS", ["stderr"]),
        syslog_tag=os.getenv("TIERLOG_SYSLOG_TAG") or None,
        syslog_address=os.getenv("TIERLOG_SYSLOG_ADDRESS") or None,
    )


def build_sink(config: LoggingConfig) -> Sink:
    """Create the configured sinks, wrapped in a `FanoutSink` when there are several.

    Raises `ConnectionError` when a syslog sink cannot reach the daemon.
    """
    sinks: list[Sink] = []
    for name in config.sinks:
        if name == "stderr":
            sinks.append(STDERR_SINK)
        elif name == "stdout":
            sinks.append(STDOUT_SINK)
        else:
            if not config.syslog_tag:
                raise ValueError("TIERLOG_SYSLOG_TAG is required when TIERLOG_SINKS includes syslog.")
            sinks.append(SyslogSink(config.syslog_tag, address=config.syslog_address))
    if len(sinks) == 1:
        return sinks[0]
    return FanoutSink(*sinks)


def build_logger(config: LoggingConfig) -> Logger:
    """Create a new `Logger` from a configuration."""
    return Logger(config.name, level=config.level, sink=build_sink(config))
