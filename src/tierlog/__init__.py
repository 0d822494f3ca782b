"""Leveled logging with pluggable, concurrently fanned-out sinks.

This package provides:
- Six ordered severities (`Level`) with fixed display names and colors.
- A `Logger` that filters by threshold, captures the call site, and
  delegates to one `Sink`.
- Stream, console, syslog and in-memory sinks, plus `FanoutSink` to write to
  several of them at once.
- A process-wide default logger behind module-level functions.
"""

from .config import LoggingConfig, build_logger, build_sink, load_config
from .default import (
    DEFAULT_LOGGER,
    close,
    configure,
    critical,
    debug,
    error,
    fatal,
    info,
    notice,
    panic,
    set_level,
    set_sink,
    warning,
)
from .fanout import FanoutSink
from .levels import DEFAULT_LEVEL, LEVEL_COLORS, LEVEL_NAMES, Color, Level
from .logger import Logger, LoggerPanic
from .models import Context
from .sinks import (
    STDERR_SINK,
    STDOUT_SINK,
    ConsoleSink,
    InMemorySink,
    Sink,
    StreamSink,
    SyslogSink,
    SyslogWriter,
)

__all__ = [
    "Color",
    "ConsoleSink",
    "Context",
    "DEFAULT_LEVEL",
    "DEFAULT_LOGGER",
    "FanoutSink",
    "InMemorySink",
    "LEVEL_COLORS",
    "LEVEL_NAMES",
    "Level",
    "Logger",
    "LoggerPanic",
    "LoggingConfig",
    "STDERR_SINK",
    "STDOUT_SINK",
    "Sink",
    "StreamSink",
    "SyslogSink",
    "SyslogWriter",
    "build_logger",
    "build_sink",
    "close",
    "configure",
    "critical",
    "debug",
    "error",
    "fatal",
    "info",
    "load_config",
    "notice",
    "panic",
    "set_level",
    "set_sink",
    "warning",
]
