"""Leveled logger.

A `Logger` checks the call level against its threshold, captures a
`Context` (time and call site) on the calling thread, and hands the call to
its single configured sink. That sink may be a `FanoutSink`.

Threshold and sink are plain attributes with no locking. Configure a logger
before sharing it between threads.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from types import TracebackType
from typing import Any, Final

from .levels import DEFAULT_LEVEL, Level
from .models import UNKNOWN_FILENAME, Context
from .sinks import STDERR_SINK, Sink, interpolate

# Frames between the stack inspection in `Logger._log` and the public
# leveled method that called it (`_log` itself). Every public method must
# call `_log` directly; adding a helper in between means bumping this.
INTERNAL_FRAMES: Final = 1


def _flush_std_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            continue


class LoggerPanic(Exception):
    """Raised by `Logger.panic` after the message is logged and the sink closed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Logger:
    """Named logger with a severity threshold and one sink.

    Loggers are independent: two loggers with the same name share nothing.
    """

    def __init__(self, name: str, *, level: Level = DEFAULT_LEVEL, sink: Sink | None = None) -> None:
        """Create a logger; the sink defaults to the colored stderr console."""
        self._name = name
        self._level = level
        self._sink: Sink = sink if sink is not None else STDERR_SINK

    @property
    def name(self) -> str:
        return self._name

    @property
    def level(self) -> Level:
        return self._level

    @property
    def sink(self) -> Sink:
        return self._sink

    def set_level(self, level: Level) -> None:
        """Change the threshold. Not synchronized with in-flight log calls."""
        self._level = level

    def set_sink(self, sink: Sink) -> None:
        """Replace the sink. Not synchronized with in-flight log calls."""
        self._sink = sink

    def close(self) -> None:
        """Close the configured sink."""
        self._sink.close()

    def __enter__(self) -> Logger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def is_enabled_for(self, level: Level) -> bool:
        """Return True when a call at *level* passes the threshold."""
        return self._level >= level

    def _log(self, level: Level, format: str, args: Sequence[Any], stacklevel: int) -> None:
        """Capture the context and delegate to the sink.

        Only reached for enabled levels. *stacklevel* counts frames above the
        public method, as in `logging.Logger.log`.
        """
        if not format.endswith("\n"):
            format += "\n"

        try:
            frame = sys._getframe(INTERNAL_FRAMES + stacklevel)
        except ValueError:
            filename, line = UNKNOWN_FILENAME, 0
        else:
            filename, line = frame.f_code.co_filename, frame.f_lineno

        context = Context(name=self._name, level=level, filename=filename, line=line)
        self._sink.log(format, args, context)

    def fatal(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log at CRITICAL, close the sink and exit the process with status 1.

        The close and the exit happen even when the sink raises.
        """
        try:
            if self._level >= Level.CRITICAL:
                self._log(Level.CRITICAL, format, args, stacklevel)
        finally:
            try:
                self.close()
            finally:
                _flush_std_streams()
                os._exit(1)

    def panic(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log at CRITICAL, close the sink and raise `LoggerPanic`.

        A sink failure is chained as the panic's cause.
        """
        message = interpolate(format, args)
        try:
            try:
                if self._level >= Level.CRITICAL:
                    self._log(Level.CRITICAL, format, args, stacklevel)
            finally:
                self.close()
        except Exception as exc:
            raise LoggerPanic(message) from exc
        raise LoggerPanic(message)

    def critical(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log a message at CRITICAL."""
        if self._level >= Level.CRITICAL:
            self._log(Level.CRITICAL, format, args, stacklevel)

    def error(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log a message at ERROR."""
        if self._level >= Level.ERROR:
            self._log(Level.ERROR, format, args, stacklevel)

    def warning(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log a message at WARNING."""
        if self._level >= Level.WARNING:
            self._log(Level.WARNING, format, args, stacklevel)

    def notice(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log a message at NOTICE."""
        if self._level >= Level.NOTICE:
            self._log(Level.NOTICE, format, args, stacklevel)

    def info(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log a message at INFO."""
        if self._level >= Level.INFO:
            self._log(Level.INFO, format, args, stacklevel)

    def debug(self, format: str, *args: Any, stacklevel: int = 1) -> None:
        """Log a message at DEBUG."""
        if self._level >= Level.DEBUG:
            self._log(Level.DEBUG, format, args, stacklevel)
