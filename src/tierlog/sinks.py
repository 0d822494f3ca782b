"""Log sinks (output destinations).

Every sink implements the two-operation `Sink` protocol: `log` renders a
`%`-style template with its arguments and delivers it, `close` releases
whatever the sink owns. Delivery failures are absorbed at the point of
write so that logging never crashes the calling application.
"""

from __future__ import annotations

import os
import socket
import sys
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Final, Literal, Protocol, TextIO

from .levels import LEVEL_COLORS, LEVEL_NAMES, Level
from .models import Context, local_now

StandardStream = Literal["stdout", "stderr"]

RESET_SEQUENCE: Final = "\033[0m"


class Sink(Protocol):
    """A destination for formatted log messages."""

    def log(self, format: str, args: Sequence[Any], context: Context) -> None:
        """Format one message and deliver it."""

    def close(self) -> None:
        """Release any underlying resources."""


def interpolate(format: str, args: Sequence[Any]) -> str:
    """Apply `%`-substitution, never raising on a template/argument mismatch.

    Like the stdlib `logging` module, the template is only interpolated when
    arguments are given, so a bare `"100%"` is logged verbatim. A mismatch
    renders the template followed by the repr of the arguments.
    """
    if not args:
        return format
    try:
        return format % tuple(args)
    except (TypeError, ValueError, KeyError):
        return f"{format.removesuffix(chr(10))} {tuple(args)!r}"


def render_message(format: str, args: Sequence[Any]) -> str:
    """Interpolate and guarantee exactly one trailing newline."""
    message = interpolate(format, args)
    if not message.endswith("\n"):
        message += "\n"
    return message


def format_prefix(context: Context) -> str:
    """Return `"<YYYY-MM-DD HH:MM:SS> <name> <LEVEL   > "` for a context."""
    return f"{context.time:%Y-%m-%d %H:%M:%S} {context.name} {LEVEL_NAMES[context.level]:<8} "


def color_sequence(level: Level) -> str:
    """Return the ANSI SGR escape selecting the display color of *level*."""
    return f"\033[{int(LEVEL_COLORS[level])}m"


class StreamSink:
    """Writes `prefix + message` to a text stream.

    `stream` may be a stream object or the name of a standard stream; names
    are looked up on `sys` at write time so redirected standard streams are
    honored. The sink does not own the stream and `close` leaves it open.
    """

    def __init__(self, stream: TextIO | StandardStream = "stderr") -> None:
        if isinstance(stream, str) and stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout', 'stderr' or a text stream. Got: {stream!r}")
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO | None:
        """The stream the next write goes to."""
        if isinstance(self._stream, str):
            return getattr(sys, self._stream)
        return self._stream

    def render(self, format: str, args: Sequence[Any], context: Context) -> str:
        """Build the full output line for one call."""
        return format_prefix(context) + render_message(format, args)

    def write(self, text: str) -> None:
        """Write and flush *text*, absorbing I/O failures."""
        stream = self.stream
        if stream is None:
            return
        with self._lock:
            try:
                stream.write(text)
                stream.flush()
            except (OSError, ValueError):
                # Closed or broken destination; drop the line.
                return

    def log(self, format: str, args: Sequence[Any], context: Context) -> None:
        """Render and write one message."""
        self.write(self.render(format, args, context))

    def close(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""


class ConsoleSink:
    """A `StreamSink` that brackets each line in the level's ANSI color."""

    def __init__(self, stream: TextIO | StandardStream = "stderr") -> None:
        self._stream_sink = StreamSink(stream)

    def log(self, format: str, args: Sequence[Any], context: Context) -> None:
        """Write `ESC[<color>m + line + ESC[0m` in a single write."""
        line = self._stream_sink.render(format, args, context)
        self._stream_sink.write(color_sequence(context.level) + line + RESET_SEQUENCE)

    def close(self) -> None:  # noqa: D401 - keep interface consistent
        """No-op."""


STDERR_SINK = ConsoleSink("stderr")
STDOUT_SINK = ConsoleSink("stdout")


@dataclass(frozen=True)
class LoggedCall:
    """One call observed by an `InMemorySink`."""

    format: str
    args: tuple[Any, ...]
    context: Context
    message: str


class InMemorySink:
    """In-memory sink for tests and local debugging."""

    def __init__(self) -> None:
        """Create an empty in-memory sink."""
        self._lock = threading.Lock()
        self._calls: list[LoggedCall] = []
        self.close_count = 0

    def log(self, format: str, args: Sequence[Any], context: Context) -> None:
        """Record the call and its rendered message (thread-safe)."""
        call = LoggedCall(
            format=format,
            args=tuple(args),
            context=context,
            message=render_message(format, args),
        )
        with self._lock:
            self._calls.append(call)

    def close(self) -> None:
        """Count the close; the sink stays usable for inspection."""
        with self._lock:
            self.close_count += 1

    @property
    def closed(self) -> bool:
        return self.close_count > 0

    def snapshot(self) -> Sequence[LoggedCall]:
        """Return a point-in-time copy of all recorded calls."""
        with self._lock:
            return list(self._calls)

    def messages(self) -> list[str]:
        """Return the rendered messages in arrival order."""
        return [call.message for call in self.snapshot()]


# Syslog facility and severities (RFC 5424 numeric values).
LOG_USER: Final = 1 << 3
LOG_CRIT: Final = 2
LOG_ERR: Final = 3
LOG_WARNING: Final = 4
LOG_NOTICE: Final = 5
LOG_INFO: Final = 6
LOG_DEBUG: Final = 7

SYSLOG_ADDRESSES: Final = ("/dev/log", "/var/run/syslog", "/var/run/log")


class SyslogWriter:
    """Connection to the local syslog daemon over a unix socket.

    Tries each candidate address with a datagram socket, then a stream
    socket. Raises `ConnectionError` when no candidate accepts. A failed
    send reconnects and retries once, so a daemon restart is survived.
    """

    def __init__(self, tag: str, *, address: str | None = None, facility: int = LOG_USER) -> None:
        self.tag = tag
        self.facility = facility
        self._lock = threading.Lock()
        self._addresses = [address] if address else list(SYSLOG_ADDRESSES)
        self._sock, self._sock_type = _connect_syslog(self._addresses)

    def _write(self, data: bytes) -> None:
        if self._sock_type == socket.SOCK_DGRAM:
            self._sock.send(data)
        else:
            self._sock.sendall(data)

    def _reconnect(self) -> None:
        """Drop the current socket and connect again. Must be called with _lock held."""
        self._sock.close()
        self._sock, self._sock_type = _connect_syslog(self._addresses)

    def _send(self, severity: int, message: str, time: datetime | None) -> None:
        ts = time or local_now()
        stamp = f"{ts:%b} {ts.day:>2} {ts:%H:%M:%S}"
        if not message.endswith("\n"):
            message += "\n"
        frame = f"<{self.facility | severity}>{stamp} {self.tag}[{os.getpid()}]: {message}"
        data = frame.encode("utf-8")
        with self._lock:
            try:
                self._write(data)
            except OSError:
                try:
                    self._reconnect()
                    self._write(data)
                except OSError:
                    # Daemon still unreachable; the message is lost.
                    return

    def crit(self, message: str, *, time: datetime | None = None) -> None:
        self._send(LOG_CRIT, message, time)

    def err(self, message: str, *, time: datetime | None = None) -> None:
        self._send(LOG_ERR, message, time)

    def warning(self, message: str, *, time: datetime | None = None) -> None:
        self._send(LOG_WARNING, message, time)

    def notice(self, message: str, *, time: datetime | None = None) -> None:
        self._send(LOG_NOTICE, message, time)

    def info(self, message: str, *, time: datetime | None = None) -> None:
        self._send(LOG_INFO, message, time)

    def debug(self, message: str, *, time: datetime | None = None) -> None:
        self._send(LOG_DEBUG, message, time)

    def close(self) -> None:
        """Close the socket."""
        with self._lock:
            self._sock.close()


def _connect_syslog(addresses: list[str]) -> tuple[socket.socket, int]:
    """Connect to the first reachable syslog socket among *addresses*."""
    last_error: OSError | None = None
    for address in addresses:
        for sock_type in (socket.SOCK_DGRAM, socket.SOCK_STREAM):
            sock = socket.socket(socket.AF_UNIX, sock_type)
            try:
                sock.connect(address)
            except OSError as exc:
                sock.close()
                last_error = exc
                continue
            return sock, sock_type
    raise ConnectionError(f"Unable to connect to syslog at: {', '.join(addresses)}") from last_error


class SyslogSink:
    """Sends each message to syslog with the severity matching its level."""

    def __init__(self, tag: str, *, address: str | None = None, facility: int = LOG_USER) -> None:
        """Open the syslog connection; raises `ConnectionError` if unreachable."""
        self._writer = SyslogWriter(tag, address=address, facility=facility)
        self._dispatch: dict[Level, Callable[..., None]] = {
            Level.CRITICAL: self._writer.crit,
            Level.ERROR: self._writer.err,
            Level.WARNING: self._writer.warning,
            Level.NOTICE: self._writer.notice,
            Level.INFO: self._writer.info,
            Level.DEBUG: self._writer.debug,
        }

    def log(self, format: str, args: Sequence[Any], context: Context) -> None:
        """Render the message and hand it to the severity-specific writer call."""
        self._dispatch[context.level](render_message(format, args), time=context.time)

    def close(self) -> None:
        """Release the syslog connection."""
        self._writer.close()
