"""Fan-out sink: deliver each call to several sinks concurrently."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Callable

from .models import Context, local_now
from .sinks import Sink


class FanoutSink:
    """Composite sink that forwards every call to all of its children.

    Each child runs on its own thread inside a fault boundary, and the call
    returns once every child has finished. A child that raises is counted in
    `degraded_status()` and never stops its siblings or reaches the caller.
    There is no timeout: a hung child blocks the call.

    Membership is fixed at construction. The fan-out owns its children and
    closes each of them exactly once per `close()`.
    """

    def __init__(self, *sinks: Sink) -> None:
        """Create a fan-out over *sinks* in the given order."""
        self._sinks: tuple[Sink, ...] = tuple(sinks)

        # Degradation tracking: counts and time window.
        self._lock = threading.Lock()
        self._failures = 0
        self._first_failure_at: datetime | None = None
        self._last_failure_at: datetime | None = None

    @property
    def sinks(self) -> tuple[Sink, ...]:
        return self._sinks

    def log(self, format: str, args: Sequence[Any], context: Context) -> None:
        """Deliver the same format, args and context to every child."""
        self._run_all(lambda sink: sink.log(format, args, context), "log")

    def close(self) -> None:
        """Close every child concurrently."""
        self._run_all(lambda sink: sink.close(), "close")

    def _run_all(self, call: Callable[[Sink], None], op: str) -> None:
        """Run *call* once per child on its own thread and join on all of them."""
        threads = [
            threading.Thread(
                target=self._guarded,
                args=(call, sink),
                name=f"tierlog-fanout-{op}-{index}",
                daemon=True,
            )
            for index, sink in enumerate(self._sinks)
        ]
        started: list[threading.Thread] = []
        for thread, sink in zip(threads, self._sinks):
            try:
                thread.start()
            except RuntimeError:
                # No thread available; deliver on the calling thread instead.
                self._guarded(call, sink)
            else:
                started.append(thread)
        for thread in started:
            thread.join()

    def _guarded(self, call: Callable[[Sink], None], sink: Sink) -> None:
        try:
            call(sink)
        except Exception:  # noqa: BLE001 - one broken sink must not silence the rest
            self._record_failure()

    def _record_failure(self) -> None:
        now = local_now()
        with self._lock:
            self._failures += 1
            self._first_failure_at = self._first_failure_at or now
            self._last_failure_at = now

    def degraded_status(self) -> dict[str, Any]:
        """Return a minimal degraded-status snapshot."""
        with self._lock:
            return {
                "failures": self._failures,
                "first_failure_at": self._first_failure_at,
                "last_failure_at": self._last_failure_at,
            }
