from __future__ import annotations

import inspect
import io
import re
import threading
from datetime import datetime

import pytest

from tierlog import STDERR_SINK, FanoutSink, InMemorySink, Level, Logger, LoggerPanic, StreamSink

_ALL_METHODS = ["critical", "error", "warning", "notice", "info", "debug"]


class _Exited(Exception):
    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def _fake_exit(status: int) -> None:
    raise _Exited(status)


def test_new_logger_defaults():
    log = Logger("svc")
    assert log.name == "svc"
    assert log.level is Level.INFO
    assert log.sink is STDERR_SINK
    assert log.is_enabled_for(Level.INFO)
    assert not log.is_enabled_for(Level.DEBUG)


def test_end_to_end_stream_line():
    buf = io.StringIO()
    log = Logger("svc", level=Level.INFO, sink=StreamSink(buf))

    log.info("start %s", "ok")

    assert re.fullmatch(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} svc INFO     start ok\n", buf.getvalue())


@pytest.mark.parametrize("threshold", list(Level))
def test_threshold_filters_less_severe_levels(threshold: Level):
    sink = InMemorySink()
    log = Logger("svc", level=threshold, sink=sink)

    for method in _ALL_METHODS:
        getattr(log, method)(method)

    emitted = [call.context.level for call in sink.snapshot()]
    assert emitted == [level for level in Level if level <= threshold]


def test_critical_is_never_filtered():
    for threshold in Level:
        sink = InMemorySink()
        Logger("svc", level=threshold, sink=sink).critical("always")
        assert sink.messages() == ["always\n"]


def test_suppressed_call_does_not_format_args():
    class _Explodes:
        def __str__(self) -> str:
            raise AssertionError("formatted a suppressed message")

    sink = InMemorySink()
    log = Logger("svc", level=Level.WARNING, sink=sink)
    log.debug("value %s", _Explodes())
    log.info("value %s", _Explodes())
    assert sink.snapshot() == []


@pytest.mark.parametrize("template", ["hello", "hello\n"])
def test_template_gets_single_trailing_newline(template: str):
    sink = InMemorySink()
    Logger("svc", sink=sink).info(template)
    (call,) = sink.snapshot()
    assert call.format == "hello\n"
    assert call.message == "hello\n"


def test_context_records_caller_file_and_line():
    sink = InMemorySink()
    log = Logger("svc", sink=sink)

    line = inspect.currentframe().f_lineno + 1
    log.warning("here")

    (call,) = sink.snapshot()
    assert call.context.filename == __file__
    assert call.context.line == line
    assert call.context.name == "svc"
    assert call.context.level is Level.WARNING


def test_stacklevel_attributes_to_wrapper_caller():
    sink = InMemorySink()
    log = Logger("svc", sink=sink)

    def report(msg: str) -> None:
        log.error(msg, stacklevel=2)

    line = inspect.currentframe().f_lineno + 1
    report("from wrapper")

    assert sink.snapshot()[0].context.line == line


def test_context_time_captured_at_call():
    sink = InMemorySink()
    before = datetime.now().astimezone()
    Logger("svc", sink=sink).info("t")
    after = datetime.now().astimezone()
    assert before <= sink.snapshot()[0].context.time <= after


def test_fanout_children_share_one_context():
    children = [InMemorySink() for _ in range(3)]
    Logger("svc", sink=FanoutSink(*children)).notice("n=%d", 1)
    contexts = {id(child.snapshot()[0].context) for child in children}
    assert len(contexts) == 1


def test_same_name_loggers_are_independent():
    a, b = Logger("svc"), Logger("svc")
    a.set_level(Level.DEBUG)
    assert b.level is Level.INFO


def test_set_level_and_set_sink():
    first, second = InMemorySink(), InMemorySink()
    log = Logger("svc", sink=first)
    log.debug("dropped")
    log.set_level(Level.DEBUG)
    log.set_sink(second)
    log.debug("kept")
    assert first.snapshot() == []
    assert second.messages() == ["kept\n"]


def test_close_and_context_manager_close_sink():
    sink = InMemorySink()
    with Logger("svc", sink=sink) as log:
        log.info("inside")
    assert sink.close_count == 1


def test_panic_logs_closes_and_raises():
    sink = InMemorySink()
    log = Logger("svc", level=Level.ERROR, sink=sink)

    with pytest.raises(LoggerPanic) as exc_info:
        log.panic("bad %s", "state")

    assert exc_info.value.message == "bad state"
    assert str(exc_info.value) == "bad state"
    (call,) = sink.snapshot()
    assert call.context.level is Level.CRITICAL
    assert call.context.filename == __file__
    assert sink.close_count == 1


def test_fatal_logs_closes_and_exits(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr("tierlog.logger.os._exit", _fake_exit)
    sink = InMemorySink()
    log = Logger("svc", sink=sink)
    reached = False

    with pytest.raises(_Exited) as exc_info:
        log.fatal("giving up: %s", "disk full")
        reached = True

    assert exc_info.value.status == 1
    assert not reached
    assert sink.messages() == ["giving up: disk full\n"]
    assert sink.snapshot()[0].context.level is Level.CRITICAL
    assert sink.close_count == 1


def test_concurrent_logging_delivers_every_call():
    sink = InMemorySink()
    log = Logger("svc", sink=sink)

    def worker(n: int) -> None:
        for i in range(50):
            log.info("w%d-%d", n, i)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(sink.snapshot()) == 200


class _RaisingSink(InMemorySink):
    def __init__(self, *, on_log: bool = True, on_close: bool = False) -> None:
        super().__init__()
        self._on_log = on_log
        self._on_close = on_close

    def log(self, format, args, context) -> None:  # noqa: ANN001
        super().log(format, args, context)
        if self._on_log:
            raise RuntimeError("sink failed on log")

    def close(self) -> None:
        super().close()
        if self._on_close:
            raise OSError("sink failed on close")


def test_argument_mismatch_does_not_reach_caller():
    buf = io.StringIO()
    log = Logger("svc", sink=StreamSink(buf))

    log.info("count=%d", "abc")
    log.info("after")

    lines = buf.getvalue().splitlines()
    assert lines[0].endswith("svc INFO     count=%d ('abc',)")
    assert lines[1].endswith("svc INFO     after")


def test_broken_stream_does_not_reach_caller():
    stream = io.StringIO()
    stream.close()
    Logger("svc", sink=StreamSink(stream)).error("lost")


def test_fatal_with_argument_mismatch_still_exits(monkeypatch: pytest.MonkeyPatch):
    codes: list[int] = []
    monkeypatch.setattr("tierlog.logger.os._exit", codes.append)
    buf = io.StringIO()

    Logger("svc", sink=StreamSink(buf)).fatal("bad %d", "x")

    assert codes == [1]
    assert buf.getvalue().endswith("svc CRITICAL bad %d ('x',)\n")


@pytest.mark.parametrize(("on_log", "on_close"), [(True, False), (False, True), (True, True)])
def test_fatal_closes_and_exits_when_sink_raises(monkeypatch: pytest.MonkeyPatch, on_log: bool, on_close: bool):
    codes: list[int] = []
    monkeypatch.setattr("tierlog.logger.os._exit", codes.append)
    sink = _RaisingSink(on_log=on_log, on_close=on_close)

    with pytest.raises((RuntimeError, OSError)):
        Logger("svc", sink=sink).fatal("going down")

    assert codes == [1]
    assert sink.close_count == 1


def test_panic_with_argument_mismatch_raises_logger_panic():
    sink = InMemorySink()

    with pytest.raises(LoggerPanic) as exc_info:
        Logger("svc", sink=sink).panic("bad %d", "x")

    assert exc_info.value.message == "bad %d ('x',)"
    assert sink.close_count == 1


def test_panic_closes_and_raises_logger_panic_when_sink_raises():
    sink = _RaisingSink(on_log=True, on_close=True)

    with pytest.raises(LoggerPanic) as exc_info:
        Logger("svc", sink=sink).panic("stop %s", "now")

    assert exc_info.value.message == "stop now"
    assert isinstance(exc_info.value.__cause__, (RuntimeError, OSError))
    assert sink.close_count == 1
