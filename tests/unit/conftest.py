from __future__ import annotations

import pytest

from tierlog import DEFAULT_LOGGER


@pytest.fixture(autouse=True)
def _restore_default_logger():
    """Undo any level/sink changes a test makes to the process-wide logger."""
    level = DEFAULT_LOGGER.level
    sink = DEFAULT_LOGGER.sink
    yield
    DEFAULT_LOGGER.set_level(level)
    DEFAULT_LOGGER.set_sink(sink)


@pytest.fixture(autouse=True)
def _clean_tierlog_env(monkeypatch: pytest.MonkeyPatch):
    """Keep a developer's `.env` / shell settings out of config tests."""
    for name in [
        "TIERLOG_NAME",
        "TIERLOG_LEVEL",
        "TIERLOG_SINKS",
        "TIERLOG_SYSLOG_TAG",
        "TIERLOG_SYSLOG_ADDRESS",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("tierlog.config.dotenv.load_dotenv", lambda *a, **kw: False)
    yield
