from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import pytest

from ghost_line.history import HistoryStore, LineChange, RestoreEngine
from ghost_line.runtime import telemetry
from ghost_line.session import HistorySession

Record = Tuple[str, str, Dict[str, str]]


class FakeLogger:
    """Captures structured records the way telelog loggers receive them."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.records: List[Record] = []
        self.context: Dict[str, str] = {}

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        yield

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        yield

    def _record(self, level: str, message: str, pairs: Any = ()) -> None:
        self.records.append((level, message, dict(pairs)))

    def debug_with(self, message: str, pairs: Any) -> None:
        self._record("debug", message, pairs)

    def info_with(self, message: str, pairs: Any) -> None:
        self._record("info", message, pairs)

    def error_with(self, message: str, pairs: Any) -> None:
        self._record("error", message, pairs)

    def debug(self, message: str) -> None:
        self._record("debug", message)

    def messages(self) -> List[str]:
        return [message for _, message, _ in self.records]


@pytest.fixture
def loggers(monkeypatch: pytest.MonkeyPatch) -> Dict[str, FakeLogger]:
    created: Dict[str, FakeLogger] = {}

    def fake_get_logger(name: str | None = None) -> FakeLogger:
        key = name or telemetry.DEFAULT_LOGGER_NAME
        return created.setdefault(key, FakeLogger(key))

    monkeypatch.setattr(telemetry, "get_logger", fake_get_logger)
    return created


def test_remap_notes_dropped_entries(loggers: Dict[str, FakeLogger]) -> None:
    store = HistoryStore(logger_name="test.history")
    for line in range(3):
        store.ensure_initialized("doc", line, f"line {line}")

    dropped = store.remap("doc", [LineChange(0, 2, 0)])

    log = loggers["test.history"]
    notes = [data for _, message, data in log.records if message == "span::dropped"]
    assert dropped == 2
    assert notes[0]["count"] == "2"
    assert notes[0]["component"] == "history"
    assert log.context == {}


def test_restore_notes_stack_depths(loggers: Dict[str, FakeLogger]) -> None:
    store = HistoryStore(logger_name="test.history")
    store.ensure_initialized("doc", 0, "foo")
    store.commit("doc", 0, "bar")
    engine = RestoreEngine(store, logger_name="test.history")

    engine.undo("doc", 0, "bar")

    notes = [
        data
        for _, message, data in loggers["test.history"].records
        if message == "span::restored"
    ]
    assert notes == [
        {
            "span": "history::undo",
            "document": "doc",
            "line": "0",
            "component": "history",
            "undo_depth": "0",
            "redo_depth": "1",
        }
    ]


def test_span_reports_failure_and_clears_context(
    loggers: Dict[str, FakeLogger],
) -> None:
    with pytest.raises(RuntimeError):
        with telemetry.span("boom", logger_name="test.span", metadata={"key": 1}):
            raise RuntimeError("bad")

    log = loggers["test.span"]
    assert ("error", "span::fail", {"span": "boom", "key": "1", "reason": "bad"}) in log.records
    assert log.context == {}


def test_session_events_use_session_logger(loggers: Dict[str, FakeLogger]) -> None:
    session = HistorySession(logger_name="test.session")
    session.open("doc", "foo")
    session.on_cursor_moved("doc", 0, "foo")
    session.on_text_changed("doc", "bar", [LineChange(0, 0, 0)])
    session.flush()

    session.undo("doc", 0, "bar")
    session.close("doc")

    messages = loggers["test.session"].messages()
    assert "event::session.open" in messages
    assert "event::history.restore" in messages
    assert "event::session.close" in messages
    assert telemetry.DEFAULT_LOGGER_NAME not in loggers


def test_unknown_preset_rejected() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="loud")
