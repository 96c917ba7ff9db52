"""Debounced snapshot capture keyed per (document, line)."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Literal, Optional, Sequence, Tuple

from ghost_line.runtime import telemetry

from .changes import LineChange, remap_line
from .store import DocumentId, HistoryStore

LineReader = Callable[[DocumentId, int], Optional[str]]
TimerKey = Tuple[Hashable, int]


@dataclass
class PendingCommit:
    deadline: float
    delay_ms: int
    generation: int


@dataclass(slots=True)
class CommitOutcome:
    doc_id: DocumentId
    line: int
    status: Literal["committed", "unchanged", "skipped"]


class SnapshotPolicy:
    """Decides when a line's text is committed into its undo stack.

    Cursor arrival initialises a line immediately. Edits arm a timer for the
    touched line; another edit on the same line re-arms it, so only the last
    edit of a burst is committed. Timers are pull-based: the host calls
    ``process_timeouts`` periodically. At fire time the text is read afresh
    through ``reader`` at the timer's current line index.
    """

    def __init__(
        self,
        store: HistoryStore,
        reader: LineReader,
        *,
        idle_delay_ms: int = 400,
        clock: Callable[[], float] = time.monotonic,
        logger_name: str | None = None,
    ) -> None:
        self.store = store
        self.reader = reader
        self.idle_delay_ms = idle_delay_ms
        self._clock = clock
        self._logger_name = logger_name
        self._pending: Dict[TimerKey, PendingCommit] = {}
        self._timer_counter = 0

    @property
    def capture_enabled(self) -> bool:
        return self.idle_delay_ms > 0

    def observe_cursor(self, doc_id: DocumentId, line: int, text: str) -> bool:
        """Capture the first observed state of ``line``; no undo effect."""

        if not self.capture_enabled:
            return False
        return self.store.ensure_initialized(doc_id, line, text)

    def schedule(self, doc_id: DocumentId, line: int) -> None:
        if not self.capture_enabled:
            return
        self._timer_counter += 1
        self._pending[(doc_id, line)] = PendingCommit(
            deadline=self._clock() + self.idle_delay_ms / 1000.0,
            delay_ms=self.idle_delay_ms,
            generation=self._timer_counter,
        )

    def cancel(self, doc_id: DocumentId, line: int) -> None:
        self._pending.pop((doc_id, line), None)

    def cancel_document(self, doc_id: DocumentId) -> None:
        for key in [key for key in self._pending if key[0] == doc_id]:
            del self._pending[key]

    def cancel_all(self) -> None:
        self._pending.clear()

    def pending(self, doc_id: Optional[DocumentId] = None) -> List[TimerKey]:
        keys = [key for key in self._pending if doc_id is None or key[0] == doc_id]
        return sorted(keys, key=lambda key: (str(key[0]), key[1]))

    def remap(self, doc_id: DocumentId, changes: Sequence[LineChange]) -> None:
        """Move pending timers of ``doc_id`` along with the history entries."""

        if not changes:
            return
        moved: Dict[TimerKey, PendingCommit] = {}
        for key, timer in self._pending.items():
            if key[0] != doc_id:
                moved[key] = timer
                continue
            new_line = remap_line(key[1], changes)
            if new_line is not None:
                moved[(doc_id, new_line)] = timer
        self._pending = moved

    def process_timeouts(self) -> List[CommitOutcome]:
        """Commit every line whose quiet period has elapsed."""

        now = self._clock()
        expired = [
            (key, timer.generation)
            for key, timer in self._pending.items()
            if timer.deadline <= now
        ]
        return [self._fire(key, generation) for key, generation in expired]

    def flush(self, doc_id: Optional[DocumentId] = None) -> List[CommitOutcome]:
        """Commit pending lines immediately, regardless of their deadline."""

        current = [
            (key, timer.generation)
            for key, timer in self._pending.items()
            if doc_id is None or key[0] == doc_id
        ]
        return [self._fire(key, generation) for key, generation in current]

    def _fire(self, key: TimerKey, generation: int) -> CommitOutcome:
        doc_id, line = key
        timer = self._pending.get(key)
        if timer is None or timer.generation != generation:
            return CommitOutcome(doc_id, line, "skipped")
        del self._pending[key]

        text = self.reader(doc_id, line)
        if text is None:
            telemetry.record_event(
                "history.commit_skipped",
                level="debug",
                data={"document": doc_id, "line": line, "reason": "out_of_range"},
                logger_name=self._logger_name,
            )
            return CommitOutcome(doc_id, line, "skipped")

        if self.store.commit(doc_id, line, text):
            return CommitOutcome(doc_id, line, "committed")
        return CommitOutcome(doc_id, line, "unchanged")


__all__ = [
    "CommitOutcome",
    "LineReader",
    "PendingCommit",
    "SnapshotPolicy",
    "TimerKey",
]
