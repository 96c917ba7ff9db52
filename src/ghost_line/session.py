"""Host-facing facade wiring event intake to the history engine."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from ghost_line.history import (
    CommitOutcome,
    Direction,
    DocumentId,
    DocumentLines,
    HistoryStore,
    LineChange,
    RestoreEngine,
    RestoreResult,
    SnapshotPolicy,
    WriteGuard,
    touched_lines,
)
from ghost_line.history.restore import MissReason
from ghost_line.runtime import telemetry
from ghost_line.runtime.settings import HistoryConfig


class HistorySession:
    """Owns per-document line history for one running editor session.

    The host reports edits through ``on_text_changed`` and cursor moves
    through ``on_cursor_moved``, drives debounce timers with
    ``process_timeouts`` and writes restored text back inside
    ``programmatic_write``.
    """

    def __init__(
        self,
        config: Optional[HistoryConfig] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        logger_name: str | None = "ghost_line.history",
    ) -> None:
        self.config = config or HistoryConfig()
        self.logger = telemetry.get_logger("ghost_line.session")
        self._logger_name = logger_name
        self.store = HistoryStore(
            max_depth=self.config.max_history_per_line, logger_name=logger_name
        )
        self.policy = SnapshotPolicy(
            self.store,
            self.read_line,
            idle_delay_ms=self.config.idle_delay_ms,
            clock=clock,
            logger_name=logger_name,
        )
        self.restorer = RestoreEngine(
            self.store,
            undoable_jumps=self.config.undoable_jumps,
            logger_name=logger_name,
        )
        self.guard = WriteGuard()
        self._documents: Dict[DocumentId, DocumentLines] = {}

    # -- lifecycle -------------------------------------------------------

    def open(self, doc_id: DocumentId, text: str = "") -> None:
        self._documents[doc_id] = DocumentLines.from_text(text)
        self.store.open(doc_id)
        telemetry.record_event(
            "session.open",
            level="debug",
            data={"document": doc_id},
            logger_name=self._logger_name,
        )

    def close(self, doc_id: DocumentId) -> None:
        self.policy.cancel_document(doc_id)
        self.store.close(doc_id)
        self._documents.pop(doc_id, None)
        telemetry.record_event(
            "session.close",
            level="debug",
            data={"document": doc_id},
            logger_name=self._logger_name,
        )

    def is_open(self, doc_id: DocumentId) -> bool:
        return doc_id in self._documents or self.store.is_open(doc_id)

    def update_config(self, config: HistoryConfig) -> None:
        self.config = config
        self.store.max_depth = config.max_history_per_line
        self.store.trim_all(config.max_history_per_line)
        self.policy.idle_delay_ms = config.idle_delay_ms
        if not config.capture_enabled:
            self.policy.cancel_all()
        self.restorer.undoable_jumps = config.undoable_jumps

    # -- document mirror -------------------------------------------------

    def document(self, doc_id: DocumentId) -> Optional[DocumentLines]:
        return self._documents.get(doc_id)

    def read_line(self, doc_id: DocumentId, line: int) -> Optional[str]:
        document = self._documents.get(doc_id)
        if document is None:
            return None
        return document.get_line(line)

    def _replace_line(self, doc_id: DocumentId, line: int, text: str) -> None:
        document = self._documents.get(doc_id)
        if document is None or not document.has_line(line):
            return
        lines = list(document.lines)
        lines[line] = text
        self._documents[doc_id] = document.updated("\n".join(lines))

    # -- event intake ----------------------------------------------------

    def on_text_changed(
        self, doc_id: DocumentId, text: str, changes: Iterable[LineChange]
    ) -> None:
        """Record an edit batch: remap history, then schedule commits.

        ``text`` is the full document text after the edit and ``changes`` are
        in the order the host reported them.
        """

        previous = self._documents.get(doc_id)
        self._documents[doc_id] = (
            previous.updated(text) if previous else DocumentLines.from_text(text)
        )
        if self.guard.active:
            return

        batch = tuple(changes)
        if not batch:
            return

        self.store.remap(doc_id, batch)
        self.policy.remap(doc_id, batch)

        document = self._documents[doc_id]
        for line in touched_lines(batch):
            if not document.has_line(line):
                self.logger.debug(f"skip commit for stale line {line} in {doc_id!r}")
                continue
            self.policy.schedule(doc_id, line)

    def on_cursor_moved(self, doc_id: DocumentId, line: int, text: str) -> bool:
        """Initialise history for the line under the cursor."""

        if self.guard.active:
            return False
        document = self._documents.get(doc_id)
        if line < 0 or (document is not None and not document.has_line(line)):
            self.logger.debug(f"skip cursor event for stale line {line} in {doc_id!r}")
            return False
        return self.policy.observe_cursor(doc_id, line, text)

    # -- timers ----------------------------------------------------------

    def process_timeouts(self) -> List[CommitOutcome]:
        return self.policy.process_timeouts()

    def flush(self, doc_id: Optional[DocumentId] = None) -> List[CommitOutcome]:
        return self.policy.flush(doc_id)

    # -- restore ---------------------------------------------------------

    @contextmanager
    def programmatic_write(self) -> Iterator[WriteGuard]:
        """Suspend history effects while the host writes restored text."""

        with self.guard.suspended() as guard:
            yield guard

    def undo(
        self, doc_id: DocumentId, line: int, current_text: str
    ) -> Optional[RestoreResult]:
        return self._restore(doc_id, line, "undo", current_text)

    def redo(
        self, doc_id: DocumentId, line: int, current_text: str
    ) -> Optional[RestoreResult]:
        return self._restore(doc_id, line, "redo", current_text)

    def describe(
        self, doc_id: DocumentId, line: int, direction: Direction
    ) -> Optional[MissReason]:
        return self.restorer.describe(doc_id, line, direction)

    def list_history(
        self, doc_id: DocumentId, line: int, mode: Direction = "undo"
    ) -> List[str]:
        return self.restorer.list_history(doc_id, line, mode)

    def apply_history_entry(
        self, doc_id: DocumentId, line: int, entry: str, current_text: str
    ) -> Optional[RestoreResult]:
        self.policy.cancel(doc_id, line)
        result = self.restorer.apply_entry(doc_id, line, entry, current_text)
        if result is not None:
            self._replace_line(doc_id, line, result.text)
        return result

    def _restore(
        self, doc_id: DocumentId, line: int, direction: Direction, current_text: str
    ) -> Optional[RestoreResult]:
        self.policy.cancel(doc_id, line)
        result = self.restorer.restore(doc_id, line, direction, current_text)
        if result is not None:
            self._replace_line(doc_id, line, result.text)
            telemetry.record_event(
                "history.restore",
                level="debug",
                data={"document": doc_id, "line": line, "direction": direction},
                logger_name=self._logger_name,
            )
        return result


__all__ = ["HistorySession"]
