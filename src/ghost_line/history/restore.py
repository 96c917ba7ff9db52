"""Undo, redo and history-browse against the history store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from ghost_line.runtime import telemetry

from .line import Direction, opposite
from .store import DocumentId, HistoryStore

RestoreKind = Literal["undo", "redo", "jump"]
MissReason = Literal["no_history", "empty"]


@dataclass(frozen=True, slots=True)
class RestoreResult:
    """Text the caller must write back into ``line``."""

    doc_id: DocumentId
    line: int
    kind: RestoreKind
    text: str


class RestoreEngine:
    """Moves entries between a line's undo and redo stacks.

    The engine never touches the document itself: it returns the replacement
    text and the caller writes it back under a ``WriteGuard``.
    """

    def __init__(
        self,
        store: HistoryStore,
        *,
        undoable_jumps: bool = False,
        logger_name: str | None = None,
    ) -> None:
        self.store = store
        self.undoable_jumps = undoable_jumps
        self._logger_name = logger_name

    def describe(
        self, doc_id: DocumentId, line: int, direction: Direction
    ) -> Optional[MissReason]:
        """Why ``direction`` would be a no-op, or ``None`` if it would not."""

        history = self.store.get(doc_id, line)
        if history is None:
            return "no_history"
        if not history.stack(direction):
            return "empty"
        return None

    def restore(
        self,
        doc_id: DocumentId,
        line: int,
        direction: Direction,
        current_text: str,
    ) -> Optional[RestoreResult]:
        history = self.store.get(doc_id, line)
        source = history.stack(direction) if history is not None else None
        if history is None or not source:
            telemetry.record_event(
                "history.nothing_to_restore",
                level="debug",
                data={"document": doc_id, "line": line, "direction": direction},
                logger_name=self._logger_name,
            )
            return None

        with telemetry.span(
            f"history::{direction}",
            logger_name=self._logger_name,
            component="history",
            metadata={"document": doc_id, "line": line},
        ) as handle:
            target = opposite(direction)
            if target == "undo":
                history.push_undo(current_text, self.store.max_depth)
            else:
                history.stack(target).append(current_text)
            text = source.pop()
            history.current_snapshot = text
            handle.note(
                "restored",
                undo_depth=len(history.undo_stack),
                redo_depth=len(history.redo_stack),
            )

        return RestoreResult(doc_id=doc_id, line=line, kind=direction, text=text)

    def undo(
        self, doc_id: DocumentId, line: int, current_text: str
    ) -> Optional[RestoreResult]:
        return self.restore(doc_id, line, "undo", current_text)

    def redo(
        self, doc_id: DocumentId, line: int, current_text: str
    ) -> Optional[RestoreResult]:
        return self.restore(doc_id, line, "redo", current_text)

    def list_history(
        self, doc_id: DocumentId, line: int, mode: Direction = "undo"
    ) -> List[str]:
        return self.store.list_stack(doc_id, line, mode)

    def apply_entry(
        self,
        doc_id: DocumentId,
        line: int,
        entry: str,
        current_text: str,
    ) -> Optional[RestoreResult]:
        """Jump straight to ``entry`` without popping either stack.

        With ``undoable_jumps`` the pre-jump text is pushed onto the undo
        stack and the redo stack is cleared, as for a commit.
        """

        history = self.store.get(doc_id, line)
        if history is None:
            return None
        if entry not in history.undo_stack and entry not in history.redo_stack:
            return None

        with telemetry.span(
            "history::jump",
            logger_name=self._logger_name,
            component="history",
            metadata={"document": doc_id, "line": line},
        ):
            if self.undoable_jumps and current_text != entry:
                history.push_undo(current_text, self.store.max_depth)
                history.redo_stack.clear()
            history.current_snapshot = entry

        return RestoreResult(doc_id=doc_id, line=line, kind="jump", text=entry)


__all__ = ["MissReason", "RestoreEngine", "RestoreKind", "RestoreResult"]
