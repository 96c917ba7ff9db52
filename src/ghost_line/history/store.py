"""Per-document line history storage and offset remapping."""

from __future__ import annotations

from typing import Dict, Hashable, Iterator, List, Optional, Sequence

from ghost_line.runtime import telemetry

from .changes import LineChange, remap_line
from .line import Direction, LineHistory

DocumentId = Hashable


class HistoryStore:
    """Owns every ``LineHistory`` keyed by ``(document, line index)``.

    Callers never hold on to entries; all access goes through the store by
    document identity and line index. Documents are created lazily on first
    touch, or explicitly with ``open``.
    """

    def __init__(self, *, max_depth: int = 20, logger_name: str | None = None) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be positive")
        self.max_depth = max_depth
        self._documents: Dict[DocumentId, Dict[int, LineHistory]] = {}
        self._logger_name = logger_name

    # -- lifecycle -------------------------------------------------------

    def open(self, doc_id: DocumentId) -> None:
        self._documents.setdefault(doc_id, {})

    def close(self, doc_id: DocumentId) -> bool:
        """Discard all history for ``doc_id``; ``False`` if it was unknown."""

        return self._documents.pop(doc_id, None) is not None

    def is_open(self, doc_id: DocumentId) -> bool:
        return doc_id in self._documents

    def documents(self) -> Iterator[DocumentId]:
        yield from tuple(self._documents)

    def clear(self) -> None:
        self._documents.clear()

    # -- lookups ---------------------------------------------------------

    def get(self, doc_id: DocumentId, line: int) -> Optional[LineHistory]:
        return self._documents.get(doc_id, {}).get(line)

    def has_entry(self, doc_id: DocumentId, line: int) -> bool:
        return line in self._documents.get(doc_id, {})

    def lines(self, doc_id: DocumentId) -> List[int]:
        return sorted(self._documents.get(doc_id, {}))

    def entries(self, doc_id: DocumentId) -> Dict[int, LineHistory]:
        """Copy of the document's entries, safe to inspect or mutate."""

        return {
            line: history.copy()
            for line, history in self._documents.get(doc_id, {}).items()
        }

    def list_stack(
        self, doc_id: DocumentId, line: int, direction: Direction
    ) -> List[str]:
        """Return the ``direction`` stack most-recent-first, or ``[]``."""

        history = self.get(doc_id, line)
        if history is None:
            return []
        return list(reversed(history.stack(direction)))

    # -- mutation --------------------------------------------------------

    def ensure_initialized(self, doc_id: DocumentId, line: int, text: str) -> bool:
        """Record the first observed text of ``line``; ``True`` if created."""

        document = self._documents.setdefault(doc_id, {})
        if line in document:
            return False
        document[line] = LineHistory(current_snapshot=text)
        return True

    def commit(
        self,
        doc_id: DocumentId,
        line: int,
        text: str,
        *,
        max_depth: Optional[int] = None,
    ) -> bool:
        """Commit ``text`` as the line's new snapshot.

        A line with no entry yet starts its history at ``text``. Returns
        ``True`` only when the undo stack grew.
        """

        if self.ensure_initialized(doc_id, line, text):
            return False
        history = self._documents[doc_id][line]
        committed = history.commit(text, max_depth or self.max_depth)
        if committed:
            telemetry.record_event(
                "history.commit",
                level="debug",
                data={
                    "document": doc_id,
                    "line": line,
                    "depth": len(history.undo_stack),
                },
                logger_name=self._logger_name,
            )
        return committed

    def remap(self, doc_id: DocumentId, changes: Sequence[LineChange]) -> int:
        """Move every entry of ``doc_id`` to its post-edit line index.

        Entries strictly inside an edited span (below its first line) are
        dropped. Returns the number of dropped entries.
        """

        document = self._documents.get(doc_id)
        if not document or not changes:
            return 0

        with telemetry.span(
            "history::remap",
            logger_name=self._logger_name,
            component="history",
            metadata={"document": doc_id, "changes": len(changes)},
        ) as handle:
            remapped: Dict[int, LineHistory] = {}
            dropped = 0
            for old_line, history in document.items():
                new_line = remap_line(old_line, changes)
                if new_line is None:
                    dropped += 1
                    continue
                remapped[new_line] = history
            self._documents[doc_id] = remapped
            handle.add_metadata("dropped", dropped)
            if dropped:
                handle.note("dropped", count=dropped)
            return dropped

    def trim_all(self, max_depth: int) -> None:
        for document in self._documents.values():
            for history in document.values():
                history.trim(max_depth)


__all__ = ["DocumentId", "HistoryStore"]
