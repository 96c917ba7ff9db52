"""Hook-based controller wiring a text widget to a HistorySession."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ghost_line.commands import (
    SHORTCUTS_FLAG,
    CommandContext,
    CommandRegistry,
    CommandResult,
    load_default_commands,
)
from ghost_line.history import CommitOutcome, DocumentId, LineChange
from ghost_line.runtime.settings import HistoryConfig
from ghost_line.session import HistorySession


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the controller uses to read from and update the widget."""

    read_line: Callable[[int], str]
    write_line: Callable[[int, str], None]
    update_status: Callable[[str], None] = _noop
    show_history: Callable[[Sequence[str]], None] = _noop
    log: Callable[[str], None] = _noop


def undo_changes(edits: Sequence[Any]) -> List[LineChange]:
    """Line changes a widget makes when it reverts ``edits``.

    ``edits`` are recorded edits, oldest first, each exposing ``top`` and
    the ``_edit_result`` left by applying it. They are reverted newest
    first, each replacing its result span with the text it had replaced.
    """

    changes: List[LineChange] = []
    for edit in reversed(edits):
        result = edit._edit_result
        if result is None:
            continue
        changes.append(
            LineChange.from_text(edit.top[0], result.end_location[0], result.replaced_text)
        )
    return changes


def redo_changes(edits: Sequence[Any]) -> List[LineChange]:
    """Line changes a widget makes when it re-applies ``edits`` in order."""

    return [LineChange.from_text(edit.top[0], edit.bottom[0], edit.text) for edit in edits]


def build_registry(config: HistoryConfig) -> CommandRegistry:
    registry = CommandRegistry(
        shortcuts_enabled=config.enable_shortcuts, logger_name="ghost_line.commands"
    )
    load_default_commands(registry)
    return registry


class TextualHistoryAdapter:
    """Bridges widget events and shortcuts to the per-line history engine."""

    def __init__(
        self,
        session: HistorySession,
        hooks: TextualUIHooks,
        *,
        registry: Optional[CommandRegistry] = None,
        doc_id: DocumentId = "untitled",
        text: str = "",
    ) -> None:
        self.session = session
        self.hooks = hooks
        self.registry = registry or build_registry(session.config)
        self.doc_id = doc_id
        self.cursor_line = 0
        self.session.open(doc_id, text)

    def handle_edit(self, text: str, changes: Iterable[LineChange]) -> None:
        batch = tuple(changes)
        self.session.on_text_changed(self.doc_id, text, batch)
        self._log_state(
            "edit ->",
            changes=[(c.start_line, c.end_line, c.inserted_line_count) for c in batch],
            suspended=self.session.guard.active,
        )

    def handle_replay(self, text: str, changes: Sequence[LineChange]) -> None:
        """Report edits the widget applied in sequence, e.g. its own undo.

        Each change is expressed against the document left by the previous
        one, so they are remapped one at a time rather than as a batch.
        """

        for change in changes:
            self.handle_edit(text, [change])

    def handle_cursor(self, line: int) -> bool:
        self.cursor_line = line
        if self.session.guard.active:
            return False
        document = self.session.document(self.doc_id)
        if document is not None and not document.has_line(line):
            return False
        return self.session.on_cursor_moved(self.doc_id, line, self.hooks.read_line(line))

    def handle_key(self, key: str) -> Optional[CommandResult]:
        """Run the command bound to ``key``; ``None`` when the key is unbound."""

        shortcut = self.registry.resolve(key)
        if shortcut is None:
            return None
        self._log_state("key ->", key=key, command=shortcut.command_id)
        return self.run_command(shortcut.command_id)

    def run_command(self, command_id: str, argument: Optional[str] = None) -> CommandResult:
        line = self.cursor_line
        context = CommandContext(
            session=self.session,
            doc_id=self.doc_id,
            line=line,
            current_text=self.hooks.read_line(line),
            argument=argument,
        )
        result = self.registry.execute(command_id, context)
        self._after_command(line, result)
        return result

    def process_timeouts(self) -> List[CommitOutcome]:
        outcomes = self.session.process_timeouts()
        for outcome in outcomes:
            self._log_state("commit <-", line=outcome.line, status=outcome.status)
        return outcomes

    def update_config(self, config: HistoryConfig) -> None:
        self.session.update_config(config)
        self.registry.set_flag(SHORTCUTS_FLAG, config.enable_shortcuts)

    def close(self) -> None:
        self.session.close(self.doc_id)

    def _after_command(self, line: int, result: CommandResult) -> None:
        if result.text is not None:
            with self.session.programmatic_write():
                self.hooks.write_line(line, result.text)
        if result.entries:
            self.hooks.show_history(result.entries)
        status = result.message or result.status
        if status and status != "ok":
            self.hooks.update_status(status)
        self._log_state("result <-", status=result.status, consumed=result.consumed)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: dict[str, object] = {
            "document": self.doc_id,
            "cursor_line": self.cursor_line,
            "history_lines": self.session.store.lines(self.doc_id),
            "pending": [line for _, line in self.session.policy.pending(self.doc_id)],
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = [
    "TextualHistoryAdapter",
    "TextualUIHooks",
    "build_registry",
    "redo_changes",
    "undo_changes",
]
