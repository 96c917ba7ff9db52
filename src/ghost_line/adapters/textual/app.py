"""Executable Textual app demonstrating per-line history on a TextArea."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal
    from textual.widgets import Footer, Header, OptionList, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' extra to use ghost_line.adapters.textual.app"
    ) from exc

from ghost_line.commands import normalize_key
from ghost_line.history import LineChange
from ghost_line.runtime.settings import HistoryConfig
from ghost_line.session import HistorySession

from .controller import (
    TextualHistoryAdapter,
    TextualUIHooks,
    redo_changes,
    undo_changes,
)

EditListener = Callable[[str, List[LineChange]], None]


class HistoryTextArea(TextArea):
    """TextArea that reports every edit as a line-level change."""

    def __init__(
        self,
        text: str = "",
        *,
        on_edit: EditListener,
        on_replay: EditListener,
        **kwargs: Any,
    ) -> None:
        self._edit_listener = on_edit
        self._replay_listener = on_replay
        super().__init__(text, **kwargs)

    def edit(self, edit: Any) -> Any:
        top, bottom = sorted((edit.from_location, edit.to_location))
        result = super().edit(edit)
        self._edit_listener(self.text, [LineChange.from_text(top[0], bottom[0], edit.text)])
        return result

    # Native undo/redo bypass edit(), so their line changes are reported here.
    def _undo_batch(self, edits: Sequence[Any]) -> None:
        changes = undo_changes(edits)
        super()._undo_batch(edits)
        if changes:
            self._replay_listener(self.text, changes)

    def _redo_batch(self, edits: Sequence[Any]) -> None:
        changes = redo_changes(edits)
        super()._redo_batch(edits)
        if changes:
            self._replay_listener(self.text, changes)


class GhostLineApp(App[None]):  # pragma: no cover - manual demo
    """TextArea with a side panel listing the current line's history."""

    CSS = """
    #editor-area {
        height: 1fr;
    }

    #editor {
        width: 3fr;
    }

    #history-list {
        width: 1fr;
        border: round $accent;
    }

    #status-line {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, config: HistoryConfig, path: Optional[Path] = None) -> None:
        super().__init__()
        self.config = config
        self.path = path
        self.adapter: TextualHistoryAdapter | None = None
        self._editor: HistoryTextArea | None = None
        self._history: OptionList | None = None
        self._status: Static | None = None
        self._entries: List[str] = []

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="editor-area"):
            self._editor = HistoryTextArea(
                self._initial_text(),
                on_edit=self._report_edit,
                on_replay=self._report_replay,
                id="editor",
            )
            yield self._editor
            self._history = OptionList(id="history-list")
            yield self._history
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        assert self._editor is not None
        editor = self._editor
        hooks = TextualUIHooks(
            read_line=lambda line: editor.document.get_line(line),
            write_line=self._write_line,
            update_status=self._update_status,
            show_history=self._show_history,
            log=self.log,
        )
        self.adapter = TextualHistoryAdapter(
            HistorySession(self.config),
            hooks,
            doc_id=str(self.path or "untitled"),
            text=editor.text,
        )
        self.adapter.handle_cursor(editor.cursor_location[0])
        self.set_interval(0.1, self.adapter.process_timeouts)

    def on_unmount(self) -> None:
        if self.adapter:
            self.adapter.close()

    def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        result = self.adapter.handle_key(normalize_key(event.key))
        if result is not None and result.consumed:
            event.stop()
            event.prevent_default()

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if self.adapter:
            self.adapter.handle_cursor(event.selection.end[0])

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if not self.adapter or event.option_index >= len(self._entries):
            return
        self.adapter.run_command("lineHistory.apply", self._entries[event.option_index])
        if self._editor:
            self._editor.focus()

    def _report_edit(self, text: str, changes: List[LineChange]) -> None:
        if self.adapter:
            self.adapter.handle_edit(text, changes)

    def _report_replay(self, text: str, changes: List[LineChange]) -> None:
        if self.adapter:
            self.adapter.handle_replay(text, changes)

    def _write_line(self, line: int, text: str) -> None:
        assert self._editor is not None
        current = self._editor.document.get_line(line)
        self._editor.replace(text, (line, 0), (line, len(current)))

    def _update_status(self, status: str) -> None:
        if self._status:
            self._status.update(status)

    def _show_history(self, entries: Sequence[str]) -> None:
        self._entries = list(entries)
        if self._history:
            self._history.clear_options()
            self._history.add_options([entry or "<empty line>" for entry in entries])
            self._history.focus()

    def _initial_text(self) -> str:
        if self.path and self.path.exists():
            return self.path.read_text(encoding="utf-8")
        return ""


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Per-line undo/redo demo editor.")
    parser.add_argument("path", nargs="?", type=Path, help="File to open")
    parser.add_argument(
        "--max-history",
        type=int,
        default=None,
        help="Undo entries kept per line (default: 20 or GHOST_LINE_MAX_HISTORY)",
    )
    parser.add_argument(
        "--idle-delay",
        type=int,
        default=None,
        help="Quiet period in ms before a line is committed; <= 0 disables capture",
    )
    parser.add_argument(
        "--no-shortcuts",
        action="store_true",
        help="Disable the line history shortcuts",
    )
    parser.add_argument(
        "--undoable-jumps",
        action="store_true",
        help="Make jumps to a history entry undoable",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> HistoryConfig:
    overrides: dict[str, Any] = {
        "maxHistoryPerLine": args.max_history,
        "idleDelay": args.idle_delay,
    }
    if args.no_shortcuts:
        overrides["enableShortcuts"] = False
    if args.undoable_jumps:
        overrides["undoableJumps"] = True
    return HistoryConfig.from_mapping(overrides, base=HistoryConfig.from_env())


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - manual demo
    args = _parse_args(argv)
    GhostLineApp(config=build_config(args), path=args.path).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
