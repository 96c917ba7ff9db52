from __future__ import annotations

from types import SimpleNamespace
from typing import List, Sequence

from ghost_line.adapters.textual import (
    TextualHistoryAdapter,
    TextualUIHooks,
    redo_changes,
    undo_changes,
)
from ghost_line.history import LineChange
from ghost_line.runtime.settings import HistoryConfig
from ghost_line.session import HistorySession


class FakeEditor:
    """Stand-in widget that echoes writes back as edits, like a real host."""

    def __init__(self, text: str) -> None:
        self.lines = text.split("\n")
        self.adapter: TextualHistoryAdapter | None = None
        self.statuses: List[str] = []
        self.history: List[Sequence[str]] = []
        self.logs: List[str] = []

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def read_line(self, line: int) -> str:
        return self.lines[line]

    def write_line(self, line: int, text: str) -> None:
        self.lines[line] = text
        assert self.adapter is not None
        self.adapter.handle_edit(self.text, [LineChange(line, line, 0)])

    def type_into(self, line: int, text: str) -> None:
        self.write_line(line, text)
        assert self.adapter is not None
        self.adapter.session.flush()

    def hooks(self) -> TextualUIHooks:
        return TextualUIHooks(
            read_line=self.read_line,
            write_line=self.write_line,
            update_status=self.statuses.append,
            show_history=self.history.append,
            log=self.logs.append,
        )


def make_adapter(
    text: str = "foo\nbar", config: HistoryConfig | None = None
) -> tuple[TextualHistoryAdapter, FakeEditor]:
    editor = FakeEditor(text)
    adapter = TextualHistoryAdapter(
        HistorySession(config), editor.hooks(), doc_id="buffer", text=text
    )
    editor.adapter = adapter
    return adapter, editor


def recorded_edit(
    top: tuple[int, int],
    bottom: tuple[int, int],
    text: str,
    end: tuple[int, int] | None = None,
    replaced: str = "",
) -> SimpleNamespace:
    """Mimic a widget edit after it was applied, with its edit result."""

    result = None if end is None else SimpleNamespace(end_location=end, replaced_text=replaced)
    return SimpleNamespace(top=top, bottom=bottom, text=text, _edit_result=result)


def test_undo_shortcut_writes_back_without_committing() -> None:
    adapter, editor = make_adapter()
    adapter.handle_cursor(0)
    editor.type_into(0, "fooo")

    result = adapter.handle_key("ctrl+alt+z")
    adapter.session.flush()

    assert result is not None
    assert result.text == "foo"
    assert editor.lines[0] == "foo"
    assert adapter.session.list_history("buffer", 0, "redo") == ["fooo"]
    assert adapter.session.list_history("buffer", 0, "undo") == []


def test_redo_after_undo_restores_text() -> None:
    adapter, editor = make_adapter()
    adapter.handle_cursor(0)
    editor.type_into(0, "fooo")
    adapter.handle_key("ctrl+alt+z")

    adapter.handle_key("ctrl+alt+y")

    assert editor.lines[0] == "fooo"


def test_nothing_to_undo_updates_status() -> None:
    adapter, editor = make_adapter()
    adapter.handle_cursor(1)

    result = adapter.handle_key("ctrl+alt+z")

    assert result is not None
    assert result.text is None
    assert editor.statuses[-1] == "Ghost Line: nothing to undo"
    assert editor.lines == ["foo", "bar"]


def test_browse_shows_history_and_apply_jumps() -> None:
    adapter, editor = make_adapter()
    adapter.handle_cursor(1)
    editor.type_into(1, "bar2")
    editor.type_into(1, "bar3")

    adapter.handle_key("ctrl+alt+h")
    adapter.run_command("lineHistory.apply", "bar")

    assert editor.history[-1] == ("bar2", "bar")
    assert editor.lines[1] == "bar"


def test_unbound_key_is_ignored() -> None:
    adapter, editor = make_adapter()

    assert adapter.handle_key("ctrl+s") is None
    assert editor.statuses == []


def test_disabled_shortcuts_do_nothing() -> None:
    adapter, editor = make_adapter(config=HistoryConfig(enable_shortcuts=False))
    adapter.handle_cursor(0)
    editor.type_into(0, "fooo")

    result = adapter.run_command("lineHistory.undo")

    assert adapter.handle_key("ctrl+alt+z") is None
    assert result.status == "disabled"
    assert editor.lines[0] == "fooo"


def test_update_config_toggles_shortcuts() -> None:
    adapter, _ = make_adapter(config=HistoryConfig(enable_shortcuts=False))

    adapter.update_config(HistoryConfig(enable_shortcuts=True))

    assert adapter.registry.resolve("ctrl+alt+z") is not None


def test_line_insert_moves_cursor_history() -> None:
    adapter, editor = make_adapter()
    adapter.handle_cursor(1)
    editor.type_into(1, "bar!")

    editor.lines.insert(0, "header")
    adapter.handle_edit(editor.text, [LineChange.from_text(0, 0, "header\n")])
    adapter.handle_cursor(2)
    adapter.handle_key("ctrl+alt+z")

    assert editor.lines == ["header", "foo", "bar"]


def test_cursor_past_end_is_ignored() -> None:
    adapter, _ = make_adapter()

    assert adapter.handle_cursor(10) is False
    assert adapter.session.store.lines("buffer") == []


def test_adapter_emits_log_lines() -> None:
    adapter, editor = make_adapter()
    adapter.handle_cursor(0)
    editor.type_into(0, "food")

    adapter.handle_key("ctrl+alt+z")

    assert any(line.startswith("edit ->") for line in editor.logs)
    assert any(line.startswith("key ->") for line in editor.logs)
    assert any(line.startswith("result <-") for line in editor.logs)


def test_native_undo_of_line_break_moves_history_back() -> None:
    adapter, editor = make_adapter("a\nb")
    adapter.handle_cursor(1)
    newline = recorded_edit((0, 1), (0, 1), "\n", end=(1, 0))

    editor.lines = ["a", "", "b"]
    adapter.handle_edit(editor.text, [LineChange.from_text(0, 0, "\n")])
    assert adapter.session.store.lines("buffer") == [2]

    editor.lines = ["a", "b"]
    adapter.handle_replay(editor.text, undo_changes([newline]))

    document = adapter.session.document("buffer")
    assert document is not None
    assert tuple(document.lines) == ("a", "b")
    assert adapter.session.store.lines("buffer") == [1]
    assert adapter.session.list_history("buffer", 1) == []

    editor.lines = ["a", "", "b"]
    adapter.handle_replay(editor.text, redo_changes([newline]))

    assert adapter.session.store.lines("buffer") == [2]


def test_history_restorable_after_native_undo() -> None:
    adapter, editor = make_adapter("a\nb")
    adapter.handle_cursor(1)
    editor.type_into(1, "b2")
    newline = recorded_edit((0, 1), (0, 1), "\n", end=(1, 0))
    editor.lines = ["a", "", "b2"]
    adapter.handle_edit(editor.text, [LineChange.from_text(0, 0, "\n")])
    editor.lines = ["a", "b2"]
    adapter.handle_replay(editor.text, undo_changes([newline]))

    adapter.handle_cursor(1)
    adapter.handle_key("ctrl+alt+z")

    assert editor.lines == ["a", "b"]


def test_undo_changes_revert_newest_first() -> None:
    insert = recorded_edit((0, 0), (0, 0), "x\n", end=(1, 0))
    delete = recorded_edit((3, 0), (4, 2), "", end=(3, 0), replaced="ab\ncd")
    unapplied = recorded_edit((5, 0), (5, 0), "z")

    changes = undo_changes([insert, delete, unapplied])

    assert changes == [LineChange(3, 3, 1), LineChange(0, 1, 0)]
    assert redo_changes([insert, delete]) == [LineChange(0, 0, 1), LineChange(3, 4, 0)]
