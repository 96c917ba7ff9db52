from __future__ import annotations

import pytest

from ghost_line.history import LineHistory, opposite


def make_history(snapshot: str = "foo", *undo: str) -> LineHistory:
    return LineHistory(current_snapshot=snapshot, undo_stack=list(undo))


def test_commit_pushes_previous_snapshot() -> None:
    history = make_history("foo")

    assert history.commit("bar", max_depth=20) is True

    assert history.undo_stack == ["foo"]
    assert history.current_snapshot == "bar"
    assert history.redo_stack == []


def test_commit_unchanged_text_is_noop() -> None:
    history = make_history("foo")
    history.commit("bar", max_depth=20)

    assert history.commit("bar", max_depth=20) is False
    assert history.commit("bar", max_depth=20) is False

    assert history.undo_stack == ["foo"]


def test_commit_clears_redo_stack() -> None:
    history = make_history("foo")
    history.redo_stack.append("later")

    history.commit("bar", max_depth=20)

    assert history.redo_stack == []


def test_commit_trims_oldest_entries() -> None:
    history = make_history("v0")

    for index in range(1, 8):
        history.commit(f"v{index}", max_depth=3)

    assert history.undo_stack == ["v4", "v5", "v6"]
    assert history.current_snapshot == "v7"


def test_stack_rejects_unknown_direction() -> None:
    history = make_history()

    with pytest.raises(ValueError):
        history.stack("sideways")  # type: ignore[arg-type]


def test_copy_is_independent() -> None:
    history = make_history("foo", "older")

    clone = history.copy()
    clone.undo_stack.append("mutated")

    assert history.undo_stack == ["older"]
    assert clone.current_snapshot == "foo"


def test_opposite_direction() -> None:
    assert opposite("undo") == "redo"
    assert opposite("redo") == "undo"
