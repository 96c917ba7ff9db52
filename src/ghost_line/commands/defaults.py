"""Built-in history commands and their default shortcuts."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping, Sequence

from . import actions
from .models import CommandRef, Shortcut, gated
from .registry import CommandRegistry

DEFAULT_COMMANDS: tuple[CommandRef, ...] = (
    CommandRef(
        id="lineHistory.undo",
        handler=actions.undo_line,
        description="Undo the last change on the current line",
    ),
    CommandRef(
        id="lineHistory.redo",
        handler=actions.redo_line,
        description="Redo the last undone change on the current line",
    ),
    CommandRef(
        id="lineHistory.browseUndo",
        handler=actions.browse_undo,
        description="List earlier versions of the current line",
    ),
    CommandRef(
        id="lineHistory.browseRedo",
        handler=actions.browse_redo,
        description="List undone versions of the current line",
    ),
    CommandRef(
        id="lineHistory.apply",
        handler=actions.apply_entry,
        description="Replace the current line with a chosen history entry",
    ),
)

DEFAULT_SHORTCUTS: tuple[Shortcut, ...] = (
    Shortcut(
        id="lineHistory.undo.key",
        key="ctrl+alt+z",
        command_id="lineHistory.undo",
        when=gated(),
    ),
    Shortcut(
        id="lineHistory.redo.key",
        key="ctrl+alt+y",
        command_id="lineHistory.redo",
        when=gated(),
    ),
    Shortcut(
        id="lineHistory.browseUndo.key",
        key="ctrl+alt+h",
        command_id="lineHistory.browseUndo",
        when=gated(),
    ),
    Shortcut(
        id="lineHistory.browseRedo.key",
        key="ctrl+alt+shift+h",
        command_id="lineHistory.browseRedo",
        when=gated(),
    ),
)


def load_default_commands(
    registry: CommandRegistry,
    *,
    replace_existing: bool = False,
    extra_shortcuts: Iterable[Shortcut] | None = None,
    key_overrides: Mapping[str, str] | None = None,
    exclude_shortcuts: Sequence[str] | None = None,
) -> None:
    """Register the built-in commands and shortcuts.

    ``key_overrides`` maps a command id to a replacement key chord.
    """

    excluded = set(exclude_shortcuts or ())
    overrides = dict(key_overrides or {})

    for command in DEFAULT_COMMANDS:
        registry.register_command(command, replace=replace_existing)

    for shortcut in DEFAULT_SHORTCUTS:
        if shortcut.id in excluded:
            continue
        if shortcut.command_id in overrides:
            shortcut = replace(shortcut, key=overrides[shortcut.command_id])
        registry.register_shortcut(shortcut, replace=replace_existing)

    for shortcut in extra_shortcuts or ():
        registry.register_shortcut(shortcut, replace=replace_existing)


__all__ = ["DEFAULT_COMMANDS", "DEFAULT_SHORTCUTS", "load_default_commands"]
