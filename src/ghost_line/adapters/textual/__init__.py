"""Textual host adapter; the app module needs the ``textual`` extra."""

from .controller import (
    TextualHistoryAdapter,
    TextualUIHooks,
    build_registry,
    redo_changes,
    undo_changes,
)

__all__ = [
    "TextualHistoryAdapter",
    "TextualUIHooks",
    "build_registry",
    "redo_changes",
    "undo_changes",
]
