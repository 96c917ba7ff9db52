"""Command entry points and shortcuts for per-line history."""

from .defaults import DEFAULT_COMMANDS, DEFAULT_SHORTCUTS, load_default_commands
from .models import (
    SHORTCUTS_FLAG,
    CommandContext,
    CommandRef,
    CommandResult,
    Shortcut,
    WhenClause,
    gated,
    normalize_key,
)
from .registry import CommandRegistry, ShortcutConflictError

__all__ = [
    "SHORTCUTS_FLAG",
    "CommandContext",
    "CommandRef",
    "CommandRegistry",
    "CommandResult",
    "DEFAULT_COMMANDS",
    "DEFAULT_SHORTCUTS",
    "Shortcut",
    "ShortcutConflictError",
    "WhenClause",
    "gated",
    "load_default_commands",
    "normalize_key",
]
