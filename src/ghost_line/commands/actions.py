"""Command handlers for per-line undo, redo and history browsing."""

from __future__ import annotations

from ghost_line.history import Direction

from .models import CommandContext, CommandResult

STATUS_PREFIX = "Ghost Line"


def _nothing_to(context: CommandContext, direction: Direction) -> CommandResult:
    reason = context.session.describe(context.doc_id, context.line, direction)
    if reason == "no_history":
        message = f"{STATUS_PREFIX}: nothing to {direction} (no history)"
    else:
        message = f"{STATUS_PREFIX}: nothing to {direction}"
    return CommandResult(consumed=True, status=f"nothing_to_{direction}", message=message)


def _restore(context: CommandContext, direction: Direction) -> CommandResult:
    session = context.session
    if direction == "undo":
        result = session.undo(context.doc_id, context.line, context.current_text)
    else:
        result = session.redo(context.doc_id, context.line, context.current_text)
    if result is None:
        return _nothing_to(context, direction)
    return CommandResult(consumed=True, status=direction, text=result.text)


def undo_line(context: CommandContext) -> CommandResult:
    return _restore(context, "undo")


def redo_line(context: CommandContext) -> CommandResult:
    return _restore(context, "redo")


def _browse(context: CommandContext, mode: Direction) -> CommandResult:
    entries = context.session.list_history(context.doc_id, context.line, mode)
    if not entries:
        return _nothing_to(context, mode)
    return CommandResult(
        consumed=True,
        status=f"browse_{mode}",
        message=f"{STATUS_PREFIX}: {len(entries)} {mode} entries",
        entries=tuple(entries),
    )


def browse_undo(context: CommandContext) -> CommandResult:
    return _browse(context, "undo")


def browse_redo(context: CommandContext) -> CommandResult:
    return _browse(context, "redo")


def apply_entry(context: CommandContext) -> CommandResult:
    """Jump to the history entry passed as ``context.argument``."""

    if context.argument is None:
        return CommandResult(consumed=False, status="missing_entry")
    result = context.session.apply_history_entry(
        context.doc_id, context.line, context.argument, context.current_text
    )
    if result is None:
        return CommandResult(
            consumed=True,
            status="stale_entry",
            message=f"{STATUS_PREFIX}: entry no longer in history",
        )
    return CommandResult(consumed=True, status="jump", text=result.text)


__all__ = [
    "apply_entry",
    "browse_redo",
    "browse_undo",
    "redo_line",
    "undo_line",
]
