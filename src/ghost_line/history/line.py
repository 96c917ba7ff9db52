"""Per-line undo/redo stacks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

Direction = Literal["undo", "redo"]


@dataclass(slots=True)
class LineHistory:
    """Undo/redo stacks for a single line plus its last committed text.

    Both stacks keep the most recent entry last. ``current_snapshot`` is the
    baseline the next edit is compared against and only enters a stack at the
    moment it is pushed.
    """

    current_snapshot: str
    undo_stack: List[str] = field(default_factory=list)
    redo_stack: List[str] = field(default_factory=list)

    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def stack(self, direction: Direction) -> List[str]:
        if direction == "undo":
            return self.undo_stack
        if direction == "redo":
            return self.redo_stack
        raise ValueError(f"Unknown history direction '{direction}'")

    def commit(self, text: str, max_depth: int) -> bool:
        """Advance the snapshot to ``text``; return ``False`` when unchanged."""

        if text == self.current_snapshot:
            return False
        self.push_undo(self.current_snapshot, max_depth)
        self.redo_stack.clear()
        self.current_snapshot = text
        return True

    def push_undo(self, text: str, max_depth: int) -> None:
        self.undo_stack.append(text)
        self.trim(max_depth)

    def trim(self, max_depth: int) -> None:
        overflow = len(self.undo_stack) - max_depth
        if overflow > 0:
            del self.undo_stack[:overflow]

    def copy(self) -> "LineHistory":
        return LineHistory(
            current_snapshot=self.current_snapshot,
            undo_stack=list(self.undo_stack),
            redo_stack=list(self.redo_stack),
        )


def opposite(direction: Direction) -> Direction:
    return "redo" if direction == "undo" else "undo"


__all__ = ["Direction", "LineHistory", "opposite"]
