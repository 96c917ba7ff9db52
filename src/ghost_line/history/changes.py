"""Line-level description of document edits and the remapping rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence


@dataclass(frozen=True, slots=True)
class LineChange:
    """One edit expressed in lines: ``[start_line, end_line]`` was replaced.

    ``end_line`` is the last line touched by the replaced range, so a pure
    in-line edit has ``start_line == end_line``.
    """

    start_line: int
    end_line: int
    inserted_line_count: int = 0

    def __post_init__(self) -> None:
        if self.start_line < 0 or self.end_line < 0:
            raise ValueError("line indices cannot be negative")
        if self.end_line < self.start_line:
            raise ValueError("end_line cannot precede start_line")
        if self.inserted_line_count < 0:
            raise ValueError("inserted_line_count cannot be negative")

    @classmethod
    def from_text(cls, start_line: int, end_line: int, text: str) -> "LineChange":
        """Build a change from the inserted text, counting its line breaks."""

        return cls(start_line, end_line, text.count("\n"))

    @property
    def removed_line_count(self) -> int:
        return self.end_line - self.start_line

    @property
    def delta(self) -> int:
        """Net change in the document's line count."""

        return self.inserted_line_count - self.removed_line_count

    @property
    def is_single_line(self) -> bool:
        return self.start_line == self.end_line and self.inserted_line_count == 0


def remap_line(line: int, changes: Iterable[LineChange]) -> Optional[int]:
    """Return where ``line`` lands after ``changes``, or ``None`` if consumed.

    Every change is compared against the original ``line``; only the result
    accumulates across the batch.
    """

    new_line = line
    for change in changes:
        if line > change.end_line:
            new_line += change.delta
        elif line > change.start_line:
            return None
    return new_line


def touched_lines(changes: Sequence[LineChange]) -> list[int]:
    """Post-edit indices of the lines each change landed on, deduplicated."""

    lines: list[int] = []
    for change in changes:
        landed = remap_line(change.start_line, changes)
        if landed is not None and landed not in lines:
            lines.append(landed)
    return lines


__all__ = ["LineChange", "remap_line", "touched_lines"]
