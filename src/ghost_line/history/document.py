"""Read-only mirror of a host document's lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple


def split_lines(text: str) -> Tuple[str, ...]:
    """Split on ``\\n`` the way line indices are counted; never empty."""

    return tuple(line[:-1] if line.endswith("\r") else line for line in text.split("\n"))


@dataclass(frozen=True, slots=True)
class DocumentLines:
    """Immutable snapshot of a document's lines at a given version."""

    lines: Tuple[str, ...] = field(default_factory=lambda: ("",))
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "DocumentLines":
        return cls(lines=split_lines(text), version=version)

    def updated(self, text: str) -> "DocumentLines":
        """Return a mirror of ``text`` with the version bumped."""

        return DocumentLines(lines=split_lines(text), version=self.version + 1)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def has_line(self, index: int) -> bool:
        return 0 <= index < len(self.lines)

    def get_line(self, index: int) -> Optional[str]:
        """Return the line text, or ``None`` for an out-of-range index."""

        if not self.has_line(index):
            return None
        return self.lines[index]

    def snapshot(self) -> Sequence[str]:
        return self.lines

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


__all__ = ["DocumentLines", "split_lines"]
