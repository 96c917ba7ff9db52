"""Scoped suspension of edit observation during programmatic writes."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator


class WriteGuard:
    """Counts nested programmatic writes.

    While ``active`` the session ignores edit and cursor events for history
    purposes, so restored text is never committed as if the user typed it.
    """

    def __init__(self) -> None:
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    @property
    def depth(self) -> int:
        return self._depth

    @contextmanager
    def suspended(self) -> Iterator["WriteGuard"]:
        self._depth += 1
        try:
            yield self
        finally:
            self._depth -= 1


__all__ = ["WriteGuard"]
