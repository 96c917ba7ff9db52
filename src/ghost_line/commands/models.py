"""Dataclasses describing commands, shortcuts and their results."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional

from ghost_line.history import DocumentId

if TYPE_CHECKING:  # pragma: no cover
    from ghost_line.session import HistorySession

SHORTCUTS_FLAG = "shortcuts_enabled"


def normalize_key(key: str) -> str:
    """Canonical ``mod+mod+key`` form: lower-case, modifiers sorted."""

    parts = [part.strip().lower() for part in key.split("+") if part.strip()]
    if not parts:
        raise ValueError("key cannot be empty")
    *modifiers, base = parts
    return "+".join(sorted(dict.fromkeys(modifiers)) + [base])


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Boolean flag condition gating a shortcut (``flag`` or ``!flag``)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        expr = expression.strip()
        if expr.startswith("!"):
            return cls(expr[1:].strip(), False)
        return cls(expr)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) is self.expected


@dataclass(frozen=True, slots=True)
class CommandContext:
    """What a command handler needs to act on the line under the cursor."""

    session: "HistorySession"
    doc_id: DocumentId
    line: int
    current_text: str
    argument: Optional[str] = None


@dataclass(slots=True)
class CommandResult:
    """Outcome of a command; ``text`` is what the host must write back."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    text: Optional[str] = None
    entries: tuple[str, ...] = ()


CommandHandler = Callable[[CommandContext], CommandResult]


@dataclass(frozen=True, slots=True)
class CommandRef:
    """A named entry point exposed to the host's command surface."""

    id: str
    handler: CommandHandler
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("command id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, context: CommandContext) -> CommandResult:
        return self.handler(context)


@dataclass(frozen=True, slots=True)
class Shortcut:
    """Binds a key chord to a command, optionally gated by flags."""

    id: str
    key: str
    command_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("shortcut id cannot be empty")
        if not self.command_id:
            raise ValueError("shortcut command_id cannot be empty")
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(
            self,
            "when",
            tuple(
                clause if isinstance(clause, WhenClause) else WhenClause.parse(str(clause))
                for clause in self.when
            ),
        )

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(flags) for clause in self.when)


def gated(*clauses: str | WhenClause) -> tuple[WhenClause, ...]:
    """Shortcut ``when`` clauses that always include the shortcuts flag."""

    parsed: Iterable[WhenClause] = (
        clause if isinstance(clause, WhenClause) else WhenClause.parse(clause)
        for clause in clauses
    )
    return (WhenClause(SHORTCUTS_FLAG), *parsed)


__all__ = [
    "SHORTCUTS_FLAG",
    "CommandContext",
    "CommandHandler",
    "CommandRef",
    "CommandResult",
    "Shortcut",
    "WhenClause",
    "gated",
    "normalize_key",
]
