"""Registry of history commands and the shortcuts that invoke them."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Optional

from ghost_line.runtime.telemetry import span

from .models import (
    SHORTCUTS_FLAG,
    CommandContext,
    CommandRef,
    CommandResult,
    Shortcut,
    normalize_key,
)


class ShortcutConflictError(RuntimeError):
    """Raised when a shortcut overlaps an existing one on the same key."""

    def __init__(self, shortcut: Shortcut, conflicts: Iterable[Shortcut]):
        conflicts_tuple = tuple(conflicts)
        super().__init__(
            f"Shortcut '{shortcut.id}' conflicts with {[s.id for s in conflicts_tuple]}"
        )
        self.shortcut = shortcut
        self.conflicts = conflicts_tuple


class CommandRegistry:
    """Owns command entry points and key shortcuts.

    ``flags`` holds the boolean context shortcuts are gated on; the
    ``shortcuts_enabled`` flag mirrors ``HistoryConfig.enable_shortcuts`` and
    also gates direct ``execute`` calls.
    """

    def __init__(
        self,
        *,
        shortcuts_enabled: bool = True,
        logger_name: str | None = None,
    ) -> None:
        self._commands: Dict[str, CommandRef] = {}
        self._shortcuts: Dict[str, Shortcut] = {}
        self._by_key: Dict[str, set[str]] = {}
        self._logger_name = logger_name
        self.flags: Dict[str, bool] = {SHORTCUTS_FLAG: shortcuts_enabled}

    @property
    def shortcuts_enabled(self) -> bool:
        return bool(self.flags.get(SHORTCUTS_FLAG, False))

    def set_flag(self, name: str, value: bool) -> None:
        self.flags[name] = value

    def get_command(self, command_id: str) -> CommandRef:
        try:
            return self._commands[command_id]
        except KeyError as exc:
            raise KeyError(f"Command '{command_id}' is not registered") from exc

    def has_command(self, command_id: str) -> bool:
        return command_id in self._commands

    def commands(self) -> Iterator[CommandRef]:
        yield from self._commands.values()

    def shortcuts(self, key: Optional[str] = None) -> Iterator[Shortcut]:
        if key is None:
            yield from self._shortcuts.values()
            return
        for shortcut_id in sorted(self._by_key.get(normalize_key(key), ())):
            yield self._shortcuts[shortcut_id]

    def register_command(self, command: CommandRef, *, replace: bool = False) -> CommandRef:
        if not replace and command.id in self._commands:
            raise ValueError(f"Command '{command.id}' already registered")
        self._commands[command.id] = command
        return command

    def register_shortcut(self, shortcut: Shortcut, *, replace: bool = False) -> Shortcut:
        with span(
            "commands::register_shortcut",
            logger_name=self._logger_name,
            component="commands",
            metadata={"shortcut_id": shortcut.id, "key": shortcut.key},
        ) as handle:
            if shortcut.command_id not in self._commands:
                handle.add_metadata("missing_command", shortcut.command_id)
                raise KeyError(
                    f"Shortcut '{shortcut.id}' references unknown command "
                    f"'{shortcut.command_id}'"
                )

            conflicts = [
                existing
                for existing in self.shortcuts(shortcut.key)
                if existing.id != shortcut.id and _contexts_overlap(shortcut, existing)
            ]
            if conflicts and not replace:
                raise ShortcutConflictError(shortcut, conflicts)
            if shortcut.id in self._shortcuts and not replace:
                raise ValueError(f"Shortcut id '{shortcut.id}' already registered")

            if replace:
                for existing in conflicts:
                    self.unregister_shortcut(existing.id)
                self.unregister_shortcut(shortcut.id)

            self._shortcuts[shortcut.id] = shortcut
            self._by_key.setdefault(shortcut.key, set()).add(shortcut.id)
            return shortcut

    def unregister_shortcut(self, shortcut_id: str) -> Optional[Shortcut]:
        shortcut = self._shortcuts.pop(shortcut_id, None)
        if shortcut is None:
            return None
        bucket = self._by_key.get(shortcut.key)
        if bucket is not None:
            bucket.discard(shortcut_id)
            if not bucket:
                del self._by_key[shortcut.key]
        return shortcut

    def resolve(
        self, key: str, flags: Optional[Mapping[str, bool]] = None
    ) -> Optional[Shortcut]:
        """Return the highest-priority shortcut for ``key`` allowed by ``flags``."""

        context = {**self.flags, **(flags or {})}
        allowed = [s for s in self.shortcuts(key) if s.allows(context)]
        if not allowed:
            return None
        allowed.sort(key=lambda s: (-s.priority, s.id))
        return allowed[0]

    def execute(self, command_id: str, context: CommandContext) -> CommandResult:
        command = self.get_command(command_id)
        if not self.shortcuts_enabled:
            return CommandResult(consumed=False, status="disabled")
        with span(
            "commands::execute",
            logger_name=self._logger_name,
            component="commands",
            metadata={"command": command.id, "line": context.line},
        ) as handle:
            result = command(context)
            handle.add_metadata("status", result.status)
            return result

    def dispatch_key(
        self, key: str, context: CommandContext
    ) -> Optional[CommandResult]:
        """Execute the command bound to ``key``; ``None`` if nothing matched."""

        shortcut = self.resolve(key)
        if shortcut is None:
            return None
        return self.execute(shortcut.command_id, context)


def _contexts_overlap(left: Shortcut, right: Shortcut) -> bool:
    left_map = left.when_map
    right_map = right.when_map
    for flag, expected in left_map.items():
        if flag in right_map and right_map[flag] != expected:
            return False
    return True


__all__ = ["CommandRegistry", "ShortcutConflictError"]
