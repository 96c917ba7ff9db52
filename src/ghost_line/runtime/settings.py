"""Configuration consumed by the history engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

ENV_PREFIX = "GHOST_LINE_"

DEFAULT_MAX_HISTORY_PER_LINE = 20
DEFAULT_IDLE_DELAY_MS = 400

# host setting key -> HistoryConfig field
HOST_KEYS: Mapping[str, str] = {
    "maxHistoryPerLine": "max_history_per_line",
    "idleDelay": "idle_delay_ms",
    "enableShortcuts": "enable_shortcuts",
    "undoableJumps": "undoable_jumps",
}

ENV_KEYS: Mapping[str, str] = {
    "MAX_HISTORY": "max_history_per_line",
    "IDLE_DELAY": "idle_delay_ms",
    "ENABLE_SHORTCUTS": "enable_shortcuts",
    "UNDOABLE_JUMPS": "undoable_jumps",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class HistoryConfig:
    """Settings for per-line history capture and restore."""

    max_history_per_line: int = DEFAULT_MAX_HISTORY_PER_LINE
    idle_delay_ms: int = DEFAULT_IDLE_DELAY_MS
    enable_shortcuts: bool = True
    undoable_jumps: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_history_per_line, bool) or not isinstance(
            self.max_history_per_line, int
        ):
            raise ValueError("max_history_per_line must be an integer")
        if self.max_history_per_line < 1:
            raise ValueError("max_history_per_line must be positive")
        if isinstance(self.idle_delay_ms, bool) or not isinstance(
            self.idle_delay_ms, int
        ):
            raise ValueError("idle_delay_ms must be an integer")

    @property
    def capture_enabled(self) -> bool:
        """``idle_delay_ms <= 0`` switches snapshot capture off."""

        return self.idle_delay_ms > 0

    @property
    def idle_delay_seconds(self) -> float:
        return self.idle_delay_ms / 1000.0

    def with_changes(self, **changes: Any) -> "HistoryConfig":
        return replace(self, **changes)

    @classmethod
    def from_mapping(
        cls, values: Mapping[str, Any], *, base: Optional["HistoryConfig"] = None
    ) -> "HistoryConfig":
        """Build a config from host settings (``maxHistoryPerLine`` etc.).

        Field names are accepted as well; unknown keys are ignored.
        """

        known = {f.name for f in fields(cls)}
        changes: dict[str, Any] = {}
        for key, value in values.items():
            name = HOST_KEYS.get(key, key)
            if name in known and value is not None:
                changes[name] = _coerce(name, value)
        return replace(base or cls(), **changes)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        base: Optional["HistoryConfig"] = None,
    ) -> "HistoryConfig":
        """Build a config from ``GHOST_LINE_*`` environment variables."""

        env = os.environ if environ is None else environ
        changes: dict[str, Any] = {}
        for suffix, name in ENV_KEYS.items():
            raw = env.get(f"{ENV_PREFIX}{suffix}")
            if raw is not None and raw.strip():
                changes[name] = _coerce(name, raw)
        return replace(base or cls(), **changes)


def _coerce(name: str, value: Any) -> Any:
    if name in {"enable_shortcuts", "undoable_jumps"}:
        return _coerce_flag(name, value)
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _coerce_flag(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raw = str(value).strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {value!r}")


__all__ = [
    "HistoryConfig",
    "DEFAULT_MAX_HISTORY_PER_LINE",
    "DEFAULT_IDLE_DELAY_MS",
    "HOST_KEYS",
    "ENV_KEYS",
]
