from __future__ import annotations

import pytest

from ghost_line.runtime.settings import HistoryConfig


def test_defaults() -> None:
    config = HistoryConfig()

    assert config.max_history_per_line == 20
    assert config.idle_delay_ms == 400
    assert config.enable_shortcuts is True
    assert config.undoable_jumps is False
    assert config.capture_enabled is True
    assert config.idle_delay_seconds == pytest.approx(0.4)


def test_from_mapping_reads_host_keys() -> None:
    config = HistoryConfig.from_mapping(
        {
            "maxHistoryPerLine": "5",
            "idleDelay": 250,
            "enableShortcuts": False,
            "unrelated.setting": "ignored",
        }
    )

    assert config.max_history_per_line == 5
    assert config.idle_delay_ms == 250
    assert config.enable_shortcuts is False


def test_from_mapping_skips_none_values() -> None:
    base = HistoryConfig(max_history_per_line=7)

    config = HistoryConfig.from_mapping({"maxHistoryPerLine": None}, base=base)

    assert config.max_history_per_line == 7


def test_from_env_reads_prefixed_variables() -> None:
    config = HistoryConfig.from_env(
        {
            "GHOST_LINE_MAX_HISTORY": "3",
            "GHOST_LINE_IDLE_DELAY": "0",
            "GHOST_LINE_ENABLE_SHORTCUTS": "off",
            "GHOST_LINE_UNDOABLE_JUMPS": "yes",
        }
    )

    assert config.max_history_per_line == 3
    assert config.capture_enabled is False
    assert config.enable_shortcuts is False
    assert config.undoable_jumps is True


@pytest.mark.parametrize(
    "values",
    [
        {"maxHistoryPerLine": 0},
        {"maxHistoryPerLine": "many"},
        {"idleDelay": "soon"},
        {"enableShortcuts": "maybe"},
    ],
)
def test_invalid_values_rejected(values: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        HistoryConfig.from_mapping(values)


def test_with_changes_validates() -> None:
    config = HistoryConfig()

    assert config.with_changes(idle_delay_ms=-5).capture_enabled is False
    with pytest.raises(ValueError):
        config.with_changes(max_history_per_line=-1)
