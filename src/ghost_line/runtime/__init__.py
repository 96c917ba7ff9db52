"""Runtime services: telemetry and configuration."""

from . import telemetry
from .settings import HistoryConfig

__all__ = ["HistoryConfig", "telemetry"]
