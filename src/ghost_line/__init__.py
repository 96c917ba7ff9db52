"""Per-line undo/redo history for text editors."""

__all__ = [
    "adapters",
    "commands",
    "history",
    "runtime",
    "session",
]

__version__ = "0.1.0"
