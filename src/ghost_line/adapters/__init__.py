"""Host adapters for embedding per-line history in editors."""
