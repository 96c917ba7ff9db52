"""Per-line history engine: stacks, remapping, capture policy and restore."""

from .changes import LineChange, remap_line, touched_lines
from .document import DocumentLines, split_lines
from .guard import WriteGuard
from .line import Direction, LineHistory, opposite
from .policy import CommitOutcome, SnapshotPolicy
from .restore import RestoreEngine, RestoreResult
from .store import DocumentId, HistoryStore

__all__ = [
    "CommitOutcome",
    "Direction",
    "DocumentId",
    "DocumentLines",
    "HistoryStore",
    "LineChange",
    "LineHistory",
    "RestoreEngine",
    "RestoreResult",
    "SnapshotPolicy",
    "WriteGuard",
    "opposite",
    "remap_line",
    "split_lines",
    "touched_lines",
]
