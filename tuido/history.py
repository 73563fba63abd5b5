"""Bounded undo history of master task list snapshots."""
from __future__ import annotations

from typing import List, Optional, Sequence

from tuido.models import Task

DEFAULT_MAX_HISTORY = 50


class UndoHistory:
    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY, snapshots: Optional[Sequence[List[Task]]] = None):
        if max_history < 1:
            raise ValueError("max_history must be at least 1")
        self.max_history = max_history
        self.snapshots: List[List[Task]] = list(snapshots or [])

    def __len__(self) -> int:
        return len(self.snapshots)

    def copy(self) -> "UndoHistory":
        # Snapshots are never mutated once stored, so the outer list is enough.
        return UndoHistory(self.max_history, self.snapshots)

    def snapshot(self, tasks: Sequence[Task]) -> None:
        """Save a deep copy of ``tasks``, evicting the oldest entry when full."""
        self.snapshots.append([t.copy() for t in tasks])
        if len(self.snapshots) > self.max_history:
            self.snapshots.pop(0)

    def pop(self) -> Optional[List[Task]]:
        """Remove and return a copy of the most recent snapshot."""
        if not self.snapshots:
            return None
        return [t.copy() for t in self.snapshots.pop()]

    def drop_latest(self) -> None:
        if self.snapshots:
            self.snapshots.pop()
