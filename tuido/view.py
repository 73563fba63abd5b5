"""Filtered, per-context projection of the master task list.

A FilteredView is rebuilt from the master list whenever it is needed and
is never written back. Anything that acts on a task resolves the visual
row to a TaskId first and then goes through the TaskStore.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from tuido.models import Task, TaskId, VisualIndex


class FilteredView:
    def __init__(self, tasks: Sequence[Task], context: str):
        self.context = context
        self._tasks: List[Task] = [t for t in tasks if t.context == context]

    @classmethod
    def of(cls, tasks: Sequence[Task], context: str) -> "FilteredView":
        return cls(tasks, context)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    def __bool__(self) -> bool:
        return bool(self._tasks)

    def task_at(self, index: VisualIndex) -> Task:
        """Task at a visual row, or an empty Task when the row is out of range."""
        if 0 <= index < len(self._tasks):
            return self._tasks[index]
        return Task()

    def id_at(self, index: VisualIndex) -> Optional[TaskId]:
        """Resolve a visual row to the identity of the task shown there."""
        task = self.task_at(index)
        return task.id if task else None

    def position_of(self, task_id: TaskId) -> Optional[VisualIndex]:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return VisualIndex(i)
        return None

    def clamp(self, cursor: int) -> VisualIndex:
        """Keep a cursor inside the view (0 for an empty view)."""
        if not self._tasks:
            return VisualIndex(0)
        if cursor >= len(self._tasks):
            return VisualIndex(len(self._tasks) - 1)
        return VisualIndex(max(cursor, 0))
