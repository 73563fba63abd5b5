"""The master task list and every mutation of it.

Tasks are addressed by TaskId. An id that is no longer present is
ignored: the methods return None/False instead of raising.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from tuido.errors import InvalidDateError
from tuido.models import Priority, Task, TaskId, VisualIndex
from tuido.view import FilteredView

logger = logging.getLogger(__name__)

CLEAR_DATE = "clear"
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

UP = -1
DOWN = 1


def parse_due_date(value: str) -> Optional[str]:
    """Validate a due date string.

    Returns the date unchanged, or None for the "clear" sentinel.
    Raises InvalidDateError for anything that is not a real YYYY-MM-DD date.
    """
    if value.strip().lower() == CLEAR_DATE:
        return None
    if not DATE_RE.match(value):
        raise InvalidDateError(value)
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise InvalidDateError(value) from None
    return value


class TaskStore:
    def __init__(self, tasks: Optional[Iterable[Task]] = None, next_id: int = 1):
        self.tasks: List[Task] = []
        self.next_id: int = max(next_id, 1)
        if tasks:
            self.replace(tasks)

    # -------------------- id management --------------------
    def _allocate_id(self) -> TaskId:
        tid = TaskId(self.next_id)
        self.next_id += 1
        return tid

    def index_of(self, task_id: TaskId) -> int:
        """Position of a task in the master list, -1 when absent."""
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return -1

    def get(self, task_id: TaskId) -> Optional[Task]:
        idx = self.index_of(task_id)
        return self.tasks[idx] if idx != -1 else None

    # -------------------- queries --------------------
    def tasks_for(self, context: str) -> FilteredView:
        return FilteredView.of(self.tasks, context)

    def contexts(self) -> List[str]:
        return [t.context for t in self.tasks]

    def snapshot(self) -> List[Task]:
        """Deep copy of the master list."""
        return [t.copy() for t in self.tasks]

    def replace(self, tasks: Iterable[Task]) -> None:
        """Swap in a new master list (load or undo), keeping ids unique."""
        fresh = [t.copy() for t in tasks]
        if fresh:
            self.next_id = max(self.next_id, max(t.id for t in fresh) + 1)
        seen = set()
        for task in fresh:
            if task.id <= 0 or task.id in seen:
                task.id = self._allocate_id()
            seen.add(task.id)
        self.tasks = fresh

    # -------------------- task operations --------------------
    def add(self, text: str, context: str) -> Optional[Task]:
        text = text.strip()
        if not text:
            return None
        task = Task(id=self._allocate_id(), text=text, context=context)
        self.tasks.append(task)
        logger.debug("added task %d to %r", task.id, context)
        return task

    def edit(self, task_id: TaskId, new_text: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        task.text = new_text
        return True

    def toggle_checked(self, task_id: TaskId) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        task.checked = not task.checked
        return True

    def cycle_priority(self, task_id: TaskId) -> Optional[Priority]:
        task = self.get(task_id)
        if task is None:
            return None
        priority = Priority.cycle(task.priority)
        task.priority = priority.value
        return priority

    def set_due_date(self, task_id: TaskId, value: str) -> bool:
        """Set or clear the due date; validation happens before any change."""
        task = self.get(task_id)
        if task is None or not value.strip():
            return False
        task.due_date = parse_due_date(value)
        return True

    def add_tag(self, task_id: TaskId, tag: str) -> bool:
        task = self.get(task_id)
        if task is None or tag in task.tags:
            return False
        task.tags.append(tag)
        return True

    def remove_tags(self, task_id: TaskId, marked: Sequence[int]) -> bool:
        """Drop the tags at the marked positions, keeping the rest in order."""
        task = self.get(task_id)
        if task is None:
            return False
        drop = set(marked)
        task.tags = [tag for i, tag in enumerate(task.tags) if i not in drop]
        return True

    def delete(self, task_id: TaskId) -> bool:
        idx = self.index_of(task_id)
        if idx == -1:
            return False
        del self.tasks[idx]
        logger.debug("deleted task %d", task_id)
        return True

    # -------------------- context-wide operations --------------------
    def delete_context(self, context: str) -> int:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.context != context]
        return before - len(self.tasks)

    def rename_context(self, old: str, new: str) -> int:
        changed = 0
        for task in self.tasks:
            if task.context == old:
                task.context = new
                changed += 1
        return changed

    # -------------------- reordering --------------------
    def swap_adjacent(self, view: FilteredView, index: VisualIndex, direction: int) -> Optional[VisualIndex]:
        """Swap the task at a visual row with its neighbour in the master list.

        ``direction`` is UP or DOWN. Returns the row the task ends up on, or
        None when there is no neighbour in that direction.
        """
        target = VisualIndex(index + direction)
        if not (0 <= index < len(view)) or not (0 <= target < len(view)):
            return None
        idx_move = self.index_of(view.id_at(index))
        idx_swap = self.index_of(view.id_at(target))
        if idx_move == -1 or idx_swap == -1:
            return None
        self.tasks[idx_move], self.tasks[idx_swap] = self.tasks[idx_swap], self.tasks[idx_move]
        return target
