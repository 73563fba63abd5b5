"""Data model for tuido tasks.

Tasks are identified by ``TaskId``; positions inside a filtered context
listing are ``VisualIndex``. The two are deliberately different types so
that a row number from the screen is never handed to an operation that
expects a task identity.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, NewType, Optional

TaskId = NewType("TaskId", int)
VisualIndex = NewType("VisualIndex", int)

DEFAULT_CONTEXT = "Work"


class Priority(str, Enum):
    NONE = ""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def cycle(cls, value: Optional[str]) -> "Priority":
        """Return the priority after ``value``; unknown values count as NONE."""
        order = list(cls)
        try:
            current = cls(value or "")
        except ValueError:
            current = cls.NONE
        return order[(order.index(current) + 1) % len(order)]


@dataclass
class Task:
    """A single todo item.

    Fields:
        id: Unique, never reused within a session. 0 means "no task".
        text: Task description as typed by the user.
        checked: Completion flag.
        context: Name of the context the task belongs to.
        priority: One of the Priority values ("" for none).
        tags: Ordered tags, no duplicates.
        due_date: ISO ``YYYY-MM-DD`` string, or None.
    """
    id: TaskId = TaskId(0)
    text: str = ""
    checked: bool = False
    context: str = ""
    priority: str = Priority.NONE.value
    tags: List[str] = field(default_factory=list)
    due_date: Optional[str] = None

    def copy(self) -> "Task":
        """Return an independent copy (tags included)."""
        return replace(self, tags=list(self.tags))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "task": self.text,
            "checked": self.checked,
            "context": self.context,
        }
        if self.priority:
            data["priority"] = self.priority
        if self.tags:
            data["tags"] = list(self.tags)
        if self.due_date:
            data["due_date"] = self.due_date
        return data

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], default_id: int = 0) -> "Task":
        tid = raw.get("id")
        tags: List[str] = []
        for tag in raw.get("tags") or []:
            tag = str(tag)
            if tag not in tags:
                tags.append(tag)
        return cls(
            id=TaskId(tid if isinstance(tid, int) and tid > 0 else default_id),
            text=str(raw.get("task", "")),
            checked=bool(raw.get("checked", False)),
            context=str(raw.get("context") or DEFAULT_CONTEXT),
            priority=str(raw.get("priority") or ""),
            tags=tags,
            due_date=raw.get("due_date") or None,
        )

    def __bool__(self) -> bool:
        return self.id != 0
