"""Context registry: the list of context names and the current one."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from tuido.errors import DuplicateContextError, LastContextError
from tuido.models import DEFAULT_CONTEXT
from tuido.store import TaskStore

logger = logging.getLogger(__name__)


class ContextRegistry:
    def __init__(self, names: Optional[Iterable[str]] = None, current: Optional[str] = None):
        self.names: List[str] = sorted({name for name in names or [] if isinstance(name, str) and name})
        if not isinstance(current, str) or not current:
            current = self.names[0] if self.names else DEFAULT_CONTEXT
        self.current: str = current

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)

    def copy(self) -> "ContextRegistry":
        return ContextRegistry(self.names, self.current)

    def add(self, name: str) -> None:
        """Register a new context and make it current."""
        if name in self.names:
            raise DuplicateContextError(name)
        self.names = sorted(self.names + [name])
        self.current = name

    def rename(self, new_name: str, store: TaskStore) -> bool:
        """Rename the current context, carrying its tasks along.

        Returns False when the name is unchanged.
        """
        if new_name == self.current:
            return False
        if new_name in self.names:
            raise DuplicateContextError(new_name, "Context name already exists")
        old_name = self.current
        self.names = sorted([n for n in self.names if n != old_name] + [new_name])
        moved = store.rename_context(old_name, new_name)
        self.current = new_name
        logger.info("renamed context %r to %r (%d tasks)", old_name, new_name, moved)
        return True

    def check_delete(self) -> None:
        if len(self.names) <= 1:
            raise LastContextError()

    def delete(self, store: TaskStore) -> int:
        """Delete the current context and every task in it."""
        self.check_delete()
        name = self.current
        removed = store.delete_context(name)
        if name in self.names:
            self.names.remove(name)
        self.current = self.names[0]
        logger.info("deleted context %r with %d tasks", name, removed)
        return removed

    def synchronize(self, contexts: Iterable[str]) -> None:
        """Rebuild the registry from the task contexts plus the known names."""
        merged = set(self.names)
        merged.update(c for c in contexts if c)
        self.names = sorted(merged)
        if not self.names:
            self.names = [DEFAULT_CONTEXT]
            self.current = DEFAULT_CONTEXT
        elif not self.current or self.current not in self.names:
            self.current = self.names[0]

    def _step(self, offset: int) -> None:
        if not self.names:
            return
        try:
            idx = self.names.index(self.current)
        except ValueError:
            idx = 0
        self.current = self.names[(idx + offset) % len(self.names)]

    def cycle_next(self) -> None:
        self._step(1)

    def cycle_previous(self) -> None:
        self._step(-1)
