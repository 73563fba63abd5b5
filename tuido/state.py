import copy
from contextlib import contextmanager
from enum import Enum

from tuido.contexts import ContextRegistry
from tuido.errors import ValidationError
from tuido.history import DEFAULT_MAX_HISTORY, UndoHistory
from tuido.keys import normalize_keybinds
from tuido.models import Task, VisualIndex
from tuido.store import TaskStore


class Mode(Enum):
    NORMAL = "normal"
    KANBAN = "kanban"
    STATS = "stats"
    HELP = "help"
    TEXT_INPUT = "text_input"
    DATE_INPUT = "date_input"
    TAG_REMOVAL = "tag_removal"


class InputKind(Enum):
    ADD_TASK = "add_task"
    EDIT_TASK = "edit_task"
    ADD_CONTEXT = "add_context"
    RENAME_CONTEXT = "rename_context"
    ADD_TAG = "add_tag"
    DELETE_CONFIRM = "delete_confirm"


class AppState:
    """Everything the app knows, passed through machine.update() one event at a time."""

    def __init__(self, store=None, contexts=None, keybinds=None, max_history=DEFAULT_MAX_HISTORY):
        self.store = store if store is not None else TaskStore()
        self.contexts = contexts if contexts is not None else ContextRegistry()
        self.contexts.synchronize(self.store.contexts())
        self.history = UndoHistory(max_history)
        self.keybinds = normalize_keybinds(keybinds)
        self.selected_index = VisualIndex(0)

        self.mode = Mode.NORMAL
        self.input_kind = None
        self.input_prompt = ""
        self.input_buffer = ""
        self.date_fields = ["", "", ""]
        self.date_index = 0
        self.remove_tag_index = 0
        self.remove_tag_checks = []
        self.moving_task_id = None
        self.move_recorded = False
        self.kanban_scroll_x = 0
        self.kanban_scroll_y = 0

        self.width = 80
        self.height = 24
        self.error_message = None
        self.dirty = False
        self.running = True

    def clone(self):
        """Copy for a functional update; tasks and registry are copied, history shared read-only."""
        new = copy.copy(self)
        new.store = TaskStore(next_id=self.store.next_id)
        new.store.tasks = self.store.snapshot()
        new.contexts = self.contexts.copy()
        new.history = self.history.copy()
        new.date_fields = list(self.date_fields)
        new.remove_tag_checks = list(self.remove_tag_checks)
        return new

    @property
    def current_context(self):
        return self.contexts.current

    def get_filtered_tasks(self, context=None):
        """Tasks of a context (the current one by default), in master order."""
        return self.store.tasks_for(context or self.contexts.current)

    def current_task(self):
        """Task under the cursor, or an empty Task when there is none."""
        return self.get_filtered_tasks().task_at(self.selected_index)

    def current_task_id(self):
        return self.get_filtered_tasks().id_at(self.selected_index)

    def clamp_cursor(self):
        self.selected_index = self.get_filtered_tasks().clamp(self.selected_index)

    def save_state_for_undo(self):
        """Save current tasks for undo functionality."""
        self.history.snapshot(self.store.tasks)

    @contextmanager
    def checkpoint(self):
        """Snapshot before a mutation; forget the snapshot if it is rejected."""
        self.save_state_for_undo()
        try:
            yield
        except ValidationError:
            self.history.drop_latest()
            raise
        self.dirty = True
        self.move_recorded = False

    @property
    def moving(self):
        """True while a task is picked up; a deleted task drops the flag."""
        return self.moving_task_id is not None and self.store.get(self.moving_task_id) is not None

    def begin_move(self, task_id):
        self.moving_task_id = task_id
        self.move_recorded = False

    def end_move(self):
        self.moving_task_id = None
        self.move_recorded = False

    def undo(self):
        """Restore previous task list."""
        tasks = self.history.pop()
        if tasks is None:
            self.error_message = "Nothing to undo"
            return
        self.store.replace(tasks)
        self.contexts.synchronize(self.store.contexts())
        self.selected_index = VisualIndex(0)
        self.dirty = True
        self.move_recorded = False

    def to_dict(self):
        return {
            "tasks": [t.to_dict() for t in self.store.tasks],
            "contexts": list(self.contexts.names),
            "current_context": self.contexts.current,
            "next_id": self.store.next_id,
        }

    @classmethod
    def from_dict(cls, data, keybinds=None, max_history=DEFAULT_MAX_HISTORY):
        """Build a state from the persisted record (or a legacy bare task list)."""
        if isinstance(data, list):
            data = {"tasks": data}
        raw_tasks = [raw for raw in data.get("tasks") or [] if isinstance(raw, dict)]
        store = TaskStore(next_id=_as_int(data.get("next_id"), 1))
        store.replace(Task.from_dict(raw) for raw in raw_tasks)
        names = data.get("contexts")
        contexts = ContextRegistry(names if isinstance(names, list) else [], data.get("current_context"))
        return cls(store, contexts, keybinds, max_history)


def _as_int(value, default):
    return value if isinstance(value, int) and not isinstance(value, bool) else default
