"""Logical actions and the key-name -> action lookup."""
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Action(Enum):
    UP = "move_up"
    DOWN = "move_down"
    LEFT = "previous_context"
    RIGHT = "next_context"
    TOGGLE = "toggle"
    ADD = "add_task"
    EDIT = "edit"
    DELETE = "delete_task"
    ADD_CONTEXT = "add_context"
    RENAME_CONTEXT = "rename_context"
    DELETE_CONTEXT = "delete_context"
    PRIORITY = "toggle_priority"
    ADD_TAG = "add_tag"
    REMOVE_TAG = "remove_tag"
    SET_DUE_DATE = "set_due_date"
    CLEAR_DUE_DATE = "clear_due_date"
    KANBAN = "kanban_view"
    STATS = "show_stats"
    HELP = "help"
    UNDO = "undo"
    MOVE = "move"
    QUIT = "quit"
    BACK = "back"
    ENTER = "enter"
    # Not bindable: produced for typed text inside input dialogs.
    CHAR = "char"
    BACKSPACE = "backspace"


DEFAULT_KEYBINDS = {
    "move_up": ["KEY_UP", "k"],
    "move_down": ["KEY_DOWN", "j"],
    "previous_context": ["KEY_LEFT", "h"],
    "next_context": ["KEY_RIGHT", "l"],
    "toggle": [" "],
    "add_task": ["a"],
    "edit": ["e"],
    "delete_task": ["d"],
    "add_context": ["n"],
    "rename_context": ["r"],
    "delete_context": ["D"],
    "toggle_priority": ["p"],
    "add_tag": ["t"],
    "remove_tag": ["T"],
    "set_due_date": ["u"],
    "clear_due_date": ["U"],
    "kanban_view": ["v"],
    "show_stats": ["s"],
    "help": ["?"],
    "undo": ["z"],
    "move": ["m"],
    "quit": ["q", "CTRL_C"],
    "back": ["ESC"],
    "enter": ["ENTER"],
}


def normalize_keybinds(keybinds):
    """Fill in missing actions and turn single-key strings into lists."""
    merged = {action: list(keys) for action, keys in DEFAULT_KEYBINDS.items()}
    for action, keys in (keybinds or {}).items():
        if action not in merged:
            continue
        if isinstance(keys, str):
            keys = [keys]
        elif not isinstance(keys, list):
            logger.warning("Ignoring keybind %r: expected a key or a list of keys, got %r", action, keys)
            continue
        keys = [k for k in keys if isinstance(k, str) and k]
        if keys:
            merged[action] = keys
    return merged


def action_for(keybinds, key):
    """Return the Action bound to a key name, or None."""
    for name, keys in keybinds.items():
        if key in keys:
            try:
                return Action(name)
            except ValueError:
                continue
    return None


def is_printable(key):
    return len(key) == 1 and key.isprintable()


def format_key(key):
    """Format a key name for display."""
    return {
        "KEY_UP": "↑", "KEY_DOWN": "↓", "KEY_LEFT": "←", "KEY_RIGHT": "→",
        " ": "SPACE", "CTRL_C": "^C",
    }.get(key, key)
