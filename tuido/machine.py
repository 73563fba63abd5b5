"""Modal key handling.

``update(state, event)`` returns a new AppState and leaves the one it was
given untouched. Key presses are classified into an Action for the
current mode and dispatched through TRANSITIONS; (mode, action) pairs
that are not in the table are ignored.
"""
import datetime as dt
import logging
from dataclasses import dataclass

from tuido import actions
from tuido.errors import LastContextError, NoTagsError
from tuido.keys import Action, action_for, is_printable
from tuido.state import InputKind, Mode

logger = logging.getLogger(__name__)

DATE_FIELD_WIDTHS = (2, 2, 4)  # day, month, year


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


def classify(state, key):
    """Map a key name to the Action it means in the current mode."""
    bound = action_for(state.keybinds, key)
    if state.mode in (Mode.TEXT_INPUT, Mode.DATE_INPUT):
        if bound in (Action.BACK, Action.ENTER):
            return bound
        if key == "BACKSPACE":
            return Action.BACKSPACE
        if state.mode == Mode.TEXT_INPUT:
            return Action.CHAR if is_printable(key) else None
        if key.isdigit():
            return Action.CHAR
        return bound if bound in (Action.UP, Action.DOWN) else None
    return bound


def update(state, event):
    """Apply one input event and return the resulting state."""
    new = state.clone()
    new.dirty = False
    if isinstance(event, Resize):
        new.width, new.height = event.width, event.height
        return new

    new.error_message = None
    action = classify(new, event.key)
    logger.debug("%s: key %r -> %s", new.mode.value, event.key, action)
    handler = TRANSITIONS.get((new.mode, action))
    if handler is not None:
        handler(new, event)
    return new


# -------------------- dialogs --------------------
def _open_text_input(state, kind, prompt, value=""):
    state.mode = Mode.TEXT_INPUT
    state.input_kind = kind
    state.input_prompt = prompt
    state.input_buffer = value


def _back_to_normal(state, event=None):
    state.mode = Mode.NORMAL
    state.input_kind = None
    state.input_prompt = ""
    state.input_buffer = ""


def _has_tasks(state):
    return len(state.get_filtered_tasks()) > 0


# -------------------- normal mode --------------------
def _quit(state, event):
    state.running = False


def _add(state, event):
    _open_text_input(state, InputKind.ADD_TASK, "Add new task:")


def _edit(state, event):
    if _has_tasks(state):
        _open_text_input(state, InputKind.EDIT_TASK, "Edit task:", state.current_task().text)


def _add_context(state, event):
    _open_text_input(state, InputKind.ADD_CONTEXT, "New context name:")


def _rename_context(state, event):
    _open_text_input(state, InputKind.RENAME_CONTEXT, "Rename context to:", state.current_context)


def _delete_context(state, event):
    if len(state.contexts) > 1:
        _open_text_input(state, InputKind.DELETE_CONFIRM,
                         f"Delete context '{state.current_context}'? (y/n):")
    else:
        state.error_message = str(LastContextError())


def _add_tag(state, event):
    if _has_tasks(state):
        _open_text_input(state, InputKind.ADD_TAG, "Add tag:")


def _remove_tag(state, event):
    if not _has_tasks(state):
        return
    tags = state.current_task().tags
    if not tags:
        state.error_message = str(NoTagsError())
        return
    state.mode = Mode.TAG_REMOVAL
    state.remove_tag_index = 0
    state.remove_tag_checks = [False] * len(tags)


def _set_due_date(state, event):
    if not _has_tasks(state):
        return
    today = dt.date.today()
    state.mode = Mode.DATE_INPUT
    state.date_index = 0
    state.date_fields = [f"{today.day:02d}", f"{today.month:02d}", str(today.year)]


def _kanban(state, event):
    state.mode = Mode.KANBAN
    state.kanban_scroll_x = 0
    state.kanban_scroll_y = 0


def _stats(state, event):
    state.mode = Mode.STATS


def _help(state, event):
    state.mode = Mode.HELP


def _toggle_move(state, event):
    if state.moving:
        state.end_move()
    elif _has_tasks(state):
        state.begin_move(state.current_task_id())


def _up(state, event):
    if state.moving:
        actions.move_task_up(state)
    else:
        actions.move_up(state)


def _down(state, event):
    if state.moving:
        actions.move_task_down(state)
    else:
        actions.move_down(state)


# -------------------- text input --------------------
def _type_char(state, event):
    state.input_buffer += event.key


def _erase_char(state, event):
    state.input_buffer = state.input_buffer[:-1]


def _confirm_delete_context(state, answer):
    if answer.lower() == "y":
        actions.delete_context(state)


COMMITS = {
    InputKind.ADD_TASK: actions.add_task,
    InputKind.EDIT_TASK: actions.edit_task,
    InputKind.ADD_CONTEXT: actions.add_context,
    InputKind.RENAME_CONTEXT: actions.rename_context,
    InputKind.ADD_TAG: actions.add_tag,
    InputKind.DELETE_CONFIRM: _confirm_delete_context,
}


def _commit_text(state, event):
    kind = state.input_kind
    text = state.input_buffer.strip()
    _back_to_normal(state)
    if not text:
        return
    COMMITS[kind](state, text)


# -------------------- date input --------------------
def _type_digit(state, event):
    field = state.date_fields[state.date_index]
    if len(field) < DATE_FIELD_WIDTHS[state.date_index]:
        state.date_fields[state.date_index] = field + event.key


def _erase_digit(state, event):
    state.date_fields[state.date_index] = state.date_fields[state.date_index][:-1]


def _previous_date_field(state, event):
    state.date_index = (state.date_index - 1) % len(state.date_fields)


def _next_date_field(state, event):
    state.date_index = (state.date_index + 1) % len(state.date_fields)


def _commit_date(state, event):
    day, month, year = (f.strip() for f in state.date_fields)
    _back_to_normal(state)
    if not (day or month or year):
        return
    actions.set_due_date(state, f"{year}-{month.zfill(2)}-{day.zfill(2)}")


# -------------------- tag removal --------------------
def _tag_up(state, event):
    if state.remove_tag_index > 0:
        state.remove_tag_index -= 1


def _tag_down(state, event):
    if state.remove_tag_index < len(state.remove_tag_checks) - 1:
        state.remove_tag_index += 1


def _tag_toggle(state, event):
    if 0 <= state.remove_tag_index < len(state.remove_tag_checks):
        state.remove_tag_checks[state.remove_tag_index] = not state.remove_tag_checks[state.remove_tag_index]


def _commit_tag_removal(state, event):
    marked = [i for i, checked in enumerate(state.remove_tag_checks) if checked]
    _back_to_normal(state)
    state.remove_tag_checks = []
    if marked:
        actions.remove_tags(state, marked)


# -------------------- kanban / stats / help --------------------
def _leave_kanban(state, event):
    state.kanban_scroll_x = 0
    state.kanban_scroll_y = 0
    _back_to_normal(state)


def _kanban_scroll(dx, dy):
    def scroll(state, event):
        state.kanban_scroll_x = min(max(state.kanban_scroll_x + dx, 0), max(len(state.contexts) - 1, 0))
        state.kanban_scroll_y = max(state.kanban_scroll_y + dy, 0)
    return scroll


def _plain(fn):
    """Adapt an actions.* function to the handler signature."""
    def handler(state, event):
        fn(state)
    return handler


TRANSITIONS = {
    (Mode.NORMAL, Action.QUIT): _quit,
    (Mode.NORMAL, Action.UP): _up,
    (Mode.NORMAL, Action.DOWN): _down,
    (Mode.NORMAL, Action.LEFT): _plain(actions.previous_context),
    (Mode.NORMAL, Action.RIGHT): _plain(actions.next_context),
    (Mode.NORMAL, Action.TOGGLE): _plain(actions.toggle_check),
    (Mode.NORMAL, Action.ADD): _add,
    (Mode.NORMAL, Action.EDIT): _edit,
    (Mode.NORMAL, Action.DELETE): _plain(actions.delete_task),
    (Mode.NORMAL, Action.ADD_CONTEXT): _add_context,
    (Mode.NORMAL, Action.RENAME_CONTEXT): _rename_context,
    (Mode.NORMAL, Action.DELETE_CONTEXT): _delete_context,
    (Mode.NORMAL, Action.PRIORITY): _plain(actions.toggle_priority),
    (Mode.NORMAL, Action.ADD_TAG): _add_tag,
    (Mode.NORMAL, Action.REMOVE_TAG): _remove_tag,
    (Mode.NORMAL, Action.SET_DUE_DATE): _set_due_date,
    (Mode.NORMAL, Action.CLEAR_DUE_DATE): _plain(actions.clear_due_date),
    (Mode.NORMAL, Action.KANBAN): _kanban,
    (Mode.NORMAL, Action.STATS): _stats,
    (Mode.NORMAL, Action.HELP): _help,
    (Mode.NORMAL, Action.UNDO): _plain(actions.undo),
    (Mode.NORMAL, Action.MOVE): _toggle_move,

    (Mode.TEXT_INPUT, Action.CHAR): _type_char,
    (Mode.TEXT_INPUT, Action.BACKSPACE): _erase_char,
    (Mode.TEXT_INPUT, Action.ENTER): _commit_text,
    (Mode.TEXT_INPUT, Action.BACK): _back_to_normal,

    (Mode.DATE_INPUT, Action.CHAR): _type_digit,
    (Mode.DATE_INPUT, Action.BACKSPACE): _erase_digit,
    (Mode.DATE_INPUT, Action.UP): _previous_date_field,
    (Mode.DATE_INPUT, Action.DOWN): _next_date_field,
    (Mode.DATE_INPUT, Action.ENTER): _commit_date,
    (Mode.DATE_INPUT, Action.BACK): _back_to_normal,

    (Mode.TAG_REMOVAL, Action.UP): _tag_up,
    (Mode.TAG_REMOVAL, Action.DOWN): _tag_down,
    (Mode.TAG_REMOVAL, Action.TOGGLE): _tag_toggle,
    (Mode.TAG_REMOVAL, Action.ENTER): _commit_tag_removal,
    (Mode.TAG_REMOVAL, Action.BACK): _back_to_normal,

    (Mode.KANBAN, Action.UP): _kanban_scroll(0, -1),
    (Mode.KANBAN, Action.DOWN): _kanban_scroll(0, 1),
    (Mode.KANBAN, Action.LEFT): _kanban_scroll(-1, 0),
    (Mode.KANBAN, Action.RIGHT): _kanban_scroll(1, 0),
    (Mode.KANBAN, Action.KANBAN): _leave_kanban,
    (Mode.KANBAN, Action.BACK): _leave_kanban,
    (Mode.KANBAN, Action.QUIT): _leave_kanban,

    (Mode.STATS, Action.STATS): _back_to_normal,
    (Mode.STATS, Action.BACK): _back_to_normal,
    (Mode.STATS, Action.QUIT): _back_to_normal,

    (Mode.HELP, Action.HELP): _back_to_normal,
    (Mode.HELP, Action.BACK): _back_to_normal,
    (Mode.HELP, Action.QUIT): _back_to_normal,
}
