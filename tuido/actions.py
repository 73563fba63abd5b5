"""Operations on the selected task and the current context.

Every action that touches a task resolves the cursor to a TaskId from the
current filtered view first, then mutates through the TaskStore.
"""
import logging

from tuido.errors import ValidationError
from tuido.models import VisualIndex
from tuido.store import CLEAR_DATE, DOWN, UP

logger = logging.getLogger(__name__)


def _reject(app, err):
    logger.debug("rejected: %s", err)
    app.error_message = str(err)


def toggle_check(app):
    """Toggle checked status of the selected task."""
    task_id = app.current_task_id()
    if task_id is None:
        return
    with app.checkpoint():
        app.store.toggle_checked(task_id)


def next_context(app):
    """Switch to the next context."""
    app.contexts.cycle_next()
    app.selected_index = VisualIndex(0)


def previous_context(app):
    """Switch to the previous context."""
    app.contexts.cycle_previous()
    app.selected_index = VisualIndex(0)


def move_down(app):
    """Move selection down, wrapping to the top."""
    count = len(app.get_filtered_tasks())
    if count:
        app.selected_index = VisualIndex((app.selected_index + 1) % count)


def move_up(app):
    """Move selection up, wrapping to the bottom."""
    count = len(app.get_filtered_tasks())
    if count:
        app.selected_index = VisualIndex((app.selected_index - 1) % count)


def _move_task(app, direction):
    """Swap the picked-up task with its neighbour in the current view.

    A run of swaps is one undo step: the snapshot is taken before the first
    swap and again only after some other change or an undo.
    """
    view = app.get_filtered_tasks()
    position = view.position_of(app.moving_task_id)
    if position is None or not 0 <= position + direction < len(view):
        return
    if not app.move_recorded:
        app.save_state_for_undo()
        app.move_recorded = True
    app.selected_index = app.store.swap_adjacent(view, position, direction)
    app.dirty = True


def move_task_up(app):
    """Swap the task being moved with the one above it."""
    _move_task(app, UP)


def move_task_down(app):
    """Swap the task being moved with the one below it."""
    _move_task(app, DOWN)


def edit_task(app, new_text):
    """Replace the text of the selected task."""
    task_id = app.current_task_id()
    if task_id is None or not new_text:
        return
    with app.checkpoint():
        app.store.edit(task_id, new_text)


def add_task(app, text):
    """Add a new task to the current context and select it."""
    if not text:
        return
    with app.checkpoint():
        app.store.add(text, app.current_context)
    app.selected_index = VisualIndex(len(app.get_filtered_tasks()) - 1)


def add_context(app, name):
    """Add a new context and switch to it."""
    if not name:
        return
    try:
        app.contexts.add(name)
    except ValidationError as err:
        _reject(app, err)
        return
    app.selected_index = VisualIndex(0)
    app.dirty = True


def delete_task(app):
    """Delete the currently selected task."""
    task_id = app.current_task_id()
    if task_id is None:
        return
    with app.checkpoint():
        app.store.delete(task_id)
    app.clamp_cursor()


def delete_context(app):
    """Delete the current context and all its tasks."""
    try:
        with app.checkpoint():
            app.contexts.delete(app.store)
    except ValidationError as err:
        _reject(app, err)
        return
    app.selected_index = VisualIndex(0)


def rename_context(app, new_name):
    """Rename the current context."""
    if not new_name or new_name == app.current_context:
        return
    try:
        with app.checkpoint():
            app.contexts.rename(new_name, app.store)
    except ValidationError as err:
        _reject(app, err)


def add_tag(app, tag):
    """Add a tag to the selected task."""
    task_id = app.current_task_id()
    if task_id is None or not tag:
        return
    with app.checkpoint():
        app.store.add_tag(task_id, tag)


def remove_tags(app, marked):
    """Remove the tags at the marked positions from the selected task."""
    task_id = app.current_task_id()
    if task_id is None:
        return
    with app.checkpoint():
        app.store.remove_tags(task_id, marked)


def set_due_date(app, date_str):
    """Set (or with 'clear', remove) the due date of the selected task."""
    task_id = app.current_task_id()
    if task_id is None or not date_str:
        return
    try:
        with app.checkpoint():
            app.store.set_due_date(task_id, date_str)
    except ValidationError as err:
        _reject(app, err)


def clear_due_date(app):
    set_due_date(app, CLEAR_DATE)


def toggle_priority(app):
    """Cycle through priority levels (none, low, medium, high)."""
    task_id = app.current_task_id()
    if task_id is None:
        return
    with app.checkpoint():
        app.store.cycle_priority(task_id)


def undo(app):
    app.undo()
