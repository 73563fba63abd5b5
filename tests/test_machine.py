"""
Tests for the modal key handling, driven through update() without curses.
"""
import datetime as dt

import pytest

from conftest import make_task
from tuido.contexts import ContextRegistry
from tuido.keys import Action
from tuido.machine import TRANSITIONS, KeyPress, Resize, update
from tuido.state import AppState, Mode
from tuido.store import TaskStore


def press(state, *keys):
    for key in keys:
        state = update(state, KeyPress(key))
    return state


def type_text(state, text):
    return press(state, *list(text))


def work_ids(state):
    return [t.id for t in state.get_filtered_tasks("Work")]


def dump(state):
    return [t.to_dict() for t in state.store.tasks]


def test_update_does_not_touch_the_input_state(state):
    new = press(state, "d")
    assert len(state.store.tasks) == 5
    assert len(new.store.tasks) == 4
    assert len(state.history) == 0


def test_add_task_through_dialog(state):
    state = press(state, "a")
    assert state.mode == Mode.TEXT_INPUT
    state = type_text(state, "  plan trip ")
    state = press(state, "ENTER")
    assert state.mode == Mode.NORMAL
    assert state.store.tasks[-1].text == "plan trip"
    assert state.store.tasks[-1].context == "Work"
    assert state.current_task().text == "plan trip"
    assert len(state.history) == 1
    assert state.dirty


def test_blank_input_is_a_cancel(state):
    state = press(state, "a", " ", " ", "ENTER")
    assert state.mode == Mode.NORMAL
    assert len(state.store.tasks) == 5
    assert len(state.history) == 0
    assert not state.dirty


def test_back_discards_input(state):
    state = press(state, "a", "x", "y", "ESC")
    assert state.mode == Mode.NORMAL
    assert state.input_buffer == ""
    assert len(state.store.tasks) == 5


def test_text_input_treats_bound_letters_as_text(state):
    state = press(state, "a")
    state = type_text(state, "quick jam")
    state = press(state, "BACKSPACE", "KEY_UP", "ENTER")
    assert state.store.tasks[-1].text == "quick ja"
    assert state.running


@pytest.mark.parametrize("keys", [
    [" "],
    ["d"],
    ["p"],
    ["U"],
    ["u", "ENTER"],
    ["e", "BACKSPACE", "x", "ENTER"],
    ["t", "x", "ENTER"],
    ["a", "x", "ENTER"],
    ["r", "2", "ENTER"],
    ["D", "y", "ENTER"],
    ["m", "KEY_DOWN", "m"],
    ["T", " ", "ENTER"],
])
def test_undo_restores_tasks(state, keys):
    state.store.get(1).due_date = "2024-01-01"
    state.store.get(1).tags = ["home", "urgent"]
    before = dump(state)
    changed = press(state, *keys)
    assert dump(changed) != before
    restored = press(changed, "z")
    assert dump(restored) == before
    assert restored.selected_index == 0
    assert restored.current_context in restored.contexts


def test_undo_with_empty_history(state):
    state = press(state, "z")
    assert state.error_message == "Nothing to undo"
    assert len(state.store.tasks) == 5


def test_message_clears_on_next_key(state):
    state = press(state, "z")
    state = press(state, "j")
    assert state.error_message is None


def test_navigation_never_snapshots(state):
    state = press(state, "j", "k", "KEY_RIGHT", "h", "v", "ESC", "s", "ESC", "?", "ESC")
    assert len(state.history) == 0
    assert not state.dirty


def test_cursor_wraps(state):
    state = press(state, "k")
    assert state.selected_index == 2
    state = press(state, "j")
    assert state.selected_index == 0


def test_context_switch_resets_cursor(state):
    state = press(state, "j", "j", "l")
    assert state.current_context == "Personal"
    assert state.selected_index == 0


def test_delete_clamps_cursor(state):
    state = press(state, "j", "j", "d")
    assert work_ids(state) == [1, 3]
    assert state.selected_index == 1


def test_reorder_survives_context_switch(state):
    state = press(state, "j", "m")
    assert state.moving
    assert state.mode == Mode.NORMAL
    assert state.moving_task_id == 3
    state = press(state, "KEY_UP", "m")
    assert not state.moving
    assert work_ids(state) == [3, 1, 5]
    assert state.selected_index == 0
    state = press(state, "l", "h")
    assert work_ids(state) == [3, 1, 5]
    assert len(state.history) == 1


def test_a_run_of_swaps_is_one_undo_step(state):
    state = press(state, "m", "j", "j", "m")
    assert work_ids(state) == [3, 5, 1]
    assert len(state.history) == 1
    state = press(state, "z")
    assert work_ids(state) == [1, 3, 5]


def test_moving_past_the_edge_records_nothing(state):
    state = press(state, "m", "KEY_UP", "m")
    assert work_ids(state) == [1, 3, 5]
    assert len(state.history) == 0
    assert not state.dirty


def test_other_keys_work_while_moving(state):
    state = press(state, "m", "l")
    assert state.current_context == "Personal"
    assert state.moving
    state = press(state, "j")
    assert state.selected_index == 0
    assert [t.id for t in state.get_filtered_tasks()] == [2, 4]


def test_undo_works_while_moving(state):
    state = press(state, " ", "m", "z")
    assert state.store.get(1).checked is False
    assert state.moving


def test_swaps_after_another_change_get_their_own_undo_step(state):
    state = press(state, "m", "j", " ", "k")
    assert work_ids(state) == [1, 3, 5]
    assert state.store.get(1).checked
    assert len(state.history) == 3
    state = press(state, "z")
    assert work_ids(state) == [3, 1, 5]
    assert state.store.get(1).checked


def test_deleting_the_picked_up_task_drops_it(state):
    state = press(state, "m", "d")
    assert not state.moving
    state = press(state, "j")
    assert work_ids(state) == [3, 5]
    assert state.selected_index == 1


def test_empty_view_is_safe(state):
    state = press(state, "n")
    state = type_text(state, "Empty")
    state = press(state, "ENTER")
    assert state.current_context == "Empty"
    assert not state.current_task()
    state = press(state, "j", "k", " ", "d", "p", "m", "e", "t", "T", "u", "U")
    assert state.mode == Mode.NORMAL
    assert len(state.history) == 0
    assert len(state.store.tasks) == 5


def test_add_duplicate_context(state):
    state = press(state, "n")
    state = type_text(state, "Work")
    state = press(state, "ENTER")
    assert state.error_message == "Context already exists"
    assert state.contexts.names == ["Personal", "Work"]


def test_rename_collision_is_rejected_without_snapshot(state):
    state = press(state, "r", "BACKSPACE", "BACKSPACE", "BACKSPACE", "BACKSPACE")
    state = type_text(state, "Personal")
    state = press(state, "ENTER")
    assert state.error_message == "Context name already exists"
    assert len(state.history) == 0
    assert work_ids(state) == [1, 3, 5]


def test_delete_context_needs_confirmation(state):
    state = press(state, "D", "n", "ENTER")
    assert len(state.store.tasks) == 5
    state = press(state, "D", "Y", "ENTER")
    assert [t.id for t in state.store.tasks] == [2, 4]
    assert state.current_context == "Personal"
    assert state.selected_index == 0


def test_cannot_delete_only_context():
    state = AppState(TaskStore([make_task(1, "a")]), ContextRegistry(["Work"], "Work"))
    state = press(state, "D")
    assert state.mode == Mode.NORMAL
    assert state.error_message == "Cannot delete the only context"


def test_due_date_dialog_sets_date(state):
    state = press(state, "u")
    today = dt.date.today()
    assert state.date_fields == [f"{today.day:02d}", f"{today.month:02d}", str(today.year)]
    state = press(state, "BACKSPACE", "BACKSPACE", "0", "5", "j",
                  "BACKSPACE", "BACKSPACE", "3", "j",
                  "BACKSPACE", "BACKSPACE", "BACKSPACE", "BACKSPACE", "2", "0", "2", "4", "ENTER")
    assert state.mode == Mode.NORMAL
    assert state.current_task().due_date == "2024-03-05"


def test_invalid_due_date_is_reported(state):
    state = press(state, "u", "BACKSPACE", "BACKSPACE", "4", "0", "ENTER")
    assert state.error_message == "Invalid date format. Use YYYY-MM-DD"
    assert state.current_task().due_date is None
    assert len(state.history) == 0


def test_clear_due_date_key(state):
    state.store.get(1).due_date = "2024-01-01"
    state = press(state, "U")
    assert state.current_task().due_date is None


def test_tag_removal_dialog():
    store = TaskStore([make_task(1, "tagged", tags=["a", "b", "c"])])
    state = AppState(store, ContextRegistry(["Work"], "Work"))
    state = press(state, "T", " ", "j", "j", " ", "ENTER")
    assert state.mode == Mode.NORMAL
    assert state.current_task().tags == ["b"]
    assert len(state.history) == 1


def test_tag_removal_without_tags(state):
    state = press(state, "T")
    assert state.mode == Mode.NORMAL
    assert state.error_message == "No tags to remove"


def test_add_tag_is_idempotent(state):
    state = press(state, "t", "x", "ENTER", "t", "x", "ENTER")
    assert state.current_task().tags == ["x"]


def test_kanban_scroll_resets(state):
    state = press(state, "v")
    assert state.mode == Mode.KANBAN
    state = press(state, "l", "l", "j")
    assert state.kanban_scroll_x == 1
    assert state.kanban_scroll_y == 1
    state = press(state, "v")
    assert state.mode == Mode.NORMAL
    assert (state.kanban_scroll_x, state.kanban_scroll_y) == (0, 0)


@pytest.mark.parametrize("view_key", ["v", "s", "?"])
def test_quit_from_views_returns_to_normal(state, view_key):
    state = press(state, view_key, "q")
    assert state.mode == Mode.NORMAL
    assert state.running


def test_quit(state):
    assert not press(state, "q").running
    assert not press(state, "CTRL_C").running


def test_resize_only_changes_layout(state):
    state = press(state, "z")
    resized = update(state, Resize(120, 40))
    assert (resized.width, resized.height) == (120, 40)
    assert dump(resized) == dump(state)
    assert resized.error_message == "Nothing to undo"


def test_bounded_history():
    state = AppState(TaskStore([make_task(1, "a")]), max_history=3)
    state = press(state, " ", " ", " ", " ", " ")
    assert len(state.history) == 3
    assert [snap[0].checked for snap in state.history.snapshots] == [False, True, False]


def test_every_modal_mode_has_a_way_back():
    for mode in (Mode.TEXT_INPUT, Mode.DATE_INPUT, Mode.TAG_REMOVAL,
                 Mode.KANBAN, Mode.STATS, Mode.HELP):
        assert (mode, Action.BACK) in TRANSITIONS
