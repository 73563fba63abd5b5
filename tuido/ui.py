import curses

from tuido.keys import format_key
from tuido.state import Mode

PRIORITY_INDICATORS = {"high": "!!! ", "medium": "!! ", "low": "! "}
KANBAN_COL_WIDTH = 35


def get_key_str(key):
    """Convert a keycode to a string representation."""
    key_map = {
        curses.KEY_RIGHT: "KEY_RIGHT",
        curses.KEY_LEFT: "KEY_LEFT",
        curses.KEY_DOWN: "KEY_DOWN",
        curses.KEY_UP: "KEY_UP",
        curses.KEY_ENTER: "ENTER",
        curses.KEY_BACKSPACE: "BACKSPACE",
        3: "CTRL_C",
        8: "BACKSPACE",
        10: "ENTER",
        13: "ENTER",
        27: "ESC",
        127: "BACKSPACE",
    }

    if key in key_map:
        return key_map[key]
    elif 32 <= key <= 126:  # Printable ASCII
        return chr(key)
    else:
        return f"KEY_{key}"


def init_colors():
    if curses.has_colors():
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(1, curses.COLOR_GREEN, -1)   # completed tasks
        curses.init_pair(2, curses.COLOR_RED, -1)     # high priority / errors
        curses.init_pair(3, curses.COLOR_YELLOW, -1)  # medium / low priority
        curses.init_pair(4, curses.COLOR_BLUE, -1)    # context headers


def _color(n):
    return curses.color_pair(n) if curses.has_colors() else 0


def _put(stdscr, y, x, text, attr=0):
    """addstr clipped to the window, never touching the last column."""
    height, width = stdscr.getmaxyx()
    if y < 0 or y >= height or x < 0 or x >= width - 1:
        return
    text = text[: width - 1 - x]
    if text:
        stdscr.addstr(y, x, text, attr)


def draw(app, stdscr):
    """Draw the appropriate UI based on the current mode."""
    stdscr.erase()
    height, width = stdscr.getmaxyx()

    if app.mode == Mode.NORMAL:
        _draw_normal_ui(app, stdscr, height, width)
    elif app.mode == Mode.TEXT_INPUT:
        _draw_normal_ui(app, stdscr, height, width)
        _draw_text_input(app, stdscr, height, width)
    elif app.mode == Mode.DATE_INPUT:
        _draw_date_input(app, stdscr)
    elif app.mode == Mode.TAG_REMOVAL:
        _draw_tag_removal(app, stdscr)
    elif app.mode == Mode.KANBAN:
        _draw_kanban(app, stdscr, height, width)
    elif app.mode == Mode.STATS:
        _draw_stats(app, stdscr)
    elif app.mode == Mode.HELP:
        _draw_help(app, stdscr, height)

    # Show error message if present
    if app.error_message:
        _put(stdscr, height - 2, 2, app.error_message, curses.A_BOLD | _color(2))

    stdscr.refresh()


def _key(app, action):
    """Display form of the first key bound to an action."""
    return format_key(app.keybinds[action][0])


def format_task(task):
    """One-line text for a task: checkbox, priority, text, tags, due date."""
    checkbox = "[✓]" if task.checked else "[ ]"
    priority = PRIORITY_INDICATORS.get(task.priority, "")
    tags = " > " + ", ".join(task.tags) if task.tags else ""
    due = f" [Due: {task.due_date}]" if task.due_date else ""
    return f"{checkbox} {priority}{task.text}{tags}{due}"


def _draw_normal_ui(app, stdscr, height, width):
    """Draw the context header and its task list."""
    header = f"Context: {app.current_context}"
    if app.moving:
        header += f"  (moving: {_key(app, 'move_up')}/{_key(app, 'move_down')} to move, {_key(app, 'move')} to drop)"
    _put(stdscr, 1, 2, header, curses.A_BOLD | _color(4))
    _put(stdscr, height - 1, 2, f"{_key(app, 'help')}: help | {_key(app, 'quit')}: quit")

    tasks = list(app.get_filtered_tasks())
    if not tasks:
        _put(stdscr, 3, 4, f"No tasks in this context. Press '{_key(app, 'add_task')}' to add one.")
        return

    # Keep the selection visible
    max_visible = max(height - 6, 1)
    selected = app.selected_index
    start = max(0, selected - max_visible // 2)
    end = min(len(tasks), start + max_visible)

    if start > 0:
        _put(stdscr, 2, width // 2, "↑ More Above ↑")
    if end < len(tasks):
        _put(stdscr, height - 3, width // 2, "↓ More Below ↓")

    for row, i in enumerate(range(start, end)):
        task = tasks[i]
        attrs = 0
        if i == selected:
            attrs |= curses.A_REVERSE
        if task.checked:
            attrs |= _color(1)
        if app.moving and task.id == app.moving_task_id:
            attrs |= curses.A_BOLD
        _put(stdscr, 3 + row, 4, format_task(task), attrs)


def _draw_text_input(app, stdscr, height, width):
    """Draw the boxed prompt used by every text dialog."""
    box_width = max(width - 4, 10)
    win = curses.newwin(4, box_width, max(height // 2 - 2, 0), 2)
    win.erase()
    win.box()
    win.addstr(1, 2, app.input_prompt[: box_width - 4], curses.A_BOLD)
    win.addstr(2, 2, (app.input_buffer + "_")[-(box_width - 4):])
    win.refresh()


def _draw_date_input(app, stdscr):
    _put(stdscr, 1, 2, "Set due date (YYYY-MM-DD):", curses.A_BOLD)
    for i, (label, value) in enumerate(zip(("Day", "Month", "Year"), app.date_fields)):
        attr = curses.A_REVERSE if i == app.date_index else 0
        _put(stdscr, 3 + i, 4, f"{label}: {value}", attr)
    _put(stdscr, 7, 2, f"{_key(app, 'move_up')}/{_key(app, 'move_down')}: field | {_key(app, 'enter')}: set | {_key(app, 'back')}: cancel")


def _draw_tag_removal(app, stdscr):
    _put(stdscr, 1, 2, "Select tags to remove:", curses.A_BOLD)
    tags = app.current_task().tags
    for i, tag in enumerate(tags):
        checked = i < len(app.remove_tag_checks) and app.remove_tag_checks[i]
        attr = curses.A_REVERSE if i == app.remove_tag_index else 0
        _put(stdscr, 3 + i, 4, f"{'[✓]' if checked else '[ ]'} {tag}", attr)
    _put(stdscr, 4 + len(tags), 2, f"{_key(app, 'toggle')}: mark | {_key(app, 'enter')}: remove | {_key(app, 'back')}: cancel")


def _draw_kanban(app, stdscr, height, width):
    """Display tasks in a kanban board layout with contexts as columns."""
    scroll = "/".join(_key(app, a) for a in ("previous_context", "next_context", "move_up", "move_down"))
    _put(stdscr, 1, 2, f"Kanban View ({scroll} scroll, {_key(app, 'back')} to return)", curses.A_BOLD)

    visible_cols = max(1, (width - 2) // (KANBAN_COL_WIDTH + 1))
    contexts = app.contexts.names[app.kanban_scroll_x:app.kanban_scroll_x + visible_cols]

    for col, context in enumerate(contexts):
        x = 2 + col * (KANBAN_COL_WIDTH + 1)
        _put(stdscr, 3, x, context, curses.A_BOLD | _color(4))
        _put(stdscr, 4, x, "─" * (KANBAN_COL_WIDTH - 1))
        lines = []
        for task in app.get_filtered_tasks(context):
            bullet = "✓ " if task.checked else "• "
            lines.append((bullet + format_task(task)[4:], _color(1) if task.checked else 0))
        for row, (text, attr) in enumerate(lines[app.kanban_scroll_y:]):
            y = 5 + row
            if y >= height - 2:
                break
            _put(stdscr, y, x, text[: KANBAN_COL_WIDTH - 1], attr)


def task_stats(app):
    """Totals and completion rates, overall and per context."""
    tasks = app.store.tasks
    completed = sum(1 for t in tasks if t.checked)
    per_context = []
    for context in app.contexts.names:
        ctx_tasks = list(app.get_filtered_tasks(context))
        done = sum(1 for t in ctx_tasks if t.checked)
        rate = (done / len(ctx_tasks) * 100) if ctx_tasks else 0.0
        per_context.append((context, done, len(ctx_tasks), rate))
    rate = (completed / len(tasks) * 100) if tasks else 0.0
    return len(tasks), completed, rate, per_context


def _draw_stats(app, stdscr):
    """Show statistics about tasks and contexts."""
    total, completed, rate, per_context = task_stats(app)
    _put(stdscr, 1, 2, f"Statistics ({_key(app, 'back')} to return)", curses.A_BOLD)
    _put(stdscr, 3, 2, f"Total Tasks: {total}")
    _put(stdscr, 4, 2, f"Completed: {completed} ({rate:.1f}%)")
    _put(stdscr, 6, 2, "Context Statistics:", curses.A_BOLD)
    for i, (context, done, count, ctx_rate) in enumerate(per_context):
        _put(stdscr, 7 + i, 4, f"{context}: {done}/{count} ({ctx_rate:.1f}%)")


def _draw_help(app, stdscr, height):
    _put(stdscr, 1, 2, f"Keybindings ({_key(app, 'back')} to return)", curses.A_BOLD)
    for i, (action, keys) in enumerate(app.keybinds.items()):
        if 3 + i >= height - 1:
            break
        _put(stdscr, 3 + i, 4, f"{'/'.join(format_key(k) for k in keys):>12}  {action.replace('_', ' ')}")
