import pytest

from tuido.contexts import ContextRegistry
from tuido.models import Task, TaskId
from tuido.state import AppState
from tuido.store import TaskStore


def make_task(tid, text, context="Work", **kwargs):
    return Task(id=TaskId(tid), text=text, context=context, **kwargs)


@pytest.fixture
def store():
    """Five tasks: Work has ids 1, 3, 5 and Personal has ids 2, 4."""
    return TaskStore([
        make_task(1, "write report", "Work"),
        make_task(2, "buy milk", "Personal"),
        make_task(3, "email bob", "Work"),
        make_task(4, "call mum", "Personal"),
        make_task(5, "fix bug", "Work"),
    ])


@pytest.fixture
def state(store):
    return AppState(store, ContextRegistry(["Work", "Personal"], "Work"))
