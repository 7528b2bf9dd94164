import pytest

from utilkit.config import MAX_BLOCK_TTL
from utilkit.task import Task, TaskGroup


def test_task_runs_function_and_returns_result():
    task = Task(lambda: "done")
    assert task() == "done"


def test_empty_task_does_nothing():
    calls = []
    task = Task()
    task()
    assert calls == []
    assert task.priority == 0


def test_task_rejects_non_callable():
    with pytest.raises(TypeError):
        Task(42)


def test_tasks_sort_higher_priority_first():
    tasks = [Task(priority=1), Task(priority=5), Task(priority=3)]
    assert [t.priority for t in sorted(tasks)] == [5, 3, 1]


def test_task_comparison_with_other_type_is_unsupported():
    with pytest.raises(TypeError):
        Task() < 3


def test_task_group_defaults():
    group = TaskGroup()
    assert len(group) == 0
    assert group.ttl == MAX_BLOCK_TTL
    assert group.on_finished is None


def test_task_group_chaining_returns_same_group():
    group = TaskGroup()
    callback = print
    result = group.add_task(lambda: 1).add_task(lambda: 2).set_ttl(2500).set_on_finished(callback)
    assert result is group
    assert len(group) == 2
    assert group.ttl == 2500
    assert group.on_finished is callback


def test_task_group_constructor_with_single_task():
    seen = []
    group = TaskGroup(lambda: seen.append("hit"), ttl=100)
    for task in group:
        task()
    assert seen == ["hit"]
    assert len(group) == 1
    assert group.ttl == 100


def test_task_group_clear_empties_tasks():
    group = TaskGroup().add_task(lambda: None).add_task(lambda: None)
    group.clear()
    assert len(group) == 0
    assert list(group) == []


def test_task_group_rejects_non_callables():
    group = TaskGroup()
    with pytest.raises(TypeError):
        group.add_task("not callable")
    with pytest.raises(TypeError):
        group.set_on_finished(7)