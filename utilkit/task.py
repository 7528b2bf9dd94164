"""Units of work for the thread pool: prioritised tasks and task groups."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from utilkit.config import MAX_BLOCK_TTL

TaskFunction = Callable[[], Any]
FinishedCallback = Callable[[Any], Any]


class Task:
    """A callable with a priority. Calling the task runs its function.

    Tasks sort with the higher priority first.
    """

    __slots__ = ("func", "priority")

    def __init__(self, func: TaskFunction | None = None, priority: int = 0) -> None:
        if func is not None and not callable(func):
            raise TypeError("task function must be callable")
        self.func = func
        self.priority = priority

    def __call__(self) -> Any:
        if self.func is None:
            return None
        return self.func()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.priority > other.priority

    def __repr__(self) -> str:
        return f"Task(func={self.func!r}, priority={self.priority})"


class TaskGroup:
    """A batch of functions submitted together, with a time limit.

    *ttl* is the longest time, in milliseconds, to wait for the whole group.
    *on_finished*, if set, is called with the group's outcome once it is done.
    """

    def __init__(
        self,
        task: TaskFunction | None = None,
        ttl: int = MAX_BLOCK_TTL,
        on_finished: FinishedCallback | None = None,
    ) -> None:
        self.tasks: list[TaskFunction] = []
        self.ttl = ttl
        self.on_finished: FinishedCallback | None = None
        if task is not None:
            self.add_task(task)
        self.set_on_finished(on_finished)

    def add_task(self, task: TaskFunction) -> "TaskGroup":
        """Append *task* to the group."""
        if not callable(task):
            raise TypeError("task must be callable")
        self.tasks.append(task)
        return self

    def set_ttl(self, ttl: int) -> "TaskGroup":
        """Set the longest wait for the group, in milliseconds."""
        self.ttl = ttl
        return self

    def set_on_finished(self, on_finished: FinishedCallback | None) -> "TaskGroup":
        """Set the callback run once the group has finished."""
        if on_finished is not None and not callable(on_finished):
            raise TypeError("on_finished must be callable")
        self.on_finished = on_finished
        return self

    def clear(self) -> None:
        """Remove every task."""
        self.tasks.clear()

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[TaskFunction]:
        return iter(self.tasks)