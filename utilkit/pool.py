"""A work-stealing thread pool with auxiliary threads and a priority queue."""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Callable
from concurrent.futures import Future, wait
from typing import Any

from utilkit.config import (
    DEFAULT_TASK_STRATEGY,
    LONG_TIME_TASK_STRATEGY,
    MAX_BLOCK_TTL,
    ThreadPoolConfig,
)
from utilkit.queues import AtomicPriorityQueue, AtomicQueue
from utilkit.singleton import Singleton, SingletonType
from utilkit.task import FinishedCallback, Task, TaskGroup
from utilkit.threads import PrimaryThread, SecondaryThread


class TaskGroupError(RuntimeError):
    """Raised when tasks of a submitted group did not finish in time."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _make_task(func: Callable[[], Any], priority: int = 0) -> tuple[Task, Future]:
    if not callable(func):
        raise TypeError("task function must be callable")
    future: Future = Future()

    def run() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = func()
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)

    return Task(run, priority), future


class ThreadPool:
    """Runs callables on primary threads that steal work from each other.

    Secondary threads are added by a monitor when every primary thread is
    busy or long-running tasks are waiting, and retire when idle.
    """

    def __init__(self, auto_init: bool = True, config: ThreadPoolConfig | None = None) -> None:
        self._lock = threading.RLock()
        self._is_init = False
        self._cur_index = 0
        self._input_task_num = 0
        self._task_queue = AtomicQueue()
        self._priority_queue = AtomicPriorityQueue()
        self._primary_threads: list[PrimaryThread] = []
        self._secondary_threads: list[SecondaryThread] = []
        self._thread_records: dict[int, int] = {}
        self.config = ThreadPoolConfig()
        self.set_config(config if config is not None else ThreadPoolConfig())
        self._closing = threading.Event()
        self._monitor_thread: threading.Thread | None = None
        if self.config.monitor_enable:
            self._monitor_thread = threading.Thread(
                target=self._monitor, name="utilkit-monitor", daemon=True
            )
            self._monitor_thread.start()
        if auto_init:
            self.init()

    @property
    def is_init(self) -> bool:
        """Whether the worker threads are running."""
        return self._is_init

    @property
    def input_task_num(self) -> int:
        """Number of tasks handed to the pool so far."""
        return self._input_task_num

    @property
    def secondary_thread_count(self) -> int:
        """Number of live secondary threads."""
        with self._lock:
            return len(self._secondary_threads)

    def set_config(self, config: ThreadPoolConfig) -> None:
        """Replace the configuration; only allowed before :meth:`init`."""
        if self._is_init:
            raise RuntimeError("init status is not suitable")
        self.config = dataclasses.replace(config)

    def init(self) -> None:
        """Start the primary threads and the initial secondary threads."""
        with self._lock:
            if self._is_init:
                return
            self._thread_records.clear()
            for index in range(self.config.default_thread_size):
                thread = PrimaryThread(index, self._task_queue, self._primary_threads, self.config)
                thread.init()
                if thread.ident is not None:
                    self._thread_records[thread.ident] = index
                self._primary_threads.append(thread)
            self._create_secondary_threads(self.config.secondary_thread_size)
            self._is_init = True

    def commit(self, func: Callable[[], Any], index: int = DEFAULT_TASK_STRATEGY) -> Future:
        """Queue *func* and return a future for its result.

        *index* picks a primary thread, or a strategy: the default spreads
        tasks round robin, the long-time strategy leaves them to secondary
        threads.
        """
        task, future = _make_task(func)
        real_index = self.dispatch(index)
        with self._lock:
            if 0 <= real_index < min(self.config.default_thread_size, len(self._primary_threads)):
                self._primary_threads[real_index].work_stealing_queue.push(task)
            elif real_index == LONG_TIME_TASK_STRATEGY:
                task.priority = LONG_TIME_TASK_STRATEGY
                self._priority_queue.push(task, LONG_TIME_TASK_STRATEGY)
            else:
                self._task_queue.push(task)
            self._input_task_num += 1
        return future

    def commit_with_priority(self, func: Callable[[], Any], priority: int) -> Future:
        """Queue *func* on the priority queue; higher priorities run first."""
        task, future = _make_task(func, priority)
        with self._lock:
            if not self._secondary_threads:
                self._create_secondary_threads(1)
            self._priority_queue.push(task, priority)
            self._input_task_num += 1
        return future

    def submit(
        self,
        task: TaskGroup | Callable[[], Any],
        ttl: int = MAX_BLOCK_TTL,
        on_finished: FinishedCallback | None = None,
    ) -> None:
        """Run a task group (or one callable) and wait for it.

        The wait is limited to the smaller of the group's ttl and *ttl*, in
        milliseconds. The group's ``on_finished`` gets None or the
        :class:`TaskGroupError` that is then raised. Return values and
        exceptions of the tasks themselves are discarded.
        """
        if not self._is_init:
            raise RuntimeError("init status is not suitable")
        if isinstance(task, TaskGroup):
            group = task
        else:
            group = TaskGroup(task, ttl, on_finished)
        futures = [self.commit(func) for func in group]
        timeout_ms = min(group.ttl, ttl)
        _, not_done = wait(futures, timeout=max(timeout_ms, 0) / 1000)
        error = TaskGroupError(["thread status timeout"] * len(not_done)) if not_done else None
        if group.on_finished is not None:
            group.on_finished(error)
        if error is not None:
            raise error

    def get_thread_num(self, tid: int) -> int:
        """Return the index of the primary thread with identifier *tid*, or -1."""
        with self._lock:
            return self._thread_records.get(tid, -1)

    def destroy(self) -> None:
        """Stop and discard every worker thread."""
        with self._lock:
            if not self._is_init:
                return
            for thread in self._primary_threads:
                thread.destroy()
            self._primary_threads.clear()
            for thread in self._secondary_threads:
                thread.destroy()
            self._secondary_threads.clear()
            self._thread_records.clear()
            self._is_init = False

    def dispatch(self, index: int) -> int:
        """Turn a requested index or strategy into the index actually used."""
        if self.config.fair_lock_enable:
            return DEFAULT_TASK_STRATEGY
        if index != DEFAULT_TASK_STRATEGY:
            return index
        with self._lock:
            real_index = self._cur_index
            self._cur_index += 1
            if self._cur_index >= self.config.max_thread_size or self._cur_index < 0:
                self._cur_index = 0
        return real_index

    def close(self) -> None:
        """Stop the monitor and all worker threads."""
        self._closing.set()
        monitor = self._monitor_thread
        if monitor is not None and monitor is not threading.current_thread():
            monitor.join()
        self._monitor_thread = None
        self.destroy()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _create_secondary_threads(self, size: int) -> None:
        left = self.config.max_thread_size - self.config.default_thread_size - len(self._secondary_threads)
        for _ in range(min(size, left)):
            thread = SecondaryThread(self._task_queue, self._priority_queue, self.config)
            thread.init()
            self._secondary_threads.append(thread)

    def _monitor(self) -> None:
        while not self._closing.is_set():
            while not self._closing.is_set() and not self._is_init:
                self._closing.wait(1)
            span = self.config.monitor_span
            while span > 0 and self._is_init and not self._closing.is_set():
                self._closing.wait(1)
                span -= 1
            if self._closing.is_set():
                break
            self._monitor_pass()

    def _monitor_pass(self) -> None:
        retired: list[SecondaryThread] = []
        with self._lock:
            if not self._is_init:
                return
            primaries = self._primary_threads
            busy = bool(primaries) and all(thread.is_running for thread in primaries)
            if busy or not self._priority_queue.empty():
                self._create_secondary_threads(1)
            kept: list[SecondaryThread] = []
            for thread in self._secondary_threads:
                (retired if thread.freeze() else kept).append(thread)
            self._secondary_threads = kept
        for thread in retired:
            thread.destroy()


_POOL = Singleton(ThreadPool, SingletonType.LAZY)


def get_thread_pool(auto_init: bool = True) -> ThreadPool:
    """Return the shared process-wide pool, initialised when *auto_init*."""
    pool = _POOL.get()
    if auto_init:
        pool.init()
    return pool