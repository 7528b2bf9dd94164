"""Worker threads of the thread pool: primary threads with work stealing and
secondary threads that also serve the priority queue."""

from __future__ import annotations

import abc
import os
import sys
import threading
import time
from collections.abc import Sequence
from typing import Any

from utilkit.config import (
    CPU_NUM,
    THREAD_MAX_PRIORITY,
    THREAD_MIN_PRIORITY,
    THREAD_SCHED_FIFO,
    THREAD_SCHED_OTHER,
    THREAD_SCHED_RR,
    THREAD_TYPE_PRIMARY,
    THREAD_TYPE_SECONDARY,
    ThreadPoolConfig,
)
from utilkit.functions import echo
from utilkit.queues import AtomicPriorityQueue, AtomicQueue, WorkStealingQueue

_IDLE_SLEEP = 0.001


def _calc_policy(policy: int) -> int:
    """Keep OTHER, RR and FIFO; anything else becomes OTHER."""
    if policy in (THREAD_SCHED_OTHER, THREAD_SCHED_RR, THREAD_SCHED_FIFO):
        return policy
    return THREAD_SCHED_OTHER


def _calc_priority(priority: int) -> int:
    """Keep priorities within [min, max]; anything else becomes min."""
    if THREAD_MIN_PRIORITY <= priority <= THREAD_MAX_PRIORITY:
        return priority
    return THREAD_MIN_PRIORITY


class WorkerThread(abc.ABC):
    """Common state and behaviour of the pool's worker threads."""

    thread_type = 0

    def __init__(
        self,
        pool_queue: AtomicQueue,
        config: ThreadPoolConfig,
        pool_priority_queue: AtomicPriorityQueue | None = None,
    ) -> None:
        if pool_queue is None or config is None:
            raise ValueError("input is None")
        self.pool_task_queue = pool_queue
        self.pool_priority_task_queue = pool_priority_queue
        self.config = config
        self.is_init = False
        self.is_running = False
        self.total_task_num = 0
        self._done = False
        self._thread: threading.Thread | None = None

    @property
    def ident(self) -> int | None:
        """Identifier of the running OS thread, or None before start."""
        return self._thread.ident if self._thread is not None else None

    def _require_init(self, expected: bool) -> None:
        if self.is_init != expected:
            raise RuntimeError("init status is not suitable")

    def _start(self, name: str) -> None:
        self._done = True
        self.is_init = True
        self._thread = threading.Thread(target=self._loop, name=name, daemon=True)
        self._thread.start()

    def _before_loop(self) -> bool:
        return True

    def _loop(self) -> None:
        self._apply_sched_param()
        if not self._before_loop():
            return
        step = self.process_tasks if self.config.batch_task_ratio() else self.process_task
        while self._done:
            try:
                ran = step()
            except Exception as exc:  # a failing task must not kill the worker
                echo("warning : task raised %r", exc)
                ran = True
            if not ran:
                time.sleep(_IDLE_SLEEP)

    def _apply_sched_param(self) -> None:
        if not hasattr(os, "sched_setscheduler"):
            return
        if self.thread_type == THREAD_TYPE_PRIMARY:
            priority = self.config.primary_thread_priority
            policy = self.config.primary_thread_policy
        elif self.thread_type == THREAD_TYPE_SECONDARY:
            priority = self.config.secondary_thread_priority
            policy = self.config.secondary_thread_policy
        else:
            priority, policy = THREAD_MIN_PRIORITY, THREAD_SCHED_OTHER
        try:
            os.sched_setscheduler(0, _calc_policy(policy), os.sched_param(_calc_priority(priority)))
        except OSError as exc:
            echo("warning : set thread sched param failed, error code is [%d]", exc.errno or -1)

    @abc.abstractmethod
    def process_task(self) -> bool:
        """Fetch and run one task; return whether one was run."""

    @abc.abstractmethod
    def process_tasks(self) -> bool:
        """Fetch and run a batch of tasks; return whether any were run."""

    def _pop_pool_task(self) -> Any:
        task = self.pool_task_queue.try_pop()
        if (
            task is None
            and self.thread_type == THREAD_TYPE_SECONDARY
            and self.pool_priority_task_queue is not None
        ):
            task = self.pool_priority_task_queue.try_pop()
        return task

    def _pop_pool_tasks(self) -> list[Any]:
        tasks = self.pool_task_queue.try_pop_batch(self.config.max_pool_batch_size)
        if (
            not tasks
            and self.thread_type == THREAD_TYPE_SECONDARY
            and self.pool_priority_task_queue is not None
        ):
            tasks = self.pool_priority_task_queue.try_pop_batch(1)
        return tasks

    def run_task(self, task: Any) -> None:
        """Run one task, marking the thread busy meanwhile."""
        self.is_running = True
        try:
            task()
            self.total_task_num += 1
        finally:
            self.is_running = False

    def run_tasks(self, tasks: Sequence[Any]) -> None:
        """Run tasks in order, marking the thread busy meanwhile."""
        self.is_running = True
        try:
            for task in tasks:
                task()
            self.total_task_num += len(tasks)
        finally:
            self.is_running = False

    def destroy(self) -> None:
        """Stop the thread and wait for it to finish."""
        self._require_init(True)
        self._reset()

    def _reset(self) -> None:
        self._done = False
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join()
        self._thread = None
        self.is_init = False
        self.is_running = False
        self.total_task_num = 0


class PrimaryThread(WorkerThread):
    """Core worker: serves its own deque, then the pool queue, then steals
    from neighbouring primary threads."""

    thread_type = THREAD_TYPE_PRIMARY

    def __init__(
        self,
        index: int,
        pool_queue: AtomicQueue,
        pool_threads: list["PrimaryThread | None"],
        config: ThreadPoolConfig,
    ) -> None:
        if pool_threads is None:
            raise ValueError("input is None")
        super().__init__(pool_queue, config)
        self.index = index
        self.pool_threads = pool_threads
        self.work_stealing_queue = WorkStealingQueue()

    def init(self) -> None:
        """Start the thread."""
        self._require_init(False)
        self._start(f"utilkit-primary-{self.index}")

    def _before_loop(self) -> bool:
        self._set_affinity()
        return all(thread is not None for thread in self.pool_threads)

    def _set_affinity(self) -> None:
        if not (sys.platform.startswith("linux") and hasattr(os, "sched_setaffinity")):
            return
        if not self.config.bind_cpu_enable or CPU_NUM == 0 or self.index < 0:
            return
        try:
            os.sched_setaffinity(0, {self.index % CPU_NUM})
        except OSError as exc:
            echo("warning : set thread affinity failed, error code is [%d]", exc.errno or -1)

    def process_task(self) -> bool:
        task = self.work_stealing_queue.try_pop()
        if task is None:
            task = self._pop_pool_task()
        if task is None:
            task = self.steal_task()
        if task is None:
            return False
        self.run_task(task)
        return True

    def process_tasks(self) -> bool:
        tasks = (
            self.work_stealing_queue.try_pop_batch(self.config.max_local_batch_size)
            or self._pop_pool_tasks()
            or self.steal_tasks()
        )
        if not tasks:
            return False
        self.run_tasks(tasks)
        return True

    def _neighbours(self):
        if len(self.pool_threads) < self.config.default_thread_size:
            return
        for offset in range(self.config.steal_range()):
            neighbour = self.pool_threads[(self.index + offset + 1) % self.config.default_thread_size]
            if neighbour is not None:
                yield neighbour

    def steal_task(self) -> Any:
        """Take one task from the back of a neighbour's deque, or None."""
        for neighbour in self._neighbours():
            task = neighbour.work_stealing_queue.try_steal()
            if task is not None:
                return task
        return None

    def steal_tasks(self) -> list[Any]:
        """Take a batch of tasks from the back of a neighbour's deque."""
        for neighbour in self._neighbours():
            tasks = neighbour.work_stealing_queue.try_steal_batch(self.config.max_steal_batch_size)
            if tasks:
                return tasks
        return []


class SecondaryThread(WorkerThread):
    """Auxiliary worker: serves the pool queue and the priority queue and
    retires after being idle for a while."""

    thread_type = THREAD_TYPE_SECONDARY

    def __init__(
        self,
        pool_queue: AtomicQueue,
        pool_priority_queue: AtomicPriorityQueue,
        config: ThreadPoolConfig,
    ) -> None:
        if pool_priority_queue is None:
            raise ValueError("input is None")
        super().__init__(pool_queue, config, pool_priority_queue)
        self.cur_ttl = 0

    def init(self) -> None:
        """Start the thread with a full time to live."""
        self._require_init(False)
        self.cur_ttl = self.config.secondary_thread_ttl
        self._start("utilkit-secondary")

    def process_task(self) -> bool:
        task = self._pop_pool_task()
        if task is None:
            return False
        self.run_task(task)
        return True

    def process_tasks(self) -> bool:
        tasks = self._pop_pool_tasks()
        if not tasks:
            return False
        self.run_tasks(tasks)
        return True

    def freeze(self) -> bool:
        """Age the thread by one tick; return whether it should be retired."""
        if self.is_running:
            self.cur_ttl = min(self.cur_ttl + 1, self.config.secondary_thread_ttl)
        else:
            self.cur_ttl -= 1
        return self.cur_ttl <= 0