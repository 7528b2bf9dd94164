"""Thread-safe queues used by the thread pool."""

from __future__ import annotations

import heapq
import itertools
import queue
import threading
from collections import deque
from typing import Any

from utilkit.config import DEFAULT_RINGBUFFER_SIZE


class AtomicQueue:
    """Unbounded first-in, first-out queue safe for many threads."""

    def __init__(self) -> None:
        self._items: deque[Any] = deque()
        self._cond = threading.Condition()

    def push(self, value: Any) -> None:
        """Append *value* and wake one waiter."""
        with self._cond:
            self._items.append(value)
            self._cond.notify()

    def wait_pop(self, timeout: float | None = None) -> Any:
        """Remove and return the oldest value, waiting for one.

        Raises :class:`queue.Empty` if *timeout* seconds pass first.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._items, timeout):
                raise queue.Empty
            return self._items.popleft()

    def try_pop(self) -> Any:
        """Remove and return the oldest value, or None when empty."""
        with self._cond:
            return self._items.popleft() if self._items else None

    def try_pop_batch(self, max_batch_size: int) -> list[Any]:
        """Remove and return up to *max_batch_size* oldest values."""
        with self._cond:
            count = min(max(max_batch_size, 0), len(self._items))
            return [self._items.popleft() for _ in range(count)]

    def empty(self) -> bool:
        """Whether the queue holds nothing."""
        with self._cond:
            return not self._items


class AtomicPriorityQueue:
    """Thread-safe queue popping the highest priority first.

    Values of equal priority come out in the order they were pushed.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, Any]] = []
        self._counter = itertools.count()
        self._lock = threading.Lock()

    def push(self, value: Any, priority: int = 0) -> None:
        """Add *value* with the given *priority*."""
        with self._lock:
            heapq.heappush(self._heap, (-priority, next(self._counter), value))

    def try_pop(self) -> Any:
        """Remove and return the highest-priority value, or None when empty."""
        with self._lock:
            return heapq.heappop(self._heap)[2] if self._heap else None

    def try_pop_batch(self, max_batch_size: int) -> list[Any]:
        """Remove and return up to *max_batch_size* values in priority order."""
        with self._lock:
            count = min(max(max_batch_size, 0), len(self._heap))
            return [heapq.heappop(self._heap)[2] for _ in range(count)]

    def empty(self) -> bool:
        """Whether the queue holds nothing."""
        with self._lock:
            return not self._heap


class RingBufferQueue:
    """Bounded circular queue for one producer and one consumer.

    One slot is always kept free, so it holds at most ``capacity - 1``
    values. :meth:`push` blocks while full, :meth:`wait_pop` while empty.
    """

    def __init__(self, capacity: int = DEFAULT_RINGBUFFER_SIZE) -> None:
        self._lock = threading.Lock()
        self._push_cv = threading.Condition(self._lock)
        self._pop_cv = threading.Condition(self._lock)
        self._head = 0
        self._tail = 0
        self._capacity = 0
        self._buffer: list[Any] = []
        self.set_capacity(capacity)

    @property
    def capacity(self) -> int:
        """Number of slots in the ring."""
        return self._capacity

    def set_capacity(self, size: int) -> "RingBufferQueue":
        """Resize the ring; best done before anything is pushed."""
        if size < 2:
            raise ValueError("ring buffer capacity must be at least 2")
        with self._lock:
            if size < len(self._buffer):
                del self._buffer[size:]
            else:
                self._buffer.extend([None] * (size - len(self._buffer)))
            self._capacity = size
            self._head %= size
            self._tail %= size
        return self

    def _is_full(self) -> bool:
        return self._head == (self._tail + 1) % self._capacity

    def _is_empty(self) -> bool:
        return self._head == self._tail

    def push(self, value: Any) -> None:
        """Store *value*, waiting for room if the ring is full."""
        with self._lock:
            self._push_cv.wait_for(lambda: not self._is_full())
            self._buffer[self._tail] = value
            self._tail = (self._tail + 1) % self._capacity
            self._pop_cv.notify()

    def wait_pop(self, timeout: float | None = None) -> Any:
        """Remove and return the oldest value, waiting for one.

        Raises :class:`queue.Empty` if *timeout* seconds pass first.
        """
        with self._lock:
            if not self._pop_cv.wait_for(lambda: not self._is_empty(), timeout):
                raise queue.Empty
            value = self._buffer[self._head]
            self._buffer[self._head] = None
            self._head = (self._head + 1) % self._capacity
            self._push_cv.notify()
            return value

    def clear(self) -> None:
        """Drop every stored value."""
        with self._lock:
            self._buffer = [None] * self._capacity
            self._head = 0
            self._tail = 0
            self._push_cv.notify_all()


class WorkStealingQueue:
    """Per-thread task deque: the owner works at the front, thieves at the back.

    Pops and steals never block; if the lock is busy they return nothing.
    """

    def __init__(self) -> None:
        self._items: deque[Any] = deque()
        self._lock = threading.Lock()

    def push(self, task: Any) -> None:
        """Put *task* at the front."""
        with self._lock:
            self._items.appendleft(task)

    def _take(self, pop: str, max_batch_size: int) -> list[Any]:
        if not self._lock.acquire(blocking=False):
            return []
        try:
            count = min(max(max_batch_size, 0), len(self._items))
            take = getattr(self._items, pop)
            return [take() for _ in range(count)]
        finally:
            self._lock.release()

    def try_pop(self) -> Any:
        """Take the front task, or None if empty or busy."""
        tasks = self._take("popleft", 1)
        return tasks[0] if tasks else None

    def try_pop_batch(self, max_batch_size: int) -> list[Any]:
        """Take up to *max_batch_size* tasks from the front."""
        return self._take("popleft", max_batch_size)

    def try_steal(self) -> Any:
        """Take the back task, or None if empty or busy."""
        tasks = self._take("pop", 1)
        return tasks[0] if tasks else None

    def try_steal_batch(self, max_batch_size: int) -> list[Any]:
        """Take up to *max_batch_size* tasks from the back."""
        return self._take("pop", max_batch_size)