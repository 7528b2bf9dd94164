import queue
import threading
import time

import pytest

from utilkit.config import DEFAULT_RINGBUFFER_SIZE
from utilkit.queues import (
    AtomicPriorityQueue,
    AtomicQueue,
    RingBufferQueue,
    WorkStealingQueue,
)


def test_atomic_queue_fifo():
    q = AtomicQueue()
    for item in ["a", "b", "c"]:
        q.push(item)
    assert [q.try_pop(), q.try_pop(), q.try_pop()] == ["a", "b", "c"]
    assert q.try_pop() is None
    assert q.empty() is True


def test_atomic_queue_batch():
    q = AtomicQueue()
    for item in range(5):
        q.push(item)
    assert q.try_pop_batch(3) == [0, 1, 2]
    assert q.try_pop_batch(0) == []
    assert q.try_pop_batch(10) == [3, 4]
    assert q.empty()


def test_atomic_queue_wait_pop_timeout():
    with pytest.raises(queue.Empty):
        AtomicQueue().wait_pop(timeout=0.05)


def test_atomic_queue_wait_pop_across_threads():
    q = AtomicQueue()
    threading.Timer(0.05, q.push, args=("late",)).start()
    assert q.wait_pop(timeout=5) == "late"


def test_priority_queue_highest_first():
    q = AtomicPriorityQueue()
    q.push("low", -5)
    q.push("high", 10)
    q.push("mid", 0)
    assert q.try_pop_batch(3) == ["high", "mid", "low"]
    assert q.try_pop() is None


def test_priority_queue_ties_keep_insertion_order():
    q = AtomicPriorityQueue()
    for item in ["x", "y", "z"]:
        q.push(item, 1)
    assert [q.try_pop() for _ in range(3)] == ["x", "y", "z"]
    assert q.empty()


def test_priority_queue_batch_limit():
    q = AtomicPriorityQueue()
    q.push("a", 1)
    q.push("b", 2)
    assert q.try_pop_batch(1) == ["b"]
    assert q.try_pop_batch(-1) == []
    assert not q.empty()


def test_ring_buffer_default_capacity():
    assert RingBufferQueue().capacity == DEFAULT_RINGBUFFER_SIZE


def test_ring_buffer_round_trip_with_wraparound():
    q = RingBufferQueue(3)
    out = []
    for item in range(7):
        q.push(item)
        out.append(q.wait_pop(timeout=1))
    assert out == list(range(7))


def test_ring_buffer_blocks_when_full():
    q = RingBufferQueue(3)
    q.push(1)
    q.push(2)
    done = threading.Event()

    def producer():
        q.push(3)
        done.set()

    thread = threading.Thread(target=producer)
    thread.start()
    time.sleep(0.05)
    assert not done.is_set()
    assert q.wait_pop(timeout=1) == 1
    thread.join(timeout=2)
    assert done.is_set()
    assert [q.wait_pop(timeout=1), q.wait_pop(timeout=1)] == [2, 3]


def test_ring_buffer_wait_pop_timeout():
    with pytest.raises(queue.Empty):
        RingBufferQueue(4).wait_pop(timeout=0.05)


def test_ring_buffer_clear():
    q = RingBufferQueue(4)
    q.push("a")
    q.clear()
    with pytest.raises(queue.Empty):
        q.wait_pop(timeout=0.05)


def test_ring_buffer_set_capacity_chains_and_validates():
    q = RingBufferQueue(4)
    assert q.set_capacity(16) is q
    assert q.capacity == 16
    with pytest.raises(ValueError):
        q.set_capacity(1)


def test_work_stealing_pop_from_front_steal_from_back():
    q = WorkStealingQueue()
    for item in ["first", "second", "third"]:
        q.push(item)
    assert q.try_pop() == "third"
    assert q.try_steal() == "first"
    assert q.try_pop() == "second"
    assert q.try_pop() is None
    assert q.try_steal() is None


def test_work_stealing_batches():
    q = WorkStealingQueue()
    for item in range(6):
        q.push(item)
    assert q.try_pop_batch(2) == [5, 4]
    assert q.try_steal_batch(2) == [0, 1]
    assert q.try_steal_batch(10) == [2, 3]
    assert q.try_pop_batch(3) == []