import threading
import time

import pytest

from utilkit.config import DEFAULT_TASK_STRATEGY, LONG_TIME_TASK_STRATEGY, ThreadPoolConfig
from utilkit.pool import TaskGroupError, ThreadPool, get_thread_pool
from utilkit.task import TaskGroup


def small_config(**overrides):
    values = dict(default_thread_size=2, max_thread_size=5, monitor_enable=False)
    values.update(overrides)
    return ThreadPoolConfig(**values)


@pytest.fixture
def pool():
    with ThreadPool(config=small_config()) as p:
        yield p


def test_commit_returns_result(pool):
    assert pool.commit(lambda: "value").result(timeout=5) == "value"


def test_commit_propagates_exception(pool):
    def fail():
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        pool.commit(fail).result(timeout=5)


def test_commit_counts_tasks(pool):
    futures = [pool.commit(lambda i=i: i) for i in range(10)]
    assert sorted(f.result(timeout=5) for f in futures) == list(range(10))
    assert pool.input_task_num == 10


def test_submit_group_runs_all_tasks(pool):
    seen = []
    lock = threading.Lock()
    group = TaskGroup()
    for i in range(20):
        group.add_task(lambda i=i: (lock.acquire(), seen.append(i), lock.release()))
    pool.submit(group)
    assert sorted(seen) == list(range(20))


def test_submit_callable_calls_on_finished_with_none(pool):
    results = []
    pool.submit(lambda: results.append("ran"), on_finished=results.append)
    assert results == ["ran", None]


def test_submit_timeout_raises(pool):
    outcomes = []
    group = TaskGroup(lambda: time.sleep(0.5), ttl=50, on_finished=outcomes.append)
    with pytest.raises(TaskGroupError) as info:
        pool.submit(group)
    assert info.value.errors == ["thread status timeout"]
    assert outcomes == [info.value]


def test_submit_uses_smaller_ttl(pool):
    group = TaskGroup(lambda: time.sleep(0.5))
    with pytest.raises(TaskGroupError):
        pool.submit(group, ttl=50)


def test_submit_requires_init():
    with ThreadPool(auto_init=False, config=small_config()) as p:
        with pytest.raises(RuntimeError):
            p.submit(lambda: None)


def test_set_config_rejected_after_init(pool):
    with pytest.raises(RuntimeError):
        pool.set_config(small_config())


def test_set_config_before_init_and_thread_num():
    with ThreadPool(auto_init=False, config=small_config()) as p:
        p.set_config(small_config(default_thread_size=3, max_thread_size=7))
        p.init()
        assert p.is_init
        tid = p.commit(threading.get_ident, 0).result(timeout=5)
        assert p.get_thread_num(tid) in range(3)
        assert p.get_thread_num(threading.get_ident()) == -1


def test_dispatch_round_robin():
    with ThreadPool(auto_init=False, config=small_config(max_thread_size=3)) as p:
        assert [p.dispatch(DEFAULT_TASK_STRATEGY) for _ in range(4)] == [0, 1, 2, 0]
        assert p.dispatch(1) == 1


def test_dispatch_fair_lock():
    with ThreadPool(auto_init=False, config=small_config(fair_lock_enable=True)) as p:
        assert p.dispatch(1) == DEFAULT_TASK_STRATEGY


def test_commit_with_priority_starts_secondary(pool):
    assert pool.secondary_thread_count == 0
    assert pool.commit_with_priority(lambda: "prio", 5).result(timeout=5) == "prio"
    assert pool.secondary_thread_count == 1


def test_long_time_task_runs_on_secondary():
    with ThreadPool(config=small_config(secondary_thread_size=1)) as p:
        assert p.secondary_thread_count == 1
        assert p.commit(lambda: "long", LONG_TIME_TASK_STRATEGY).result(timeout=5) == "long"


def test_secondary_threads_capped():
    with ThreadPool(config=small_config(secondary_thread_size=10)) as p:
        assert p.secondary_thread_count == 3


def test_destroy_and_reinit(pool):
    pool.destroy()
    assert not pool.is_init
    pool.destroy()
    pool.init()
    assert pool.commit(lambda: "again").result(timeout=5) == "again"


def test_context_manager_closes():
    with ThreadPool(config=small_config()) as p:
        assert p.is_init
    assert not p.is_init


def test_get_thread_pool_is_shared():
    first = get_thread_pool()
    second = get_thread_pool()
    assert first is second
    assert first.is_init