from utilkit import config
from utilkit.config import ThreadPoolConfig


def test_documented_defaults():
    cfg = ThreadPoolConfig()
    assert cfg.default_thread_size == 8
    assert cfg.secondary_thread_size == 0
    assert cfg.max_thread_size == config.DEFAULT_THREAD_SIZE * 2 + 1
    assert cfg.monitor_span == config.MONITOR_SPAN
    assert cfg.secondary_thread_ttl == config.SECONDARY_THREAD_TTL
    assert cfg.monitor_enable is True
    assert cfg.fair_lock_enable is False


def test_steal_range_bounded_by_thread_count():
    cfg = ThreadPoolConfig(default_thread_size=3, max_task_steal_range=5)
    assert cfg.steal_range() == cfg.default_thread_size - 1


def test_steal_range_uses_configured_limit():
    cfg = ThreadPoolConfig(default_thread_size=10, max_task_steal_range=4)
    assert cfg.steal_range() == cfg.max_task_steal_range


def test_steal_range_never_exceeds_both_limits():
    for size in range(1, 6):
        for limit in range(0, 6):
            cfg = ThreadPoolConfig(default_thread_size=size, max_task_steal_range=limit)
            assert cfg.steal_range() <= limit
            assert cfg.steal_range() <= size - 1


def test_batch_ratio_enabled():
    cfg = ThreadPoolConfig(batch_task_enable=True, fair_lock_enable=False)
    assert cfg.batch_task_ratio() is True


def test_batch_ratio_disabled_by_fair_lock():
    cfg = ThreadPoolConfig(batch_task_enable=True, fair_lock_enable=True)
    assert cfg.batch_task_ratio() is False


def test_batch_ratio_default_off():
    assert ThreadPoolConfig().batch_task_ratio() is False