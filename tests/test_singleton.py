import threading

from utilkit.singleton import Singleton, SingletonType


class Counter:
    created = 0

    def __init__(self):
        type(self).created += 1
        self.inits = 0
        self.destroys = 0

    def init(self):
        self.inits += 1
        return "init-done"

    def destroy(self):
        self.destroys += 1
        return "destroy-done"


def _factory_counting():
    calls = []

    def factory():
        calls.append(1)
        return Counter()

    return factory, calls


def test_kind_from_integer_value_is_lazy():
    factory, calls = _factory_counting()
    single = Singleton(factory, SingletonType(0))
    assert calls == []
    instance = single.get()
    assert instance.inits == 0
    assert calls == [1]


def test_hungry_creates_immediately():
    factory, calls = _factory_counting()
    single = Singleton(factory)
    assert len(calls) == 1
    first = single.get()
    assert first.inits == 0
    assert first.destroys == 0
    assert single.get() is first
    assert len(calls) == 1


def test_lazy_creates_on_first_get():
    factory, calls = _factory_counting()
    single = Singleton(factory, SingletonType.LAZY)
    assert calls == []
    first = single.get()
    assert first.inits == 0
    assert single.get() is first
    assert len(calls) == 1


def test_auto_init_creates_and_inits():
    factory, calls = _factory_counting()
    single = Singleton(factory, SingletonType.LAZY, auto_init=True)
    assert len(calls) == 1
    assert single.get().inits == 1


def test_init_and_destroy_forward_results():
    single = Singleton(Counter)
    assert single.init() == "init-done"
    assert single.destroy() == "destroy-done"
    assert single.get().destroys == 1


def test_init_on_plain_object_returns_none():
    single = Singleton(list)
    assert single.init() is None
    assert single.get() == []


def test_clear_lazy_rebuilds():
    factory, calls = _factory_counting()
    single = Singleton(factory, SingletonType.LAZY)
    first = single.get()
    single.clear()
    second = single.get()
    assert second is not first
    assert len(calls) == 2


def test_clear_hungry_leaves_nothing():
    single = Singleton(Counter)
    single.clear()
    assert single.get() is None


def test_lazy_creation_is_thread_safe():
    factory, calls = _factory_counting()
    single = Singleton(factory, SingletonType.LAZY)
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(single.get())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    instance = single.get()
    assert len(calls) == 1
    assert [id(r) for r in results] == [id(instance)] * 8
    assert instance.inits == 0