"""Runnable examples of the thread pool, LRU cache, trie, timer and distances."""

from __future__ import annotations

import argparse
import functools
import re
import threading
import time
from collections.abc import Sequence
from concurrent.futures import wait
from typing import Any

from utilkit.distance import Distance, DistanceCalculator, EuclideanDistance, Vector
from utilkit.functions import echo
from utilkit.lru import LruCache
from utilkit.pool import TaskGroupError, ThreadPool, get_thread_pool
from utilkit.randomgen import generate_vector
from utilkit.task import TaskGroup
from utilkit.timer import Timer
from utilkit.trie import Trie

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_DEMOS = ("threadpool", "lru", "trie", "timer", "distance")


def add(i: int, j: int) -> int:
    """Return ``i + j``."""
    return i + j


def minus_by_5(value: float) -> float:
    """Return *value* less five."""
    return value - 5.0


def _atoi(text: str) -> int:
    """Parse the leading integer of *text*; 0 if there is none."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


class MyFunction:
    """A few example functions to run on the pool."""

    def __init__(self, power: int = 2) -> None:
        self.power = power

    def pow2(self, text: str) -> str:
        """Raise the integer at the start of *text* to ``power`` and describe it."""
        result = 1
        base = _atoi(text)
        for _ in range(self.power):
            result *= base
        return f"multiply result is : {result}"

    @staticmethod
    def divide(i: int, j: int) -> int:
        """Integer division truncating toward zero; 0 when *j* is 0."""
        if j == 0:
            return 0
        quotient = abs(i) // abs(j)
        return quotient if (i < 0) == (j < 0) else -quotient


class MyDistance(Distance):
    """Custom, asymmetric distance: the sum of ``2 * a + b / 2`` over pairs."""

    def calc(self, v1: Vector, v2: Vector) -> float:
        return sum(a * 2 + b / 2 for a, b in zip(v1, v2))


def _commit_functions(pool: ThreadPool) -> list[Any]:
    i, j = 6, 3
    text = "5"
    mf = MyFunction()
    futures = [
        pool.commit(lambda: add(i, j)),
        pool.commit(functools.partial(minus_by_5, 8.5)),
        pool.commit(functools.partial(mf.pow2, text)),
        pool.commit(lambda: MyFunction.divide(i, j)),
    ]
    results = [future.result() for future in futures]
    for result in results:
        print(result)
    return results


def _submit_group(pool: ThreadPool) -> TaskGroupError | None:
    i, j, k = 1, 2, 3

    def slow_sum() -> None:
        time.sleep(1)
        echo("sleep for 1 second, [%d] + [%d] = [%d], run success.", i, j, i + j)

    def slower_expr() -> int:
        result = i - j + k
        time.sleep(2)
        echo("sleep for 2 second, [%d] - [%d] + [%d] = [%d], run success.", i, j, k, result)
        return result

    group = TaskGroup()
    group.add_task(lambda: echo("Hello, utilkit.")).add_task(slow_sum).add_task(slower_expr)
    try:
        pool.submit(group, 2500)
    except TaskGroupError as exc:
        echo("task group run failed, error info is [%s].", str(exc))
        return exc
    echo("task group run success.")
    return None


def _print_numbers(numbers: Sequence[int]) -> None:
    print(" ".join(str(n) for n in numbers))


def _ordering(pool: ThreadPool, size: int = 100) -> tuple[list[int], list[int], list[int]]:
    lock = threading.Lock()

    def recorder(target: list[int], value: int):
        def record() -> None:
            with lock:
                target.append(value)
        return record

    echo("thread pool task submit version : ")
    submitted: list[int] = []
    for n in range(size):
        pool.submit(recorder(submitted, n))
    _print_numbers(submitted)

    echo("thread pool task group submit version : ")
    grouped: list[int] = []
    group = TaskGroup()
    for n in range(size):
        group.add_task(recorder(grouped, n))
    pool.submit(group)
    _print_numbers(grouped)

    echo("thread pool task commit version : ")
    committed: list[int] = []
    wait([pool.commit(recorder(committed, n)) for n in range(size)])
    _print_numbers(committed)
    return submitted, grouped, committed


def demo_thread_pool(pool: ThreadPool | None = None) -> dict[str, Any]:
    """Show committing functions, submitting a task group and task ordering.

    Returns the committed results, the task group's error (or None) and the
    order in which numbers were recorded by each submission style.
    """
    if pool is None:
        pool = get_thread_pool()
    echo("======== demo_thread_pool part 1 begin. ========")
    results = _commit_functions(pool)
    echo("======== demo_thread_pool part 2 begin. ========")
    group_error = _submit_group(pool)
    echo("======== demo_thread_pool part 3 begin. ========")
    submitted, grouped, committed = _ordering(pool)
    return {
        "results": results,
        "group_error": group_error,
        "submitted": submitted,
        "grouped": grouped,
        "committed": committed,
    }


def demo_lru() -> Any:
    """Fill a three-entry cache with five values and read one back."""
    lru = LruCache(3)
    for key, value in enumerate(("one", "two", "three", "four", "five"), start=1):
        lru.put(key, value)
    value = lru.get(4)
    echo("value is : [%s]", value)
    return value


def demo_trie() -> tuple[bool, bool, bool, bool]:
    """Insert, find, erase and re-insert words in a trie."""
    trie = Trie()
    for word in ("hello", "help", "utilkit"):
        trie.insert(word)

    first = trie.find("hello")
    echo("find [hello] result is : [%i]", int(first))
    other = trie.find("utilkit")
    echo("find [utilkit] result is : [%i]", int(other))

    trie.erase("hello")
    erased = trie.find("hello")
    echo("erase [hello], then find it, result is : [%i]", int(erased))

    trie.insert("hello")
    again = trie.find("hello")
    echo("insert [hello] again, then find it, result is : [%i]", int(again))
    return first, other, erased, again


def demo_timer(interval: int = 1000, duration: int = 5500) -> int:
    """Run a greeting every *interval* ms for *duration* ms; return the count."""
    lock = threading.Lock()
    ticks = 0

    def greet() -> None:
        nonlocal ticks
        echo("Hello, utilkit")
        with lock:
            ticks += 1

    with Timer() as timer:
        timer.start(interval, greet)
        time.sleep(duration / 1000)
    with lock:
        return ticks


def demo_distance(dim: int = 16) -> dict[str, Any]:
    """Compare two random vectors by Euclidean and by custom distance."""
    vec1 = generate_vector(dim, 0.0, 1.0)
    vec2 = generate_vector(dim, 0.0, 1.0)

    euclidean = DistanceCalculator(EuclideanDistance()).calculate(vec1, vec2)
    print(f"Euclidean distance result is : {euclidean}")

    custom = DistanceCalculator(MyDistance())
    forward = custom.calculate(vec1, vec2)
    print(f"MyDistance distance vec1 -> vec2 result is : {forward}")
    backward = custom.calculate(vec2, vec1)
    print(f"MyDistance distance vec2 -> vec1 result is : {backward}")
    return {
        "vec1": vec1,
        "vec2": vec2,
        "euclidean": euclidean,
        "forward": forward,
        "backward": backward,
    }


def main(argv: Sequence[str] | None = None) -> int:
    """Run the chosen demos (all of them by default)."""
    parser = argparse.ArgumentParser(prog="utilkit-demo", description=__doc__)
    parser.add_argument("demos", nargs="*", choices=(*_DEMOS, "all"), default=["all"])
    args = parser.parse_args(argv)
    chosen = _DEMOS if "all" in args.demos else tuple(dict.fromkeys(args.demos))

    for name in chosen:
        if name == "threadpool":
            with ThreadPool() as pool:
                demo_thread_pool(pool)
        elif name == "lru":
            demo_lru()
        elif name == "trie":
            demo_trie()
        elif name == "timer":
            demo_timer()
        elif name == "distance":
            demo_distance()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())