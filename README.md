# utilkit

utilkit is a set of small utilities that use only the standard library. At its
centre is a work-stealing thread pool. The other utilities are:

- an LRU cache
- a trie
- a repeating timer
- a lazy or eager singleton holder
- thread-safe queues
- vector distance calculators
- random vector generators

## Installation

```
pip install .
pip install .[test]    # with pytest
```

## Thread pool (`utilkit.pool`)

```python
from utilkit.pool import ThreadPool
from utilkit.task import TaskGroup

with ThreadPool() as pool:
    future = pool.commit(lambda: 6 + 3)
    print(future.result())                 # 9

    group = TaskGroup(lambda: print("hello"))
    group.add_task(lambda: print("world"))
    pool.submit(group, ttl=2500)           # waits up to 2500 ms
```

### Submitting work

- `commit(func, index)` queues a callable and returns a
  `concurrent.futures.Future`. It does not block. The `index` argument controls
  where the task goes:
  - By default, tasks are spread round robin over the primary threads and the
    pool queue.
  - A non-negative index sends the task to that primary thread.
  - `LONG_TIME_TASK_STRATEGY` (from `utilkit.config`) leaves the task to
    secondary threads.
- `commit_with_priority(func, priority)` puts a task on the priority queue.
  Secondary threads serve that queue, higher priorities first. If no secondary
  thread exists yet, one is started.
- `submit(task_or_group, ttl, on_finished)` runs one callable or a `TaskGroup`
  and waits for it.
  - The wait is limited to the smaller of the group's ttl and `ttl`, in
    milliseconds.
  - If the limit passes first, `submit` raises `TaskGroupError`.
  - The group's `on_finished` callback receives `None` or that error.
  - The return values and exceptions of the tasks themselves are discarded.

### Threads and lifecycle

- Primary threads serve their own deque first, then the pool queue. After that
  they steal from neighbouring primary threads.
- A monitor thread adds a secondary thread when every primary thread is busy or
  when long tasks are waiting. Secondary threads retire after being idle for
  `secondary_thread_ttl` monitor ticks.
- `destroy()` stops the worker threads. `close()` also stops the monitor.
  `close()` is what the context manager calls on exit.
- `get_thread_pool()` returns one process-wide pool that is shared by every
  caller.

### Configuration

`ThreadPoolConfig` in `utilkit.config` is a dataclass that holds the tuning
knobs:

- thread counts
- steal range
- batch sizes and batch mode
- fair-lock mode
- monitor span
- secondary-thread TTL

Pass it to `ThreadPool(config=...)`, or call `set_config()` on the pool before
`init()`.

The building blocks live in their own modules:

- `utilkit.task` provides `Task` and `TaskGroup`.
- `utilkit.threads` provides `PrimaryThread` and `SecondaryThread`.
- `utilkit.queues` provides `AtomicQueue`, `AtomicPriorityQueue`,
  `RingBufferQueue` and `WorkStealingQueue`.

## LRU cache (`utilkit.lru`)

```python
from utilkit.lru import LruCache

cache = LruCache(3)
for key, value in [(1, "one"), (2, "two"), (3, "three"), (4, "four")]:
    cache.put(key, value)
print(1 in cache)      # False: evicted
print(cache.get(4))    # "four"
```

`get` marks the entry as recently used. It returns `default` (`None` unless
given) for a missing key.

## Trie (`utilkit.trie`)

```python
from utilkit.trie import Trie

trie = Trie()
trie.insert("hello")
trie.find("hello")     # True
trie.erase("hello")    # True: it was present
"hello" in trie        # False
```

## Timer (`utilkit.timer`)

```python
import time
from utilkit.timer import Timer

with Timer() as timer:
    timer.start(1000, lambda: print("tick"))   # interval in milliseconds
    time.sleep(3.5)
```

If the task raises an exception, the timer stops and keeps the exception in
`timer.error`.

## Singleton (`utilkit.singleton`)

`Singleton(factory, kind, auto_init)` holds one instance.

- `SingletonType.HUNGRY` builds the instance at construction.
- `SingletonType.LAZY` builds it on the first `get()`.
- With `auto_init`, the instance is built at once and its `init()` is called.

## Distances and random data

```python
from utilkit.distance import DistanceCalculator, EuclideanDistance
from utilkit.randomgen import generate_vector

v1 = generate_vector(16, 0.0, 1.0)
v2 = generate_vector(16, 0.0, 1.0)
calc = DistanceCalculator(EuclideanDistance(), need_check=True)
print(calc.calculate(v1, v2))
```

### Distance measures

`utilkit.distance` provides these measures:

- `EuclideanDistance`. It gives the squared value when `need_sqrt=False`.
- `CosineDistance`.
- `InnerProductDistance`.

Invalid input raises `DistanceError`. To define a custom metric, subclass
`Distance` and implement `calc`.

### The calculator

`DistanceCalculator` provides:

- `calculate` for one pair of vectors
- `calculate_batch` for one query against many vectors
- `normalize`

Input is checked only when `need_check` is true.

### Random data

`utilkit.randomgen` provides `generate_vector` and `generate_matrix`. A seed
other than `REAL_RANDOM` (0) makes the output reproducible.

## Helpers (`utilkit.functions`)

- `echo(fmt, *args)` writes a timestamped, printf-formatted line to stdout and
  returns it. Set `utilkit.functions.silent = True` to suppress the output.
- `container_sum` and `container_multiply` fold the items of an iterable.
- `sum_of` and `max_of` fold their arguments.
- `generate_session()` returns a fresh UUID string.

## Demo

`utilkit-demo` runs a walkthrough of the thread pool, LRU cache, trie, timer and
distance utilities. Name one or more of `threadpool`, `lru`, `trie`, `timer` or
`distance` to run only those:

```
utilkit-demo
utilkit-demo lru trie
```