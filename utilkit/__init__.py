"""Work-stealing thread pool, queues, LRU cache, trie, timer, singleton holder,
vector distances and random data helpers."""

__version__ = "0.1.0"