"""A lazily or eagerly created, thread-safe single instance holder."""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable, Generic, TypeVar

T = TypeVar("T")


class SingletonType(enum.IntEnum):
    """When the held instance is created."""

    LAZY = 0
    HUNGRY = 1


class Singleton(Generic[T]):
    """Holds one instance built by *factory*.

    A HUNGRY singleton builds its instance on construction; a LAZY one on the
    first :meth:`get`. With *auto_init* the instance is built at once and its
    ``init()`` called.
    """

    def __init__(
        self,
        factory: Callable[[], T],
        kind: SingletonType = SingletonType.HUNGRY,
        auto_init: bool = False,
    ) -> None:
        self._factory = factory
        self._kind = SingletonType(kind)
        self._handle: T | None = None
        self._lock = threading.Lock()
        if self._kind is SingletonType.HUNGRY or auto_init:
            self._create()
        if auto_init:
            self.init()

    def _create(self) -> None:
        if self._handle is None:
            with self._lock:
                if self._handle is None:
                    self._handle = self._factory()

    def get(self) -> T | None:
        """Return the held instance, building it first when lazy."""
        if self._kind is SingletonType.LAZY:
            self._create()
        return self._handle

    def _call(self, name: str) -> Any:
        handle = self.get()
        method = getattr(handle, name, None)
        return method() if callable(method) else None

    def init(self) -> Any:
        """Call the instance's ``init()`` if it has one and return its result."""
        return self._call("init")

    def destroy(self) -> Any:
        """Call the instance's ``destroy()`` if it has one and return its result."""
        return self._call("destroy")

    def clear(self) -> None:
        """Drop the held instance."""
        with self._lock:
            self._handle = None