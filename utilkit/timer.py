"""A timer that calls a function repeatedly at a fixed interval."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any


class Timer:
    """Calls a task every *interval* milliseconds on a background thread."""

    def __init__(self) -> None:
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._thread: threading.Thread | None = None
        self.error: BaseException | None = None

    @property
    def running(self) -> bool:
        """Whether the timer has been started and not stopped."""
        return not self._stop_event.is_set()

    def start(self, interval: int, task: Callable[[], Any]) -> None:
        """Start calling *task* every *interval* ms; ignored while running.

        An exception from *task* ends the timer and is kept in ``error``.
        """
        if interval < 0:
            raise ValueError("interval must not be negative")
        if not callable(task):
            raise TypeError("task must be callable")
        if self.running:
            return
        self.error = None
        self._stop_event.clear()
        seconds = interval / 1000
        stop_event = self._stop_event

        def loop() -> None:
            while not stop_event.wait(seconds):
                try:
                    task()
                except Exception as exc:
                    self.error = exc
                    return

        self._thread = threading.Thread(target=loop, name="utilkit-timer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the timer and wait for its thread to end."""
        if not self.running:
            return
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def __enter__(self) -> "Timer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()