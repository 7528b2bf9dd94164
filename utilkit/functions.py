"""Small general-purpose helpers: timestamped echo, folds and session ids."""

from __future__ import annotations

import datetime
import functools
import operator
import sys
import threading
import uuid
from collections.abc import Iterable
from typing import Any

_ECHO_LOCK = threading.Lock()
_ECHO_PREFIX = "[utilkit]"

silent = False
"""When true, :func:`echo` writes nothing."""


def _timestamp(now: datetime.datetime | None = None) -> str:
    now = now or datetime.datetime.now()
    return now.strftime("%Y-%m-%d %H:%M:%S.") + f"{now.microsecond // 1000:03d}"


def echo(fmt: str, *args: Any) -> str:
    """Write a timestamped, printf-formatted line to stdout and return it.

    The line is written under a global lock so concurrent callers never
    interleave. Nothing is written when the module flag ``silent`` is set,
    but the line is still returned.
    """
    message = fmt % args if args else fmt
    line = f"{_ECHO_PREFIX} [{_timestamp()}] {message}"
    if not silent:
        with _ECHO_LOCK:
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
    return line


def container_sum(container: Iterable[Any]) -> Any:
    """Sum every element, starting from 0."""
    result: Any = 0
    for value in container:
        result += value
    return result


def container_multiply(container: Iterable[Any]) -> Any:
    """Multiply every element, starting from 1."""
    result: Any = 1
    for value in container:
        result *= value
    return result


def max_of(value: Any, *args: Any) -> Any:
    """Return the largest of the given values."""
    return functools.reduce(lambda acc, item: item if item > acc else acc, args, value)


def sum_of(value: Any, *args: Any) -> Any:
    """Add the values right to left: ``a + (b + (c + ...))``."""
    if not args:
        return value
    return value + functools.reduce(lambda acc, item: operator.add(item, acc), reversed(args[:-1]), args[-1])


def generate_session() -> str:
    """Return a fresh unique session identifier in canonical UUID form."""
    return str(uuid.uuid4())