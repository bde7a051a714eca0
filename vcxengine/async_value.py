"""A value computed on a background thread."""

from __future__ import annotations

import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_MISSING = object()


class ResultNotReady(RuntimeError):
    """Raised when a result is asked for before it exists."""


class AsyncValue(Generic[T]):
    """An expensive value evaluated asynchronously on a worker thread."""

    def __init__(self, func: Optional[Callable[[], T]] = None) -> None:
        self._thread: Optional[threading.Thread] = None
        self._done = threading.Event()
        self._result: object = _MISSING
        self._error: Optional[BaseException] = None
        if func is not None:
            self.emplace(func)

    def _join(self) -> None:
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def emplace(self, func: Callable[[], T]) -> None:
        """Wait for any running job, then start computing ``func()``."""
        self._join()
        self._done.clear()

        def run() -> None:
            try:
                result = func()
            except BaseException as exc:  # surfaced through value()/wait()
                self._error = exc
                self._result = _MISSING
            else:
                self._result = result
                self._error = None
            finally:
                self._done.set()

        self._thread = threading.Thread(target=run)
        self._thread.start()

    def reset(self) -> None:
        """Wait for any running job and mark the value as not ready."""
        self._join()
        self._done.clear()

    def has_value(self) -> bool:
        return self._done.is_set()

    def _get(self) -> T:
        if self._error is not None:
            raise self._error
        if self._result is _MISSING:
            raise ResultNotReady("result is not ready.")
        return self._result  # type: ignore[return-value]

    def value(self) -> T:
        """The result; raises ResultNotReady if it is still being computed."""
        if not self.has_value():
            raise ResultNotReady("result is not ready.")
        return self._get()

    def value_or(self, alt: T) -> T:
        """The result if ready, otherwise ``alt``."""
        if self.has_value():
            return self._get()
        return alt

    def wait(self) -> T:
        """Block until the computation finishes and return its result."""
        self._join()
        return self._get()