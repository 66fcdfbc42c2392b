"""Periodic sampling of variables by a shared background thread."""

from __future__ import annotations

import threading
import time
import weakref
from abc import ABC, abstractmethod
from collections import deque
from datetime import timedelta
from typing import Any, Generic, Optional, TypeVar

from .combiner import Combiner, LoggingErrorHandler, SampleErrorHandler
from .window import SERIES_IN_SECOND

T = TypeVar("T")

_SAMPLE_ERROR = "sampling error"


def _debug_format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, float):
        return repr(value)
    return str(value)


class Sampler(ABC):
    """Something that is sampled periodically."""

    @abstractmethod
    def interval(self) -> timedelta:
        """How often the sampler wants to be sampled."""

    @abstractmethod
    def take_sample(self) -> None:
        """Take one sample."""

    @abstractmethod
    def describe(self) -> str:
        """Describe what has been sampled."""

    @abstractmethod
    def destroy(self) -> None:
        """Stop the sampler from doing further work."""


class GlobalSamplerState:
    """Holds weak references to samplers and runs the thread that samples them.

    The thread starts when the first sampler is registered and stops once
    every registered sampler has been garbage collected.
    """

    def __init__(
        self, sample_interval: float = 1.0, poll_interval: float = 0.1
    ) -> None:
        self._samplers: list[weakref.ref] = []
        self._lock = threading.Lock()
        self._sample_interval = sample_interval
        self._poll_interval = poll_interval
        self._last_sample_time = time.monotonic()
        self._running = False

    def register_sampler(self, sampler: weakref.ref) -> None:
        """Add a weak reference to a sampler and make sure the thread runs."""
        with self._lock:
            self._samplers = [ref for ref in self._samplers if ref() is not None]
            self._samplers.append(sampler)
            if not self._running:
                self._running = True
                thread = threading.Thread(
                    target=self._run, name="bvarlite-sampler", daemon=True
                )
                thread.start()

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def sampler_count(self) -> int:
        """Number of registered samplers that are still alive."""
        with self._lock:
            return sum(1 for ref in self._samplers if ref() is not None)

    def _run(self) -> None:
        while True:
            time.sleep(self._poll_interval)
            now = time.monotonic()
            with self._lock:
                if now - self._last_sample_time < self._sample_interval:
                    continue
                self._last_sample_time = now
                live = [s for s in (ref() for ref in self._samplers) if s is not None]

            for sampler in live:
                sampler.take_sample()
            del live

            with self._lock:
                self._samplers = [ref for ref in self._samplers if ref() is not None]
                if not self._samplers:
                    self._running = False
                    return


GLOBAL_SAMPLER_STATE = GlobalSamplerState()


class ReducerSampler(Sampler, Generic[T]):
    """Samples the value of a reducer it does not keep alive."""

    def __init__(
        self,
        owner: Any,
        op: Combiner[T],
        inv_op: Any,
        error_handler: Optional[SampleErrorHandler] = None,
        state: Optional[GlobalSamplerState] = None,
    ) -> None:
        self._owner = weakref.ref(owner)
        self._op = op
        self.inv_op = inv_op
        self._error_handler = error_handler or LoggingErrorHandler()
        self._state = state if state is not None else GLOBAL_SAMPLER_STATE
        self._destroyed = False

    def schedule(self) -> bool:
        """Register with the sampling thread."""
        self._state.register_sampler(weakref.ref(self))
        return True

    def interval(self) -> timedelta:
        return timedelta(seconds=1)

    def take_sample(self) -> None:
        if self._destroyed:
            return
        owner = self._owner()
        if owner is None:
            return
        value = owner.get_value()
        self._op.combine(value, value)
        self._error_handler.on_error(_SAMPLE_ERROR)

    def describe(self) -> str:
        return ""

    def destroy(self) -> None:
        self._destroyed = True


class SeriesSampler(Sampler, Generic[T]):
    """Keeps the most recent values appended to it."""

    def __init__(self, op: Combiner[T], capacity: int = SERIES_IN_SECOND) -> None:
        self.op = op
        self._data: deque[T] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._destroyed = False

    def append(self, value: T) -> None:
        """Add a value, dropping the oldest once the capacity is reached."""
        if self._destroyed:
            return
        with self._lock:
            self._data.append(value)

    def schedule(self) -> bool:
        return True

    def interval(self) -> timedelta:
        return timedelta(seconds=1)

    def take_sample(self) -> None:
        """Values are pushed with append; nothing is pulled here."""
        return None

    def describe(self) -> str:
        """The stored values as a JSON-style array; empty once destroyed."""
        if self._destroyed:
            return ""
        with self._lock:
            values = list(self._data)
        return "[" + ",".join(_debug_format(v) for v in values) + "]"

    def destroy(self) -> None:
        self._destroyed = True