"""Time windows over exposed variables and the standard window lengths."""

from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import suppress
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from .variable import ExposeError, Variable

T = TypeVar("T")

WINDOW_SIZE_SECOND = 60
WINDOW_SIZE_MINUTE = 60
WINDOW_SIZE_HOUR = 24
WINDOW_SIZE_DAY = 30

SERIES_IN_SECOND = WINDOW_SIZE_SECOND
SERIES_IN_MINUTE = WINDOW_SIZE_MINUTE
SERIES_IN_HOUR = WINDOW_SIZE_HOUR
SERIES_IN_DAY = WINDOW_SIZE_DAY


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class _Sample(Generic[T]):
    value: T
    time: float


class Window(Variable, Generic[T]):
    """Keeps the most recent samples taken from a source variable."""

    def __init__(
        self,
        source: Variable,
        interval_seconds: float,
        capacity: int = SERIES_IN_SECOND,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = source
        self._interval = float(interval_seconds)
        self._capacity = capacity
        self._clock = clock
        self._samples: deque[_Sample[T]] = deque()
        self._lock = threading.Lock()
        self._name = ""
        self.last_sample_time = clock()

    @classmethod
    def with_name(
        cls, name: str, source: Variable, interval_seconds: float
    ) -> "Window[T]":
        window = cls(source, interval_seconds)
        with suppress(ExposeError):
            window.expose(name)
        return window

    def get_value(self) -> Optional[T]:
        """The newest sample, or None when nothing has been sampled."""
        with self._lock:
            return self._samples[-1].value if self._samples else None

    def _add_sample(self, value: T) -> None:
        now = self._clock()
        cutoff = now - self._interval * self._capacity
        with self._lock:
            self._samples.append(_Sample(value, now))
            while len(self._samples) > self._capacity or (
                self._samples and self._samples[0].time < cutoff
            ):
                self._samples.popleft()
            self.last_sample_time = now

    def sample(self) -> None:
        """Take one sample from the source if it offers a current value."""
        getter = getattr(self._source, "get_value", None)
        if callable(getter):
            self._add_sample(getter())

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def describe(self, quote_string: bool = False) -> str:
        value = self.get_value()
        if value is None:
            return "N/A"
        if quote_string and isinstance(value, str):
            return f'"{value}"'
        return _format_value(value)

    def expose_impl(self, prefix: str, name: str) -> str:
        self._name = super().expose_impl(prefix, name)
        return self._name

    def name(self) -> str:
        return self._name


class PerSecond(Variable):
    """Rate of a source per second, backed by a one-second window."""

    def __init__(self, source: Variable) -> None:
        self.window: Window[float] = Window(source, 1)
        self.last_value: Any = None
        self.last_time = time.monotonic()
        self._name = ""

    @classmethod
    def with_name(cls, name: str, source: Variable) -> "PerSecond":
        per_second = cls(source)
        with suppress(ExposeError):
            per_second.expose(name)
        return per_second

    def get_value(self) -> float:
        value = self.window.get_value()
        return 0.0 if value is None else float(value)

    def describe(self, quote_string: bool = False) -> str:
        return _format_value(self.get_value())

    def expose_impl(self, prefix: str, name: str) -> str:
        self._name = super().expose_impl(prefix, name)
        with suppress(ExposeError):
            self.window.expose_as(prefix, f"{name}_second")
        return self._name

    def name(self) -> str:
        return self._name


def current_time_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return max(time.time_ns() // 1_000_000, 0)


class WindowType(Enum):
    """Standard statistic windows."""

    SECOND10 = (10, "10_second")
    MINUTE1 = (60, "1_minute")
    MINUTE5 = (300, "5_minute")
    MINUTE15 = (900, "15_minute")
    HOUR1 = (3600, "1_hour")
    HOUR6 = (21600, "6_hour")
    HOUR12 = (43200, "12_hour")
    DAY1 = (86400, "1_day")
    DAY7 = (604800, "7_day")
    DAY30 = (2592000, "30_day")

    def duration_secs(self) -> int:
        return self.value[0]

    def duration(self) -> timedelta:
        return timedelta(seconds=self.duration_secs())

    def contains(self, time: float, now: float) -> bool:
        """True when ``time`` lies no more than the window before ``now``."""
        if now < time:
            return False
        return now - time <= self.duration_secs()

    def label(self) -> str:
        return self.value[1]


def common_windows() -> list[WindowType]:
    """The commonly reported windows."""
    return [
        WindowType.MINUTE1,
        WindowType.MINUTE5,
        WindowType.MINUTE15,
        WindowType.HOUR1,
        WindowType.HOUR6,
        WindowType.HOUR12,
        WindowType.DAY1,
    ]


def all_windows() -> list[WindowType]:
    """Every window type, shortest first."""
    return list(WindowType)