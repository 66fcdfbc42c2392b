"""Time series kept at second, minute, hour and day granularity."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from .combiner import Combiner
from .variable import SeriesOptions
from .window import SERIES_IN_DAY, SERIES_IN_HOUR, SERIES_IN_MINUTE, SERIES_IN_SECOND

T = TypeVar("T")

_GRANULARITIES = (
    ("second", 1, SERIES_IN_SECOND),
    ("minute", 60, SERIES_IN_MINUTE),
    ("hour", 3600, SERIES_IN_HOUR),
    ("day", 86400, SERIES_IN_DAY),
)


def _debug_format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(value, float):
        return repr(value)
    return str(value)


@dataclass(frozen=True)
class DataPoint(Generic[T]):
    """One sampled value with its Unix timestamp in milliseconds."""

    value: T
    timestamp: int

    @classmethod
    def now(cls, value: T) -> "DataPoint[T]":
        return cls(value, max(time.time_ns() // 1_000_000, 0))


class Series(Generic[T]):
    """Stores recent data points at several time granularities."""

    def __init__(
        self, op: Combiner[T], clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.op = op
        self._clock = clock
        self._lock = threading.Lock()
        self._points: dict[str, deque[DataPoint[T]]] = {
            label: deque(maxlen=size) for label, _, size in _GRANULARITIES
        }
        self._last_point: Optional[DataPoint[T]] = None
        self._last_sample_time: Optional[float] = None

    def append(self, value: T) -> None:
        """Record a value, sampling it into each granularity that is due."""
        point = DataPoint.now(value)
        now = self._clock()
        with self._lock:
            self._last_point = point
            if self._last_sample_time is None:
                due = {"second"}
            else:
                elapsed = now - self._last_sample_time
                due = {
                    label
                    for label, seconds, _ in _GRANULARITIES
                    if elapsed >= seconds
                }
            if "second" in due:
                self._last_sample_time = now
            for label in due:
                self._points[label].append(point)

    def last_point(self) -> Optional[DataPoint[T]]:
        with self._lock:
            return self._last_point

    def points(self, granularity: str) -> list[DataPoint[T]]:
        """Snapshot of the points kept at one granularity."""
        with self._lock:
            return list(self._points[granularity])

    def describe(self, options: SeriesOptions = SeriesOptions()) -> str:
        """The series as a JSON document."""
        with self._lock:
            snapshot = {label: list(pts) for label, pts in self._points.items()}
        fixed = "true" if options.fixed_length else "false"
        data = ",".join(
            _describe_series_data(label, snapshot[label])
            for label, _, _ in _GRANULARITIES
        )
        return (
            '{"meta":{"name":"time_series","fixed_length":'
            f'{fixed}}},"data":{{{data}}}}}'
        )


def _describe_series_data(name: str, points: Iterable[DataPoint[Any]]) -> str:
    points = list(points)
    timestamps = ",".join(str(p.timestamp) for p in points)
    values = ",".join(_debug_format(p.value) for p in points)
    return f'"{name}":{{"timestamps":[{timestamps}],"values":[{values}]}}'


class SeriesFormatter(Generic[T]):
    """Renders a series with fixed options when converted to text."""

    def __init__(
        self, series: Series[T], options: SeriesOptions = SeriesOptions()
    ) -> None:
        self.series = series
        self.options = options

    def __str__(self) -> str:
        return self.series.describe(self.options)