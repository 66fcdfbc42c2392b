"""A recorder that averages integer samples across threads."""

from __future__ import annotations

import threading
from contextlib import suppress
from dataclasses import dataclass, field

from .variable import ExposeError, Variable


@dataclass(frozen=True)
class Stat:
    """A running sum together with the number of samples in it."""

    sum: int = 0
    num: int = 0

    def get_average_int(self) -> int:
        """Integer average, truncated toward zero; 0 when empty."""
        if self.num == 0:
            return 0
        quotient = abs(self.sum) // abs(self.num)
        return quotient if (self.sum < 0) == (self.num < 0) else -quotient

    def get_average_double(self) -> float:
        """Floating-point average; 0.0 when empty."""
        if self.num == 0:
            return 0.0
        return self.sum / self.num

    def __add__(self, other: "Stat") -> "Stat":
        return Stat(self.sum + other.sum, self.num + other.num)

    def __sub__(self, other: "Stat") -> "Stat":
        return Stat(self.sum - other.sum, self.num - other.num)

    def __str__(self) -> str:
        average = self.get_average_int()
        if average != 0:
            return str(average)
        double = self.get_average_double()
        if double.is_integer():
            return str(int(double))
        return repr(double)


@dataclass
class _StatAgent:
    stat: Stat = field(default_factory=Stat)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class IntRecorder(Variable):
    """Collects integer samples per thread and reports their average."""

    def __init__(self) -> None:
        self._local = threading.local()
        self._agents: list[_StatAgent] = []
        self._agents_lock = threading.Lock()
        self._name = ""
        self.debug_name = ""

    @classmethod
    def with_name(cls, name: str) -> "IntRecorder":
        recorder = cls()
        with suppress(ExposeError):
            recorder.expose(name)
        return recorder

    @classmethod
    def with_prefix_name(cls, prefix: str, name: str) -> "IntRecorder":
        recorder = cls()
        with suppress(ExposeError):
            recorder.expose_as(prefix, name)
        return recorder

    def _agent(self) -> _StatAgent:
        agent = getattr(self._local, "agent", None)
        if agent is None:
            agent = _StatAgent()
            with self._agents_lock:
                self._agents.append(agent)
            self._local.agent = agent
        return agent

    def _all_agents(self) -> list[_StatAgent]:
        with self._agents_lock:
            return list(self._agents)

    def add(self, sample: int) -> "IntRecorder":
        """Record one sample."""
        agent = self._agent()
        with agent.lock:
            agent.stat = agent.stat + Stat(sample, 1)
        return self

    def average(self) -> int:
        return self.get_value().get_average_int()

    def average_double(self) -> float:
        return self.get_value().get_average_double()

    def get_value(self) -> Stat:
        """Sum of the statistics of every thread."""
        result = Stat()
        for agent in self._all_agents():
            with agent.lock:
                result = result + agent.stat
        return result

    def reset(self) -> Stat:
        """Clear every thread's statistics and return what they held."""
        result = self.get_value()
        for agent in self._all_agents():
            with agent.lock:
                agent.stat = Stat()
        return result

    def set_debug_name(self, name: str) -> None:
        self.debug_name = name

    def describe(self, quote_string: bool = False) -> str:
        return str(self.get_value())

    def expose_impl(self, prefix: str, name: str) -> str:
        self._name = super().expose_impl(prefix, name)
        return self._name

    def name(self) -> str:
        return self._name