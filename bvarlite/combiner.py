"""Per-thread agents and the operations that combine their values."""

from __future__ import annotations

import copy
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, TypeVar

T = TypeVar("T")
V = TypeVar("V")

_log = logging.getLogger(__name__)


class Combiner(ABC, Generic[T]):
    """An associative, commutative operation on two values."""

    @abstractmethod
    def combine(self, v1: T, v2: T) -> T:
        """Combine two values into one."""

    @abstractmethod
    def modify(self, v: T) -> T:
        """Transform a single value."""

    @abstractmethod
    def name(self) -> str:
        """Short name of the operation."""


@dataclass
class Agent(Generic[T]):
    """The value held on behalf of one thread."""

    value: T
    id: int
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )


class AgentCombiner(Generic[T]):
    """Keeps one agent per thread and combines their values on demand."""

    def __init__(self, identity: T, op: Combiner[T], name: str = "") -> None:
        self._identity = identity
        self._op = op
        self._name = name
        self._local = threading.local()
        self._agents: list[Agent[T]] = []
        self._lock = threading.Lock()
        self._next_id = 1

    def get_or_create_tls_agent(self) -> Agent[T]:
        """Return the calling thread's agent, creating it on first use."""
        agent = getattr(self._local, "agent", None)
        if agent is None:
            with self._lock:
                agent = Agent(copy.copy(self._identity), self._next_id)
                self._next_id += 1
                self._agents.append(agent)
            self._local.agent = agent
        return agent

    def __iter__(self) -> Iterator[Agent[T]]:
        with self._lock:
            return iter(list(self._agents))

    def combine_agents(self) -> T:
        """Fold every agent's value into the identity with the operation."""
        result = copy.copy(self._identity)
        for agent in self:
            with agent.lock:
                value = agent.value
            result = self._op.combine(result, value)
        return result

    def reset_all_agents(self) -> T:
        """Return the combined value and set every agent back to the identity."""
        result = self.combine_agents()
        for agent in self:
            with agent.lock:
                agent.value = copy.copy(self._identity)
        return result

    def agent_count(self) -> int:
        with self._lock:
            return len(self._agents)

    def op(self) -> Combiner[T]:
        return self._op

    def set_name(self, name: str) -> None:
        self._name = name

    def name(self) -> str:
        return self._name


class Modifier(ABC, Generic[T, V]):
    """Produces a new value from a current value and an argument."""

    @abstractmethod
    def modify(self, value: T, arg: V) -> T:
        """Return the modified value."""


class AgentModifier(Modifier[T, V]):
    """A modifier backed by a plain function."""

    def __init__(self, modifier: Callable[[T, V], T]) -> None:
        self._modifier = modifier

    def modify(self, value: T, arg: V) -> T:
        return self._modifier(value, arg)


class OpAsModifier(Modifier[T, T]):
    """Uses a combiner's operation as a modifier."""

    def __init__(self, op: Combiner[T]) -> None:
        self.op = op

    def modify(self, value: T, arg: T) -> T:
        return self.op.combine(value, arg)


class SampleErrorHandler(ABC):
    """Receives errors raised while collecting samples."""

    @abstractmethod
    def on_error(self, error: str) -> None:
        """Handle one error message."""


class IgnoreErrorHandler(SampleErrorHandler):
    """Discards every error."""

    def on_error(self, error: str) -> None:
        return None


class LoggingErrorHandler(SampleErrorHandler):
    """Logs every error at error level."""

    def on_error(self, error: Any) -> None:
        _log.error("Sampler error: %s", error)