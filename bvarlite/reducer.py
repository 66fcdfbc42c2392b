"""Variables that reduce per-thread values into one with an operation."""

from __future__ import annotations

import copy
from contextlib import suppress
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .combiner import AgentCombiner, Combiner
from .variable import ExposeError, Variable

T = TypeVar("T")


def _display(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class VoidOp:
    """Stands for a missing inverse operation."""


class Reducer(Variable, Generic[T]):
    """Reduces values with ``op``: e1 op e2 op e3 ...

    The operation must be associative, commutative and free of side effects.
    """

    def __init__(self, identity: T, op: Combiner[T], name: str = "") -> None:
        self._combiner: AgentCombiner[T] = AgentCombiner(identity, op, name)

    def add(self, value: T) -> "Reducer[T]":
        """Fold ``value`` into the calling thread's agent."""
        op = self._combiner.op()
        agent = self._combiner.get_or_create_tls_agent()
        with agent.lock:
            agent.value = op.combine(agent.value, value)
        return self

    def get_value(self) -> T:
        """The reduction of every thread's value."""
        return self._combiner.combine_agents()

    def reset(self) -> T:
        """Return the reduced value and set every agent back to the identity."""
        return self._combiner.reset_all_agents()

    def op(self) -> Combiner[T]:
        return self._combiner.op()

    def describe(self, quote_string: bool = False) -> str:
        return _display(self.get_value())

    def _rename(self, name: str) -> None:
        self._combiner.set_name(name)

    def expose_impl(self, prefix: str, name: str) -> str:
        full = super().expose_impl(prefix, name)
        self._rename(full)
        return full

    def name(self) -> str:
        return self._combiner.name()


class AddTo(Combiner[T]):
    """Addition."""

    def combine(self, lhs: T, rhs: T) -> T:
        return lhs + rhs

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "add"


class MinusFrom(Combiner[T]):
    """Subtraction."""

    def combine(self, lhs: T, rhs: T) -> T:
        return lhs - rhs

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "minus"


class MaxTo(Combiner[T]):
    """The larger of two values, keeping the left one on ties."""

    def combine(self, lhs: T, rhs: T) -> T:
        return rhs if rhs > lhs else lhs

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "max"


class MinTo(Combiner[T]):
    """The smaller of two values, keeping the left one on ties."""

    def combine(self, lhs: T, rhs: T) -> T:
        return rhs if rhs < lhs else lhs

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "min"


class SumCombiner(Combiner[T]):
    """Sum of two values."""

    def combine(self, v1: T, v2: T) -> T:
        return v1 + v2

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "sum"


class MaxCombiner(Combiner[T]):
    """The larger of two values, keeping the right one on ties."""

    def combine(self, v1: T, v2: T) -> T:
        return v1 if v1 > v2 else v2

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "max"


class MinCombiner(Combiner[T]):
    """The smaller of two values, keeping the right one on ties."""

    def combine(self, v1: T, v2: T) -> T:
        return v1 if v1 < v2 else v2

    def modify(self, v: T) -> T:
        """Return an independent copy of ``v``."""
        return copy.copy(v)

    def name(self) -> str:
        return "min"


class _WrappedReducer(Variable, Generic[T]):
    """A variable that publishes itself and keeps its value in a reducer."""

    def __init__(self, inner: Reducer[T]) -> None:
        self._inner = inner

    def add(self, value: T) -> "_WrappedReducer[T]":
        self._inner.add(value)
        return self

    def get_value(self) -> T:
        return self._inner.get_value()

    def reset(self) -> T:
        return self._inner.reset()

    def describe(self, quote_string: bool = False) -> str:
        return self._inner.describe(quote_string)

    def expose_impl(self, prefix: str, name: str) -> str:
        full = Variable.expose_impl(self, prefix, name)
        self._inner._rename(full)
        return full

    def name(self) -> str:
        return self._inner.name()


class Adder(_WrappedReducer[T]):
    """Sums every value added to it."""

    def __init__(self, identity: T = 0) -> None:
        super().__init__(Reducer(identity, AddTo(), "adder"))

    @classmethod
    def with_name(cls, name: str) -> "Adder":
        adder = cls()
        with suppress(ExposeError):
            adder.expose(name)
        return adder

    @classmethod
    def with_prefix_name(cls, prefix: str, name: str) -> "Adder":
        adder = cls()
        with suppress(ExposeError):
            adder.expose_as(prefix, name)
        return adder

    def add(self, value: T) -> "Adder[T]":
        self._inner.add(value)
        return self

    def get_value(self) -> T:
        return self._inner.get_value()

    def reset(self) -> T:
        return self._inner.reset()

    def describe(self, quote_string: bool = False) -> str:
        return self._inner.describe(quote_string)

    def expose_impl(self, prefix: str, name: str) -> str:
        return super().expose_impl(prefix, name)

    def name(self) -> str:
        return self._inner.name()


class Maxer(_WrappedReducer[T]):
    """Keeps the largest value added to it."""

    def __init__(self, default_value: T) -> None:
        super().__init__(Reducer(default_value, MaxTo(), "maxer"))

    @classmethod
    def with_name(cls, default_value: T, name: str) -> "Maxer[T]":
        maxer = cls(default_value)
        with suppress(ExposeError):
            maxer.expose(name)
        return maxer

    @classmethod
    def with_prefix_name(
        cls, default_value: T, prefix: str, name: str
    ) -> "Maxer[T]":
        maxer = cls(default_value)
        with suppress(ExposeError):
            maxer.expose_as(prefix, name)
        return maxer

    def add(self, value: T) -> "Maxer[T]":
        self._inner.add(value)
        return self

    def get_value(self) -> T:
        return self._inner.get_value()

    def reset(self) -> T:
        return self._inner.reset()

    def describe(self, quote_string: bool = False) -> str:
        return self._inner.describe(quote_string)

    def expose_impl(self, prefix: str, name: str) -> str:
        return super().expose_impl(prefix, name)

    def name(self) -> str:
        return self._inner.name()


class Miner(_WrappedReducer[T]):
    """Keeps the smallest value added to it."""

    def __init__(self, default_value: T) -> None:
        super().__init__(Reducer(default_value, MinTo(), "miner"))

    @classmethod
    def with_name(cls, default_value: T, name: str) -> "Miner[T]":
        miner = cls(default_value)
        with suppress(ExposeError):
            miner.expose(name)
        return miner

    @classmethod
    def with_prefix_name(
        cls, default_value: T, prefix: str, name: str
    ) -> "Miner[T]":
        miner = cls(default_value)
        with suppress(ExposeError):
            miner.expose_as(prefix, name)
        return miner

    def add(self, value: T) -> "Miner[T]":
        self._inner.add(value)
        return self

    def get_value(self) -> T:
        return self._inner.get_value()

    def reset(self) -> T:
        return self._inner.reset()

    def describe(self, quote_string: bool = False) -> str:
        return self._inner.describe(quote_string)

    def expose_impl(self, prefix: str, name: str) -> str:
        return super().expose_impl(prefix, name)

    def name(self) -> str:
        return self._inner.name()