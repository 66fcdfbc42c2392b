"""A variable whose value is set directly at run time."""

from __future__ import annotations

import threading
from contextlib import suppress
from typing import Generic, TypeVar

from .variable import ExposeError, Variable

T = TypeVar("T")


class Status(Variable, Generic[T]):
    """Holds a single value that can be read and replaced."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.Lock()
        self._name = ""
        self._exposed = False

    @classmethod
    def with_name(cls, value: T, name: str) -> "Status[T]":
        status = cls(value)
        with suppress(ExposeError):
            status.expose(name)
        return status

    @classmethod
    def with_prefix_name(cls, value: T, prefix: str, name: str) -> "Status[T]":
        status = cls(value)
        with suppress(ExposeError):
            status.expose_as(prefix, name)
        return status

    def get_value(self) -> T:
        with self._lock:
            return self._value

    def set_value(self, value: T) -> None:
        with self._lock:
            self._value = value

    def describe(self, quote_string: bool = False) -> str:
        value = self.get_value()
        if quote_string and isinstance(value, str):
            return f'"{value}"'
        return str(value)

    def expose_impl(self, prefix: str, name: str) -> str:
        full = super().expose_impl(prefix, name)
        self._exposed = True
        self._name = full
        return full

    def name(self) -> str:
        return self._name

    def hide(self) -> bool:
        result = super().hide()
        if result:
            self._exposed = False
        return result

    def is_hidden(self) -> bool:
        return not self._exposed