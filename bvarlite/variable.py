"""Exposed variables and the process-wide registry of their names."""

from __future__ import annotations

import threading
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Optional

_exposed: dict[str, weakref.ref] = {}
_registry_lock = threading.Lock()


class ExposeError(ValueError):
    """Raised when a variable is exposed under a name that is already taken."""


def _full_name(prefix: str, name: str) -> str:
    return f"{prefix}_{name}" if prefix else name


class Variable(ABC):
    """A value that can be described and published under a global name."""

    @abstractmethod
    def describe(self, quote_string: bool = False) -> str:
        """Return the current value as text."""

    def get_description(self) -> str:
        """Return the description without quoting strings."""
        return self.describe(False)

    def expose(self, name: str) -> str:
        """Publish this variable under ``name``; return the full name."""
        return self.expose_impl("", name)

    def expose_as(self, prefix: str, name: str) -> str:
        """Publish this variable as ``prefix_name``; return the full name."""
        return self.expose_impl(prefix, name)

    def expose_impl(self, prefix: str, name: str) -> str:
        """Register the full name in the global table.

        Raises ExposeError if the name is already registered.
        """
        full = _full_name(prefix, name)
        with _registry_lock:
            if full in _exposed:
                raise ExposeError(f"variable {full!r} is already exposed")
            _exposed[full] = weakref.ref(self)
        return full

    def hide(self) -> bool:
        """Remove this variable from the global table if it owns its name."""
        var_name = self.name()
        if not var_name:
            return False
        with _registry_lock:
            ref = _exposed.get(var_name)
            if ref is not None and ref() is self:
                del _exposed[var_name]
                return True
        return False

    def is_hidden(self) -> bool:
        """True when the variable carries no name."""
        return not self.name()

    def name(self) -> str:
        """The name this variable was exposed under, or an empty string."""
        return ""


def count_exposed() -> int:
    """Number of names currently registered."""
    with _registry_lock:
        return len(_exposed)


@dataclass(frozen=True)
class SeriesOptions:
    """Options for formatting series data."""

    fixed_length: bool = True
    include_description: bool = True
    max_length: Optional[int] = None

    def with_fixed_length(self, fixed_length: bool) -> "SeriesOptions":
        return replace(self, fixed_length=fixed_length)

    def with_description(self, include_description: bool) -> "SeriesOptions":
        return replace(self, include_description=include_description)

    def with_max_length(self, max_length: Optional[int]) -> "SeriesOptions":
        return replace(self, max_length=max_length)