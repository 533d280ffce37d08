"""Base classes for formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable


class Formatter(ABC):
    """Abstract base class for formatters.

    A formatter converts a single value into its complete string
    representation. It must not modify the value, not even temporarily.
    """

    @abstractmethod
    def format(self, value: Any) -> str:
        """Return a suitable string representation of ``value``."""
        pass

    def __call__(self, value: Any) -> str:
        return self.format(value)


class FuncFormatter(Formatter):
    """Adapter that turns a plain function into a Formatter."""

    def __init__(self, fn: Callable[[Any], str]):
        self.fn = fn

    def format(self, value: Any) -> str:
        return self.fn(value)

    def __repr__(self) -> str:
        return f"FuncFormatter({self.fn!r})"


def _noop(_: Any) -> str:
    return ""


def noop_formatter() -> Formatter:
    """Return a formatter that always produces an empty string."""
    return FuncFormatter(_noop)


def as_formatter(obj: Formatter | Callable[[Any], str]) -> Formatter:
    """Wrap a callable into a Formatter; Formatters are returned unchanged.

    Raises:
        TypeError: If ``obj`` is neither a Formatter nor callable.
    """
    if isinstance(obj, Formatter):
        return obj
    if callable(obj):
        return FuncFormatter(obj)
    raise TypeError(f"formatter must be a Formatter or a callable, got {type(obj).__name__}")
