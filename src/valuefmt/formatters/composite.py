"""Type-keyed formatter overrides."""

from __future__ import annotations

import collections.abc
import logging
import typing
from typing import Any, Callable

from valuefmt.exceptions import UnsupportedTypeError

from .base import Formatter, as_formatter

logger = logging.getLogger(__name__)


class CompositeFormatter(Formatter):
    """Combines formatters, each handling exactly one type.

    Keys are type tokens:

    - a class, matched against ``type(value)`` exactly (subclasses do not match);
    - a parameterized container type such as ``list[Team]`` or
      ``dict[str, Team]``, matched against non-empty containers of that class
      whose elements (keys and values for maps) are all exactly of the given
      types. ``typing.Any`` matches any element. Structural keys are tried in
      registration order after exact matches.

    Each writer owns one instance; it is not shared between writers.

    Examples:
        >>> overrides = CompositeFormatter()
        >>> overrides.register(complex, lambda c: f"{c.real}+{c.imag}i")
        >>> overrides.format(1 + 2j)
        '1.0+2.0i'
    """

    def __init__(self) -> None:
        self._by_type: dict[type, Formatter] = {}
        self._by_shape: dict[Any, Formatter] = {}

    def register(self, key: Any, formatter: Formatter | Callable[[Any], str]) -> None:
        """Register the formatter for a type, replacing any existing one.

        Raises:
            TypeError: If ``key`` is not a class or a parameterized container type.
        """
        formatter = as_formatter(formatter)
        origin = typing.get_origin(key)
        if origin is not None:
            if not isinstance(origin, type) or not issubclass(
                origin, (collections.abc.Iterable, collections.abc.Mapping)
            ):
                raise TypeError(f"override key must be a container type, got {key!r}")
            self._by_shape[key] = formatter
        elif isinstance(key, type):
            self._by_type[key] = formatter
        else:
            raise TypeError(f"override key must be a type, got {key!r}")
        logger.debug("Registered formatter override for %s", _key_name(key))

    def unregister(self, key: Any) -> None:
        """Remove the formatter for a type, if any."""
        self._by_type.pop(key, None)
        self._by_shape.pop(key, None)

    def lookup(self, value: Any) -> Formatter | None:
        """Return the formatter responsible for ``value``, or None."""
        formatter = self._by_type.get(type(value))
        if formatter is not None:
            return formatter
        for key, formatter in self._by_shape.items():
            if _matches_shape(key, value):
                return formatter
        return None

    def format(self, value: Any) -> str:
        """Format a value with its registered formatter.

        Raises:
            UnsupportedTypeError: If no formatter is registered for the value.
        """
        formatter = self.lookup(value)
        if formatter is None:
            raise UnsupportedTypeError(context={"type": type(value).__qualname__})
        return formatter.format(value)

    def __contains__(self, key: Any) -> bool:
        return key in self._by_type or key in self._by_shape

    def __len__(self) -> int:
        return len(self._by_type) + len(self._by_shape)


def _key_name(key: Any) -> str:
    return key.__qualname__ if isinstance(key, type) and typing.get_origin(key) is None else repr(key)


def _matches_type(expected: Any, value: Any) -> bool:
    return expected is Any or type(value) is expected


def _matches_shape(key: Any, value: Any) -> bool:
    if type(value) is not typing.get_origin(key) or not value:
        return False
    args = typing.get_args(key)
    if isinstance(value, collections.abc.Mapping):
        if len(args) != 2:
            return False
        key_type, value_type = args
        return all(
            _matches_type(key_type, k) and _matches_type(value_type, v) for k, v in value.items()
        )
    if not args:
        return False
    # tuple[T, ...] and list[T] both describe homogeneous elements
    return all(_matches_type(args[0], elem) for elem in value)
