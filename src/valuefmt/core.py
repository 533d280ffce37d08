"""Value classification, references, and scalar stringification."""

from __future__ import annotations

import asyncio
import collections.abc
import dataclasses
import enum
import functools
import inspect
import queue
import weakref
from dataclasses import dataclass
from typing import Any

from valuefmt.exceptions import RenderDepthError

# Maximum number of nested containers or chained references a writer follows.
DEFAULT_MAX_DEPTH = 100

# =============================================================================
# References
# =============================================================================


@dataclass(frozen=True)
class Ref:
    """An explicit, possibly empty reference to another value.

    A reference renders exactly like its target. An empty reference renders
    as empty output.

    Examples:
        >>> stringify(Ref(42))
        '42'
        >>> stringify(Ref())
        ''
    """

    target: Any = None


def deref(value: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Follow a chain of references to the referenced value.

    Empty references and dead weak references resolve to ``None``.

    Raises:
        RenderDepthError: If the chain is longer than ``max_depth``.
    """
    depth = 0
    while isinstance(value, (Ref, weakref.ref)):
        if depth >= max_depth:
            raise RenderDepthError(
                f"reference chain exceeds maximum depth of {max_depth}",
                context={"max_depth": max_depth},
            )
        value = value.target if isinstance(value, Ref) else value()
        depth += 1
    return value


# =============================================================================
# Classification
# =============================================================================


class Kind(enum.Enum):
    """The closed set of value shapes the writers distinguish."""

    NULL = "null"
    REF = "ref"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    BYTES = "bytes"
    CALLABLE = "callable"
    CHANNEL = "channel"
    RECORD = "record"
    MAP = "map"
    SEQUENCE = "sequence"
    OBJECT = "object"


COMPOSITE_KINDS = frozenset({Kind.RECORD, Kind.MAP, Kind.SEQUENCE})
SCALAR_KINDS = frozenset({Kind.NULL, Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.STRING})

# Live handles that must never be consumed or rendered
_CHANNEL_TYPES = (queue.Queue, queue.SimpleQueue, asyncio.Queue, collections.abc.Iterator)


def is_record_type(cls: Any) -> bool:
    """Return True if ``cls`` is a dataclass or a NamedTuple class."""
    if not isinstance(cls, type):
        return False
    if dataclasses.is_dataclass(cls):
        return True
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def is_record(value: Any) -> bool:
    """Return True if ``value`` is a dataclass or NamedTuple instance."""
    return not isinstance(value, type) and is_record_type(type(value))


def classify(value: Any) -> Kind:
    """Map a value onto exactly one :class:`Kind`.

    Examples:
        >>> classify(None)
        <Kind.NULL: 'null'>
        >>> classify(True)
        <Kind.BOOL: 'bool'>
        >>> classify({"a": 1})
        <Kind.MAP: 'map'>
    """
    if value is None:
        return Kind.NULL
    if isinstance(value, (Ref, weakref.ref)):
        return Kind.REF
    if isinstance(value, bool):
        return Kind.BOOL
    if isinstance(value, int):
        return Kind.INT
    if isinstance(value, float):
        return Kind.FLOAT
    if isinstance(value, complex):
        return Kind.COMPLEX
    if isinstance(value, str):
        return Kind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return Kind.BYTES
    if is_record(value):
        return Kind.RECORD
    if isinstance(value, collections.abc.Mapping):
        return Kind.MAP
    if isinstance(value, _CHANNEL_TYPES):
        return Kind.CHANNEL
    if isinstance(value, (collections.abc.Sequence, collections.abc.Set)):
        return Kind.SEQUENCE
    if inspect.isroutine(value) or isinstance(value, functools.partial):
        return Kind.CALLABLE
    return Kind.OBJECT


def is_composite(kind: Kind) -> bool:
    """Return True for records, maps and sequences."""
    return kind in COMPOSITE_KINDS


def has_custom_str(value: Any) -> bool:
    """Return True if the value's class defines its own ``__str__``."""
    return type(value).__str__ is not object.__str__


# =============================================================================
# Stringification
# =============================================================================


def stringify(value: Any) -> str:
    """Convert a value to its canonical, human-readable text.

    References are followed first. Sequences and maps are rendered without
    enclosing brackets; records and other objects use ``str()``. Never raises
    for cyclic containers: a container already being rendered shows as ``...``.

    Examples:
        >>> stringify(False)
        'false'
        >>> stringify(0.1)
        '0.1'
        >>> stringify(["a", 1, None])
        'a 1 '
        >>> stringify({"k": True})
        'k:true'
    """
    return _stringify(value, set())


def _stringify(value: Any, active: set[int]) -> str:
    kind = classify(value)
    if kind is Kind.NULL or kind is Kind.CHANNEL:
        return ""
    if kind is Kind.REF:
        try:
            return _stringify(deref(value), active)
        except RenderDepthError:
            return "..."
    if kind is Kind.BOOL:
        return "true" if value else "false"
    if kind is Kind.INT:
        return int_to_str(int(value))
    if kind is Kind.FLOAT:
        return repr(float(value))
    if kind is Kind.COMPLEX:
        return repr(complex(value))
    if kind is Kind.STRING:
        return str.__str__(value)
    if kind is Kind.BYTES:
        return bytes(value).decode("utf-8", errors="replace")
    if kind is Kind.CALLABLE:
        return callable_name(value)
    if kind is Kind.SEQUENCE or kind is Kind.MAP:
        if id(value) in active:
            return "..."
        active.add(id(value))
        try:
            if kind is Kind.MAP:
                return " ".join(
                    f"{_stringify(k, active)}:{_stringify(v, active)}" for k, v in value.items()
                )
            return " ".join(_stringify(elem, active) for elem in value)
        finally:
            active.discard(id(value))
    return str(value)


# Integers up to this many bits convert with str() under any digit limit
# the interpreter enforces (never below 640 digits).
_SAFE_INT_BITS = 2000
_DIGIT_CHUNK = 300


def int_to_str(n: int) -> str:
    """Decimal digits of ``n``, however many there are.

    Examples:
        >>> int_to_str(-42)
        '-42'
        >>> len(int_to_str(10**5000))
        5001
    """
    if n.bit_length() <= _SAFE_INT_BITS:
        return str(n)
    sign = "-" if n < 0 else ""
    n = abs(n)
    base = 10**_DIGIT_CHUNK
    parts = []
    while n >= base:
        n, rem = divmod(n, base)
        parts.append(str(rem).zfill(_DIGIT_CHUNK))
    parts.append(str(n))
    return sign + "".join(reversed(parts))


def callable_name(fn: Any) -> str:
    """Best-effort fully qualified name of a function or method.

    Returns an empty string if no name can be determined.
    """
    while isinstance(fn, functools.partial):
        fn = fn.func
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    if not name:
        return ""
    module = getattr(fn, "__module__", None)
    return f"{module}.{name}" if module else name
