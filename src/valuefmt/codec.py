"""Normalization of arbitrary values into plain JSON/YAML-compatible data.

Structured-document writers and query stages never hand custom types to their
codec. They first reduce the value to ``None``, ``bool``, ``int``, ``float``,
``str``, ``list`` and ``dict``, applying the display names and ``omitempty``
options of record fields along the way.
"""

from __future__ import annotations

import base64
import datetime
import enum
from typing import Any

from valuefmt.core import DEFAULT_MAX_DEPTH, SCALAR_KINDS, Kind, classify, deref, stringify
from valuefmt.exceptions import RenderDepthError, UnsupportedTypeError
from valuefmt.meta import TagResolver, default_resolver, record_items


def to_plain(
    value: Any,
    resolver: TagResolver | None = None,
    *,
    strict_keys: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Any:
    """Convert a value into plain data.

    Args:
        value: Any value.
        resolver: Field resolver for records. Defaults to the JSON tag resolver.
        strict_keys: If True, map keys must be strings or integers (integers
            become strings), as JSON requires. If False, scalar keys are kept
            and other keys are stringified.
        max_depth: Maximum nesting depth.

    Raises:
        UnsupportedTypeError: For values the document model cannot represent
            (complex numbers, callables, live streams, unsupported keys).
        RenderDepthError: If the value is nested deeper than ``max_depth``.

    Examples:
        >>> to_plain({"a": (1, 2.5), 3: None})
        {'a': [1, 2.5], '3': None}
    """
    return _plain(value, resolver or default_resolver, strict_keys, max_depth, 0)


def _plain(value: Any, resolver: TagResolver, strict_keys: bool, max_depth: int, depth: int) -> Any:
    if depth > max_depth:
        raise RenderDepthError(
            f"value nesting exceeds maximum depth of {max_depth}",
            context={"max_depth": max_depth},
        )

    kind = classify(value)
    if kind is Kind.NULL:
        return None
    if kind is Kind.REF:
        return _plain(deref(value, max_depth), resolver, strict_keys, max_depth, depth + 1)
    if kind is Kind.BOOL:
        return bool(value)
    if kind is Kind.INT:
        return int(value)
    if kind is Kind.FLOAT:
        return float(value)
    if kind is Kind.STRING:
        return str.__str__(value)
    if kind is Kind.BYTES:
        return base64.b64encode(bytes(value)).decode("ascii")
    if kind is Kind.RECORD:
        result = {}
        for item in record_items(value, resolver):
            if "omitempty" in item.options and is_empty(item.value):
                continue
            result[item.name] = _plain(item.value, resolver, strict_keys, max_depth, depth + 1)
        return result
    if kind is Kind.MAP:
        return {
            _plain_key(k, strict_keys): _plain(v, resolver, strict_keys, max_depth, depth + 1)
            for k, v in value.items()
        }
    if kind is Kind.SEQUENCE:
        return [_plain(elem, resolver, strict_keys, max_depth, depth + 1) for elem in value]
    if kind is Kind.OBJECT:
        if isinstance(value, enum.Enum):
            return _plain(value.value, resolver, strict_keys, max_depth, depth + 1)
        if isinstance(value, (datetime.date, datetime.time)):
            return value.isoformat()
        return str(value)

    raise UnsupportedTypeError(
        f"unsupported type: {type(value).__qualname__}",
        context={"type": type(value).__qualname__, "kind": kind.value},
    )


def _plain_key(key: Any, strict: bool) -> Any:
    key = deref(key)
    kind = classify(key)
    if kind is Kind.STRING:
        return str.__str__(key)
    if strict:
        if kind is Kind.INT:
            return str(int(key))
        raise UnsupportedTypeError(
            f"unsupported map key type: {type(key).__qualname__}",
            context={"type": type(key).__qualname__},
        )
    if kind in SCALAR_KINDS:
        return key
    return stringify(key)


def is_empty(value: Any) -> bool:
    """Return True for values an ``omitempty`` field leaves out.

    Empty means ``None``, an empty reference, ``False``, zero, or an empty
    string or container. Records are never empty.

    Examples:
        >>> [is_empty(v) for v in (None, 0, "", [], {}, False, "x", 0.5)]
        [True, True, True, True, True, True, False, False]
    """
    value = deref(value)
    kind = classify(value)
    if kind is Kind.NULL:
        return True
    if kind in (Kind.BOOL, Kind.INT, Kind.FLOAT, Kind.COMPLEX):
        return value == 0
    if kind in (Kind.STRING, Kind.BYTES, Kind.MAP, Kind.SEQUENCE):
        return len(value) == 0
    return False
