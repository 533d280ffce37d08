"""Formatters for maps and sequences of maps."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from valuefmt.core import deref, stringify

from .base import Formatter, FuncFormatter, noop_formatter


def _entry(m: Any, key: Any) -> str:
    if not isinstance(m, Mapping) or key not in m:
        return ""
    return stringify(m[key])


def from_map(sep: str, delim: str) -> Formatter:
    """Create a formatter that outputs all map entries in iteration order.

    Every entry is rendered as ``key<sep>value<delim>``.
    """

    def format_map(value: Any) -> str:
        m = deref(value)
        return from_map_keys(sep, delim, *m.keys()).format(m)

    return FuncFormatter(format_map)


def from_map_keys(sep: str, delim: str, *keys: Any) -> Formatter:
    """Create a formatter that outputs entries for the given keys.

    Unlike :func:`from_map`, entries are rendered in the given order. A key
    given multiple times is rendered multiple times. A key missing from the
    map is rendered with an empty value.

    Examples:
        >>> from_map_keys("=", ";", "b", "x").format({"a": 1, "b": 2})
        'b=2;x=;'
    """

    def format_map(value: Any) -> str:
        m = deref(value)
        return "".join(f"{stringify(key)}{sep}{_entry(m, key)}{delim}" for key in keys)

    return FuncFormatter(format_map)


def from_map_slice(sep: str, delim: str) -> Formatter:
    """Create a formatter for a sequence of maps.

    The header row holds the distinct keys of the first map in first-seen
    order. Each map becomes one row; keys missing from a map render as empty
    cells.
    """

    def format_maps(value: Any) -> str:
        maps = [deref(m) for m in deref(value)]
        if not maps:
            return ""

        header: list[str] = []
        keys: list[Any] = []
        first = maps[0] if isinstance(maps[0], Mapping) else {}
        for key in first:
            name = stringify(key)
            if name not in header:
                header.append(name)
                keys.append(key)

        rows = [sep.join(header)]
        rows.extend(sep.join(_entry(m, key) for key in keys) for m in maps)
        return delim.join(rows)

    return FuncFormatter(format_maps)


def from_map_slice_keys(sep: str, delim: str, *keys: Any) -> Formatter:
    """Create a formatter for a sequence of maps with the given columns.

    Columns are rendered exactly as given, duplicates included.

    Examples:
        >>> from_map_slice_keys(",", "|", "a").format([{"a": 1}, {"b": 2}])
        'a|1|'
    """
    if not keys:
        return noop_formatter()

    def format_maps(value: Any) -> str:
        rows = [sep.join(stringify(key) for key in keys)]
        for m in deref(value):
            m = deref(m)
            rows.append(sep.join(_entry(m, key) for key in keys))
        return delim.join(rows)

    return FuncFormatter(format_maps)
