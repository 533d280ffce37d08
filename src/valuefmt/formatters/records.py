"""Formatters for records and sequences of records."""

from __future__ import annotations

from typing import Any

from valuefmt.core import deref, is_record, stringify
from valuefmt.meta import TagResolver, default_resolver, record_items

from .base import Formatter, FuncFormatter, noop_formatter


def from_record(
    sep: str,
    delim: str,
    record_type: type | None = None,
    resolver: TagResolver | None = None,
) -> Formatter:
    """Create a formatter for a single record.

    Each displayed field becomes ``name<sep>value``; entries are joined by
    ``delim``. A record without displayed fields produces empty output.

    Args:
        sep: Separator between field name and value.
        delim: Delimiter between fields.
        record_type: If given and it has no displayed fields, a noop
            formatter is returned.
        resolver: Field resolver, defaults to the JSON tag resolver.

    Examples:
        >>> from_record(": ", ", ").format(User("Jane Doe", "jane.doe@local"))  # doctest: +SKIP
        'username: Jane Doe, email: jane.doe@local'
    """
    resolver = resolver or default_resolver
    if record_type is not None and not resolver(record_type):
        return noop_formatter()

    def format_record(value: Any) -> str:
        value = deref(value)
        if not is_record(value):
            return stringify(value)
        return delim.join(
            f"{item.name}{sep}{stringify(item.value)}" for item in record_items(value, resolver)
        )

    return FuncFormatter(format_record)


def from_record_slice(
    sep: str,
    delim: str,
    record_type: type | None = None,
    resolver: TagResolver | None = None,
) -> Formatter:
    """Create a formatter for a sequence of records.

    The first row holds the display names, followed by one row per record.
    Columns follow the first record, or ``record_type`` when given (which
    also yields a header for an empty sequence). Records whose layout
    differs from the columns are matched by display name; fields they lack
    render as empty cells.
    """
    resolver = resolver or default_resolver
    if record_type is not None and not resolver(record_type):
        return noop_formatter()

    def format_records(value: Any) -> str:
        records = [deref(r) for r in deref(value)]
        header = _header(records, record_type, resolver)
        if not header:
            return ""

        rows = [sep.join(header)]
        for record in records:
            rows.append(sep.join(stringify(cell) for cell in _row(record, header, resolver)))
        return delim.join(rows)

    return FuncFormatter(format_records)


def _header(records: list[Any], record_type: type | None, resolver: TagResolver) -> list[str]:
    first = next((r for r in records if is_record(r)), None)
    if first is not None and (record_type is None or type(first) is record_type):
        return [item.name for item in record_items(first, resolver)]
    if record_type is not None:
        # without an instance, embedded records cannot be expanded
        return [f.name or f.field for f in resolver(record_type)]
    return []


def _row(record: Any, header: list[str], resolver: TagResolver) -> list[Any]:
    if not is_record(record):
        return [None] * len(header)
    items = record_items(record, resolver)
    if [item.name for item in items] == header:
        return [item.value for item in items]

    by_name: dict[str, Any] = {}
    for item in items:
        by_name.setdefault(item.name, item.value)
    return [by_name.get(name) for name in header]
