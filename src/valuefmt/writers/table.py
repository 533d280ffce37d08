"""Column-aligned table writer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from valuefmt.core import Kind, classify, deref, stringify
from valuefmt.formatters import (
    Formatter,
    TabAligner,
    format_tab,
    from_map,
    from_map_slice,
    from_record,
    from_record_slice,
)

from .base import StreamWriter

_SEP = "\t"
_DELIM = "\t\n"


@dataclass
class TableConfig:
    """Configuration for the table writer.

    Attributes:
        minwidth: Minimal column width including padding.
        tabwidth: Tab width, used when padding with tabs.
        padding: Spaces added after the widest cell of a column.
        padchar: Padding character.
    """

    minwidth: int = 4
    tabwidth: int = 4
    padding: int = 1
    padchar: str = " "


class TableWriter(StreamWriter):
    """Writes values as column-aligned tables.

    - a record becomes one ``name value`` row per field;
    - a sequence of records becomes a header row of field names followed by
      one row per record;
    - a sequence of maps becomes a header row of the first map's keys
      followed by one row per map;
    - a map becomes one ``key value`` row per entry;
    - any other sequence is written one element per line, unaligned.

    Examples:
        >>> import io
        >>> buf = io.StringIO()
        >>> TableWriter(buf).write([{"a": 1, "b": 2}, {"b": 3, "a": 4}])
        22
        >>> buf.getvalue()
        'a   b   \\n1   2   \\n4   3'
    """

    config_class = TableConfig

    @property
    def name(self) -> str:
        return "tab"

    def render(self, value: Any, depth: int) -> int:
        kind = classify(value)
        if kind is Kind.RECORD:
            return self._write_table(from_record(_SEP, _DELIM, resolver=self.resolver), value)
        if kind is Kind.MAP:
            return self._write_table(from_map(_SEP, _DELIM), value)
        if kind is not Kind.SEQUENCE:
            return self._emit(stringify(value))

        elems = list(value)
        if not elems:
            return 0
        first = classify(deref(elems[0], self.max_depth))
        if first is Kind.RECORD:
            return self._write_table(from_record_slice(_SEP, _DELIM, resolver=self.resolver), elems)
        if first is Kind.MAP:
            return self._write_table(from_map_slice(_SEP, _DELIM), elems)
        return self._emit("\n".join(stringify(elem) for elem in elems))

    def _write_table(self, formatter: Formatter, value: Any) -> int:
        cfg = self.config
        aligner = TabAligner(
            self.stream,
            minwidth=cfg.minwidth,
            tabwidth=cfg.tabwidth,
            padding=cfg.padding,
            padchar=cfg.padchar,
        )
        return format_tab(aligner, formatter, value)
