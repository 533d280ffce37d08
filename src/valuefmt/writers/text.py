"""Plain delimited text writer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from valuefmt.core import Kind, classify, has_custom_str, stringify
from valuefmt.exceptions import RenderError
from valuefmt.formatters import from_record

from .base import StreamWriter, write_joined


@dataclass
class TextConfig:
    """Configuration for the text writer.

    Attributes:
        sep: Separator between a key and its value.
        delim: Delimiter between entries.
    """

    sep: str = ":"
    delim: str = "\n"


class TextWriter(StreamWriter):
    """Writes values as plain text.

    Records with their own ``__str__`` are written with it, other records
    as ``name<sep>value`` entries. Sequence elements and map entries
    (``key<sep>value``) are written one by one, separated by ``delim``.
    Everything else is stringified.

    Examples:
        >>> import io
        >>> buf = io.StringIO()
        >>> TextWriter(buf, sep="=", delim=", ").write({"a": 1, "b": [2, 3]})
        11
        >>> buf.getvalue()
        'a=1, b=2, 3'
    """

    config_class = TextConfig

    @property
    def name(self) -> str:
        return "text"

    def render(self, value: Any, depth: int) -> int:
        kind = classify(value)
        sep, delim = self.config.sep, self.config.delim

        if kind is Kind.RECORD:
            if has_custom_str(value):
                return self._emit(str(value))
            return self._emit(from_record(sep, delim, resolver=self.resolver).format(value))
        if kind is Kind.SEQUENCE:
            return write_joined(self, value, delim, depth + 1)
        if kind is Kind.MAP:
            count = 0
            try:
                for idx, (key, val) in enumerate(value.items()):
                    if idx:
                        count += self._emit(delim)
                    count += self._write(key, depth + 1)
                    count += self._emit(sep)
                    count += self._write(val, depth + 1)
            except RenderError as err:
                err.written += count
                raise
            return count
        return self._emit(stringify(value))
