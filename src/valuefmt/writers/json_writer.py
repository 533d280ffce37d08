"""JSON writer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, TextIO

from valuefmt.codec import to_plain
from valuefmt.exceptions import EncodingError

from .base import DocumentWriter
from .highlight import DEFAULT_THEME


@dataclass
class JSONConfig:
    """Configuration for the JSON writer.

    Attributes:
        indent: Indentation string. Empty produces compact output.
        theme: Highlighting theme. Empty disables highlighting.
    """

    indent: str = ""
    theme: str = ""


class JSONWriter(DocumentWriter):
    """Writes composites as JSON and scalars as plain text.

    HTML-sensitive characters (``<``, ``>``, ``&``) are written literally and
    non-ASCII text is not escaped. Map keys must be strings or integers.

    Examples:
        >>> import io
        >>> buf = io.StringIO()
        >>> JSONWriter(buf).write({"a": [1, "<b>"]})
        15
        >>> buf.getvalue()
        '{"a":[1,"<b>"]}'
    """

    config_class = JSONConfig
    lexer = "json"

    @classmethod
    def pretty(cls, stream: TextIO, **kwargs: Any) -> JSONWriter:
        """Create a writer with two-space indentation and the default theme."""
        return cls(stream, JSONConfig(indent="  ", theme=DEFAULT_THEME), **kwargs)

    @property
    def name(self) -> str:
        return "json"

    def encode(self, value: Any) -> str:
        plain = to_plain(value, self.resolver, max_depth=self.max_depth)
        indent = self.config.indent or None
        try:
            return json.dumps(
                plain,
                ensure_ascii=False,
                allow_nan=False,
                indent=indent,
                separators=(",", ": ") if indent else (",", ":"),
            )
        except ValueError as err:
            raise EncodingError(str(err), context={"format": "json"}) from err


def auto_json(stream: TextIO, **kwargs: Any) -> JSONWriter:
    """Create a pretty JSON writer for terminals and a compact one otherwise."""
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return JSONWriter.pretty(stream, **kwargs)
    return JSONWriter(stream, **kwargs)
