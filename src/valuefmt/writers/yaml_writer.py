"""YAML writer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TextIO

import yaml

from valuefmt.codec import to_plain
from valuefmt.exceptions import EncodingError

from .base import DocumentWriter
from .highlight import DEFAULT_THEME


@dataclass
class YAMLConfig:
    """Configuration for the YAML writer.

    Attributes:
        indent: Number of spaces per nesting level.
        theme: Highlighting theme. Empty disables highlighting.
    """

    indent: int = 2
    theme: str = ""


class _IndentedDumper(yaml.SafeDumper):
    """Indents block sequences nested in mappings."""

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


class YAMLWriter(DocumentWriter):
    """Writes composites as block-style YAML and scalars as plain text.

    Record fields are named by their ``yaml`` tag. Mapping order is kept.
    """

    config_class = YAMLConfig
    tag_name = "yaml"
    lexer = "yaml"

    @classmethod
    def pretty(cls, stream: TextIO, **kwargs: Any) -> YAMLWriter:
        """Create a writer highlighted with the default theme."""
        return cls(stream, YAMLConfig(theme=DEFAULT_THEME), **kwargs)

    @property
    def name(self) -> str:
        return "yaml"

    def encode(self, value: Any) -> str:
        plain = to_plain(value, self.resolver, strict_keys=False, max_depth=self.max_depth)
        try:
            return yaml.dump(
                plain,
                Dumper=_IndentedDumper,
                indent=self.config.indent,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                width=float("inf"),
            )
        except yaml.YAMLError as err:
            raise EncodingError(str(err), context={"format": "yaml"}) from err
