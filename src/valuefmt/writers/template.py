"""Jinja2 template writer."""

from __future__ import annotations

import json
from typing import Any, TextIO

from jinja2 import BaseLoader, Environment, TemplateError

from valuefmt.codec import to_plain
from valuefmt.core import Kind, classify, stringify
from valuefmt.exceptions import EncodingError

from .base import StreamWriter


class TemplateWriter(StreamWriter):
    """Renders each value through a Jinja2 template.

    The value is bound as ``value``. String keys of a map value are also
    available as top-level names. Two filters are added: ``stringify``
    (plain text, as the text writer prints scalars) and ``json`` (compact
    JSON).

    Examples:
        >>> import io
        >>> buf = io.StringIO()
        >>> TemplateWriter(buf, "{{ name }} is {{ age }}").write({"name": "Ann", "age": 7})
        8
        >>> buf.getvalue()
        'Ann is 7'

    Raises:
        EncodingError: If the template does not compile.
    """

    def __init__(self, stream: TextIO, template: str, **kwargs: Any):
        super().__init__(stream, **kwargs)
        self.env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["stringify"] = stringify
        self.env.filters["json"] = self._to_json
        try:
            self.template = self.env.from_string(template)
        except TemplateError as err:
            raise EncodingError(
                f"template does not compile: {err}", context={"format": "template"}
            ) from err

    @property
    def name(self) -> str:
        return "template"

    def _to_json(self, value: Any) -> str:
        return json.dumps(to_plain(value, self.resolver), ensure_ascii=False, separators=(",", ":"))

    def render(self, value: Any, depth: int) -> int:
        context: dict[str, Any] = {}
        if classify(value) is Kind.MAP:
            context.update((k, v) for k, v in value.items() if isinstance(k, str))
        context["value"] = value

        try:
            text = self.template.render(context)
        except TemplateError as err:
            raise EncodingError(
                f"template rendering failed: {err}", context={"format": "template"}
            ) from err
        return self._emit(text)
