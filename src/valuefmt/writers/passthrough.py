"""Write-through writer."""

from __future__ import annotations

from typing import Any

from valuefmt.core import stringify

from .base import StreamWriter


class PassthroughWriter(StreamWriter):
    """Writes the plain text of every value, composites included."""

    @property
    def name(self) -> str:
        return "raw"

    def render(self, value: Any, depth: int) -> int:
        return self._emit(stringify(value))
