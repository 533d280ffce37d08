"""Elastic tab-stop column alignment.

Text written to a :class:`TabAligner` is a sequence of cells. A cell is
terminated by a tab; the text after the last tab of a line is not part of any
column and is never padded. A column block is a run of consecutive lines that
all have a cell in that column, and every cell in the block is padded to the
width of the widest one (plus padding, but at least ``minwidth``).

Examples:
    >>> align("a\\tb\\t\\nccc\\td\\t\\n")
    'a   b   \\nccc d   \\n'
"""

from __future__ import annotations

import io
import re
from typing import Any, TextIO

from .base import Formatter, FuncFormatter

_CELL_END = re.compile(r"[\t\n]")


class TabAligner:
    """Buffers tab-separated text and writes it column-aligned on flush.

    Args:
        stream: Text stream receiving the aligned output.
        minwidth: Minimal cell width including padding.
        tabwidth: Width of a tab character, used when ``padchar`` is a tab.
        padding: Padding added to the widest cell of a column.
        padchar: Character used for padding. With ``"\\t"``, cells are padded
            with tabs up to the next multiple of ``tabwidth``.
    """

    def __init__(
        self,
        stream: TextIO,
        minwidth: int = 4,
        tabwidth: int = 4,
        padding: int = 1,
        padchar: str = " ",
    ):
        if minwidth < 0 or tabwidth < 0 or padding < 0:
            raise ValueError("minwidth, tabwidth and padding must not be negative")
        if len(padchar) != 1:
            raise ValueError(f"padchar must be a single character, got {padchar!r}")
        self.stream = stream
        self.minwidth = minwidth
        self.tabwidth = tabwidth
        self.padding = padding
        self.padchar = padchar
        self._reset()

    def _reset(self) -> None:
        self._lines: list[list[str]] = [[]]
        self._cell = ""

    def _terminate_cell(self) -> None:
        self._lines[-1].append(self._cell)
        self._cell = ""

    def write(self, text: str) -> int:
        """Buffer ``text``; nothing reaches the stream before :meth:`flush`."""
        start = 0
        for match in _CELL_END.finditer(text):
            self._cell += text[start : match.start()]
            start = match.end()
            self._terminate_cell()
            if match.group() == "\n":
                self._lines.append([])
        self._cell += text[start:]
        return len(text)

    def flush(self) -> int:
        """Align all buffered text, write it to the stream and reset.

        Returns:
            Number of characters written to the stream.
        """
        if self._cell:
            self._terminate_cell()
        out: list[str] = []
        self._format(out, [], 0, len(self._lines))
        self._reset()

        text = "".join(out)
        if not text:
            return 0
        n = self.stream.write(text)
        return len(text) if n is None else n

    def _format(self, out: list[str], widths: list[int], line0: int, line1: int) -> None:
        column = len(widths)
        this = line0
        while this < line1:
            if column >= len(self._lines[this]) - 1:
                this += 1
                continue

            # a column block starts here; lines before it are done
            self._write_lines(out, widths, line0, this)
            line0 = this

            width = self.minwidth
            while this < line1:
                line = self._lines[this]
                if column >= len(line) - 1:
                    break
                width = max(width, len(line[column]) + self.padding)
                this += 1

            self._format(out, widths + [width], line0, this)
            line0 = this

        self._write_lines(out, widths, line0, line1)

    def _write_lines(self, out: list[str], widths: list[int], line0: int, line1: int) -> None:
        for i in range(line0, line1):
            for j, cell in enumerate(self._lines[i]):
                out.append(cell)
                if j < len(widths):
                    out.append(self._pad(len(cell), widths[j]))
            if i + 1 < len(self._lines):
                out.append("\n")

    def _pad(self, textw: int, cellw: int) -> str:
        if self.padchar == "\t":
            if self.tabwidth == 0:
                return ""
            cellw = -(-cellw // self.tabwidth) * self.tabwidth
            return "\t" * -(-(cellw - textw) // self.tabwidth)
        return self.padchar * (cellw - textw)


def align(text: str, **opts: Any) -> str:
    """Return ``text`` with its tab-separated columns aligned.

    Keyword arguments are passed to :class:`TabAligner`.
    """
    buf = io.StringIO()
    aligner = TabAligner(buf, **opts)
    aligner.write(text)
    aligner.flush()
    return buf.getvalue()


def as_tab(formatter: Formatter, **opts: Any) -> Formatter:
    """Wrap a formatter so that its tab-separated output is column-aligned."""

    def format_aligned(value: Any) -> str:
        return align(formatter.format(value), **opts)

    return FuncFormatter(format_aligned)


def format_tab(aligner: TabAligner, formatter: Formatter, value: Any) -> int:
    """Format ``value`` and write it column-aligned through ``aligner``.

    Returns:
        Number of characters written to the aligner's stream.
    """
    aligner.write(formatter.format(value))
    return aligner.flush()
