"""Formatters turning single values into strings.

Formatters are the building blocks of the writers: the override registry
(:class:`CompositeFormatter`) maps types to custom formatters, and the
decomposers lay out maps, records and sequences of them as delimited text.
"""

from __future__ import annotations

from .base import Formatter, FuncFormatter, as_formatter, noop_formatter
from .composite import CompositeFormatter
from .maps import from_map, from_map_keys, from_map_slice, from_map_slice_keys
from .records import from_record, from_record_slice
from .table import TabAligner, align, as_tab, format_tab

__all__ = [
    "Formatter",
    "FuncFormatter",
    "CompositeFormatter",
    "TabAligner",
    "align",
    "as_formatter",
    "as_tab",
    "format_tab",
    "from_map",
    "from_map_keys",
    "from_map_slice",
    "from_map_slice_keys",
    "from_record",
    "from_record_slice",
    "noop_formatter",
]
