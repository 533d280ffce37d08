"""Writers rendering arbitrary values onto text streams.

All writers share one contract: ``write(value)`` renders the value and
returns the number of characters written. Query stages wrap another writer
and derive the value to write from a query expression.
"""

from __future__ import annotations

from typing import Any, Callable, TextIO

from .base import DocumentWriter, StreamWriter, ValueWriter, configure
from .highlight import DEFAULT_THEME, NOOP_THEME, THEMES, highlight, resolve_theme
from .json_writer import JSONConfig, JSONWriter, auto_json
from .passthrough import PassthroughWriter
from .query import JMESPathWriter, JQWriter, QueryArg, QueryConfig, locate
from .table import TableConfig, TableWriter
from .template import TemplateWriter
from .text import TextConfig, TextWriter
from .yaml_writer import YAMLConfig, YAMLWriter

__all__ = [
    "ValueWriter",
    "StreamWriter",
    "DocumentWriter",
    "JSONWriter",
    "JSONConfig",
    "YAMLWriter",
    "YAMLConfig",
    "TextWriter",
    "TextConfig",
    "TableWriter",
    "TableConfig",
    "PassthroughWriter",
    "TemplateWriter",
    "JQWriter",
    "JMESPathWriter",
    "QueryArg",
    "QueryConfig",
    "DEFAULT_THEME",
    "NOOP_THEME",
    "THEMES",
    "auto_json",
    "configure",
    "highlight",
    "locate",
    "resolve_theme",
    "get_writer",
    "register_writer",
    "list_writers",
]


# Registry mapping writer names to the callables creating them
_WRITER_REGISTRY: dict[str, Callable[..., StreamWriter]] = {
    "json": JSONWriter,
    "pretty-json": JSONWriter.pretty,
    "yaml": YAMLWriter,
    "pretty-yaml": YAMLWriter.pretty,
    "text": TextWriter,
    "tab": TableWriter,
    "raw": PassthroughWriter,
    "template": TemplateWriter,
}


def get_writer(name: str, stream: TextIO, **kwargs: Any) -> StreamWriter:
    """Get a writer instance by name.

    Args:
        name: The name of the writer to instantiate
        stream: The text stream to write to
        **kwargs: Additional keyword arguments to pass to the writer constructor

    Returns:
        An instance of the requested writer

    Raises:
        ValueError: If the writer name is not registered

    Examples:
        >>> writer = get_writer("json", sys.stdout)
        >>> writer = get_writer("text", sys.stdout, config=TextConfig(sep="="))
    """
    if name not in _WRITER_REGISTRY:
        available = ", ".join(sorted(_WRITER_REGISTRY.keys()))
        raise ValueError(f"Unknown writer: {name!r}. Available writers: {available}")

    factory = _WRITER_REGISTRY[name]
    return factory(stream, **kwargs)


def register_writer(name: str, writer_cls: type[StreamWriter]) -> None:
    """Register a new writer class.

    This allows users to add custom output formats.

    Args:
        name: The unique name to register the writer under
        writer_cls: The StreamWriter subclass to register

    Raises:
        TypeError: If writer_cls is not a subclass of StreamWriter
        ValueError: If the name is already registered

    Examples:
        >>> class UpperWriter(StreamWriter):
        ...     @property
        ...     def name(self):
        ...         return "upper"
        ...     def render(self, value, depth):
        ...         return self._emit(str(value).upper())
        >>> register_writer("upper", UpperWriter)
    """
    if not isinstance(writer_cls, type) or not issubclass(writer_cls, StreamWriter):
        raise TypeError(f"writer_cls must be a subclass of StreamWriter, got {type(writer_cls)}")

    if name in _WRITER_REGISTRY:
        raise ValueError(f"Writer {name!r} is already registered")

    _WRITER_REGISTRY[name] = writer_cls


def list_writers() -> list[str]:
    """List all registered writer names.

    Returns:
        Sorted list of registered writer names

    Examples:
        >>> list_writers()
        ['json', 'pretty-json', 'pretty-yaml', 'raw', 'tab', 'template', 'text', 'yaml']
    """
    return sorted(_WRITER_REGISTRY.keys())
