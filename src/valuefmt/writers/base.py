"""Base classes for value writers."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, ClassVar, TextIO

from valuefmt.core import DEFAULT_MAX_DEPTH, Kind, classify, deref, is_composite, stringify
from valuefmt.exceptions import RenderDepthError, RenderError, UnsupportedTypeError
from valuefmt.formatters import CompositeFormatter
from valuefmt.meta import TagResolver

from .highlight import highlight, resolve_theme


class ValueWriter(ABC):
    """Abstract base class for value writers.

    A writer renders one value per :meth:`write` call. Writers never modify
    the value, not even temporarily, and never keep it after the call.
    A single writer instance must not be used from multiple threads at once.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name of this writer."""
        pass

    @abstractmethod
    def write(self, value: Any) -> int:
        """Render a value.

        Args:
            value: Any value, None included.

        Returns:
            Number of characters written.

        Raises:
            RenderError: If the value cannot be rendered. ``written`` holds the
                number of characters that were already written.
        """
        pass


def configure(config: Any, default_cls: type, **kwargs: Any) -> Any:
    """Return a copy of ``config`` (or a default one) with keyword overrides.

    Keys that are not attributes of the config are ignored.
    """
    config = copy.copy(config) if config is not None else default_cls()

    # kwargs override config values
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config


class StreamWriter(ValueWriter):
    """Writer rendering values onto a text stream.

    :meth:`write` runs the same steps for every format:

    1. ``None`` writes nothing.
    2. A formatter registered in :attr:`overrides` for the value's type
       renders it verbatim. If that formatter raises
       :class:`UnsupportedTypeError`, rendering falls through.
    3. References render as their target.
    4. Everything else is handed to :meth:`render`.

    Attributes:
        stream: Destination text stream.
        config: Format configuration, read once per call.
        overrides: Type-keyed formatters owned by this writer.
        resolver: Field resolver for records.
        max_depth: Maximum nesting depth before :class:`RenderDepthError`.
    """

    config_class: ClassVar[type | None] = None
    tag_name: ClassVar[str] = "json"

    def __init__(
        self,
        stream: TextIO,
        config: Any = None,
        *,
        overrides: CompositeFormatter | None = None,
        resolver: TagResolver | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        **kwargs: Any,
    ):
        self.stream = stream
        if self.config_class is not None:
            self.config = configure(config, self.config_class, **kwargs)
        self.overrides = overrides if overrides is not None else CompositeFormatter()
        self.resolver = resolver or TagResolver(self.tag_name)
        self.max_depth = max_depth

    def write(self, value: Any) -> int:
        return self._write(value, 0)

    def _write(self, value: Any, depth: int) -> int:
        if depth > self.max_depth:
            raise RenderDepthError(
                f"value nesting exceeds maximum depth of {self.max_depth}",
                context={"max_depth": self.max_depth},
            )
        if value is None:
            return 0

        try:
            text = self.overrides.format(value)
        except UnsupportedTypeError:
            pass
        else:
            return self._emit(text)

        if classify(value) is Kind.REF:
            return self._write(deref(value, self.max_depth), depth + 1)
        return self.render(value, depth)

    @abstractmethod
    def render(self, value: Any, depth: int) -> int:
        """Render a value that is neither None, overridden nor a reference."""
        pass

    def _emit(self, text: str) -> int:
        if not text:
            return 0
        n = self.stream.write(text)
        return len(text) if n is None else n


class DocumentWriter(StreamWriter):
    """Writer for structured documents such as JSON and YAML.

    Scalars are written as plain text. Composites are encoded by
    :meth:`encode` and highlighted with the configured theme. Subclass
    configs must provide a ``theme`` attribute.
    """

    lexer: ClassVar[str] = ""

    def render(self, value: Any, depth: int) -> int:
        if not is_composite(classify(value)):
            return self._emit(stringify(value))

        source = self.encode(value).removesuffix("\n")
        theme = resolve_theme(self.config.theme)
        if theme is not None:
            source = highlight(source, self.lexer, theme)
        return self._emit(source)

    @abstractmethod
    def encode(self, value: Any) -> str:
        """Encode a composite value as a document.

        Raises:
            EncodingError: If the codec fails.
            UnsupportedTypeError: If the value cannot be represented.
        """
        pass


def write_joined(writer: StreamWriter, values: Any, delim: str, depth: int) -> int:
    """Write each value through ``writer`` with ``delim`` in between.

    On failure, the characters written so far are added to the error's
    ``written`` count.
    """
    count = 0
    try:
        for idx, value in enumerate(values):
            if idx:
                count += writer._emit(delim)
            count += writer._write(value, depth)
    except RenderError as err:
        err.written += count
        raise
    return count
