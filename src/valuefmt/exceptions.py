"""Exception hierarchy for valuefmt."""

from __future__ import annotations

from typing import Any, Mapping


class RenderError(Exception):
    """Base exception for all rendering failures.

    Attributes:
        context: Extra details about the failure (type names, expressions, ...).
        written: Number of characters already written to the output stream
            when the failure occurred. Written output is never rolled back.
    """

    context: dict[str, Any]
    written: int

    def __init__(
        self,
        message: str = "",
        *,
        context: Mapping[str, Any] | None = None,
        written: int = 0,
    ) -> None:
        super().__init__(message)
        self.context = dict(context) if context is not None else {}
        self.written = written


class UnsupportedTypeError(RenderError, TypeError):
    """Raised when a value cannot be handled by a formatter or encoder.

    The override registry raises it to signal "no formatter registered", which
    writers treat as a request to fall back to generic rendering.
    """

    def __init__(self, message: str = "unsupported type", **kwargs: Any) -> None:
        RenderError.__init__(self, message, **kwargs)


class EncodingError(RenderError, ValueError):
    """Raised when an underlying codec (JSON, YAML, template) fails."""


class RenderDepthError(RenderError, RecursionError):
    """Raised when nesting or reference chains exceed the configured depth."""


class QueryCompileError(RenderError, ValueError):
    """Raised when a query expression cannot be parsed.

    Attributes:
        expression: The expression as given by the caller.
        line: 1-based line of the error, if known.
        column: 1-based column of the error, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(
            message,
            context={"expression": expression, "line": line, "column": column},
        )
        self.expression = expression
        self.line = line
        self.column = column


class QueryEvaluationError(RenderError, ValueError):
    """Raised when a query expression fails at runtime."""


__all__ = [
    "RenderError",
    "UnsupportedTypeError",
    "EncodingError",
    "RenderDepthError",
    "QueryCompileError",
    "QueryEvaluationError",
]
