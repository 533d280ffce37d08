"""Query stages that derive a new value before handing it to another writer.

Both stages first reduce the value to plain JSON data, since query engines
cannot look into records or other custom types.

- :class:`JQWriter` evaluates a jq program with the ``jq`` bindings.
- :class:`JMESPathWriter` evaluates a JMESPath expression with ``jmespath``.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, NamedTuple

import jmespath
import jq
from jmespath import functions as jmespath_functions
from jmespath.exceptions import JMESPathError

from valuefmt.codec import to_plain
from valuefmt.core import SCALAR_KINDS, Kind, classify, deref, is_composite
from valuefmt.exceptions import QueryCompileError, QueryEvaluationError, RenderError
from valuefmt.meta import TagResolver, default_resolver

from .base import ValueWriter, configure

logger = logging.getLogger(__name__)

# =============================================================================
# Arguments and error locations
# =============================================================================


class QueryArg(NamedTuple):
    """A named variable bound while evaluating a query.

    Attributes:
        key: Variable name, with or without a leading ``$``.
        value: Raw value text.
        string: If True, ``value`` is bound as a string; otherwise it is
            decoded as JSON.
    """

    key: str
    value: str
    string: bool = True

    @classmethod
    def parse(cls, kv: str, string: bool = True) -> QueryArg:
        """Parse a ``key=value`` pair.

        Raises:
            ValueError: If ``kv`` contains no ``=``.

        Examples:
            >>> QueryArg.parse("$n=5", string=False).decode()
            5
        """
        key, sep, value = kv.partition("=")
        if not sep:
            raise ValueError(f"invalid argument: {kv}")
        return cls(key, value, string)

    @property
    def name(self) -> str:
        return self.key.removeprefix("$")

    def decode(self) -> Any:
        """Return the bound value.

        Raises:
            ValueError: If a JSON value does not decode.
        """
        if self.string:
            return self.value
        return json.loads(self.value)


def locate(expr: str, offset: int) -> tuple[str, int, int]:
    """Find the line containing a 0-based offset of ``expr``.

    Returns:
        The text of that line, its 1-based number and the 1-based column.

    Examples:
        >>> locate("a |\\n b c", 6)
        (' b c', 2, 3)
    """
    line = 1
    while True:
        index = expr.find("\n")
        if index < 0 or index >= offset:
            return (expr if index < 0 else expr[:index]), line, offset + 1
        expr = expr[index + 1 :]
        offset -= index + 1
        line += 1


def compile_error(
    language: str, expr: str, line: int, column: int | None, detail: str
) -> QueryCompileError:
    """Build an error pointing at the given position of ``expr``."""
    lines = expr.split("\n")
    text = lines[min(max(line, 1), len(lines)) - 1]
    if column is None:
        message = (
            f"failed to parse {language} expression (line {line})\n    {text}\n    {detail}"
        )
    else:
        caret = " " * (column - 1) + "^"
        message = (
            f"failed to parse {language} expression (line {line}, column {column})\n"
            f"    {text}\n    {caret}  {detail}"
        )
    return QueryCompileError(message, expression=expr, line=line, column=column)


@dataclass
class QueryConfig:
    """Configuration for query stages.

    Attributes:
        raw: Write string results without JSON quotes.
    """

    raw: bool = False


def _write_results(inner: ValueWriter, results: Iterable[Any], raw: bool) -> int:
    count = 0
    try:
        for idx, result in enumerate(results):
            if idx:
                count += inner.write("\n")
            if isinstance(result, str):
                result = result if raw else json.dumps(result, ensure_ascii=False)
            elif result is None:
                result = "null"
            count += inner.write(result)
    except RenderError as err:
        err.written += count
        raise
    return count


# =============================================================================
# jq
# =============================================================================

# Defines raw, which unquotes strings and spells out null. Kept on its own
# line so reported lines are offset by exactly one.
_JQ_PRELUDE = (
    'def raw: if type == "string" then ltrimstr("\\"") | rtrimstr("\\"") '
    'elif . == null then "null" else . end;\n'
)
_JQ_PRELUDE_LINES = 1

_JQ_ERROR = re.compile(
    r"(?:jq: error: )?(?P<detail>.*?) at <top-level>, line (?P<line>\d+)"
    r"(?:, column (?P<column>\d+))?:"
)

_JQ_UNEXPECTED = re.compile(r"unexpected (?:'(?P<char>[^']+)'|(?P<token>[\w$]+))")


def jq_column(text: str, detail: str) -> int:
    """Derive a 1-based column from a jq syntax error reported without one.

    The column of the unexpected token named in ``detail`` is used when it
    appears in ``text``; an unexpected end of input points past the end of
    the line. Otherwise the first non-blank character is used.

    Examples:
        >>> jq_column(" .b | )", "syntax error, unexpected ')'")
        7
        >>> jq_column(".a |", "syntax error, unexpected end of file")
        5
    """
    match = _JQ_UNEXPECTED.search(detail)
    if match is not None:
        char = match.group("char")
        if char is not None and char in text:
            return text.index(char) + 1
        if match.group("token") in ("end", "$end"):
            return len(text.rstrip()) + 1
    return len(text) - len(text.lstrip()) + 1


def jq_compile_error(expr: str, message: str) -> QueryCompileError:
    """Build a :class:`QueryCompileError` from a jq compile error message.

    Lines reported by jq count the prelude, which is subtracted here.
    """
    match = _JQ_ERROR.search(message)
    if match is None:
        detail = message.strip().splitlines()[0] if message.strip() else "compile error"
        return compile_error("jq", expr, 1, 1, detail)

    lines = expr.split("\n")
    line = int(match.group("line")) - _JQ_PRELUDE_LINES
    line = min(max(line, 1), len(lines))
    detail = match.group("detail")
    column = match.group("column")
    if column is None:
        col = jq_column(lines[line - 1], detail)
    else:
        col = int(column)
    return compile_error("jq", expr, line, col, detail)


class JQWriter(ValueWriter):
    """Filters values through a jq program before writing the results.

    Every result is written by the inner writer, separated by newlines.
    String results are written JSON-quoted unless ``raw`` is set; null
    results are written as ``null``. Other results are plain data, rendered
    by the inner writer in its own format. ``halt`` ends the results without
    an error. ``$ENV`` and the zero-argument function ``raw`` are available.

    Args:
        inner: Writer receiving the results.
        expr: jq program.
        args: Variables bound in the program.
        config: Query configuration.
        resolver: Field resolver used to reduce records to plain data.
        **kwargs: Override config values (e.g., raw=True).

    Raises:
        QueryCompileError: If the program does not compile.
    """

    def __init__(
        self,
        inner: ValueWriter,
        expr: str,
        args: Iterable[QueryArg] = (),
        config: QueryConfig | None = None,
        *,
        resolver: TagResolver | None = None,
        **kwargs: Any,
    ):
        self.inner = inner
        self.expr = expr
        self.config = configure(config, QueryConfig, **kwargs)
        self.resolver = resolver or default_resolver

        variables: dict[str, Any] = {}
        for arg in args:
            try:
                variables[arg.name] = arg.decode()
            except ValueError as err:
                raise QueryCompileError(
                    f"invalid JSON value for ${arg.name}: {err}", expression=expr
                ) from err

        try:
            self.program = jq.compile(_JQ_PRELUDE + expr, args=variables)
        except ValueError as err:
            raise jq_compile_error(expr, str(err)) from err
        logger.debug("Compiled jq program %r", expr)

    @property
    def name(self) -> str:
        return "jq"

    def write(self, value: Any) -> int:
        value = deref(value)
        if value is None:
            return 0

        plain = to_plain(value, self.resolver)
        try:
            results = self.program.input_value(plain).all()
        except ValueError as err:
            raise QueryEvaluationError(
                str(err).removeprefix("jq: error: "), context={"expression": self.expr}
            ) from err
        return _write_results(self.inner, results, self.config.raw)


# =============================================================================
# JMESPath
# =============================================================================


class _Functions(jmespath_functions.Functions):
    @jmespath_functions.signature({"types": []})
    def _func_raw(self, value):
        if isinstance(value, str):
            return value.strip('"')
        if value is None:
            return "null"
        return value


_OPTIONS = jmespath.Options(custom_functions=_Functions())


class JMESPathWriter(ValueWriter):
    """Searches values with a JMESPath expression before writing the result.

    Scalars and sequences of scalars are written unchanged. The function
    ``raw(@)`` unquotes strings and spells out null.

    Raises:
        QueryCompileError: If the expression does not compile.
    """

    def __init__(
        self,
        inner: ValueWriter,
        expr: str,
        *,
        resolver: TagResolver | None = None,
    ):
        self.inner = inner
        self.expr = expr
        self.resolver = resolver or default_resolver
        try:
            self.parsed = jmespath.compile(expr)
        except JMESPathError as err:
            offset = getattr(err, "lex_position", None)
            if offset is None:
                offset = getattr(err, "lexer_position", 0)
            detail = getattr(err, "message", None) or getattr(err, "msg", None) or str(err)
            _, line, column = locate(expr, offset)
            raise compile_error("jmespath", expr, line, column, detail) from err
        logger.debug("Compiled JMESPath expression %r", expr)

    @property
    def name(self) -> str:
        return "jmespath"

    def write(self, value: Any) -> int:
        value = deref(value)
        if value is None:
            return 0

        kind = classify(value)
        if not is_composite(kind):
            return self.inner.write(value)
        if kind is Kind.SEQUENCE and all(classify(deref(e)) in SCALAR_KINDS for e in value):
            return self.inner.write(value)

        try:
            result = self.parsed.search(to_plain(value, self.resolver), options=_OPTIONS)
        except JMESPathError as err:
            raise QueryEvaluationError(str(err), context={"expression": self.expr}) from err
        return self.inner.write(result)
