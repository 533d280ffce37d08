"""Tests for the jq and JMESPath query stages."""

import io
from dataclasses import dataclass, field

import pytest

from valuefmt import QueryCompileError, QueryEvaluationError, Ref, tag
from valuefmt.writers import (
    JMESPathWriter,
    JQWriter,
    JSONWriter,
    QueryArg,
    TextWriter,
    YAMLWriter,
    locate,
)
from valuefmt.writers.query import jq_column, jq_compile_error


@dataclass
class User:
    name: str = field(metadata=tag(json="username"))
    mail: str = field(metadata=tag(json="email"))


DATA = {"a": 1, "b": {"c": ["x", "y"]}, "s": "str", "n": None}


def run(stage_cls, inner_cls, expr, value, **kwargs):
    buf = io.StringIO()
    n = stage_cls(inner_cls(buf), expr, **kwargs).write(value)
    assert n == len(buf.getvalue())
    return buf.getvalue()


class TestQueryArg:
    """Test query variable parsing."""

    def test_parse(self):
        arg = QueryArg.parse("$x=a=b")
        assert arg == QueryArg("$x", "a=b", True)
        assert arg.name == "x"
        assert arg.decode() == "a=b"

    def test_parse_json(self):
        arg = QueryArg.parse("y={\"k\": 1}", string=False)
        assert arg.name == "y"
        assert arg.decode() == {"k": 1}

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            QueryArg.parse("novalue")

    def test_decode_invalid(self):
        with pytest.raises(ValueError):
            QueryArg("x", "{", string=False).decode()


class TestLocate:
    """Test mapping offsets onto lines."""

    def test_first_line(self):
        assert locate("abc", 1) == ("abc", 1, 2)

    def test_later_line(self):
        assert locate("a |\n b c", 6) == (" b c", 2, 3)

    def test_offset_at_end(self):
        assert locate("ab\ncd", 5) == ("cd", 2, 3)


class TestJQErrorPosition:
    """Test positions of jq compile errors reported without a column."""

    def test_unexpected_character(self):
        assert jq_column(" .b | )", "syntax error, unexpected ')'") == 7

    def test_unexpected_end(self):
        assert jq_column(".a |", "syntax error, unexpected end of file") == 5
        assert jq_column(".a |", "syntax error, unexpected $end") == 5

    def test_unknown_token(self):
        assert jq_column("  .a ?? .b", "syntax error, unexpected INVALID_CHARACTER") == 3

    def test_line_without_column(self):
        message = (
            "jq: error: syntax error, unexpected ')' (Unix shell quoting issues?) "
            "at <top-level>, line 3:\n .b | )\njq: 1 compile error"
        )
        err = jq_compile_error(".a |\n .b | )", message)
        assert (err.line, err.column) == (2, 7)
        assert "(line 2, column 7)" in str(err)
        assert "     .b | )\n          ^" in str(err)

    def test_line_and_column(self):
        message = "jq: error: syntax error, unexpected ')' at <top-level>, line 2, column 4:"
        err = jq_compile_error(".a )", message)
        assert (err.line, err.column) == (1, 4)

    def test_unrecognized_message(self):
        err = jq_compile_error(".a", "something odd")
        assert (err.line, err.column) == (1, 1)


class TestJQWriter:
    """Test filtering values through jq."""

    def test_yaml_inner(self):
        assert run(JQWriter, YAMLWriter, ".b", DATA) == "c:\n  - x\n  - y"

    def test_json_inner(self):
        assert run(JQWriter, JSONWriter, ".b", DATA) == '{"c":["x","y"]}'

    def test_string_results(self):
        assert run(JQWriter, TextWriter, ".s", DATA) == '"str"'
        assert run(JQWriter, TextWriter, ".s", DATA, raw=True) == "str"

    def test_null_results(self):
        assert run(JQWriter, TextWriter, ".n", DATA) == "null"
        assert run(JQWriter, TextWriter, ".n | raw", DATA, raw=True) == "null"

    def test_multiple_results(self):
        assert run(JQWriter, TextWriter, ".a, .b.c[]", DATA) == '1\n"x"\n"y"'

    def test_no_results(self):
        assert run(JQWriter, TextWriter, "empty", DATA) == ""

    def test_halt(self):
        assert run(JQWriter, TextWriter, "1, halt, 2", DATA) == "1"

    def test_args(self):
        args = [QueryArg.parse("x=a"), QueryArg.parse("$y={\"k\":1}", string=False)]
        assert run(JQWriter, TextWriter, "$x, $y", DATA, args=args, raw=True) == "a\nk:1"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("VALUEFMT_TEST", "hi")
        assert run(JQWriter, TextWriter, "$ENV.VALUEFMT_TEST", DATA, raw=True) == "hi"

    def test_records_and_references(self):
        user = User("John Doe", "john.doe@local")
        assert run(JQWriter, TextWriter, ".username", Ref(user), raw=True) == "John Doe"

    def test_none(self):
        assert run(JQWriter, TextWriter, ".", None) == ""

    def test_empty_reference(self):
        assert run(JQWriter, TextWriter, ".", Ref()) == ""
        assert run(JQWriter, TextWriter, ".", Ref(Ref())) == ""

    def test_compile_error(self):
        with pytest.raises(QueryCompileError) as excinfo:
            JQWriter(TextWriter(io.StringIO()), ".a |\n .b | )")
        err = excinfo.value
        assert err.line == 2
        assert isinstance(err.column, int)
        assert err.column >= 1
        assert err.expression == ".a |\n .b | )"
        assert "failed to parse jq expression (line 2, column " in str(err)
        assert "^" in str(err)

    def test_invalid_json_arg(self):
        with pytest.raises(QueryCompileError):
            JQWriter(TextWriter(io.StringIO()), "$x", args=[QueryArg("x", "{", string=False)])

    def test_evaluation_error(self):
        writer = JQWriter(TextWriter(io.StringIO()), ".s + 1")
        with pytest.raises(QueryEvaluationError) as excinfo:
            writer.write(DATA)
        assert "cannot be added" in str(excinfo.value)
        assert not str(excinfo.value).startswith("jq: error")

    def test_idempotent(self):
        buf = io.StringIO()
        writer = JQWriter(TextWriter(buf), ".a")
        assert writer.write(DATA) == writer.write(DATA) == 1
        assert buf.getvalue() == "11"


class TestJMESPathWriter:
    """Test searching values with JMESPath."""

    def test_search(self):
        buf = io.StringIO()
        n = JMESPathWriter(TextWriter(buf), "b").write(Ref({"a": 1, "b": 2}))
        assert n == 1
        assert buf.getvalue() == "2"

    def test_nested_result(self):
        assert run(JMESPathWriter, YAMLWriter, "b", DATA) == "c:\n  - x\n  - y"

    def test_scalars_pass_through(self):
        assert run(JMESPathWriter, TextWriter, "foo", 5) == "5"
        assert run(JMESPathWriter, TextWriter, "foo", "bar") == "bar"
        assert run(JMESPathWriter, TextWriter, "foo", [1, "a"]) == "1\na"

    def test_none(self):
        assert run(JMESPathWriter, TextWriter, "foo", None) == ""
        assert run(JMESPathWriter, TextWriter, "foo", Ref()) == ""

    def test_missing_key(self):
        assert run(JMESPathWriter, TextWriter, "missing", DATA) == ""

    def test_records(self):
        user = User("John Doe", "john.doe@local")
        assert run(JMESPathWriter, TextWriter, "email", user) == "john.doe@local"

    def test_raw_function(self):
        assert run(JMESPathWriter, TextWriter, "raw(n)", DATA) == "null"
        assert run(JMESPathWriter, TextWriter, "raw(s)", {"s": '"q"'}) == "q"

    def test_compile_error_position(self):
        with pytest.raises(QueryCompileError) as excinfo:
            JMESPathWriter(TextWriter(io.StringIO()), "foo\n| ~")
        err = excinfo.value
        assert (err.line, err.column) == (2, 3)
        assert "failed to parse jmespath expression (line 2, column 3)" in str(err)
        assert "    | ~\n      ^" in str(err)

    def test_incomplete_expression(self):
        with pytest.raises(QueryCompileError) as excinfo:
            JMESPathWriter(TextWriter(io.StringIO()), "foo.")
        assert excinfo.value.line == 1

    def test_evaluation_error(self):
        writer = JMESPathWriter(TextWriter(io.StringIO()), "abs(@)")
        with pytest.raises(QueryEvaluationError):
            writer.write({"a": 1})
