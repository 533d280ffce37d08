"""Tests for the valuefmt command line interface."""

import io

import pytest

from valuefmt.cli import build_parser, main, read_record

INPUT = '{"a": 1}\n{"b": "x"}\nc=d\nnoise\n'


def run_cli(*argv, stdin=INPUT):
    out = io.StringIO()
    code = main(list(argv), stdin=io.StringIO(stdin), stdout=out)
    return code, out.getvalue()


class TestReadRecord:
    """Test collecting the input record."""

    def test_merge(self):
        assert read_record(io.StringIO(INPUT)) == {"a": 1, "b": "x", "c": "d"}

    def test_later_lines_win(self):
        assert read_record(io.StringIO('{"a": 1}\na=2\n')) == {"a": "2"}

    def test_ignores_non_objects(self):
        assert read_record(io.StringIO("[1, 2]\n42\n\n")) == {}


class TestMain:
    """Test rendering through main()."""

    def test_json(self):
        assert run_cli() == (0, '[{"a":1,"b":"x","c":"d"}]\n')

    def test_pretty_json_without_theme(self):
        code, out = run_cli("-f", "pretty-json", "--theme", "noop", stdin='{"a": 1}\n')
        assert code == 0
        assert out == '[\n  {\n    "a": 1\n  }\n]\n'

    def test_yaml(self):
        assert run_cli("--format", "yaml", stdin="a=1\n") == (0, "- a: '1'\n")

    def test_text(self):
        assert run_cli("-f", "text") == (0, "a:1\nb:x\nc:d\n")

    def test_table(self):
        assert run_cli("-f", "tab") == (0, "a   b   c   \n1   x   d\n")

    def test_template(self):
        assert run_cli("--template", "{{ value[0].b }}") == (0, "x\n")

    def test_jmespath(self):
        assert run_cli("--jmespath", "[0].a") == (0, "1\n")

    def test_empty_output(self):
        assert run_cli("--jmespath", "[0].missing") == (0, "")

    def test_compile_error(self, capsys):
        code, out = run_cli("--jmespath", "foo\n| ~")
        assert code == 1
        assert out == ""
        assert "valuefmt: error: failed to parse jmespath expression" in capsys.readouterr().err

    def test_unknown_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["-f", "xml"])

    def test_template_format_requires_template(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            run_cli("-f", "template", stdin="a=1\n")
        assert excinfo.value.code == 2
        assert "--format template requires --template" in capsys.readouterr().err

    def test_template_format_with_template(self):
        assert run_cli("-f", "template", "--template", "{{ value[0].a }}", stdin="a=1\n") == (0, "1\n")

    def test_query_options_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--jq", ".", "--jmespath", "a"])
