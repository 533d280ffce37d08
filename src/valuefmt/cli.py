"""valuefmt CLI - render records read from stdin.

Each input line is either a JSON object, whose entries are merged into the
record, or a ``key=value`` pair. Other lines are ignored. The collected
record is written as a one-element list in the chosen format.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence, TextIO

from valuefmt import __version__
from valuefmt.exceptions import RenderError
from valuefmt.writers import JMESPathWriter, JQWriter, QueryArg, ValueWriter, get_writer, list_writers

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI operations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _json_arg(kv: str) -> QueryArg:
    return QueryArg.parse(kv, string=False)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="valuefmt",
        description="Render key/value input as JSON, YAML, tables or plain text",
    )
    parser.add_argument("--version", action="version", version=f"valuefmt {__version__}")
    parser.add_argument(
        "-f", "--format",
        default="json",
        choices=list_writers(),
        help="Output format (default: json)",
    )
    parser.add_argument(
        "--template",
        help="Jinja2 template; implies --format template",
    )
    parser.add_argument(
        "--theme",
        help="Highlighting theme for JSON and YAML output ('noop' disables it)",
    )

    query = parser.add_mutually_exclusive_group()
    query.add_argument("--jq", metavar="EXPR", help="Filter the input with a jq program")
    query.add_argument("--jmespath", metavar="EXPR", help="Search the input with JMESPath")

    parser.add_argument(
        "-r", "--raw",
        action="store_true",
        help="Write string results of --jq without quotes",
    )
    parser.add_argument(
        "--arg",
        action="append",
        default=[],
        type=QueryArg.parse,
        metavar="NAME=VALUE",
        help="Bind $NAME to a string in the jq program",
    )
    parser.add_argument(
        "--argjson",
        action="append",
        default=[],
        type=_json_arg,
        metavar="NAME=JSON",
        help="Bind $NAME to a JSON value in the jq program",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def read_record(lines: TextIO) -> dict[str, Any]:
    """Collect a record from JSON object lines and ``key=value`` lines."""
    record: dict[str, Any] = {}
    for line in lines:
        line = line.rstrip("\n")
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            record.update(data)
        elif "=" in line:
            key, _, value = line.partition("=")
            record[key] = value
        else:
            logger.debug("Ignoring input line %r", line)
    return record


def build_writer(args: argparse.Namespace, stream: TextIO) -> ValueWriter:
    """Create the writer described by the parsed arguments."""
    kwargs: dict[str, Any] = {}
    name = args.format
    if args.template is not None:
        name = "template"
        kwargs["template"] = args.template
    if args.theme is not None:
        kwargs["theme"] = args.theme

    writer: ValueWriter = get_writer(name, stream, **kwargs)
    if args.jq is not None:
        writer = JQWriter(writer, args.jq, [*args.arg, *args.argjson], raw=args.raw)
    elif args.jmespath is not None:
        writer = JMESPathWriter(writer, args.jmespath)
    return writer


def main(
    argv: Sequence[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Run the CLI.

    Returns:
        Exit code (0 for success, 1 for rendering errors)
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.format == "template" and args.template is None:
        parser.error("--format template requires --template")
    setup_logging(args.verbose)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        writer = build_writer(args, stdout)
        if writer.write([read_record(stdin)]):
            stdout.write("\n")
    except RenderError as err:
        print(f"valuefmt: error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
