"""Command-line interface for the orgcst library.

The command reads one Org buffer from standard input and writes to standard
output. It never opens files itself.

Examples
--------
Canonicalize a buffer::

    $ orgcst < notes.org

Dump the CST as JSON::

    $ orgcst --json < notes.org

Show the tree::

    $ orgcst --tree --tokens < notes.org

Check that canonicalization is idempotent::

    $ orgcst --check < notes.org

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/orgcst/cli.py
import argparse
import logging
import sys
from typing import Union

from orgcst import __version__
from orgcst.api import parse, serialize
from orgcst.cst.nodes import Node, Token
from orgcst.cst.serialization import cst_to_json, structurally_equal
from orgcst.exceptions import (
    OrgCstError,
    ParsingError,
    RenderingError,
    ValidationError,
)
from orgcst.logging_utils import configure_logging
from orgcst.options.org import OrgParserOptions, OrgSerializerOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_PARSING_ERROR = 6
EXIT_RENDERING_ERROR = 7


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map a library exception to a CLI exit code."""
    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR
    if isinstance(exception, ParsingError):
        return EXIT_PARSING_ERROR
    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR
    return EXIT_ERROR


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``orgcst`` command."""
    parser = argparse.ArgumentParser(
        prog="orgcst",
        description="Parse Org text from stdin and write canonical Org, JSON or a tree view to stdout.",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--json", action="store_true", help="Write the CST as versioned JSON")
    mode.add_argument("--tree", action="store_true", help="Print the CST as a tree")
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 unless re-parsing the canonical output gives the same structure",
    )
    parser.add_argument("--tokens", action="store_true", help="Include syntax tokens in the tree view")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")
    parser.add_argument(
        "--granularity",
        choices=["headline", "element", "object"],
        default="object",
        help="How far down the tree is built (default: object)",
    )
    parser.add_argument(
        "--todo-keywords",
        default=None,
        help='Space-separated TODO keyword sequence, e.g. "TODO NEXT | DONE"',
    )
    parser.add_argument("--tags-column", type=int, default=None, help="Column where aligned tags end")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--version", action="version", version=f"orgcst {__version__}")
    return parser


def _read_stdin() -> Union[str, bytes]:
    # Bytes keep the strict UTF-8 check inside the parser
    stream = getattr(sys.stdin, "buffer", sys.stdin)
    return stream.read()


def _node_label(node: Node) -> str:
    from rich.markup import escape

    label = f"[bold]{node.kind}[/bold] [dim]{node.span.start}-{node.span.end}[/dim]"
    if isinstance(node, Token):
        return f"{label} {node.role} {escape(repr(node.text))}"
    details = ", ".join(f"{name}={value!r}" for name, value in node.properties.items() if value not in (None, (), ""))
    return f"{label} {escape(details)}" if details else label


def render_tree(doc: Node, show_tokens: bool = False) -> None:
    """Print a CST with ``rich``, one branch per node."""
    from rich.console import Console
    from rich.tree import Tree

    root = Tree(_node_label(doc))
    stack = [(doc, root)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            if isinstance(child, Token) and not show_tokens:
                continue
            stack.append((child, branch.add(_node_label(child))))
    Console(file=sys.stdout, soft_wrap=True).print(root)


def _parser_options(parsed_args: argparse.Namespace) -> OrgParserOptions:
    if parsed_args.todo_keywords is None:
        return OrgParserOptions(granularity=parsed_args.granularity)
    return OrgParserOptions(granularity=parsed_args.granularity, todo_keywords=parsed_args.todo_keywords.split())


def _serializer_options(parsed_args: argparse.Namespace) -> OrgSerializerOptions:
    if parsed_args.tags_column is None:
        return OrgSerializerOptions()
    return OrgSerializerOptions(tags_column=parsed_args.tags_column)


def check_idempotence(
    text: Union[str, bytes],
    parser_options: OrgParserOptions,
    serializer_options: OrgSerializerOptions,
) -> bool:
    """Whether re-parsing the canonical form of ``text`` keeps its structure."""
    first = parse(text, parser_options)
    canonical = serialize(first, serializer_options)
    second = parse(canonical, parser_options)
    return structurally_equal(first, second)


def main(args: list[str] | None = None) -> int:
    """Execute the command line entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    configure_logging(logging.DEBUG if parsed_args.trace else parsed_args.log_level, trace_mode=parsed_args.trace)

    try:
        parser_options = _parser_options(parsed_args)
        serializer_options = _serializer_options(parsed_args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    text = _read_stdin()
    try:
        if parsed_args.check:
            if check_idempotence(text, parser_options, serializer_options):
                return EXIT_SUCCESS
            print("Error: canonical output does not re-parse to the same structure", file=sys.stderr)
            return EXIT_ERROR

        doc = parse(text, parser_options)
        if parsed_args.json:
            sys.stdout.write(cst_to_json(doc, indent=parsed_args.indent) + "\n")
        elif parsed_args.tree:
            render_tree(doc, show_tokens=parsed_args.tokens)
        else:
            sys.stdout.write(serialize(doc, serializer_options))
    except OrgCstError as e:
        print(f"Error: {e}", file=sys.stderr)
        return get_exit_code_for_exception(e)

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
