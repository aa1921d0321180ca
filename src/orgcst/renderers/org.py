#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/renderers/org.py
"""Canonical Org serialization of a CST.

This module provides the OrgSerializer class which turns a CST back into Org
text. Most leaves are emitted unchanged, so prose, inline markup and raw
block bodies come out exactly as they went in. A fixed set of line-level
constructs is normalized:

- headline lines are rebuilt from the headline properties, single-spaced,
  with tags right-aligned only when they were aligned in the source
- keyword and affiliated keyword keys are upper-cased, aliases translated
- block delimiters are lower-cased, drawer delimiters upper-cased, and
  unterminated blocks and drawers receive their closing line
- blank lines are emitted empty
- item bullets are followed by a single space
- org tables are aligned by column width
- ``\\r\\n`` line terminators become ``\\n``

Re-parsing the output yields a tree structurally equal to the input tree.

"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from orgcst.constants import GREATER_BLOCKS, VERBATIM_BLOCKS
from orgcst.cst.nodes import (
    CenterBlock,
    Clock,
    CommentBlock,
    Document,
    Drawer,
    DynamicBlock,
    Element,
    ExampleBlock,
    ExportBlock,
    Headline,
    Item,
    Keyword,
    Node,
    Paragraph,
    Planning,
    PlainText,
    PropertyDrawer,
    QuoteBlock,
    SpecialBlock,
    SrcBlock,
    Table,
    TableRow,
    Timestamp,
    Token,
    VerseBlock,
)
from orgcst.cst.visitors import InvariantValidator, NodeVisitor, leaf_text
from orgcst.options.org import OrgSerializerOptions
from orgcst.parsers.classifier import (
    BLOCK_BEGIN_RE,
    DYNAMIC_BEGIN_RE,
    KEYWORD_RE,
)
from orgcst.parsers.elements import parse_affiliated_keyword
from orgcst.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)

CHECKBOX_MARKS = {"on": "X", "off": " ", "trans": "-"}


def _indent(text: str) -> str:
    """Leading spaces and tabs of ``text``."""
    return text[: len(text) - len(text.lstrip(" \t"))]


def _terminator(text: str) -> str:
    return "\n" if text.endswith("\n") else ""


class OrgSerializer(NodeVisitor, BaseRenderer):
    """Render a CST to canonical Org text.

    Parameters
    ----------
    options : OrgSerializerOptions or None, default = None
        Serialization options

    Examples
    --------
    Basic usage:

        >>> from orgcst.parsers.org import OrgParser
        >>> doc = OrgParser().parse("*  TODO   Write :work:\\n#+title:  Notes\\n")
        >>> OrgSerializer().render_to_string(doc)
        '* TODO Write :work:\\n#+TITLE: Notes\\n'

    """

    def __init__(self, options: OrgSerializerOptions | None = None):
        """Initialize the serializer with options."""
        BaseRenderer._validate_options_type(options, OrgSerializerOptions, "org")
        options = options or OrgSerializerOptions()
        BaseRenderer.__init__(self, options)
        self.options: OrgSerializerOptions = options
        self._output: list[str] = []

    def render_to_string(self, doc: Document) -> str:
        """Render a document CST to canonical Org text.

        Parameters
        ----------
        doc : Document
            The document node to render

        Returns
        -------
        str
            Canonical Org text

        Raises
        ------
        InvariantViolationError
            If ``validate`` is enabled and the tree breaks a structural
            invariant (overlapping spans, gaps, objects holding elements)

        """
        if self.options.validate:
            InvariantValidator(strict=True).validate(doc)

        self._output = []
        doc.accept(self)
        result = "".join(self._output)
        return self._cleanup_output(result)

    def _cleanup_output(self, text: str) -> str:
        """Normalize line terminators of the final output."""
        return text.replace("\r\n", "\n")

    def _ensure_newline(self) -> None:
        """Terminate the current line unless the output is empty or already ends one."""
        for chunk in reversed(self._output):
            if chunk:
                if not chunk.endswith("\n"):
                    self._output.append("\n")
                return

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------

    def visit_token(self, node: Token) -> None:
        """Render a syntax token.

        Blank lines lose their whitespace and affiliated keyword lines are
        normalized; every other token is emitted unchanged.
        """
        if node.role == "blank":
            self._output.append(_terminator(node.text))
        elif node.role == "affiliated":
            self._output.append(self._affiliated_line(node.text))
        else:
            self._output.append(node.text)

    def visit_plain_text(self, node: PlainText) -> None:
        """Render a plain text run unchanged."""
        self._output.append(node.value)

    def _affiliated_line(self, text: str) -> str:
        keyword = parse_affiliated_keyword(text.rstrip("\r\n"))
        if keyword is None:
            return text
        key = keyword.key if keyword.option is None else f"{keyword.key}[{keyword.option}]"
        line = f"{_indent(text)}#+{key}:"
        if keyword.value:
            line += f" {keyword.value}"
        return line + _terminator(text)

    # ------------------------------------------------------------------
    # Headlines
    # ------------------------------------------------------------------

    def visit_headline(self, node: Headline) -> None:
        """Render a headline line, then its section and sub-headlines."""
        parts = ["*" * node.level]
        if node.todo_keyword:
            parts.append(node.todo_keyword)
        if node.priority:
            parts.append(f"[#{node.priority}]")
        if node.commented:
            parts.append("COMMENT")
        if node.title:
            parts.append(node.title)
        line = " ".join(parts)

        if node.tags:
            tags = ":" + ":".join(node.tags) + ":"
            if node.tags_aligned:
                padding = max(1, self.options.tags_column - len(line) - len(tags))
                line += " " * padding + tags
            else:
                line += " " + tags
        elif len(parts) == 1:
            line += " "

        self._output.append(line)
        body = [child for child in node.children if isinstance(child, Element) or _is_blank(child)]
        if body or any(isinstance(child, Token) and child.role == "newline" for child in node.children):
            self._output.append("\n")
        for child in body:
            child.accept(self)

    # ------------------------------------------------------------------
    # Keywords and line elements
    # ------------------------------------------------------------------

    def visit_keyword(self, node: Keyword) -> None:
        """Render ``#+KEY: value`` with the original indentation."""
        text = leaf_text(node)
        line = f"{_indent(text)}#+{node.key}:"
        if node.value:
            line += f" {node.value}"
        self._output.append(line + _terminator(text))

    def visit_planning(self, node: Planning) -> None:
        """Render a planning line with single spaces between entries."""
        text = leaf_text(node)
        entries = []
        keyword: Optional[str] = None
        for child in node.children:
            if isinstance(child, Token) and child.role == "planning_keyword":
                keyword = child.text
            elif isinstance(child, Timestamp) and keyword is not None:
                entries.append(f"{keyword} {leaf_text(child)}")
                keyword = None
        self._output.append(_indent(text) + " ".join(entries) + _terminator(text))

    def visit_clock(self, node: Clock) -> None:
        """Render ``CLOCK: timestamp`` with an optional ``=> duration``."""
        text = leaf_text(node)
        stamp = next((leaf_text(child) for child in node.children if isinstance(child, Timestamp)), "")
        line = f"{_indent(text)}CLOCK: {stamp}"
        if node.duration:
            line += f" => {node.duration}"
        self._output.append(line + _terminator(text))

    # ------------------------------------------------------------------
    # Blocks and drawers
    # ------------------------------------------------------------------

    def visit_center_block(self, node: CenterBlock) -> None:
        """Render a center block."""
        self._render_block(node, "center")

    def visit_quote_block(self, node: QuoteBlock) -> None:
        """Render a quote block."""
        self._render_block(node, "quote")

    def visit_special_block(self, node: SpecialBlock) -> None:
        """Render a special block, keeping the block name as written."""
        self._render_block(node, node.block_type)

    def visit_src_block(self, node: SrcBlock) -> None:
        """Render a source block."""
        self._render_block(node, "src")

    def visit_example_block(self, node: ExampleBlock) -> None:
        """Render an example block."""
        self._render_block(node, "example")

    def visit_export_block(self, node: ExportBlock) -> None:
        """Render an export block."""
        self._render_block(node, "export")

    def visit_comment_block(self, node: CommentBlock) -> None:
        """Render a comment block."""
        self._render_block(node, "comment")

    def visit_verse_block(self, node: VerseBlock) -> None:
        """Render a verse block."""
        self._render_block(node, "verse")

    def visit_dynamic_block(self, node: DynamicBlock) -> None:
        """Render a dynamic block."""

        def begin(text: str) -> str:
            match = DYNAMIC_BEGIN_RE.match(text.rstrip("\r\n"))
            line = f"{_indent(text)}#+begin:"
            if match and match.group(1):
                line += f" {match.group(1)}"
                if match.group(2):
                    line += f" {match.group(2)}"
            return line + _terminator(text)

        self._render_delimited(node, begin, "#+end:")

    def visit_drawer(self, node: Drawer) -> None:
        """Render a drawer with its name upper-cased."""

        def begin(text: str) -> str:
            return f"{_indent(text)}:{node.drawer_name}:{_terminator(text)}"

        self._render_delimited(node, begin, ":END:")

    def visit_property_drawer(self, node: PropertyDrawer) -> None:
        """Render a property drawer."""

        def begin(text: str) -> str:
            return f"{_indent(text)}:PROPERTIES:{_terminator(text)}"

        self._render_delimited(node, begin, ":END:")

    def _render_block(self, node: Node, name: str) -> None:
        """Render a ``#+begin_name`` ... ``#+end_name`` block."""
        canonical = name.lower() if name.upper() in VERBATIM_BLOCKS | GREATER_BLOCKS else name

        def begin(text: str) -> str:
            match = BLOCK_BEGIN_RE.match(text.rstrip("\r\n"))
            line = f"{_indent(text)}#+begin_{canonical}"
            if match and match.group(2):
                line += f" {match.group(2)}"
            return line + _terminator(text)

        self._render_delimited(node, begin, f"#+end_{canonical}")

    def _render_delimited(self, node: Node, begin: Callable[[str], str], end: str) -> None:
        """Render begin line, contents and end line, adding a missing end line.

        Parameters
        ----------
        node : Node
            Block or drawer node
        begin : callable
            Maps the source begin line to its canonical form
        end : str
            Canonical end line without indentation or terminator

        """
        indent = ""
        closed = False
        for child in node.children:
            if isinstance(child, Token) and child.role == "begin":
                indent = _indent(child.text)
                self._output.append(begin(child.text))
            elif isinstance(child, Token) and child.role == "end":
                closed = True
                self._output.append(f"{_indent(child.text)}{end}{_terminator(child.text)}")
            else:
                child.accept(self)
        if not closed:
            logger.debug("Adding missing closing line %r to %s", end, node.kind)
            self._ensure_newline()
            self._output.append(f"{indent}{end}\n")

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def visit_item(self, node: Item) -> None:
        """Render a list item; the bullet is followed by a single space."""
        prefix = ""
        children = list(node.children)
        if children and isinstance(children[0], Token) and children[0].role == "indent":
            prefix = children[0].text
        prefix += node.bullet
        if node.counter is not None:
            prefix += f" [@{node.counter}]"
        if node.checkbox is not None:
            prefix += f" [{CHECKBOX_MARKS[node.checkbox]}]"
        if node.tag is not None:
            prefix += f" {node.tag} ::"
        self._output.append(prefix)

        # The bullet line ends at the first element or at its own newline
        rest_start = len(children)
        for position, child in enumerate(children):
            if isinstance(child, Element):
                if isinstance(child, Paragraph) and not child.affiliated:
                    self._output.append(" ")
                else:
                    self._output.append("\n")
                rest_start = position
                break
            if isinstance(child, Token) and child.role in ("newline", "blank"):
                self._output.append("\n")
                rest_start = position + 1
                break
        for child in children[rest_start:]:
            child.accept(self)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def visit_table(self, node: Table) -> None:
        """Render an org table with columns aligned; table.el tables stay raw."""
        if node.table_type != "org":
            self.generic_visit(node)
            return

        widths: list[int] = []
        for row in node.rows:
            if row.row_type == "standard":
                for index, cell in enumerate(row.cells):
                    width = len(leaf_text(cell).strip())
                    if index < len(widths):
                        widths[index] = max(widths[index], width)
                    else:
                        widths.append(width)

        for child in node.children:
            if isinstance(child, TableRow):
                self._render_table_row(child, widths)
            elif isinstance(child, Token) and child.role == "formula":
                match = KEYWORD_RE.match(child.text.rstrip("\r\n"))
                value = match.group(2) if match and match.group(2) else ""
                line = f"{_indent(child.text)}#+TBLFM:"
                if value:
                    line += f" {value}"
                self._output.append(line + _terminator(child.text))
            else:
                child.accept(self)

    def _render_table_row(self, row: TableRow, widths: list[int]) -> None:
        text = leaf_text(row)
        indent = _indent(text)
        if row.row_type == "rule":
            line = "|" + "+".join("-" * (width + 2) for width in widths) + "|" if widths else "|-"
        else:
            cells = [leaf_text(cell).strip() for cell in row.cells]
            line = "|" + "".join(f" {content.ljust(widths[index])} |" for index, content in enumerate(cells))
        self._output.append(indent + line + _terminator(text))


def _is_blank(node: Node) -> bool:
    return isinstance(node, Token) and node.role == "blank"
