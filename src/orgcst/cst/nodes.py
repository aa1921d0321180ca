#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/cst/nodes.py
"""Concrete syntax tree node classes for Org documents.

Every node covers a contiguous ``Span`` of the source buffer. Leaves are
either ``Token`` nodes (delimiters, indentation, newlines, blank lines and
raw bodies) or ``PlainText`` runs; atomic objects such as ``Timestamp`` own
a single raw token. Concatenating the leaves in tree order yields the
source text.

Node Hierarchy
--------------
All nodes inherit from ``Node`` and support the visitor pattern through
``accept``, which dispatches on the class-level ``kind`` tag.

Greater elements own other elements:
    - Document, Headline, Section, PropertyDrawer, Drawer
    - CenterBlock, QuoteBlock, SpecialBlock, DynamicBlock
    - PlainList, Item, Table, FootnoteDefinition

Lesser elements own only objects or tokens:
    - Paragraph, Planning, NodeProperty, TableRow, Keyword, BabelCall
    - SrcBlock, ExampleBlock, ExportBlock, CommentBlock, VerseBlock
    - Comment, FixedWidth, HorizontalRule, Clock, DiarySexp, LatexEnvironment

Objects live in text-bearing ranges:
    - Bold, Italic, Underline, StrikeThrough, Code, Verbatim
    - Link, FootnoteReference, Timestamp, Entity, LatexFragment
    - Subscript, Superscript, LineBreak, Macro, Target, RadioTarget
    - StatisticsCookie, ExportSnippet, InlineSrcBlock, InlineBabelCall
    - TableCell, PlainText

Properties
----------
The per-kind dataclass fields other than ``span`` and ``children`` form the
node's fixed property schema, exposed as the ``properties`` mapping. Fields
whose metadata sets ``structural`` to False are formatting hints and are
ignored by structural comparison.

"""

from __future__ import annotations

import functools
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Iterator, Optional

from orgcst.constants import (
    CheckboxState,
    ClockStatus,
    LinkFormat,
    ListType,
    RepeaterType,
    TableRowType,
    TableType,
    TimestampType,
    TimeUnit,
    TodoType,
    WarningType,
)

_NON_PROPERTY_FIELDS = frozenset({"span", "children"})


@dataclass(frozen=True, order=True)
class Span:
    """Half-open range ``[start, end)`` of buffer offsets.

    Parameters
    ----------
    start : int
        Offset of the first covered character
    end : int
        Offset just past the last covered character

    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate that the span is not inverted."""
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start

    def contains(self, other: Span) -> bool:
        """Whether ``other`` lies within this span."""
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class AffiliatedKeyword:
    """A ``#+KEY[option]: value`` line bound to the element that follows it.

    Parameters
    ----------
    key : str
        Upper-cased key after alias translation (``#+LABEL`` becomes ``NAME``)
    value : str
        Trimmed value text
    option : str or None
        The ``[secondary]`` part of dual keywords such as ``CAPTION``

    """

    key: str
    value: str
    option: Optional[str] = None


@functools.lru_cache(maxsize=None)
def _property_fields(cls: type) -> tuple[tuple[str, bool], ...]:
    return tuple(
        (f.name, f.metadata.get("structural", True)) for f in fields(cls) if f.name not in _NON_PROPERTY_FIELDS
    )


class Node:
    """Base class for all CST nodes.

    Attributes
    ----------
    kind : str
        Discriminator shared by every instance of a node class
    span : Span
        Buffer range covered by the node
    children : tuple of Node
        Ordered child nodes; empty for leaves

    """

    kind: ClassVar[str] = "node"
    span: Span
    children: tuple[Node, ...]

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Calls ``visitor.visit_<kind>(self)`` when the visitor defines it and
        ``visitor.generic_visit(self)`` otherwise.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        method = getattr(visitor, f"visit_{self.kind}", None)
        if method is None:
            return visitor.generic_visit(self)
        return method(self)

    @property
    def properties(self) -> dict[str, Any]:
        """The per-kind property mapping."""
        return {name: getattr(self, name) for name, _ in _property_fields(type(self))}

    @property
    def structural_properties(self) -> dict[str, Any]:
        """Properties that take part in structural comparison."""
        return {name: getattr(self, name) for name, structural in _property_fields(type(self)) if structural}

    @property
    def is_leaf(self) -> bool:
        """Whether the node has no children."""
        return not self.children

    def iter_children(self, kind: type[Node] | None = None) -> Iterator[Node]:
        """Iterate over children, optionally restricted to one node class."""
        for child in self.children:
            if kind is None or isinstance(child, kind):
                yield child


class Element(Node):
    """Base class for line-oriented constructs."""


class GreaterElement(Element):
    """Base class for elements that contain other elements."""


class Object(Node):
    """Base class for inline constructs inside text-bearing ranges."""


# ============================================================================
# Syntax leaves
# ============================================================================


@dataclass(frozen=True)
class Token(Node):
    """Syntax leaf covering delimiters, whitespace or raw text.

    Tokens carry no meaning of their own beyond ``role``; they exist so that
    every character of the buffer belongs to exactly one leaf.

    Parameters
    ----------
    span : Span
        Covered range
    role : str
        What the text is, e.g. ``"stars"``, ``"blank"``, ``"begin"``,
        ``"marker"``, ``"newline"``
    text : str
        The covered source text

    """

    kind: ClassVar[str] = "token"

    span: Span
    role: str = ""
    text: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class PlainText(Object):
    """A run of text without markup."""

    kind: ClassVar[str] = "plain_text"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


# ============================================================================
# Greater elements
# ============================================================================


@dataclass(frozen=True)
class Document(GreaterElement):
    """Root node covering the whole buffer.

    Parameters
    ----------
    span : Span
        ``[0, len(buffer))``
    children : tuple of Node
        Leading blank lines, the zeroth section and top-level headlines

    """

    kind: ClassVar[str] = "document"

    span: Span
    children: tuple[Node, ...] = ()

    @property
    def section(self) -> Optional[Section]:
        """The section before the first headline, if any."""
        return next((c for c in self.children if isinstance(c, Section)), None)

    @property
    def headlines(self) -> list[Headline]:
        """Top-level headlines."""
        return [c for c in self.children if isinstance(c, Headline)]


@dataclass(frozen=True)
class Headline(GreaterElement):
    """Headline with its own section and sub-headlines.

    Parameters
    ----------
    span : Span
        From the stars to the next headline of the same or a lower level
    level : int
        Number of leading stars
    todo_keyword : str or None
        TODO keyword when the title starts with one
    todo_type : {"todo", "done"} or None
        Whether ``todo_keyword`` belongs to the done set
    priority : str or None
        Character of the ``[#X]`` cookie
    commented : bool
        Whether the title starts with ``COMMENT``
    title : str
        Raw title text without keyword, priority, ``COMMENT`` and tags
    tags : tuple of str
        Tags in source order, duplicates removed
    archived : bool
        Whether the ``ARCHIVE`` tag is present
    footnote_section : bool
        Whether the title is the footnote section title
    tags_aligned : bool
        Whether tags were padded to a column in the source (formatting only)
    children : tuple of Node
        Line tokens, title objects, then pre-blank lines, the section and
        sub-headlines

    """

    kind: ClassVar[str] = "headline"

    span: Span
    level: int = 1
    todo_keyword: Optional[str] = None
    todo_type: Optional[TodoType] = None
    priority: Optional[str] = None
    commented: bool = False
    title: str = ""
    tags: tuple[str, ...] = ()
    archived: bool = False
    footnote_section: bool = False
    tags_aligned: bool = field(default=False, metadata={"structural": False})
    children: tuple[Node, ...] = ()

    def __post_init__(self) -> None:
        """Validate the headline level."""
        if self.level < 1:
            raise ValueError(f"Headline level must be at least 1, got {self.level}")

    @property
    def title_nodes(self) -> list[Node]:
        """Objects of the title line."""
        return [c for c in self.children if isinstance(c, Object)]

    @property
    def section(self) -> Optional[Section]:
        """The headline's own section, if it has one."""
        return next((c for c in self.children if isinstance(c, Section)), None)

    @property
    def headlines(self) -> list[Headline]:
        """Direct sub-headlines."""
        return [c for c in self.children if isinstance(c, Headline)]


@dataclass(frozen=True)
class Section(GreaterElement):
    """Elements between a headline (or the buffer start) and the next headline."""

    kind: ClassVar[str] = "section"

    span: Span
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class PropertyDrawer(GreaterElement):
    """``:PROPERTIES:`` drawer right after a headline or its planning line."""

    kind: ClassVar[str] = "property_drawer"

    span: Span
    children: tuple[Node, ...] = ()

    def as_dict(self) -> dict[str, str]:
        """Node properties folded into a mapping; ``KEY+`` lines extend ``KEY``."""
        result: dict[str, str] = {}
        for prop in self.iter_children(NodeProperty):
            assert isinstance(prop, NodeProperty)
            if prop.append and prop.key in result:
                result[prop.key] = f"{result[prop.key]} {prop.value}".strip()
            else:
                result[prop.key] = prop.value
        return result


@dataclass(frozen=True)
class Drawer(GreaterElement):
    """``:NAME:`` ... ``:END:`` drawer.

    Parameters
    ----------
    span : Span
        Covered range including affiliated keywords
    drawer_name : str
        Upper-cased drawer name
    affiliated : tuple of AffiliatedKeyword
        Keywords bound to the drawer
    children : tuple of Node
        Begin line, contents, end line

    """

    kind: ClassVar[str] = "drawer"

    span: Span
    drawer_name: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class CenterBlock(GreaterElement):
    """``#+begin_center`` block."""

    kind: ClassVar[str] = "center_block"

    span: Span
    parameters: Optional[str] = None
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class QuoteBlock(GreaterElement):
    """``#+begin_quote`` block."""

    kind: ClassVar[str] = "quote_block"

    span: Span
    parameters: Optional[str] = None
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class SpecialBlock(GreaterElement):
    """Block with a name that has no dedicated node kind.

    ``block_type`` keeps the name as written, since it is free-form.
    """

    kind: ClassVar[str] = "special_block"

    span: Span
    block_type: str = ""
    parameters: Optional[str] = None
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class DynamicBlock(GreaterElement):
    """``#+BEGIN: name args`` ... ``#+END:`` block."""

    kind: ClassVar[str] = "dynamic_block"

    span: Span
    block_name: str = ""
    arguments: Optional[str] = None
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class PlainList(GreaterElement):
    """Consecutive items sharing one indentation column.

    Parameters
    ----------
    span : Span
        Covered range including affiliated keywords
    list_type : {"ordered", "unordered", "descriptive"}
        Derived from the first item's bullet and tag
    affiliated : tuple of AffiliatedKeyword
        Keywords bound to the list
    children : tuple of Node
        Items

    """

    kind: ClassVar[str] = "plain_list"

    span: Span
    list_type: ListType = "unordered"
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()

    @property
    def items(self) -> list[Item]:
        """Items of the list."""
        return [c for c in self.children if isinstance(c, Item)]


@dataclass(frozen=True)
class Item(GreaterElement):
    """List item.

    Parameters
    ----------
    span : Span
        From the bullet line to the last line belonging to the item
    bullet : str
        Bullet as written, e.g. ``"-"``, ``"+"``, ``"*"``, ``"1."``, ``"2)"``
    counter : int or None
        Value of a ``[@N]`` counter cookie
    checkbox : {"on", "off", "trans"} or None
        State of a ``[X]``, ``[ ]`` or ``[-]`` checkbox
    tag : str or None
        Raw tag text of a descriptive item (``tag :: description``)
    children : tuple of Node
        Bullet line tokens, tag objects, then contents

    """

    kind: ClassVar[str] = "item"

    span: Span
    bullet: str = "-"
    counter: Optional[int] = None
    checkbox: Optional[CheckboxState] = None
    tag: Optional[str] = None
    children: tuple[Node, ...] = ()

    @property
    def tag_nodes(self) -> list[Node]:
        """Objects of the item tag."""
        return [c for c in self.children if isinstance(c, Object)]

    @property
    def contents(self) -> list[Node]:
        """Elements after the bullet line prefix."""
        return [c for c in self.children if isinstance(c, Element)]


@dataclass(frozen=True)
class Table(GreaterElement):
    """Org table or table.el table.

    Parameters
    ----------
    span : Span
        Covered range including affiliated keywords and formula lines
    table_type : {"org", "table.el"}
        Table flavor
    formulas : tuple of str
        Values of trailing ``#+TBLFM:`` lines
    value : str or None
        Raw text of a table.el table, which is not split into rows
    affiliated : tuple of AffiliatedKeyword
        Keywords bound to the table
    children : tuple of Node
        Rows (org tables) and tokens

    """

    kind: ClassVar[str] = "table"

    span: Span
    table_type: TableType = "org"
    formulas: tuple[str, ...] = ()
    value: Optional[str] = None
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()

    @property
    def rows(self) -> list[TableRow]:
        """Rows of the table."""
        return [c for c in self.children if isinstance(c, TableRow)]


@dataclass(frozen=True)
class FootnoteDefinition(GreaterElement):
    """``[fn:label] contents`` starting at column 0."""

    kind: ClassVar[str] = "footnote_definition"

    span: Span
    label: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


# ============================================================================
# Lesser elements
# ============================================================================


@dataclass(frozen=True)
class Paragraph(Element):
    """Run of text lines holding objects."""

    kind: ClassVar[str] = "paragraph"

    span: Span
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Planning(Element):
    """CLOSED, DEADLINE and SCHEDULED stamps on the line after a headline.

    The properties hold the raw timestamps; the parsed ``Timestamp``
    objects are children.
    """

    kind: ClassVar[str] = "planning"

    span: Span
    closed: Optional[str] = None
    deadline: Optional[str] = None
    scheduled: Optional[str] = None
    children: tuple[Node, ...] = ()

    def timestamps(self) -> dict[str, Timestamp]:
        """Map ``CLOSED``/``DEADLINE``/``SCHEDULED`` to their timestamp objects."""
        result: dict[str, Timestamp] = {}
        pending: Optional[str] = None
        for child in self.children:
            if isinstance(child, Token) and child.role == "planning_keyword":
                pending = child.text.rstrip(":")
            elif isinstance(child, Timestamp) and pending is not None:
                result[pending] = child
                pending = None
        return result


@dataclass(frozen=True)
class NodeProperty(Element):
    """``:KEY: value`` line inside a property drawer."""

    kind: ClassVar[str] = "node_property"

    span: Span
    key: str = ""
    value: str = ""
    append: bool = False
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class TableRow(Element):
    """Table row; rule rows have no cells."""

    kind: ClassVar[str] = "table_row"

    span: Span
    row_type: TableRowType = "standard"
    children: tuple[Node, ...] = ()

    @property
    def cells(self) -> list[TableCell]:
        """Cells of the row."""
        return [c for c in self.children if isinstance(c, TableCell)]


@dataclass(frozen=True)
class Keyword(Element):
    """Standalone ``#+KEY: value`` line.

    For ``TITLE``, ``AUTHOR`` and ``DATE`` the value is also parsed into
    objects, which become children between the key and newline tokens.
    """

    kind: ClassVar[str] = "keyword"

    span: Span
    key: str = ""
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class BabelCall(Element):
    """``#+CALL: name[inside](arguments)[end]`` line."""

    kind: ClassVar[str] = "babel_call"

    span: Span
    call: Optional[str] = None
    inside_header: Optional[str] = None
    arguments: Optional[str] = None
    end_header: Optional[str] = None
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class SrcBlock(Element):
    """Source block.

    Parameters
    ----------
    span : Span
        Covered range including affiliated keywords
    language : str or None
        First word after ``#+begin_src``
    switches : str or None
        Switches such as ``-n -r`` before the first header argument
    parameters : str or None
        Header arguments starting at the first ``:key``
    value : str
        Body with comma escapes removed, always newline-terminated when
        non-empty
    affiliated : tuple of AffiliatedKeyword
        Keywords bound to the block
    children : tuple of Node
        Begin line, raw body and end line tokens

    """

    kind: ClassVar[str] = "src_block"

    span: Span
    language: Optional[str] = None
    switches: Optional[str] = None
    parameters: Optional[str] = None
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class ExampleBlock(Element):
    """Example block; ``value`` has comma escapes removed."""

    kind: ClassVar[str] = "example_block"

    span: Span
    switches: Optional[str] = None
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class ExportBlock(Element):
    """Export block for one backend."""

    kind: ClassVar[str] = "export_block"

    span: Span
    backend: Optional[str] = None
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class CommentBlock(Element):
    """Comment block."""

    kind: ClassVar[str] = "comment_block"

    span: Span
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class VerseBlock(Element):
    """Verse block; its body keeps line structure and holds objects."""

    kind: ClassVar[str] = "verse_block"

    span: Span
    parameters: Optional[str] = None
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Comment(Element):
    """Consecutive ``# text`` lines."""

    kind: ClassVar[str] = "comment"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class FixedWidth(Element):
    """Consecutive ``: text`` lines."""

    kind: ClassVar[str] = "fixed_width"

    span: Span
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class HorizontalRule(Element):
    """Five or more dashes alone on a line."""

    kind: ClassVar[str] = "horizontal_rule"

    span: Span
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Clock(Element):
    """``CLOCK:`` line with a timestamp and an optional duration."""

    kind: ClassVar[str] = "clock"

    span: Span
    value: Optional[str] = None
    duration: Optional[str] = None
    status: ClockStatus = "running"
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class DiarySexp(Element):
    """``%%(sexp)`` line at column 0."""

    kind: ClassVar[str] = "diary_sexp"

    span: Span
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class LatexEnvironment(Element):
    """``\\begin{env}`` ... ``\\end{env}``; ``value`` includes both lines."""

    kind: ClassVar[str] = "latex_environment"

    span: Span
    environment: str = ""
    value: str = ""
    affiliated: tuple[AffiliatedKeyword, ...] = ()
    children: tuple[Node, ...] = ()


# ============================================================================
# Objects
# ============================================================================


@dataclass(frozen=True)
class Bold(Object):
    """``*bold*`` span."""

    kind: ClassVar[str] = "bold"

    span: Span
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Italic(Object):
    """``/italic/`` span."""

    kind: ClassVar[str] = "italic"

    span: Span
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Underline(Object):
    """``_underline_`` span."""

    kind: ClassVar[str] = "underline"

    span: Span
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class StrikeThrough(Object):
    """``+strike-through+`` span."""

    kind: ClassVar[str] = "strike_through"

    span: Span
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Code(Object):
    """``~code~`` span; contents are not parsed."""

    kind: ClassVar[str] = "code"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Verbatim(Object):
    """``=verbatim=`` span; contents are not parsed."""

    kind: ClassVar[str] = "verbatim"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Link(Object):
    """Bracket, angle or plain link.

    Parameters
    ----------
    span : Span
        Covered range
    link_type : str
        ``"https"``, ``"file"``, ``"custom-id"``, ``"coderef"``, ``"fuzzy"`` ...
    path : str
        Target without the type prefix
    raw_link : str
        Target as written
    search_option : str or None
        Part after ``::`` in file links
    format : {"bracket", "angle", "plain"}
        Source syntax
    children : tuple of Node
        Delimiter tokens and description objects

    """

    kind: ClassVar[str] = "link"

    span: Span
    link_type: str = "fuzzy"
    path: str = ""
    raw_link: str = ""
    search_option: Optional[str] = None
    format: LinkFormat = "bracket"
    children: tuple[Node, ...] = ()

    @property
    def description(self) -> list[Node]:
        """Description objects; empty without a description."""
        return [c for c in self.children if isinstance(c, Object)]


@dataclass(frozen=True)
class FootnoteReference(Object):
    """``[fn:label]``, ``[fn:label:def]`` or ``[fn::def]``."""

    kind: ClassVar[str] = "footnote_reference"

    span: Span
    label: Optional[str] = None
    reference_type: str = "standard"
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Timestamp(Object):
    """Active, inactive, range or diary timestamp.

    Parameters
    ----------
    span : Span
        Covered range
    timestamp_type : str
        ``active``, ``active-range``, ``inactive``, ``inactive-range`` or ``diary``
    raw_value : str
        The timestamp as written
    year_start, month_start, day_start, hour_start, minute_start : int or None
        Start date and optional time
    year_end, month_end, day_end, hour_end, minute_end : int or None
        End date and time for ranges; equal to the start otherwise
    repeater_type : {"cumulate", "catch-up", "restart"} or None
        ``+``, ``++`` or ``.+``
    repeater_value : int or None
        Repeater amount
    repeater_unit : {"hour", "day", "week", "month", "year"} or None
        Repeater unit
    warning_type : {"all", "first"} or None
        ``-`` or ``--``
    warning_value : int or None
        Warning delay amount
    warning_unit : {"hour", "day", "week", "month", "year"} or None
        Warning delay unit

    """

    kind: ClassVar[str] = "timestamp"

    span: Span
    timestamp_type: TimestampType = "active"
    raw_value: str = ""
    year_start: Optional[int] = None
    month_start: Optional[int] = None
    day_start: Optional[int] = None
    hour_start: Optional[int] = None
    minute_start: Optional[int] = None
    year_end: Optional[int] = None
    month_end: Optional[int] = None
    day_end: Optional[int] = None
    hour_end: Optional[int] = None
    minute_end: Optional[int] = None
    repeater_type: Optional[RepeaterType] = None
    repeater_value: Optional[int] = None
    repeater_unit: Optional[TimeUnit] = None
    warning_type: Optional[WarningType] = None
    warning_value: Optional[int] = None
    warning_unit: Optional[TimeUnit] = None
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Entity(Object):
    """Named special character such as ``\\alpha`` or ``\\alpha{}``."""

    kind: ClassVar[str] = "entity"

    span: Span
    name: str = ""
    utf8: str = ""
    use_brackets: bool = False
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class LatexFragment(Object):
    """Inline LaTeX: ``\\(..\\)``, ``\\[..\\]``, ``$..$``, ``$$..$$`` or ``\\command{..}``."""

    kind: ClassVar[str] = "latex_fragment"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Subscript(Object):
    """``_x`` or ``_{x}`` bound to the preceding character."""

    kind: ClassVar[str] = "subscript"

    span: Span
    use_brackets: bool = False
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Superscript(Object):
    """``^x`` or ``^{x}`` bound to the preceding character."""

    kind: ClassVar[str] = "superscript"

    span: Span
    use_brackets: bool = False
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class LineBreak(Object):
    """``\\\\`` at the end of a line."""

    kind: ClassVar[str] = "line_break"

    span: Span
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Macro(Object):
    """``{{{name(arg1, arg2)}}}``."""

    kind: ClassVar[str] = "macro"

    span: Span
    key: str = ""
    args: tuple[str, ...] = ()
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class Target(Object):
    """``<<target>>``."""

    kind: ClassVar[str] = "target"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class RadioTarget(Object):
    """``<<<radio target>>>``; its text is parsed for objects."""

    kind: ClassVar[str] = "radio_target"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class StatisticsCookie(Object):
    """``[2/5]`` or ``[40%]``."""

    kind: ClassVar[str] = "statistics_cookie"

    span: Span
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class ExportSnippet(Object):
    """``@@backend:value@@``."""

    kind: ClassVar[str] = "export_snippet"

    span: Span
    backend: str = ""
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class InlineSrcBlock(Object):
    """``src_lang[options]{body}``."""

    kind: ClassVar[str] = "inline_src_block"

    span: Span
    language: str = ""
    parameters: Optional[str] = None
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class InlineBabelCall(Object):
    """``call_name[inside](arguments)[end]``."""

    kind: ClassVar[str] = "inline_babel_call"

    span: Span
    call: str = ""
    inside_header: Optional[str] = None
    arguments: Optional[str] = None
    end_header: Optional[str] = None
    value: str = ""
    children: tuple[Node, ...] = ()


@dataclass(frozen=True)
class TableCell(Object):
    """One cell of a standard table row; children exclude the separators."""

    kind: ClassVar[str] = "table_cell"

    span: Span
    children: tuple[Node, ...] = ()


ELEMENT_CLASSES: tuple[type[Node], ...] = (
    Document,
    Headline,
    Section,
    PropertyDrawer,
    Drawer,
    CenterBlock,
    QuoteBlock,
    SpecialBlock,
    DynamicBlock,
    PlainList,
    Item,
    Table,
    FootnoteDefinition,
    Paragraph,
    Planning,
    NodeProperty,
    TableRow,
    Keyword,
    BabelCall,
    SrcBlock,
    ExampleBlock,
    ExportBlock,
    CommentBlock,
    VerseBlock,
    Comment,
    FixedWidth,
    HorizontalRule,
    Clock,
    DiarySexp,
    LatexEnvironment,
)

OBJECT_CLASSES: tuple[type[Node], ...] = (
    Bold,
    Italic,
    Underline,
    StrikeThrough,
    Code,
    Verbatim,
    Link,
    FootnoteReference,
    Timestamp,
    Entity,
    LatexFragment,
    Subscript,
    Superscript,
    LineBreak,
    Macro,
    Target,
    RadioTarget,
    StatisticsCookie,
    ExportSnippet,
    InlineSrcBlock,
    InlineBabelCall,
    TableCell,
    PlainText,
)

NODE_CLASSES_BY_KIND: dict[str, type[Node]] = {
    cls.kind: cls for cls in (*ELEMENT_CLASSES, *OBJECT_CLASSES, Token)
}
