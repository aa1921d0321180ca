#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/classifier.py
"""Line classifier for the Org scanner.

``classify_line`` looks at one line of text plus a ``ClassifierState`` and
returns a ``LineInfo``: a tentative line kind, the indentation, and the
fields the later passes need (headline level, block name, bullet ...). The
function never looks at neighbouring lines. Everything it needs to know
about the surroundings (an open verbatim block, an open drawer, the
indentation of the open list items) arrives through the state, which the
scanner threads from line to line.

"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from orgcst.constants import VERBATIM_BLOCKS


class LineKind(Enum):
    """Tentative kinds of a single line."""

    BLANK = auto()
    HEADLINE = auto()

    # Blocks
    BLOCK_BEGIN = auto()
    BLOCK_END = auto()
    DYNAMIC_BLOCK_BEGIN = auto()
    DYNAMIC_BLOCK_END = auto()
    RAW = auto()

    # Drawers
    DRAWER_BEGIN = auto()
    DRAWER_END = auto()
    NODE_PROPERTY = auto()

    # Keyword-like lines
    KEYWORD = auto()
    BABEL_CALL = auto()
    COMMENT = auto()

    # Other structure
    FIXED_WIDTH = auto()
    HORIZONTAL_RULE = auto()
    FOOTNOTE_DEFINITION = auto()
    TABLE_ROW = auto()
    TABLE_EL_RULE = auto()
    PLANNING = auto()
    CLOCK = auto()
    DIARY_SEXP = auto()
    LATEX_BEGIN = auto()
    LATEX_END = auto()
    LIST_ITEM = auto()

    TEXT = auto()


@dataclass(frozen=True)
class ClassifierState:
    """Context a line is classified in.

    Parameters
    ----------
    block : str or None
        Upper-cased name of the open verbatim block (``"SRC"``, ``"EXAMPLE"``...)
    latex_environment : str or None
        Name of the open LaTeX environment
    drawer : str or None
        Upper-cased name of the open drawer; drawers do not nest
    in_property_drawer : bool
        Whether the open drawer is a property drawer
    list_indents : tuple of int
        Indentation of the open items of the current list context,
        innermost last

    """

    block: Optional[str] = None
    latex_environment: Optional[str] = None
    drawer: Optional[str] = None
    in_property_drawer: bool = False
    list_indents: tuple[int, ...] = ()


@dataclass(frozen=True)
class LineInfo:
    """Classification result for one line.

    Parameters
    ----------
    kind : LineKind
        Tentative line kind
    indent : int
        Width of the leading whitespace
    closes_items : int
        How many of the innermost open items this line ends by indentation
    fields : dict
        Kind-specific captures

    """

    kind: LineKind
    indent: int = 0
    closes_items: int = 0
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        """Return one captured field."""
        return self.fields.get(name, default)


BLANK_LINE_RE = re.compile(r"^[ \t]*$")
HEADLINE_RE = re.compile(r"^(\*+) ")
BLOCK_BEGIN_RE = re.compile(r"^[ \t]*#\+begin_(\S+)(?:[ \t]+(.*?))?[ \t]*$", re.IGNORECASE)
BLOCK_END_RE = re.compile(r"^[ \t]*#\+end_(\S+)", re.IGNORECASE)
DYNAMIC_BEGIN_RE = re.compile(r"^[ \t]*#\+begin:(?:[ \t]+(\S+)(?:[ \t]+(.*?))?)?[ \t]*$", re.IGNORECASE)
DYNAMIC_END_RE = re.compile(r"^[ \t]*#\+end:", re.IGNORECASE)
BABEL_CALL_RE = re.compile(r"^[ \t]*#\+call:[ \t]*(.*?)[ \t]*$", re.IGNORECASE)
KEYWORD_RE = re.compile(r"^[ \t]*#\+(\S+?):(?:[ \t]+(.*?))?[ \t]*$")
COMMENT_RE = re.compile(r"^[ \t]*#(?: |$)")
DRAWER_END_RE = re.compile(r"^[ \t]*:END:[ \t]*$", re.IGNORECASE)
DRAWER_BEGIN_RE = re.compile(r"^[ \t]*:((?:\w|[-_])+):[ \t]*$")
NODE_PROPERTY_RE = re.compile(r"^[ \t]*:(\S+?)(\+)?:(?:[ \t]+(.*?))?[ \t]*$")
FIXED_WIDTH_RE = re.compile(r"^[ \t]*:(?: |$)")
HORIZONTAL_RULE_RE = re.compile(r"^[ \t]*-{5,}[ \t]*$")
FOOTNOTE_DEFINITION_RE = re.compile(r"^\[fn:([-_\w]+)\]")
TABLE_ROW_RE = re.compile(r"^[ \t]*\|")
TABLE_RULE_RE = re.compile(r"^[ \t]*\|-")
TABLE_EL_RULE_RE = re.compile(r"^[ \t]*\+-[-+]*\+[ \t]*$")
PLANNING_RE = re.compile(r"^[ \t]*(?:CLOSED|DEADLINE|SCHEDULED):")
CLOCK_RE = re.compile(r"^[ \t]*CLOCK:")
DIARY_SEXP_RE = re.compile(r"^%%\(")
LATEX_BEGIN_RE = re.compile(r"^[ \t]*\\begin\{([A-Za-z0-9*]+)\}")
ITEM_RE = re.compile(r"^([ \t]*)([-+]|\d+[.)])(?=[ \t]|$)")
STAR_ITEM_RE = re.compile(r"^([ \t]+)(\*)(?=[ \t]|$)")


@functools.lru_cache(maxsize=64)
def latex_end_pattern(environment: str) -> re.Pattern[str]:
    """Return the pattern matching ``\\end{environment}``."""
    return re.compile(rf"^[ \t]*\\end\{{{re.escape(environment)}\}}[ \t]*$")


def _indent_of(text: str) -> int:
    return len(text) - len(text.lstrip(" \t"))


def _closed_items(list_indents: tuple[int, ...], indent: int) -> int:
    """Count innermost open items whose indentation is at least ``indent``."""
    count = 0
    for item_indent in reversed(list_indents):
        if item_indent < indent:
            break
        count += 1
    return count


def classify_line(text: str, state: ClassifierState) -> LineInfo:
    """Classify one line.

    Parameters
    ----------
    text : str
        Line text without its terminator
    state : ClassifierState
        Context handed over by the scanner

    Returns
    -------
    LineInfo
        Kind, indentation and captures of the line

    Examples
    --------
        >>> classify_line("** Title", ClassifierState()).fields
        {'level': 2}
        >>> classify_line("* not a headline", ClassifierState(block="EXAMPLE")).kind
        <LineKind.RAW: 7>

    """
    indent = _indent_of(text)

    if state.block is not None:
        end = BLOCK_END_RE.match(text)
        if end and end.group(1).upper() == state.block:
            return LineInfo(LineKind.BLOCK_END, indent, fields={"name": end.group(1)})
        return LineInfo(LineKind.RAW, indent)

    if state.latex_environment is not None:
        if latex_end_pattern(state.latex_environment).match(text):
            return LineInfo(LineKind.LATEX_END, indent)
        return LineInfo(LineKind.RAW, indent)

    if BLANK_LINE_RE.match(text):
        return LineInfo(LineKind.BLANK, indent)

    headline = HEADLINE_RE.match(text)
    if headline:
        return LineInfo(LineKind.HEADLINE, 0, fields={"level": len(headline.group(1))})

    info = _classify_body_line(text, indent, state)
    closes = _closed_items(state.list_indents, indent)
    if closes:
        return LineInfo(info.kind, info.indent, closes, info.fields)
    return info


def _classify_body_line(text: str, indent: int, state: ClassifierState) -> LineInfo:
    """Classify a non-blank line outside raw content."""
    if state.in_property_drawer:
        if DRAWER_END_RE.match(text):
            return LineInfo(LineKind.DRAWER_END, indent)
        prop = NODE_PROPERTY_RE.match(text)
        if prop:
            return LineInfo(
                LineKind.NODE_PROPERTY,
                indent,
                fields={"key": prop.group(1), "append": prop.group(2) is not None, "value": prop.group(3) or ""},
            )
        return LineInfo(LineKind.TEXT, indent)

    stripped = text[indent:]

    if stripped.startswith("#"):
        return _classify_hash_line(text, indent)

    if stripped.startswith(":"):
        if DRAWER_END_RE.match(text):
            return LineInfo(LineKind.DRAWER_END, indent)
        drawer = DRAWER_BEGIN_RE.match(text)
        if drawer:
            if state.drawer is not None:
                return LineInfo(LineKind.TEXT, indent)
            return LineInfo(LineKind.DRAWER_BEGIN, indent, fields={"name": drawer.group(1)})
        if FIXED_WIDTH_RE.match(text):
            return LineInfo(LineKind.FIXED_WIDTH, indent)
        return LineInfo(LineKind.TEXT, indent)

    if HORIZONTAL_RULE_RE.match(text):
        return LineInfo(LineKind.HORIZONTAL_RULE, indent)

    footnote = FOOTNOTE_DEFINITION_RE.match(text)
    if footnote:
        return LineInfo(
            LineKind.FOOTNOTE_DEFINITION, 0, fields={"label": footnote.group(1), "label_end": footnote.end()}
        )

    if TABLE_ROW_RE.match(text):
        return LineInfo(LineKind.TABLE_ROW, indent, fields={"rule": bool(TABLE_RULE_RE.match(text))})
    if TABLE_EL_RULE_RE.match(text):
        return LineInfo(LineKind.TABLE_EL_RULE, indent)

    if PLANNING_RE.match(text):
        return LineInfo(LineKind.PLANNING, indent)
    if CLOCK_RE.match(text):
        return LineInfo(LineKind.CLOCK, indent)
    if DIARY_SEXP_RE.match(text):
        return LineInfo(LineKind.DIARY_SEXP, indent)

    latex = LATEX_BEGIN_RE.match(text)
    if latex:
        return LineInfo(LineKind.LATEX_BEGIN, indent, fields={"environment": latex.group(1)})

    item = ITEM_RE.match(text) or STAR_ITEM_RE.match(text)
    if item:
        return LineInfo(LineKind.LIST_ITEM, indent, fields={"bullet": item.group(2), "bullet_end": item.end()})

    return LineInfo(LineKind.TEXT, indent)


def _classify_hash_line(text: str, indent: int) -> LineInfo:
    """Classify a line whose first non-blank character is ``#``."""
    begin = BLOCK_BEGIN_RE.match(text)
    if begin:
        return LineInfo(
            LineKind.BLOCK_BEGIN,
            indent,
            fields={
                "name": begin.group(1),
                "parameters": begin.group(2) or None,
                "verbatim": begin.group(1).upper() in VERBATIM_BLOCKS,
            },
        )

    dynamic = DYNAMIC_BEGIN_RE.match(text)
    if dynamic:
        return LineInfo(
            LineKind.DYNAMIC_BLOCK_BEGIN,
            indent,
            fields={"name": dynamic.group(1) or "", "arguments": dynamic.group(2) or None},
        )

    end = BLOCK_END_RE.match(text)
    if end:
        return LineInfo(LineKind.BLOCK_END, indent, fields={"name": end.group(1)})
    if DYNAMIC_END_RE.match(text):
        return LineInfo(LineKind.DYNAMIC_BLOCK_END, indent)

    call = BABEL_CALL_RE.match(text)
    if call:
        return LineInfo(LineKind.BABEL_CALL, indent, fields={"value": call.group(1)})

    keyword = KEYWORD_RE.match(text)
    if keyword:
        return LineInfo(LineKind.KEYWORD, indent, fields={"key": keyword.group(1), "value": keyword.group(2) or ""})

    if COMMENT_RE.match(text):
        return LineInfo(LineKind.COMMENT, indent)

    return LineInfo(LineKind.TEXT, indent)
