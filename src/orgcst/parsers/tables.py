#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/tables.py
"""Cell splitting for Org table rows.

A ``|`` separates cells unless it sits inside an inline code (``~...~``) or
verbatim (``=...=``) span on the same row. This module does the small amount
of inline scanning needed to tell the two apart, so that the element parser
does not have to call into the object parser while it is still working out
the structure of a row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from orgcst.constants import EMPHASIS_POST_CHARS, EMPHASIS_PRE_CHARS

VERBATIM_MARKERS = frozenset("~=")

RowPartKind = Literal["separator", "cell", "trailing"]


@dataclass(frozen=True)
class RowPart:
    """One piece of a table row.

    Parameters
    ----------
    kind : {"separator", "cell", "trailing"}
        A ``|``, the text of a cell between separators, or whitespace after
        the last separator
    start : int
        Offset of the piece within the row text
    end : int
        Offset just past the piece

    """

    kind: RowPartKind
    start: int
    end: int


def _valid_pre(text: str, position: int, cell_start: int) -> bool:
    if position == cell_start:
        return True
    previous = text[position - 1]
    return previous.isspace() or previous in EMPHASIS_PRE_CHARS


def _valid_post(text: str, position: int) -> bool:
    if position >= len(text):
        return True
    following = text[position]
    return following.isspace() or following in EMPHASIS_POST_CHARS or following == "|"


def find_verbatim_close(text: str, position: int, cell_start: int) -> Optional[int]:
    """Return the offset of the marker closing a code or verbatim span.

    Parameters
    ----------
    text : str
        Row text
    position : int
        Offset of a ``~`` or ``=`` that may open a span
    cell_start : int
        Offset where the current cell begins; counts as a line start for the
        border rule

    Returns
    -------
    int or None
        Offset of the closing marker, or None when the marker does not open
        a span

    """
    marker = text[position]
    if not _valid_pre(text, position, cell_start):
        return None
    body_start = position + 1
    if body_start >= len(text) or text[body_start].isspace():
        return None
    search = body_start + 1
    while True:
        close = text.find(marker, search)
        if close == -1:
            return None
        if not text[close - 1].isspace() and _valid_post(text, close + 1):
            return close
        search = close + 1


def split_row(text: str) -> list[RowPart]:
    """Split a standard table row into separators and cells.

    ``text`` is the row without indentation and line terminator, so it starts
    with ``|``. Cell pieces keep their padding; callers strip it.

    Examples
    --------
        >>> [(p.kind, p.start, p.end) for p in split_row("| ~a|b~ |")]
        [('separator', 0, 1), ('cell', 1, 8), ('separator', 8, 9)]

    """
    parts: list[RowPart] = []
    length = len(text)
    cell_start = 0
    position = 0
    while position < length:
        char = text[position]
        if char == "|":
            if position > cell_start:
                parts.append(RowPart("cell", cell_start, position))
            parts.append(RowPart("separator", position, position + 1))
            position += 1
            cell_start = position
            continue
        if char in VERBATIM_MARKERS:
            content_start = cell_start
            while content_start < position and text[content_start] in " \t":
                content_start += 1
            close = find_verbatim_close(text, position, content_start)
            if close is not None:
                position = close + 1
                continue
        position += 1

    if cell_start < length:
        kind: RowPartKind = "trailing" if not text[cell_start:].strip() else "cell"
        parts.append(RowPart(kind, cell_start, length))
    return _fill_empty_cells(parts)


def _fill_empty_cells(parts: list[RowPart]) -> list[RowPart]:
    """Insert zero-width cells between adjacent separators."""
    filled: list[RowPart] = []
    for index, part in enumerate(parts):
        filled.append(part)
        if part.kind == "separator" and index + 1 < len(parts) and parts[index + 1].kind == "separator":
            filled.append(RowPart("cell", part.end, part.end))
    return filled


def is_rule_row(text: str) -> bool:
    """Whether a row (without indentation) is a ``|---+---|`` rule."""
    return text.startswith("|-")
