#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/scanner.py
"""Greater-element scanner.

One pass over the buffer lines groups them into a tree of ``Frame`` objects:
headlines, sections, blocks, drawers, lists, items, tables and footnote
definitions. A frame records the line that opened it, the line that closed
it (if any) and its entries, which are either nested frames or indices of
content lines. No inline markup is looked at here.

The scanner keeps an explicit stack of open frames. Before each line it
derives a ``ClassifierState`` from the stack and hands it to
``classify_line``; the state and the classification are kept for every line
so that later passes (and tests) can look at them.

Blank lines are held back until the next non-blank line, because whether
they end a list, an item or a table depends on what follows them.

"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union

from orgcst.constants import DEFAULT_MAX_NESTING_DEPTH
from orgcst.cst.buffer import Buffer, Line
from orgcst.exceptions import NestingDepthError
from orgcst.parsers.classifier import (
    HEADLINE_RE,
    ClassifierState,
    LineInfo,
    LineKind,
    classify_line,
)

logger = logging.getLogger(__name__)

LATEX_END_ANY_RE = re.compile(r"^[ \t]*\\end\{([A-Za-z0-9*]+)\}[ \t]*$")


class FrameKind(Enum):
    """Kinds of greater-element frames."""

    DOCUMENT = auto()
    HEADLINE = auto()
    SECTION = auto()
    GREATER_BLOCK = auto()
    VERBATIM_BLOCK = auto()
    DYNAMIC_BLOCK = auto()
    DRAWER = auto()
    PROPERTY_DRAWER = auto()
    PLAIN_LIST = auto()
    ITEM = auto()
    TABLE = auto()
    FOOTNOTE_DEFINITION = auto()
    LATEX_ENVIRONMENT = auto()


# Frames that end without a closing line when something else shows up
IMPLICIT_FRAMES = frozenset({FrameKind.PLAIN_LIST, FrameKind.ITEM, FrameKind.TABLE, FrameKind.FOOTNOTE_DEFINITION})
LIST_FRAMES = frozenset({FrameKind.PLAIN_LIST, FrameKind.ITEM})


@dataclass
class Frame:
    """An open or sealed greater element.

    Parameters
    ----------
    kind : FrameKind
        What the frame is
    opener : int or None
        Index of the line that opened the frame (headline, begin line, first
        item line ...); None for documents, sections, lists and tables
    indent : int
        Indentation of the opening line; for lists, the reference column
    name : str or None
        Block, drawer or environment name as written
    level : int
        Headline level
    table_el : bool
        Whether a table frame holds a table.el table
    entries : list
        Nested frames and content line indices, in order
    closer : int or None
        Index of the matching closing line, if one was seen

    """

    kind: FrameKind
    opener: Optional[int] = None
    indent: int = 0
    name: Optional[str] = None
    level: int = 0
    table_el: bool = False
    entries: list[Union[Frame, int]] = field(default_factory=list)
    closer: Optional[int] = None

    @property
    def first_line(self) -> Optional[int]:
        """Index of the first line covered by the frame."""
        if self.opener is not None:
            return self.opener
        for entry in self.entries:
            line = entry if isinstance(entry, int) else entry.first_line
            if line is not None:
                return line
        return self.closer

    @property
    def last_line(self) -> Optional[int]:
        """Index of the last line covered by the frame."""
        if self.closer is not None:
            return self.closer
        for entry in reversed(self.entries):
            line = entry if isinstance(entry, int) else entry.last_line
            if line is not None:
                return line
        return self.opener

    def child_frames(self) -> list[Frame]:
        """Nested frames, in order."""
        return [entry for entry in self.entries if isinstance(entry, Frame)]


@dataclass(frozen=True)
class ScannedLine:
    """A buffer line together with how the scanner saw it.

    Parameters
    ----------
    line : Line
        The buffer line
    state : ClassifierState
        State handed to the classifier for this line
    info : LineInfo
        What the classifier returned
    kind : LineKind
        Final kind after the scanner resolved context the classifier cannot
        see (a stray ``#+end_quote`` becomes ``TEXT``, for instance)

    """

    line: Line
    state: ClassifierState
    info: LineInfo
    kind: LineKind


@dataclass
class ScanResult:
    """Frame tree plus per-line records of one scan."""

    buffer: Buffer
    root: Frame
    lines: list[ScannedLine]


class GreaterElementScanner:
    """Line-oriented, stack-based pass building the frame tree.

    Parameters
    ----------
    buffer : Buffer
        Document to scan
    max_nesting_depth : int
        Deepest allowed stack of open frames, not counting sections

    """

    def __init__(self, buffer: Buffer, max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        self.buffer = buffer
        self.max_nesting_depth = max_nesting_depth
        self._stack: list[Frame] = []
        self._pending_blanks: list[int] = []
        self._records: list[ScannedLine] = []
        self._latex_ends: Optional[dict[str, list[int]]] = None
        self._headline_lines: list[int] = []

    def scan(self) -> ScanResult:
        """Scan the whole buffer.

        Returns
        -------
        ScanResult
            Root frame and line records

        Raises
        ------
        NestingDepthError
            If frames nest deeper than ``max_nesting_depth``

        """
        root = Frame(FrameKind.DOCUMENT)
        self._stack = [root]
        self._pending_blanks = []
        self._records = []

        for line in self.buffer.lines:
            state = self._current_state()
            info = classify_line(line.text, state)
            kind = self._process(line, info)
            self._records.append(ScannedLine(line, state, info, kind))

        if self._pending_blanks and self._top.kind is FrameKind.TABLE:
            self._pop()
        self._flush_blanks()
        while len(self._stack) > 1:
            frame = self._pop()
            self._log_unterminated(frame, "end of buffer")

        logger.debug("Scanned %d lines into %d top-level entries", len(self._records), len(root.entries))
        return ScanResult(self.buffer, root, self._records)

    # ------------------------------------------------------------------
    # Stack helpers
    # ------------------------------------------------------------------

    @property
    def _top(self) -> Frame:
        return self._stack[-1]

    def _push(self, frame: Frame, offset: int) -> Frame:
        self._top.entries.append(frame)
        self._stack.append(frame)
        depth = sum(1 for open_frame in self._stack if open_frame.kind is not FrameKind.SECTION)
        if depth > self.max_nesting_depth:
            raise NestingDepthError(depth, self.max_nesting_depth, parsing_stage="scanner", offset=offset)
        return frame

    def _pop(self) -> Frame:
        return self._stack.pop()

    def _append_line(self, index: int) -> None:
        self._top.entries.append(index)

    def _flush_blanks(self) -> None:
        for index in self._pending_blanks:
            self._append_line(index)
        self._pending_blanks = []

    def _open_section(self) -> None:
        """Open the section of a headline or the document at its first content line."""
        if self._top.kind in (FrameKind.DOCUMENT, FrameKind.HEADLINE):
            section = Frame(FrameKind.SECTION)
            self._top.entries.append(section)
            self._stack.append(section)

    def _current_state(self) -> ClassifierState:
        """Derive the classifier state from the open frames."""
        top = self._top
        if top.kind is FrameKind.VERBATIM_BLOCK:
            return ClassifierState(block=(top.name or "").upper())
        if top.kind is FrameKind.LATEX_ENVIRONMENT:
            return ClassifierState(latex_environment=top.name)

        drawer = None
        for frame in reversed(self._stack):
            if frame.kind in (FrameKind.DRAWER, FrameKind.PROPERTY_DRAWER):
                drawer = (frame.name or "").upper()
                break
            if frame.kind in (FrameKind.HEADLINE, FrameKind.DOCUMENT):
                break

        indents = []
        frames = self._stack[:-1] if top.kind is FrameKind.TABLE else self._stack
        for frame in reversed(frames):
            if frame.kind not in LIST_FRAMES:
                break
            if frame.kind is FrameKind.ITEM:
                indents.append(frame.indent)

        return ClassifierState(
            drawer=drawer,
            in_property_drawer=top.kind is FrameKind.PROPERTY_DRAWER,
            list_indents=tuple(reversed(indents)),
        )

    def _find_closable(self, kinds: frozenset[FrameKind], name: Optional[str] = None) -> Optional[int]:
        """Return the stack index of the frame a closing line would close.

        Only implicitly ending frames may sit above it; a closing line never
        reaches through another block or drawer.
        """
        for position in range(len(self._stack) - 1, -1, -1):
            frame = self._stack[position]
            if frame.kind in kinds:
                if name is None or (frame.name or "").upper() == name.upper():
                    return position
                return None
            if frame.kind not in IMPLICIT_FRAMES:
                return None
        return None

    def _close_to(self, position: int, closer: int) -> None:
        while len(self._stack) - 1 > position:
            self._pop()
        frame = self._pop()
        frame.closer = closer

    def _log_unterminated(self, frame: Frame, boundary: str) -> None:
        if frame.kind in (
            FrameKind.GREATER_BLOCK,
            FrameKind.VERBATIM_BLOCK,
            FrameKind.DYNAMIC_BLOCK,
            FrameKind.DRAWER,
            FrameKind.PROPERTY_DRAWER,
        ):
            logger.debug("Sealed unterminated %s %r at %s", frame.kind.name.lower(), frame.name, boundary)

    # ------------------------------------------------------------------
    # Line handling
    # ------------------------------------------------------------------

    def _process(self, line: Line, info: LineInfo) -> LineKind:
        kind = info.kind
        top = self._top

        if kind is LineKind.RAW:
            self._append_line(line.index)
            return kind
        if top.kind is FrameKind.VERBATIM_BLOCK and kind is LineKind.BLOCK_END:
            self._pop().closer = line.index
            return kind
        if kind is LineKind.LATEX_END:
            self._pop().closer = line.index
            return kind

        if kind is LineKind.BLANK:
            self._pending_blanks.append(line.index)
            return kind

        if kind is LineKind.HEADLINE:
            self._start_headline(line, info)
            return kind

        property_drawer_allowed = self._property_drawer_allowed(info)
        self._close_implicit_frames(info)
        self._flush_blanks()
        self._open_section()

        if kind is LineKind.BLOCK_BEGIN:
            frame_kind = FrameKind.VERBATIM_BLOCK if info.get("verbatim") else FrameKind.GREATER_BLOCK
            self._push(Frame(frame_kind, line.index, info.indent, name=info.get("name")), line.start)
            return kind

        if kind is LineKind.DYNAMIC_BLOCK_BEGIN:
            self._push(Frame(FrameKind.DYNAMIC_BLOCK, line.index, info.indent, name=info.get("name")), line.start)
            return kind

        if kind is LineKind.BLOCK_END:
            position = self._find_closable(frozenset({FrameKind.GREATER_BLOCK}), info.get("name"))
            return self._close_or_text(position, line, kind)

        if kind is LineKind.DYNAMIC_BLOCK_END:
            position = self._find_closable(frozenset({FrameKind.DYNAMIC_BLOCK}))
            return self._close_or_text(position, line, kind)

        if kind is LineKind.DRAWER_BEGIN:
            name = info.get("name")
            if name.upper() == "PROPERTIES" and property_drawer_allowed:
                frame = Frame(FrameKind.PROPERTY_DRAWER, line.index, info.indent, name=name)
            else:
                frame = Frame(FrameKind.DRAWER, line.index, info.indent, name=name)
            self._push(frame, line.start)
            return kind

        if kind is LineKind.DRAWER_END:
            position = self._find_closable(frozenset({FrameKind.DRAWER, FrameKind.PROPERTY_DRAWER}))
            return self._close_or_text(position, line, kind)

        if kind is LineKind.LATEX_BEGIN:
            environment = info.get("environment")
            if self._has_latex_end(line.index, environment):
                self._push(Frame(FrameKind.LATEX_ENVIRONMENT, line.index, info.indent, name=environment), line.start)
                return kind
            self._append_line(line.index)
            return LineKind.TEXT

        if kind is LineKind.LIST_ITEM:
            if not (self._top.kind is FrameKind.PLAIN_LIST and self._top.indent == info.indent):
                self._push(Frame(FrameKind.PLAIN_LIST, indent=info.indent), line.start)
            self._push(Frame(FrameKind.ITEM, line.index, info.indent), line.start)
            return kind

        if kind in (LineKind.TABLE_ROW, LineKind.TABLE_EL_RULE):
            if self._top.kind is not FrameKind.TABLE:
                self._push(
                    Frame(FrameKind.TABLE, indent=info.indent, table_el=kind is LineKind.TABLE_EL_RULE), line.start
                )
            self._append_line(line.index)
            return kind

        if kind is LineKind.FOOTNOTE_DEFINITION:
            self._push(Frame(FrameKind.FOOTNOTE_DEFINITION, line.index, 0, name=info.get("label")), line.start)
            return kind

        self._append_line(line.index)
        return kind

    def _close_or_text(self, position: Optional[int], line: Line, kind: LineKind) -> LineKind:
        if position is None:
            self._append_line(line.index)
            return LineKind.TEXT
        self._close_to(position, line.index)
        return kind

    def _start_headline(self, line: Line, info: LineInfo) -> None:
        level = info.get("level")
        if self._pending_blanks:
            while self._top.kind is FrameKind.TABLE:
                self._pop()
        self._flush_blanks()
        while not (
            self._top.kind is FrameKind.DOCUMENT or (self._top.kind is FrameKind.HEADLINE and self._top.level < level)
        ):
            frame = self._pop()
            self._log_unterminated(frame, f"headline on line {line.index + 1}")
        self._push(Frame(FrameKind.HEADLINE, line.index, 0, level=level), line.start)

    def _close_implicit_frames(self, info: LineInfo) -> None:
        """Pop tables, items, lists and footnote definitions the line ends."""
        kind = info.kind
        to_close = info.closes_items
        while True:
            top = self._top
            if top.kind is FrameKind.TABLE:
                if self._pending_blanks or not self._continues_table(top, info):
                    self._pop()
                    continue
                return
            if top.kind is FrameKind.ITEM:
                if len(self._pending_blanks) >= 2:
                    while self._top.kind in LIST_FRAMES:
                        self._pop()
                    continue
                if to_close > 0:
                    self._flush_blanks()
                    self._pop()
                    to_close -= 1
                    continue
                return
            if top.kind is FrameKind.PLAIN_LIST:
                if kind is LineKind.LIST_ITEM and info.indent == top.indent:
                    return
                self._pop()
                continue
            if top.kind is FrameKind.FOOTNOTE_DEFINITION:
                if len(self._pending_blanks) >= 2:
                    self._pop()
                    continue
                if kind is LineKind.FOOTNOTE_DEFINITION:
                    self._flush_blanks()
                    self._pop()
                    continue
                return
            return

    @staticmethod
    def _continues_table(table: Frame, info: LineInfo) -> bool:
        if table.table_el:
            return info.kind in (LineKind.TABLE_ROW, LineKind.TABLE_EL_RULE)
        if info.kind is LineKind.TABLE_ROW:
            return True
        return info.kind is LineKind.KEYWORD and str(info.get("key", "")).upper() == "TBLFM"

    def _property_drawer_allowed(self, info: LineInfo) -> bool:
        """Whether a ``:PROPERTIES:`` line here opens a property drawer.

        That is the case right after a headline or its planning line, and at
        the top of the first section, where only comments may precede it.
        """
        if info.kind is not LineKind.DRAWER_BEGIN:
            return False
        top = self._top
        if top.kind is FrameKind.DOCUMENT:
            return True
        if top.kind is FrameKind.HEADLINE:
            return not top.entries and not self._pending_blanks
        if top.kind is not FrameKind.SECTION:
            return False
        parent = self._stack[-2]
        kinds = [self._records[entry].kind if isinstance(entry, int) else None for entry in top.entries]
        if parent.kind is FrameKind.DOCUMENT:
            return all(kind in (LineKind.COMMENT, LineKind.BLANK) for kind in kinds)
        if parent.kind is FrameKind.HEADLINE:
            only_child = len(parent.entries) == 1 and parent.entries[0] is top
            return only_child and not self._pending_blanks and kinds == [LineKind.PLANNING]
        return False

    def _index_latex_ends(self) -> dict[str, list[int]]:
        """Line indices of every ``\\end{...}`` line by environment, plus headline lines."""
        ends: dict[str, list[int]] = {}
        for line in self.buffer.lines:
            end = LATEX_END_ANY_RE.match(line.text)
            if end:
                ends.setdefault(end.group(1), []).append(line.index)
            elif HEADLINE_RE.match(line.text):
                self._headline_lines.append(line.index)
        return ends

    def _has_latex_end(self, index: int, environment: str) -> bool:
        """Whether ``\\end{environment}`` follows before the next headline."""
        if self._latex_ends is None:
            self._latex_ends = self._index_latex_ends()
        ends = self._latex_ends.get(environment, [])
        position = bisect_right(ends, index)
        if position == len(ends):
            return False
        headline = bisect_right(self._headline_lines, index)
        return headline == len(self._headline_lines) or ends[position] < self._headline_lines[headline]


def scan(buffer: Buffer, max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH) -> ScanResult:
    """Scan ``buffer`` into a frame tree; see ``GreaterElementScanner``."""
    return GreaterElementScanner(buffer, max_nesting_depth).scan()
