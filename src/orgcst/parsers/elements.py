#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/elements.py
"""Element parser: turns the scanner's frame tree into CST nodes.

``ElementBuilder`` walks the frames top-down. Inside every container it
groups the remaining content lines into lesser elements (paragraphs,
comments, keywords, clocks ...), splits table rows into cells, takes list
items and headlines apart into their components, and binds runs of
affiliated keyword lines to the element that follows them. Text-bearing
ranges are handed to the ``ObjectParser``.

Every character of the buffer ends up in exactly one leaf: delimiters,
indentation, blank lines and raw block bodies become ``Token`` nodes.
"""

from __future__ import annotations

import logging
import re
from dataclasses import fields, replace
from typing import Optional

from orgcst.constants import (
    AFFILIATED_KEYWORDS,
    AFFILIATED_TRANSLATIONS,
    ARCHIVE_TAG,
    COMMENT_KEYWORD,
    DUAL_KEYWORDS,
    FOOTNOTE_SECTION_TITLE,
    GREATER_BLOCKS,
    PARSED_KEYWORDS,
    Granularity,
)
from orgcst.cst.buffer import Line
from orgcst.cst.nodes import (
    AffiliatedKeyword,
    BabelCall,
    CenterBlock,
    Clock,
    Comment,
    CommentBlock,
    DiarySexp,
    Document,
    Drawer,
    DynamicBlock,
    ExampleBlock,
    ExportBlock,
    FixedWidth,
    FootnoteDefinition,
    Headline,
    HorizontalRule,
    Item,
    Keyword,
    LatexEnvironment,
    Node,
    NodeProperty,
    Paragraph,
    PlainList,
    Planning,
    PropertyDrawer,
    QuoteBlock,
    Section,
    Span,
    SpecialBlock,
    SrcBlock,
    Table,
    TableCell,
    TableRow,
    Token,
    VerseBlock,
)
from orgcst.parsers.classifier import (
    BLOCK_BEGIN_RE,
    DYNAMIC_BEGIN_RE,
    KEYWORD_RE,
    NODE_PROPERTY_RE,
    LineKind,
)
from orgcst.parsers.objects import NO_LINE_BREAK_SET, STANDARD_SET, TABLE_CELL_SET, ObjectParser
from orgcst.parsers.scanner import Frame, FrameKind, ScanResult
from orgcst.parsers.tables import is_rule_row, split_row

logger = logging.getLogger(__name__)

# Line kinds that continue a paragraph
PARAGRAPH_KINDS = frozenset({LineKind.TEXT, LineKind.PLANNING})

PRIORITY_RE = re.compile(r"\[#([A-Z0-9])\](?=[ \t]|$)")
TODO_WORD_RE = re.compile(r"(\S+)(?=[ \t]|$)")
COMMENT_WORD_RE = re.compile(rf"{COMMENT_KEYWORD}(?=[ \t]|$)")
HEADLINE_TAGS_RE = re.compile(r"(?:^|[ \t]+)(:[\w@#%:]+:)[ \t]*$")
WHITESPACE_RE = re.compile(r"[ \t]*")

ITEM_LINE_RE = re.compile(
    r"(?P<indent>[ \t]*)(?P<bullet>[-+*]|\d+[.)])(?:[ \t]+|$)"
    r"(?:(?P<counter>\[@(?P<counter_value>\d+)\])(?:[ \t]+|$))?"
    r"(?:(?P<checkbox>\[(?P<checkbox_state>[ X-])\])(?:[ \t]+|$))?"
)
ITEM_TAG_RE = re.compile(r"(?P<tag>.*)(?P<separator>[ \t]+::)(?:[ \t]+|$)")
CHECKBOX_STATES = {" ": "off", "X": "on", "-": "trans"}

PLANNING_KEYWORD_RE = re.compile(r"(CLOSED|DEADLINE|SCHEDULED):")
CLOCK_LINE_RE = re.compile(r"([ \t]*)CLOCK:[ \t]*")
CLOCK_DURATION_RE = re.compile(r"[ \t]+=>[ \t]+(\S+)")
AFFILIATED_KEY_RE = re.compile(r"([^\[\]]+)(?:\[(.*)\])?")
BABEL_CALL_VALUE_RE = re.compile(r"([^()\[\]]+?)(?:\[([^\]]*)\])?\(([^)]*)\)(?:[ \t]*\[([^\]]*)\])?[ \t]*")
SWITCHES_END_RE = re.compile(r"(?:^|[ \t]):")
COMMA_ESCAPE_RE = re.compile(r"^([ \t]*),(,*(?:\*|#\+))", re.MULTILINE)


def normalize_keyword_key(raw_key: str) -> str:
    """Upper-case a keyword key up to its ``[option]`` part."""
    base, bracket, rest = raw_key.partition("[")
    return base.upper() + bracket + rest


def parse_affiliated_keyword(text: str) -> Optional[AffiliatedKeyword]:
    """Parse a ``#+KEY[option]: value`` line into an affiliated keyword.

    Returns None when the line is a keyword that cannot be affiliated.
    """
    match = KEYWORD_RE.match(text)
    if not match:
        return None
    key_match = AFFILIATED_KEY_RE.fullmatch(match.group(1))
    if not key_match:
        return None
    base = key_match.group(1).upper()
    if base not in AFFILIATED_KEYWORDS and not base.startswith("ATTR_"):
        return None
    key = AFFILIATED_TRANSLATIONS.get(base, base)
    option = key_match.group(2)
    if option is not None and key not in DUAL_KEYWORDS:
        return None
    return AffiliatedKeyword(key=key, value=(match.group(2) or "").strip(), option=option)


def split_src_header(parameters: Optional[str]) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """Split a source block header into ``(language, switches, parameters)``.

    Examples
    --------
        >>> split_src_header("python -n :results output")
        ('python', '-n', ':results output')

    """
    if not parameters:
        return None, None, None
    language = None
    rest = parameters.strip()
    head, _, tail = rest.partition(" ")
    if not head.startswith(("-", ":")):
        language = head
        rest = tail.strip()
    match = SWITCHES_END_RE.search(rest)
    if match:
        switches = rest[: match.start()].strip() or None
        header = rest[match.start() :].strip() or None
    else:
        switches, header = rest or None, None
    return language, switches, header


def unescape_block_body(body: str) -> str:
    """Remove the comma protecting ``*`` and ``#+`` at the start of body lines."""
    return COMMA_ESCAPE_RE.sub(r"\1\2", body)


class ElementBuilder:
    """Build the typed CST from a scan result.

    Parameters
    ----------
    scan : ScanResult
        Output of the greater-element scanner
    todo_keywords : frozenset of str
        Keywords marking a headline as not done
    done_keywords : frozenset of str
        Keywords marking a headline as done
    granularity : {"headline", "element", "object"}
        How deep to parse; ``headline`` keeps section bodies as raw tokens and
        ``element`` skips inline objects
    max_nesting_depth : int
        Limit handed to the object parser

    """

    def __init__(
        self,
        scan: ScanResult,
        todo_keywords: frozenset[str],
        done_keywords: frozenset[str],
        granularity: Granularity = "object",
        max_nesting_depth: int = 128,
    ):
        self.scan = scan
        self.text = scan.buffer.text
        self.todo_keywords = todo_keywords
        self.done_keywords = done_keywords
        self.granularity = granularity
        self.objects = ObjectParser(self.text, max_nesting_depth)

    def build(self) -> Document:
        """Build the ``Document`` node."""
        children: list[Node] = []
        for entry in self.scan.root.entries:
            if isinstance(entry, int):
                children.append(self._blank(entry))
            elif entry.kind is FrameKind.SECTION:
                children.append(self._section(entry, planning_allowed=False))
            else:
                children.append(self._headline(entry))
        document = Document(Span(0, len(self.text)), children=tuple(children))
        logger.debug("Built document with %d top-level headlines", len(document.headlines))
        return document

    # ------------------------------------------------------------------
    # Leaf helpers
    # ------------------------------------------------------------------

    def _line(self, index: int) -> Line:
        return self.scan.lines[index].line

    def _kind(self, index: int) -> LineKind:
        return self.scan.lines[index].kind

    def _token(self, start: int, end: int, role: str) -> Token:
        return Token(Span(start, end), role=role, text=self.text[start:end])

    def _add_token(self, children: list[Node], start: int, end: int, role: str) -> None:
        if end > start:
            children.append(self._token(start, end, role))

    def _add_newline(self, children: list[Node], line: Line) -> None:
        self._add_token(children, line.end, line.stop, "newline")

    def _blank(self, index: int) -> Token:
        line = self._line(index)
        return self._token(line.start, line.stop, "blank")

    def _whole_line(self, index: int, role: str) -> Token:
        line = self._line(index)
        return self._token(line.start, line.stop, role)

    def _line_children(self, index: int, role: str = "line") -> list[Node]:
        line = self._line(index)
        children: list[Node] = []
        self._add_token(children, line.start, line.end, role)
        self._add_newline(children, line)
        return children

    def _objects(self, start: int, end: int, allowed: frozenset = STANDARD_SET) -> list[Node]:
        if end <= start:
            return []
        if self.granularity != "object":
            return [self._token(start, end, "contents")]
        return self.objects.parse(start, end, allowed)

    def _frame_span(self, frame: Frame) -> Span:
        first, last = frame.first_line, frame.last_line
        assert first is not None and last is not None
        return Span(self._line(first).start, self._line(last).stop)

    def _raw(self, start: int, end: int) -> str:
        return self.text[start:end].replace("\r\n", "\n")

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _build_entries(self, entries: list, planning_allowed: bool = False) -> list[Node]:
        """Build the elements of one container, binding affiliated keywords."""
        nodes: list[Node] = []
        pending: list[int] = []
        index = 0
        while index < len(entries):
            entry = entries[index]
            if isinstance(entry, Frame):
                node = self._frame(entry)
                index += 1
            else:
                kind = self._kind(entry)
                if kind is LineKind.BLANK:
                    nodes.extend(self._standalone_keywords(pending))
                    pending = []
                    nodes.append(self._blank(entry))
                    index += 1
                    continue
                if kind is LineKind.KEYWORD and parse_affiliated_keyword(self._line(entry).text) is not None:
                    pending.append(entry)
                    index += 1
                    continue
                node, index = self._lesser(entries, index, planning_allowed and index == 0)

            if pending:
                if _accepts_affiliated(node):
                    node = self._attach_affiliated(node, pending)
                else:
                    nodes.extend(self._standalone_keywords(pending))
                pending = []
            nodes.append(node)

        nodes.extend(self._standalone_keywords(pending))
        return nodes

    def _attach_affiliated(self, node: Node, lines: list[int]) -> Node:
        keywords = []
        tokens: list[Node] = []
        for index in lines:
            keyword = parse_affiliated_keyword(self._line(index).text)
            assert keyword is not None
            keywords.append(keyword)
            tokens.append(self._whole_line(index, "affiliated"))
        start = self._line(lines[0]).start
        return replace(
            node,
            span=Span(start, node.span.end),
            affiliated=tuple(keywords),
            children=(*tokens, *node.children),
        )

    def _standalone_keywords(self, lines: list[int]) -> list[Node]:
        return [self._keyword(index) for index in lines]

    def _frame(self, frame: Frame) -> Node:
        kind = frame.kind
        if kind is FrameKind.GREATER_BLOCK:
            return self._greater_block(frame)
        if kind is FrameKind.VERBATIM_BLOCK:
            return self._verbatim_block(frame)
        if kind is FrameKind.DYNAMIC_BLOCK:
            return self._dynamic_block(frame)
        if kind is FrameKind.DRAWER:
            return self._drawer(frame)
        if kind is FrameKind.PROPERTY_DRAWER:
            return self._property_drawer(frame)
        if kind is FrameKind.PLAIN_LIST:
            return self._plain_list(frame)
        if kind is FrameKind.TABLE:
            return self._table(frame)
        if kind is FrameKind.FOOTNOTE_DEFINITION:
            return self._footnote_definition(frame)
        if kind is FrameKind.LATEX_ENVIRONMENT:
            return self._latex_environment(frame)
        if kind is FrameKind.SECTION:
            return self._section(frame, planning_allowed=False)
        if kind is FrameKind.HEADLINE:
            return self._headline(frame)
        raise AssertionError(f"Unexpected frame kind {kind}")

    def _section(self, frame: Frame, planning_allowed: bool) -> Section:
        span = self._frame_span(frame)
        if self.granularity == "headline":
            return Section(span, children=(self._token(span.start, span.end, "contents"),))
        return Section(span, children=tuple(self._build_entries(frame.entries, planning_allowed)))

    def _delimited(self, frame: Frame, contents: list[Node]) -> tuple[Node, ...]:
        """Begin line, contents and end line (when present) of a frame."""
        children: list[Node] = [self._whole_line(frame.opener, "begin"), *contents]
        if frame.closer is not None:
            children.append(self._whole_line(frame.closer, "end"))
        return tuple(children)

    # ------------------------------------------------------------------
    # Headlines
    # ------------------------------------------------------------------

    def _headline(self, frame: Frame) -> Headline:
        assert frame.opener is not None
        line = self._line(frame.opener)
        properties, children = self._headline_line(line)
        for position, entry in enumerate(frame.entries):
            if isinstance(entry, int):
                children.append(self._blank(entry))
            elif entry.kind is FrameKind.SECTION:
                children.append(self._section(entry, planning_allowed=position == 0))
            else:
                children.append(self._headline(entry))
        return Headline(self._frame_span(frame), children=tuple(children), **properties)

    def _headline_line(self, line: Line) -> tuple[dict, list[Node]]:
        text = line.text
        base = line.start
        level = len(text) - len(text.lstrip("*"))
        children: list[Node] = [self._token(base, base + level, "stars")]
        cursor = level

        def skip_whitespace() -> None:
            nonlocal cursor
            stop = WHITESPACE_RE.match(text, cursor).end()
            self._add_token(children, base + cursor, base + stop, "whitespace")
            cursor = stop

        skip_whitespace()
        todo_keyword = None
        todo_type = None
        word = TODO_WORD_RE.match(text, cursor)
        if word and (word.group(1) in self.todo_keywords or word.group(1) in self.done_keywords):
            todo_keyword = word.group(1)
            todo_type = "done" if todo_keyword in self.done_keywords else "todo"
            children.append(self._token(base + cursor, base + word.end(), "todo"))
            cursor = word.end()
            skip_whitespace()

        priority = None
        cookie = PRIORITY_RE.match(text, cursor)
        if cookie:
            priority = cookie.group(1)
            children.append(self._token(base + cursor, base + cookie.end(), "priority"))
            cursor = cookie.end()
            skip_whitespace()

        commented = False
        comment = COMMENT_WORD_RE.match(text, cursor)
        if comment:
            commented = True
            children.append(self._token(base + cursor, base + comment.end(), "comment"))
            cursor = comment.end()
            skip_whitespace()

        rest = text[cursor:]
        tags: tuple[str, ...] = ()
        title_end = len(text)
        tags_start = tags_end = len(text)
        tag_match = HEADLINE_TAGS_RE.search(rest)
        if tag_match:
            title_end = cursor + tag_match.start()
            tags_start, tags_end = cursor + tag_match.start(1), cursor + tag_match.end(1)
            tags = tuple(dict.fromkeys(tag for tag in tag_match.group(1).split(":") if tag))
        title = text[cursor:title_end].rstrip(" \t")
        title_stop = cursor + len(title)

        if self.granularity == "object":
            children.extend(self.objects.parse(base + cursor, base + title_stop, NO_LINE_BREAK_SET))
        else:
            self._add_token(children, base + cursor, base + title_stop, "title")
        self._add_token(children, base + title_stop, base + tags_start, "whitespace")
        self._add_token(children, base + tags_start, base + tags_end, "tags")
        self._add_token(children, base + tags_end, line.end, "whitespace")
        self._add_newline(children, line)

        separator = text[title_stop:tags_start]
        properties = {
            "level": level,
            "todo_keyword": todo_keyword,
            "todo_type": todo_type,
            "priority": priority,
            "commented": commented,
            "title": title,
            "tags": tags,
            "archived": ARCHIVE_TAG in tags,
            "footnote_section": title == FOOTNOTE_SECTION_TITLE,
            "tags_aligned": bool(tags) and bool(title) and separator != " ",
        }
        return properties, children

    # ------------------------------------------------------------------
    # Lesser elements
    # ------------------------------------------------------------------

    def _lesser(self, entries: list, index: int, planning_position: bool) -> tuple[Node, int]:
        """Build the lesser element starting at ``entries[index]``."""
        line_index = entries[index]
        kind = self._kind(line_index)

        if kind is LineKind.PLANNING and planning_position:
            planning = self._planning(line_index)
            if planning is not None:
                return planning, index + 1
        if kind is LineKind.CLOCK:
            clock = self._clock(line_index)
            if clock is not None:
                return clock, index + 1
        if kind in (LineKind.COMMENT, LineKind.FIXED_WIDTH):
            stop = index + 1
            while stop < len(entries) and isinstance(entries[stop], int) and self._kind(entries[stop]) is kind:
                stop += 1
            run = entries[index:stop]
            node = self._comment(run) if kind is LineKind.COMMENT else self._fixed_width(run)
            return node, stop
        if kind is LineKind.HORIZONTAL_RULE:
            line = self._line(line_index)
            return HorizontalRule(Span(line.start, line.stop), children=tuple(self._line_children(line_index))), index + 1
        if kind is LineKind.KEYWORD:
            return self._keyword(line_index), index + 1
        if kind is LineKind.BABEL_CALL:
            return self._babel_call(line_index), index + 1
        if kind is LineKind.DIARY_SEXP:
            line = self._line(line_index)
            node = DiarySexp(
                Span(line.start, line.stop),
                value=line.text.strip(),
                children=tuple(self._line_children(line_index)),
            )
            return node, index + 1
        if kind is LineKind.NODE_PROPERTY:
            return self._node_property(line_index), index + 1

        stop = index + 1
        while stop < len(entries) and isinstance(entries[stop], int) and self._kind(entries[stop]) in PARAGRAPH_KINDS:
            stop += 1
        return self._paragraph(self._line(line_index).start, entries[index:stop]), stop

    def _paragraph(self, start: int, lines: list[int]) -> Paragraph:
        last = self._line(lines[-1])
        children = self._objects(start, last.end)
        self._add_newline(children, last)
        return Paragraph(Span(start, last.stop), children=tuple(children))

    def _continuation(self, entries: list) -> list[int]:
        """Leading entries that continue a paragraph started on an opening line."""
        lines = []
        for entry in entries:
            if not isinstance(entry, int) or self._kind(entry) not in PARAGRAPH_KINDS:
                break
            lines.append(entry)
        return lines

    def _comment(self, lines: list[int]) -> Comment:
        children: list[Node] = []
        values = []
        for index in lines:
            children.extend(self._line_children(index))
            stripped = self._line(index).text.lstrip(" \t")[1:]
            values.append(stripped[1:] if stripped.startswith(" ") else stripped)
        span = Span(self._line(lines[0]).start, self._line(lines[-1]).stop)
        return Comment(span, value="\n".join(values), children=tuple(children))

    def _fixed_width(self, lines: list[int]) -> FixedWidth:
        children: list[Node] = []
        values = []
        for index in lines:
            children.extend(self._line_children(index))
            stripped = self._line(index).text.lstrip(" \t")[1:]
            values.append(stripped[1:] if stripped.startswith(" ") else stripped)
        span = Span(self._line(lines[0]).start, self._line(lines[-1]).stop)
        return FixedWidth(span, value="\n".join(values), children=tuple(children))

    def _keyword(self, index: int) -> Keyword:
        line = self._line(index)
        match = KEYWORD_RE.match(line.text)
        assert match is not None
        key = normalize_keyword_key(match.group(1))
        value = match.group(2) or ""
        children: list[Node] = []
        if value and key in PARSED_KEYWORDS and self.granularity == "object":
            value_start, value_end = line.start + match.start(2), line.start + match.end(2)
            self._add_token(children, line.start, value_start, "key")
            children.extend(self.objects.parse(value_start, value_end))
            self._add_token(children, value_end, line.end, "whitespace")
            self._add_newline(children, line)
        else:
            children = self._line_children(index)
        return Keyword(Span(line.start, line.stop), key=key, value=value, children=tuple(children))

    def _babel_call(self, index: int) -> BabelCall:
        line = self._line(index)
        value = line.text.split(":", 1)[1].strip()
        call, inside, arguments, end_header = value or None, None, None, None
        match = BABEL_CALL_VALUE_RE.fullmatch(value)
        if match:
            call, inside, arguments, end_header = match.group(1).strip(), match.group(2), match.group(3), match.group(4)
        return BabelCall(
            Span(line.start, line.stop),
            call=call,
            inside_header=inside,
            arguments=arguments,
            end_header=end_header,
            value=value,
            children=tuple(self._line_children(index)),
        )

    def _node_property(self, index: int) -> NodeProperty:
        line = self._line(index)
        match = NODE_PROPERTY_RE.match(line.text)
        assert match is not None
        return NodeProperty(
            Span(line.start, line.stop),
            key=match.group(1),
            value=match.group(3) or "",
            append=match.group(2) is not None,
            children=tuple(self._line_children(index)),
        )

    def _planning(self, index: int) -> Optional[Planning]:
        """Build a planning line; None if anything but stamps and keywords is on it."""
        line = self._line(index)
        text = self.text
        children: list[Node] = []
        values: dict[str, str] = {}
        cursor = line.start
        for match in PLANNING_KEYWORD_RE.finditer(text, line.start, line.end):
            if match.start() < cursor:
                continue
            if text[cursor : match.start()].strip(" \t"):
                return None
            self._add_token(children, cursor, match.start(), "whitespace")
            children.append(self._token(match.start(), match.end(), "planning_keyword"))
            stamp_start = WHITESPACE_RE.match(text, match.end(), line.end).end()
            self._add_token(children, match.end(), stamp_start, "whitespace")
            timestamp = self.objects.parse_timestamp(stamp_start, line.end)
            if timestamp is None:
                return None
            children.append(timestamp)
            values[match.group(1).lower()] = timestamp.raw_value
            cursor = timestamp.span.end
        if not values or text[cursor : line.end].strip(" \t"):
            return None
        self._add_token(children, cursor, line.end, "whitespace")
        self._add_newline(children, line)
        return Planning(Span(line.start, line.stop), children=tuple(children), **values)

    def _clock(self, index: int) -> Optional[Clock]:
        line = self._line(index)
        text = self.text
        head = CLOCK_LINE_RE.match(text, line.start, line.end)
        if head is None:
            return None
        children: list[Node] = []
        self._add_token(children, line.start, head.start() + len(head.group(1)), "indent")
        children.append(self._token(head.start() + len(head.group(1)), head.end(), "keyword"))
        timestamp = self.objects.parse_timestamp(head.end(), line.end)
        if timestamp is None:
            return None
        children.append(timestamp)
        cursor = timestamp.span.end
        duration = None
        tail = CLOCK_DURATION_RE.match(text, cursor, line.end)
        if tail:
            duration = tail.group(1)
            children.append(self._token(cursor, tail.end(), "duration"))
            cursor = tail.end()
        if text[cursor : line.end].strip(" \t"):
            return None
        self._add_token(children, cursor, line.end, "whitespace")
        self._add_newline(children, line)
        return Clock(
            Span(line.start, line.stop),
            value=timestamp.raw_value,
            duration=duration,
            status="closed" if duration else "running",
            children=tuple(children),
        )

    # ------------------------------------------------------------------
    # Blocks, drawers, environments
    # ------------------------------------------------------------------

    def _greater_block(self, frame: Frame) -> Node:
        match = BLOCK_BEGIN_RE.match(self._line(frame.opener).text)
        assert match is not None
        parameters = match.group(2) or None
        contents = self._build_entries(frame.entries)
        span = self._frame_span(frame)
        children = self._delimited(frame, contents)
        name = frame.name or ""
        if name.upper() in GREATER_BLOCKS:
            cls = CenterBlock if name.upper() == "CENTER" else QuoteBlock
            return cls(span, parameters=parameters, children=children)
        return SpecialBlock(span, block_type=name, parameters=parameters, children=children)

    def _dynamic_block(self, frame: Frame) -> DynamicBlock:
        match = DYNAMIC_BEGIN_RE.match(self._line(frame.opener).text)
        assert match is not None
        return DynamicBlock(
            self._frame_span(frame),
            block_name=match.group(1) or "",
            arguments=match.group(2) or None,
            children=self._delimited(frame, self._build_entries(frame.entries)),
        )

    def _verbatim_block(self, frame: Frame) -> Node:
        match = BLOCK_BEGIN_RE.match(self._line(frame.opener).text)
        assert match is not None
        parameters = match.group(2) or None
        name = (frame.name or "").upper()
        span = self._frame_span(frame)

        body: list[Node] = []
        value = ""
        if frame.entries:
            first, last = self._line(frame.entries[0]), self._line(frame.entries[-1])
            value = "\n".join(self._line(index).text for index in frame.entries) + "\n"
            if name == "VERSE":
                body = self._objects(first.start, last.stop)
            else:
                body = [self._token(first.start, last.stop, "value")]
        children = self._delimited(frame, body)

        if name == "SRC":
            language, switches, header = split_src_header(parameters)
            return SrcBlock(
                span,
                language=language,
                switches=switches,
                parameters=header,
                value=unescape_block_body(value),
                children=children,
            )
        if name == "EXAMPLE":
            return ExampleBlock(span, switches=parameters, value=unescape_block_body(value), children=children)
        if name == "EXPORT":
            backend = parameters.split()[0] if parameters else None
            return ExportBlock(span, backend=backend, value=unescape_block_body(value), children=children)
        if name == "COMMENT":
            return CommentBlock(span, value=unescape_block_body(value), children=children)
        return VerseBlock(span, parameters=parameters, children=children)

    def _drawer(self, frame: Frame) -> Drawer:
        return Drawer(
            self._frame_span(frame),
            drawer_name=(frame.name or "").upper(),
            children=self._delimited(frame, self._build_entries(frame.entries)),
        )

    def _property_drawer(self, frame: Frame) -> PropertyDrawer:
        return PropertyDrawer(
            self._frame_span(frame), children=self._delimited(frame, self._build_entries(frame.entries))
        )

    def _latex_environment(self, frame: Frame) -> LatexEnvironment:
        span = self._frame_span(frame)
        last = self._line(frame.last_line)
        children: list[Node] = [self._token(span.start, last.end, "value")]
        self._add_newline(children, last)
        return LatexEnvironment(
            span,
            environment=frame.name or "",
            value=self._raw(span.start, last.end),
            children=tuple(children),
        )

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _plain_list(self, frame: Frame) -> PlainList:
        items = [self._item(entry) for entry in frame.child_frames()]
        first = items[0]
        if first.bullet[0].isdigit():
            list_type = "ordered"
        elif first.tag is not None:
            list_type = "descriptive"
        else:
            list_type = "unordered"
        return PlainList(self._frame_span(frame), list_type=list_type, children=tuple(items))

    def _item(self, frame: Frame) -> Item:
        assert frame.opener is not None
        line = self._line(frame.opener)
        text = line.text
        base = line.start
        match = ITEM_LINE_RE.match(text)
        assert match is not None

        children: list[Node] = []
        self._add_token(children, base, base + match.end("indent"), "indent")
        children.append(self._token(base + match.start("bullet"), base + match.end("bullet"), "bullet"))
        cursor = match.end("bullet")

        counter = None
        if match.group("counter"):
            self._add_token(children, base + cursor, base + match.start("counter"), "whitespace")
            children.append(self._token(base + match.start("counter"), base + match.end("counter"), "counter"))
            counter = int(match.group("counter_value"))
            cursor = match.end("counter")

        checkbox = None
        if match.group("checkbox"):
            self._add_token(children, base + cursor, base + match.start("checkbox"), "whitespace")
            children.append(self._token(base + match.start("checkbox"), base + match.end("checkbox"), "checkbox"))
            checkbox = CHECKBOX_STATES[match.group("checkbox_state")]
            cursor = match.end("checkbox")

        content_start = match.end()
        self._add_token(children, base + cursor, base + content_start, "whitespace")

        tag = None
        if not match.group("bullet")[0].isdigit():
            tag_match = ITEM_TAG_RE.match(text, content_start)
            if tag_match and tag_match.group("tag").strip():
                tag = tag_match.group("tag")
                tag_start, tag_end = base + tag_match.start("tag"), base + tag_match.end("tag")
                if self.granularity == "object":
                    children.extend(self.objects.parse(tag_start, tag_end, NO_LINE_BREAK_SET))
                else:
                    children.append(self._token(tag_start, tag_end, "tag"))
                children.append(self._token(tag_end, base + tag_match.end(), "tag_separator"))
                content_start = tag_match.end()

        remaining = frame.entries
        if text[content_start:].strip(" \t"):
            continuation = self._continuation(frame.entries)
            children.append(self._paragraph(base + content_start, [frame.opener, *continuation]))
            remaining = frame.entries[len(continuation) :]
        else:
            self._add_token(children, base + content_start, line.end, "whitespace")
            self._add_newline(children, line)
        children.extend(self._build_entries(remaining))

        return Item(
            self._frame_span(frame),
            bullet=match.group("bullet"),
            counter=counter,
            checkbox=checkbox,
            tag=tag,
            children=tuple(children),
        )

    # ------------------------------------------------------------------
    # Footnote definitions
    # ------------------------------------------------------------------

    def _footnote_definition(self, frame: Frame) -> FootnoteDefinition:
        assert frame.opener is not None
        line = self._line(frame.opener)
        label = frame.name or ""
        label_end = line.start + len(f"[fn:{label}]")
        children: list[Node] = [self._token(line.start, label_end, "label")]
        content_start = WHITESPACE_RE.match(self.text, label_end, line.end).end()
        self._add_token(children, label_end, content_start, "whitespace")

        remaining = frame.entries
        if content_start < line.end:
            continuation = self._continuation(frame.entries)
            children.append(self._paragraph(content_start, [frame.opener, *continuation]))
            remaining = frame.entries[len(continuation) :]
        else:
            self._add_newline(children, line)
        children.extend(self._build_entries(remaining))
        return FootnoteDefinition(self._frame_span(frame), label=label, children=tuple(children))

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _table(self, frame: Frame) -> Table:
        span = self._frame_span(frame)
        lines = [entry for entry in frame.entries if isinstance(entry, int)]
        if frame.table_el:
            last = self._line(lines[-1])
            children: list[Node] = [self._token(span.start, last.end, "value")]
            self._add_newline(children, last)
            return Table(span, table_type="table.el", value=self._raw(span.start, last.end), children=tuple(children))

        rows: list[Node] = []
        formulas = []
        for index in lines:
            if self._kind(index) is LineKind.TABLE_ROW:
                rows.append(self._table_row(index))
            else:
                match = KEYWORD_RE.match(self._line(index).text)
                assert match is not None
                formulas.append(match.group(2) or "")
                rows.extend(self._line_children(index, "formula"))
        return Table(span, table_type="org", formulas=tuple(formulas), children=tuple(rows))

    def _table_row(self, index: int) -> TableRow:
        line = self._line(index)
        indent = line.indent
        body_start = line.start + indent
        body = line.text[indent:]
        children: list[Node] = []
        self._add_token(children, line.start, body_start, "indent")

        if is_rule_row(body):
            children.append(self._token(body_start, line.end, "rule"))
            self._add_newline(children, line)
            return TableRow(Span(line.start, line.stop), row_type="rule", children=tuple(children))

        for part in split_row(body):
            start, end = body_start + part.start, body_start + part.end
            if part.kind == "separator":
                children.append(self._token(start, end, "separator"))
            elif part.kind == "trailing":
                children.append(self._token(start, end, "whitespace"))
            else:
                children.append(self._table_cell(start, end))
        self._add_newline(children, line)
        return TableRow(Span(line.start, line.stop), row_type="standard", children=tuple(children))

    def _table_cell(self, start: int, end: int) -> TableCell:
        raw = self.text[start:end]
        content_start = start + (len(raw) - len(raw.lstrip()))
        content_end = max(content_start, start + len(raw.rstrip()))
        children: list[Node] = []
        self._add_token(children, start, content_start, "whitespace")
        children.extend(self._objects(content_start, content_end, TABLE_CELL_SET))
        self._add_token(children, content_end, end, "whitespace")
        if not children:
            children.append(self._token(start, end, "whitespace"))
        return TableCell(Span(start, end), children=tuple(children))


def _accepts_affiliated(node: Node) -> bool:
    """Whether the node kind carries affiliated keywords."""
    return any(field.name == "affiliated" for field in fields(node))
