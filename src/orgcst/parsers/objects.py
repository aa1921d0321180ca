#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/objects.py
"""Inline object parser.

``ObjectParser.parse`` turns one text-bearing range of the buffer (paragraph
contents, a headline title, a table cell ...) into a list of object nodes
that covers the range exactly. Text without markup becomes ``PlainText``.

The parser walks the range left to right. At each character that can start
an object it tries every candidate registered for that character, keeps the
longest match and falls back to the registration order on ties. A candidate
either returns a node or None; a marker without a valid partner simply stays
plain text, so parsing never fails on Org input. The only exception raised
is ``NestingDepthError`` for pathologically deep nesting.

Restriction sets limit which objects may appear in a given context: link
descriptions hold only a few kinds, headline titles drop line breaks, and
emphasis never nests inside emphasis of the same kind.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from orgcst.constants import (
    DEFAULT_MAX_NESTING_DEPTH,
    EMPHASIS_MARKERS,
    EMPHASIS_POST_CHARS,
    EMPHASIS_PRE_CHARS,
    LINK_TYPES,
    ORG_ENTITIES,
)
from orgcst.cst.nodes import (
    Bold,
    Code,
    Entity,
    ExportSnippet,
    FootnoteReference,
    InlineBabelCall,
    InlineSrcBlock,
    Italic,
    LatexFragment,
    LineBreak,
    Link,
    Macro,
    Node,
    PlainText,
    RadioTarget,
    Span,
    StatisticsCookie,
    StrikeThrough,
    Subscript,
    Superscript,
    Target,
    Timestamp,
    Token,
    Underline,
    Verbatim,
)
from orgcst.exceptions import NestingDepthError

logger = logging.getLogger(__name__)

# =============================================================================
# Restriction sets
# =============================================================================

STANDARD_SET = frozenset(
    {
        "bold",
        "italic",
        "underline",
        "strike_through",
        "code",
        "verbatim",
        "link",
        "footnote_reference",
        "timestamp",
        "entity",
        "latex_fragment",
        "subscript",
        "superscript",
        "line_break",
        "macro",
        "target",
        "radio_target",
        "statistics_cookie",
        "export_snippet",
        "inline_src_block",
        "inline_babel_call",
    }
)

# Headline titles and item tags
NO_LINE_BREAK_SET = STANDARD_SET - {"line_break"}

TABLE_CELL_SET = STANDARD_SET - {"line_break", "statistics_cookie"}

LINK_DESCRIPTION_SET = frozenset(
    {
        "bold",
        "italic",
        "underline",
        "strike_through",
        "code",
        "verbatim",
        "entity",
        "latex_fragment",
        "subscript",
        "superscript",
        "export_snippet",
        "inline_babel_call",
        "inline_src_block",
        "macro",
        "statistics_cookie",
        "timestamp",
    }
)

RADIO_TARGET_SET = frozenset(
    {
        "bold",
        "italic",
        "underline",
        "strike_through",
        "code",
        "verbatim",
        "entity",
        "latex_fragment",
        "subscript",
        "superscript",
    }
)

# =============================================================================
# Patterns
# =============================================================================

_LINK_TYPE_ALTERNATION = "|".join(re.escape(t) for t in sorted(LINK_TYPES, key=len, reverse=True))

BRACKET_LINK_RE = re.compile(r"\[\[((?:[^\[\]\\\n]|\\.)+)\](?:\[(.+?)\])?\]", re.DOTALL)
ANGLE_LINK_RE = re.compile(rf"<({_LINK_TYPE_ALTERNATION}):([^>\n]+)>")
PLAIN_LINK_RE = re.compile(rf"({_LINK_TYPE_ALTERNATION}):([^\s\[\]<>]+)")
LINK_TYPE_PREFIX_RE = re.compile(rf"({_LINK_TYPE_ALTERNATION}):(.*)", re.DOTALL)

FOOTNOTE_START_RE = re.compile(r"\[fn:([-_\w]*)([:\]])")

TIMESTAMP_CONTENT_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[ \t]+(?P<dayname>[^\s\d\]>+-]+))?"
    r"(?:[ \t]+(?P<hour>\d{1,2}):(?P<minute>\d{2})(?:-(?P<hour_end>\d{1,2}):(?P<minute_end>\d{2}))?)?"
    r"(?P<modifiers>(?:[ \t]+(?:\.\+|\+\+|\+|--?)\d+[hdwmy])*)"
    r"[ \t]*"
)
TIMESTAMP_MODIFIER_RE = re.compile(r"(\.\+|\+\+|\+|--?)(\d+)([hdwmy])")

ENTITY_RE = re.compile(r"\\([A-Za-z]+)(\{\})?")
LATEX_COMMAND_RE = re.compile(r"\\[A-Za-z]+\*?(?:\[[^\[\]{}\n]*\]|\{[^{}\n]*\})*")
LATEX_PAREN_RE = re.compile(r"\\\(.*?\\\)", re.DOTALL)
LATEX_BRACKET_RE = re.compile(r"\\\[.*?\\\]", re.DOTALL)
LATEX_DOUBLE_DOLLAR_RE = re.compile(r"\$\$.+?\$\$", re.DOTALL)
LATEX_DOLLAR_RE = re.compile(r"\$(?:[^\s.,?;\"$]|[^\s.,;$][^$]*?[^\s.,$])\$")
LATEX_DOLLAR_POST_CHARS = frozenset("-.,?;:'\")")

LINE_BREAK_RE = re.compile(r"\\\\[ \t]*(?=\n|\Z)")
MACRO_RE = re.compile(r"\{\{\{([A-Za-z][-\w]*)(?:\((.*?)\))?\}\}\}", re.DOTALL)
MACRO_ARG_SPLIT_RE = re.compile(r"(?<!\\),")
EXPORT_SNIPPET_RE = re.compile(r"@@([-A-Za-z0-9]+):(.*?)@@", re.DOTALL)
TARGET_RE = re.compile(r"<<([^<>\s](?:[^<>\n]*[^<>\s])?)>>")
RADIO_TARGET_RE = re.compile(r"<<<([^<>\s](?:[^<>\n]*[^<>\s])?)>>>")
STATISTICS_COOKIE_RE = re.compile(r"\[(?:\d*%|\d*/\d*)\]")
INLINE_BABEL_RE = re.compile(r"call_([^()\s\[\]]+)(?:\[([^\]\n]*)\])?\(([^)\n]*)\)(?:\[([^\]\n]*)\])?")
INLINE_SRC_RE = re.compile(r"src_([^\s\[{]+)(?:\[([^\]\n]*)\])?\{([^}\n]*)\}")
SCRIPT_RE = re.compile(r"[+-]?[A-Za-z0-9.,\\]*[A-Za-z0-9]")

_LINK_INITIALS = "".join(sorted({t[0] for t in LINK_TYPES} | {"s", "c"}))
TRIGGER_RE = re.compile(rf"[*/_+~=\[<\\$^{{@{re.escape(_LINK_INITIALS)}]")

PLAIN_LINK_TRAILING = frozenset(".,;:!?'\"")

TIME_UNITS = {"h": "hour", "d": "day", "w": "week", "m": "month", "y": "year"}
REPEATER_TYPES = {"+": "cumulate", "++": "catch-up", ".+": "restart"}
WARNING_TYPES = {"-": "all", "--": "first"}

EMPHASIS_CLASSES: dict[str, type[Node]] = {
    "bold": Bold,
    "italic": Italic,
    "underline": Underline,
    "strike_through": StrikeThrough,
    "code": Code,
    "verbatim": Verbatim,
}

Candidate = Callable[[int, int, int, frozenset, int], Optional[Node]]


def _marker(start: int, text: str) -> Token:
    return Token(Span(start, start + len(text)), role="marker", text=text)


def classify_link_target(raw: str) -> tuple[str, str, Optional[str]]:
    """Split a link target into ``(link_type, path, search_option)``.

    Examples
    --------
        >>> classify_link_target("https://orgmode.org")
        ('https', '//orgmode.org', None)
        >>> classify_link_target("file:notes.org::*Tasks")
        ('file', 'notes.org', '*Tasks')
        >>> classify_link_target("#intro")
        ('custom-id', 'intro', None)

    """
    link_type = "fuzzy"
    path = raw
    if raw.startswith("#"):
        return "custom-id", raw[1:], None
    if raw.startswith("(") and raw.endswith(")") and len(raw) > 2:
        return "coderef", raw[1:-1], None
    prefixed = LINK_TYPE_PREFIX_RE.fullmatch(raw)
    if prefixed:
        link_type, path = prefixed.group(1), prefixed.group(2)
    elif raw.startswith(("/", "./", "../", "~/")):
        link_type = "file"

    search_option = None
    if link_type.startswith("file") and "::" in path:
        path, search_option = path.split("::", 1)
    return link_type, path, search_option


class ObjectParser:
    """Parse inline objects out of ranges of one buffer text.

    Parameters
    ----------
    text : str
        Full buffer text; ranges are offsets into it
    max_nesting_depth : int, default 128
        Deepest allowed nesting of objects inside objects

    Examples
    --------
        >>> parser = ObjectParser("a *b* c")
        >>> [node.kind for node in parser.parse(0, 7)]
        ['plain_text', 'bold', 'plain_text']

    """

    def __init__(self, text: str, max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        self.text = text
        self.max_nesting_depth = max_nesting_depth
        self._dispatch: dict[str, list[tuple[str, Candidate]]] = {}
        # (marker, end, skip_links) -> bodies [from, to) known to have no closing marker
        self._failed_closes: dict[tuple[str, int, bool], tuple[int, int]] = {}
        self._dead_links: dict[tuple[str, int, bool], set[int]] = {}
        for marker, kind in EMPHASIS_MARKERS.items():
            self._register(marker, kind, self._parse_emphasis)
        self._register("_", "subscript", self._parse_script)
        self._register("^", "superscript", self._parse_script)
        self._register("[", "link", self._parse_bracket_link)
        self._register("[", "footnote_reference", self._parse_footnote_reference)
        self._register("[", "timestamp", self._parse_timestamp)
        self._register("[", "statistics_cookie", self._parse_statistics_cookie)
        self._register("<", "timestamp", self._parse_timestamp)
        self._register("<", "radio_target", self._parse_radio_target)
        self._register("<", "target", self._parse_target)
        self._register("<", "link", self._parse_angle_link)
        self._register("\\", "line_break", self._parse_line_break)
        self._register("\\", "entity", self._parse_entity)
        self._register("\\", "latex_fragment", self._parse_latex_fragment)
        self._register("$", "latex_fragment", self._parse_latex_fragment)
        self._register("{", "macro", self._parse_macro)
        self._register("@", "export_snippet", self._parse_export_snippet)
        self._register("s", "inline_src_block", self._parse_inline_src_block)
        self._register("c", "inline_babel_call", self._parse_inline_babel_call)
        for initial in sorted({t[0] for t in LINK_TYPES}):
            self._register(initial, "link", self._parse_plain_link)

    def _register(self, char: str, kind: str, candidate: Candidate) -> None:
        self._dispatch.setdefault(char, []).append((kind, candidate))

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def parse(self, start: int, end: int, allowed: frozenset = STANDARD_SET, depth: int = 0) -> list[Node]:
        """Parse ``[start, end)`` into objects and plain text.

        Parameters
        ----------
        start : int
            Range start offset
        end : int
            Range end offset
        allowed : frozenset of str
            Object kinds permitted in this range
        depth : int, default 0
            Current object nesting depth

        Returns
        -------
        list of Node
            Nodes covering the range exactly, in order

        Raises
        ------
        NestingDepthError
            If ``depth`` exceeds ``max_nesting_depth``

        """
        if depth > self.max_nesting_depth:
            raise NestingDepthError(depth, self.max_nesting_depth, parsing_stage="objects", offset=start)

        nodes: list[Node] = []
        text_start = start
        position = start
        while position < end:
            trigger = TRIGGER_RE.search(self.text, position, end)
            if trigger is None:
                break
            position = trigger.start()
            node = self._match_at(position, start, end, allowed, depth)
            if node is None:
                position += 1
                continue
            if position > text_start:
                nodes.append(self._plain(text_start, position))
            nodes.append(node)
            position = node.span.end
            text_start = position

        if text_start < end:
            nodes.append(self._plain(text_start, end))
        return nodes

    def parse_timestamp(self, start: int, end: int) -> Optional[Timestamp]:
        """Parse a timestamp starting exactly at ``start``, if there is one."""
        node = self._parse_timestamp(start, start, end, STANDARD_SET, 0)
        return node if isinstance(node, Timestamp) else None

    def _match_at(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        best: Optional[Node] = None
        for kind, candidate in self._dispatch.get(self.text[position], ()):
            if kind not in allowed:
                continue
            node = candidate(position, start, end, allowed, depth)
            if node is not None and (best is None or len(node.span) > len(best.span)):
                best = node
        return best

    def _plain(self, start: int, end: int) -> PlainText:
        return PlainText(Span(start, end), value=self.text[start:end])

    def _raw_token(self, start: int, end: int) -> Token:
        return Token(Span(start, end), role="value", text=self.text[start:end])

    def _balanced(self, position: int, end: int, opener: str, closer: str) -> Optional[int]:
        """Return the offset of the closer matching the opener at ``position``."""
        level = 0
        for index in range(position, end):
            char = self.text[index]
            if char == opener:
                level += 1
            elif char == closer:
                level -= 1
                if level == 0:
                    return index
        return None

    # ------------------------------------------------------------------
    # Emphasis
    # ------------------------------------------------------------------

    def _valid_pre(self, position: int, start: int) -> bool:
        if position == start:
            return True
        previous = self.text[position - 1]
        return previous.isspace() or previous in EMPHASIS_PRE_CHARS

    def _valid_post(self, position: int, end: int) -> bool:
        if position >= end:
            return True
        following = self.text[position]
        return following.isspace() or following in EMPHASIS_POST_CHARS

    def _find_emphasis_close(self, marker: str, body: int, end: int, skip_links: bool) -> Optional[int]:
        """Return the offset of the closing marker for an opener whose body starts at ``body``.

        Failed scans are remembered so that a line full of unmatched openers
        stays linear. A failed scan also fails for every later body that comes
        before its first newline and its first skipped link, since those scans
        visit the same characters. Links it skipped before any newline are
        dead ends too: a scan reaching one of them without having crossed a
        newline continues exactly like the failed one.
        """
        key = (marker, end, skip_links)
        failed = self._failed_closes.get(key)
        if failed is not None and failed[0] <= body < failed[1]:
            return None
        dead_links = self._dead_links.setdefault(key, set())

        text = self.text
        newlines = 0
        limit = end
        reached: list[int] = []
        index = body + 1
        while index < end:
            char = text[index]
            if char == "\n":
                newlines += 1
                if newlines > 1:
                    break
                limit = min(limit, index)
            elif skip_links and text.startswith("[[", index):
                link_end = text.find("]]", index + 2, end)
                if link_end != -1:
                    limit = min(limit, index)
                    if newlines == 0:
                        if index in dead_links:
                            break
                        reached.append(index)
                    newlines += text.count("\n", index, link_end)
                    if newlines > 1:
                        break
                    index = link_end + 2
                    continue
            elif char == marker and not text[index - 1].isspace() and self._valid_post(index + 1, end):
                return index
            index += 1
        self._failed_closes[key] = (body, limit)
        dead_links.update(reached)
        return None

    def _parse_emphasis(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        marker = self.text[position]
        kind = EMPHASIS_MARKERS[marker]
        if not self._valid_pre(position, start):
            return None
        body = position + 1
        if body >= end or self.text[body].isspace():
            return None
        verbatim = kind in ("code", "verbatim")
        close = self._find_emphasis_close(marker, body, end, skip_links=not verbatim)
        if close is None:
            return None

        cls = EMPHASIS_CLASSES[kind]
        span = Span(position, close + 1)
        opening, closing = _marker(position, marker), _marker(close, marker)
        if verbatim:
            value = self.text[body:close]
            return cls(span, value=value, children=(opening, self._raw_token(body, close), closing))
        inner = self.parse(body, close, allowed - {kind}, depth + 1)
        return cls(span, children=(opening, *inner, closing))

    # ------------------------------------------------------------------
    # Links, footnotes, targets
    # ------------------------------------------------------------------

    def _parse_bracket_link(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        match = BRACKET_LINK_RE.match(self.text, position, end)
        if not match:
            return None
        raw_link = match.group(1)
        link_type, path, search_option = classify_link_target(raw_link)
        children: list[Node] = [_marker(position, "[["), self._raw_token(match.start(1), match.end(1))]
        if match.group(2) is not None:
            children.append(_marker(match.end(1), "]["))
            children.extend(self.parse(match.start(2), match.end(2), allowed & LINK_DESCRIPTION_SET, depth + 1))
            children.append(_marker(match.end(2), "]]"))
        else:
            children.append(_marker(match.end(1), "]]"))
        return Link(
            Span(position, match.end()),
            link_type=link_type,
            path=path,
            raw_link=raw_link,
            search_option=search_option,
            format="bracket",
            children=tuple(children),
        )

    def _parse_angle_link(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        match = ANGLE_LINK_RE.match(self.text, position, end)
        if not match:
            return None
        raw_link = self.text[position + 1 : match.end() - 1]
        link_type, path, search_option = classify_link_target(raw_link)
        return Link(
            Span(position, match.end()),
            link_type=link_type,
            path=path,
            raw_link=raw_link,
            search_option=search_option,
            format="angle",
            children=(
                _marker(position, "<"),
                self._raw_token(position + 1, match.end() - 1),
                _marker(match.end() - 1, ">"),
            ),
        )

    def _parse_plain_link(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        if position > start and (self.text[position - 1].isalnum() or self.text[position - 1] == "_"):
            return None
        match = PLAIN_LINK_RE.match(self.text, position, end)
        if not match:
            return None
        path = match.group(2)
        while path and (
            path[-1] in PLAIN_LINK_TRAILING or (path[-1] == ")" and path.count(")") > path.count("("))
        ):
            path = path[:-1]
        if not path:
            return None
        stop = match.start(2) + len(path)
        raw_link = self.text[position:stop]
        link_type, link_path, search_option = classify_link_target(raw_link)
        return Link(
            Span(position, stop),
            link_type=link_type,
            path=link_path,
            raw_link=raw_link,
            search_option=search_option,
            format="plain",
            children=(Token(Span(position, stop), role="value", text=raw_link),),
        )

    def _parse_footnote_reference(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        match = FOOTNOTE_START_RE.match(self.text, position, end)
        if not match:
            return None
        label = match.group(1) or None
        if match.group(2) == "]":
            if label is None:
                return None
            return FootnoteReference(
                Span(position, match.end()),
                label=label,
                reference_type="standard",
                children=(self._raw_token(position, match.end()),),
            )

        close = self._balanced(position, end, "[", "]")
        if close is None:
            return None
        definition = self.parse(match.end(), close, allowed, depth + 1)
        return FootnoteReference(
            Span(position, close + 1),
            label=label,
            reference_type="inline",
            children=(_marker(position, self.text[position : match.end()]), *definition, _marker(close, "]")),
        )

    def _parse_target(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        match = TARGET_RE.match(self.text, position, end)
        if not match:
            return None
        return Target(
            Span(position, match.end()), value=match.group(1), children=(self._raw_token(position, match.end()),)
        )

    def _parse_radio_target(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        match = RADIO_TARGET_RE.match(self.text, position, end)
        if not match:
            return None
        inner = self.parse(match.start(1), match.end(1), allowed & RADIO_TARGET_SET, depth + 1)
        return RadioTarget(
            Span(position, match.end()),
            value=match.group(1),
            children=(_marker(position, "<<<"), *inner, _marker(match.end(1), ">>>")),
        )

    def _parse_statistics_cookie(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        match = STATISTICS_COOKIE_RE.match(self.text, position, end)
        if not match:
            return None
        return StatisticsCookie(
            Span(position, match.end()), value=match.group(0), children=(self._raw_token(position, match.end()),)
        )

    # ------------------------------------------------------------------
    # Timestamps
    # ------------------------------------------------------------------

    def _timestamp_part(self, position: int, end: int) -> Optional[tuple[int, re.Match[str]]]:
        """Match one ``<...>`` or ``[...]`` date; return the closing offset and match."""
        closer = ">" if self.text[position] == "<" else "]"
        close = self.text.find(closer, position + 1, end)
        if close == -1:
            return None
        match = TIMESTAMP_CONTENT_RE.fullmatch(self.text, position + 1, close)
        if match is None:
            return None
        return close, match

    def _parse_timestamp(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        text = self.text
        if text.startswith("<%%(", position):
            close = text.find(")>", position + 4, end)
            if close == -1 or "\n" in text[position:close]:
                return None
            stop = close + 2
            return Timestamp(
                Span(position, stop),
                timestamp_type="diary",
                raw_value=text[position:stop],
                children=(self._raw_token(position, stop),),
            )

        first = self._timestamp_part(position, end)
        if first is None:
            return None
        close, match = first
        stop = close + 1
        opener = text[position]
        active = opener == "<"

        second_match = None
        if text.startswith("--", stop) and stop + 2 < end and text[stop + 2] == opener:
            second = self._timestamp_part(stop + 2, end)
            if second is not None:
                stop = second[0] + 1
                second_match = second[1]

        is_range = second_match is not None or match.group("hour_end") is not None
        timestamp_type = ("active" if active else "inactive") + ("-range" if is_range else "")
        fields = _timestamp_fields(match, second_match)
        return Timestamp(
            Span(position, stop),
            timestamp_type=timestamp_type,
            raw_value=text[position:stop],
            children=(self._raw_token(position, stop),),
            **fields,
        )

    # ------------------------------------------------------------------
    # Entities, LaTeX, line breaks
    # ------------------------------------------------------------------

    def _parse_entity(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        match = ENTITY_RE.match(self.text, position, end)
        if not match or match.group(1) not in ORG_ENTITIES:
            return None
        name = match.group(1)
        return Entity(
            Span(position, match.end()),
            name=name,
            utf8=ORG_ENTITIES[name],
            use_brackets=match.group(2) is not None,
            children=(self._raw_token(position, match.end()),),
        )

    def _parse_latex_fragment(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        text = self.text
        match: Optional[re.Match[str]] = None
        if text[position] == "\\":
            for pattern in (LATEX_PAREN_RE, LATEX_BRACKET_RE, LATEX_COMMAND_RE):
                match = pattern.match(text, position, end)
                if match:
                    break
        elif text.startswith("$$", position):
            match = LATEX_DOUBLE_DOLLAR_RE.match(text, position, end)
        else:
            if position > start and text[position - 1] == "$":
                return None
            match = LATEX_DOLLAR_RE.match(text, position, end)
            if match and match.group(0).count("\n") > 2:
                match = None
            if match and match.end() < end:
                following = text[match.end()]
                if not (following.isspace() or following in LATEX_DOLLAR_POST_CHARS):
                    match = None
        if not match:
            return None
        return LatexFragment(
            Span(position, match.end()), value=match.group(0), children=(self._raw_token(position, match.end()),)
        )

    def _parse_line_break(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        if position > start and self.text[position - 1] == "\\":
            return None
        match = LINE_BREAK_RE.match(self.text, position, end)
        if not match:
            return None
        return LineBreak(Span(position, match.end()), children=(_marker(position, match.group(0)),))

    # ------------------------------------------------------------------
    # Scripts
    # ------------------------------------------------------------------

    def _parse_script(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        text = self.text
        if position == start or text[position - 1].isspace():
            return None
        cls = Subscript if text[position] == "_" else Superscript
        body = position + 1
        if body >= end:
            return None
        marker = _marker(position, text[position])
        char = text[body]

        if char == "{":
            close = self._balanced(body, end, "{", "}")
            if close is None:
                return None
            inner = self.parse(body + 1, close, allowed, depth + 1)
            return cls(
                Span(position, close + 1),
                use_brackets=True,
                children=(marker, _marker(body, "{"), *inner, _marker(close, "}")),
            )
        if char == "(":
            close = self._balanced(body, end, "(", ")")
            if close is None:
                return None
            return cls(Span(position, close + 1), children=(marker, self._plain(body, close + 1)))
        if char == "*":
            return cls(Span(position, body + 1), children=(marker, self._plain(body, body + 1)))
        match = SCRIPT_RE.match(text, body, end)
        if not match:
            return None
        return cls(Span(position, match.end()), children=(marker, self._plain(body, match.end())))

    # ------------------------------------------------------------------
    # Macros, snippets, inline code
    # ------------------------------------------------------------------

    def _parse_macro(self, position: int, start: int, end: int, allowed: frozenset, depth: int) -> Optional[Node]:
        match = MACRO_RE.match(self.text, position, end)
        if not match:
            return None
        args: tuple[str, ...] = ()
        if match.group(2) is not None:
            args = tuple(arg.strip().replace("\\,", ",") for arg in MACRO_ARG_SPLIT_RE.split(match.group(2)))
        return Macro(
            Span(position, match.end()),
            key=match.group(1).lower(),
            args=args,
            value=match.group(0),
            children=(self._raw_token(position, match.end()),),
        )

    def _parse_export_snippet(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        match = EXPORT_SNIPPET_RE.match(self.text, position, end)
        if not match:
            return None
        return ExportSnippet(
            Span(position, match.end()),
            backend=match.group(1),
            value=match.group(2),
            children=(self._raw_token(position, match.end()),),
        )

    def _at_word_start(self, position: int, start: int) -> bool:
        return position == start or not (self.text[position - 1].isalnum() or self.text[position - 1] == "_")

    def _parse_inline_src_block(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        if not self._at_word_start(position, start):
            return None
        match = INLINE_SRC_RE.match(self.text, position, end)
        if not match:
            return None
        return InlineSrcBlock(
            Span(position, match.end()),
            language=match.group(1),
            parameters=match.group(2),
            value=match.group(3),
            children=(self._raw_token(position, match.end()),),
        )

    def _parse_inline_babel_call(
        self, position: int, start: int, end: int, allowed: frozenset, depth: int
    ) -> Optional[Node]:
        if not self._at_word_start(position, start):
            return None
        match = INLINE_BABEL_RE.match(self.text, position, end)
        if not match:
            return None
        return InlineBabelCall(
            Span(position, match.end()),
            call=match.group(1),
            inside_header=match.group(2),
            arguments=match.group(3),
            end_header=match.group(4),
            value=match.group(0),
            children=(self._raw_token(position, match.end()),),
        )


def _timestamp_fields(first: re.Match[str], second: Optional[re.Match[str]]) -> dict:
    """Collect the date, time, repeater and warning fields of a timestamp."""

    def number(match: re.Match[str], group: str) -> Optional[int]:
        value = match.group(group)
        return int(value) if value is not None else None

    fields: dict = {
        "year_start": number(first, "year"),
        "month_start": number(first, "month"),
        "day_start": number(first, "day"),
        "hour_start": number(first, "hour"),
        "minute_start": number(first, "minute"),
    }
    if second is not None:
        end_match, hour_group, minute_group = second, "hour", "minute"
    elif first.group("hour_end") is not None:
        end_match, hour_group, minute_group = first, "hour_end", "minute_end"
    else:
        end_match, hour_group, minute_group = first, "hour", "minute"
    fields.update(
        year_end=number(end_match, "year"),
        month_end=number(end_match, "month"),
        day_end=number(end_match, "day"),
        hour_end=number(end_match, hour_group),
        minute_end=number(end_match, minute_group),
    )

    for modifier in TIMESTAMP_MODIFIER_RE.finditer(first.group("modifiers") or ""):
        mark, value, unit = modifier.groups()
        if mark in REPEATER_TYPES:
            fields.update(repeater_type=REPEATER_TYPES[mark], repeater_value=int(value), repeater_unit=TIME_UNITS[unit])
        else:
            fields.update(warning_type=WARNING_TYPES[mark], warning_value=int(value), warning_unit=TIME_UNITS[unit])
    return fields
