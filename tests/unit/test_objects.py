#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_objects.py
"""Unit tests for the inline object parser."""

import time

import pytest

from orgcst.cst.nodes import Node, PlainText, Token
from orgcst.exceptions import NestingDepthError
from orgcst.parsers.objects import NO_LINE_BREAK_SET, ObjectParser, classify_link_target


def parse(text: str, **kwargs) -> list[Node]:
    return ObjectParser(text, **kwargs).parse(0, len(text))


def only(text: str) -> Node:
    nodes = parse(text)
    assert len(nodes) == 1, [node.kind for node in nodes]
    return nodes[0]


def kinds(nodes) -> list[str]:
    return [node.kind for node in nodes]


@pytest.mark.unit
class TestEmphasis:
    """Tests for emphasis markers and their border rules."""

    def test_bold_between_words(self) -> None:
        """Test bold surrounded by spaces."""
        assert kinds(parse("a *b* c")) == ["plain_text", "bold", "plain_text"]

    def test_marker_inside_word_is_plain(self) -> None:
        """Test that a marker preceded by a letter stays plain text."""
        nodes = parse("a*b* c")
        assert kinds(nodes) == ["plain_text"]
        assert nodes[0].value == "a*b* c"

    def test_space_after_opening_marker_is_plain(self) -> None:
        """Test that emphasis cannot start with whitespace."""
        assert kinds(parse("* b*")) == ["plain_text"]

    def test_space_before_closing_marker_is_plain(self) -> None:
        """Test that emphasis cannot end with whitespace."""
        assert kinds(parse("*b *")) == ["plain_text"]

    def test_emphasis_children(self) -> None:
        """Test marker tokens around the emphasized objects."""
        bold = only("*a /b/ c*")
        first, *inner, last = bold.children
        assert isinstance(first, Token) and first.text == "*"
        assert isinstance(last, Token) and last.text == "*"
        assert kinds(inner) == ["plain_text", "italic", "plain_text"]

    def test_emphasis_after_punctuation(self) -> None:
        """Test that an opening parenthesis is a valid pre character."""
        assert kinds(parse("(/x/)")) == ["plain_text", "italic", "plain_text"]

    def test_emphasis_across_one_newline(self) -> None:
        """Test that emphasis may span a single line break."""
        assert only("*a\nb*").kind == "bold"

    def test_emphasis_not_across_two_newlines(self) -> None:
        """Test that emphasis may not span more than one line break."""
        assert kinds(parse("*a\n\nb*")) == ["plain_text"]

    def test_code_keeps_raw_value(self) -> None:
        """Test that code content is not parsed further."""
        code = only("~a *b* c~")
        assert code.kind == "code"
        assert code.value == "a *b* c"
        assert [child.text for child in code.children] == ["~", "a *b* c", "~"]

    def test_verbatim_value(self) -> None:
        """Test the value of a verbatim object."""
        verbatim = only("=x|y=")
        assert verbatim.kind == "verbatim"
        assert verbatim.value == "x|y"

    @pytest.mark.parametrize(
        "text,kind",
        [
            ("*x*", "bold"),
            ("/x/", "italic"),
            ("_x_", "underline"),
            ("+x+", "strike_through"),
            ("~x~", "code"),
            ("=x=", "verbatim"),
        ],
    )
    def test_marker_kinds(self, text: str, kind: str) -> None:
        """Test each emphasis marker."""
        assert only(text).kind == kind


@pytest.mark.unit
class TestLinks:
    """Tests for bracket, angle and plain links."""

    def test_bracket_link_with_description(self) -> None:
        """Test a bracket link and its description."""
        link = only("[[https://orgmode.org][Org *mode*]]")
        assert link.kind == "link"
        assert link.format == "bracket"
        assert link.link_type == "https"
        assert link.path == "//orgmode.org"
        assert link.raw_link == "https://orgmode.org"
        assert kinds(link.description) == ["plain_text", "bold"]

    def test_bracket_link_without_description(self) -> None:
        """Test a bare bracket link."""
        link = only("[[Some heading]]")
        assert link.link_type == "fuzzy"
        assert link.description == []

    def test_angle_link(self) -> None:
        """Test an angle link."""
        link = only("<https://example.com/a b>")
        assert link.format == "angle"
        assert link.raw_link == "https://example.com/a b"

    def test_plain_link_drops_trailing_punctuation(self) -> None:
        """Test that a sentence period is not part of a plain link."""
        nodes = parse("see https://example.com.")
        assert kinds(nodes) == ["plain_text", "link", "plain_text"]
        assert nodes[1].raw_link == "https://example.com"
        assert nodes[2].value == "."

    def test_plain_link_needs_word_boundary(self) -> None:
        """Test that a link type glued to a word is not a link."""
        assert kinds(parse("xhttps://example.com")) == ["plain_text"]

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("https://orgmode.org", ("https", "//orgmode.org", None)),
            ("file:notes.org::*Tasks", ("file", "notes.org", "*Tasks")),
            ("#intro", ("custom-id", "intro", None)),
            ("(ref)", ("coderef", "ref", None)),
            ("./notes.org", ("file", "./notes.org", None)),
            ("Some heading", ("fuzzy", "Some heading", None)),
        ],
    )
    def test_classify_link_target(self, raw: str, expected: tuple) -> None:
        """Test link type classification."""
        assert classify_link_target(raw) == expected


@pytest.mark.unit
class TestTimestamps:
    """Tests for timestamp objects."""

    def test_active_with_time_and_repeater(self) -> None:
        """Test date, time and repeater fields."""
        stamp = only("<2025-01-10 Fri 10:00 +1w>")
        assert stamp.timestamp_type == "active"
        assert (stamp.year_start, stamp.month_start, stamp.day_start) == (2025, 1, 10)
        assert (stamp.hour_start, stamp.minute_start) == (10, 0)
        assert stamp.repeater_type == "cumulate"
        assert stamp.repeater_value == 1
        assert stamp.repeater_unit == "week"

    def test_inactive(self) -> None:
        """Test an inactive timestamp."""
        stamp = only("[2025-01-10 Fri]")
        assert stamp.timestamp_type == "inactive"
        assert stamp.hour_start is None

    def test_date_range(self) -> None:
        """Test a range of two timestamps."""
        stamp = only("<2025-01-10 Fri>--<2025-01-12 Sun>")
        assert stamp.timestamp_type == "active-range"
        assert stamp.day_start == 10
        assert stamp.day_end == 12

    def test_time_range(self) -> None:
        """Test a range inside one timestamp."""
        stamp = only("<2025-01-10 Fri 10:00-12:30>")
        assert stamp.timestamp_type == "active-range"
        assert (stamp.hour_end, stamp.minute_end) == (12, 30)

    def test_warning_delay(self) -> None:
        """Test a warning delay modifier."""
        stamp = only("<2025-01-10 Fri --2d>")
        assert stamp.warning_type == "first"
        assert stamp.warning_value == 2
        assert stamp.warning_unit == "day"

    def test_diary_timestamp(self) -> None:
        """Test a diary sexp timestamp."""
        stamp = only("<%%(diary-float t 4 2)>")
        assert stamp.timestamp_type == "diary"
        assert stamp.raw_value == "<%%(diary-float t 4 2)>"

    def test_invalid_date_is_plain(self) -> None:
        """Test that malformed dates stay plain text."""
        assert kinds(parse("<2025-1-10>")) == ["plain_text"]


@pytest.mark.unit
class TestOtherObjects:
    """Tests for the remaining object kinds."""

    def test_footnote_references(self) -> None:
        """Test standard and inline footnote references."""
        standard = only("[fn:1]")
        assert standard.reference_type == "standard"
        assert standard.label == "1"
        anonymous = only("[fn::inline *text*]")
        assert anonymous.reference_type == "inline"
        assert anonymous.label is None
        labeled = only("[fn:note:definition]")
        assert labeled.label == "note"

    def test_entity(self) -> None:
        """Test entities with and without brackets."""
        entity = only("\\alpha")
        assert entity.kind == "entity"
        assert entity.utf8 == "α"
        assert entity.use_brackets is False
        assert only("\\alpha{}").use_brackets is True

    def test_unknown_command_is_latex(self) -> None:
        """Test that an unknown command is a LaTeX fragment."""
        fragment = only("\\frac{1}{2}")
        assert fragment.kind == "latex_fragment"
        assert fragment.value == "\\frac{1}{2}"

    @pytest.mark.parametrize("text", ["$x^2$", "\\(a+b\\)", "\\[a+b\\]", "$$a$$"])
    def test_latex_fragments(self, text: str) -> None:
        """Test the math delimiters."""
        assert only(text).kind == "latex_fragment"

    def test_line_break(self) -> None:
        """Test a line break at the end of a line."""
        nodes = parse("one\\\\\ntwo")
        assert kinds(nodes) == ["plain_text", "line_break", "plain_text"]

    def test_line_break_not_in_headline_titles(self) -> None:
        """Test that restriction sets exclude line breaks."""
        text = "one\\\\\ntwo"
        nodes = ObjectParser(text).parse(0, len(text), NO_LINE_BREAK_SET)
        assert "line_break" not in kinds(nodes)

    def test_macro(self) -> None:
        """Test macro key and arguments."""
        macro = only("{{{Name(a, b\\, c)}}}")
        assert macro.key == "name"
        assert macro.args == ("a", "b, c")
        assert only("{{{title}}}").args == ()

    def test_targets(self) -> None:
        """Test targets and radio targets."""
        assert only("<<anchor>>").kind == "target"
        radio = only("<<<radio>>>")
        assert radio.kind == "radio_target"
        assert radio.value == "radio"

    @pytest.mark.parametrize("text", ["[2/3]", "[50%]", "[/]", "[%]"])
    def test_statistics_cookie(self, text: str) -> None:
        """Test statistics cookies."""
        assert only(text).kind == "statistics_cookie"

    def test_export_snippet(self) -> None:
        """Test an export snippet."""
        snippet = only("@@html:<b>@@")
        assert snippet.backend == "html"
        assert snippet.value == "<b>"

    def test_inline_src_block(self) -> None:
        """Test an inline source block."""
        block = only("src_python[:var x=1]{print(x)}")
        assert block.language == "python"
        assert block.parameters == ":var x=1"
        assert block.value == "print(x)"

    def test_inline_babel_call(self) -> None:
        """Test an inline babel call."""
        call = only("call_square(4)")
        assert call.call == "square"
        assert call.arguments == "4"

    def test_scripts(self) -> None:
        """Test subscripts and superscripts."""
        assert kinds(parse("a_b")) == ["plain_text", "subscript"]
        assert kinds(parse("x^2 + y")) == ["plain_text", "superscript", "plain_text"]
        superscript = parse("x^{2}")[1]
        assert superscript.use_brackets is True

    def test_script_needs_base(self) -> None:
        """Test that a script after whitespace is plain text."""
        assert kinds(parse("a ^b")) == ["plain_text"]


@pytest.mark.unit
class TestCoverage:
    """Tests for range coverage and limits."""

    def test_nodes_cover_range(self) -> None:
        """Test that parsed nodes tile the range."""
        text = "x *a* [[l][d]] <2025-01-01 Wed> y"
        nodes = parse(text)
        assert nodes[0].span.start == 0
        assert nodes[-1].span.end == len(text)
        for left, right in zip(nodes, nodes[1:]):
            assert left.span.end == right.span.start

    def test_sub_range(self) -> None:
        """Test parsing a range inside a larger text."""
        text = "ignored *b* ignored"
        nodes = ObjectParser(text).parse(8, 11)
        assert kinds(nodes) == ["bold"]
        assert nodes[0].span.start == 8

    def test_plain_text_only(self) -> None:
        """Test text without markup."""
        node = only("just words")
        assert isinstance(node, PlainText)
        assert node.value == "just words"

    def test_unmatched_openers_stay_linear(self) -> None:
        """Test that a line full of unclosed markers parses quickly."""
        text = "*a " * 10000 + "\n"
        started = time.perf_counter()
        nodes = parse(text)
        assert time.perf_counter() - started < 2.0
        assert kinds(nodes) == ["plain_text"]
        assert nodes[0].value == text

    def test_unmatched_openers_between_links(self) -> None:
        """Test that unclosed markers separated by links parse quickly."""
        text = "*a [[x]] " * 5000
        started = time.perf_counter()
        nodes = parse(text)
        assert time.perf_counter() - started < 2.0
        assert kinds(nodes).count("link") == 5000
        assert "bold" not in kinds(nodes)
        assert nodes[-1].span.end == len(text)

    def test_later_opener_closes_after_failed_one(self) -> None:
        """Test that an unclosed marker does not hide a later emphasis."""
        text = "*a\nb *c\nd*"
        nodes = parse(text)
        assert kinds(nodes) == ["plain_text", "bold"]
        assert nodes[1].span.start == text.index(" *c") + 1
        assert nodes[1].span.end == len(text)

    def test_emphasis_in_link_after_failed_opener(self) -> None:
        """Test that a link description still parses bold after an unclosed marker."""
        nodes = parse("*a [[l][*d*]] x")
        assert "bold" not in kinds(nodes)
        link = [node for node in nodes if node.kind == "link"][0]
        assert "bold" in kinds(link.children)

    def test_nesting_limit(self) -> None:
        """Test that nesting beyond the limit raises NestingDepthError."""
        with pytest.raises(NestingDepthError) as exc_info:
            parse("*a /b _c_ b/ a*", max_nesting_depth=1)
        assert exc_info.value.parsing_stage == "objects"
