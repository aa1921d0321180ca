#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/integration/test_org_roundtrip.py
"""Integration tests running whole documents through parse and serialize.

Each case goes through the public API only: the buffer is parsed, checked
for full coverage and tree invariants, canonicalized and re-parsed.
"""

import pytest

from orgcst import canonicalize, parse, serialize, structurally_equal
from orgcst.cst.nodes import Bold, ExampleBlock, Paragraph, PlainList, PlainText, Table, Token
from orgcst.cst.visitors import InvariantValidator, leaf_text


def assert_round_trip(text: str) -> str:
    doc = parse(text)
    assert leaf_text(doc) == text
    assert InvariantValidator(strict=False).validate(doc) == []
    canonical = serialize(doc)
    assert structurally_equal(doc, parse(canonical))
    assert canonicalize(canonical) == canonical
    return canonical


def section_elements(text: str) -> list:
    return [node for node in parse(text).section.children if node.kind != "token"]


@pytest.mark.integration
class TestDocumentProperties:
    """Document-level behaviour through the public API."""

    def test_emphasis_needs_border(self) -> None:
        """Test that a marker glued to a word is literal text."""
        paragraph = section_elements("a*b* c\n")[0]
        assert isinstance(paragraph, Paragraph)
        objects = [node for node in paragraph.children if not isinstance(node, Token)]
        assert [type(node) for node in objects] == [PlainText]
        assert objects[0].value == "a*b* c"
        assert_round_trip("a*b* c\n")

    def test_emphasis_after_space(self) -> None:
        """Test that a marker after whitespace opens bold text."""
        paragraph = section_elements("a *b* c\n")[0]
        bold = [node for node in paragraph.children if isinstance(node, Bold)]
        assert len(bold) == 1
        assert leaf_text(bold[0]) == "*b*"
        assert_round_trip("a *b* c\n")

    def test_single_blank_line_keeps_list(self) -> None:
        """Test that one blank line between items keeps one list."""
        lists = [node for node in section_elements("- a\n\n- b\n") if isinstance(node, PlainList)]
        assert len(lists) == 1
        assert len(lists[0].items) == 2
        assert_round_trip("- a\n\n- b\n")

    def test_two_blank_lines_end_list(self) -> None:
        """Test that two blank lines end a list."""
        lists = [node for node in section_elements("- a\n\n\n- b\n") if isinstance(node, PlainList)]
        assert len(lists) == 2
        assert_round_trip("- a\n\n\n- b\n")

    def test_unterminated_example_block(self) -> None:
        """Test that a block without an end line runs to the end of the buffer."""
        text = "#+begin_example\n* not a headline\ntext\n"
        doc = parse(text)
        assert doc.headlines == []
        block = section_elements(text)[0]
        assert isinstance(block, ExampleBlock)
        assert block.value == "* not a headline\ntext\n"
        assert assert_round_trip(text) == text + "#+end_example\n"

    def test_pipe_in_code_is_one_cell(self) -> None:
        """Test that a pipe inside inline code does not split a cell."""
        table = section_elements("| ~a|b~ |\n")[0]
        assert isinstance(table, Table)
        assert len(table.rows[0].cells) == 1
        assert_round_trip("| ~a|b~ |\n")

    def test_headline_levels_nest(self) -> None:
        """Test that a lower level headline closes deeper sections."""
        doc = parse("* A\n** B\n* C")
        assert [headline.title for headline in doc.headlines] == ["A", "C"]
        assert [headline.title for headline in doc.headlines[0].headlines] == ["B"]
        assert doc.headlines[1].headlines == []
        assert_round_trip("* A\n** B\n* C")


@pytest.mark.integration
class TestFullDocuments:
    """Round trips of realistic documents."""

    def test_sample_document(self, sample_org: str) -> None:
        """Test the shared sample document."""
        canonical = assert_round_trip(sample_org)
        assert canonical.startswith("#+TITLE: Sample\n")

    def test_crlf_document(self, sample_org: str) -> None:
        """Test that CRLF input keeps its structure with LF output."""
        text = sample_org.replace("\n", "\r\n")
        canonical = assert_round_trip(text)
        assert "\r" not in canonical
        assert structurally_equal(parse(text), parse(sample_org))

    def test_messy_document(self) -> None:
        """Test a document written without any formatting care."""
        text = (
            "#+title:    Messy\n"
            "*   TODO    [#A]   Heading     :a:b:\n"
            "   scheduled: <2025-02-01 Sat>\n"
            "#+begin_QUOTE\n"
            "quoted\n"
            "#+END_quote\n"
            "|a|bb|\n"
            "|-\n"
            "- item one\n"
            "-   [ ]   item two\n"
            "#+BEGIN_SRC sh\n"
            "echo hi\n"
        )
        canonical = assert_round_trip(text)
        assert canonical.startswith("#+TITLE: Messy\n* TODO [#A] Heading")
        assert "#+begin_quote\nquoted\n#+end_quote\n" in canonical
        assert canonical.endswith("#+begin_src sh\necho hi\n#+end_src\n")
