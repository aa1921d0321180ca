#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_elements.py
"""Unit tests for element building through the Org parser."""

import pytest

from orgcst.cst.nodes import (
    BabelCall,
    Bold,
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
    Keyword,
    LatexEnvironment,
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
    Token,
    VerseBlock,
)
from orgcst.exceptions import NestingDepthError
from orgcst.options.org import OrgParserOptions
from orgcst.parsers.elements import normalize_keyword_key, parse_affiliated_keyword, split_src_header
from orgcst.parsers.org import OrgParser, split_todo_sequence


def parse(text: str, **kwargs) -> Document:
    options = OrgParserOptions(**kwargs) if kwargs else None
    return OrgParser(options).parse(text)


def first_headline(text: str, **kwargs) -> Headline:
    return parse(text, **kwargs).headlines[0]


def elements(text: str) -> list:
    """Non-blank elements of the zeroth section."""
    section = parse(text).section
    assert section is not None
    return [child for child in section.children if not isinstance(child, Token)]


def only(text: str):
    nodes = elements(text)
    assert len(nodes) == 1, [node.kind for node in nodes]
    return nodes[0]


@pytest.mark.unit
class TestHeadlines:
    """Tests for headline properties."""

    def test_all_headline_parts(self) -> None:
        """Test keyword, priority, comment, title and tags."""
        headline = first_headline("* TODO [#A] COMMENT Title here :a:b:a:\n")
        assert headline.level == 1
        assert headline.todo_keyword == "TODO"
        assert headline.todo_type == "todo"
        assert headline.priority == "A"
        assert headline.commented is True
        assert headline.title == "Title here"
        assert headline.tags == ("a", "b")
        assert headline.tags_aligned is False

    def test_aligned_tags(self) -> None:
        """Test that padded tags are flagged as aligned."""
        assert first_headline("* Title        :x:\n").tags_aligned is True

    def test_tags_without_title(self) -> None:
        """Test a headline made of tags only."""
        headline = first_headline("* :x:y:\n")
        assert headline.title == ""
        assert headline.tags == ("x", "y")
        assert headline.tags_aligned is False

    def test_done_keyword(self) -> None:
        """Test a done keyword."""
        headline = first_headline("* DONE Finished\n")
        assert headline.todo_type == "done"

    def test_unknown_keyword_is_title(self) -> None:
        """Test that unconfigured words stay in the title."""
        headline = first_headline("* NEXT Step\n")
        assert headline.todo_keyword is None
        assert headline.title == "NEXT Step"

    def test_keyword_alone(self) -> None:
        """Test a headline with only a keyword."""
        headline = first_headline("* TODO\n")
        assert headline.todo_keyword == "TODO"
        assert headline.title == ""

    def test_configured_keywords(self) -> None:
        """Test TODO keywords from options."""
        options = {"todo_keywords": ["NEXT", "|", "FINISHED"]}
        assert first_headline("* FINISHED x\n", **options).todo_type == "done"
        assert first_headline("* TODO x\n", **options).todo_keyword is None

    def test_in_buffer_keywords(self) -> None:
        """Test that #+TODO lines extend the keyword set."""
        doc = parse("#+TODO: NEXT | FINISHED\n* NEXT a\n* FINISHED b\n* TODO c\n")
        assert [(h.todo_keyword, h.todo_type) for h in doc.headlines] == [
            ("NEXT", "todo"),
            ("FINISHED", "done"),
            ("TODO", "todo"),
        ]

    def test_archive_and_footnote_section(self) -> None:
        """Test the ARCHIVE tag and the footnote section title."""
        assert first_headline("* Old :ARCHIVE:\n").archived is True
        assert first_headline("* Footnotes\n").footnote_section is True

    def test_title_objects(self) -> None:
        """Test that titles are parsed into objects."""
        headline = first_headline("* A *bold* title\n")
        assert [node.kind for node in headline.title_nodes] == ["plain_text", "bold", "plain_text"]

    def test_nesting(self) -> None:
        """Test sub-headlines and sections."""
        doc = parse("* A\ntext\n** B\n* C\n")
        first, second = doc.headlines
        assert isinstance(first.section, Section)
        assert [h.title for h in first.headlines] == ["B"]
        assert second.section is None

    def test_invalid_level(self) -> None:
        """Test that a headline level below one is rejected."""
        with pytest.raises(ValueError):
            Headline(Span(0, 0), level=0)


@pytest.mark.unit
class TestTodoSequence:
    """Tests for splitting TODO sequences."""

    def test_with_bar(self) -> None:
        """Test a sequence with a bar."""
        assert split_todo_sequence(["TODO", "WAIT(w@/!)", "|", "DONE(d)"]) == (["TODO", "WAIT"], ["DONE"])

    def test_without_bar(self) -> None:
        """Test that the last word is done without a bar."""
        assert split_todo_sequence(["A", "B", "C"]) == (["A", "B"], ["C"])

    def test_empty(self) -> None:
        """Test an empty sequence."""
        assert split_todo_sequence([]) == ([], [])


@pytest.mark.unit
class TestPlanningAndClocks:
    """Tests for planning lines, clocks and property drawers."""

    def test_planning_after_headline(self) -> None:
        """Test a planning line right after a headline."""
        headline = first_headline("* A\nSCHEDULED: <2025-01-10 Fri> DEADLINE: <2025-01-20 Mon>\n")
        planning = headline.section.children[0]
        assert isinstance(planning, Planning)
        assert planning.scheduled == "<2025-01-10 Fri>"
        assert planning.deadline == "<2025-01-20 Mon>"
        assert planning.closed is None
        assert set(planning.timestamps()) == {"SCHEDULED", "DEADLINE"}

    def test_planning_elsewhere_is_paragraph(self) -> None:
        """Test that planning text later in a section is a paragraph."""
        headline = first_headline("* A\ntext\nSCHEDULED: <2025-01-10 Fri>\n")
        children = headline.section.children
        assert len(children) == 1
        assert isinstance(children[0], Paragraph)

    def test_planning_in_zeroth_section_is_paragraph(self) -> None:
        """Test that planning before any headline is a paragraph."""
        assert isinstance(only("SCHEDULED: <2025-01-10 Fri>\n"), Paragraph)

    def test_planning_with_extra_text_is_paragraph(self) -> None:
        """Test that trailing text makes the line a paragraph."""
        headline = first_headline("* A\nSCHEDULED: <2025-01-10 Fri> soon\n")
        assert isinstance(headline.section.children[0], Paragraph)

    def test_property_drawer(self) -> None:
        """Test node properties and appended values."""
        headline = first_headline("* A\n:PROPERTIES:\n:ID: abc\n:TAGS: x\n:TAGS+: y\n:END:\n")
        drawer = headline.section.children[0]
        assert isinstance(drawer, PropertyDrawer)
        assert drawer.as_dict() == {"ID": "abc", "TAGS": "x y"}

    def test_closed_clock(self) -> None:
        """Test a clock line with a duration inside a drawer."""
        drawer = only(":LOGBOOK:\nCLOCK: [2025-01-05 Sun 10:00]--[2025-01-05 Sun 11:30] =>  1:30\n:END:\n")
        assert isinstance(drawer, Drawer)
        assert drawer.drawer_name == "LOGBOOK"
        clock = drawer.children[1]
        assert isinstance(clock, Clock)
        assert clock.status == "closed"
        assert clock.duration == "1:30"
        assert clock.value == "[2025-01-05 Sun 10:00]--[2025-01-05 Sun 11:30]"

    def test_running_clock(self) -> None:
        """Test a clock without an end."""
        clock = only("CLOCK: [2025-01-05 Sun 10:00]\n")
        assert isinstance(clock, Clock)
        assert clock.status == "running"
        assert clock.duration is None


@pytest.mark.unit
class TestKeywords:
    """Tests for keywords and affiliated keywords."""

    def test_parsed_keyword_value(self) -> None:
        """Test that TITLE values hold objects."""
        keyword = only("#+title: My *Doc*\n")
        assert isinstance(keyword, Keyword)
        assert keyword.key == "TITLE"
        assert keyword.value == "My *Doc*"
        assert any(isinstance(child, Bold) for child in keyword.children)

    def test_plain_keyword_value(self) -> None:
        """Test that other keyword values stay raw."""
        keyword = only("#+OPTIONS: toc:nil\n")
        assert keyword.value == "toc:nil"
        assert all(isinstance(child, Token) for child in keyword.children)

    def test_affiliated_keywords_bind_to_table(self) -> None:
        """Test that keywords before a table become its affiliated keywords."""
        table = only("#+NAME: tbl\n#+CAPTION[short]: Long caption\n| a |\n")
        assert isinstance(table, Table)
        assert table.span.start == 0
        assert [(k.key, k.value, k.option) for k in table.affiliated] == [
            ("NAME", "tbl", None),
            ("CAPTION", "Long caption", "short"),
        ]

    def test_affiliated_alias(self) -> None:
        """Test that aliases are translated."""
        paragraph = only("#+LABEL: fig\ntext\n")
        assert isinstance(paragraph, Paragraph)
        assert paragraph.affiliated[0].key == "NAME"

    def test_orphan_affiliated_keyword(self) -> None:
        """Test that a keyword followed by a blank line stands alone."""
        nodes = elements("#+NAME: orphan\n\ntext\n")
        assert [node.kind for node in nodes] == ["keyword", "paragraph"]
        assert nodes[0].key == "NAME"

    def test_affiliated_keyword_before_keyword(self) -> None:
        """Test that keywords cannot carry affiliated keywords."""
        nodes = elements("#+NAME: x\n#+TITLE: y\n")
        assert [node.key for node in nodes] == ["NAME", "TITLE"]

    def test_parse_affiliated_keyword(self) -> None:
        """Test the affiliated keyword line parser."""
        keyword = parse_affiliated_keyword("#+attr_html: :width 100")
        assert keyword is not None and keyword.key == "ATTR_HTML"
        assert parse_affiliated_keyword("#+TITLE: x") is None
        assert parse_affiliated_keyword("#+NAME[x]: y") is None

    def test_normalize_keyword_key(self) -> None:
        """Test key upper-casing before the option part."""
        assert normalize_keyword_key("caption[Short]") == "CAPTION[Short]"

    def test_babel_call(self) -> None:
        """Test the parts of a babel call line."""
        call = only("#+CALL: square[:eval yes](x=4)\n")
        assert isinstance(call, BabelCall)
        assert call.call == "square"
        assert call.inside_header == ":eval yes"
        assert call.arguments == "x=4"


@pytest.mark.unit
class TestBlocks:
    """Tests for blocks and environments."""

    def test_src_block(self) -> None:
        """Test header splitting and comma unescaping."""
        block = only("#+begin_src python -n :results output\n,* not a heading\nprint(1)\n#+end_src\n")
        assert isinstance(block, SrcBlock)
        assert block.language == "python"
        assert block.switches == "-n"
        assert block.parameters == ":results output"
        assert block.value == "* not a heading\nprint(1)\n"

    def test_split_src_header(self) -> None:
        """Test headers with and without a language."""
        assert split_src_header("python -n :results output") == ("python", "-n", ":results output")
        assert split_src_header(":tangle yes") == (None, None, ":tangle yes")
        assert split_src_header(None) == (None, None, None)

    def test_example_export_and_comment_blocks(self) -> None:
        """Test the other verbatim blocks."""
        assert only("#+begin_example\nx\n#+end_example\n").value == "x\n"
        assert isinstance(only("#+begin_example\nx\n#+end_example\n"), ExampleBlock)
        export = only("#+begin_export html\n<b>\n#+end_export\n")
        assert isinstance(export, ExportBlock)
        assert export.backend == "html"
        assert isinstance(only("#+begin_comment\nx\n#+end_comment\n"), CommentBlock)

    def test_verse_block_holds_objects(self) -> None:
        """Test that verse bodies are object-parsed."""
        verse = only("#+begin_verse\nsome *bold*\n#+end_verse\n")
        assert isinstance(verse, VerseBlock)
        assert any(isinstance(child, Bold) for child in verse.children)

    def test_greater_blocks(self) -> None:
        """Test quote, center and special blocks."""
        quote = only("#+begin_quote\ntext\n#+end_quote\n")
        assert isinstance(quote, QuoteBlock)
        assert [child.kind for child in quote.children] == ["token", "paragraph", "token"]
        assert isinstance(only("#+begin_center\nx\n#+end_center\n"), CenterBlock)
        special = only("#+begin_note\nx\n#+end_note\n")
        assert isinstance(special, SpecialBlock)
        assert special.block_type == "note"

    def test_unterminated_block(self) -> None:
        """Test that an unterminated block has no end token."""
        quote = only("#+begin_quote\ntext\n")
        assert isinstance(quote.children[-1], Paragraph)

    def test_dynamic_block(self) -> None:
        """Test a dynamic block."""
        block = only("#+BEGIN: clocktable :scope file\n#+END:\n")
        assert isinstance(block, DynamicBlock)
        assert block.block_name == "clocktable"
        assert block.arguments == ":scope file"

    def test_latex_environment(self) -> None:
        """Test a LaTeX environment."""
        environment = only("\\begin{align}\nx\n\\end{align}\n")
        assert isinstance(environment, LatexEnvironment)
        assert environment.environment == "align"
        assert environment.value == "\\begin{align}\nx\n\\end{align}"


@pytest.mark.unit
class TestListsAndTables:
    """Tests for lists, tables and footnote definitions."""

    def test_unordered_list(self) -> None:
        """Test a simple list."""
        plain_list = only("- a\n- b\n")
        assert isinstance(plain_list, PlainList)
        assert plain_list.list_type == "unordered"
        assert [item.bullet for item in plain_list.items] == ["-", "-"]

    def test_ordered_list_with_counter(self) -> None:
        """Test ordered bullets and counter cookies."""
        plain_list = only("1. [@3] three\n2. four\n")
        assert plain_list.list_type == "ordered"
        assert plain_list.items[0].counter == 3

    def test_descriptive_list(self) -> None:
        """Test a descriptive item tag."""
        plain_list = only("- term :: definition\n")
        assert plain_list.list_type == "descriptive"
        assert plain_list.items[0].tag == "term"
        assert [node.kind for node in plain_list.items[0].tag_nodes] == ["plain_text"]

    def test_ordered_item_has_no_tag(self) -> None:
        """Test that ordered items never carry tags."""
        assert only("1. a :: b\n").items[0].tag is None

    def test_checkboxes(self) -> None:
        """Test checkbox states."""
        plain_list = only("- [X] done\n- [ ] open\n- [-] partial\n")
        assert [item.checkbox for item in plain_list.items] == ["on", "off", "trans"]

    def test_item_paragraph_continues(self) -> None:
        """Test that indented lines continue the item paragraph."""
        item = only("- a\n  more\n").items[0]
        assert [node.kind for node in item.contents] == ["paragraph"]
        assert item.contents[0].span.end == len("- a\n  more\n")

    def test_org_table(self) -> None:
        """Test rows, rules, cells and formulas."""
        table = only("| a | *b* |\n|---+---|\n| 1 | 2 |\n#+TBLFM: $2=$1\n")
        assert table.table_type == "org"
        assert [row.row_type for row in table.rows] == ["standard", "rule", "standard"]
        assert len(table.rows[0].cells) == 2
        assert table.rows[1].cells == []
        assert table.formulas == ("$2=$1",)
        assert any(isinstance(child, Bold) for child in table.rows[0].cells[1].children)

    def test_table_el(self) -> None:
        """Test that table.el tables keep their raw text."""
        table = only("+---+\n| a |\n+---+\n")
        assert table.table_type == "table.el"
        assert table.value == "+---+\n| a |\n+---+"

    def test_footnote_definition(self) -> None:
        """Test a footnote definition with inline contents."""
        definition = only("[fn:1] Text here.\n")
        assert isinstance(definition, FootnoteDefinition)
        assert definition.label == "1"
        assert isinstance(definition.children[-1], Paragraph)


@pytest.mark.unit
class TestLesserElements:
    """Tests for line-based lesser elements."""

    def test_comment_lines_join(self) -> None:
        """Test consecutive comment lines."""
        comment = only("# one\n# two\n")
        assert isinstance(comment, Comment)
        assert comment.value == "one\ntwo"

    def test_fixed_width_lines_join(self) -> None:
        """Test consecutive fixed-width lines."""
        fixed = only(": a\n: b\n")
        assert isinstance(fixed, FixedWidth)
        assert fixed.value == "a\nb"

    def test_horizontal_rule(self) -> None:
        """Test a horizontal rule."""
        assert isinstance(only("-----\n"), HorizontalRule)

    def test_diary_sexp(self) -> None:
        """Test a diary sexp line."""
        sexp = only("%%(diary-anniversary 1 1 2000)\n")
        assert isinstance(sexp, DiarySexp)
        assert sexp.value == "%%(diary-anniversary 1 1 2000)"

    def test_paragraph_lines_join(self) -> None:
        """Test that text lines form one paragraph."""
        paragraph = only("one\ntwo\n")
        assert isinstance(paragraph, Paragraph)
        assert paragraph.span.end == 8


@pytest.mark.unit
class TestGranularity:
    """Tests for partial parsing."""

    def test_headline_granularity(self) -> None:
        """Test that sections stay raw at headline granularity."""
        headline = first_headline("* A *b*\ntext *x*\n", granularity="headline")
        assert headline.title == "A *b*"
        assert headline.title_nodes == []
        contents = headline.section.children
        assert len(contents) == 1
        assert isinstance(contents[0], Token) and contents[0].role == "contents"

    def test_element_granularity(self) -> None:
        """Test that paragraphs hold raw text at element granularity."""
        section = parse("text *x*\n", granularity="element").section
        paragraph = section.children[0]
        assert isinstance(paragraph, Paragraph)
        assert paragraph.children[0].role == "contents"


@pytest.mark.unit
class TestNestingLimits:
    """Tests for deep greater element nesting."""

    def test_stack_exhaustion_is_nesting_error(self) -> None:
        """Test that a limit above the interpreter stack still raises NestingDepthError."""
        text = "#+begin_quote\n" * 3000
        with pytest.raises(NestingDepthError) as exc_info:
            parse(text, max_nesting_depth=5000)
        assert exc_info.value.depth is None
        assert exc_info.value.limit == 5000
        assert exc_info.value.parsing_stage == "elements"
        assert isinstance(exc_info.value.original_error, RecursionError)

    def test_nesting_below_limit(self) -> None:
        """Test that nesting inside the default limit parses."""
        doc = parse("#+begin_quote\n" * 20 + "text\n")
        assert doc.section is not None
