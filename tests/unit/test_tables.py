#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_tables.py
"""Unit tests for table row splitting."""

import pytest

from orgcst.parsers.tables import find_verbatim_close, is_rule_row, split_row


def cells(text: str) -> list[str]:
    return [text[part.start : part.end] for part in split_row(text) if part.kind == "cell"]


@pytest.mark.unit
class TestSplitRow:
    """Tests for splitting rows into cells."""

    def test_simple_row(self) -> None:
        """Test a row with two cells."""
        assert cells("| a | b |") == [" a ", " b "]

    def test_code_with_pipe_is_one_cell(self) -> None:
        """Test that a pipe inside inline code does not split the cell."""
        assert cells("| ~a|b~ |") == [" ~a|b~ "]

    def test_verbatim_with_pipe_is_one_cell(self) -> None:
        """Test that a pipe inside verbatim does not split the cell."""
        assert cells("| =x|y= | z |") == [" =x|y= ", " z "]

    def test_unclosed_code_marker_splits(self) -> None:
        """Test that an unclosed marker does not protect a pipe."""
        assert cells("| ~a|b |") == [" ~a", "b "]

    def test_marker_inside_word_does_not_open(self) -> None:
        """Test that a marker preceded by a letter does not open a span."""
        assert cells("| a~b|c~ |") == [" a~b", "c~ "]

    def test_empty_cells(self) -> None:
        """Test that adjacent separators yield empty cells."""
        parts = split_row("|a||b|")
        assert [part.kind for part in parts] == [
            "separator",
            "cell",
            "separator",
            "cell",
            "separator",
            "cell",
            "separator",
        ]
        empty = parts[3]
        assert empty.start == empty.end == 3

    def test_missing_final_separator(self) -> None:
        """Test a row without a closing pipe."""
        assert cells("| a | b") == [" a ", " b"]

    def test_trailing_whitespace(self) -> None:
        """Test that whitespace after the last pipe is not a cell."""
        parts = split_row("| a |  ")
        assert parts[-1].kind == "trailing"
        assert cells("| a |  ") == [" a "]

    def test_parts_cover_row(self) -> None:
        """Test that the parts cover the row without gaps."""
        text = "| ~a|b~ | c | =d= |"
        parts = split_row(text)
        assert parts[0].start == 0
        assert parts[-1].end == len(text)
        for left, right in zip(parts, parts[1:]):
            assert left.end == right.start


@pytest.mark.unit
class TestHelpers:
    """Tests for the small helpers."""

    def test_find_verbatim_close(self) -> None:
        """Test locating the closing marker."""
        assert find_verbatim_close("~a|b~", 0, 0) == 4
        assert find_verbatim_close("~ a~", 0, 0) is None

    def test_is_rule_row(self) -> None:
        """Test rule row detection."""
        assert is_rule_row("|---+---|")
        assert is_rule_row("|-")
        assert not is_rule_row("| - |")
