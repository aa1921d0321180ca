#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_buffer.py
"""Unit tests for the source buffer and its lines."""

import pytest

from orgcst.cst.buffer import Buffer
from orgcst.exceptions import InputValidationError


@pytest.mark.unit
class TestBufferLines:
    """Tests for line splitting."""

    def test_empty_buffer_has_no_lines(self) -> None:
        """Test that an empty text produces no lines."""
        buf = Buffer("")
        assert buf.lines == ()
        assert len(buf) == 0

    def test_lines_and_offsets(self) -> None:
        """Test line text and offsets."""
        buf = Buffer("* A\nbody\n")
        assert [line.text for line in buf.lines] == ["* A", "body"]
        first, second = buf.lines
        assert (first.start, first.end, first.stop) == (0, 3, 4)
        assert (second.start, second.end, second.stop) == (4, 8, 9)

    def test_final_line_without_terminator(self) -> None:
        """Test that the last line may lack a newline."""
        buf = Buffer("a\nb")
        assert buf.lines[-1].text == "b"
        assert buf.lines[-1].newline == ""
        assert buf.lines[-1].stop == 3

    def test_crlf_is_one_terminator(self) -> None:
        """Test that CRLF counts as one terminator and is not part of the text."""
        buf = Buffer("a\r\nb\r\n")
        assert [line.text for line in buf.lines] == ["a", "b"]
        assert buf.lines[0].newline == "\r\n"
        assert buf.lines[1].start == 3

    def test_indent_and_blank(self) -> None:
        """Test indentation width and blank detection."""
        buf = Buffer("  \t- item\n   \n")
        assert buf.lines[0].indent == 3
        assert not buf.lines[0].is_blank
        assert buf.lines[1].is_blank

    def test_iteration(self) -> None:
        """Test iterating a buffer yields its lines."""
        buf = Buffer("x\ny\n")
        assert [line.index for line in buf] == [0, 1]


@pytest.mark.unit
class TestBufferAccess:
    """Tests for offset based access."""

    def test_slice(self) -> None:
        """Test slicing by offsets."""
        buf = Buffer("hello world")
        assert buf.slice(6, 11) == "world"

    def test_slice_out_of_range(self) -> None:
        """Test that invalid ranges raise IndexError."""
        buf = Buffer("abc")
        with pytest.raises(IndexError):
            buf.slice(2, 10)
        with pytest.raises(IndexError):
            buf.slice(2, 1)

    def test_line_at(self) -> None:
        """Test finding the line for an offset."""
        buf = Buffer("ab\ncd\n")
        assert buf.line_at(0).index == 0
        assert buf.line_at(2).index == 0
        assert buf.line_at(3).index == 1
        assert buf.line_at(6).index == 1

    def test_position_is_one_based(self) -> None:
        """Test line and column numbers."""
        buf = Buffer("* A\nbody\n")
        assert buf.position(0) == (1, 1)
        assert buf.position(5) == (2, 2)

    def test_line_at_empty_buffer(self) -> None:
        """Test that an empty buffer has no line for any offset."""
        with pytest.raises(IndexError):
            Buffer("").line_at(0)


@pytest.mark.unit
class TestBufferValidation:
    """Tests for input validation."""

    def test_utf8_bytes_are_decoded(self) -> None:
        """Test that UTF-8 bytes are accepted."""
        buf = Buffer("* Café\n".encode("utf-8"))
        assert buf.text == "* Café\n"

    def test_invalid_utf8_raises(self) -> None:
        """Test that undecodable bytes raise InputValidationError."""
        with pytest.raises(InputValidationError) as exc_info:
            Buffer(b"ok \xff\xfe")
        assert exc_info.value.position == 3

    def test_lone_surrogate_raises(self) -> None:
        """Test that text with a lone surrogate is rejected."""
        with pytest.raises(InputValidationError):
            Buffer("bad \ud800 text")

    def test_non_text_input_raises(self) -> None:
        """Test that other input types are rejected."""
        with pytest.raises(InputValidationError):
            Buffer(42)  # type: ignore[arg-type]
