#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/orgcst/cst/buffer.py
"""Immutable source buffer for the Org parser.

Every later pass addresses text through offsets into a single ``Buffer``
instead of copying substrings around. Offsets are Python string indices
(code points). A line ends at ``\\n``; a ``\\r\\n`` pair counts as one
terminator so that the line text never carries a trailing carriage return.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Iterator, Union

from orgcst.exceptions import InputValidationError

BufferInput = Union[str, bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Line:
    """One physical line of the buffer.

    Parameters
    ----------
    index : int
        Zero-based line number
    start : int
        Offset of the first character of the line
    end : int
        Offset just past the line text, before the terminator
    newline : str
        The terminator: ``"\\n"``, ``"\\r\\n"`` or ``""`` for a final
        unterminated line
    text : str
        The line text without its terminator

    """

    index: int
    start: int
    end: int
    newline: str
    text: str

    @property
    def stop(self) -> int:
        """Offset just past the terminator."""
        return self.end + len(self.newline)

    @property
    def indent(self) -> int:
        """Width of the leading run of spaces and tabs."""
        return len(self.text) - len(self.text.lstrip(" \t"))

    @property
    def is_blank(self) -> bool:
        """Whether the line holds only spaces and tabs."""
        return not self.text.strip(" \t")


class Buffer:
    """Read-only view over one Org document.

    Parameters
    ----------
    source : str or bytes
        Document text. Bytes are decoded as strict UTF-8.

    Raises
    ------
    InputValidationError
        If ``source`` is neither text nor bytes, fails to decode, or
        contains lone surrogate code points.

    Examples
    --------
        >>> buf = Buffer("* A\\nbody\\n")
        >>> [line.text for line in buf.lines]
        ['* A', 'body']
        >>> buf.position(5)
        (2, 2)

    """

    __slots__ = ("_text", "_lines", "_starts")

    def __init__(self, source: BufferInput):
        self._text = _validate_source(source)
        self._lines = tuple(_split_lines(self._text))
        self._starts = [line.start for line in self._lines]

    @property
    def text(self) -> str:
        """The full document text."""
        return self._text

    @property
    def lines(self) -> tuple[Line, ...]:
        """All physical lines, in order."""
        return self._lines

    def __len__(self) -> int:
        return len(self._text)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def slice(self, start: int, end: int) -> str:
        """Return the text between two offsets."""
        if start < 0 or end > len(self._text) or start > end:
            raise IndexError(f"Invalid buffer range [{start}, {end}) for length {len(self._text)}")
        return self._text[start:end]

    def line_at(self, offset: int) -> Line:
        """Return the line containing ``offset``.

        The offset of a terminator belongs to the line it terminates; the
        offset equal to the buffer length belongs to the last line.
        """
        if not self._lines or offset < 0 or offset > len(self._text):
            raise IndexError(f"Offset {offset} outside buffer of length {len(self._text)}")
        return self._lines[bisect.bisect_right(self._starts, offset) - 1]

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of an offset."""
        line = self.line_at(offset)
        return line.index + 1, offset - line.start + 1


def _validate_source(source: object) -> str:
    """Return the source as ``str`` or raise ``InputValidationError``."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        try:
            return bytes(source).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InputValidationError(
                f"Input is not valid UTF-8: {exc.reason} at byte {exc.start}",
                position=exc.start,
                original_error=exc,
            ) from exc
    if not isinstance(source, str):
        raise InputValidationError(f"Expected text or UTF-8 bytes, got {type(source).__name__}")
    try:
        source.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InputValidationError(
            f"Input contains an invalid code point at offset {exc.start}",
            position=exc.start,
            original_error=exc,
        ) from exc
    return source


def _split_lines(text: str) -> Iterator[Line]:
    """Yield lines of ``text``; an empty text has no lines."""
    start = 0
    index = 0
    length = len(text)
    while start < length:
        newline_at = text.find("\n", start)
        if newline_at == -1:
            yield Line(index, start, length, "", text[start:])
            return
        end = newline_at
        newline = "\n"
        if end > start and text[end - 1] == "\r":
            end -= 1
            newline = "\r\n"
        yield Line(index, start, end, newline, text[start:end])
        start = newline_at + 1
        index += 1
