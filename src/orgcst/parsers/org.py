#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/org.py
"""Org-Mode to CST parser.

Parsing runs in three passes over one ``Buffer``:

1. the greater-element scanner classifies every line and groups lines into
   a frame tree (headlines, sections, blocks, drawers, lists, tables);
2. the element builder turns frames and content lines into typed element
   nodes;
3. the object parser fills text-bearing ranges with inline objects.

The result is a concrete syntax tree: every character of the input belongs
to exactly one leaf, so concatenating the leaves reproduces the input.

"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Union

from orgcst.constants import TODO_SEQUENCE_KEYWORDS
from orgcst.cst.buffer import Buffer
from orgcst.cst.nodes import Document
from orgcst.exceptions import NestingDepthError
from orgcst.options.org import OrgParserOptions
from orgcst.parsers.base import BaseParser
from orgcst.parsers.classifier import LineKind
from orgcst.parsers.elements import ElementBuilder
from orgcst.parsers.scanner import ScanResult, scan

logger = logging.getLogger(__name__)

TODO_FAST_ACCESS_RE = re.compile(r"\(.*\)$")


def split_todo_sequence(words: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split one TODO sequence into its todo and done keywords.

    Words after a ``|`` are done keywords. Without a ``|``, the last word is
    the only done keyword. Fast-access suffixes such as ``(t)`` or ``(w@/!)``
    are removed.

    Examples
    --------
        >>> split_todo_sequence(["TODO", "WAIT(w)", "|", "DONE"])
        (['TODO', 'WAIT'], ['DONE'])
        >>> split_todo_sequence(["NEXT", "FINISHED"])
        (['NEXT'], ['FINISHED'])

    """
    cleaned = [TODO_FAST_ACCESS_RE.sub("", word) if word != "|" else word for word in words]
    cleaned = [word for word in cleaned if word]
    if "|" in cleaned:
        bar = cleaned.index("|")
        todo = [word for word in cleaned[:bar] if word != "|"]
        done = [word for word in cleaned[bar + 1 :] if word != "|"]
        return todo, done
    if not cleaned:
        return [], []
    return cleaned[:-1], cleaned[-1:]


class OrgParser(BaseParser):
    r"""Convert Org-Mode text into a concrete syntax tree.

    Parameters
    ----------
    options : OrgParserOptions or None, default = None
        Parser configuration options

    Notes
    -----
    Org syntax is total: any text parses, and input that looks malformed
    degrades to paragraphs rather than raising. The only failures are input
    that is not valid Unicode (``InputValidationError``) and documents that
    nest deeper than ``max_nesting_depth`` (``NestingDepthError``).

    ``#+TODO:``, ``#+SEQ_TODO:`` and ``#+TYP_TODO:`` lines add keywords to the
    configured set for the buffer they appear in.

    Examples
    --------
    Basic parsing:

        >>> parser = OrgParser()
        >>> doc = parser.parse("* TODO Heading\nSome *bold* text.\n")
        >>> doc.headlines[0].todo_keyword
        'TODO'

    With options:

        >>> options = OrgParserOptions(todo_keywords=["NEXT", "|", "FINISHED"])
        >>> doc = OrgParser(options).parse("* FINISHED Write report\n")

    """

    def __init__(self, options: OrgParserOptions | None = None):
        """Initialize the Org parser with options."""
        BaseParser._validate_options_type(options, OrgParserOptions, "org")
        options = options or OrgParserOptions()
        super().__init__(options)
        self.options: OrgParserOptions = options

    def parse(self, input_data: Union[str, bytes]) -> Document:
        """Parse Org-Mode input into a CST document.

        Parameters
        ----------
        input_data : str or bytes
            Org text, or its UTF-8 encoding

        Returns
        -------
        Document
            CST root covering the whole input

        Raises
        ------
        InputValidationError
            If the input is not valid Unicode text
        NestingDepthError
            If greater elements or objects nest deeper than the limit

        """
        buffer = Buffer(input_data)
        logger.debug("Parsing Org buffer of %d characters in %d lines", len(buffer), len(buffer.lines))

        result = scan(buffer, self.options.max_nesting_depth)
        todo_keywords, done_keywords = self._todo_keywords(result)

        builder = ElementBuilder(
            result,
            todo_keywords=todo_keywords,
            done_keywords=done_keywords,
            granularity=self.options.granularity,
            max_nesting_depth=self.options.max_nesting_depth,
        )
        try:
            return builder.build()
        except RecursionError as e:
            # A limit above what the interpreter stack allows
            raise NestingDepthError(
                None, self.options.max_nesting_depth, parsing_stage="elements", original_error=e
            ) from e

    def _todo_keywords(self, result: ScanResult) -> tuple[frozenset[str], frozenset[str]]:
        """Collect the TODO and done keyword sets for one buffer."""
        todo, done = split_todo_sequence(self.options.todo_keywords)
        todo_set, done_set = set(todo), set(done)
        for record in result.lines:
            if record.kind is not LineKind.KEYWORD:
                continue
            key = str(record.info.get("key", "")).upper()
            if key not in TODO_SEQUENCE_KEYWORDS:
                continue
            in_buffer_todo, in_buffer_done = split_todo_sequence(str(record.info.get("value", "")).split())
            todo_set.update(in_buffer_todo)
            done_set.update(in_buffer_done)
            logger.debug("In-buffer %s line adds %s / %s", key, in_buffer_todo, in_buffer_done)
        return frozenset(todo_set - done_set), frozenset(done_set)
