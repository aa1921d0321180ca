"""orgcst - A lossless Org-Mode parser and canonical serializer.

orgcst turns Org-Mode text into a concrete syntax tree (CST): a typed tree
of headlines, sections, greater elements, elements and inline objects in
which every character of the input belongs to exactly one leaf. The tree can
be walked with visitors, dumped to JSON, or rendered back as canonical Org
text.

The parser works in passes over one immutable buffer: a line classifier, a
greater-element scanner that builds the nesting of headlines, blocks,
drawers, lists and tables, an element parser, and an inline object parser.
Org syntax is total, so any text parses; constructs that look malformed
degrade to paragraphs.

Key Features
------------
- Total coverage: concatenating the leaves reproduces the input exactly
- Idempotent canonicalization: ``parse(serialize(parse(t)))`` is
  structurally equal to ``parse(t)``
- Unterminated blocks and drawers are sealed at the end of their container
- In-buffer ``#+TODO:`` keyword sequences
- Versioned JSON dump of the tree
- Parallel parsing of independent buffers

Requirements
------------
- Python 3.10+

Examples
--------
Parse and inspect a document:

    >>> from orgcst import parse
    >>> doc = parse("* TODO Write report :work:\\nSome *bold* text.\\n")
    >>> headline = doc.headlines[0]
    >>> headline.todo_keyword, headline.tags
    ('TODO', ('work',))

Canonicalize text:

    >>> from orgcst import canonicalize
    >>> canonicalize("#+title:   Notes\\n")
    '#+TITLE: Notes\\n'

See Also
--------
orgcst.cst : CST node definitions and utilities
orgcst.options : Parser and serializer options

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "orgcst requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from orgcst.api import canonicalize, parse, parse_documents, serialize
from orgcst.cst import (
    Document,
    Headline,
    Node,
    Section,
    Span,
    Token,
    cst_to_json,
    json_to_cst,
    structurally_equal,
    walk,
)
from orgcst.exceptions import (
    InputValidationError,
    InvalidOptionsError,
    InvariantViolationError,
    NestingDepthError,
    OrgCstError,
    ParsingError,
    RenderingError,
    ValidationError,
)
from orgcst.options import OrgParserOptions, OrgSerializerOptions
from orgcst.parsers import OrgParser
from orgcst.renderers import OrgSerializer

__all__ = [
    "__version__",
    # API functions
    "parse",
    "serialize",
    "canonicalize",
    "parse_documents",
    "structurally_equal",
    # Parser and serializer
    "OrgParser",
    "OrgSerializer",
    "OrgParserOptions",
    "OrgSerializerOptions",
    # CST
    "Document",
    "Headline",
    "Node",
    "Section",
    "Span",
    "Token",
    "walk",
    "cst_to_json",
    "json_to_cst",
    # Exceptions
    "OrgCstError",
    "ValidationError",
    "InputValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "NestingDepthError",
    "RenderingError",
    "InvariantViolationError",
]
