#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/cst/__init__.py
"""Concrete syntax tree for Org documents.

The module consists of several components:

- buffer: the immutable source text and its lines
- nodes: CST node classes, one per element and object kind
- visitors: visitor pattern, traversal helpers and invariant validation
- serialization: dictionary and JSON views, structural comparison

Examples
--------
Walk a parsed document:

    >>> from orgcst import parse
    >>> from orgcst.cst import Headline, walk
    >>> doc = parse("* A\\n** B\\n* C\\n")
    >>> [node.title for node in walk(doc) if isinstance(node, Headline)]
    ['A', 'B', 'C']

"""

from __future__ import annotations

from orgcst.cst.buffer import Buffer, Line
from orgcst.cst.nodes import (
    AffiliatedKeyword,
    BabelCall,
    Bold,
    CenterBlock,
    Clock,
    Code,
    Comment,
    CommentBlock,
    DiarySexp,
    Document,
    Drawer,
    DynamicBlock,
    Element,
    ELEMENT_CLASSES,
    Entity,
    ExampleBlock,
    ExportBlock,
    ExportSnippet,
    FixedWidth,
    FootnoteDefinition,
    FootnoteReference,
    GreaterElement,
    Headline,
    HorizontalRule,
    InlineBabelCall,
    InlineSrcBlock,
    Italic,
    Item,
    Keyword,
    LatexEnvironment,
    LatexFragment,
    LineBreak,
    Link,
    Macro,
    Node,
    NodeProperty,
    NODE_CLASSES_BY_KIND,
    Object,
    OBJECT_CLASSES,
    Paragraph,
    PlainList,
    PlainText,
    Planning,
    PropertyDrawer,
    QuoteBlock,
    RadioTarget,
    Section,
    Span,
    SpecialBlock,
    SrcBlock,
    StatisticsCookie,
    StrikeThrough,
    Subscript,
    Superscript,
    Table,
    TableCell,
    TableRow,
    Target,
    Timestamp,
    Token,
    Underline,
    Verbatim,
    VerseBlock,
)
from orgcst.cst.serialization import (
    cst_to_dict,
    cst_to_json,
    dict_to_cst,
    json_to_cst,
    structurally_equal,
    structure,
)
from orgcst.cst.visitors import InvariantValidator, NodeVisitor, iter_leaves, leaf_spans, leaf_text, walk

__all__ = [
    # Buffer
    "Buffer",
    "Line",
    # Nodes
    "AffiliatedKeyword",
    "BabelCall",
    "Bold",
    "CenterBlock",
    "Clock",
    "Code",
    "Comment",
    "CommentBlock",
    "DiarySexp",
    "Document",
    "Drawer",
    "DynamicBlock",
    "Element",
    "ELEMENT_CLASSES",
    "Entity",
    "ExampleBlock",
    "ExportBlock",
    "ExportSnippet",
    "FixedWidth",
    "FootnoteDefinition",
    "FootnoteReference",
    "GreaterElement",
    "Headline",
    "HorizontalRule",
    "InlineBabelCall",
    "InlineSrcBlock",
    "Italic",
    "Item",
    "Keyword",
    "LatexEnvironment",
    "LatexFragment",
    "LineBreak",
    "Link",
    "Macro",
    "Node",
    "NodeProperty",
    "NODE_CLASSES_BY_KIND",
    "Object",
    "OBJECT_CLASSES",
    "Paragraph",
    "PlainList",
    "PlainText",
    "Planning",
    "PropertyDrawer",
    "QuoteBlock",
    "RadioTarget",
    "Section",
    "Span",
    "SpecialBlock",
    "SrcBlock",
    "StatisticsCookie",
    "StrikeThrough",
    "Subscript",
    "Superscript",
    "Table",
    "TableCell",
    "TableRow",
    "Target",
    "Timestamp",
    "Token",
    "Underline",
    "Verbatim",
    "VerseBlock",
    # Visitors
    "InvariantValidator",
    "NodeVisitor",
    "iter_leaves",
    "leaf_spans",
    "leaf_text",
    "walk",
    # Serialization
    "cst_to_dict",
    "cst_to_json",
    "dict_to_cst",
    "json_to_cst",
    "structurally_equal",
    "structure",
]
