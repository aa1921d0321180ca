#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/cst/visitors.py
"""Visitor pattern implementation for CST traversal.

``Node.accept`` calls ``visit_<kind>`` on the visitor when it exists and
``generic_visit`` otherwise, so a visitor only implements the kinds it cares
about. The default ``generic_visit`` descends into children, which gives the
depth-first, document-order contract: every node is reached exactly once,
parents before children, siblings left to right.

"""

from __future__ import annotations

from typing import Any, Iterator

from orgcst.cst.nodes import (
    Document,
    GreaterElement,
    Node,
    Object,
    PlainText,
    Token,
)
from orgcst.exceptions import InvariantViolationError


class NodeVisitor:
    """Base class for CST visitors.

    Subclasses define ``visit_<kind>`` methods (``visit_headline``,
    ``visit_bold`` ...). Kinds without a method fall back to
    ``generic_visit``, which visits the children in order.

    Examples
    --------
        >>> class HeadlineCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_headline(self, node):
        ...         self.count += 1
        ...         self.generic_visit(node)

    """

    def visit(self, node: Node) -> Any:
        """Visit one node through its ``accept`` method."""
        return node.accept(self)

    def generic_visit(self, node: Node) -> Any:
        """Visit every child in order.

        Parameters
        ----------
        node : Node
            Node whose children are visited

        Returns
        -------
        Any
            Always None

        """
        for child in node.children:
            child.accept(self)
        return None


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all of its descendants in document order.

    Iterative, so deep trees do not consume Python stack frames.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def iter_leaves(node: Node) -> Iterator[Node]:
    """Yield the leaves below ``node`` in document order."""
    for current in walk(node):
        if not current.children:
            yield current


def leaf_text(node: Node) -> str:
    """Concatenate the text carried by the leaves below ``node``.

    For a tree fresh from the parser this equals the parsed buffer.
    """
    parts = []
    for leaf in iter_leaves(node):
        if isinstance(leaf, Token):
            parts.append(leaf.text)
        elif isinstance(leaf, PlainText):
            parts.append(leaf.value)
    return "".join(parts)


def leaf_spans(node: Node) -> list[tuple[int, int]]:
    """Return ``(start, end)`` of every leaf in document order."""
    return [(leaf.span.start, leaf.span.end) for leaf in iter_leaves(node)]


class InvariantValidator(NodeVisitor):
    """Visitor that checks the structural invariants of a CST.

    The checks are:
    - The root document starts at offset 0
    - Every child span lies within its parent span
    - Children are contiguous: no gaps, no overlaps, and together they cover
      their parent exactly
    - Tokens and plain text carry exactly as many characters as they span
    - Objects never contain greater elements

    Parameters
    ----------
    strict : bool, default = True
        Whether to raise ``InvariantViolationError`` on the first failure
        instead of collecting every failure in ``errors``

    Examples
    --------
        >>> validator = InvariantValidator(strict=False)
        >>> validator.validate(doc)
        []

    """

    def __init__(self, strict: bool = True):
        """Initialize the validator."""
        self.strict = strict
        self.errors: list[str] = []

    def _add_error(self, message: str) -> None:
        """Record a violation, raising at once in strict mode.

        Parameters
        ----------
        message : str
            Error message

        """
        self.errors.append(message)
        if self.strict:
            raise InvariantViolationError([message])

    def validate(self, root: Node) -> list[str]:
        """Check ``root`` and everything below it.

        Returns
        -------
        list of str
            Violations found; empty when the tree is well formed

        """
        self.errors = []
        if isinstance(root, Document) and root.span.start != 0:
            self._add_error(f"Document must start at offset 0, starts at {root.span.start}")
        root.accept(self)
        return list(self.errors)

    def generic_visit(self, node: Node) -> Any:
        """Check one node, then its children."""
        self._check_leaf_text(node)
        self._check_children(node)
        return super().generic_visit(node)

    def _check_leaf_text(self, node: Node) -> None:
        carried: str | None = None
        if isinstance(node, Token):
            carried = node.text
        elif isinstance(node, PlainText):
            carried = node.value
        if carried is not None and len(carried) != len(node.span):
            self._add_error(
                f"{node.kind} at [{node.span.start}, {node.span.end}) carries {len(carried)} characters"
            )

    def _check_children(self, node: Node) -> None:
        if not node.children:
            if not isinstance(node, (Token, PlainText, Document)):
                self._add_error(f"{node.kind} at [{node.span.start}, {node.span.end}) has no leaf tokens")
            return
        if isinstance(node, (Token, PlainText)):
            self._add_error(f"{node.kind} at [{node.span.start}, {node.span.end}) must be a leaf")
            return
        cursor = node.span.start
        for index, child in enumerate(node.children):
            if isinstance(node, Object) and isinstance(child, GreaterElement):
                self._add_error(f"{node.kind} cannot contain {child.kind}")
            if not node.span.contains(child.span):
                self._add_error(
                    f"Child {index} ({child.kind}) at [{child.span.start}, {child.span.end}) "
                    f"escapes parent {node.kind} at [{node.span.start}, {node.span.end})"
                )
            if child.span.start < cursor:
                self._add_error(f"Child {index} ({child.kind}) of {node.kind} overlaps its previous sibling")
            elif child.span.start > cursor:
                self._add_error(
                    f"Gap [{cursor}, {child.span.start}) before child {index} ({child.kind}) of {node.kind}"
                )
            cursor = max(cursor, child.span.end)
        if cursor != node.span.end:
            self._add_error(f"Children of {node.kind} end at {cursor}, parent ends at {node.span.end}")
