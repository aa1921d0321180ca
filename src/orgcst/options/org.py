#  Copyright (c) 2025 Tom Villani, Ph.D.

# orgcst/options/org.py
"""Configuration options for Org parsing and canonical serialization."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from orgcst.constants import (
    DEFAULT_GRANULARITY,
    DEFAULT_MAX_NESTING_DEPTH,
    DEFAULT_ORG_TODO_KEYWORDS,
    DEFAULT_TAGS_COLUMN,
    Granularity,
)
from orgcst.options.base import BaseParserOptions, BaseSerializerOptions

_GRANULARITIES = ("headline", "element", "object")


@dataclass(frozen=True)
class OrgParserOptions(BaseParserOptions):
    """Configuration options for Org-to-CST parsing.

    Parameters
    ----------
    todo_keywords : list[str], default ["TODO", "DONE"]
        TODO keywords recognized in headlines. A ``|`` entry separates
        "todo" keywords from "done" keywords; without one, only the last
        keyword is a done keyword. ``#+TODO:`` lines in the buffer add to
        this set for that buffer only.
    max_nesting_depth : int, default 128
        Deepest allowed nesting of greater elements, and separately of
        inline objects, before parsing aborts with ``NestingDepthError``.
    granularity : {"headline", "element", "object"}, default "object"
        How far down the tree is built. ``"headline"`` keeps section bodies
        as raw tokens, ``"element"`` stops before inline objects.

    Examples
    --------
    Basic usage:
        >>> options = OrgParserOptions()
        >>> parser = OrgParser(options)

    Custom TODO keywords:
        >>> options = OrgParserOptions(
        ...     todo_keywords=["TODO", "WAITING", "|", "DONE", "CANCELLED"]
        ... )

    """

    todo_keywords: list[str] = field(
        default_factory=lambda: list(DEFAULT_ORG_TODO_KEYWORDS),
        metadata={"help": "List of TODO keywords to recognize", "importance": "core"},
    )
    max_nesting_depth: int = field(
        default=DEFAULT_MAX_NESTING_DEPTH,
        metadata={"help": "Maximum nesting depth before parsing is aborted", "importance": "advanced"},
    )
    granularity: Granularity = field(
        default=DEFAULT_GRANULARITY,
        metadata={"help": "Parse down to headlines, elements or objects", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If the depth limit is not positive, the granularity is unknown,
            or a TODO keyword contains whitespace.

        """
        super().__post_init__()
        if self.max_nesting_depth <= 0:
            raise ValueError(f"max_nesting_depth must be positive, got {self.max_nesting_depth}")
        if self.granularity not in _GRANULARITIES:
            raise ValueError(f"granularity must be one of {_GRANULARITIES}, got {self.granularity!r}")
        for keyword in self.todo_keywords:
            if not keyword or any(ch.isspace() for ch in keyword):
                raise ValueError(f"TODO keywords must be non-empty and contain no whitespace, got {keyword!r}")


@dataclass(frozen=True)
class OrgSerializerOptions(BaseSerializerOptions):
    """Configuration options for canonical CST-to-Org serialization.

    Parameters
    ----------
    tags_column : int, default 77
        Column at which right-aligned headline tags end. Only headlines
        whose tags were aligned in the source are aligned on output.
    validate : bool, default True
        Check the tree invariants before rendering and raise
        ``InvariantViolationError`` on the first broken one.

    """

    tags_column: int = field(
        default=DEFAULT_TAGS_COLUMN,
        metadata={"help": "Column where aligned headline tags end", "importance": "core"},
    )
    validate: bool = field(
        default=True,
        metadata={"help": "Validate tree invariants before serializing", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If ``tags_column`` is not positive.

        """
        super().__post_init__()
        if self.tags_column <= 0:
            raise ValueError(f"tags_column must be positive, got {self.tags_column}")


def options_help(options_class: type) -> dict[str, Any]:
    """Return the ``help`` metadata of every field of an options class."""
    return {f.name: f.metadata.get("help", "") for f in fields(options_class)}
