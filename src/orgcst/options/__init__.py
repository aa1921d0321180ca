#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the orgcst parser and serializer.

Every option has a default; passing no options object yields the standard
Org grammar and canonical form.
"""

from __future__ import annotations

from orgcst.options.base import BaseParserOptions, BaseSerializerOptions, CloneFrozenMixin
from orgcst.options.org import OrgParserOptions, OrgSerializerOptions, options_help

__all__ = [
    "BaseParserOptions",
    "BaseSerializerOptions",
    "CloneFrozenMixin",
    "OrgParserOptions",
    "OrgSerializerOptions",
    "options_help",
]
