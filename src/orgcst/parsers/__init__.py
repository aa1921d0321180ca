#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/__init__.py
"""Org parsing passes.

- ``classifier``: per-line classification given an explicit state
- ``scanner``: greater-element frame tree
- ``elements``: typed element nodes and affiliated keywords
- ``objects``: inline objects inside text-bearing ranges
- ``tables``: cell splitting for table rows
- ``org``: ``OrgParser`` running the passes in order
"""

from orgcst.parsers.base import BaseParser
from orgcst.parsers.org import OrgParser

__all__ = ["BaseParser", "OrgParser"]
