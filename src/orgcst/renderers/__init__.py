#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/renderers/__init__.py
"""CST renderers.

Examples
--------
Canonicalize a document:

    >>> from orgcst.parsers import OrgParser
    >>> from orgcst.renderers import OrgSerializer
    >>> doc = OrgParser().parse("#+title: Notes\\n")
    >>> OrgSerializer().render_to_string(doc)
    '#+TITLE: Notes\\n'

"""

from orgcst.renderers.base import BaseRenderer
from orgcst.renderers.org import OrgSerializer

__all__ = ["BaseRenderer", "OrgSerializer"]
