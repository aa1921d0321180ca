#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/renderers/base.py
"""Base classes for CST renderers.

This module defines the abstract base class that renderers inherit from. A
renderer turns a CST ``Document`` back into text.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO

from orgcst.cst.nodes import Document
from orgcst.exceptions import InvalidOptionsError
from orgcst.options.base import BaseSerializerOptions


class BaseRenderer(ABC):
    """Abstract base class for CST renderers.

    Parameters
    ----------
    options : BaseSerializerOptions or None, default = None
        Format-specific rendering options

    Examples
    --------
    Creating a custom renderer:

        >>> class LeafRenderer(BaseRenderer):
        ...     def render_to_string(self, doc):
        ...         return leaf_text(doc)

    """

    def __init__(self, options: BaseSerializerOptions | None = None):
        """Initialize the renderer with optional configuration.

        Parameters
        ----------
        options : BaseSerializerOptions or None, default = None
            Format-specific rendering options. If None, default options will be used.

        """
        self.options = options

    @abstractmethod
    def render_to_string(self, doc: Document) -> str:
        """Render the CST to a string.

        Parameters
        ----------
        doc : Document
            CST root to render

        Returns
        -------
        str
            Rendered document

        Raises
        ------
        RenderingError
            If the tree cannot be rendered

        """
        raise NotImplementedError

    def render(self, doc: Document, output: IO[str]) -> None:
        """Render the CST into a text stream.

        Parameters
        ----------
        doc : Document
            CST root to render
        output : IO[str]
            Text stream that receives the rendered document

        """
        output.write(self.render_to_string(doc))

    def render_to_bytes(self, doc: Document) -> bytes:
        """Render the CST to UTF-8 bytes."""
        return self.render_to_string(doc).encode("utf-8")

    @staticmethod
    def _validate_options_type(
        options: BaseSerializerOptions | None, expected_type: type, renderer_name: str
    ) -> None:
        """Validate that options are of the correct type for this renderer.

        Parameters
        ----------
        options : BaseSerializerOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        renderer_name : str
            Name of the renderer (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=renderer_name,
                expected_type=expected_type,
                received_type=type(options),
            )
