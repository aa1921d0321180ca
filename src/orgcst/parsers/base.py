#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/orgcst/parsers/base.py
"""Base class for document parsers.

The BaseParser fixes the interface every parser offers: it takes an options
object at construction and turns text or UTF-8 bytes into a CST
``Document``.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Union

from orgcst.cst.nodes import Document
from orgcst.exceptions import InvalidOptionsError
from orgcst.options.base import BaseParserOptions

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for parsers.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Format-specific parsing options

    Examples
    --------
    Creating a custom parser:

        >>> class MyCustomParser(BaseParser):
        ...     def parse(self, input_data):
        ...         return Document(Span(0, len(input_data)))

    """

    def __init__(self, options: BaseParserOptions | None = None):
        """Initialize the parser with optional configuration.

        Parameters
        ----------
        options : BaseParserOptions or None, default = None
            Format-specific parsing options. If None, default options will be used.

        """
        self.options: BaseParserOptions | None = options

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                component_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: Union[str, bytes]) -> Document:
        """Parse the input document into a CST.

        Parameters
        ----------
        input_data : str or bytes
            Document text, or its UTF-8 encoding

        Returns
        -------
        Document
            Root of the concrete syntax tree

        Raises
        ------
        InputValidationError
            If the input is not valid Unicode text
        NestingDepthError
            If the document nests deeper than the configured limit

        """
        raise NotImplementedError
