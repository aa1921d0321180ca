"""The exported API functions for parsing and canonicalizing Org text."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/orgcst/api.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Optional, Union

from orgcst.cst.nodes import Document
from orgcst.exceptions import OrgCstError, ParsingError, RenderingError
from orgcst.options.org import OrgParserOptions, OrgSerializerOptions
from orgcst.parsers.org import OrgParser
from orgcst.renderers.org import OrgSerializer

logger = logging.getLogger(__name__)


def _resolve_parser_options(options: Optional[OrgParserOptions], **kwargs: Any) -> Optional[OrgParserOptions]:
    if kwargs and options:
        return options.create_updated(**kwargs)
    if kwargs:
        return OrgParserOptions(**kwargs)
    return options


def parse(
    text: Union[str, bytes],
    options: Optional[OrgParserOptions] = None,
    **kwargs: Any,
) -> Document:
    """Parse Org text into a concrete syntax tree.

    Parameters
    ----------
    text : str or bytes
        Org text, or its UTF-8 encoding
    options : OrgParserOptions, optional
        Pre-configured parser options
    kwargs : Any
        Individual parser options that override settings in ``options``

    Returns
    -------
    Document
        CST root whose leaves concatenate back to ``text``

    Raises
    ------
    InputValidationError
        If the input is not valid Unicode text
    NestingDepthError
        If the document nests deeper than ``max_nesting_depth``
    ParsingError
        If parsing fails for any other reason

    Examples
    --------
    Parse a buffer and walk its headlines:
        >>> doc = parse("* A\\n** B\\n* C\\n")
        >>> [h.title for h in doc.headlines]
        ['A', 'C']

    Override a single option:
        >>> doc = parse("* NEXT Thing\\n", todo_keywords=["NEXT", "|", "DONE"])

    """
    parser = OrgParser(_resolve_parser_options(options, **kwargs))
    try:
        return parser.parse(text)
    except OrgCstError:
        raise
    except Exception as e:
        raise ParsingError(f"Org parsing failed: {e!r}", parsing_stage="parse", original_error=e) from e


def serialize(doc: Document, options: Optional[OrgSerializerOptions] = None, **kwargs: Any) -> str:
    """Render a CST as canonical Org text.

    Parameters
    ----------
    doc : Document
        CST root, usually produced by ``parse``
    options : OrgSerializerOptions, optional
        Pre-configured serializer options
    kwargs : Any
        Individual serializer options that override settings in ``options``

    Returns
    -------
    str
        Canonical Org text

    Raises
    ------
    InvariantViolationError
        If the tree breaks a structural invariant
    RenderingError
        If rendering fails for any other reason

    """
    if kwargs:
        options = options.create_updated(**kwargs) if options else OrgSerializerOptions(**kwargs)
    serializer = OrgSerializer(options)
    try:
        return serializer.render_to_string(doc)
    except OrgCstError:
        raise
    except Exception as e:
        raise RenderingError(f"Org rendering failed: {e!r}", rendering_stage="serialize", original_error=e) from e


def canonicalize(
    text: Union[str, bytes],
    parser_options: Optional[OrgParserOptions] = None,
    serializer_options: Optional[OrgSerializerOptions] = None,
) -> str:
    """Parse Org text and render it back in canonical form.

    Canonicalization is idempotent up to structure: parsing the result gives
    a tree structurally equal to parsing ``text``.

    Examples
    --------
        >>> canonicalize("*  TODO   Task\\n#+title:   Notes\\n")
        '* TODO Task\\n#+TITLE: Notes\\n'

    """
    return serialize(parse(text, parser_options), serializer_options)


def parse_documents(
    buffers: Iterable[Union[str, bytes]],
    options: Optional[OrgParserOptions] = None,
    max_workers: Optional[int] = None,
) -> list[Document]:
    """Parse independent buffers in parallel.

    Parses share no state, so each buffer goes to a worker thread as is.
    The first failure propagates once all submitted parses have settled.

    Parameters
    ----------
    buffers : iterable of str or bytes
        Independent Org buffers
    options : OrgParserOptions, optional
        Parser options shared by every parse
    max_workers : int, optional
        Thread pool size; the ``ThreadPoolExecutor`` default when omitted

    Returns
    -------
    list[Document]
        One CST root per buffer, in input order

    """
    items = list(buffers)
    if not items:
        return []
    logger.debug("Parsing %d buffers with max_workers=%s", len(items), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(parse, item, options) for item in items]
        return [future.result() for future in futures]
