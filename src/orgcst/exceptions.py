#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the orgcst library.

Org syntax is total: every well-formed Unicode text has a structural
interpretation, so there is no exception for "bad Org". The classes below
cover the three failures that can still happen at the API boundary: input
that is not valid text, nesting that exceeds the configured resource limit,
and node graphs handed to the serializer that break the tree invariants.

Exception Hierarchy
-------------------
- OrgCstError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser or serializer)
    - InputValidationError (non-text input or invalid Unicode)

  - ParsingError (parse aborted)
    - NestingDepthError (nesting deeper than the configured limit)

  - RenderingError (serialization failures)
    - InvariantViolationError (overlapping spans, gaps, malformed tree)

"""

from typing import Any


class OrgCstError(Exception):
    """Base exception class for all orgcst-specific errors.

    Catching this will catch all library-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(OrgCstError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    Attributes
    ----------
    parameter_name : str or None
        The name of the problematic parameter
    parameter_value : any
        The value that caused the error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    component_name : str
        Name of the parser or serializer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class InputValidationError(ValidationError):
    """Exception raised when the input buffer is not valid Unicode text.

    Raised before any scanning happens, for bytes that do not decode as
    UTF-8, strings carrying lone surrogates, and objects that are neither.

    Parameters
    ----------
    message : str
        Description of the problem
    position : int, optional
        Offset of the first offending byte or code point, when known
    original_error : Exception, optional
        The decoding error, if any

    """

    def __init__(self, message: str, position: int | None = None, original_error: Exception | None = None):
        """Initialize the input validation error."""
        super().__init__(message, parameter_name="text", parameter_value=position, original_error=original_error)
        self.position = position


class ParsingError(OrgCstError):
    """Exception raised when parsing has to be aborted.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    Attributes
    ----------
    parsing_stage : str or None
        Where in the parsing process the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class NestingDepthError(ParsingError):
    """Exception raised when constructs nest deeper than the configured limit.

    Parameters
    ----------
    depth : int or None
        Depth that was reached, or None when the interpreter stack ran out
        before the configured limit did
    limit : int
        The configured ``max_nesting_depth``
    parsing_stage : str
        ``"scanner"`` for greater elements, ``"objects"`` for inline markup,
        ``"elements"`` when building the tree ran out of stack
    offset : int, optional
        Buffer offset where the limit was exceeded
    original_error : Exception, optional
        The ``RecursionError`` behind a stack exhaustion

    """

    def __init__(
        self,
        depth: int | None,
        limit: int,
        parsing_stage: str,
        offset: int | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the nesting depth error."""
        where = f" at offset {offset}" if offset is not None else ""
        if depth is None:
            message = f"Nesting exhausted the interpreter stack below the limit of {limit}{where}"
        else:
            message = f"Nesting depth {depth} exceeds the limit of {limit}{where}"
        super().__init__(message, parsing_stage=parsing_stage, original_error=original_error)
        self.depth = depth
        self.limit = limit
        self.offset = offset


class RenderingError(OrgCstError):
    """Exception raised when serialization fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    Attributes
    ----------
    rendering_stage : str or None
        Where in the rendering process the error occurred

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class InvariantViolationError(RenderingError):
    """Exception raised when a node graph breaks the tree invariants.

    The parser never produces such a graph; this signals a programming
    error in code that assembled or altered nodes by hand.

    Parameters
    ----------
    errors : list of str
        Every violation found by the validation pass

    """

    def __init__(self, errors: list[str]):
        """Initialize the invariant violation error."""
        summary = errors[0] if len(errors) == 1 else f"{len(errors)} violations, first: {errors[0]}"
        super().__init__(f"Node graph violates tree invariants: {summary}", rendering_stage="validation")
        self.errors = list(errors)
