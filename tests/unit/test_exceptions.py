#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_exceptions.py
"""Unit tests for the exception hierarchy."""

import pytest

from orgcst.exceptions import (
    InputValidationError,
    InvalidOptionsError,
    InvariantViolationError,
    NestingDepthError,
    OrgCstError,
    ParsingError,
    RenderingError,
    ValidationError,
)


@pytest.mark.unit
class TestHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "cls,parent",
        [
            (ValidationError, OrgCstError),
            (InvalidOptionsError, ValidationError),
            (InputValidationError, ValidationError),
            (ParsingError, OrgCstError),
            (NestingDepthError, ParsingError),
            (RenderingError, OrgCstError),
            (InvariantViolationError, RenderingError),
        ],
    )
    def test_subclass(self, cls: type, parent: type) -> None:
        """Test that each error derives from its family."""
        assert issubclass(cls, parent)

    def test_base_keeps_original_error(self) -> None:
        """Test the wrapped original exception."""
        cause = KeyError("x")
        error = OrgCstError("failed", original_error=cause)
        assert error.message == "failed"
        assert error.original_error is cause


@pytest.mark.unit
class TestMessages:
    """Tests for generated messages and attributes."""

    def test_nesting_depth_error(self) -> None:
        """Test the nesting depth message."""
        error = NestingDepthError(6, 5, parsing_stage="scanner", offset=42)
        assert str(error) == "Nesting depth 6 exceeds the limit of 5 at offset 42"
        assert (error.depth, error.limit, error.offset) == (6, 5, 42)
        assert error.parsing_stage == "scanner"

    def test_nesting_depth_error_without_offset(self) -> None:
        """Test the message when no offset is known."""
        assert str(NestingDepthError(3, 2, parsing_stage="objects")) == "Nesting depth 3 exceeds the limit of 2"

    def test_nesting_depth_error_stack_exhausted(self) -> None:
        """Test the message when the interpreter stack ran out first."""
        cause = RecursionError("maximum recursion depth exceeded")
        error = NestingDepthError(None, 5000, parsing_stage="elements", original_error=cause)
        assert str(error) == "Nesting exhausted the interpreter stack below the limit of 5000"
        assert error.depth is None
        assert error.original_error is cause

    def test_invalid_options_error(self) -> None:
        """Test the generated options type message."""
        error = InvalidOptionsError("org", expected_type=int, received_type=str)
        assert str(error) == "org expected options of type 'int' but received 'str'."
        assert error.parameter_name == "options"

    def test_input_validation_error_position(self) -> None:
        """Test the offending position attribute."""
        error = InputValidationError("bad byte", position=7)
        assert error.position == 7
        assert error.parameter_name == "text"

    def test_invariant_violation_single(self) -> None:
        """Test the message for a single violation."""
        error = InvariantViolationError(["gap at 3"])
        assert str(error) == "Node graph violates tree invariants: gap at 3"
        assert error.rendering_stage == "validation"

    def test_invariant_violation_many(self) -> None:
        """Test the summary for several violations."""
        error = InvariantViolationError(["first", "second"])
        assert "2 violations, first: first" in str(error)
        assert error.errors == ["first", "second"]
