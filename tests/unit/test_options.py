#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_options.py
"""Unit tests for parser and serializer options."""

from dataclasses import FrozenInstanceError

import pytest

from orgcst.exceptions import InvalidOptionsError
from orgcst.options.org import OrgParserOptions, OrgSerializerOptions, options_help
from orgcst.parsers.org import OrgParser


@pytest.mark.unit
class TestOrgParserOptions:
    """Tests for OrgParserOptions."""

    def test_defaults(self) -> None:
        """Test default option values."""
        options = OrgParserOptions()
        assert options.todo_keywords == ["TODO", "DONE"]
        assert options.max_nesting_depth == 128
        assert options.granularity == "object"

    def test_default_keywords_not_shared(self) -> None:
        """Test that each instance gets its own keyword list."""
        first, second = OrgParserOptions(), OrgParserOptions()
        assert first.todo_keywords is not second.todo_keywords

    def test_frozen(self) -> None:
        """Test that options cannot be mutated."""
        options = OrgParserOptions()
        with pytest.raises(FrozenInstanceError):
            options.granularity = "element"  # type: ignore[misc]

    def test_create_updated(self) -> None:
        """Test cloning with changed fields."""
        options = OrgParserOptions()
        updated = options.create_updated(max_nesting_depth=4)
        assert updated.max_nesting_depth == 4
        assert options.max_nesting_depth == 128
        assert isinstance(updated, OrgParserOptions)

    def test_create_updated_validates(self) -> None:
        """Test that cloning runs validation again."""
        with pytest.raises(ValueError):
            OrgParserOptions().create_updated(granularity="paragraph")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_nesting_depth": 0},
            {"max_nesting_depth": -3},
            {"granularity": "word"},
            {"todo_keywords": ["IN PROGRESS"]},
            {"todo_keywords": [""]},
        ],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        """Test rejected option values."""
        with pytest.raises(ValueError):
            OrgParserOptions(**kwargs)

    def test_parser_rejects_serializer_options(self) -> None:
        """Test that the parser checks its options type."""
        with pytest.raises(InvalidOptionsError) as exc_info:
            OrgParser(OrgSerializerOptions())  # type: ignore[arg-type]
        assert exc_info.value.component_name == "org"
        assert "OrgParserOptions" in str(exc_info.value)


@pytest.mark.unit
class TestOrgSerializerOptions:
    """Tests for OrgSerializerOptions."""

    def test_defaults(self) -> None:
        """Test default option values."""
        options = OrgSerializerOptions()
        assert options.tags_column == 77
        assert options.validate is True

    def test_invalid_tags_column(self) -> None:
        """Test that the tags column must be positive."""
        with pytest.raises(ValueError):
            OrgSerializerOptions(tags_column=0)

    def test_options_help(self) -> None:
        """Test that every field documents itself."""
        helps = options_help(OrgSerializerOptions)
        assert set(helps) == {"tags_column", "validate"}
        assert all(helps.values())
