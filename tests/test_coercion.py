"""Tests for cell value coercions."""

import math

import pytest

from allocprep.normalization.coercion import (
    expand_phase_range,
    parse_json_field,
    parse_list,
    parse_number,
    parse_phases,
    parse_scalar,
    parse_text,
)
from allocprep.schemas import InvalidJSON, is_invalid_json


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("3", 3), (" 2.5 ", 2.5), (4.0, 4), (7, 7), ("1e2", 100)],
    )
    def test_parses_finite_numbers(self, value: object, expected: float) -> None:
        """Test that finite numbers parse and integral values collapse to int."""
        result = parse_number(value)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "inf", float("nan"), [1]])
    def test_rejects_blank_and_non_finite(self, value: object) -> None:
        """Test that unusable input gives None instead of raising."""
        assert parse_number(value) is None


class TestParseText:
    """Tests for text coercions."""

    def test_trims_and_stringifies(self) -> None:
        """Test stringification and trimming."""
        assert parse_text("  C1 ") == "C1"
        assert parse_text(12) == "12"
        assert parse_text(None) == ""
        assert parse_text(math.nan) == ""

    def test_scalar_keeps_numbers(self) -> None:
        """Test that QualificationLevel-style scalars keep numeric values."""
        assert parse_scalar(3) == 3
        assert parse_scalar(" senior ") == "senior"
        assert parse_scalar("") is None


class TestParseList:
    """Tests for parse_list."""

    def test_native_list(self) -> None:
        """Test native lists are stringified, trimmed and cleaned."""
        assert parse_list([" a", 2, "", None]) == ["a", "2"]

    def test_json_array(self) -> None:
        """Test bracketed JSON arrays are parsed."""
        assert parse_list('["T1", " T2 ", ""]') == ["T1", "T2"]

    @pytest.mark.parametrize("text", ["a,b;c|d", " a , b ;c| d ", "a,,b;;c|d|"])
    def test_delimiters(self, text: str) -> None:
        """Test comma, semicolon and pipe splitting."""
        assert parse_list(text) == ["a", "b", "c", "d"]

    def test_malformed_json_falls_back_to_split(self) -> None:
        """Test that a broken array is split on delimiters instead."""
        assert parse_list("[T1, T2]") == ["[T1", "T2]"]

    def test_blank(self) -> None:
        """Test blank input yields an empty list."""
        assert parse_list(None) == []
        assert parse_list("") == []


class TestPhases:
    """Tests for phase range expansion and phase list parsing."""

    def test_expand_range(self) -> None:
        """Test inclusive range expansion."""
        assert expand_phase_range("1-3") == [1, 2, 3]
        assert expand_phase_range("5-5") == [5]
        assert expand_phase_range(" 2 - 4 ") == [2, 3, 4]

    def test_reversed_range_is_invalid(self) -> None:
        """Test that end < start is rejected, not reversed."""
        assert expand_phase_range("5-2") == []

    def test_non_range_text(self) -> None:
        """Test that other text is not treated as a range."""
        assert expand_phase_range("1,2") == []
        assert expand_phase_range("a-b") == []

    def test_native_list_drops_non_finite(self) -> None:
        """Test native lists keep only finite numbers."""
        assert parse_phases([1, "2", "x", float("inf")]) == [1, 2]

    def test_json_array_before_range(self) -> None:
        """Test JSON arrays take precedence."""
        assert parse_phases("[1, 3, 5]") == [1, 3, 5]

    def test_range_before_split(self) -> None:
        """Test that '1-3' is expanded rather than split."""
        assert parse_phases("1-3") == [1, 2, 3]

    def test_delimiter_split(self) -> None:
        """Test fallback split with number parsing."""
        assert parse_phases("1; 2 |x, 4") == [1, 2, 4]

    def test_reversed_range_yields_nothing(self) -> None:
        """Test that an invalid range does not leak through the split."""
        assert parse_phases("5-2") == []

    def test_single_number(self) -> None:
        """Test a scalar phase from a spreadsheet cell."""
        assert parse_phases(3) == [3]
        assert parse_phases(None) == []


class TestParseJsonField:
    """Tests for parse_json_field."""

    def test_blank_is_absent(self) -> None:
        """Test blank values are None, not the failure marker."""
        assert parse_json_field(None) is None
        assert parse_json_field("  ") is None

    def test_structured_passthrough(self) -> None:
        """Test already structured values are returned unchanged."""
        value = {"a": 1}
        assert parse_json_field(value) is value

    def test_json_text(self) -> None:
        """Test JSON text is decoded."""
        assert parse_json_field('{"a": [1, 2]}') == {"a": [1, 2]}

    def test_explicit_null_is_not_a_failure(self) -> None:
        """Test that the JSON literal null decodes to None."""
        assert parse_json_field("null") is None

    def test_invalid_text_is_marked(self) -> None:
        """Test unparsable text becomes the InvalidJSON marker."""
        result = parse_json_field(" {broken ")
        assert is_invalid_json(result)
        assert result == InvalidJSON(raw="{broken")
        assert not result
        assert result is not None

    def test_marker_passes_through(self) -> None:
        """Test re-parsing a marker keeps it."""
        marker = InvalidJSON(raw="x")
        assert parse_json_field(marker) is marker
