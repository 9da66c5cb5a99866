"""Unit tests for pagination and payload validation helpers."""

from datetime import date

import pytest

from backend.utils.validators import get_text
from services.shared.pagination import build_page, build_reverse_page, parse_cursor
from services.shared.validation import FieldValidator, ValidationError


class TestPagination:
    """Test cursor helpers."""

    @pytest.mark.parametrize("raw", [None, "", "  ", "null", "undefined"])
    def test_blank_cursor(self, raw):
        assert parse_cursor(raw) is None

    def test_numeric_cursor(self):
        assert parse_cursor("42") == 42

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_invalid_cursor(self, raw):
        with pytest.raises(ValueError, match="Invalid cursor"):
            parse_cursor(raw)

    def test_build_page_with_extra_row(self):
        rows = [{"id": 5}, {"id": 4}, {"id": 3}]

        assert build_page(rows, 2) == ([{"id": 5}, {"id": 4}], 3)

    def test_build_page_exact_size(self):
        rows = [{"id": 5}, {"id": 4}]

        assert build_page(rows, 2) == (rows, None)

    def test_build_reverse_page(self):
        rows = [{"id": 5}, {"id": 4}, {"id": 3}]

        assert build_reverse_page(rows, 2) == ([{"id": 4}, {"id": 5}], 3)

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError):
            build_page([], 0)


class TestFieldValidator:
    """Test FieldValidator."""

    def test_collects_first_error_per_field(self):
        v = FieldValidator({"title": "", "hours": "many"})
        v.string("title", required=True)
        v.number("hours")
        v.add_error("title", "Second message")

        with pytest.raises(ValidationError) as exc_info:
            v.raise_if_errors()

        assert exc_info.value.field_errors == {"title": "Required", "hours": "Must be a number"}

    def test_bool_is_not_a_number(self):
        v = FieldValidator({"credits": True})

        assert v.number("credits") is None
        assert v.errors == {"credits": "Must be a number"}

    def test_fractional_value_for_integer_field(self):
        v = FieldValidator({"credits": 2.5})

        v.number("credits")

        assert v.errors["credits"] == "Must be a whole number"

    def test_string_list_strips_blanks(self):
        v = FieldValidator({"skills": [" SQL ", "", "Python"]})

        assert v.string_list("skills") == ["SQL", "Python"]

    def test_string_list_rejects_non_strings(self):
        v = FieldValidator({"skills": ["SQL", 3]})

        v.string_list("skills")

        assert "skills" in v.errors

    def test_int_list(self):
        v = FieldValidator({"course_ids": ["1", 2]})

        assert v.int_list("course_ids") == [1, 2]

    def test_dates(self):
        v = FieldValidator({"start": "2026-09-01T00:00:00Z", "end": "soon"})

        assert v.date("start") == date(2026, 9, 1)
        assert v.date("end") is None
        assert v.errors == {"end": "Must be an ISO date"}

    def test_no_errors_does_not_raise(self):
        v = FieldValidator(None)

        assert v.string("anything") is None
        v.raise_if_errors()


class TestGetText:
    """Test text field extraction from JSON bodies."""

    def test_strips_string(self):
        assert get_text({"role": " admin "}, "role") == "admin"

    def test_missing_uses_default(self):
        assert get_text({}, "role", default="STUDENT") == "STUDENT"
        assert get_text({"role": None}, "role") == ""

    @pytest.mark.parametrize("value", [123, ["ADMIN"], {"role": "ADMIN"}, True])
    def test_non_string_rejected(self, value):
        with pytest.raises(ValueError, match="role must be a string"):
            get_text({"role": value}, "role")
