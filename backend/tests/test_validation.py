"""Tests for the field validation rules."""

from decimal import Decimal

import pytest

from jobboard.exceptions import (
    FORMAT_ERROR_CODE,
    MAXIMUM_VALUE_ERROR_CODE,
    MINIMUM_VALUE_ERROR_CODE,
    SIZE_ERROR_CODE,
    ParameterFormatError,
)
from jobboard.models import Role
from jobboard.validation import (
    DEFAULT_TAKE,
    MAXIMUM_ID,
    validate_cover_letter,
    validate_cursor,
    validate_email,
    validate_id,
    validate_image_path,
    validate_integer,
    validate_job_description,
    validate_job_location,
    validate_job_title,
    validate_name,
    validate_published,
    validate_role,
    validate_salary,
    validate_take,
    validate_username,
)


def error_code(func, *args):
    with pytest.raises(ParameterFormatError) as exc_info:
        func(*args)
    return exc_info.value.error_code


class TestTextSizes:
    """Size bounds of free text fields."""

    def test_title_at_maximum(self):
        assert validate_job_title("t" * 80) == "t" * 80

    def test_title_above_maximum(self):
        assert error_code(validate_job_title, "t" * 81) == SIZE_ERROR_CODE

    def test_empty_title(self):
        assert error_code(validate_job_title, "") == SIZE_ERROR_CODE

    def test_description_bounds(self):
        assert validate_job_description("d" * 2000)
        assert error_code(validate_job_description, "d" * 2001) == SIZE_ERROR_CODE

    def test_location_bounds(self):
        assert validate_job_location("Paris")
        assert error_code(validate_job_location, "l" * 81) == SIZE_ERROR_CODE

    def test_cover_letter_bounds(self):
        assert validate_cover_letter("c" * 1000)
        assert error_code(validate_cover_letter, "c" * 1001) == SIZE_ERROR_CODE
        assert error_code(validate_cover_letter, "") == SIZE_ERROR_CODE

    def test_multiline_text_allowed(self):
        assert validate_job_description("Line one\nLine two\ttabbed")

    def test_non_printable_text_rejected(self):
        assert error_code(validate_job_title, "Bell\x07") == FORMAT_ERROR_CODE

    def test_non_string_rejected(self):
        assert error_code(validate_job_title, 42) == FORMAT_ERROR_CODE


class TestSalary:
    def test_accepts_three_fraction_digits(self):
        assert validate_salary("1234.123") == Decimal("1234.123")

    def test_rejects_four_fraction_digits(self):
        assert error_code(validate_salary, "1234.1234") == FORMAT_ERROR_CODE

    def test_rejects_seven_integer_digits(self):
        assert error_code(validate_salary, "1234567") == FORMAT_ERROR_CODE

    def test_accepts_integer(self):
        assert validate_salary("999999") == Decimal("999999")

    def test_rejects_negative_and_garbage(self):
        assert error_code(validate_salary, "-10") == FORMAT_ERROR_CODE
        assert error_code(validate_salary, "ten") == FORMAT_ERROR_CODE
        assert error_code(validate_salary, "") == FORMAT_ERROR_CODE


class TestTake:
    """Page size bounds and their error codes."""

    def test_default(self):
        assert validate_take() == DEFAULT_TAKE
        assert validate_take(None) == 10

    def test_bounds(self):
        assert validate_take(1) == 1
        assert validate_take("1000") == 1000

    def test_above_maximum(self):
        assert error_code(validate_take, 1001) == MAXIMUM_VALUE_ERROR_CODE

    def test_below_minimum(self):
        assert error_code(validate_take, 0) == MINIMUM_VALUE_ERROR_CODE
        assert error_code(validate_take, "-5") == MINIMUM_VALUE_ERROR_CODE

    def test_not_a_number(self):
        assert error_code(validate_take, "ten") == FORMAT_ERROR_CODE
        assert error_code(validate_take, True) == FORMAT_ERROR_CODE


class TestIdentityFields:
    def test_valid_values(self):
        assert validate_name("Mary O'Neil-Smith Jr.") == "Mary O'Neil-Smith Jr."
        assert validate_email("mary.smith@mail.example.com") == "mary.smith@mail.example.com"
        assert validate_username("mary_smith.42") == "mary_smith.42"
        assert validate_image_path("https://cdn.example.com/a/b.png")

    def test_invalid_values(self):
        assert error_code(validate_name, "Robert'); DROP TABLE users;--") == FORMAT_ERROR_CODE
        assert error_code(validate_email, "not-an-email") == FORMAT_ERROR_CODE
        assert error_code(validate_email, "a@b.c") == FORMAT_ERROR_CODE
        assert error_code(validate_username, "white space") == FORMAT_ERROR_CODE
        assert error_code(validate_image_path, "javascript:alert(1)") == FORMAT_ERROR_CODE


class TestScalars:
    def test_published(self):
        assert validate_published(True) is True
        assert validate_published("false") is False
        assert error_code(validate_published, "yes") == FORMAT_ERROR_CODE

    def test_role(self):
        assert validate_role("COMPANY") == Role.COMPANY
        assert validate_role(Role.ADMIN) == Role.ADMIN
        assert error_code(validate_role, "OWNER") == FORMAT_ERROR_CODE

    def test_integer(self):
        assert validate_integer("jobId", "12") == 12
        assert validate_integer("jobId", 7) == 7
        assert error_code(validate_integer, "jobId", "12a") == FORMAT_ERROR_CODE
        assert error_code(validate_integer, "jobId", 1.5) == FORMAT_ERROR_CODE

    def test_cursor(self):
        assert validate_cursor() is None
        assert validate_cursor("25") == 25
        assert error_code(validate_cursor, "abc") == FORMAT_ERROR_CODE


class TestIds:
    """Job and application ids and cursors stay within 32-bit range."""

    def test_bounds(self):
        assert validate_id("jobId", 1) == 1
        assert validate_id("jobId", str(MAXIMUM_ID)) == 2**31 - 1

    def test_above_maximum(self):
        assert error_code(validate_id, "jobId", MAXIMUM_ID + 1) == MAXIMUM_VALUE_ERROR_CODE
        assert error_code(validate_cursor, "99999999999999999999") == MAXIMUM_VALUE_ERROR_CODE

    def test_below_minimum(self):
        assert error_code(validate_id, "jobId", 0) == MINIMUM_VALUE_ERROR_CODE
        assert error_code(validate_cursor, "-3") == MINIMUM_VALUE_ERROR_CODE
