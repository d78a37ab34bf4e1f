"""Validation rules for every mutable field of users, jobs and applications.

Each ``validate_*`` function is pure: it returns the normalized value or raises
``ParameterFormatError`` with an error code telling a wrong shape
(``FORMAT_ERROR_CODE``) from a wrong size (``SIZE_ERROR_CODE``) or an out of
range number (``MINIMUM_VALUE_ERROR_CODE`` / ``MAXIMUM_VALUE_ERROR_CODE``).
"""

import re
from decimal import Decimal
from typing import Any

from jobboard.exceptions import (
    FORMAT_ERROR_CODE,
    MAXIMUM_VALUE_ERROR_CODE,
    MINIMUM_VALUE_ERROR_CODE,
    SIZE_ERROR_CODE,
    ParameterFormatError,
)
from jobboard.models.user import Role

MINIMUM_TAKE = 1
MAXIMUM_TAKE = 1000
DEFAULT_TAKE = 10

# Job and application ids are 32-bit signed integers
MINIMUM_ID = 1
MAXIMUM_ID = 2**31 - 1

JOB_TITLE_MIN_SIZE = 1
JOB_TITLE_MAX_SIZE = 80
JOB_DESCRIPTION_MIN_SIZE = 1
JOB_DESCRIPTION_MAX_SIZE = 2000
JOB_LOCATION_MIN_SIZE = 1
JOB_LOCATION_MAX_SIZE = 80
COVER_LETTER_MIN_SIZE = 1
COVER_LETTER_MAX_SIZE = 1000

NAME_PATTERN = re.compile(r"^[a-zA-Z0-9'.\s\-]+$")
EMAIL_PATTERN = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,4}$", re.ASCII)
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9._\-]+$")
URL_PATTERN = re.compile(
    r"^(https?|ftp|file)://[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]$"
)
DECIMAL_PATTERN = re.compile(r"^\d{1,6}(\.\d{0,3})?$", re.ASCII)
# Printable ASCII plus whitespace
TEXT_PATTERN = re.compile(r"^[\s\x21-\x7e]*$")
INTEGER_PATTERN = re.compile(r"^-?\d+$", re.ASCII)


def _require_string(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ParameterFormatError(f"Parameter not correct: {field} {value!r}", FORMAT_ERROR_CODE)
    return value


def _match(field: str, value: Any, pattern: re.Pattern) -> str:
    value = _require_string(field, value)
    if not pattern.fullmatch(value):
        raise ParameterFormatError(f"Parameter not correct: {field} {value}", FORMAT_ERROR_CODE)
    return value


def _bounded_text(field: str, value: Any, min_size: int, max_size: int) -> str:
    value = _require_string(field, value)
    if not min_size <= len(value) <= max_size:
        raise ParameterFormatError(
            f"Parameter not correct: {field} size {len(value)} not in [{min_size}, {max_size}]",
            SIZE_ERROR_CODE,
        )
    if not TEXT_PATTERN.fullmatch(value):
        raise ParameterFormatError(
            f"Parameter not correct: {field} contains non printable characters",
            FORMAT_ERROR_CODE,
        )
    return value


def validate_name(value: Any) -> str:
    return _match("name", value, NAME_PATTERN)


def validate_email(value: Any) -> str:
    return _match("email", value, EMAIL_PATTERN)


def validate_username(value: Any) -> str:
    return _match("username", value, USERNAME_PATTERN)


def validate_image_path(value: Any) -> str:
    return _match("imagePath", value, URL_PATTERN)


def validate_salary(value: Any) -> Decimal:
    """Up to 6 integer digits and an optional point with up to 3 fractional digits."""
    return Decimal(_match("salary", value, DECIMAL_PATTERN))


def validate_job_title(value: Any) -> str:
    return _bounded_text("title", value, JOB_TITLE_MIN_SIZE, JOB_TITLE_MAX_SIZE)


def validate_job_description(value: Any) -> str:
    return _bounded_text(
        "description", value, JOB_DESCRIPTION_MIN_SIZE, JOB_DESCRIPTION_MAX_SIZE
    )


def validate_job_location(value: Any) -> str:
    return _bounded_text("location", value, JOB_LOCATION_MIN_SIZE, JOB_LOCATION_MAX_SIZE)


def validate_cover_letter(value: Any) -> str:
    return _bounded_text(
        "coverLetter", value, COVER_LETTER_MIN_SIZE, COVER_LETTER_MAX_SIZE
    )


def validate_published(value: Any) -> bool:
    """Accept a boolean or the strings ``"true"`` / ``"false"``."""
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    raise ParameterFormatError(f"Parameter not correct: published {value!r}", FORMAT_ERROR_CODE)


def validate_role(value: Any) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        raise ParameterFormatError(f"Parameter not correct: role {value!r}", FORMAT_ERROR_CODE)


def validate_integer(field: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ParameterFormatError(f"Parameter not correct: {field} {value!r}", FORMAT_ERROR_CODE)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    raise ParameterFormatError(f"Parameter not correct: {field} {value!r}", FORMAT_ERROR_CODE)


def validate_id(field: str, value: Any) -> int:
    """Integer id of a job or application, within [1, 2**31 - 1]."""
    number = validate_integer(field, value)
    if number < MINIMUM_ID:
        raise ParameterFormatError(f"Parameter not in range: {field} {number}", MINIMUM_VALUE_ERROR_CODE)
    if number > MAXIMUM_ID:
        raise ParameterFormatError(f"Parameter not in range: {field} {number}", MAXIMUM_VALUE_ERROR_CODE)
    return number


def validate_take(value: Any = None) -> int:
    """Page size: an integer in [1, 1000], 10 when absent."""
    if value is None:
        return DEFAULT_TAKE
    take = validate_integer("take", value)
    if take < MINIMUM_TAKE:
        raise ParameterFormatError(f"Parameter not in range: take {take}", MINIMUM_VALUE_ERROR_CODE)
    if take > MAXIMUM_TAKE:
        raise ParameterFormatError(f"Parameter not in range: take {take}", MAXIMUM_VALUE_ERROR_CODE)
    return take


def validate_cursor(value: Any = None) -> int | None:
    """Integer cursor for job and application listings."""
    if value is None:
        return None
    return validate_id("cursor", value)
