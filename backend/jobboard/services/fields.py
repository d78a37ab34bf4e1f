"""Tagged option for partially updated fields.

An update distinguishes three intents per field: leave it alone (``UNCHANGED``),
null it out (``CLEAR``) or assign a value (``SetTo(value)``).
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from pydantic import BaseModel

from jobboard.exceptions import ParameterFormatError

T = TypeVar("T")


class _Unchanged:
    def __repr__(self) -> str:
        return "UNCHANGED"


class _Clear:
    def __repr__(self) -> str:
        return "CLEAR"


UNCHANGED = _Unchanged()
CLEAR = _Clear()


@dataclass(frozen=True)
class SetTo(Generic[T]):
    value: T


FieldUpdate = Union[_Unchanged, _Clear, SetTo]


def from_request(body: BaseModel, field: str) -> FieldUpdate:
    """Build the option for ``field`` from a parsed request body.

    Absent fields are unchanged, explicit nulls clear the column.
    """
    if field not in body.model_fields_set:
        return UNCHANGED
    value = getattr(body, field)
    if value is None:
        return CLEAR
    return SetTo(value)


def resolve(
    update: FieldUpdate,
    field: str,
    validator: Callable[[Any], Any],
    nullable: bool = False,
) -> tuple[bool, Any]:
    """Validate an option and return ``(changed, new_value)``."""
    if update is UNCHANGED:
        return False, None
    if update is CLEAR:
        if not nullable:
            raise ParameterFormatError(f"Parameter not correct: {field} cannot be null")
        return True, None
    return True, validator(update.value)
