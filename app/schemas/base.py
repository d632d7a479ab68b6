# app/schemas/base.py

import re
from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, StrictInt
from pydantic.alias_generators import to_camel

ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _not_bool(value: Any) -> Any:
    # bool is an int subclass; lax int parsing would take true as 1
    if isinstance(value, bool):
        raise ValueError("Input should be a valid integer")
    return value


def _iso_date_string(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not ISO_DATE.match(value):
        raise ValueError("Date must be in YYYY-MM-DD format")
    return value


def _iso_datetime_string(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not ISO_DATETIME.match(value):
        raise ValueError("Must be an ISO-8601 datetime")
    return value


# Shared field types
FK = Annotated[int, BeforeValidator(_not_bool), Field(gt=0)]
Bit = Annotated[int, BeforeValidator(_not_bool), Field(ge=0, le=1)]
NonNegativeCount = Annotated[StrictInt, Field(ge=0)]
PositiveCount = Annotated[StrictInt, Field(gt=0)]
IsoDate = Annotated[date, BeforeValidator(_iso_date_string)]
IsoDateTime = Annotated[datetime, BeforeValidator(_iso_datetime_string)]
