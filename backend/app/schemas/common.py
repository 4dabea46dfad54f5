# backend/app/schemas/common.py
from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

# "YYYY-MM-DD", optionally followed by a time part which is dropped
_ISO_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")


def parse_iso_date(value: Any) -> Any:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise ValueError("Must be a date string (YYYY-MM-DD).")
    m = _ISO_DATE_RE.match(value.strip())
    if not m:
        raise ValueError(f"Invalid date: {value!r}. Use YYYY-MM-DD.")
    try:
        return dt.date.fromisoformat(m.group(1))
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}. Use YYYY-MM-DD.") from None


IsoDate = Annotated[dt.date, BeforeValidator(parse_iso_date)]

# Nightly rate as stored (NUMERIC(10,2)); NaN/Infinity are rejected by pydantic.
PriceValue = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class CamelModel(BaseModel):
    """Request/response bodies use camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelRequest(CamelModel):
    # Unknown fields are an error, not silently ignored.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class MessageResponse(BaseModel):
    message: str
