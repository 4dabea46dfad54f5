# backend/app/schemas/notifications.py
from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import CamelRequest, IsoDate, PriceValue


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = value.strip()
    return v or None


class BookingEmailRequest(CamelRequest):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    telephone: Optional[str] = Field(default=None, max_length=40)
    message: Optional[str] = Field(default=None, max_length=5000)

    number_of_people: Optional[int] = Field(default=None, ge=1, le=50)
    number_of_pets: Optional[int] = Field(default=None, ge=0, le=20)

    start_date: IsoDate
    end_date: IsoDate
    total_price: Optional[PriceValue] = None

    @field_validator("telephone", "message")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)


class ContactRequest(CamelRequest):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    telephone: Optional[str] = Field(default=None, max_length=40)
    message: str = Field(min_length=1, max_length=5000)

    @field_validator("telephone")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)
