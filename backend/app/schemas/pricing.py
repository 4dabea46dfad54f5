# backend/app/schemas/pricing.py
from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional

from pydantic import Field, model_validator

from app.schemas.common import CamelModel, CamelRequest, IsoDate, PriceValue


class PriceUpdate(CamelRequest):
    price: PriceValue


class DateRangePriceUpdate(CamelRequest):
    dates: List[IsoDate] = Field(..., min_length=1)
    price: PriceValue


class BulkPriceUpdate(CamelRequest):
    standard_price: Optional[PriceValue] = None
    date_prices: Optional[Dict[IsoDate, PriceValue]] = None

    @model_validator(mode="after")
    def _require_something(self) -> "BulkPriceUpdate":
        if self.standard_price is None and not self.date_prices:
            raise ValueError("No price data provided")
        return self


class StayTotalRequest(CamelRequest):
    start_date: IsoDate
    end_date: IsoDate


class DatePriceOut(CamelModel):
    date: dt.date
    price: float


class PricesResponse(CamelModel):
    standard_price: float
    weekend_price: float
    date_prices: List[DatePriceOut]


class PriceUpdated(CamelModel):
    message: str
    success: bool = True


class DatePricesResponse(CamelModel):
    message: str
    date_prices: List[DatePriceOut]


class DeletedCountResponse(CamelModel):
    message: str
    deleted_count: int


class StayTotalResponse(CamelModel):
    total: float
