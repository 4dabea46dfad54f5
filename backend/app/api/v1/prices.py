# backend/app/api/v1/prices.py
"""
Every route takes an optional trailing `{tenant}` segment, so each handler is
registered twice. The literal routes (standard, weekend, date-range, cleanup,
clear-month, total) are declared before the catch-all `PUT /prices/{tenant}`.
"""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.tenant import get_authorized_tenant, get_public_tenant
from app.core.errors import InvalidInput
from app.core.tenants import TenantConfig
from app.db.session import get_db
from app.schemas.common import parse_iso_date
from app.schemas.pricing import (
    BulkPriceUpdate,
    DatePriceOut,
    DatePricesResponse,
    DateRangePriceUpdate,
    DeletedCountResponse,
    PriceUpdate,
    PriceUpdated,
    PricesResponse,
    StayTotalRequest,
    StayTotalResponse,
)
from app.services import pricing
from app.services.pricing import DatePriceEntry

router = APIRouter(prefix="/prices", tags=["prices"])


def _date_prices_out(entries: List[DatePriceEntry]) -> List[DatePriceOut]:
    return [DatePriceOut(date=e.date, price=float(e.price)) for e in entries]


@router.put("/standard", response_model=PriceUpdated)
@router.put("/standard/{tenant}", response_model=PriceUpdated)
async def update_standard_price(
    payload: PriceUpdate,
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> PriceUpdated:
    await pricing.set_standard_price(db, cfg.slug, payload.price)
    return PriceUpdated(message="Standard price updated")


@router.put("/weekend", response_model=PriceUpdated)
@router.put("/weekend/{tenant}", response_model=PriceUpdated)
async def update_weekend_price(
    payload: PriceUpdate,
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> PriceUpdated:
    await pricing.set_weekend_price(db, cfg.slug, payload.price)
    return PriceUpdated(message="Weekend price updated")


@router.post("/date-range", response_model=DatePricesResponse)
@router.post("/date-range/{tenant}", response_model=DatePricesResponse)
async def set_date_range_price(
    payload: DateRangePriceUpdate,
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> DatePricesResponse:
    entries = await pricing.upsert_date_range(db, cfg.slug, payload.dates, payload.price)
    return DatePricesResponse(message="Date prices updated", date_prices=_date_prices_out(entries))


@router.delete("/date-range/{day}", response_model=DatePricesResponse)
@router.delete("/date-range/{tenant}/{day}", response_model=DatePricesResponse)
async def delete_date_price(
    day: str,
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> DatePricesResponse:
    try:
        parsed = parse_iso_date(day)
    except ValueError as exc:
        raise InvalidInput(str(exc)) from None
    entries = await pricing.delete_date_override(db, cfg.slug, parsed)
    return DatePricesResponse(message="Date price deleted", date_prices=_date_prices_out(entries))


@router.delete("/cleanup", response_model=DeletedCountResponse)
@router.delete("/cleanup/{tenant}", response_model=DeletedCountResponse)
async def cleanup_past_prices(
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> DeletedCountResponse:
    deleted = await pricing.cleanup_past_overrides(db, cfg.slug)
    return DeletedCountResponse(message=f"Cleaned up {deleted} old prices", deleted_count=deleted)


@router.delete("/clear-month/{month_year}", response_model=DeletedCountResponse)
@router.delete("/clear-month/{tenant}/{month_year}", response_model=DeletedCountResponse)
async def clear_month_prices(
    month_year: str,
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> DeletedCountResponse:
    deleted = await pricing.clear_month(db, cfg.slug, month_year)
    return DeletedCountResponse(message=f"Cleared {deleted} prices for {month_year}", deleted_count=deleted)


@router.post("/total", response_model=StayTotalResponse)
@router.post("/total/{tenant}", response_model=StayTotalResponse)
async def stay_total(
    payload: StayTotalRequest,
    cfg: TenantConfig = Depends(get_public_tenant),
    db: AsyncSession = Depends(get_db),
) -> StayTotalResponse:
    total = await pricing.compute_stay_total(db, cfg.slug, payload.start_date, payload.end_date)
    return StayTotalResponse(total=total)


@router.get("", response_model=PricesResponse)
@router.get("/{tenant}", response_model=PricesResponse)
async def get_prices(
    cfg: TenantConfig = Depends(get_public_tenant),
    db: AsyncSession = Depends(get_db),
) -> PricesResponse:
    sheet = await pricing.get_prices(db, cfg.slug)
    return PricesResponse(
        standard_price=float(sheet.standard_price),
        weekend_price=float(sheet.weekend_price),
        date_prices=_date_prices_out(sheet.date_prices),
    )


@router.put("", response_model=PriceUpdated)
@router.put("/{tenant}", response_model=PriceUpdated)
async def update_prices(
    payload: BulkPriceUpdate,
    cfg: TenantConfig = Depends(get_authorized_tenant),
    db: AsyncSession = Depends(get_db),
) -> PriceUpdated:
    await pricing.update_prices(
        db,
        cfg.slug,
        standard_price=payload.standard_price,
        date_prices=payload.date_prices,
    )
    return PriceUpdated(message="Prices updated successfully")
