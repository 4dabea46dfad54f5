"""
Nightly pricing per tenant.

A tenant has one standard rate, an optional weekend rate and a sparse set of
per-date overrides. The weekend rate lives in `standard_price` under the key
"<slug>_weekend" instead of its own column; callers should go through
`weekend_key()` rather than building that string themselves.

All writes use the database's native INSERT ... ON CONFLICT DO UPDATE keyed on
the unique constraints, so concurrent writers for the same tenant cannot create
duplicate rows.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidInput
from app.models.date_price import DatePrice
from app.models.standard_price import StandardPrice

logger = logging.getLogger(__name__)

# Client UIs assume this when a tenant has never saved a standard price.
DEFAULT_STANDARD_PRICE = Decimal("150")
WEEKEND_SUFFIX = "_weekend"
# Three bind parameters per row; keeps each statement well under the
# 32767-parameter limit asyncpg enforces.
DATE_UPSERT_BATCH = 1000

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class DatePriceEntry:
    date: date
    price: Decimal


@dataclass(frozen=True)
class PriceSheet:
    standard_price: Decimal
    weekend_price: Decimal
    date_prices: List[DatePriceEntry]


def weekend_key(tenant: str) -> str:
    return f"{tenant}{WEEKEND_SUFFIX}"


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def parse_month(month_year: str) -> tuple[date, date]:
    """'YYYY-MM' -> [first day of month, first day of next month)."""
    m = _MONTH_RE.match(month_year or "")
    if not m:
        raise InvalidInput("Invalid month format. Use YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise InvalidInput("Invalid month format. Use YYYY-MM")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def _dialect_insert(db: AsyncSession):
    name = db.get_bind().dialect.name
    if name == "postgresql":
        return postgresql.insert
    if name == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Upserts are not supported on dialect {name!r}")


# -----------------------------
# Reads
# -----------------------------
async def _standard_value(db: AsyncSession, key: str) -> Optional[Decimal]:
    res = await db.execute(select(StandardPrice.value).where(StandardPrice.property_id == key).limit(1))
    return res.scalar_one_or_none()


async def get_standard_price(db: AsyncSession, tenant: str) -> Decimal:
    value = await _standard_value(db, tenant)
    return value if value is not None else DEFAULT_STANDARD_PRICE


async def list_date_prices(db: AsyncSession, tenant: str) -> List[DatePriceEntry]:
    stmt = (
        select(DatePrice.date, DatePrice.price)
        .where(DatePrice.property_id == tenant)
        .order_by(DatePrice.date.asc())
    )
    res = await db.execute(stmt)
    return [DatePriceEntry(date=row.date, price=row.price) for row in res]


async def get_prices(db: AsyncSession, tenant: str) -> PriceSheet:
    standard = await get_standard_price(db, tenant)
    weekend = await _standard_value(db, weekend_key(tenant))
    return PriceSheet(
        standard_price=standard,
        weekend_price=weekend if weekend is not None else standard,
        date_prices=await list_date_prices(db, tenant),
    )


async def compute_stay_total(db: AsyncSession, tenant: str, start: date, end: date) -> float:
    """
    Sum of nightly rates for every date in [start, end], both ends included.

    A stay from D to D is one night. Callers with exclusive check-out must pass
    end = check-out minus one day. The weekend rate is not applied here.
    """
    if end < start:
        return 0.0

    standard = await get_standard_price(db, tenant)
    res = await db.execute(
        select(DatePrice.date, DatePrice.price).where(
            DatePrice.property_id == tenant,
            DatePrice.date >= start,
            DatePrice.date <= end,
        )
    )
    overrides = [row.price for row in res]

    # Every night costs the standard rate except the override rows.
    nights = (end - start).days + 1
    total = standard * nights + sum((price - standard for price in overrides), Decimal("0"))
    return float(total)


# -----------------------------
# Writes
# -----------------------------
async def _upsert_standard(db: AsyncSession, key: str, price: Decimal) -> None:
    insert = _dialect_insert(db)
    stmt = insert(StandardPrice).values(property_id=key, value=price)
    stmt = stmt.on_conflict_do_update(
        index_elements=["property_id"],
        set_={"value": stmt.excluded.value, "updated_at": func.now()},
    )
    await db.execute(stmt)


async def _upsert_dates(db: AsyncSession, tenant: str, prices: Mapping[date, Decimal]) -> None:
    if not prices:
        return
    insert = _dialect_insert(db)
    rows = [{"property_id": tenant, "date": d, "price": p} for d, p in sorted(prices.items())]
    for i in range(0, len(rows), DATE_UPSERT_BATCH):
        stmt = insert(DatePrice).values(rows[i : i + DATE_UPSERT_BATCH])
        stmt = stmt.on_conflict_do_update(
            index_elements=["property_id", "date"],
            set_={"price": stmt.excluded.price, "updated_at": func.now()},
        )
        await db.execute(stmt)


async def set_standard_price(db: AsyncSession, tenant: str, price: Decimal) -> None:
    await _upsert_standard(db, tenant, price)
    await db.commit()
    logger.info("standard price set to %s", price, extra={"tenant": tenant})


async def set_weekend_price(db: AsyncSession, tenant: str, price: Decimal) -> None:
    await _upsert_standard(db, weekend_key(tenant), price)
    await db.commit()
    logger.info("weekend price set to %s", price, extra={"tenant": tenant})


async def upsert_date_range(
    db: AsyncSession,
    tenant: str,
    dates: Iterable[date],
    price: Decimal,
) -> List[DatePriceEntry]:
    """
    Set `price` on every date. Duplicates collapse; the batch is written in one
    transaction, so it either all lands or none of it does.
    """
    unique = set(dates)
    if not unique:
        raise InvalidInput("Dates array and price are required")

    await _upsert_dates(db, tenant, {d: price for d in unique})
    await db.commit()
    logger.info("date prices set for %d dates", len(unique), extra={"tenant": tenant, "count": len(unique)})
    return await list_date_prices(db, tenant)


async def update_prices(
    db: AsyncSession,
    tenant: str,
    *,
    standard_price: Optional[Decimal] = None,
    date_prices: Optional[Mapping[date, Decimal]] = None,
) -> None:
    if standard_price is None and not date_prices:
        raise InvalidInput("No price data provided")

    if standard_price is not None:
        await _upsert_standard(db, tenant, standard_price)
    await _upsert_dates(db, tenant, date_prices or {})
    await db.commit()
    logger.info("prices updated", extra={"tenant": tenant, "count": len(date_prices or {})})


async def delete_date_override(db: AsyncSession, tenant: str, day: date) -> List[DatePriceEntry]:
    await db.execute(delete(DatePrice).where(DatePrice.property_id == tenant, DatePrice.date == day))
    await db.commit()
    return await list_date_prices(db, tenant)


async def clear_month(db: AsyncSession, tenant: str, month_year: str) -> int:
    start, end = parse_month(month_year)
    res = await db.execute(
        delete(DatePrice).where(
            DatePrice.property_id == tenant,
            DatePrice.date >= start,
            DatePrice.date < end,
        )
    )
    await db.commit()
    deleted = int(res.rowcount or 0)
    logger.info("cleared %d prices for %s", deleted, month_year, extra={"tenant": tenant, "count": deleted})
    return deleted


async def cleanup_past_overrides(db: AsyncSession, tenant: str, *, today: Optional[date] = None) -> int:
    cutoff = today or utc_today()
    res = await db.execute(
        delete(DatePrice).where(DatePrice.property_id == tenant, DatePrice.date < cutoff)
    )
    await db.commit()
    deleted = int(res.rowcount or 0)
    logger.info("cleaned up %d old prices", deleted, extra={"tenant": tenant, "count": deleted})
    return deleted
