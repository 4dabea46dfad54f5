# tests/test_prices_api.py
from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy import func, select

from app.models.date_price import DatePrice


@pytest.mark.asyncio
async def test_public_read_defaults_to_default_tenant(client):
    r = await client.get("/api/prices")
    assert r.status_code == 200
    assert r.json() == {"standardPrice": 150.0, "weekendPrice": 150.0, "datePrices": []}

    r = await client.get("/api/prices/piddle-inn")
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_unknown_tenant_is_400_on_public_and_admin_routes(client, admin_headers):
    r = await client.get("/api/prices/nowhere")
    assert r.status_code == 400
    assert r.json() == {"detail": "Unknown property: nowhere"}

    r = await client.put("/api/prices/standard/nowhere", json={"price": 100}, headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_writes_need_a_token(client):
    r = await client.put("/api/prices/standard/preswylfa", json={"price": 100})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_token_tenant_must_match_path(client, admin_headers):
    r = await client.put("/api/prices/standard/piddle-inn", json={"price": 100}, headers=admin_headers)
    assert r.status_code == 403

    r = await client.get("/api/prices/piddle-inn")
    assert r.json()["standardPrice"] == 150.0


@pytest.mark.asyncio
async def test_unscoped_token_is_forbidden(client, make_headers):
    r = await client.put("/api/prices/standard", json={"price": 100}, headers=make_headers(None))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_standard_and_weekend_updates(client, admin_headers):
    r = await client.put("/api/prices/standard/preswylfa", json={"price": 175.5}, headers=admin_headers)
    assert r.status_code == 200, r.text
    assert r.json() == {"message": "Standard price updated", "success": True}

    # tenant segment omitted: falls back to the token's tenant
    r = await client.put("/api/prices/weekend", json={"price": 210}, headers=admin_headers)
    assert r.status_code == 200

    body = (await client.get("/api/prices/preswylfa")).json()
    assert body["standardPrice"] == 175.5
    assert body["weekendPrice"] == 210.0


@pytest.mark.asyncio
@pytest.mark.parametrize("price", [-1, "abc", None, "NaN"])
async def test_invalid_price_is_rejected(client, admin_headers, price):
    r = await client.put("/api/prices/standard", json={"price": price}, headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_date_range_roundtrip(client, admin_headers):
    r = await client.post(
        "/api/prices/date-range/preswylfa",
        json={"dates": ["2030-07-02", "2030-07-01T00:00:00Z", "2030-07-02"], "price": 199},
        headers=admin_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["datePrices"] == [
        {"date": "2030-07-01", "price": 199.0},
        {"date": "2030-07-02", "price": 199.0},
    ]

    r = await client.delete("/api/prices/date-range/preswylfa/2030-07-01", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["datePrices"] == [{"date": "2030-07-02", "price": 199.0}]

    r = await client.delete("/api/prices/date-range/2030-07-02", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["datePrices"] == []


@pytest.mark.asyncio
async def test_one_bad_date_writes_nothing(client, db, admin_headers):
    r = await client.post(
        "/api/prices/date-range",
        json={"dates": ["2030-07-01", "2030-02-30"], "price": 100},
        headers=admin_headers,
    )
    assert r.status_code == 400
    assert "2030-02-30" in r.text

    count = (await db.execute(select(func.count()).select_from(DatePrice))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_date_range_requires_dates(client, admin_headers):
    r = await client.post("/api/prices/date-range", json={"dates": [], "price": 100}, headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_delete_with_bad_date_is_400(client, admin_headers):
    r = await client.delete("/api/prices/date-range/preswylfa/not-a-date", headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_clear_month(client, admin_headers):
    await client.post(
        "/api/prices/date-range",
        json={"dates": ["2030-12-01", "2030-12-31", "2031-01-01"], "price": 100},
        headers=admin_headers,
    )

    r = await client.delete("/api/prices/clear-month/preswylfa/2030-12", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Cleared 2 prices for 2030-12", "deletedCount": 2}

    r = await client.delete("/api/prices/clear-month/2030-13", headers=admin_headers)
    assert r.status_code == 400
    assert r.json() == {"detail": "Invalid month format. Use YYYY-MM"}


@pytest.mark.asyncio
async def test_cleanup_past(client, admin_headers):
    today = date.today()
    dates = [(today - timedelta(days=30)).isoformat(), (today + timedelta(days=30)).isoformat()]
    await client.post("/api/prices/date-range", json={"dates": dates, "price": 100}, headers=admin_headers)

    r = await client.delete("/api/prices/cleanup/preswylfa", headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["deletedCount"] == 1


@pytest.mark.asyncio
async def test_stay_total_is_public(client, admin_headers):
    await client.put("/api/prices/standard", json={"price": 100}, headers=admin_headers)
    await client.post("/api/prices/date-range", json={"dates": ["2030-05-02"], "price": 150}, headers=admin_headers)

    r = await client.post("/api/prices/total/preswylfa", json={"startDate": "2030-05-01", "endDate": "2030-05-03"})
    assert r.status_code == 200
    assert r.json() == {"total": 350.0}

    r = await client.post("/api/prices/total", json={"startDate": "2030-05-03", "endDate": "2030-05-01"})
    assert r.json() == {"total": 0.0}


@pytest.mark.asyncio
async def test_stay_total_handles_calendar_edges(client):
    r = await client.post("/api/prices/total", json={"startDate": "9999-12-31", "endDate": "9999-12-31"})
    assert r.status_code == 200
    assert r.json() == {"total": 150.0}

    r = await client.post("/api/prices/total", json={"startDate": "0001-01-01", "endDate": "9999-12-31"})
    assert r.status_code == 200
    assert r.json() == {"total": 150.0 * 3652059}


@pytest.mark.asyncio
async def test_bulk_update_route(client, admin_headers):
    r = await client.put(
        "/api/prices/preswylfa",
        json={"standardPrice": 120, "datePrices": {"2030-09-01": 90}},
        headers=admin_headers,
    )
    assert r.status_code == 200, r.text
    assert r.json()["message"] == "Prices updated successfully"

    body = (await client.get("/api/prices")).json()
    assert body["standardPrice"] == 120.0
    assert body["datePrices"] == [{"date": "2030-09-01", "price": 90.0}]

    r = await client.put("/api/prices/preswylfa", json={}, headers=admin_headers)
    assert r.status_code == 400
