# backend/app/api/v1/events.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from app.api.deps.auth import require_service_key
from app.api.deps.services import get_calendar_gateway
from app.api.deps.tenant import get_public_tenant
from app.core.tenants import TenantConfig
from app.schemas.calendar import AddEventRequest, AddEventResponse, EventsResponse
from app.services.calendar import CalendarGateway

router = APIRouter(tags=["calendar"])

# availability must never be served from a cache
NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


@router.get("/events", response_model=EventsResponse)
@router.get("/events/{tenant}", response_model=EventsResponse)
async def list_events(
    response: Response,
    time_min: Optional[str] = Query(default=None, alias="timeMin"),
    time_max: Optional[str] = Query(default=None, alias="timeMax"),
    cfg: TenantConfig = Depends(get_public_tenant),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
) -> EventsResponse:
    items = await gateway.list_events(cfg.slug, time_min=time_min, time_max=time_max)
    response.headers.update(NO_STORE_HEADERS)
    return EventsResponse(items=items)


@router.post("/add-event", response_model=AddEventResponse, dependencies=[Depends(require_service_key)])
@router.post("/add-event/{tenant}", response_model=AddEventResponse, dependencies=[Depends(require_service_key)])
async def add_event(
    payload: AddEventRequest,
    cfg: TenantConfig = Depends(get_public_tenant),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
) -> AddEventResponse:
    created = await gateway.create_event(
        cfg.slug,
        summary=payload.summary,
        location=payload.location,
        description=payload.description,
        start=payload.start_date,
        end=payload.end_date,
    )
    return AddEventResponse(event_id=created.id, html_link=created.html_link)
