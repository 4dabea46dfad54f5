# backend/app/schemas/calendar.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from app.schemas.common import CamelModel, CamelRequest, IsoDate


class EventsResponse(CamelModel):
    items: List[Dict[str, Any]]


class AddEventRequest(CamelRequest):
    summary: str = Field(min_length=1, max_length=500)
    location: str = Field(default="", max_length=500)
    description: str = Field(default="", max_length=5000)
    start_date: IsoDate
    end_date: IsoDate

    @model_validator(mode="after")
    def _check_order(self) -> "AddEventRequest":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class AddEventResponse(CamelModel):
    message: str = "Event added"
    event_id: str
    html_link: Optional[str] = None
