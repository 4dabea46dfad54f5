from __future__ import annotations

from fastapi import Request

from app.services.calendar import CalendarGateway
from app.services.mailer import Mailer


def get_calendar_gateway(request: Request) -> CalendarGateway:
    return request.app.state.calendar_gateway


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer
