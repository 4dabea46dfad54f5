# backend/app/api/v1/notifications.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps.services import get_mailer
from app.api.deps.tenant import get_public_tenant
from app.core.tenants import TenantConfig
from app.schemas.common import MessageResponse
from app.schemas.notifications import BookingEmailRequest, ContactRequest
from app.services.mailer import Mailer
from app.services.notifications import send_booking_emails, send_contact_message

router = APIRouter(tags=["notifications"])


@router.post("/send-booking-emails", response_model=MessageResponse)
@router.post("/send-booking-emails/{tenant}", response_model=MessageResponse)
async def booking_emails(
    payload: BookingEmailRequest,
    cfg: TenantConfig = Depends(get_public_tenant),
    mailer: Mailer = Depends(get_mailer),
) -> MessageResponse:
    await send_booking_emails(mailer, cfg, payload)
    return MessageResponse(message="Emails sent successfully")


@router.post("/contact", response_model=MessageResponse)
@router.post("/contact/{tenant}", response_model=MessageResponse)
async def contact(
    payload: ContactRequest,
    cfg: TenantConfig = Depends(get_public_tenant),
    mailer: Mailer = Depends(get_mailer),
) -> MessageResponse:
    await send_contact_message(mailer, cfg, payload)
    return MessageResponse(message="Message sent")
