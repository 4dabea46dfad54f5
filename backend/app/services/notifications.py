"""
Booking and contact emails.

Everything a visitor typed is HTML-escaped before it goes into a template.
"""
from __future__ import annotations

import asyncio
import datetime as dt
from decimal import Decimal
from html import escape
from typing import Optional

from app.core.tenants import TenantConfig
from app.schemas.notifications import BookingEmailRequest, ContactRequest
from app.services.mailer import Mailer

PLACEHOLDER = "—"
SITE_URL = "https://holidayhomesandlets.co.uk"

_CELL = 'style="padding:8px;border:1px solid #ddd"'


def format_day(value: dt.date) -> str:
    return value.strftime("%d/%m/%Y")


def format_total(value: Optional[Decimal]) -> str:
    if value is None or not value.is_finite():
        return PLACEHOLDER
    return f"{value:.2f}"


def _text(value: Optional[object]) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return escape(str(value))


def _rows(pairs: list[tuple[str, str]]) -> str:
    out = []
    for i, (label, value) in enumerate(pairs):
        shade = ' style="background:#eee"' if i % 2 == 0 else ""
        out.append(f"<tr{shade}><td {_CELL}><strong>{label}</strong></td><td {_CELL}>{value}</td></tr>")
    return "\n".join(out)


def _header(cfg: TenantConfig) -> str:
    if not cfg.logo_url:
        return ""
    return (
        '<div style="text-align:center;padding-bottom:20px">'
        f'<img src="{escape(cfg.logo_url)}" alt="{escape(cfg.display_name)}" width="200" />'
        "</div>"
    )


def _wrap(cfg: TenantConfig, inner: str) -> str:
    return (
        '<div style="font-family:Arial,sans-serif;color:#333;max-width:600px;margin:0 auto;padding:20px">'
        f"{_header(cfg)}{inner}</div>"
    )


def customer_booking_html(cfg: TenantConfig, booking: BookingEmailRequest, contact_address: str) -> str:
    name = escape(cfg.display_name)
    table = _rows(
        [
            ("Property", name),
            ("Check-in", format_day(booking.start_date)),
            ("Check-out", format_day(booking.end_date)),
            ("Guests", _text(booking.number_of_people)),
            ("Pets", _text(booking.number_of_pets)),
            ("Total", f"&pound;{format_total(booking.total_price)}"),
        ]
    )
    inner = (
        f"<h2>Booking Request Received - {name}</h2>"
        f"<p>Dear <strong>{escape(booking.name)}</strong>,</p>"
        f"<p>Thank you for your booking request for <strong>{name}</strong>! "
        "We are reviewing your details and will confirm shortly.</p>"
        "<h3>Booking Details</h3>"
        f'<table style="width:100%;border-collapse:collapse">{table}</table>'
        f'<p>If you have questions, email <a href="mailto:{escape(contact_address)}">{escape(contact_address)}</a>.</p>'
        f'<p style="text-align:center"><a href="{SITE_URL}">Visit Our Website</a></p>'
    )
    return _wrap(cfg, inner)


def admin_booking_html(cfg: TenantConfig, booking: BookingEmailRequest) -> str:
    name = escape(cfg.display_name)
    table = _rows(
        [
            ("Property", name),
            ("Name", _text(booking.name)),
            ("Email", _text(booking.email)),
            ("Phone", _text(booking.telephone)),
            ("Check-in", format_day(booking.start_date)),
            ("Check-out", format_day(booking.end_date)),
            ("Guests", _text(booking.number_of_people)),
            ("Pets", _text(booking.number_of_pets)),
            ("Total", f"&pound;{format_total(booking.total_price)}"),
        ]
    )
    inner = (
        f"<h2>New Booking Request - {name}</h2>"
        "<h3>Booking Details</h3>"
        f'<table style="width:100%;border-collapse:collapse">{table}</table>'
        "<p><strong>Message from customer:</strong></p>"
        f"<p>{_text(booking.message)}</p>"
    )
    return _wrap(cfg, inner)


def contact_html(cfg: TenantConfig, contact: ContactRequest) -> str:
    inner = (
        f"<h2>Contact Form Submission - {escape(cfg.display_name)}</h2>"
        f"<p><strong>Name:</strong> {_text(contact.name)}</p>"
        f"<p><strong>Email:</strong> {_text(contact.email)}</p>"
        f"<p><strong>Telephone:</strong> {_text(contact.telephone)}</p>"
        "<p><strong>Message:</strong></p>"
        f"<p>{_text(contact.message)}</p>"
    )
    return _wrap(cfg, inner)


async def send_booking_emails(mailer: Mailer, cfg: TenantConfig, booking: BookingEmailRequest) -> None:
    """Customer confirmation (reply goes to the property) and admin notice (reply goes to the guest)."""
    admin_address = cfg.require_admin_address()
    mailbox = mailer.sender_address(cfg.slug)

    results = await asyncio.gather(
        mailer.send(
            cfg.slug,
            to=str(booking.email),
            subject=f"Your Booking Request Confirmation - {cfg.display_name}",
            html=customer_booking_html(cfg, booking, admin_address),
            reply_to=mailbox,
        ),
        mailer.send(
            cfg.slug,
            to=admin_address,
            subject=f"New Booking Request - {cfg.display_name}",
            html=admin_booking_html(cfg, booking),
            reply_to=str(booking.email),
        ),
        return_exceptions=True,
    )
    # Both sends run to completion; the first failure is reported.
    for result in results:
        if isinstance(result, BaseException):
            raise result


async def send_contact_message(mailer: Mailer, cfg: TenantConfig, contact: ContactRequest) -> None:
    await mailer.send(
        cfg.slug,
        to=cfg.require_admin_address(),
        subject=f"New Contact Form Message - {cfg.display_name}",
        html=contact_html(cfg, contact),
        reply_to=str(contact.email),
    )
