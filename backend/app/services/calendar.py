"""
Per-tenant Google Calendar access.

Reads go straight to the public REST endpoint with the tenant's API key (one
request per read calendar, fetched concurrently). Writes use the tenant's
service account through google-api-python-client. Both sides are built once
when the application starts; nothing is created lazily per request.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Protocol
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.core.errors import DependencyError, NotConfigured
from app.core.tenants import TenantConfig, TenantRegistry

logger = logging.getLogger(__name__)

CALENDAR_SCOPES = ("https://www.googleapis.com/auth/calendar.events",)
TOKEN_URI = "https://oauth2.googleapis.com/token"


class EventWriter(Protocol):
    def insert_event(self, calendar_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


class GoogleEventWriter:
    """Blocking writer; call through asyncio.to_thread."""

    def __init__(self, service_account_email: str, private_key: str) -> None:
        credentials = service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": service_account_email,
                "private_key": private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=list(CALENDAR_SCOPES),
        )
        self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def insert_event(self, calendar_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._service.events().insert(calendarId=calendar_id, body=body).execute()


@dataclass(frozen=True)
class CreatedEvent:
    id: str
    html_link: Optional[str]


def deduplicate_events(events: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep the first event per (start date/dateTime, summary)."""
    seen: set[tuple[str, str]] = set()
    out: List[Dict[str, Any]] = []
    for ev in events:
        start = ev.get("start") or {}
        key = (str(start.get("date") or start.get("dateTime") or ""), str(ev.get("summary") or ""))
        if key in seen:
            continue
        seen.add(key)
        out.append(ev)
    return out


class CalendarGateway:
    def __init__(
        self,
        registry: TenantRegistry,
        writers: Mapping[str, EventWriter],
        *,
        api_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._registry = registry
        self._writers = dict(writers)
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    # -----------------------------
    # Reads
    # -----------------------------
    async def _fetch(
        self,
        client: httpx.AsyncClient,
        calendar_id: str,
        params: Dict[str, str],
    ) -> List[Dict[str, Any]]:
        url = f"{self._api_url}/calendars/{quote(calendar_id, safe='')}/events"
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        items = resp.json().get("items") or []
        return [item for item in items if isinstance(item, dict)]

    async def list_events(
        self,
        tenant: str,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        cfg = self._registry.resolve(tenant)
        api_key = cfg.require_api_key()
        calendar_ids = cfg.require_read_calendars()

        params = {"key": api_key}
        if time_min:
            params["timeMin"] = time_min
        if time_max:
            params["timeMax"] = time_max

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            results = await asyncio.gather(
                *(self._fetch(client, cal_id, params) for cal_id in calendar_ids),
                return_exceptions=True,
            )

        events: List[Dict[str, Any]] = []
        for cal_id, result in zip(calendar_ids, results):
            if isinstance(result, Exception):
                # one broken feed must not hide the others
                logger.warning(
                    "calendar fetch failed: %s",
                    type(result).__name__,
                    extra={"tenant": tenant, "calendar_id": cal_id},
                )
                continue
            if isinstance(result, BaseException):
                raise result
            logger.info(
                "fetched %d events",
                len(result),
                extra={"tenant": tenant, "calendar_id": cal_id, "count": len(result)},
            )
            events.extend(result)

        deduped = deduplicate_events(events)
        logger.info("returning %d events", len(deduped), extra={"tenant": tenant, "count": len(deduped)})
        return deduped

    # -----------------------------
    # Writes
    # -----------------------------
    async def create_event(
        self,
        tenant: str,
        *,
        summary: str,
        start: date,
        end: date,
        location: str = "",
        description: str = "",
    ) -> CreatedEvent:
        cfg = self._registry.resolve(tenant)
        calendar_id = cfg.require_write_calendar()
        writer = self._writers.get(cfg.slug)
        if writer is None:
            raise NotConfigured(f"No service account configured for '{cfg.slug}'")

        body = {
            "summary": summary,
            "location": location or "",
            "description": description or "",
            "start": {"date": start.isoformat()},
            "end": {"date": end.isoformat()},
        }

        try:
            created = await asyncio.to_thread(writer.insert_event, calendar_id, body)
        except (HttpError, GoogleAuthError, OSError) as exc:
            logger.exception("event insert failed", extra={"tenant": tenant, "calendar_id": calendar_id})
            raise DependencyError("Failed to add event") from exc

        logger.info("event created", extra={"tenant": tenant, "calendar_id": calendar_id})
        return CreatedEvent(id=str(created.get("id") or ""), html_link=created.get("htmlLink"))


def _build_writer(cfg: TenantConfig) -> Optional[EventWriter]:
    if not (cfg.write_calendar_id and cfg.service_account_email and cfg.service_account_private_key):
        return None
    try:
        return GoogleEventWriter(cfg.service_account_email, cfg.service_account_private_key)
    except ValueError:
        # unparseable key: the tenant stays read-only
        logger.error("invalid service account key", extra={"tenant": cfg.slug})
        return None


def build_calendar_gateway(
    registry: TenantRegistry,
    *,
    api_url: str,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> CalendarGateway:
    writers: Dict[str, EventWriter] = {}
    for cfg in registry:
        writer = _build_writer(cfg)
        if writer is not None:
            writers[cfg.slug] = writer
    return CalendarGateway(registry, writers, api_url=api_url, timeout=timeout, transport=transport)
