# backend/app/core/tenants.py
from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from app.core.errors import NotConfigured, UnknownTenant

NOT_CONFIGURED = "not_configured"

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _clean_calendar_id(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = value.strip()
    if not v or v == NOT_CONFIGURED:
        return None
    return v


class TenantConfig(BaseModel):
    """
    Static configuration of one rental property.

    Accepts either a single `read_calendar_id` or a list `read_calendar_ids`;
    both are folded into `read_calendar_ids` so callers only ever see a tuple.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    slug: str = ""
    display_name: str
    logo_url: Optional[str] = None
    admin_email: Optional[EmailStr] = None

    # Google Calendar
    calendar_api_key: Optional[str] = None
    read_calendar_ids: Tuple[str, ...] = ()
    write_calendar_id: Optional[str] = None
    service_account_email: Optional[str] = None
    service_account_private_key: Optional[str] = None

    # Mailer identity
    email_user: Optional[EmailStr] = None
    email_pass: Optional[str] = Field(default=None, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _fold_read_calendars(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        single = data.pop("read_calendar_id", None)
        many = data.get("read_calendar_ids") or []
        if isinstance(many, str):
            many = [many]
        ids = [single, *many] if single else list(many)
        cleaned = [c for c in (_clean_calendar_id(i) for i in ids) if c]
        data["read_calendar_ids"] = tuple(dict.fromkeys(cleaned))
        return data

    @field_validator("write_calendar_id")
    @classmethod
    def _clean_write_calendar(cls, v: Optional[str]) -> Optional[str]:
        return _clean_calendar_id(v)

    @field_validator("service_account_private_key")
    @classmethod
    def _unescape_private_key(cls, v: Optional[str]) -> Optional[str]:
        # PEM keys arrive from env with literal "\n" sequences
        if not v:
            return None
        return v.replace("\\n", "\n")

    @property
    def admin_address(self) -> Optional[str]:
        return self.admin_email or self.email_user

    def require_api_key(self) -> str:
        if not self.calendar_api_key:
            raise NotConfigured(f"No API key configured for '{self.slug}'")
        return self.calendar_api_key

    def require_read_calendars(self) -> Tuple[str, ...]:
        if not self.read_calendar_ids:
            raise NotConfigured(f"No read calendars configured for '{self.slug}'")
        return self.read_calendar_ids

    def require_write_calendar(self) -> str:
        if not self.write_calendar_id:
            raise NotConfigured(f"No write calendar configured for '{self.slug}'")
        return self.write_calendar_id

    def require_admin_address(self) -> str:
        address = self.admin_address
        if not address:
            raise NotConfigured(f"No admin email configured for '{self.slug}'")
        return str(address)


class TenantRegistry:
    """Read-only map of tenant slug -> TenantConfig, built once at startup."""

    def __init__(self, tenants: Iterable[TenantConfig], default_slug: str) -> None:
        by_slug: dict[str, TenantConfig] = {}
        for tenant in tenants:
            if not _SLUG_RE.match(tenant.slug):
                raise ValueError(f"Invalid tenant slug: {tenant.slug!r}")
            if tenant.slug in by_slug:
                raise ValueError(f"Duplicate tenant slug: {tenant.slug!r}")
            by_slug[tenant.slug] = tenant

        if default_slug not in by_slug:
            raise ValueError(
                f"DEFAULT_TENANT={default_slug!r} is not one of the configured tenants: {sorted(by_slug)}"
            )

        self._tenants: Mapping[str, TenantConfig] = MappingProxyType(by_slug)
        self._default_slug = default_slug

    @classmethod
    def from_mapping(cls, tenants: Mapping[str, TenantConfig], default_slug: str) -> "TenantRegistry":
        return cls(
            (cfg.model_copy(update={"slug": slug}) for slug, cfg in tenants.items()),
            default_slug=default_slug,
        )

    @property
    def default_slug(self) -> str:
        return self._default_slug

    def slugs(self) -> frozenset[str]:
        return frozenset(self._tenants)

    def resolve(self, slug: str) -> TenantConfig:
        try:
            return self._tenants[slug]
        except KeyError:
            raise UnknownTenant(slug) from None

    def __iter__(self):
        return iter(self._tenants.values())

    def __len__(self) -> int:
        return len(self._tenants)
