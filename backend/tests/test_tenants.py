# tests/test_tenants.py
from __future__ import annotations

import pytest

from app.core.errors import NotConfigured, UnknownTenant
from app.core.tenants import TenantConfig, TenantRegistry


def make_registry(**overrides) -> TenantRegistry:
    tenants = {
        "preswylfa": TenantConfig(display_name="Preswylfa", read_calendar_id="a@example.com"),
        "piddle-inn": TenantConfig(
            display_name="Piddle Inn",
            read_calendar_ids=["b@example.com", "not_configured", "", "b@example.com"],
        ),
    }
    tenants.update(overrides)
    return TenantRegistry.from_mapping(tenants, default_slug="preswylfa")


def test_single_and_multi_calendar_config_normalize_to_one_list():
    registry = make_registry()
    assert registry.resolve("preswylfa").read_calendar_ids == ("a@example.com",)
    assert registry.resolve("piddle-inn").read_calendar_ids == ("b@example.com",)


def test_slug_is_taken_from_mapping_key():
    registry = make_registry()
    assert registry.resolve("piddle-inn").slug == "piddle-inn"
    assert registry.slugs() == frozenset({"preswylfa", "piddle-inn"})
    assert registry.default_slug == "preswylfa"
    assert len(registry) == 2


def test_unknown_slug_raises():
    with pytest.raises(UnknownTenant):
        make_registry().resolve("elsewhere")


def test_default_tenant_must_exist():
    with pytest.raises(ValueError):
        TenantRegistry.from_mapping({"piddle-inn": TenantConfig(display_name="Piddle Inn")}, default_slug="preswylfa")


def test_invalid_slug_rejected():
    with pytest.raises(ValueError):
        make_registry(**{"Bad Slug": TenantConfig(display_name="x")})


def test_private_key_newlines_are_unescaped():
    cfg = TenantConfig(display_name="x", service_account_private_key="-----BEGIN-----\\nabc\\n-----END-----")
    assert cfg.service_account_private_key == "-----BEGIN-----\nabc\n-----END-----"


def test_placeholder_write_calendar_counts_as_missing():
    cfg = TenantConfig(slug="x", display_name="x", write_calendar_id="not_configured")
    assert cfg.write_calendar_id is None
    with pytest.raises(NotConfigured):
        cfg.require_write_calendar()


def test_require_helpers():
    cfg = TenantConfig(slug="x", display_name="x", email_user="me@example.com")
    assert cfg.require_admin_address() == "me@example.com"
    with pytest.raises(NotConfigured):
        cfg.require_api_key()
    with pytest.raises(NotConfigured):
        cfg.require_read_calendars()


def test_unknown_config_fields_are_rejected():
    with pytest.raises(ValueError):
        TenantConfig(display_name="x", calendar_id="oops")
