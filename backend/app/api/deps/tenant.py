from __future__ import annotations

from fastapi import Depends, Request

from app.api.deps.auth import get_current_claims
from app.core.access import authorize_tenant_access, validate_tenant_allowlist
from app.core.security import TokenClaims
from app.core.tenants import TenantConfig, TenantRegistry


def get_tenant_registry(request: Request) -> TenantRegistry:
    return request.app.state.tenant_registry


async def get_public_tenant(
    request: Request,
    registry: TenantRegistry = Depends(get_tenant_registry),
) -> TenantConfig:
    """
    Tenant for unauthenticated routes: the optional `{tenant}` path segment,
    or DEFAULT_TENANT when it is omitted.
    """
    requested = request.path_params.get("tenant") or registry.default_slug
    slug = validate_tenant_allowlist(requested, registry.slugs())
    return registry.resolve(slug)


async def get_authorized_tenant(
    request: Request,
    claims: TokenClaims = Depends(get_current_claims),
    registry: TenantRegistry = Depends(get_tenant_registry),
) -> TenantConfig:
    """
    Tenant for admin routes. Token is checked first (401), then the path
    segment against the allowlist (400), then against the token's tenant (403).
    Without a path segment the token's tenant is used.
    """
    requested = request.path_params.get("tenant")
    if requested:
        validate_tenant_allowlist(requested, registry.slugs())
    slug = authorize_tenant_access(claims, requested)
    return registry.resolve(slug)
