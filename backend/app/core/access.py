from __future__ import annotations

from typing import Collection, Optional

from app.core.errors import TenantForbidden, UnknownTenant
from app.core.security import TokenClaims


def validate_tenant_allowlist(candidate: Optional[str], allowlist: Collection[str]) -> str:
    """Public endpoints: no session, but the tenant must still be a known one."""
    if not candidate or candidate not in allowlist:
        raise UnknownTenant(candidate)
    return candidate


def authorize_tenant_access(claims: TokenClaims, requested: Optional[str] = None) -> str:
    """
    Effective tenant for an authenticated request.

    The token's tenant wins; a requested tenant is only accepted when it is the
    same one. Callers downstream always get an explicit slug back.
    """
    if not claims.tenant:
        raise TenantForbidden("Token is not scoped to a property")
    if requested and requested != claims.tenant:
        raise TenantForbidden()
    return claims.tenant
