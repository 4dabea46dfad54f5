# backend/app/api/v1/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps.auth import get_current_claims
from app.api.deps.tenant import get_tenant_registry
from app.core.errors import UnknownTenant
from app.core.security import TokenClaims, create_access_token
from app.core.tenants import TenantRegistry
from app.db.session import get_db
from app.schemas.auth import LoginRequest, LoginResponse, MeResponse
from app.services.auth import authenticate_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    registry: TenantRegistry = Depends(get_tenant_registry),
) -> LoginResponse:
    """
    Body: {"username": "...", "password": "..."}
    Returns a 1h token bound to the admin's own property.
    """
    user = await authenticate_admin(db, payload.username, payload.password)

    display_name = user.display_name
    try:
        display_name = display_name or registry.resolve(user.property_id).display_name
    except UnknownTenant:
        # admin provisioned for a property that is no longer configured
        logger.warning("admin bound to unknown property", extra={"tenant": user.property_id})

    token = create_access_token(str(user.id), username=user.username, tenant=user.property_id)
    logger.info("admin logged in", extra={"tenant": user.property_id})
    return LoginResponse(token=token, tenant=user.property_id, display_name=display_name or user.username)


@router.get("/me", response_model=MeResponse)
async def me(claims: TokenClaims = Depends(get_current_claims)) -> MeResponse:
    return MeResponse(id=claims.sub, username=claims.username, tenant=claims.tenant)
