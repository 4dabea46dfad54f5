from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.errors import AuthError
from app.core.security import TokenClaims, decode_access_token

# auto_error=False: a missing header is our 401, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_claims(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    if creds is None or not creds.credentials:
        raise AuthError("Missing token")
    return decode_access_token(creds.credentials)


async def require_service_key(
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> None:
    """
    Service-to-service credential for calendar writes. Only enforced when
    ADD_EVENT_API_KEY is configured.
    """
    expected = settings.ADD_EVENT_API_KEY
    if not expected:
        return
    if not x_api_key or not secrets.compare_digest(x_api_key.encode("utf-8"), expected.encode("utf-8")):
        raise AuthError("Invalid API key")
