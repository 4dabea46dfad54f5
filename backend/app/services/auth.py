from __future__ import annotations

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidCredentials
from app.core.security import DUMMY_PASSWORD_HASH, verify_password
from app.crud.admin_user import get_admin_by_username
from app.models.admin_user import AdminUser

logger = logging.getLogger(__name__)


async def authenticate_admin(db: AsyncSession, username: str, password: str) -> AdminUser:
    """
    Returns the admin on success. Every failure (unknown user, inactive user,
    wrong password) raises the same InvalidCredentials.
    """
    user = await get_admin_by_username(db, username)

    # bcrypt is CPU bound; keep it off the event loop
    stored_hash = user.password_hash if user is not None else DUMMY_PASSWORD_HASH
    password_ok = await asyncio.to_thread(verify_password, password, stored_hash)

    if user is None or not password_ok or not user.is_active:
        logger.info("admin login rejected")
        raise InvalidCredentials()

    return user
