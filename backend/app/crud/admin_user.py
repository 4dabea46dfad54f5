# app/crud/admin_user.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password
from app.models.admin_user import AdminUser


async def get_admin_by_username(db: AsyncSession, username: str) -> Optional[AdminUser]:
    """
    Exact match. Usernames are case-sensitive, so no lower()/strip() here.
    """
    res = await db.execute(select(AdminUser).where(AdminUser.username == username))
    return res.scalar_one_or_none()


async def create_admin_user(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    property_id: str,
    display_name: str,
) -> AdminUser:
    user = AdminUser(
        username=username,
        password_hash=hash_password(password),
        property_id=property_id,
        display_name=display_name,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def set_admin_password(db: AsyncSession, user: AdminUser, password: str) -> AdminUser:
    user.password_hash = hash_password(password)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user
