# backend/app/schemas/auth.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import CamelModel


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=200)


class LoginResponse(CamelModel):
    token: str
    tenant: str
    display_name: str


class MeResponse(CamelModel):
    id: str
    username: str
    tenant: Optional[str] = None
