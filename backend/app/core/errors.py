# backend/app/core/errors.py
from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """
    Base class for errors that map onto an HTTP response.

    `detail` is what the caller sees. Anything internal belongs in the
    exception chain / logs, never in `detail`.
    """

    status_code: int = 500
    default_detail: Any = "Internal server error"

    def __init__(self, detail: Optional[Any] = None) -> None:
        self.detail = detail if detail is not None else self.default_detail
        super().__init__(str(self.detail))


# -----------------------------
# 4xx
# -----------------------------
class ClientError(AppError):
    status_code = 400
    default_detail = "Bad request"


class InvalidInput(ClientError):
    pass


class UnknownTenant(ClientError):
    def __init__(self, slug: Optional[str]) -> None:
        self.slug = slug
        super().__init__(f"Unknown property: {slug or '-'}")


class NotConfigured(ClientError):
    """Tenant is missing a credential or calendar id the operation needs."""


class AuthError(AppError):
    status_code = 401
    default_detail = "Invalid token"


class InvalidCredentials(AuthError):
    default_detail = "Invalid username or password"


class TenantForbidden(AppError):
    status_code = 403
    default_detail = "Access to this property is not allowed"


# -----------------------------
# 5xx
# -----------------------------
class DependencyError(AppError):
    """Calendar provider or mailer failed. Detail is generic on purpose."""

    status_code = 502
    default_detail = "Upstream service failed"
