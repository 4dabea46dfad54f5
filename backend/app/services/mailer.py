from __future__ import annotations

import logging
from typing import Dict, Optional

from aiosmtplib import SMTPException
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from fastapi_mail.errors import ConnectionErrors

from app.core.config import Settings
from app.core.errors import DependencyError, NotConfigured
from app.core.tenants import TenantConfig, TenantRegistry

logger = logging.getLogger(__name__)


class Mailer:
    """
    One FastMail per tenant, each sending as the tenant's own mailbox when it
    has credentials and as the process-wide sender otherwise. The From name
    is always the tenant's display name.
    """

    def __init__(self, registry: TenantRegistry, settings: Settings) -> None:
        self._registry = registry
        self._settings = settings
        self._by_tenant: Dict[str, FastMail] = {}
        for cfg in registry:
            conf = self._connection_for(cfg)
            if conf is not None:
                self._by_tenant[cfg.slug] = FastMail(conf)

    def _connection_for(self, cfg: TenantConfig) -> Optional[ConnectionConfig]:
        s = self._settings
        if cfg.email_user:
            username, password = str(cfg.email_user), cfg.email_pass
            sender = username
        else:
            username, password = s.MAIL_USERNAME, s.MAIL_PASSWORD
            sender = s.MAIL_FROM or s.MAIL_USERNAME

        if not sender:
            logger.warning("no mail sender configured", extra={"tenant": cfg.slug})
            return None

        return ConnectionConfig(
            MAIL_USERNAME=username or "",
            MAIL_PASSWORD=password or "",
            MAIL_FROM=sender,
            MAIL_FROM_NAME=cfg.display_name or s.MAIL_FROM_NAME,
            MAIL_SERVER=s.MAIL_SERVER,
            MAIL_PORT=s.MAIL_PORT,
            MAIL_SSL_TLS=s.MAIL_SSL_TLS,
            MAIL_STARTTLS=s.MAIL_STARTTLS,
            USE_CREDENTIALS=bool(username and password),
            SUPPRESS_SEND=1 if s.MAIL_SUPPRESS_SEND else 0,
        )

    def sender_address(self, tenant: str) -> str:
        cfg = self._registry.resolve(tenant)
        if cfg.email_user:
            return str(cfg.email_user)
        address = self._settings.MAIL_FROM or self._settings.MAIL_USERNAME
        if not address:
            raise NotConfigured(f"No mail sender configured for '{tenant}'")
        return address

    def fastmail_for(self, tenant: str) -> FastMail:
        self._registry.resolve(tenant)
        try:
            return self._by_tenant[tenant]
        except KeyError:
            raise NotConfigured(f"No mail sender configured for '{tenant}'") from None

    async def send(
        self,
        tenant: str,
        *,
        to: str,
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> None:
        fm = self.fastmail_for(tenant)
        message = MessageSchema(
            subject=subject,
            recipients=[to],
            body=html,
            subtype=MessageType.html,
            reply_to=[reply_to] if reply_to else [],
        )
        try:
            await fm.send_message(message)
        except (ConnectionErrors, SMTPException, OSError) as exc:
            logger.exception("email dispatch failed", extra={"tenant": tenant})
            raise DependencyError("Failed to send email") from exc

        logger.info("email sent: %s", subject, extra={"tenant": tenant})
