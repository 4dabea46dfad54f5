from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import Settings, settings
from app.core.logging_setup import configure_logging
from app.core.tenants import TenantRegistry
import app.models  # noqa: F401  # force model registration

from app.api.errors import register_exception_handlers
from app.api.v1.auth import router as auth_router
from app.api.v1.events import router as events_router
from app.api.v1.health import router as health_router
from app.api.v1.notifications import router as notifications_router
from app.api.v1.prices import router as prices_router
from app.services.calendar import build_calendar_gateway
from app.services.mailer import Mailer


def create_application(config: Settings = settings) -> FastAPI:
    configure_logging(config.LOG_LEVEL)

    app = FastAPI(title="Holiday Lets API")

    # Tenants, calendar clients and mailers are fixed for the life of the process
    registry = TenantRegistry.from_mapping(config.TENANTS, default_slug=config.DEFAULT_TENANT)
    app.state.tenant_registry = registry
    app.state.calendar_gateway = build_calendar_gateway(
        registry,
        api_url=config.GOOGLE_CALENDAR_URL,
        timeout=config.CALENDAR_TIMEOUT_SECONDS,
    )
    app.state.mailer = Mailer(registry, config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-API-Key"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(health_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(prices_router, prefix="/api")
    app.include_router(events_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    return app


app = create_application()
