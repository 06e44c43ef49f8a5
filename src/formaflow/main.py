"""Entry point: ``create_app()`` builds the ASGI app, ``run()`` serves it locally."""

import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from formaflow.api import (
    attendance,
    auth,
    export_sessions,
    health,
    session_validation,
    sites,
    training_session,
)
from formaflow.core.exception_handlers import register_exception_handlers
from formaflow.core.logging import configure_logging, get_logger
from formaflow.core.sentry import init_sentry
from formaflow.middleware.logging import RequestIDMiddleware
from formaflow.middleware.sentry import SentryContextMiddleware

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

SESSION_COOKIE_MAX_AGE = 14 * 24 * 3600

# Order matters: /training-sessions/pending is declared by session_validation
# and has to be registered ahead of /training-sessions/{session_id}.
ROUTER_MODULES = (
    health,
    auth,
    sites,
    session_validation,
    training_session,
    attendance,
    export_sessions,
)


@dataclass(frozen=True)
class AppSettings:
    environment: str
    session_secret_key: str
    port: int

    @classmethod
    def from_env(cls) -> "AppSettings":
        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            session_secret_key=os.getenv(
                "SESSION_SECRET_KEY", "dev-secret-key-change-in-production"
            ),
            port=int(os.getenv("PORT", "8000")),
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    started_at = datetime.now()
    health.set_app_start_time(started_at)
    logger.info("app.startup", started_at=started_at.isoformat())
    yield
    logger.info("app.shutdown")


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or AppSettings.from_env()

    app = FastAPI(
        title="FormaFlow API",
        description="Training session scheduling, HR/HSE validation and attendance",
        version="0.1.0",
        lifespan=lifespan,
    )
    register_exception_handlers(app)

    # add_middleware prepends, so RequestIDMiddleware ends up outermost
    if init_sentry():
        app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        max_age=SESSION_COOKIE_MAX_AGE,
        same_site="lax",
        https_only=settings.is_production,
    )
    app.add_middleware(RequestIDMiddleware)

    for module in ROUTER_MODULES:
        app.include_router(module.router)

    logger.info("app.configured", environment=settings.environment)
    return app


def run() -> None:
    settings = AppSettings.from_env()
    uvicorn.run(
        "formaflow.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
    )
