"""FastAPI application entry point (``uvicorn joblinkhub.main:app``)."""

from contextlib import asynccontextmanager

import sentry_sdk
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from joblinkhub.api.v1 import api_router
from joblinkhub.config import Settings, settings
from joblinkhub.core.exceptions import register_exception_handlers
from joblinkhub.core.logging import setup_logging
from joblinkhub.core.middleware import OriginAllowListMiddleware
from joblinkhub.core.rate_limit import rate_limiter
from joblinkhub.db.session import engine, init_db

setup_logging()
logger = structlog.get_logger(__name__)


def init_sentry(settings: Settings) -> bool:
    """Start error tracking when a DSN is configured."""
    if not settings.SENTRY_DSN.startswith("https://"):
        logger.info("Sentry DSN not configured - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        release=settings.APP_VERSION,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        integrations=[
            FastApiIntegration(),
            # Breadcrumbs from every log record, events from ERROR up
            LoggingIntegration(level=None, event_level="ERROR"),
        ],
        attach_stacktrace=True,
        send_default_pii=False,
    )
    return True


init_sentry(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    await rate_limiter.connect()
    logger.info("Application startup complete", environment=settings.ENVIRONMENT)
    yield
    await rate_limiter.disconnect()
    await engine.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Track job applications, clicks on postings, and who applied to what.",
    lifespan=lifespan,
    swagger_ui_parameters={"persistAuthorization": True},
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# Starlette runs the last-added middleware first
app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.ALLOWED_ORIGINS)

register_exception_handlers(app)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Liveness plus the rate limiter's Redis state."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "rate_limiter": {"enabled": rate_limiter.enabled, "connected": rate_limiter.connected},
    }
