"""Helpdesk Triage — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from helpdesk.adapters.persistence.database import engine
from helpdesk.config import settings
from helpdesk.infrastructure.api.routes_analytics import router as analytics_router
from helpdesk.infrastructure.api.routes_classification import router as classification_router
from helpdesk.infrastructure.api.routes_health import router as health_router
from helpdesk.infrastructure.api.routes_tickets import router as tickets_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    if not settings.openai_api_key.strip():
        logger.warning("OPENAI_API_KEY is not set; tickets will use keyword classification")
    if not settings.staff_api_token.strip():
        logger.warning("STAFF_API_TOKEN is not set; staff and admin endpoints will reject every request")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Helpdesk Triage API",
        description="Support ticket intake, AI classification with keyword fallback, and staff triage",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the dashboard frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(classification_router, prefix="/api")
    app.include_router(tickets_router, prefix="/api")
    app.include_router(analytics_router, prefix="/api")

    return app


app = create_app()
