"""Donor Privacy API — FastAPI host for the anonymous donor visibility policy.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DonorPrivacyError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from donor_privacy.infrastructure.database import init_db
from donor_privacy.infrastructure.observability import setup_logging
from donor_privacy.config import get_settings
from donor_privacy.api.error_handlers import register_error_handlers
from donor_privacy.api.routes import health, collectives

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Donor privacy API started")
    yield
    logger.info("Donor privacy API shutting down")


app = FastAPI(
    title="Donor Privacy API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(collectives.router)

register_error_handlers(app)
