"""
Vibe Gateway - Main Application Entry Point

A P2P student lending service: wallets topped up through Stripe,
peer-funded loan requests, repayments split between lenders, and
AI-assisted pricing and document verification.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from src import __version__
from src.core.config import settings
from src.core.dependencies import get_ai_client
from src.core.logging import setup_logging
from src.core.metrics import get_metrics, get_metrics_content_type
from src.infrastructure.database import db_manager
from src.presentation.api import api_router
from src.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


OPENAPI_TAGS = [
    {"name": "Health", "description": "Liveness and dependency status."},
    {"name": "Profile", "description": "The caller's profile and borrowing record."},
    {"name": "Wallet", "description": "Balances, Stripe top-ups, withdrawals and the ledger."},
    {"name": "Loans", "description": "Loan requests, funding, rate quotes and repayment."},
    {"name": "Verification", "description": "AI checks of government IDs and prescriptions."},
    {"name": "Agreements", "description": "Loan agreements and their signatures."},
    {"name": "Payments", "description": "Product purchases, subscriptions and Stripe webhooks."},
    {"name": "Chat", "description": "The Vibe AI assistant."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Set up logging and refuse to start without a JWT secret
    - Initialize database connection pool and create missing tables
    - Report which external integrations are live
    - Clean up on shutdown
    """
    setup_logging()
    if not settings.supabase_jwt_secret:
        raise RuntimeError("SUPABASE_JWT_SECRET must be set")

    db_manager.init()
    await db_manager.create_tables()

    logger = structlog.get_logger(__name__)
    logger.info(
        "application_started",
        version=__version__,
        ai_mode="live" if get_ai_client().is_configured else "demo",
        payments_configured=bool(settings.stripe_secret_key),
        webhooks_configured=bool(settings.stripe_webhook_secret),
        metrics_enabled=settings.metrics_enabled,
    )

    yield

    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="Vibe Gateway",
    description="P2P Student Lending Service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


if settings.metrics_enabled:

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=get_metrics(),
            media_type=get_metrics_content_type(),
        )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")
