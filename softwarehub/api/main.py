"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from softwarehub.adapters.repository.postgres import run_migrations
from softwarehub.api.dependencies import build_email_sender
from softwarehub.api.v1 import router as v1_router
from softwarehub.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "SoftwareHub API v1 - Ratings, seller submissions and activation email",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Builds the configured email sender (invalid mail config fails here)
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Closes the email sender and connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    email_sender = build_email_sender(settings)

    logger.info("Connecting to database...")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store pool in app state for dependency injection
    app.state.pool = pool
    app.state.email_sender = email_sender

    logger.info("Application startup complete (email backend: %s)", settings.email_backend)

    yield

    logger.info("Shutting down application...")
    if hasattr(email_sender, "close"):
        email_sender.close()
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="softwarehub",
    description="SoftwareHub Marketplace API - Star ratings, seller submission workflow "
    "and account activation email",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.include_router(v1_router, prefix="/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
