# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from amanah import __version__
from amanah.database import SessionLocal, init_db
from amanah.schemas.common import HealthResponse
from amanah.services import auth_service
from amanah.services.rbac_seed_service import seed_rbac_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Creating tables and seeding access control data...")
    init_db()

    db = SessionLocal()
    try:
        seed_rbac_data(db)
        removed = auth_service.cleanup_expired_sessions(db)
        if removed:
            logger.info(f"Removed {removed} expired sessions")
    finally:
        db.close()

    yield

    logger.info("Shutting down")


app = FastAPI(
    title="Amanah Access",
    description="Role and permission based access control for the Amanah back office",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# Import and include API router after it's created
from amanah.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
