"""
Main FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from wonderpay import __version__
from wonderpay.config import get_settings
from wonderpay.api import router as api_router
from wonderpay.db.database import init_db
from wonderpay.errors import register_error_handlers

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} started ({settings.app_env})")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Capital pricing and financing applications for WonderPay",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": __version__}
