"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from equine_center.api import (
    command_center_router,
    horses_router,
    locations_router,
    owners_router,
    races_router,
    season_router,
    views_router,
)
from equine_center.config import get_settings
from equine_center.database import AsyncSessionLocal, init_db
from equine_center.error_handlers import register_error_handlers
from equine_center.logging_config import setup_logging
from equine_center.seed import seed_database
from equine_center.services import CommandCenterMonitor

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(settings)
    await init_db()
    if settings.seed_sample_data:
        async with AsyncSessionLocal() as session:
            await seed_database(session, settings)
    if settings.command_center_monitor_enabled:
        app.state.monitor.start()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield
    # Shutdown
    await app.state.monitor.stop()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Horse tracking, location and status dashboard service",
    lifespan=lifespan,
)
app.state.monitor = CommandCenterMonitor(AsyncSessionLocal, settings)

register_error_handlers(app)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register API routers
app.include_router(horses_router, prefix="/api")
app.include_router(owners_router, prefix="/api")
app.include_router(locations_router, prefix="/api")
app.include_router(races_router, prefix="/api")
app.include_router(views_router, prefix="/api")
app.include_router(command_center_router, prefix="/api")
app.include_router(season_router, prefix="/api")
