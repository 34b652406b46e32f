from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from registry_api.api import health, lookup, metrics
from registry_api.core.config import settings
from registry_api.core.logging import configure_logging
from registry_api.db.session import engine
from registry_api.services.lookup_cache import LookupCache
import logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Startup
    logger.info(f"{settings.PROJECT_NAME} starting up ({settings.ENVIRONMENT})...")
    cache = LookupCache.get_instance()
    cache.start()
    yield
    # Shutdown
    logger.info(f"{settings.PROJECT_NAME} shutting down, stopping lookup cache sweep...")
    await cache.shutdown()
    await engine.dispose()
    logger.info("Shutdown complete")

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Domain-based lookup of MCP servers",
    version="0.1.0",
    lifespan=lifespan
)

# Lookups are called from browser extensions and agents on arbitrary origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.INTERNAL_API_STR, tags=["health"])
app.include_router(metrics.router, prefix=settings.INTERNAL_API_STR, tags=["metrics"])
app.include_router(lookup.router, prefix=settings.API_V1_STR, tags=["lookup"])
