"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from distributor_search.api.routes import products, suppliers, sync_jobs, health
from distributor_search.api.middleware import LoggingMiddleware
from distributor_search.database.db import init_db
from distributor_search.analytics.logger import logger
from distributor_search.utils.config import settings
from distributor_search.utils.validation import validate_config
from distributor_search.utils.cache import cache_service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting application...")

    # Validate configuration
    config_status = validate_config()
    if not config_status["valid"]:
        logger.error("Configuration validation failed - some features may not work")

    # Initialize database
    try:
        init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")

    # Redis backs the per-supplier sync locks
    if settings.cache_enabled:
        await cache_service.connect()

    mode = "live supplier" if settings.dev_mode else "database"
    logger.info(f"Application startup complete ({mode} search)")

    yield

    # Shutdown
    logger.info("Shutting down application...")

    if settings.cache_enabled:
        try:
            await cache_service.disconnect()
        except Exception as e:
            logger.warning(f"Error disconnecting Redis: {e}")


# Create FastAPI app
app = FastAPI(
    title="Distributor Search API",
    description="Unified product search across IT distributor catalogs",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
cors_origins = settings.cors_origins.split(",") if settings.cors_origins else ["*"]
if settings.production_mode and "*" in cors_origins:
    logger.warning("CORS is set to allow all origins in production. Consider restricting this.")
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Logging middleware
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(products.router)
app.include_router(suppliers.router)
app.include_router(sync_jobs.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "Distributor Search API", "version": "1.0.0", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("distributor_search.api.main:app", host=settings.api_host, port=settings.api_port, reload=True)
