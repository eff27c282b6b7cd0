"""Health check endpoints."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Dict, Any
import time

from distributor_search.api.dependencies import get_product_aggregator
from distributor_search.database.db import get_db
from distributor_search.services import product_repository
from distributor_search.services.product_aggregator import ProductAggregator
from distributor_search.utils.cache import cache_service
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger
from sqlalchemy import text

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
async def health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Service health: database connectivity, sync lock backend and search mode."""
    health_status = {
        "status": "healthy",
        "timestamp": time.time(),
        "dev_mode": settings.dev_mode,
        "search_source": settings.search_source,
        "checks": {}
    }

    # Check database connectivity
    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database connection failed: {str(e)}"
        }

    # Redis only backs sync locks, so its absence degrades rather than fails
    if cache_service.available:
        health_status["checks"]["redis"] = {"status": "healthy", **cache_service.get_stats()}
    else:
        health_status["checks"]["redis"] = {
            "status": "degraded",
            "message": "Redis not connected - sync locks use the database",
        }

    return health_status


@router.get("/suppliers")
async def supplier_health(
    db: Session = Depends(get_db),
    aggregator: ProductAggregator = Depends(get_product_aggregator),
) -> Dict[str, Any]:
    """Probe every active supplier concurrently."""
    try:
        suppliers = product_repository.get_supplier_configs(db)
        reports = await aggregator.health(suppliers)
        healthy = sum(1 for r in reports.values() if r.get("status") == "healthy")
        return {
            "status": "healthy" if healthy == len(reports) else "degraded",
            "healthy": healthy,
            "total": len(reports),
            "suppliers": reports,
        }
    except Exception as e:
        logger.error(f"Error checking supplier health: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
