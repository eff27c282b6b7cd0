"""Supplier administration and sync trigger routes."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from distributor_search.api.dependencies import get_product_aggregator, get_sync_job_runner
from distributor_search.api.schemas import (
    PriceHistoryListResponse,
    SupplierListResponse,
    SyncLogListResponse,
    SyncTriggerResponse,
)
from distributor_search.database.db import get_db
from distributor_search.database.schemas import SupplierResponse, SupplierUpdate, SyncLogResponse
from distributor_search.services import product_repository
from distributor_search.services.price_tracker import price_tracker
from distributor_search.services.product_aggregator import ProductAggregator
from distributor_search.services.sync_jobs import SyncJobRunner
from distributor_search.analytics.logger import logger

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    include_inactive: bool = Query(False, alias="includeInactive"),
    db: Session = Depends(get_db),
):
    """List suppliers (active ones unless ``includeInactive`` is set)."""
    try:
        suppliers = product_repository.list_suppliers(db, active_only=not include_inactive)
        return SupplierListResponse(
            suppliers=[SupplierResponse.model_validate(s) for s in suppliers],
            count=len(suppliers),
        )
    except Exception as e:
        logger.error(f"Error listing suppliers: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    update: SupplierUpdate,
    db: Session = Depends(get_db),
    aggregator: ProductAggregator = Depends(get_product_aggregator),
):
    """Activate or deactivate a supplier."""
    try:
        supplier = product_repository.get_supplier(db, supplier_id)
        if not supplier:
            raise HTTPException(status_code=404, detail="Supplier not found")

        supplier = product_repository.update_supplier_status(db, supplier, update.status)
        aggregator.invalidate_catalog()
        logger.info(f"Supplier {supplier.name} is now {supplier.status}")
        return SupplierResponse.model_validate(supplier)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating supplier {supplier_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{supplier_id}/sync", status_code=202, response_model=SyncTriggerResponse)
async def trigger_sync(
    supplier_id: int,
    db: Session = Depends(get_db),
    runner: SyncJobRunner = Depends(get_sync_job_runner),
):
    """Start a background sync and return its job id straight away."""
    try:
        supplier = product_repository.get_supplier(db, supplier_id)
        if not supplier:
            raise HTTPException(status_code=404, detail="Supplier not found")

        if runner.is_running(supplier_id) or runner.service.lock.has_running_sync(db, supplier_id):
            raise HTTPException(status_code=409, detail=f"Sync already running for {supplier.name}")

        job_id = runner.submit(supplier_id)
        return SyncTriggerResponse(
            message=f"Sync started for {supplier.name}",
            supplier_id=supplier_id,
            job_id=job_id,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error triggering sync for supplier {supplier_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{supplier_id}/sync-logs", response_model=SyncLogListResponse)
async def get_sync_logs(
    supplier_id: int,
    limit: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Most recent sync attempts for a supplier."""
    supplier = product_repository.get_supplier(db, supplier_id)
    if not supplier:
        raise HTTPException(status_code=404, detail="Supplier not found")

    logs = product_repository.recent_sync_logs(db, supplier_id, limit=limit)
    return SyncLogListResponse(
        supplier_id=supplier_id,
        logs=[SyncLogResponse.model_validate(log) for log in logs],
    )


@router.get("/{supplier_id}/products/{sku}/price-history", response_model=PriceHistoryListResponse)
async def get_price_history(
    supplier_id: int,
    sku: str,
    days: Optional[int] = Query(None, ge=1, description="Only changes from the last N days"),
    db: Session = Depends(get_db),
):
    """Recorded price changes of one synced product, newest first."""
    product = product_repository.get_product(db, supplier_id, sku)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    history = price_tracker.get_price_history(db, product.id, days=days)
    return PriceHistoryListResponse(
        supplier_id=supplier_id,
        sku=sku,
        current_price=product.price,
        history=history,
    )
