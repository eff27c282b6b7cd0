"""Supplier sync: pull each supplier's catalog into the products table."""
import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from distributor_search.database.db import SessionLocal
from distributor_search.database.models import Product, Supplier, SyncLog
from distributor_search.database.schemas import (
    NormalizedProduct,
    SupplierConfig,
    SupplierStatus,
    SyncStatus,
)
from distributor_search.services.connector_registry import ConnectorRegistry, connector_registry
from distributor_search.services.price_tracker import PriceTracker, price_tracker
from distributor_search.services.product_aggregator import product_aggregator
from distributor_search.services.sync_lock import SyncAlreadyRunningError, SyncLock
from distributor_search.analytics.logger import logger


class SupplierNotFoundError(LookupError):
    def __init__(self, supplier_id: int):
        super().__init__(f"Supplier {supplier_id} not found")
        self.supplier_id = supplier_id


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncService:
    """Fetches a supplier's catalog and upserts it, one savepoint per product.

    A failing product is rolled back on its own and recorded in the sync
    log; the rest of the batch still lands. Every attempt leaves a SyncLog
    row behind.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        registry: Optional[ConnectorRegistry] = None,
        lock: Optional[SyncLock] = None,
        tracker: Optional[PriceTracker] = None,
        on_success: Optional[Callable[[int], None]] = None,
    ):
        self.session_factory = session_factory
        self.registry = registry or connector_registry
        self.lock = lock or SyncLock()
        self.tracker = tracker or price_tracker
        self.on_success = on_success

    async def sync_supplier(self, supplier_id: int) -> Dict[str, Any]:
        """Sync one supplier.

        Raises:
            SupplierNotFoundError: no supplier with this id
            SyncAlreadyRunningError: another sync of this supplier holds the lock
        """
        db = self.session_factory()
        try:
            supplier = db.get(Supplier, supplier_id)
            if supplier is None:
                raise SupplierNotFoundError(supplier_id)

            if not await self.lock.acquire(db, supplier_id):
                raise SyncAlreadyRunningError(supplier_id)

            try:
                return await self._run(db, supplier)
            finally:
                await self.lock.release(supplier_id)
        finally:
            db.close()

    async def _run(self, db: Session, supplier: Supplier) -> Dict[str, Any]:
        started = time.monotonic()
        sync_log = SyncLog(
            supplier_id=supplier.id,
            status=SyncStatus.IN_PROGRESS.value,
            started_at=_utcnow(),
        )
        db.add(sync_log)
        db.commit()
        logger.info(f"Starting sync for {supplier.name} (log {sync_log.id})")

        config = SupplierConfig.model_validate(supplier)
        try:
            connector = self.registry.get_connector(config)
            products = await connector.fetch_products()
        except Exception as e:
            logger.error(f"Sync failed for {supplier.name}: {e}", exc_info=True)
            self._finish(db, sync_log, started, SyncStatus.ERROR, 0, [str(e)])
            return self._result(supplier, sync_log, 0, [str(e)])

        # Row writes block, so they run in a worker thread with their own session
        result = await asyncio.to_thread(
            self._persist, supplier.id, sync_log.id, products, started
        )

        logger.info(
            f"Synced {result['products_synced']}/{len(products)} products for {result['supplier']} "
            f"({result['price_changes']} price changes, {len(result['errors'])} errors) "
            f"in {result['duration_ms']}ms"
        )
        if self.on_success:
            self.on_success(supplier.id)
        return result

    def _persist(
        self,
        supplier_id: int,
        sync_log_id: int,
        products: List[NormalizedProduct],
        started: float,
    ) -> Dict[str, Any]:
        db = self.session_factory()
        try:
            supplier = db.get(Supplier, supplier_id)
            sync_log = db.get(SyncLog, sync_log_id)
            synced, price_changes, errors = self._upsert_products(db, supplier_id, products)
            supplier.last_sync_at = _utcnow()
            self._finish(db, sync_log, started, SyncStatus.SUCCESS, synced, errors)
            return self._result(supplier, sync_log, synced, errors, price_changes)
        finally:
            db.close()

    def _upsert_products(
        self, db: Session, supplier_id: int, products: List[NormalizedProduct]
    ) -> Tuple[int, int, List[str]]:
        synced = 0
        price_changes = 0
        errors: List[str] = []

        for product in products:
            try:
                with db.begin_nested():
                    if self.upsert_product(db, supplier_id, product):
                        price_changes += 1
                synced += 1
            except Exception as e:
                logger.warning(f"Failed to sync SKU {product.sku} for supplier {supplier_id}: {e}")
                errors.append(f"SKU {product.sku}: {e}")

        return synced, price_changes, errors

    def upsert_product(self, db: Session, supplier_id: int, product: NormalizedProduct) -> bool:
        """Insert or update one product. Returns True when its price changed."""
        if not product.sku or product.sku == "N/A":
            raise ValueError("missing SKU")

        now = _utcnow()
        existing = (
            db.query(Product)
            .filter(Product.sku == product.sku, Product.supplier_id == supplier_id)
            .one_or_none()
        )

        if existing is None:
            db.add(Product(
                supplier_id=supplier_id,
                last_updated=now,
                **product.model_dump(),
            ))
            db.flush()
            return False

        price_changed = self.tracker.record_price_change(
            db, existing, product.price, product.currency
        )
        existing.name = product.name
        existing.description = product.description
        existing.price = product.price
        existing.stock_quantity = product.stock_quantity
        existing.stock_status = product.stock_status
        existing.last_updated = now
        db.flush()
        return price_changed

    def _finish(
        self,
        db: Session,
        sync_log: SyncLog,
        started: float,
        status: SyncStatus,
        synced: int,
        errors: List[str],
    ) -> None:
        sync_log.status = status.value
        sync_log.products_synced = synced
        sync_log.errors = "; ".join(errors) if errors else None
        sync_log.completed_at = _utcnow()
        sync_log.duration_ms = int((time.monotonic() - started) * 1000)
        db.commit()

    @staticmethod
    def _result(
        supplier: Supplier,
        sync_log: SyncLog,
        synced: int,
        errors: List[str],
        price_changes: int = 0,
    ) -> Dict[str, Any]:
        return {
            "supplier_id": supplier.id,
            "supplier": supplier.name,
            "sync_log_id": sync_log.id,
            "status": sync_log.status,
            "products_synced": synced,
            "price_changes": price_changes,
            "errors": errors,
            "duration_ms": sync_log.duration_ms,
        }

    async def sync_all_suppliers(self) -> List[Dict[str, Any]]:
        """Sync every active supplier, one after another."""
        db = self.session_factory()
        try:
            supplier_ids = [
                row.id
                for row in db.query(Supplier.id)
                .filter(Supplier.status == SupplierStatus.ACTIVE.value)
                .order_by(Supplier.id)
                .all()
            ]
        finally:
            db.close()

        logger.info(f"Syncing {len(supplier_ids)} active suppliers")
        results = []
        for supplier_id in supplier_ids:
            try:
                results.append(await self.sync_supplier(supplier_id))
            except SyncAlreadyRunningError as e:
                logger.warning(str(e))
                results.append({"supplier_id": supplier_id, "status": "skipped", "errors": [str(e)]})
            except Exception as e:
                logger.error(f"Unexpected error syncing supplier {supplier_id}: {e}", exc_info=True)
                results.append({"supplier_id": supplier_id, "status": SyncStatus.ERROR.value, "errors": [str(e)]})
        return results


def _invalidate_catalog(supplier_id: int) -> None:
    product_aggregator.invalidate_catalog()


# Global sync service instance
sync_service = SyncService(on_success=_invalidate_catalog)
