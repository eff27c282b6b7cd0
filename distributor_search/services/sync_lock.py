"""Keeps two syncs of the same supplier from running at once."""
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy.orm import Session
from distributor_search.database.models import SyncLog
from distributor_search.database.schemas import SyncStatus
from distributor_search.utils.cache import CacheService, cache_service
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger


class SyncAlreadyRunningError(RuntimeError):
    """A sync for this supplier is already in progress."""

    def __init__(self, supplier_id: int):
        super().__init__(f"Sync already running for supplier {supplier_id}")
        self.supplier_id = supplier_id


class SyncLock:
    """Per-supplier lock.

    Uses a Redis key when Redis is connected. Otherwise an ``in_progress``
    sync log younger than ``timeout_minutes`` counts as a held lock, so a
    crashed run stops blocking once it goes stale.
    """

    def __init__(self, cache: Optional[CacheService] = None, timeout_minutes: Optional[int] = None):
        self.cache = cache or cache_service
        self.timeout_minutes = timeout_minutes or settings.sync_lock_timeout_minutes

    @staticmethod
    def key(supplier_id: int) -> str:
        return f"sync_lock:supplier:{supplier_id}"

    def has_running_sync(self, db: Session, supplier_id: int) -> bool:
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=self.timeout_minutes)
        running = (
            db.query(SyncLog.id)
            .filter(
                SyncLog.supplier_id == supplier_id,
                SyncLog.status == SyncStatus.IN_PROGRESS.value,
                SyncLog.started_at >= cutoff,
            )
            .first()
        )
        return running is not None

    async def acquire(self, db: Session, supplier_id: int) -> bool:
        acquired = await self.cache.acquire_lock(self.key(supplier_id), ttl=self.timeout_minutes * 60)
        if acquired is not None:
            return acquired
        # Redis unavailable
        if self.has_running_sync(db, supplier_id):
            logger.info(f"Supplier {supplier_id} has a sync in progress")
            return False
        return True

    async def release(self, supplier_id: int) -> None:
        await self.cache.release_lock(self.key(supplier_id))
