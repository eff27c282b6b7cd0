"""In-process snapshot of the aggregated supplier catalog."""
import asyncio
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Union
from distributor_search.database.schemas import SupplierProduct
from distributor_search.analytics.logger import logger


@dataclass
class CatalogSnapshot:
    """A loaded catalog plus the suppliers that failed to contribute to it."""

    products: List[SupplierProduct]
    failed_suppliers: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_suppliers


CatalogLoader = Callable[[], Awaitable[Union[CatalogSnapshot, List[SupplierProduct]]]]


class CatalogCache:
    """Aggregated catalog loaded once, then served until invalidated.

    Concurrent first requests share a single load. ``ttl`` (seconds) makes
    a snapshot expire on its own; 0 keeps it until ``invalidate()``. A
    snapshot missing a failed supplier expires after ``partial_ttl`` so the
    supplier is retried.
    """

    def __init__(self, ttl: float = 0, partial_ttl: float = 60):
        self.ttl = ttl
        self.partial_ttl = partial_ttl
        self._products: Optional[List[SupplierProduct]] = None
        self._loaded_at: Optional[float] = None
        self._expires_after: float = 0
        self._lock = asyncio.Lock()
        self._stats = {"hits": 0, "loads": 0, "partial_loads": 0, "invalidations": 0}

    @property
    def is_loaded(self) -> bool:
        if self._products is None or self._loaded_at is None:
            return False
        if self._expires_after and time.monotonic() - self._loaded_at > self._expires_after:
            return False
        return True

    async def get_or_load(self, loader: CatalogLoader) -> List[SupplierProduct]:
        if self.is_loaded:
            self._stats["hits"] += 1
            return self._products

        async with self._lock:
            # Another request may have finished loading while we waited
            if self.is_loaded:
                self._stats["hits"] += 1
                return self._products
            return await self._load(loader)

    async def refresh(self, loader: CatalogLoader) -> List[SupplierProduct]:
        async with self._lock:
            return await self._load(loader)

    def invalidate(self) -> None:
        if self._products is not None:
            logger.info(f"Catalog cache invalidated ({len(self._products)} products dropped)")
        self._products = None
        self._loaded_at = None
        self._stats["invalidations"] += 1

    async def _load(self, loader: CatalogLoader) -> List[SupplierProduct]:
        logger.info("Loading catalog from suppliers...")
        snapshot = await loader()
        if not isinstance(snapshot, CatalogSnapshot):
            snapshot = CatalogSnapshot(products=snapshot)

        self._products = snapshot.products
        self._loaded_at = time.monotonic()
        self._expires_after = self.ttl
        self._stats["loads"] += 1

        if snapshot.complete:
            logger.info(f"Catalog cache loaded with {len(snapshot.products)} products")
        else:
            if self.partial_ttl and (not self.ttl or self.partial_ttl < self.ttl):
                self._expires_after = self.partial_ttl
            self._stats["partial_loads"] += 1
            logger.warning(
                f"Catalog cache loaded with {len(snapshot.products)} products, missing "
                f"{', '.join(snapshot.failed_suppliers)}; expires in {self._expires_after}s"
            )
        return snapshot.products

    def get_stats(self):
        return {**self._stats, "loaded": self.is_loaded, "size": len(self._products or [])}
