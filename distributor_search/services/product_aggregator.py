"""Product aggregation service that queries every active supplier in parallel."""

import asyncio
import locale
from typing import List, Dict, Optional, Sequence, Tuple
from distributor_search.database.schemas import (
    NormalizedProduct,
    ProductSearchQuery,
    ProductSearchResult,
    SupplierConfig,
    SupplierProduct,
    SupplierStatus,
)
from distributor_search.services.catalog_cache import CatalogCache, CatalogSnapshot
from distributor_search.services.connector_registry import ConnectorRegistry, connector_registry
from distributor_search.services.supplier_connector import SupplierConnector
from distributor_search.utils.config import settings
from distributor_search.utils.helpers import matches_query, stable_product_id
from distributor_search.analytics.logger import logger


def tag_products(
    products: Sequence[NormalizedProduct], supplier: SupplierConfig
) -> List[SupplierProduct]:
    """Attach supplier identity and a stable id to each product."""
    return [
        SupplierProduct(
            **product.model_dump(),
            id=stable_product_id(supplier.slug, product.sku),
            supplier_id=supplier.id,
            supplier_name=supplier.name,
            supplier_slug=supplier.slug,
        )
        for product in products
    ]


def apply_filters(products: List[SupplierProduct], params: ProductSearchQuery) -> List[SupplierProduct]:
    """Apply text, supplier, category, price and stock filters (AND-combined).

    Products without a price never satisfy a price bound.
    """
    filtered = products

    if params.q and params.q.strip():
        filtered = [
            p for p in filtered
            if matches_query(params.q, (p.sku, p.name, p.description, p.brand))
        ]

    if params.supplier:
        filtered = [p for p in filtered if p.supplier_slug == params.supplier]

    if params.category:
        category_lower = params.category.lower()
        filtered = [p for p in filtered if (p.category or "").lower() == category_lower]

    if params.min_price is not None:
        filtered = [p for p in filtered if p.price is not None and p.price >= params.min_price]

    if params.max_price is not None:
        filtered = [p for p in filtered if p.price is not None and p.price <= params.max_price]

    if params.stock_status:
        filtered = [p for p in filtered if p.stock_status == params.stock_status]

    return filtered


def _collation_key(text: Optional[str]) -> str:
    return locale.strxfrm((text or "").casefold())


def sort_products(products: List[SupplierProduct]) -> List[SupplierProduct]:
    """Order by supplier name, then product name (locale-aware)."""
    return sorted(
        products,
        key=lambda p: (_collation_key(p.supplier_name), _collation_key(p.name), p.sku),
    )


def paginate(products: List[SupplierProduct], params: ProductSearchQuery) -> ProductSearchResult:
    page = products[params.offset:params.offset + params.limit]
    return ProductSearchResult(
        products=page,
        total=len(products),
        limit=params.limit,
        offset=params.offset,
    )


class ProductAggregator:
    """Fans out to supplier connectors and merges their products.

    Each supplier runs in isolation with its own deadline: an exception,
    timeout or empty answer from one never removes another's products, and
    aggregation itself never raises.
    """

    def __init__(
        self,
        registry: Optional[ConnectorRegistry] = None,
        cache: Optional[CatalogCache] = None,
        timeout: Optional[float] = None,
    ):
        self.registry = registry or connector_registry
        self.cache = cache
        self.timeout = timeout
        self._connectors: Dict[str, Tuple[SupplierConfig, SupplierConnector]] = {}

    def get_connector(self, supplier: SupplierConfig) -> SupplierConnector:
        """Connector for ``supplier``, reused while its configuration is unchanged."""
        cached = self._connectors.get(supplier.slug)
        if cached and cached[0] == supplier:
            return cached[1]
        connector = self.registry.get_connector(supplier)
        self._connectors[supplier.slug] = (supplier, connector)
        return connector

    async def _fetch_supplier(
        self, supplier: SupplierConfig, query: Optional[str], search: bool
    ) -> Optional[List[SupplierProduct]]:
        """Tagged products of one supplier, or None when it failed or timed out."""
        connector = self.get_connector(supplier)
        deadline = self.timeout or connector.deadline
        call = connector.search_products(query) if search else connector.fetch_products(query)

        try:
            products = await asyncio.wait_for(call, timeout=deadline)
        except asyncio.TimeoutError:
            logger.warning(f"Supplier {supplier.name} timed out after {deadline:.0f}s")
            return None
        except Exception as e:
            logger.warning(f"Supplier {supplier.name} failed: {e}", exc_info=True)
            return None

        if not products:
            logger.info(f"Supplier {supplier.name} returned no products")
            return []

        logger.info(f"Supplier {supplier.name} contributed {len(products)} products")
        return tag_products(products, supplier)

    async def _gather(
        self,
        suppliers: Sequence[SupplierConfig],
        query: Optional[str],
        search: bool,
    ) -> CatalogSnapshot:
        active = [s for s in suppliers if s.status == SupplierStatus.ACTIVE]
        if not active:
            logger.warning("No active suppliers to query")
            return CatalogSnapshot(products=[])

        results = await asyncio.gather(
            *(self._fetch_supplier(supplier, query, search) for supplier in active)
        )

        snapshot = CatalogSnapshot(products=[])
        contributing = 0
        for supplier, products in zip(active, results):
            if products is None:
                snapshot.failed_suppliers.append(supplier.slug)
                continue
            if products:
                contributing += 1
            snapshot.products.extend(products)

        logger.info(
            f"Aggregated {len(snapshot.products)} products from {contributing}/{len(active)} suppliers"
        )
        return snapshot

    async def gather_products(
        self,
        suppliers: Sequence[SupplierConfig],
        query: Optional[str] = None,
        search: bool = True,
    ) -> List[SupplierProduct]:
        """Query every active supplier concurrently and merge the results."""
        snapshot = await self._gather(suppliers, query, search)
        return snapshot.products

    async def load_catalog(self, suppliers: Sequence[SupplierConfig]) -> CatalogSnapshot:
        """Full unfiltered catalog of every active supplier, noting which ones failed."""
        return await self._gather(suppliers, query=None, search=False)

    async def refresh_catalog(self, suppliers: Sequence[SupplierConfig]) -> List[SupplierProduct]:
        """Reload the cached catalog now; without a cache just fetch it."""
        if self.cache is None:
            snapshot = await self.load_catalog(suppliers)
            return snapshot.products
        return await self.cache.refresh(lambda: self.load_catalog(suppliers))

    def invalidate_catalog(self) -> None:
        if self.cache is not None:
            self.cache.invalidate()

    async def search(
        self, suppliers: Sequence[SupplierConfig], params: ProductSearchQuery
    ) -> ProductSearchResult:
        """Filter, sort and paginate products across suppliers.

        With a cache the full catalog is loaded once and filtered locally;
        without one each search fans out with the query.
        """
        if self.cache is not None:
            products = await self.cache.get_or_load(lambda: self.load_catalog(suppliers))
        else:
            products = await self.gather_products(suppliers, query=params.q)

        filtered = apply_filters(products, params)
        return paginate(sort_products(filtered), params)

    async def health(self, suppliers: Sequence[SupplierConfig]) -> Dict[str, Dict]:
        """Health report of every active supplier's connector, run concurrently."""
        active = [s for s in suppliers if s.status == SupplierStatus.ACTIVE]
        reports = await asyncio.gather(
            *(self.get_connector(s).get_health_status() for s in active)
        )
        return {s.slug: report for s, report in zip(active, reports)}


def build_aggregator() -> ProductAggregator:
    """Aggregator configured from settings."""
    cache = None
    if settings.catalog_cache_enabled:
        cache = CatalogCache(
            ttl=settings.catalog_cache_ttl,
            partial_ttl=settings.catalog_cache_partial_ttl,
        )
    return ProductAggregator(
        cache=cache,
        timeout=settings.supplier_search_timeout or None,
    )


# Global aggregator instance
product_aggregator = build_aggregator()
