"""Base contract for supplier connectors."""
import httpx
from abc import ABC
from datetime import datetime, timezone
from typing import List, Dict, Any, Optional, Mapping
from distributor_search.database.schemas import NormalizedProduct, StockStatus, SupplierConfig
from distributor_search.utils.helpers import (
    first_present,
    optional_str,
    matches_query,
    parse_price,
    parse_quantity,
)

# Quantities below this (and above zero) are reported as low stock
LOW_STOCK_THRESHOLD = 10


class SupplierConnectorError(Exception):
    """A supplier feed could not be fetched or understood."""

    def __init__(self, slug: str, message: str):
        super().__init__(f"{slug}: {message}")
        self.slug = slug


class ConnectorConfigurationError(SupplierConnectorError):
    """Credentials or endpoint needed by a connector are missing."""


class RateLimitedError(SupplierConnectorError):
    """The supplier asked us to slow down."""


def get_stock_status(quantity: Any) -> StockStatus:
    """Map a stock quantity onto out/low/in stock."""
    qty = parse_quantity(quantity)
    if qty == 0:
        return StockStatus.OUT_OF_STOCK
    if qty < LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class SupplierConnector(ABC):
    """Fetch and normalize one supplier's catalog.

    Subclasses implement ``fetch_products`` and usually ``normalize_product``
    for their own upstream dialect. Each failure policy (raise, degrade to
    demo data, or return nothing) belongs to the subclass; callers must treat
    an empty list as a valid outcome.

    The base class is what unregistered supplier slugs resolve to; it has no
    upstream and raises from ``fetch_products``.
    """

    # Per-request HTTP timeout in seconds
    timeout: float = 30.0

    # Fields the local search backstop looks at
    search_fields = ("sku", "name", "description", "brand")

    def __init__(self, config: SupplierConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.name = config.name
        self.slug = config.slug
        self.type = config.type
        self._transport = transport

    @property
    def deadline(self) -> float:
        """Upper bound the aggregator allows one fetch to take."""
        return self.timeout

    def http_client(self, **kwargs) -> httpx.AsyncClient:
        """New client bound to this connector's timeout (and test transport)."""
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport, **kwargs)

    async def fetch_products(self, query: Optional[str] = None) -> List[NormalizedProduct]:
        """Fetch the supplier's current catalog, optionally filtered upstream."""
        raise NotImplementedError(f"No connector implemented for supplier '{self.slug}'")

    async def search_products(self, query: Optional[str] = None) -> List[NormalizedProduct]:
        """Fetch, then keep products whose searchable fields contain ``query``."""
        products = await self.fetch_products(query)
        return self.filter_products(products, query)

    def filter_products(
        self, products: List[NormalizedProduct], query: Optional[str]
    ) -> List[NormalizedProduct]:
        if not query or not query.strip():
            return products
        return [
            p for p in products
            if matches_query(query, (getattr(p, field) for field in self.search_fields))
        ]

    def get_stock_status(self, quantity: Any) -> StockStatus:
        return get_stock_status(quantity)

    def normalize_product(self, raw: Mapping[str, Any]) -> NormalizedProduct:
        """Map a generic supplier record onto ``NormalizedProduct``.

        Never raises: missing fields become ``"N/A"``, None or 0.
        """
        quantity = parse_quantity(first_present(raw, "stock", "stock_quantity", "quantity", "availableToSell"))
        eta = first_present(raw, "eta", "etaDays", "eta_days")
        specs = first_present(raw, "specs", "specifications")
        return NormalizedProduct(
            sku=str(first_present(raw, "sku", "partNumber", "id") or "N/A"),
            name=str(first_present(raw, "name", "description", "title") or "N/A"),
            description=str(first_present(raw, "description", "longDescription", "summary") or ""),
            category=optional_str(first_present(raw, "category", "type")),
            brand=optional_str(first_present(raw, "brand", "manufacturer")),
            price=parse_price(raw.get("price")),
            currency=str(raw.get("currency") or "ZAR"),
            stock_quantity=quantity,
            stock_status=self.get_stock_status(quantity),
            eta_days=_positive_int(eta),
            image_url=optional_str(first_present(raw, "imageUrl", "image_url", "image")),
            product_url=optional_str(first_present(raw, "url", "productUrl", "product_url")),
            specs=dict(specs) if isinstance(specs, Mapping) else {},
        )

    async def get_health_status(self) -> Dict[str, Any]:
        """Run a full fetch and report the product count or the failure."""
        try:
            products = await self.fetch_products()
            return {
                "status": "healthy",
                "products_count": len(products),
                "last_checked": datetime.now(timezone.utc).isoformat(),
            }
        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
                "last_checked": datetime.now(timezone.utc).isoformat(),
            }


def _positive_int(value: Any) -> Optional[int]:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None
