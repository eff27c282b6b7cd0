"""Axiz connector: OAuth2 client-credentials JSON search API."""

import time
import httpx
from typing import List, Dict, Any, Optional, Mapping
from distributor_search.database.schemas import NormalizedProduct
from distributor_search.services.supplier_connector import SupplierConnector
from distributor_search.services.connectors.axiz_demo_catalog import DEMO_PRODUCTS
from distributor_search.utils.config import settings
from distributor_search.utils.helpers import (
    days_until,
    first_present,
    optional_str,
    parse_price,
    parse_quantity,
    truncate_text,
)
from distributor_search.analytics.logger import logger

MOCK_TOKEN = "mock-axiz-token"
SENTINEL_HOST = "demo.com"

# Tokens are reused for 50 minutes whatever expires_in the server declares
TOKEN_LIFETIME_SECONDS = 50 * 60

MAX_PAGE_SIZE = 1000
GENERAL_MARKET = "14"
SEARCH_PATH = "/api/services/app/Products/SearchProducts"


def extract_product_name(description: str) -> str:
    """Short display name from a long Axiz description.

    "HP Elitebook 650 G10 - Core i7..." becomes "HP Elitebook 650 G10".
    """
    if not description:
        return "N/A"
    head, sep, _ = description.partition(" - ")
    if sep and head.strip():
        return head.strip()
    return truncate_text(description, 80)


def _brand_name(raw: Mapping[str, Any]) -> Optional[str]:
    """First non-empty brand, from a `{brandName}` mapping or a plain string."""
    for key in ("brandInfo", "brand"):
        value = raw.get(key)
        if isinstance(value, Mapping):
            value = value.get("brandName")
        name = optional_str(value)
        if name:
            return name
    return None


class AxizConnector(SupplierConnector):
    """Axiz Search Products API.

    Without a real endpoint or token, and on any fetch failure, the
    connector serves its built-in demo catalog instead of raising.
    """

    timeout = 30.0
    search_fields = ("sku", "name", "description", "brand", "category")

    def __init__(self, config, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config, transport=transport)
        self.api_base_url = (config.api_endpoint or settings.axiz_api_base_url or "").rstrip("/")
        self.client_id = config.credential("client_id") or settings.axiz_client_id
        self.client_secret = config.credential("client_secret") or settings.axiz_client_secret
        self.token_endpoint = config.credential("token_endpoint") or settings.axiz_token_endpoint
        self.scope = config.credential("scope") or settings.axiz_scope
        self._access_token: Optional[str] = None
        self._token_expires_at: float = 0.0

    @property
    def demo_mode(self) -> bool:
        return not self.api_base_url or SENTINEL_HOST in self.api_base_url

    def _cache_token(self, token: str) -> str:
        self._access_token = token
        self._token_expires_at = time.monotonic() + TOKEN_LIFETIME_SECONDS
        return token

    async def get_access_token(self) -> str:
        """Cached bearer token; falls back to the mock token instead of failing."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        if not self.token_endpoint or SENTINEL_HOST in self.token_endpoint:
            return self._cache_token(MOCK_TOKEN)

        try:
            async with self.http_client() as client:
                response = await client.post(
                    self.token_endpoint,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self.client_id or "",
                        "client_secret": self.client_secret or "",
                        "scope": self.scope,
                    },
                )
                response.raise_for_status()
                token = response.json().get("access_token")
            if not token:
                raise ValueError("no access_token in token response")
            return self._cache_token(token)
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error(f"Axiz token error: {e}")
            return self._cache_token(MOCK_TOKEN)

    async def fetch_products(self, query: Optional[str] = None) -> List[NormalizedProduct]:
        """Search the Axiz catalog (single page); demo catalog on any failure."""
        try:
            token = await self.get_access_token()
            if self.demo_mode or token == MOCK_TOKEN:
                logger.info("Axiz: using demo catalog (no real API configured)")
                return self.get_demo_products()

            logger.info(f"Axiz: searching products (searchText: {query or 'all'!r})")
            async with self.http_client() as client:
                response = await client.post(
                    f"{self.api_base_url}{SEARCH_PATH}",
                    json=self._search_body(query),
                    headers={"Authorization": f"Bearer {token}"},
                )
                response.raise_for_status()
                data = response.json()

            result = data.get("result") if isinstance(data, dict) else None
            items = result.get("items") if isinstance(result, dict) else None
            if not isinstance(items, list):
                logger.warning("Axiz: unexpected API response structure, no items")
                return []

            products = [self.normalize_product(item) for item in items if isinstance(item, Mapping)]
            total = result.get("totalCount")
            logger.info(f"Axiz: fetched {len(products)} products (total available: {total or 'unknown'})")
            if len(items) >= MAX_PAGE_SIZE and isinstance(total, int) and total > MAX_PAGE_SIZE:
                logger.warning(f"Axiz: result truncated to {MAX_PAGE_SIZE} of {total} products")
            return products
        except Exception as e:
            logger.error(f"Axiz connector error: {e}; falling back to demo catalog")
            return self.get_demo_products()

    def _search_body(self, query: Optional[str]) -> Dict[str, Any]:
        return {
            "searchText": query or "",
            "pageIndex": 0,
            "maxResultCount": MAX_PAGE_SIZE,
            "market": GENERAL_MARKET,
            "filters": {
                "availability": [],
                "brands": [],
                "categories": [],
                "tags": [],
                "hasRichDataFilter": True,
                "skipCaching": False,
                "useFuzzySearch": True,
                "shouldApplyGlobalSettingsFilter": True,
            },
            "viewId": "0",
            "sortOptions": {"sortColumn": None, "sortOrder": 1},
        }

    def normalize_product(self, raw: Mapping[str, Any]) -> NormalizedProduct:
        """Normalize either the Search Products or the Price List dialect."""
        quantity = parse_quantity(first_present(raw, "availableToSell", "onHand"))
        gallery = raw.get("imageGallery")
        image = first_present(raw, "imageUrl", "defaultImageUrl")
        if not image and isinstance(gallery, list) and gallery:
            image = gallery[0]

        return NormalizedProduct(
            sku=optional_str(first_present(raw, "productIdentifier", "productCode", "itemId", "vendorId")) or "N/A",
            name=optional_str(raw.get("name")) or extract_product_name(optional_str(raw.get("productDescription")) or ""),
            description=optional_str(first_present(raw, "description", "productDescription")) or "",
            category=optional_str(first_present(raw, "category", "productCategory")),
            brand=_brand_name(raw),
            price=parse_price(raw.get("price")),
            currency=optional_str(first_present(raw, "currencyCode", "salesCurrency", "currency")) or "ZAR",
            stock_quantity=quantity,
            stock_status=self.get_stock_status(quantity),
            eta_days=days_until(raw.get("estimatedTimeOfArrival")),
            image_url=optional_str(image),
            specs={
                "productType": first_present(raw, "itemType", "productType"),
                "vendorId": raw.get("vendorId"),
                "discount": first_present(raw, "discount", "discountPercentage") or 0,
                "promotions": raw.get("promotions") or [],
                "additionalInfo": raw.get("additionalInfo") or {},
            },
        )

    def get_demo_products(self) -> List[NormalizedProduct]:
        return [SupplierConnector.normalize_product(self, item) for item in DEMO_PRODUCTS]
