"""Tarsus connector: bearer-token JSON product feed with rate limiting."""

import asyncio
import httpx
from typing import List, Dict, Any, Optional, Mapping, Callable, Awaitable
from distributor_search.database.schemas import NormalizedProduct
from distributor_search.services.supplier_connector import (
    SupplierConnector,
    SupplierConnectorError,
    RateLimitedError,
)
from distributor_search.utils.config import settings
from distributor_search.utils.helpers import (
    days_until,
    first_present,
    optional_str,
    parse_price,
    parse_quantity,
)
from distributor_search.utils.retry import RetryConfig, retry_async, is_rate_limit_message
from distributor_search.analytics.logger import logger

VAT_RATE = 0.15

RATE_LIMIT_STATUS_CODES = (403, 429)

# Keys known to wrap the product array, checked in order
PRODUCT_ARRAY_KEYS = ("Products", "products", "items")

RATE_LIMIT_RETRY = RetryConfig(
    max_attempts=3,
    initial_wait=10.0,
    wait_increment=10.0,
    retry_on=(RateLimitedError,),
)


def extract_product_list(data: Any) -> Optional[List[Any]]:
    """Find the product array in any of the feed's known response shapes."""
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return None
    for key in PRODUCT_ARRAY_KEYS:
        if isinstance(data.get(key), list):
            return data[key]
    for value in data.values():
        if isinstance(value, list):
            return value
    return None


def _dimension(raw: Mapping[str, Any], key: str) -> Optional[float]:
    try:
        return float(raw[key])
    except (KeyError, TypeError, ValueError):
        return None


class TarsusConnector(SupplierConnector):
    """Tarsus customer product catalogue feed.

    No token means the feed is switched off and yields nothing. Rate limits
    are retried with a growing wait; once retries run out, or on any other
    failure, the error propagates.
    """

    timeout = 60.0
    search_fields = ("sku", "name", "description", "brand", "category")

    def __init__(
        self,
        config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    ):
        super().__init__(config, transport=transport)
        self.api_url = config.api_endpoint or settings.tarsus_api_url
        self.token = config.credential("token") or settings.tarsus_api_token
        self.retry_config = RATE_LIMIT_RETRY
        self._sleep = sleep or asyncio.sleep

    @property
    def deadline(self) -> float:
        """Every attempt may use the full timeout, plus the waits between them."""
        attempts = self.retry_config.max_attempts
        waits = sum(
            self.retry_config.initial_wait + n * self.retry_config.wait_increment
            for n in range(attempts - 1)
        )
        return self.timeout * attempts + waits

    async def fetch_products(self, query: Optional[str] = None) -> List[NormalizedProduct]:
        if not self.token:
            logger.error("Tarsus: no API token configured, feed disabled")
            return []

        data = await retry_async(self._request_feed, self.retry_config, name="Tarsus", sleep=self._sleep)

        items = extract_product_list(data)
        if items is None:
            keys = ", ".join(data.keys()) if isinstance(data, dict) else type(data).__name__
            logger.warning(f"Tarsus: no product array in response ({keys})")
            return []

        products = [self.normalize_product(item) for item in items if isinstance(item, Mapping)]
        logger.info(f"Tarsus: fetched {len(products)} products")
        return self.filter_products(products, query)

    async def _request_feed(self) -> Any:
        """One feed download; rate limiting in any form raises ``RateLimitedError``."""
        try:
            async with self.http_client() as client:
                response = await client.get(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.token}",
                        "Accept": "application/json",
                        "User-Agent": "DistributorSearch/2.0",
                    },
                )
        except httpx.HTTPError as e:
            raise SupplierConnectorError(self.slug, f"feed request failed: {e}") from e

        if response.status_code in RATE_LIMIT_STATUS_CODES:
            raise RateLimitedError(self.slug, f"HTTP {response.status_code} {self._message(response)}")

        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SupplierConnectorError(self.slug, f"bad feed response: {e}") from e

        if isinstance(data, dict) and is_rate_limit_message(data.get("Message")):
            raise RateLimitedError(self.slug, f"rate limited: {data['Message']}")
        return data

    @staticmethod
    def _message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict):
            return str(body.get("Message") or body.get("message") or "")
        return ""

    def normalize_product(self, raw: Mapping[str, Any]) -> NormalizedProduct:
        price_ex_vat = parse_price(raw.get("Price_ex_Vat"))
        price = round(price_ex_vat * (1 + VAT_RATE), 2) if price_ex_vat is not None else None
        quantity = parse_quantity(raw.get("Available_Stock"))
        discounted = raw.get("Product_Discounted") == "Yes"

        return NormalizedProduct(
            sku=optional_str(first_present(raw, "Product_Number", "Manufacturing_Part_Number")) or "N/A",
            name=optional_str(first_present(raw, "Short_Advertising_Description", "Product_Description")) or "N/A",
            description=optional_str(first_present(raw, "Product_Description", "Short_Advertising_Description")) or "",
            category=optional_str(first_present(raw, "Category", "Product_Type")),
            brand=optional_str(raw.get("Manufacturer")),
            price=price,
            currency="ZAR",
            stock_quantity=quantity,
            stock_status=self.get_stock_status(quantity),
            eta_days=days_until(raw.get("ETA_Date")),
            image_url=optional_str(raw.get("Image_URL")),
            specs={
                "productType": raw.get("Product_Type"),
                "barcode": raw.get("BarCode"),
                "serialized": raw.get("Serialized") or "No",
                "priceExVat": price_ex_vat,
                "nonDiscountPriceExVat": parse_price(raw.get("Non_Discount_Price_ex_Vat")),
                "discount": (_dimension(raw, "Discount_Quantity") or 0) if discounted else 0,
                "dimensions": {
                    "width": _dimension(raw, "Each_Width"),
                    "height": _dimension(raw, "Each_Height"),
                    "length": _dimension(raw, "Each_Length"),
                    "weight": _dimension(raw, "Each_Weight"),
                },
                "exportDate": raw.get("Export_Date"),
            },
        )
