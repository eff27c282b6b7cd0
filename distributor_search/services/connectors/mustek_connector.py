"""Mustek connector: CSV stock list over HTTP, authenticated by customer token."""

import csv
import io
import httpx
from typing import List, Dict, Any, Optional, Mapping
from distributor_search.database.schemas import NormalizedProduct
from distributor_search.services.supplier_connector import (
    SupplierConnector,
    SupplierConnectorError,
    ConnectorConfigurationError,
)
from distributor_search.utils.config import settings
from distributor_search.utils.helpers import parse_price, parse_quantity, optional_str
from distributor_search.analytics.logger import logger

# Column layout of the feed when it arrives without a header row
DEFAULT_COLUMNS = {
    "item_id": 0,
    "description": 1,
    "qty": 2,
    "price": 3,
    "supplier_item_id": 4,
    "product_line": 5,
}

HEADER_MARKERS = ("itemid", "description")

MIN_COLUMNS = 4


def detect_columns(header: List[str]) -> Dict[str, int]:
    """Build a column map from a header row.

    Columns the header does not name keep their default position.
    """
    cols = [c.strip().lower() for c in header]

    def find(predicate) -> Optional[int]:
        for idx, col in enumerate(cols):
            if predicate(col):
                return idx
        return None

    found = {
        "item_id": find(lambda c: c == "itemid"),
        "description": find(lambda c: c == "description"),
        "qty": find(lambda c: "qty" in c or "available" in c),
        "price": find(lambda c: c == "price"),
        "supplier_item_id": find(lambda c: "supplier" in c),
        "product_line": find(lambda c: "productline" in c or "brand" in c or "line" in c),
    }
    return {key: DEFAULT_COLUMNS[key] if idx is None else idx for key, idx in found.items()}


def is_header(row: List[str]) -> bool:
    line = ",".join(row).lower()
    return any(marker in line for marker in HEADER_MARKERS)


class MustekConnector(SupplierConnector):
    """Mustek ItemsStock feed.

    The feed is CSV without a dependable header. A failed download or an
    unreadable body raises ``SupplierConnectorError``; this connector never
    hides a broken feed behind an empty result.
    """

    timeout = 10.0

    def __init__(self, config, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config, transport=transport)
        self.api_url = config.api_endpoint or settings.mustek_api_url
        self.token = config.credential("token") or settings.mustek_api_token

    async def fetch_products(self, query: Optional[str] = None) -> List[NormalizedProduct]:
        """Download and parse the full stock list. ``query`` is not supported upstream."""
        if not self.token:
            raise ConnectorConfigurationError(self.slug, "no customer token configured")

        try:
            async with self.http_client() as client:
                response = await client.get(
                    self.api_url,
                    params={"CustomerToken": self.token},
                    headers={"User-Agent": "DistributorSearch/2.0", "Accept": "text/csv, */*"},
                )
                response.raise_for_status()
            rows = self.parse_csv(response.text)
        except httpx.HTTPError as e:
            logger.error(f"Mustek connector error: {e}")
            raise SupplierConnectorError(self.slug, f"feed request failed: {e}") from e
        except (csv.Error, UnicodeDecodeError) as e:
            logger.error(f"Mustek feed could not be parsed: {e}")
            raise SupplierConnectorError(self.slug, f"unreadable feed: {e}") from e

        products = [self.normalize_product(row) for row in rows]
        logger.info(f"Mustek: parsed {len(products)} products")
        return products

    def parse_csv(self, text: str) -> List[Dict[str, Any]]:
        """Turn the CSV body into raw product dicts.

        A header is only recognised before the first data row; after that a
        description mentioning "description" is just data.
        """
        columns = dict(DEFAULT_COLUMNS)
        header_found = False
        records: List[Dict[str, Any]] = []

        for row in csv.reader(io.StringIO(text)):
            row = [col.strip() for col in row]
            if not any(row):
                continue

            if not header_found and not records and is_header(row):
                columns = detect_columns(row)
                header_found = True
                continue

            if len(row) < MIN_COLUMNS:
                continue

            record = self._row_to_record(row, columns)
            if record:
                records.append(record)

        return records

    def _row_to_record(self, row: List[str], columns: Mapping[str, int]) -> Optional[Dict[str, Any]]:
        def col(key: str) -> str:
            idx = columns[key]
            return row[idx] if idx < len(row) else ""

        part_number = col("item_id")
        if not part_number or part_number == "N/A":
            return None

        description = col("description")
        brand = col("product_line") or self.name

        name = description
        if not name or name == "N/A" or name == part_number:
            name = f"{brand} {part_number}" if brand != self.name else part_number

        return {
            "sku": part_number,
            "name": name,
            "description": "" if description == "N/A" else description,
            "brand": brand,
            "price": col("price"),
            "stock_quantity": col("qty"),
            "supplier_item_id": col("supplier_item_id"),
        }

    def normalize_product(self, raw: Mapping[str, Any]) -> NormalizedProduct:
        quantity = parse_quantity(raw.get("stock_quantity"))
        supplier_item_id = optional_str(raw.get("supplier_item_id"))
        return NormalizedProduct(
            sku=optional_str(raw.get("sku")) or "N/A",
            name=optional_str(raw.get("name")) or "N/A",
            description=optional_str(raw.get("description")) or "",
            brand=optional_str(raw.get("brand")),
            price=parse_price(raw.get("price")),
            currency="ZAR",
            stock_quantity=quantity,
            stock_status=self.get_stock_status(quantity),
            specs={"supplierItemId": supplier_item_id} if supplier_item_id else {},
        )

    async def search_products(self, query: Optional[str] = None) -> List[NormalizedProduct]:
        products = await self.fetch_products()
        return self.filter_products(products, query)
