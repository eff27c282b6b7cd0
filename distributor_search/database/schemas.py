"""Pydantic schemas for the canonical product model and supplier configuration."""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Union
from datetime import datetime
from enum import Enum


class StockStatus(str, Enum):
    """Stock availability derived from quantity."""

    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"


class SupplierStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class SyncStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    ERROR = "error"


# Product Schemas
class NormalizedProduct(BaseModel):
    """Canonical product every connector maps its supplier records onto."""

    sku: str = "N/A"
    name: str = "N/A"
    description: str = ""
    category: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    currency: str = "ZAR"
    stock_quantity: int = Field(default=0, ge=0)
    stock_status: StockStatus = StockStatus.OUT_OF_STOCK
    eta_days: Optional[int] = Field(default=None, gt=0)
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    specs: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        use_enum_values = True


class SupplierProduct(NormalizedProduct):
    """A normalized product tagged with the supplier it came from."""

    id: str
    supplier_id: Optional[int] = None
    supplier_name: str
    supplier_slug: str


# Supplier Schemas
class SupplierConfig(BaseModel):
    """Everything a connector needs to talk to one supplier."""

    id: Optional[int] = None
    name: str
    slug: str
    type: str = "rest_api"
    api_endpoint: Optional[str] = None
    credentials: Union[str, Dict[str, Any], None] = None
    status: SupplierStatus = SupplierStatus.ACTIVE

    class Config:
        from_attributes = True
        use_enum_values = True

    def credential(self, key: str) -> Optional[str]:
        """Look up one credential value; a bare string counts as ``token``."""
        if isinstance(self.credentials, str):
            return self.credentials if key == "token" else None
        if isinstance(self.credentials, dict):
            value = self.credentials.get(key)
            return str(value) if value else None
        return None


class SupplierResponse(BaseModel):
    id: int
    name: str
    slug: str
    type: str
    status: str
    last_sync_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SupplierUpdate(BaseModel):
    status: SupplierStatus


# Sync Schemas
class SyncLogResponse(BaseModel):
    id: int
    supplier_id: int
    status: str
    products_synced: int = 0
    errors: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    duration_ms: Optional[int] = None

    class Config:
        from_attributes = True


class PriceHistoryResponse(BaseModel):
    price: float
    currency: str
    recorded_at: datetime

    class Config:
        from_attributes = True


# Search Schemas
class ProductSearchQuery(BaseModel):
    """Filters, all optional and AND-combined, plus the page window."""

    q: Optional[str] = None
    supplier: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    stock_status: Optional[StockStatus] = None
    limit: int = Field(default=100, ge=1)
    offset: int = Field(default=0, ge=0)

    class Config:
        use_enum_values = True


class ProductSearchResult(BaseModel):
    products: List[SupplierProduct]
    total: int
    limit: int
    offset: int
