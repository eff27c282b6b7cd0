"""API request/response schemas."""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from distributor_search.database.schemas import PriceHistoryResponse, SupplierResponse, SyncLogResponse


class SyncTriggerResponse(BaseModel):
    message: str
    supplier_id: int = Field(alias="supplierId")
    job_id: str = Field(alias="jobId")

    class Config:
        populate_by_name = True


class SyncJobResponse(BaseModel):
    job_id: str
    supplier_id: int
    status: str  # pending, running, success, error
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    submitted_at: str
    finished_at: Optional[str] = None


class SupplierListResponse(BaseModel):
    suppliers: List[SupplierResponse]
    count: int


class SyncLogListResponse(BaseModel):
    supplier_id: int
    logs: List[SyncLogResponse]


class CatalogRefreshResponse(BaseModel):
    message: str
    products: int


class PriceHistoryListResponse(BaseModel):
    supplier_id: int
    sku: str
    current_price: Optional[float] = None
    history: List[PriceHistoryResponse]
