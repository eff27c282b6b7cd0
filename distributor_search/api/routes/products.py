"""Product API routes."""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from distributor_search.api.dependencies import get_product_aggregator
from distributor_search.api.schemas import CatalogRefreshResponse
from distributor_search.database.db import get_db
from distributor_search.database.schemas import ProductSearchQuery, ProductSearchResult, StockStatus
from distributor_search.services import product_repository
from distributor_search.services.product_aggregator import ProductAggregator
from distributor_search.utils.config import settings
from distributor_search.analytics.logger import logger

router = APIRouter(prefix="/api/products", tags=["products"])


def get_search_params(
    q: Optional[str] = Query(None, description="Text matched against SKU, name, description and brand"),
    supplier: Optional[str] = Query(None, description="Supplier slug"),
    category: Optional[str] = Query(None, description="Exact category (case-insensitive)"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    stock_status: Optional[StockStatus] = Query(None, alias="stockStatus"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> ProductSearchQuery:
    return ProductSearchQuery(
        q=q,
        supplier=supplier,
        category=category,
        min_price=min_price,
        max_price=max_price,
        stock_status=stock_status,
        limit=limit,
        offset=offset,
    )


@router.get("/search", response_model=ProductSearchResult)
async def search_products(
    params: ProductSearchQuery = Depends(get_search_params),
    db: Session = Depends(get_db),
    aggregator: ProductAggregator = Depends(get_product_aggregator),
):
    """Search products across all active suppliers."""
    try:
        if settings.search_source.lower() == "database":
            return product_repository.search_products(db, params)

        suppliers = product_repository.get_supplier_configs(db)
        return await aggregator.search(suppliers, params)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error searching products: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/refresh", response_model=CatalogRefreshResponse)
async def refresh_catalog(
    db: Session = Depends(get_db),
    aggregator: ProductAggregator = Depends(get_product_aggregator),
):
    """Drop the cached catalog and load it again from the suppliers."""
    try:
        suppliers = product_repository.get_supplier_configs(db)
        products = await aggregator.refresh_catalog(suppliers)
        return CatalogRefreshResponse(message="Catalog refreshed", products=len(products))
    except Exception as e:
        logger.error(f"Error refreshing catalog: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
