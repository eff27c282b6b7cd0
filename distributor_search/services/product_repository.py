"""Database queries behind the API: suppliers, sync logs and stored products."""
from typing import List, Optional
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from distributor_search.database.models import Product, Supplier, SyncLog
from distributor_search.database.schemas import (
    ProductSearchQuery,
    ProductSearchResult,
    SupplierConfig,
    SupplierProduct,
    SupplierStatus,
)
from distributor_search.utils.helpers import stable_product_id


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally (escape char is a backslash)."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def list_suppliers(db: Session, active_only: bool = True) -> List[Supplier]:
    query = db.query(Supplier)
    if active_only:
        query = query.filter(Supplier.status == SupplierStatus.ACTIVE.value)
    return query.order_by(Supplier.name).all()


def get_supplier(db: Session, supplier_id: int) -> Optional[Supplier]:
    return db.get(Supplier, supplier_id)


def get_supplier_configs(db: Session) -> List[SupplierConfig]:
    """Connector configuration for every active supplier."""
    return [SupplierConfig.model_validate(s) for s in list_suppliers(db)]


def update_supplier_status(db: Session, supplier: Supplier, status: SupplierStatus) -> Supplier:
    supplier.status = SupplierStatus(status).value
    db.commit()
    db.refresh(supplier)
    return supplier


def recent_sync_logs(db: Session, supplier_id: int, limit: int = 20) -> List[SyncLog]:
    return (
        db.query(SyncLog)
        .filter(SyncLog.supplier_id == supplier_id)
        .order_by(SyncLog.started_at.desc(), SyncLog.id.desc())
        .limit(limit)
        .all()
    )


def _to_supplier_product(row: Product, supplier: Supplier) -> SupplierProduct:
    return SupplierProduct(
        id=stable_product_id(supplier.slug, row.sku),
        supplier_id=supplier.id,
        supplier_name=supplier.name,
        supplier_slug=supplier.slug,
        sku=row.sku,
        name=row.name or "N/A",
        description=row.description or "",
        category=row.category,
        brand=row.brand,
        price=row.price,
        currency=row.currency or "ZAR",
        stock_quantity=row.stock_quantity or 0,
        stock_status=row.stock_status,
        eta_days=row.eta_days,
        image_url=row.image_url,
        product_url=row.product_url,
        specs=row.specs or {},
    )


def search_products(db: Session, params: ProductSearchQuery) -> ProductSearchResult:
    """Search the synced catalog with the same filters and ordering as live search.

    Only products of active suppliers are returned. SQL comparisons with a
    NULL price are never true, so unpriced rows drop out under price bounds.
    """
    query = (
        db.query(Product, Supplier)
        .join(Supplier, Product.supplier_id == Supplier.id)
        .filter(Supplier.status == SupplierStatus.ACTIVE.value)
    )

    if params.q and params.q.strip():
        pattern = f"%{escape_like(params.q.strip().lower())}%"
        query = query.filter(or_(*(
            func.lower(column).like(pattern, escape="\\")
            for column in (Product.sku, Product.name, Product.description, Product.brand)
        )))

    if params.supplier:
        query = query.filter(Supplier.slug == params.supplier)

    if params.category:
        query = query.filter(func.lower(Product.category) == params.category.lower())

    if params.min_price is not None:
        query = query.filter(Product.price >= params.min_price)

    if params.max_price is not None:
        query = query.filter(Product.price <= params.max_price)

    if params.stock_status:
        query = query.filter(Product.stock_status == params.stock_status)

    total = query.count()
    rows = (
        query.order_by(func.lower(Supplier.name), func.lower(Product.name), Product.sku)
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )

    return ProductSearchResult(
        products=[_to_supplier_product(product, supplier) for product, supplier in rows],
        total=total,
        limit=params.limit,
        offset=params.offset,
    )


def get_product(db: Session, supplier_id: int, sku: str) -> Optional[Product]:
    return (
        db.query(Product)
        .filter(Product.supplier_id == supplier_id, Product.sku == sku)
        .one_or_none()
    )
