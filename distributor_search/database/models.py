"""SQLAlchemy database models."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Float,
    Text,
    DateTime,
    JSON,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from distributor_search.database.db import Base


class Supplier(Base):
    """Upstream distributor whose catalog we aggregate."""

    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    type = Column(String, default="rest_api")  # rest_api, csv_feed, json_feed
    api_endpoint = Column(String, nullable=True)
    auth_type = Column(String, nullable=True)  # token, oauth2, bearer
    credentials = Column(JSON, nullable=True)
    status = Column(String, default="active", index=True)  # active, inactive
    last_sync_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    products = relationship("Product", back_populates="supplier")
    sync_logs = relationship("SyncLog", back_populates="supplier")


class Product(Base):
    """Persisted normalized product, one row per (sku, supplier)."""

    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("sku", "supplier_id", name="uq_products_sku_supplier"),)

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String, index=True, nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), index=True, nullable=False)
    name = Column(String, index=True)
    description = Column(Text, default="")
    category = Column(String, index=True, nullable=True)
    brand = Column(String, nullable=True)
    price = Column(Float, nullable=True)
    currency = Column(String, default="ZAR")
    stock_quantity = Column(Integer, default=0)
    stock_status = Column(String, index=True, default="out_of_stock")
    eta_days = Column(Integer, nullable=True)
    image_url = Column(Text, nullable=True)
    product_url = Column(Text, nullable=True)
    specs = Column(JSON, nullable=True)
    last_updated = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    supplier = relationship("Supplier", back_populates="products")
    price_history = relationship("PriceHistory", back_populates="product")


class PriceHistory(Base):
    """One row per detected price change."""

    __tablename__ = "price_history"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), index=True, nullable=False)
    price = Column(Float, nullable=False)
    currency = Column(String, default="ZAR")
    recorded_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Relationships
    product = relationship("Product", back_populates="price_history")


class SyncLog(Base):
    """Append-only audit row per sync attempt."""

    __tablename__ = "sync_logs"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), index=True, nullable=False)
    status = Column(String, default="in_progress", index=True)  # in_progress, success, error
    products_synced = Column(Integer, default=0)
    errors = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
    duration_ms = Column(Integer, nullable=True)

    # Relationships
    supplier = relationship("Supplier", back_populates="sync_logs")
