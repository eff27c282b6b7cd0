"""Pytest configuration and fixtures for tests."""
import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment variables BEFORE any imports
os.environ["DATABASE_URL"] = "sqlite:///./test_distributor_search.db"
os.environ["CACHE_ENABLED"] = "false"
os.environ["SEARCH_SOURCE"] = "live"
os.environ["LOG_FILE"] = ""
os.environ["MUSTEK_API_TOKEN"] = ""
os.environ["AXIZ_CLIENT_ID"] = ""
os.environ["AXIZ_CLIENT_SECRET"] = ""
os.environ["AXIZ_TOKEN_ENDPOINT"] = ""
os.environ["AXIZ_API_BASE_URL"] = "https://demo.com"
os.environ["TARSUS_API_TOKEN"] = ""

import pytest
from typing import List
from unittest.mock import MagicMock, AsyncMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from distributor_search.database import models  # noqa: F401
from distributor_search.database.db import Base, init_db
from distributor_search.database.schemas import NormalizedProduct, SupplierConfig
from distributor_search.services.connector_registry import ConnectorRegistry
from distributor_search.services.supplier_connector import SupplierConnector, get_stock_status


@pytest.fixture
def db_engine(tmp_path):
    """File-backed SQLite engine with the schema created and suppliers seeded."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    init_db(bind=engine, session_factory=factory)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mock_cache():
    """Redis-less cache service: every lock call reports Redis as unavailable."""
    mock = MagicMock()
    mock.enabled = False
    mock.redis_client = None
    mock.available = False
    mock.connect = AsyncMock(return_value=None)
    mock.disconnect = AsyncMock(return_value=None)
    mock.acquire_lock = AsyncMock(return_value=None)
    mock.release_lock = AsyncMock(return_value=False)
    mock.get_stats = MagicMock(return_value={"locks_acquired": 0, "locks_contended": 0, "errors": 0})
    return mock


@pytest.fixture
def supplier_config():
    """Factory for SupplierConfig objects."""

    def _make(slug: str = "mustek", name: str = None, **kwargs) -> SupplierConfig:
        kwargs.setdefault("id", 1)
        return SupplierConfig(name=name or slug.title(), slug=slug, **kwargs)

    return _make


def make_product(sku: str, name: str = None, price=100.0, quantity: int = 20, **kwargs) -> NormalizedProduct:
    return NormalizedProduct(
        sku=sku,
        name=name or f"Product {sku}",
        price=price,
        stock_quantity=quantity,
        stock_status=get_stock_status(quantity),
        **kwargs,
    )


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def static_registry():
    """Factory for a registry whose connectors serve fixed product lists.

    Lists are read at fetch time, so tests can change them between runs.
    """

    def _make(catalogs: dict) -> ConnectorRegistry:
        connectors = {}
        for slug, products in catalogs.items():
            connectors[slug] = _static_connector(products)
        return ConnectorRegistry(connectors)

    return _make


def _static_connector(products: List[NormalizedProduct]):
    class StaticConnector(SupplierConnector):
        async def fetch_products(self, query=None):
            return list(products)

    return StaticConnector
