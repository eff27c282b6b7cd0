"""Tests for API endpoints."""
import time
import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from distributor_search.api import main
from distributor_search.api.dependencies import get_product_aggregator, get_sync_job_runner
from distributor_search.database.db import get_db
from distributor_search.database.models import Product, Supplier, SyncLog
from distributor_search.services.catalog_cache import CatalogCache
from distributor_search.services.product_aggregator import ProductAggregator
from distributor_search.services.sync_jobs import SyncJobRunner
from distributor_search.services.sync_lock import SyncLock
from distributor_search.services.sync_service import SyncService
from distributor_search.utils.config import settings


@pytest.fixture
def catalog(product_factory):
    return [
        product_factory("SKU-1", name="Dell Latitude", price=15000.0, quantity=20, category="Laptop", brand="Dell"),
        product_factory("SKU-2", name="HP Mouse", price=199.99, quantity=3, category="Accessories", brand="HP"),
        product_factory("SKU-3", name="Lenovo Dock", price=None, quantity=0, category="Accessories", brand="Lenovo"),
    ]


@pytest.fixture
def client(session_factory, static_registry, catalog, mock_cache, monkeypatch):
    registry = static_registry({"mustek": catalog})
    aggregator = ProductAggregator(registry=registry, cache=CatalogCache())
    runner = SyncJobRunner(SyncService(
        session_factory=session_factory,
        registry=registry,
        lock=SyncLock(cache=mock_cache),
        on_success=lambda supplier_id: aggregator.invalidate_catalog(),
    ))

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(main, "init_db", lambda: None)
    main.app.dependency_overrides[get_db] = override_get_db
    main.app.dependency_overrides[get_product_aggregator] = lambda: aggregator
    main.app.dependency_overrides[get_sync_job_runner] = lambda: runner

    with TestClient(main.app) as test_client:
        yield test_client

    main.app.dependency_overrides.clear()


def mustek_id(db):
    return db.query(Supplier).filter(Supplier.slug == "mustek").one().id


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_search_products_live(client):
    response = client.get("/api/products/search", params={"q": "dell"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["limit"] == 100
    assert data["offset"] == 0
    product = data["products"][0]
    assert product["sku"] == "SKU-1"
    assert product["supplier_slug"] == "mustek"
    assert product["supplier_name"] == "Mustek"
    assert product["stock_status"] == "in_stock"


def test_search_filters_and_pagination(client):
    response = client.get(
        "/api/products/search",
        params={"category": "accessories", "maxPrice": 1000, "limit": 5},
    )

    data = response.json()
    assert [p["sku"] for p in data["products"]] == ["SKU-2"]

    response = client.get("/api/products/search", params={"stockStatus": "out_of_stock"})
    assert [p["sku"] for p in response.json()["products"]] == ["SKU-3"]

    response = client.get("/api/products/search", params={"limit": 1, "offset": 1})
    data = response.json()
    assert data["total"] == 3
    assert len(data["products"]) == 1


def test_search_rejects_invalid_params(client):
    assert client.get("/api/products/search", params={"limit": 0}).status_code == 422
    assert client.get("/api/products/search", params={"stockStatus": "plenty"}).status_code == 422


def test_search_from_database(client, db_session, monkeypatch):
    monkeypatch.setattr(settings, "search_source", "database")
    supplier_id = mustek_id(db_session)
    db_session.add_all([
        Product(sku="DB-1", supplier_id=supplier_id, name="Stored Laptop", price=9000.0,
                stock_quantity=12, stock_status="in_stock", category="Laptop"),
        Product(sku="DB-2", supplier_id=supplier_id, name="Stored Cable", price=None,
                stock_quantity=0, stock_status="out_of_stock", category="Cables"),
    ])
    db_session.commit()

    response = client.get("/api/products/search", params={"minPrice": 100})

    data = response.json()
    assert data["total"] == 1
    assert data["products"][0]["sku"] == "DB-1"
    assert data["products"][0]["supplier_name"] == "Mustek"

    response = client.get("/api/products/search", params={"q": "stored"})
    assert [p["sku"] for p in response.json()["products"]] == ["DB-2", "DB-1"]


def test_refresh_catalog(client):
    response = client.post("/api/products/refresh")

    assert response.status_code == 200
    assert response.json()["products"] == 3


def test_list_suppliers(client):
    response = client.get("/api/suppliers")
    assert response.status_code == 200
    data = response.json()
    assert [s["slug"] for s in data["suppliers"]] == ["mustek"]

    response = client.get("/api/suppliers", params={"includeInactive": "true"})
    assert response.json()["count"] == 3


def test_toggle_supplier_status(client, db_session):
    supplier_id = mustek_id(db_session)

    response = client.patch(f"/api/suppliers/{supplier_id}", json={"status": "inactive"})
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"

    response = client.get("/api/products/search")
    assert response.json()["total"] == 0

    assert client.patch(f"/api/suppliers/{supplier_id}", json={"status": "paused"}).status_code == 422
    assert client.patch("/api/suppliers/999", json={"status": "active"}).status_code == 404


def test_trigger_sync_and_poll_job(client, db_session):
    supplier_id = mustek_id(db_session)

    response = client.post(f"/api/suppliers/{supplier_id}/sync")

    assert response.status_code == 202
    data = response.json()
    assert data["supplierId"] == supplier_id
    assert "message" in data
    job_id = data["jobId"]

    job = None
    for _ in range(50):
        job = client.get(f"/api/sync-jobs/{job_id}").json()
        if job["status"] in ("success", "error"):
            break
        time.sleep(0.05)

    assert job["status"] == "success"
    assert job["result"]["products_synced"] == 3

    logs = client.get(f"/api/suppliers/{supplier_id}/sync-logs").json()["logs"]
    assert logs[0]["status"] == "success"
    assert logs[0]["products_synced"] == 3


def test_trigger_sync_unknown_supplier(client):
    assert client.post("/api/suppliers/999/sync").status_code == 404


def test_trigger_sync_while_running_conflicts(client, db_session):
    supplier_id = mustek_id(db_session)
    db_session.add(SyncLog(supplier_id=supplier_id, status="in_progress", started_at=datetime.now(timezone.utc)))
    db_session.commit()

    assert client.post(f"/api/suppliers/{supplier_id}/sync").status_code == 409


def test_unknown_sync_job(client):
    assert client.get("/api/sync-jobs/does-not-exist").status_code == 404


def test_sync_logs_unknown_supplier(client):
    assert client.get("/api/suppliers/999/sync-logs").status_code == 404


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["dev_mode"] is True
    assert data["checks"]["database"]["status"] == "healthy"
    assert data["checks"]["redis"]["status"] == "degraded"


def test_supplier_health(client):
    response = client.get("/api/health/suppliers")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["suppliers"]["mustek"]["status"] == "healthy"
    assert data["suppliers"]["mustek"]["products_count"] == 3


def test_price_history_after_price_change(client, db_session, catalog):
    supplier_id = mustek_id(db_session)

    def run_sync():
        job_id = client.post(f"/api/suppliers/{supplier_id}/sync").json()["jobId"]
        for _ in range(50):
            job = client.get(f"/api/sync-jobs/{job_id}").json()
            if job["status"] in ("success", "error"):
                return job
            time.sleep(0.05)
        return job

    run_sync()
    catalog[1] = catalog[1].model_copy(update={"price": 149.99})
    assert run_sync()["status"] == "success"

    response = client.get(f"/api/suppliers/{supplier_id}/products/SKU-2/price-history")

    assert response.status_code == 200
    data = response.json()
    assert data["current_price"] == 149.99
    assert [h["price"] for h in data["history"]] == [149.99]
    assert client.get(f"/api/suppliers/{supplier_id}/products/NOPE/price-history").status_code == 404
