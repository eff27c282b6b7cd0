"""Tests for connector lookup by supplier slug."""
import pytest
from distributor_search.services.connector_registry import ConnectorRegistry, connector_registry
from distributor_search.services.connectors import AxizConnector, MustekConnector, TarsusConnector
from distributor_search.services.supplier_connector import SupplierConnector


@pytest.mark.parametrize(
    "slug,expected",
    [("mustek", MustekConnector), ("axiz", AxizConnector), ("tarsus", TarsusConnector)],
)
def test_known_slugs_resolve(supplier_config, slug, expected):
    connector = connector_registry.get_connector(supplier_config(slug))
    assert isinstance(connector, expected)
    assert connector.slug == slug


@pytest.mark.asyncio
async def test_unknown_slug_gets_base_connector_that_raises(supplier_config):
    connector = connector_registry.get_connector(supplier_config("acme"))

    assert type(connector) is SupplierConnector
    with pytest.raises(NotImplementedError):
        await connector.fetch_products()


@pytest.mark.asyncio
async def test_unknown_slug_health_reports_unhealthy(supplier_config):
    connector = connector_registry.get_connector(supplier_config("acme"))

    health = await connector.get_health_status()

    assert health["status"] == "unhealthy"
    assert "acme" in health["error"]
    assert "last_checked" in health


def test_register_overrides_slug():
    registry = ConnectorRegistry({"mustek": MustekConnector})

    class CustomConnector(SupplierConnector):
        pass

    registry.register("mustek", CustomConnector)
    registry.register("acme", CustomConnector)

    assert registry.resolve("mustek") is CustomConnector
    assert registry.slugs == ["acme", "mustek"]


def test_base_normalize_handles_generic_records(supplier_config):
    connector = SupplierConnector(supplier_config("acme"))

    product = connector.normalize_product({
        "sku": "G-1",
        "name": "Generic",
        "price": "12.50",
        "stock": 3,
        "etaDays": 5,
        "category": {"nested": True},
    })

    assert product.sku == "G-1"
    assert product.price == 12.5
    assert product.stock_quantity == 3
    assert product.eta_days == 5
    assert product.category is None
