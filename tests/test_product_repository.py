"""Tests for database-backed product search."""
import pytest
from distributor_search.database.models import Product, Supplier
from distributor_search.database.schemas import ProductSearchQuery
from distributor_search.services.product_aggregator import apply_filters, sort_products
from distributor_search.services.product_repository import escape_like, search_products


@pytest.fixture
def stored_products(db_session):
    mustek = db_session.query(Supplier).filter(Supplier.slug == "mustek").one()
    db_session.add_all([
        Product(sku="P-1", supplier_id=mustek.id, name="cherry", price=30.0,
                stock_quantity=10, stock_status="in_stock"),
        Product(sku="P-2", supplier_id=mustek.id, name="Banana", price=20.0,
                stock_quantity=2, stock_status="low_stock"),
        Product(sku="P-3", supplier_id=mustek.id, name="apple", price=10.0,
                stock_quantity=0, stock_status="out_of_stock", description="100% cotton"),
        Product(sku="P_4", supplier_id=mustek.id, name="date", price=None,
                stock_quantity=5, stock_status="in_stock"),
    ])
    db_session.commit()
    return mustek


def live_search(db, **filters):
    """Run the in-memory filter and sort over every stored product."""
    everything = search_products(db, ProductSearchQuery(limit=1000)).products
    return sort_products(apply_filters(everything, ProductSearchQuery(**filters)))


def test_escape_like():
    assert escape_like("a%b_c\\d") == "a\\%b\\_c\\\\d"
    assert escape_like("plain") == "plain"


def test_names_sort_case_insensitively(db_session, stored_products):
    result = search_products(db_session, ProductSearchQuery())

    assert [p.name for p in result.products] == ["apple", "Banana", "cherry", "date"]
    assert [p.sku for p in result.products] == [p.sku for p in live_search(db_session)]


@pytest.mark.parametrize("q, expected", [
    ("_", ["P_4"]),
    ("%", ["P-3"]),
    ("100%", ["P-3"]),
    ("p-", ["P-3", "P-2", "P-1"]),
    ("AN", ["P-2"]),
])
def test_wildcards_match_literally(db_session, stored_products, q, expected):
    result = search_products(db_session, ProductSearchQuery(q=q))

    assert [p.sku for p in result.products] == expected
    assert result.total == len(expected)
    assert [p.sku for p in live_search(db_session, q=q)] == expected


@pytest.mark.parametrize("filters", [
    {"min_price": 15},
    {"max_price": 25},
    {"stock_status": "in_stock"},
    {"q": "a", "max_price": 100},
])
def test_filters_agree_with_live_search(db_session, stored_products, filters):
    result = search_products(db_session, ProductSearchQuery(**filters))

    assert [p.sku for p in result.products] == [p.sku for p in live_search(db_session, **filters)]


def test_pagination_window(db_session, stored_products):
    result = search_products(db_session, ProductSearchQuery(limit=2, offset=1))

    assert result.total == 4
    assert [p.name for p in result.products] == ["Banana", "cherry"]
