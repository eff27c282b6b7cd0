"""Tests for stock status derivation and value parsing helpers."""
import pytest
from datetime import datetime, timedelta, timezone
from distributor_search.database.schemas import StockStatus
from distributor_search.services.supplier_connector import get_stock_status, LOW_STOCK_THRESHOLD
from distributor_search.utils.helpers import (
    days_until,
    parse_price,
    parse_quantity,
    stable_product_id,
    truncate_text,
)


@pytest.mark.parametrize(
    "quantity,expected",
    [
        (0, StockStatus.OUT_OF_STOCK),
        (1, StockStatus.LOW_STOCK),
        (9, StockStatus.LOW_STOCK),
        (10, StockStatus.IN_STOCK),
        (500, StockStatus.IN_STOCK),
        (-5, StockStatus.OUT_OF_STOCK),
        (None, StockStatus.OUT_OF_STOCK),
        ("abc", StockStatus.OUT_OF_STOCK),
        ("12", StockStatus.IN_STOCK),
    ],
)
def test_stock_status_thresholds(quantity, expected):
    assert get_stock_status(quantity) == expected


def test_low_stock_threshold_boundary():
    assert get_stock_status(LOW_STOCK_THRESHOLD - 1) == StockStatus.LOW_STOCK
    assert get_stock_status(LOW_STOCK_THRESHOLD) == StockStatus.IN_STOCK


@pytest.mark.parametrize(
    "value,expected",
    [
        ("1,299.50", 1299.50),
        (42, 42.0),
        ("0", None),
        (-3, None),
        ("", None),
        (None, None),
        ("n/a", None),
        ("nan", None),
    ],
)
def test_parse_price(value, expected):
    assert parse_price(value) == expected


def test_parse_quantity_clamps_and_truncates():
    assert parse_quantity("7.9") == 7
    assert parse_quantity(-1) == 0
    assert parse_quantity(True) == 0
    assert parse_quantity("lots") == 0


def test_days_until_rounds_up_future_dates():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert days_until("2024-01-03T00:00:00Z", now=now) == 2
    assert days_until(now + timedelta(hours=1), now=now) == 1


def test_days_until_ignores_past_and_garbage():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert days_until("2023-12-31", now=now) is None
    assert days_until("next week", now=now) is None
    assert days_until(None, now=now) is None


def test_truncate_text():
    assert truncate_text("short") == "short"
    assert truncate_text("x" * 100, 80) == "x" * 80 + "..."


def test_stable_product_id_is_deterministic_per_supplier():
    first = stable_product_id("mustek", "ABC123")
    assert first == stable_product_id("mustek", "ABC123")
    assert first != stable_product_id("tarsus", "ABC123")
    assert len(first) == 16
