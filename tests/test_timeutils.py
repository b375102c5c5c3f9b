from datetime import datetime, timedelta, timezone

import pytest

from shop_admin.services.demo_data import _demo_orders, _demo_products
from shop_admin.utils.exceptions import ValidationError
from shop_admin.utils.timeutils import parse_timestamp, to_utc, utcnow


def test_utcnow_is_aware():
    assert utcnow().utcoffset() == timedelta(0)


def test_to_utc():
    naive = datetime(2024, 1, 15, 8, 30)
    assert to_utc(naive) == datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)

    hanoi = datetime(2024, 1, 15, 15, 30, tzinfo=timezone(timedelta(hours=7)))
    converted = to_utc(hanoi)
    assert converted == datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)
    assert converted.tzinfo is timezone.utc


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2024-01-15", datetime(2024, 1, 15, tzinfo=timezone.utc)),
        ("2024-01-15T10:00:00Z", datetime(2024, 1, 15, 10, tzinfo=timezone.utc)),
        ("2024-01-15T17:00:00+07:00", datetime(2024, 1, 15, 10, tzinfo=timezone.utc)),
    ],
)
def test_parse_timestamp(text, expected):
    assert parse_timestamp(text) == expected


def test_parse_timestamp_empty_and_invalid():
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    with pytest.raises(ValidationError, match="Invalid dateTo: soon"):
        parse_timestamp("soon", field="dateTo")


def test_demo_data_is_timezone_aware():
    for product in _demo_products():
        assert product.created_at.tzinfo is not None
        assert product.updated_at.tzinfo is not None
    for order in _demo_orders():
        assert order.order_date.tzinfo is not None
        assert order.created_at.tzinfo is not None


def test_stored_timestamps_read_back_as_utc(store, seeded_database):
    before = utcnow()
    user = store.insert(email="khanh@rareperfume.vn", password="pw123456", name="Khanh")

    stored = store.find_by_id(user.id).created_at
    assert before <= to_utc(stored) <= utcnow()
