from datetime import datetime
from types import SimpleNamespace

import pytest

from shop_admin.services.query_pipeline import (
    CollectionSchema,
    QueryRequest,
    SortKey,
    SortKind,
    SortOrder,
    run_query,
    sort_records,
)
from shop_admin.utils.exceptions import ValidationError

SCHEMA = CollectionSchema(
    search_fields=(lambda r: r.name, lambda r: r.brand),
    filter_fields={"status": "status"},
    sort_keys={
        "createdAt": SortKey("created_at", SortKind.TEMPORAL),
        "total": SortKey("total", SortKind.NUMERIC),
        "name": SortKey("name", SortKind.STRING),
    },
    date_field="created_at",
    default_sort_by="createdAt",
)


def _record(name, total, created_at, status="active", brand=""):
    return SimpleNamespace(name=name, total=total, created_at=created_at, status=status, brand=brand)


@pytest.fixture
def records():
    return [
        _record("Chanel No. 5", 3000000, datetime(2024, 1, 1), brand="Chanel"),
        _record("Dior Sauvage", 1800000, datetime(2024, 1, 10), brand="Dior"),
        _record("Tom Ford Black Orchid", 3200000, datetime(2024, 1, 15), status="inactive", brand="Tom Ford"),
    ]


def test_sort_desc_and_paginate(records):
    result = run_query(records, QueryRequest(sort_by="total", sort_order="desc", limit=2), SCHEMA)

    assert [r.total for r in result.data] == [3200000, 3000000]
    assert result.total == 3
    assert result.page == 1
    assert result.limit == 2
    assert result.total_pages == 2

    second = run_query(records, QueryRequest(sort_by="total", sort_order="desc", limit=2, page=2), SCHEMA)
    assert [r.total for r in second.data] == [1800000]


def test_default_sort_is_newest_first(records):
    result = run_query(records, QueryRequest(), SCHEMA)
    assert [r.name for r in result.data] == ["Tom Ford Black Orchid", "Dior Sauvage", "Chanel No. 5"]


def test_sort_order_is_case_insensitive(records):
    result = run_query(records, QueryRequest(sort_by="total", sort_order="ASC"), SCHEMA)
    assert [r.total for r in result.data] == [1800000, 3000000, 3200000]


@pytest.mark.parametrize("limit", [1, 2, 3, 4])
def test_pages_concatenate_to_full_result(records, limit):
    everything = run_query(records, QueryRequest(sort_by="name", sort_order="asc", limit=100), SCHEMA).data
    first = run_query(records, QueryRequest(sort_by="name", sort_order="asc", limit=limit), SCHEMA)

    collected = []
    for page in range(1, first.total_pages + 1):
        request = QueryRequest(sort_by="name", sort_order="asc", limit=limit, page=page)
        collected.extend(run_query(records, request, SCHEMA).data)

    assert collected == everything


def test_page_past_the_end(records):
    result = run_query(records, QueryRequest(page=5, limit=2), SCHEMA)
    assert result.data == []
    assert result.total == 3
    assert result.total_pages == 2


def test_empty_collection():
    result = run_query([], QueryRequest(), SCHEMA)
    assert result.data == []
    assert result.total == 0
    assert result.total_pages == 0


def test_query_is_idempotent_and_leaves_input_alone(records):
    before = list(records)
    request = QueryRequest(search="o", sort_by="total", sort_order="asc", limit=2)

    assert run_query(records, request, SCHEMA) == run_query(records, request, SCHEMA)
    assert records == before


def test_search_is_case_insensitive_substring(records):
    result = run_query(records, QueryRequest(search="chanel"), SCHEMA)
    assert [r.name for r in result.data] == ["Chanel No. 5"]

    by_brand = run_query(records, QueryRequest(search="FORD"), SCHEMA)
    assert by_brand.total == 1


def test_field_filters(records):
    result = run_query(records, QueryRequest(field_filters={"status": "inactive"}), SCHEMA)
    assert [r.name for r in result.data] == ["Tom Ford Black Orchid"]

    unset = run_query(records, QueryRequest(field_filters={"status": None}), SCHEMA)
    assert unset.total == 3


def test_unknown_filter_is_rejected(records):
    with pytest.raises(ValidationError):
        run_query(records, QueryRequest(field_filters={"colour": "red"}), SCHEMA)


def test_unknown_sort_field_is_rejected(records):
    with pytest.raises(ValidationError, match="Unsupported sortBy"):
        run_query(records, QueryRequest(sort_by="password"), SCHEMA)


def test_date_range_is_inclusive(records):
    request = QueryRequest(date_from=datetime(2024, 1, 10), date_to=datetime(2024, 1, 15))
    result = run_query(records, request, SCHEMA)
    assert sorted(r.name for r in result.data) == ["Dior Sauvage", "Tom Ford Black Orchid"]

    open_ended = run_query(records, QueryRequest(date_to=datetime(2024, 1, 9)), SCHEMA)
    assert [r.name for r in open_ended.data] == ["Chanel No. 5"]


def test_sort_is_stable_for_ties():
    records = [_record(f"item-{i}", 100, datetime(2024, 1, 1)) for i in range(5)]

    for order in (SortOrder.ASC, SortOrder.DESC):
        ordered = sort_records(records, "total", order, SCHEMA)
        assert [r.name for r in ordered] == [f"item-{i}" for i in range(5)]


def test_missing_sort_values_go_last(records):
    records.append(_record("No total", None, datetime(2024, 1, 2)))

    for order in (SortOrder.ASC, SortOrder.DESC):
        ordered = sort_records(records, "total", order, SCHEMA)
        assert ordered[-1].name == "No total"


def test_string_sort_ignores_case():
    records = [_record("banana", 1, None), _record("Apple", 2, None), _record("cherry", 3, None)]
    ordered = sort_records(records, "name", SortOrder.ASC, SCHEMA)
    assert [r.name for r in ordered] == ["Apple", "banana", "cherry"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page": 0},
        {"page": -1},
        {"limit": 0},
        {"sort_order": "sideways"},
    ],
)
def test_invalid_request(kwargs):
    with pytest.raises(ValidationError):
        QueryRequest(**kwargs)


def test_schema_requires_sortable_default():
    with pytest.raises(ValueError):
        CollectionSchema(sort_keys={"total": SortKey("total", SortKind.NUMERIC)}, default_sort_by="createdAt")
