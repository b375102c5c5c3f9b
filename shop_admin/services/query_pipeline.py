"""
Shared list-query pipeline: search -> exact filters -> date range -> sort -> paginate.

Every list endpoint (products, orders, payment history) loads its backing
collection and runs it through :func:`run_query` with a per-collection
:class:`CollectionSchema`. The schema says which fields are searchable,
filterable and sortable, and how each sortable field compares, so no value
type is guessed at runtime.
"""
from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, NamedTuple, Optional, Sequence, TypeVar

from shop_admin.utils.exceptions import ValidationError
from shop_admin.utils.timeutils import parse_timestamp, to_utc

T = TypeVar("T")

SearchAccessor = Callable[[Any], Optional[str]]


class SortKind(str, Enum):
    NUMERIC = "numeric"
    TEMPORAL = "temporal"
    STRING = "string"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortKey(NamedTuple):
    attribute: str
    kind: SortKind


class CollectionSchema:
    """Per-collection query capabilities.

    Args:
        search_fields: accessors returning the strings matched by ``search``
        filter_fields: request filter name -> record attribute, exact match
        sort_keys: request sort name -> attribute and comparison kind
        date_field: attribute used by ``date_from`` / ``date_to``
        default_sort_by: sort name used when the request gives none
    """

    def __init__(
        self,
        *,
        search_fields: Sequence[SearchAccessor] = (),
        filter_fields: Optional[Mapping[str, str]] = None,
        sort_keys: Mapping[str, SortKey],
        date_field: Optional[str] = None,
        default_sort_by: str,
    ) -> None:
        if default_sort_by not in sort_keys:
            raise ValueError(f"default sort field {default_sort_by!r} is not sortable")
        self.search_fields = tuple(search_fields)
        self.filter_fields = dict(filter_fields or {})
        self.sort_keys = dict(sort_keys)
        self.date_field = date_field
        self.default_sort_by = default_sort_by


class QueryRequest:
    """One list request. ``page`` and ``limit`` must be at least 1."""

    def __init__(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        field_filters: Optional[Mapping[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = SortOrder.DESC.value,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> None:
        if page is None or page < 1:
            raise ValidationError("page must be a positive integer")
        if limit is None or limit < 1:
            raise ValidationError("limit must be a positive integer")
        try:
            order = SortOrder(sort_order.lower() if isinstance(sort_order, str) else sort_order)
        except ValueError:
            raise ValidationError(f"Invalid sortOrder: {sort_order}")

        self.page = page
        self.limit = limit
        self.search = search or None
        # unset filters (None / "") are dropped so callers can pass raw query params
        self.field_filters = {
            name: value
            for name, value in (field_filters or {}).items()
            if value is not None and value != ""
        }
        self.sort_by = sort_by or None
        self.sort_order = order
        self.date_from = to_utc(date_from) if date_from else None
        self.date_to = to_utc(date_to) if date_to else None


class QueryResult(Generic[T]):
    def __init__(self, *, data: List[T], total: int, page: int, limit: int) -> None:
        self.data = data
        self.total = total
        self.page = page
        self.limit = limit
        self.total_pages = math.ceil(total / limit) if total > 0 else 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryResult):
            return NotImplemented
        return (
            self.data == other.data
            and self.total == other.total
            and self.page == other.page
            and self.limit == other.limit
        )

    def __repr__(self) -> str:
        return (
            f"QueryResult(total={self.total}, page={self.page}, "
            f"limit={self.limit}, total_pages={self.total_pages}, size={len(self.data)})"
        )


def apply_search(records: Sequence[T], search: Optional[str], schema: CollectionSchema) -> List[T]:
    if not search:
        return list(records)
    needle = search.lower()
    matched = []
    for record in records:
        for accessor in schema.search_fields:
            value = accessor(record)
            if value and needle in value.lower():
                matched.append(record)
                break
    return matched


def apply_field_filters(
    records: Sequence[T],
    field_filters: Mapping[str, Any],
    schema: CollectionSchema,
) -> List[T]:
    result = list(records)
    for name, expected in field_filters.items():
        attribute = schema.filter_fields.get(name)
        if attribute is None:
            raise ValidationError(f"Unsupported filter: {name}")
        result = [record for record in result if getattr(record, attribute, None) == expected]
    return result


def apply_date_range(
    records: Sequence[T],
    date_from: Optional[datetime],
    date_to: Optional[datetime],
    schema: CollectionSchema,
) -> List[T]:
    """Inclusive on both ends; a missing bound leaves that side open."""
    if date_from is None and date_to is None:
        return list(records)
    if schema.date_field is None:
        raise ValidationError("Date range filtering is not supported here")

    result = []
    for record in records:
        value = _as_timestamp(getattr(record, schema.date_field, None))
        if value is None:
            continue
        if date_from is not None and value < date_from:
            continue
        if date_to is not None and value > date_to:
            continue
        result.append(record)
    return result


def filter_records(records: Sequence[T], request: QueryRequest, schema: CollectionSchema) -> List[T]:
    matched = apply_search(records, request.search, schema)
    matched = apply_field_filters(matched, request.field_filters, schema)
    return apply_date_range(matched, request.date_from, request.date_to, schema)


def sort_records(
    records: Sequence[T],
    sort_by: Optional[str],
    sort_order: SortOrder,
    schema: CollectionSchema,
) -> List[T]:
    """Stable sort; ties keep their incoming order, records without a value go last."""
    name = sort_by or schema.default_sort_by
    sort_key = schema.sort_keys.get(name)
    if sort_key is None:
        raise ValidationError(f"Unsupported sortBy: {name}")

    present = []
    missing = []
    for record in records:
        value = _comparable(getattr(record, sort_key.attribute, None), sort_key.kind)
        if value is None:
            missing.append(record)
        else:
            present.append((value, record))

    present.sort(key=lambda pair: pair[0], reverse=sort_order is SortOrder.DESC)
    return [record for _, record in present] + missing


def paginate(records: Sequence[T], page: int, limit: int) -> QueryResult[T]:
    offset = (page - 1) * limit
    return QueryResult(
        data=list(records[offset:offset + limit]),
        total=len(records),
        page=page,
        limit=limit,
    )


def run_query(records: Sequence[T], request: QueryRequest, schema: CollectionSchema) -> QueryResult[T]:
    """Run the full pipeline. ``records`` is never mutated."""
    matched = filter_records(records, request, schema)
    ordered = sort_records(matched, request.sort_by, request.sort_order, schema)
    return paginate(ordered, request.page, request.limit)


def _as_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    return parse_timestamp(str(value))


def _comparable(value: Any, kind: SortKind) -> Any:
    if value is None:
        return None
    if kind is SortKind.NUMERIC:
        return float(value)
    if kind is SortKind.TEMPORAL:
        return _as_timestamp(value)
    return str(value).casefold()


__all__ = [
    "SortKind",
    "SortOrder",
    "SortKey",
    "CollectionSchema",
    "QueryRequest",
    "QueryResult",
    "apply_search",
    "apply_field_filters",
    "apply_date_range",
    "filter_records",
    "sort_records",
    "paginate",
    "run_query",
]
