from typing import Any, Dict, Optional

from fastapi import Query

from shop_admin.services.query_pipeline import QueryRequest
from shop_admin.utils.timeutils import parse_timestamp


class ListParams:
    """Query parameters shared by every list endpoint."""

    def __init__(
        self,
        page: int = Query(1, ge=1, description="页码"),
        limit: int = Query(10, ge=1, description="每页大小"),
        search: Optional[str] = Query(None),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: str = Query("desc", alias="sortOrder"),
        date_from: Optional[str] = Query(None, alias="dateFrom"),
        date_to: Optional[str] = Query(None, alias="dateTo"),
    ):
        self.page = page
        self.limit = limit
        self.search = search
        self.sort_by = sort_by
        self.sort_order = sort_order
        self.date_from = date_from
        self.date_to = date_to

    def to_request(self, field_filters: Optional[Dict[str, Any]] = None) -> QueryRequest:
        return QueryRequest(
            page=self.page,
            limit=self.limit,
            search=self.search,
            field_filters=field_filters,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
            date_from=parse_timestamp(self.date_from, field="dateFrom"),
            date_to=parse_timestamp(self.date_to, field="dateTo"),
        )
