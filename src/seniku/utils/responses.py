# File location: src/seniku/utils/responses.py
import math
from typing import Any, Optional

from fastapi import Query
from pydantic import BaseModel


class Pagination(BaseModel):
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> Pagination:
    return Pagination(page=page, limit=limit)


def success_response(data: Any = None, message: str = "Success") -> dict:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body


def paginated_response(items: list, pagination: Pagination, total: int, message: str = "Success") -> dict:
    total_pages = math.ceil(total / pagination.limit) if pagination.limit else 0
    return {
        "success": True,
        "message": message,
        "data": items,
        "pagination": {
            "page": pagination.page,
            "limit": pagination.limit,
            "total": total,
            "total_pages": total_pages,
            "has_next": pagination.page < total_pages,
            "has_prev": pagination.page > 1,
        },
    }


def error_response(error: str, errors: Optional[list] = None) -> dict:
    body = {"success": False, "error": error}
    if errors:
        body["errors"] = errors
    return body
