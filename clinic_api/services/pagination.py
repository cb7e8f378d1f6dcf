"""
Offset pagination shared by the list endpoints
"""

import math
from typing import Any

from sqlalchemy.orm import Query

from clinic_api.utils.error_handler import ValidationError


# LIMIT and OFFSET are bound as signed 64-bit integers by the drivers
MAX_WINDOW_VALUE = 2 ** 63 - 1


def validate_window(page: int, limit: int) -> None:
    if page < 1 or limit < 1:
        raise ValidationError("Invalid page or limit")
    if limit > MAX_WINDOW_VALUE or (page - 1) * limit > MAX_WINDOW_VALUE:
        raise ValidationError("Page or limit is too large")


def search_pattern(search: str) -> str:
    """Case-insensitive 'contains' pattern for ilike"""
    return f"%{search.strip()}%"


def paginate(query: Query, page: int, limit: int, *order_by: Any) -> tuple[list, int]:
    """Return one page of rows plus the total match count for the whole query"""
    validate_window(page, limit)

    # Count before ordering/windowing so total is independent of the page
    total = query.order_by(None).count()

    offset = (page - 1) * limit
    rows = query.order_by(*order_by).offset(offset).limit(limit).all()
    return rows, total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
