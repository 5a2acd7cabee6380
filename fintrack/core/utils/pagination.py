"""Pagination helpers for SQLAlchemy queries."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Query

MAX_PER_PAGE = 200


def paginate(query: Query, page: int = 1, per_page: int = 50) -> Tuple[List[Any], int]:
    page = max(page, 1)
    per_page = max(min(per_page, MAX_PER_PAGE), 1)
    total = query.order_by(None).count()
    items = query.limit(per_page).offset((page - 1) * per_page).all()
    return items, total


def page_meta(page: int, per_page: int, total: int) -> Dict[str, int]:
    per_page = max(min(per_page, MAX_PER_PAGE), 1)
    return {
        "page": max(page, 1),
        "limit": per_page,
        "total": total,
        "pages": math.ceil(total / per_page) if per_page else 1,
    }
