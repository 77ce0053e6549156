from __future__ import annotations

from typing import Any

from ..discovery.errors import InvalidQueryError
from ..discovery.ranking import paginate, total_pages
from ..store.data_store import DataStore, get_store, to_records
from ..store.schema import Affinity

_PUBLIC_FIELDS = ["id", "name", "gender", "icon", "active"]


def category_page(
    gender: str | None,
    page: int,
    limit: int,
    store: DataStore | None = None,
) -> dict[str, Any]:
    """Active categories, newest first, optionally for one gender."""
    if gender and gender not in {a.value for a in Affinity}:
        raise InvalidQueryError("Invalid gender. Allowed: men | women | unisex")

    store = store or get_store()
    categories = store.list_categories(gender or None)
    items = to_records(paginate(categories, page, limit)[_PUBLIC_FIELDS])
    return {
        "success": True,
        "message": "Categories fetched successfully",
        "gender_applied": gender or "none",
        "page": page,
        "limit": limit,
        "total": len(categories),
        "total_pages": total_pages(len(categories), limit),
        "count": len(items),
        "categories": items,
    }
