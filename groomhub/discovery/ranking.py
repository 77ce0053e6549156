from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from .errors import InvalidQueryError

SORT_KEYS = ("distance", "rating")


@dataclass(frozen=True)
class Page:
    items: pd.DataFrame
    page: int
    page_size: int

    @property
    def count(self) -> int:
        return len(self.items)


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_page(page: object, page_size: object) -> None:
    if not _is_positive_int(page):
        raise InvalidQueryError("Invalid page: expected a positive integer")
    if not _is_positive_int(page_size):
        raise InvalidQueryError("Invalid limit: expected a positive integer")


def parse_page(
    page: str | None,
    limit: str | None,
    default_limit: int,
    max_limit: int,
) -> tuple[int, int]:
    """Parse raw ``page``/``limit`` query values, falling back to defaults when absent."""
    try:
        page_number = int(page) if page not in (None, "") else 1
        page_size = int(limit) if limit not in (None, "") else default_limit
    except ValueError:
        raise InvalidQueryError("Invalid pagination: page and limit must be integers") from None
    validate_page(page_number, page_size)
    if page_size > max_limit:
        raise InvalidQueryError(f"Invalid limit: at most {max_limit} items per page")
    return page_number, page_size


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def paginate(frame: pd.DataFrame, page: int, page_size: int) -> pd.DataFrame:
    """Offset pagination: skip ``(page - 1) * page_size`` rows, take ``page_size``."""
    validate_page(page, page_size)
    offset = (page - 1) * page_size
    return frame.iloc[offset : offset + page_size]


def order(enriched: pd.DataFrame, sort_by: str = "distance") -> pd.DataFrame:
    """Nearest first (ties by id); ``rating`` re-sorts stably so distance breaks ties."""
    if sort_by not in SORT_KEYS:
        raise InvalidQueryError(f"Invalid sort {sort_by!r}. Allowed: {' | '.join(SORT_KEYS)}")

    ranked = enriched.sort_values(["distance_m", "id"], kind="mergesort")
    if sort_by == "rating":
        ranked = ranked.sort_values("average_rating", ascending=False, kind="mergesort")
    return ranked.reset_index(drop=True)


def rank_and_page(
    enriched: pd.DataFrame,
    page: int,
    page_size: int,
    sort_by: str = "distance",
) -> Page:
    validate_page(page, page_size)
    return Page(items=paginate(order(enriched, sort_by), page, page_size), page=page, page_size=page_size)
