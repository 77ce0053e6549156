from __future__ import annotations

import pandas as pd
import pytest

from groomhub.discovery.errors import InvalidQueryError
from groomhub.discovery.ranking import order, paginate, parse_page, rank_and_page, total_pages


def _frame(rows):
    return pd.DataFrame(rows, columns=["id", "distance_m", "average_rating"])


NEAR_TO_FAR = _frame([
    ("c", 300.0, 4.0),
    ("a", 100.0, 2.0),
    ("d", 300.0, 5.0),
    ("b", 200.0, 4.0),
    ("e", 900.0, 0.0),
])


def test_distance_order_is_ascending_with_id_tiebreak():
    ranked = order(NEAR_TO_FAR, "distance")
    assert ranked["id"].tolist() == ["a", "b", "c", "d", "e"]
    assert ranked["distance_m"].is_monotonic_increasing


def test_rating_order_breaks_ties_by_distance():
    ranked = order(NEAR_TO_FAR, "rating")
    assert ranked["id"].tolist() == ["d", "b", "c", "a", "e"]


def test_unknown_sort_key():
    with pytest.raises(InvalidQueryError):
        order(NEAR_TO_FAR, "price")


def test_order_is_deterministic():
    shuffled = NEAR_TO_FAR.sample(frac=1.0, random_state=7)
    assert order(shuffled)["id"].tolist() == order(NEAR_TO_FAR)["id"].tolist()


class TestPagination:
    def test_pages_cover_everything_once(self):
        ranked = order(NEAR_TO_FAR)
        seen = []
        for page in range(1, total_pages(len(ranked), 2) + 1):
            seen += paginate(ranked, page, 2)["id"].tolist()
        assert seen == ranked["id"].tolist()

    def test_last_page_is_partial(self):
        page = rank_and_page(NEAR_TO_FAR, 3, 2)
        assert page.count == 1
        assert page.items["id"].tolist() == ["e"]

    def test_page_past_the_end_is_empty(self):
        page = rank_and_page(NEAR_TO_FAR, 10, 2)
        assert page.count == 0
        assert page.page == 10

    def test_empty_input(self):
        page = rank_and_page(_frame([]), 1, 5)
        assert page.count == 0

    @pytest.mark.parametrize("page,size", [(0, 5), (-1, 5), (1, 0), (1.5, 5), (True, 5)])
    def test_invalid_page_values(self, page, size):
        with pytest.raises(InvalidQueryError):
            rank_and_page(NEAR_TO_FAR, page, size)

    def test_total_pages(self):
        assert total_pages(0, 5) == 0
        assert total_pages(5, 5) == 1
        assert total_pages(6, 5) == 2


class TestParsePage:
    def test_defaults(self):
        assert parse_page(None, None, 10, 50) == (1, 10)
        assert parse_page("", "", 20, 50) == (1, 20)

    def test_explicit_values(self):
        assert parse_page("3", "7", 10, 50) == (3, 7)

    @pytest.mark.parametrize("page,limit", [("abc", None), ("1", "x"), ("0", None), ("1", "-2"), ("1", "51")])
    def test_rejected(self, page, limit):
        with pytest.raises(InvalidQueryError):
            parse_page(page, limit, 10, 50)
