from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    errors = [e for e in events if e["type"] == "search_error"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    listing_counter: Counter[str] = Counter(s.get("listing", "unknown") for s in searches)
    category_counter: Counter[str] = Counter(s.get("category", "unknown") for s in searches)
    top_categories = [{"name": n, "count": c} for n, c in category_counter.most_common(10)]

    empty = sum(1 for s in searches if s.get("results_returned", 0) == 0)
    error_counter: Counter[str] = Counter(e.get("error", "unknown") for e in errors)

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "searches_by_listing": dict(listing_counter),
        "top_categories": top_categories,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
        "errors": {
            "total": len(errors),
            "by_type": dict(error_counter),
        },
    }
