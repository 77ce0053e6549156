from __future__ import annotations

import calendar
from typing import Any

from ..store.data_store import DataStore, get_store, to_records
from ..store.schema import ProviderKind

_RECENT_LIMIT = 5


def monthly_growth(salons) -> list[dict[str, Any]]:
    """Referred salons per calendar month, oldest month first."""
    created = salons["created_at"].dropna()
    counts = created.groupby(
        [created.dt.year.rename("year"), created.dt.month.rename("month")]
    ).size().sort_index()
    return [
        {"month": f"{calendar.month_abbr[int(month)]} {int(year)}", "value": int(count)}
        for (year, month), count in counts.items()
    ]


def dashboard_stats(salesman_id: str, store: DataStore | None = None) -> dict[str, Any] | None:
    store = store or get_store()
    salesman = store.get_salesman(salesman_id)
    if salesman is None:
        return None

    salons = store.referred(ProviderKind.salon, salesman_id)
    professionals = store.referred(ProviderKind.professional, salesman_id)

    recent = salons.sort_values(
        "created_at", ascending=False, kind="mergesort", na_position="last",
    ).head(_RECENT_LIMIT)

    return {
        "summary": {
            "total_salons": len(salons),
            "total_independent_professionals": len(professionals),
            "commission_rate": salesman.get("commission_rate"),
            "total_earnings": salesman.get("total_earnings"),
        },
        "recent_salons": [
            {
                "salon_name": row["shop_name"],
                "date": row["created_at"],
                "verified": bool(row["verified_by_admin"]),
            }
            for row in to_records(recent)
        ],
        "monthly_sales_growth": monthly_growth(salons),
    }
