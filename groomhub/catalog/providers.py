from __future__ import annotations

from typing import Any

from ..discovery.ranking import paginate, total_pages
from ..store.data_store import DataStore, get_store, to_records
from ..store.schema import ProviderKind


def _rating_summary(store: DataStore, kind: ProviderKind, provider_id: str) -> dict[str, Any]:
    stats = store.review_stats(kind, [provider_id])
    if provider_id not in stats.index:
        return {"average_rating": 0.0, "review_count": 0}
    row = stats.loc[provider_id]
    return {
        "average_rating": round(float(row["average_rating"]), 1),
        "review_count": int(row["review_count"]),
    }


def salon_detail(salon_id: str, store: DataStore | None = None) -> dict[str, Any] | None:
    """Salon document with its rating summary and the categories it offers."""
    store = store or get_store()
    salon = store.get_provider(ProviderKind.salon, salon_id)
    if salon is None:
        return None

    services = store.services_for(ProviderKind.salon, salon_id, active_only=False)
    offered = services.dropna(subset=["category_name"]).drop_duplicates("category_id")
    return {
        **salon,
        **_rating_summary(store, ProviderKind.salon, salon_id),
        "service_categories": [
            {"id": cid, "name": name}
            for cid, name in zip(offered["category_id"], offered["category_name"])
        ],
    }


def salon_services(salon_id: str, store: DataStore | None = None) -> list[dict[str, Any]]:
    """Active services of a salon grouped by category name, in first-seen order."""
    store = store or get_store()
    services = store.services_for(ProviderKind.salon, salon_id)
    services = services.assign(category_name=services["category_name"].fillna("Uncategorized"))

    grouped: dict[str, dict[str, Any]] = {}
    for record in to_records(services):
        name = record.pop("category_name")
        grouped.setdefault(name, {"category": name, "items": []})["items"].append(record)
    return list(grouped.values())


def professional_detail(professional_id: str, store: DataStore | None = None) -> dict[str, Any] | None:
    store = store or get_store()
    pro = store.get_provider(ProviderKind.professional, professional_id)
    if pro is None:
        return None

    names = store.category_names(pro.get("specializations") or [])
    return {
        **pro,
        **_rating_summary(store, ProviderKind.professional, professional_id),
        "specializations": [
            {"id": cid, "name": names[cid]}
            for cid in pro.get("specializations") or []
            if cid in names
        ],
    }


# ── Administration ──────────────────────────────────────────────────────


def admin_salon_page(
    page: int,
    limit: int,
    store: DataStore | None = None,
) -> dict[str, Any]:
    store = store or get_store()
    salons = store.list_salons()
    items = to_records(paginate(salons, page, limit))
    return {
        "success": True,
        "message": "Salons fetched successfully",
        "page": page,
        "limit": limit,
        "total_pages": total_pages(len(salons), limit),
        "count": len(items),
        "total_count": len(salons),
        "salons": items,
    }


def unverified_salons(store: DataStore | None = None) -> list[dict[str, Any]]:
    store = store or get_store()
    return to_records(store.list_salons(verified=False))


def verify_salon(salon_id: str, store: DataStore | None = None) -> dict[str, Any] | None:
    store = store or get_store()
    return store.verify_salon(salon_id)
