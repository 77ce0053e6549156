from __future__ import annotations

from typing import Any

from ..store.data_store import DataStore, get_store, to_records
from ..store.schema import ProviderKind

_SALON_FIELDS = ["id", "shop_name", "salon_category", "city", "verified_by_admin", "created_at"]


def referred_salons(salesman_id: str, store: DataStore | None = None) -> list[dict[str, Any]] | None:
    """Salons brought in by one salesman, or ``None`` for an unknown salesman."""
    store = store or get_store()
    if store.get_salesman(salesman_id) is None:
        return None
    salons = store.referred(ProviderKind.salon, salesman_id)
    return to_records(salons[_SALON_FIELDS])


def salesman_directory(store: DataStore | None = None) -> list[dict[str, Any]]:
    store = store or get_store()
    salesmen = store.list_salesmen()
    salons = store.frame("salons")["referred_by"].value_counts()
    records = to_records(salesmen)
    for record in records:
        record["total_salons"] = int(salons.get(record["id"], 0))
    return records
