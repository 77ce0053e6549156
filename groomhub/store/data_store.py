from __future__ import annotations

import json
import logging
import math
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

import pandas as pd

from ..discovery.errors import UpstreamQueryError
from .config import DEFAULT_STORE_CONFIG
from .schema import COLLECTION_FOR_KIND, COLLECTIONS, DATETIME_COLUMNS, ProviderKind
from .spatial import haversine_m

logger = logging.getLogger(__name__)

_store: DataStore | None = None


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _is_id_column(column: str) -> bool:
    return column == "id" or column.endswith("_id") or column == "referred_by"


def _flatten_location(record: dict[str, Any]) -> dict[str, Any]:
    """Turn a GeoJSON-style ``location`` sub-document into flat columns."""
    location = record.pop("location", None)
    if not isinstance(location, dict):
        return record
    coordinates = location.get("coordinates") or [None, None]
    record.setdefault("lng", coordinates[0])
    record.setdefault("lat", coordinates[1])
    for key in ("address", "city", "radius_km"):
        if location.get(key) is not None:
            record.setdefault(key, location[key])
    return record


def _normalize(collection: str, records: Iterable[dict[str, Any]]) -> pd.DataFrame:
    columns = COLLECTIONS[collection]
    rows: list[dict[str, Any]] = []
    for raw in records:
        record = _flatten_location(dict(raw))
        if "_id" in record and "id" not in record:
            record["id"] = record.pop("_id")
        if _is_missing(record.get("id")):
            record["id"] = new_id()

        row: dict[str, Any] = {}
        for column, default in columns.items():
            value = record.get(column)
            if _is_missing(value):
                value = default() if default else None
            elif _is_id_column(column):
                value = str(value)
            row[column] = value
        rows.append(row)

    frame = pd.DataFrame(rows, columns=list(columns))
    for column in DATETIME_COLUMNS:
        if column in frame.columns:
            frame[column] = pd.to_datetime(frame[column], utc=True)
    return frame


def to_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Plain-Python records (no numpy scalars, NaN as ``None``)."""
    if frame.empty:
        return []
    return json.loads(frame.to_json(orient="records", date_format="iso"))


def new_id() -> str:
    return uuid.uuid4().hex[:24]


@contextmanager
def _query(operation: str) -> Iterator[None]:
    try:
        yield
    except UpstreamQueryError:
        raise
    except (KeyError, ValueError, TypeError, AttributeError, OSError) as exc:
        logger.exception("Store query %r failed", operation)
        raise UpstreamQueryError(f"Storage query failed: {operation}") from exc


class DataStore:
    """In-memory document store: one DataFrame per collection.

    Reads work on the frame reference current at call time. Writes build a
    new frame and swap it in under a lock, so a read never sees a partially
    applied update.
    """

    def __init__(self, frames: dict[str, pd.DataFrame]) -> None:
        self._frames = {
            name: frames[name] if name in frames else _normalize(name, [])
            for name in COLLECTIONS
        }
        self._lock = threading.Lock()

    @classmethod
    def from_records(cls, **collections: list[dict[str, Any]]) -> DataStore:
        unknown = set(collections) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")
        return cls({name: _normalize(name, docs) for name, docs in collections.items()})

    @classmethod
    def from_json(cls, path: Path) -> DataStore:
        with _query("load"), path.open(encoding="utf-8") as fh:
            raw = json.load(fh)
            store = cls.from_records(**{k: v for k, v in raw.items() if k in COLLECTIONS})
        logger.info(
            "Loaded store from %s (%s)",
            path,
            ", ".join(f"{name}={len(frame)}" for name, frame in store._frames.items()),
        )
        return store

    def frame(self, collection: str) -> pd.DataFrame:
        return self._frames[collection]

    # ── Discovery capabilities ──────────────────────────────────────────

    def near(
        self,
        kind: ProviderKind,
        lon: float,
        lat: float,
        max_distance_m: float,
    ) -> pd.DataFrame:
        """Providers of ``kind`` within ``max_distance_m``, with ``distance_m``."""
        with _query("near"):
            frame = self._frames[COLLECTION_FOR_KIND[kind]]
            lons = pd.to_numeric(frame["lng"], errors="coerce")
            lats = pd.to_numeric(frame["lat"], errors="coerce")
            located = lons.notna() & lats.notna()

            hits = frame.loc[located].assign(
                distance_m=haversine_m(
                    lon,
                    lat,
                    lons[located].to_numpy(dtype=float),
                    lats[located].to_numpy(dtype=float),
                )
            )
            return hits.loc[hits["distance_m"] <= max_distance_m].reset_index(drop=True)

    def review_stats(self, kind: ProviderKind, ids: Iterable[str]) -> pd.DataFrame:
        """Mean rating and review count per target id (ids without reviews omitted)."""
        with _query("review_stats"):
            reviews = self._frames["reviews"]
            mask = (reviews["target_type"] == kind.value) & reviews["target_id"].isin(list(ids))
            ratings = pd.to_numeric(reviews.loc[mask, "rating"], errors="raise").astype(float)
            grouped = ratings.groupby(reviews.loc[mask, "target_id"])
            return pd.DataFrame({
                "average_rating": grouped.mean(),
                "review_count": grouped.count(),
            })

    def top_services(
        self,
        kind: ProviderKind,
        ids: Iterable[str],
        limit: int,
    ) -> dict[str, list[dict[str, Any]]]:
        """Most booked active services per provider id."""
        with _query("top_services"):
            items = self._frames["service_items"]
            mask = (
                (items["provider_type"] == kind.value)
                & (items["status"] == "active")
                & items["provider_id"].isin(list(ids))
            )
            active = items.loc[mask].sort_values(
                ["bookings_count", "id"], ascending=[False, True], kind="mergesort",
            )
            top = active.groupby("provider_id", sort=False).head(limit)
            return {
                provider_id: to_records(group[["id", "name", "price", "duration_mins"]])
                for provider_id, group in top.groupby("provider_id", sort=False)
            }

    def category_names(self, ids: Iterable[str]) -> dict[str, str]:
        with _query("category_names"):
            categories = self._frames["categories"]
            subset = categories.loc[categories["id"].isin(list(ids))]
            return dict(zip(subset["id"], subset["name"]))

    def service_category_names(
        self,
        kind: ProviderKind,
        ids: Iterable[str],
        limit: int,
    ) -> dict[str, list[str]]:
        """Distinct categories each provider lists services under, first ``limit`` only."""
        with _query("service_category_names"):
            items = self._frames["service_items"]
            mask = (items["provider_type"] == kind.value) & items["provider_id"].isin(list(ids))
            names = self._frames["categories"][["id", "name"]].rename(
                columns={"id": "category_id", "name": "category_name"},
            )
            offered = (
                items.loc[mask, ["provider_id", "category_id"]]
                .merge(names, on="category_id", how="inner")
                .drop_duplicates(["provider_id", "category_id"])
            )
            return {
                provider_id: group["category_name"].head(limit).tolist()
                for provider_id, group in offered.groupby("provider_id", sort=False)
            }

    # ── Document lookups ────────────────────────────────────────────────

    def _get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with _query(f"get {collection}"):
            frame = self._frames[collection]
            match = frame.loc[frame["id"] == str(doc_id)]
            return to_records(match.head(1))[0] if not match.empty else None

    def get_provider(self, kind: ProviderKind, provider_id: str) -> dict[str, Any] | None:
        return self._get(COLLECTION_FOR_KIND[kind], provider_id)

    def get_salesman(self, salesman_id: str) -> dict[str, Any] | None:
        return self._get("salesmen", salesman_id)

    def list_salesmen(self) -> pd.DataFrame:
        """Every salesman, newest first."""
        with _query("list_salesmen"):
            return self._frames["salesmen"].sort_values(
                "created_at", ascending=False, kind="mergesort", na_position="last",
            )

    def salon_for_owner(self, owner_id: str) -> dict[str, Any] | None:
        with _query("salon_for_owner"):
            salons = self._frames["salons"]
            match = salons.loc[salons["owner_id"] == str(owner_id)]
            return to_records(match.head(1))[0] if not match.empty else None

    def list_salons(self, verified: bool | None = None) -> pd.DataFrame:
        with _query("list_salons"):
            salons = self._frames["salons"]
            if verified is None:
                return salons
            return salons.loc[salons["verified_by_admin"].astype(bool) == verified]

    def list_categories(self, gender: str | None = None) -> pd.DataFrame:
        """Active categories, newest first."""
        with _query("list_categories"):
            categories = self._frames["categories"]
            mask = categories["active"].astype(bool)
            if gender:
                mask &= categories["gender"] == gender
            return categories.loc[mask].sort_values(
                "created_at", ascending=False, kind="mergesort", na_position="last",
            )

    def services_for(
        self,
        kind: ProviderKind,
        provider_id: str,
        active_only: bool = True,
    ) -> pd.DataFrame:
        """Service items of one provider joined with their category name."""
        with _query("services_for"):
            items = self._frames["service_items"]
            mask = (items["provider_type"] == kind.value) & (items["provider_id"] == str(provider_id))
            if active_only:
                mask &= items["status"] == "active"
            names = self._frames["categories"][["id", "name"]].rename(
                columns={"id": "category_id", "name": "category_name"},
            )
            return items.loc[mask].merge(names, on="category_id", how="left")

    def service_items_by_id(self, ids: Iterable[str]) -> pd.DataFrame:
        with _query("service_items_by_id"):
            items = self._frames["service_items"]
            return items.loc[items["id"].isin([str(i) for i in ids])]

    def referred(self, kind: ProviderKind, salesman_id: str) -> pd.DataFrame:
        with _query("referred"):
            frame = self._frames[COLLECTION_FOR_KIND[kind]]
            return frame.loc[frame["referred_by"] == str(salesman_id)]

    def bookings_for(self, customer_id: str) -> list[dict[str, Any]]:
        with _query("bookings_for"):
            bookings = self._frames["bookings"]
            mine = bookings.loc[bookings["customer_id"] == str(customer_id)]
            return to_records(mine.sort_values("created_at", ascending=False, kind="mergesort"))

    def provider_bookings(self, kind: ProviderKind, provider_id: str) -> list[dict[str, Any]]:
        """Bookings made with one provider, newest first."""
        with _query("provider_bookings"):
            bookings = self._frames["bookings"]
            mask = (bookings["provider_type"] == kind.value) & (bookings["provider_id"] == str(provider_id))
            return to_records(
                bookings.loc[mask].sort_values("created_at", ascending=False, kind="mergesort")
            )

    # ── Writes ──────────────────────────────────────────────────────────

    def verify_salon(self, salon_id: str) -> dict[str, Any] | None:
        with self._lock, _query("verify_salon"):
            salons = self._frames["salons"]
            mask = salons["id"] == str(salon_id)
            if not mask.any():
                return None
            updated = salons.copy()
            updated.loc[mask, "verified_by_admin"] = True
            self._frames["salons"] = updated
            return to_records(updated.loc[mask])[0]

    def insert_booking(self, record: dict[str, Any]) -> dict[str, Any]:
        with self._lock, _query("insert_booking"):
            row = _normalize("bookings", [record])
            existing = self._frames["bookings"]
            self._frames["bookings"] = (
                row if existing.empty else pd.concat([existing, row], ignore_index=True)
            )
            return to_records(row)[0]


def get_store() -> DataStore:
    """Return the process-wide store, loading the seed on first call."""
    global _store
    if _store is None:
        _store = DataStore.from_json(DEFAULT_STORE_CONFIG.seed_path)
    return _store


def set_store(store: DataStore | None) -> None:
    """Swap the process-wide store (``None`` forces a reload from the seed)."""
    global _store
    _store = store
