from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from ..store.data_store import DataStore, get_store
from ..store.schema import ProviderKind
from .models import BookingLine, BookingRequest, BookingType

logger = logging.getLogger(__name__)


class InvalidBookingError(ValueError):
    pass


def _prepare(store: DataStore, customer_id: str, line: BookingLine) -> dict[str, Any]:
    if store.get_provider(line.provider_type, line.provider_id) is None:
        raise InvalidBookingError("Invalid provider")
    if line.booking_type is BookingType.home_service and line.service_location is None:
        raise InvalidBookingError("Service location is required for home service")

    wanted = list(dict.fromkeys(line.services))
    docs = store.service_items_by_id(wanted)
    docs = docs.loc[
        (docs["provider_id"] == line.provider_id)
        & (docs["provider_type"] == line.provider_type.value)
        & (docs["status"] == "active")
        & pd.to_numeric(docs["price"], errors="coerce").notna()
    ]
    if len(docs) != len(wanted):
        raise InvalidBookingError("Invalid service selection")

    prices = {sid: float(price) for sid, price in zip(docs["id"], docs["price"])}
    service_items = [{"service": sid, "quantity": 1, "price": prices[sid]} for sid in wanted]

    return {
        "customer_id": customer_id,
        "provider_id": line.provider_id,
        "provider_type": line.provider_type.value,
        "service_items": service_items,
        "booking_date": line.booking_date.isoformat(),
        "time_slot": line.time_slot,
        "booking_type": line.booking_type.value,
        "service_location": (
            line.service_location.model_dump()
            if line.booking_type is BookingType.home_service
            else None
        ),
        "total_amount": round(sum(item["price"] for item in service_items), 2),
        "payment_status": "pending",
        "status": "pending",
        "created_at": pd.Timestamp.now(tz="UTC"),
    }


def create_bookings(
    customer_id: str,
    request: BookingRequest,
    store: DataStore | None = None,
) -> list[dict[str, Any]]:
    """Validate every line first, then write them all; one bad line rejects the request."""
    store = store or get_store()
    prepared = [_prepare(store, customer_id, line) for line in request.bookings]
    created = [store.insert_booking(record) for record in prepared]
    logger.info("Created %d booking(s) for customer %s", len(created), customer_id)
    return created


def bookings_for(customer_id: str, store: DataStore | None = None) -> list[dict[str, Any]]:
    store = store or get_store()
    return store.bookings_for(customer_id)


def salon_bookings(owner_id: str, store: DataStore | None = None) -> list[dict[str, Any]] | None:
    """Bookings made with the salon ``owner_id`` runs, or ``None`` when they run no salon."""
    store = store or get_store()
    salon = store.salon_for_owner(owner_id)
    if salon is None:
        return None
    return store.provider_bookings(ProviderKind.salon, salon["id"])
