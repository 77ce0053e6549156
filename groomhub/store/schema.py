"""
Canonical document shapes for each collection held by the store.

Seed documents are normalised into these columns before they are loaded
into DataFrames, so downstream code can rely on every column existing.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable


class ProviderKind(str, Enum):
    salon = "Salon"
    professional = "IndependentProfessional"


class Affinity(str, Enum):
    men = "men"
    women = "women"
    unisex = "unisex"


COLLECTION_FOR_KIND: dict[ProviderKind, str] = {
    ProviderKind.salon: "salons",
    ProviderKind.professional: "professionals",
}

# column -> default factory (None means required / left missing)
COLLECTIONS: dict[str, dict[str, Callable[[], Any] | None]] = {
    "salons": {
        "id": None,
        "owner_id": None,
        "shop_name": None,
        "shop_type": lambda: "individual",
        "salon_category": None,
        "lng": None,
        "lat": None,
        "address": lambda: "",
        "city": lambda: "",
        "gallery_images": list,
        "offers_home_service": lambda: False,
        "verified_by_admin": lambda: False,
        "referred_by": None,
        "created_at": None,
    },
    "professionals": {
        "id": None,
        "user_id": None,
        "name": None,
        "gender": None,
        "service_category": None,
        "lng": None,
        "lat": None,
        "address": lambda: "",
        "city": lambda: "",
        "radius_km": lambda: 10.0,
        "profile_photo": None,
        "experience_years": lambda: 0,
        "specializations": list,
        "availability_status": lambda: "available",
        "referred_by": None,
        "created_at": None,
    },
    "reviews": {
        "id": None,
        "target_type": None,
        "target_id": None,
        "user_id": None,
        "rating": None,
        "comment": lambda: "",
        "images": list,
    },
    "service_items": {
        "id": None,
        "name": None,
        "category_id": None,
        "price": None,
        "duration_mins": lambda: 30,
        "discount_percent": lambda: 0,
        "status": lambda: "active",
        "service_mode": lambda: "salon",
        "provider_type": None,
        "provider_id": None,
        "bookings_count": lambda: 0,
    },
    "categories": {
        "id": None,
        "name": None,
        "gender": None,
        "icon": None,
        "active": lambda: True,
        "created_at": None,
    },
    "salesmen": {
        "id": None,
        "user_id": None,
        "referral_id": None,
        "city": lambda: "",
        "commission_rate": lambda: 0.0,
        "total_earnings": lambda: 0.0,
        "created_at": None,
    },
    "bookings": {
        "id": None,
        "customer_id": None,
        "provider_id": None,
        "provider_type": None,
        "service_items": list,
        "booking_date": None,
        "time_slot": None,
        "booking_type": lambda: "salon",
        "service_location": None,
        "total_amount": lambda: 0.0,
        "payment_status": lambda: "pending",
        "status": lambda: "pending",
        "created_at": None,
    },
}

DATETIME_COLUMNS = ("created_at",)
