"""
Salon / independent professional as one tagged variant.

Each ``ProviderVariant`` names where a kind keeps its category affinity and
display name, and how an enriched row is projected into its hit model. The
pipeline only ever talks to providers through these variants.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..store.schema import ProviderKind
from .models import PopularService, ProfessionalHit, ProviderHit, SalonHit


def _common(record: dict[str, Any], kind: ProviderKind) -> dict[str, Any]:
    distance_m = float(record["distance_m"])
    return {
        "id": str(record["id"]),
        "kind": kind,
        "name": record[variant_for(kind).name_field],
        "distance_m": distance_m,
        "distance_km": round(distance_m / 1000.0, 2),
        "average_rating": round(float(record.get("average_rating") or 0.0), 1),
        "review_count": int(record.get("review_count") or 0),
        "top_services": [PopularService(**s) for s in record.get("top_services") or []],
    }


def _salon_hit(record: dict[str, Any]) -> SalonHit:
    gallery = record.get("gallery_images") or []
    return SalonHit(
        **_common(record, ProviderKind.salon),
        shop_name=record["shop_name"],
        salon_category=record["salon_category"],
        image=gallery[0] if gallery else None,
        offers_home_service=bool(record.get("offers_home_service")),
        verified=bool(record.get("verified_by_admin")),
        service_categories=record.get("service_category_names") or [],
    )


def _professional_hit(record: dict[str, Any]) -> ProfessionalHit:
    return ProfessionalHit(
        **_common(record, ProviderKind.professional),
        service_category=record["service_category"],
        profile_photo=record.get("profile_photo"),
        experience_years=record.get("experience_years"),
        availability_status=record.get("availability_status") or "available",
        gender=record.get("gender"),
        service_radius_km=record.get("radius_km"),
        specializations=record.get("specialization_names") or [],
    )


@dataclass(frozen=True)
class ProviderVariant:
    kind: ProviderKind
    affinity_field: str
    name_field: str
    to_hit: Callable[[dict[str, Any]], ProviderHit]
    specializations_field: str | None = None
    verification_field: str | None = None
    home_service_field: str | None = None
    lists_service_categories: bool = False


VARIANTS: dict[ProviderKind, ProviderVariant] = {
    ProviderKind.salon: ProviderVariant(
        kind=ProviderKind.salon,
        affinity_field="salon_category",
        name_field="shop_name",
        to_hit=_salon_hit,
        verification_field="verified_by_admin",
        home_service_field="offers_home_service",
        lists_service_categories=True,
    ),
    ProviderKind.professional: ProviderVariant(
        kind=ProviderKind.professional,
        affinity_field="service_category",
        name_field="name",
        to_hit=_professional_hit,
        specializations_field="specializations",
    ),
}


def variant_for(kind: ProviderKind) -> ProviderVariant:
    return VARIANTS[ProviderKind(kind)]
