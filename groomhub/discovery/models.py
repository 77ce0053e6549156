from __future__ import annotations

from pydantic import BaseModel, Field

from ..store.schema import Affinity, ProviderKind


class NearbyQuery(BaseModel):
    category: Affinity
    lat: float = Field(..., ge=-90.0, le=90.0, allow_inf_nan=False)
    lng: float = Field(..., ge=-180.0, le=180.0, allow_inf_nan=False)
    radius: float = Field(..., gt=0.0, allow_inf_nan=False, description="Kilometres")
    page: int = Field(default=1, ge=1)
    limit: int = Field(..., ge=1)


class PopularService(BaseModel):
    id: str
    name: str
    price: float | None = None
    duration_mins: int | None = None


class ProviderHit(BaseModel):
    id: str
    kind: ProviderKind
    name: str
    distance_m: float
    distance_km: float
    average_rating: float
    review_count: int
    top_services: list[PopularService] = Field(default_factory=list)


class SalonHit(ProviderHit):
    shop_name: str
    salon_category: Affinity
    image: str | None = None
    offers_home_service: bool = False
    verified: bool = False
    service_categories: list[str] = Field(default_factory=list)


class ProfessionalHit(ProviderHit):
    service_category: Affinity
    profile_photo: str | None = None
    experience_years: int | None = None
    availability_status: str = "available"
    gender: str | None = None
    service_radius_km: float | None = None
    specializations: list[str] = Field(default_factory=list)


class NearbyResponse(BaseModel):
    success: bool = True
    message: str
    page: int
    limit: int
    count: int
    data: list[SalonHit | ProfessionalHit]


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
