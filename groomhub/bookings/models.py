from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field

from ..store.schema import ProviderKind


class BookingType(str, Enum):
    salon = "salon"
    home_service = "home_service"


class ServiceLocation(BaseModel):
    address: str = Field(..., min_length=1)
    lat: float | None = Field(default=None, ge=-90.0, le=90.0)
    lng: float | None = Field(default=None, ge=-180.0, le=180.0)


class BookingLine(BaseModel):
    provider_id: str = Field(..., min_length=1)
    provider_type: ProviderKind = ProviderKind.salon
    services: list[str] = Field(..., min_length=1)
    booking_date: date
    time_slot: str = Field(..., min_length=1, description='e.g. "10:30-11:00"')
    booking_type: BookingType = BookingType.salon
    service_location: ServiceLocation | None = None


class BookingRequest(BaseModel):
    bookings: list[BookingLine] = Field(..., min_length=1)


class BookedService(BaseModel):
    service: str
    quantity: int = 1
    price: float


class BookingOut(BaseModel):
    id: str
    customer_id: str
    provider_id: str
    provider_type: ProviderKind
    service_items: list[BookedService]
    booking_date: str
    time_slot: str
    booking_type: BookingType
    service_location: ServiceLocation | None = None
    total_amount: float
    payment_status: str
    status: str
    created_at: str | None = None


class BookingResponse(BaseModel):
    message: str
    bookings: list[BookingOut]


class ProviderBookingsResponse(BaseModel):
    success: bool = True
    count: int
    bookings: list[BookingOut]
