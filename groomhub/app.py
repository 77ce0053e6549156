from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .auth.dependencies import require_admin, require_role, require_user
from .auth.models import LoginRequest
from .auth.users import authenticate
from .bookings.models import BookingRequest, BookingResponse, ProviderBookingsResponse
from .bookings.service import InvalidBookingError, bookings_for, create_bookings, salon_bookings
from .catalog.categories import category_page
from .catalog.providers import (
    admin_salon_page,
    professional_detail,
    salon_detail,
    salon_services,
    unverified_salons,
    verify_salon,
)
from .discovery.config import DEFAULT_DISCOVERY_CONFIG
from .discovery.errors import DiscoveryError
from .discovery.models import ErrorResponse, NearbyResponse
from .discovery.pipeline import (
    featured_salons,
    home_service_salons,
    nearby_professionals,
    nearby_salons,
)
from .discovery.ranking import parse_page
from .referrals.dashboard import dashboard_stats
from .referrals.salesmen import referred_salons, salesman_directory

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

app = FastAPI(title="GroomHub Discovery API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "groomhub-secret-change-in-production"),
)


@app.exception_handler(DiscoveryError)
async def discovery_error_handler(request: Request, exc: DiscoveryError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Query failed for %s: %s", request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


def _geo_params(
    category: str | None,
    lat: str | None,
    lng: str | None,
    radius: str | None,
    page: str | None,
    limit: str | None,
) -> dict[str, str | None]:
    return {
        "category": category,
        "lat": lat,
        "lng": lng,
        "radius": radius,
        "page": page,
        "limit": limit,
    }


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/salons/nearby", response_model=NearbyResponse, responses=_ERROR_RESPONSES)
def get_nearby_salons(
    category: str | None = None,
    lat: str | None = None,
    lng: str | None = None,
    radius: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> NearbyResponse:
    return nearby_salons(_geo_params(category, lat, lng, radius, page, limit))


@app.get("/salons/featured", response_model=NearbyResponse, responses=_ERROR_RESPONSES)
def get_featured_salons(
    lat: str | None = None,
    lng: str | None = None,
    radius: str | None = None,
    category: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> NearbyResponse:
    return featured_salons(_geo_params(category, lat, lng, radius, page, limit))


@app.get("/professionals/nearby", response_model=NearbyResponse, responses=_ERROR_RESPONSES)
def get_nearby_professionals(
    category: str | None = None,
    lat: str | None = None,
    lng: str | None = None,
    radius: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> NearbyResponse:
    return nearby_professionals(_geo_params(category, lat, lng, radius, page, limit))


@app.get("/salons/home-service", response_model=NearbyResponse, responses=_ERROR_RESPONSES)
def get_home_service_salons(
    category: str | None = None,
    lat: str | None = None,
    lng: str | None = None,
    radius: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> NearbyResponse:
    return home_service_salons(_geo_params(category, lat, lng, radius, page, limit))


@app.get("/salons/{salon_id}")
def get_salon(salon_id: str) -> dict:
    salon = salon_detail(salon_id)
    if salon is None:
        raise HTTPException(status_code=404, detail="Salon not found")
    return {"success": True, "data": salon}


@app.get("/salons/{salon_id}/services")
def get_salon_services(salon_id: str) -> dict:
    if salon_detail(salon_id) is None:
        raise HTTPException(status_code=404, detail="Salon not found")
    return {"salon_id": salon_id, "categories": salon_services(salon_id)}


@app.get("/professionals/{professional_id}")
def get_professional(professional_id: str) -> dict:
    pro = professional_detail(professional_id)
    if pro is None:
        raise HTTPException(status_code=404, detail="Independent professional not found")
    return {
        "success": True,
        "message": "Independent professional fetched successfully",
        "data": pro,
    }


@app.get("/categories")
def get_categories(
    gender: str | None = None,
    page: str | None = None,
    limit: str | None = None,
) -> dict:
    page_number, page_size = parse_page(
        page,
        limit,
        DEFAULT_DISCOVERY_CONFIG.category_page_size,
        DEFAULT_DISCOVERY_CONFIG.max_page_size,
    )
    return category_page(gender, page_number, page_size)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Customer endpoints ───────────────────────────────────────────────────


@app.post("/bookings", response_model=BookingResponse, status_code=201)
def post_bookings(
    body: BookingRequest,
    user: dict = Depends(require_user),
) -> BookingResponse:
    try:
        created = create_bookings(user["user_id"], body)
    except InvalidBookingError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return BookingResponse(message="Booking created successfully", bookings=created)


@app.get("/bookings/me", response_model=BookingResponse)
def my_bookings(user: dict = Depends(require_user)) -> BookingResponse:
    return BookingResponse(
        message="Bookings fetched successfully",
        bookings=bookings_for(user["user_id"]),
    )


# ── Salon owner endpoints ────────────────────────────────────────────────


@app.get("/salon/bookings", response_model=ProviderBookingsResponse)
def my_salon_bookings(user: dict = Depends(require_role("salon_owner"))) -> ProviderBookingsResponse:
    bookings = salon_bookings(user["user_id"])
    if bookings is None:
        raise HTTPException(status_code=404, detail="Salon not found for this user")
    return ProviderBookingsResponse(count=len(bookings), bookings=bookings)


# ── Salesman endpoints ───────────────────────────────────────────────────


@app.get("/salesman/dashboard-stats")
def salesman_dashboard(user: dict = Depends(require_role("salesman"))) -> dict:
    stats = dashboard_stats(user.get("role_id") or "")
    if stats is None:
        raise HTTPException(status_code=404, detail="Salesman not found")
    return stats


@app.get("/salesman/get-my-salons")
def salesman_salons(user: dict = Depends(require_role("salesman"))) -> dict:
    salons = referred_salons(user.get("role_id") or "")
    if salons is None:
        raise HTTPException(status_code=403, detail="Not a salesman")
    return {"success": True, "count": len(salons), "salons": salons}


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/admin/salons")
def admin_salons(
    page: str | None = None,
    limit: str | None = None,
    user: dict = Depends(require_admin),
) -> dict:
    page_number, page_size = parse_page(
        page,
        limit,
        DEFAULT_DISCOVERY_CONFIG.admin_page_size,
        DEFAULT_DISCOVERY_CONFIG.max_page_size,
    )
    return admin_salon_page(page_number, page_size)


@app.get("/admin/salesmen")
def admin_salesmen(user: dict = Depends(require_role("super_admin", "sales_executive"))) -> dict:
    salesmen = salesman_directory()
    return {"success": True, "count": len(salesmen), "salesmen": salesmen}


@app.get("/admin/salons/unverified")
def admin_unverified_salons(user: dict = Depends(require_admin)) -> dict:
    return {
        "success": True,
        "message": "Unverified salons fetched successfully",
        "data": unverified_salons(),
    }


@app.patch("/admin/salons/{salon_id}/verify")
def admin_verify_salon(salon_id: str, user: dict = Depends(require_admin)) -> dict:
    salon = verify_salon(salon_id)
    if salon is None:
        raise HTTPException(status_code=404, detail="Salon not found")
    logger.info("Salon %s verified by %s", salon_id, user["username"])
    return {"success": True, "message": "Salon verified successfully", "salon": salon}


@app.get("/analytics")
def analytics(user: dict = Depends(require_admin)) -> dict:
    return compute_analytics(get_events())
