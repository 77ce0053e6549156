"""
Provider discovery listings.

Every listing runs the same three stages in a fixed order:

1. Geo-filter: providers of one kind within the radius, with distances.
2. Enrichment: category compatibility, ratings, popular services.
3. Ranking and pagination: nearest first (or best rated), one offset page.

Listings differ only in provider kind, defaults, sort key and whether they
keep home-service salons only.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Mapping

from pydantic import ValidationError

from ..analytics.store import record_event
from ..store.data_store import DataStore, get_store, to_records
from ..store.schema import ProviderKind
from .config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from .enrich import enrich
from .errors import DiscoveryError, InvalidQueryError
from .geo import Origin, filter_by_proximity
from .models import NearbyQuery, NearbyResponse
from .providers import variant_for
from .ranking import rank_and_page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Listing:
    name: str
    kind: ProviderKind
    default_radius_km: float
    default_limit: int
    sort_by: str
    message: str
    empty_message: str
    default_category: str | None = None
    home_service_only: bool = False


def listings(config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG) -> dict[str, Listing]:
    return {
        "nearby_salons": Listing(
            name="nearby_salons",
            kind=ProviderKind.salon,
            default_radius_km=config.salon_radius_km,
            default_limit=config.listing_page_size,
            sort_by="distance",
            message="Nearby salons fetched successfully",
            empty_message="No salons found for this category near you",
        ),
        "nearby_professionals": Listing(
            name="nearby_professionals",
            kind=ProviderKind.professional,
            default_radius_km=config.professional_radius_km,
            default_limit=config.listing_page_size,
            sort_by="distance",
            message="Nearby independent professionals fetched successfully",
            empty_message="No independent professionals found for this category near you",
        ),
        "featured_salons": Listing(
            name="featured_salons",
            kind=ProviderKind.salon,
            default_radius_km=config.salon_radius_km,
            default_limit=config.featured_limit,
            sort_by="rating",
            message="Featured salons retrieved successfully",
            empty_message="No featured salons near you",
            default_category="unisex",
        ),
        "home_service_salons": Listing(
            name="home_service_salons",
            kind=ProviderKind.salon,
            default_radius_km=config.home_service_radius_km,
            default_limit=config.home_service_limit,
            sort_by="distance",
            message="Home service salons fetched successfully",
            empty_message="No salon found for this category near your location",
            home_service_only=True,
        ),
    }


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or "query"
        parts.append(f"{field}: {err['msg']}")
    return "Invalid query: " + "; ".join(parts)


def parse_nearby_query(
    params: Mapping[str, str | None],
    listing: Listing,
    config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG,
) -> NearbyQuery:
    """Validate raw query-string values; anything malformed is an ``InvalidQueryError``."""
    values = {k: v for k, v in params.items() if v is not None and str(v).strip() != ""}
    values.setdefault("radius", listing.default_radius_km)
    values.setdefault("limit", listing.default_limit)
    if listing.default_category:
        values.setdefault("category", listing.default_category)

    try:
        query = NearbyQuery(**values)
    except ValidationError as exc:
        raise InvalidQueryError(_describe(exc)) from None

    if query.limit > config.max_page_size:
        raise InvalidQueryError(f"Invalid limit: at most {config.max_page_size} items per page")
    return query


def run_listing(
    listing: Listing,
    params: Mapping[str, str | None],
    store: DataStore | None = None,
    config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG,
) -> NearbyResponse:
    start_time = time.time()

    try:
        store = store or get_store()
        query = parse_nearby_query(params, listing, config)
        candidates = filter_by_proximity(
            store, Origin(lon=query.lng, lat=query.lat), query.radius, listing.kind,
        )
        enriched = enrich(
            store, candidates, query.category.value, listing.kind, config,
            home_service_only=listing.home_service_only,
        )
        page = rank_and_page(enriched, query.page, query.limit, listing.sort_by)
    except DiscoveryError as exc:
        if isinstance(exc, InvalidQueryError):
            logger.info("Rejected %s query: %s", listing.name, exc.message)
        record_event("search_error", {
            "listing": listing.name,
            "error": type(exc).__name__,
        })
        raise

    variant = variant_for(listing.kind)
    hits = [variant.to_hit(record) for record in to_records(page.items)]

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("search", {
        "listing": listing.name,
        "kind": listing.kind.value,
        "category": query.category.value,
        "radius_km": query.radius,
        "page": query.page,
        "total_candidates": len(candidates),
        "eligible": len(enriched),
        "results_returned": len(hits),
        "response_time_ms": elapsed_ms,
    })

    return NearbyResponse(
        message=listing.message if hits or query.page > 1 else listing.empty_message,
        page=query.page,
        limit=query.limit,
        count=len(hits),
        data=hits,
    )


def nearby_salons(params: Mapping[str, str | None], store: DataStore | None = None) -> NearbyResponse:
    return run_listing(listings()["nearby_salons"], params, store)


def nearby_professionals(params: Mapping[str, str | None], store: DataStore | None = None) -> NearbyResponse:
    return run_listing(listings()["nearby_professionals"], params, store)


def featured_salons(params: Mapping[str, str | None], store: DataStore | None = None) -> NearbyResponse:
    return run_listing(listings()["featured_salons"], params, store)


def home_service_salons(params: Mapping[str, str | None], store: DataStore | None = None) -> NearbyResponse:
    return run_listing(listings()["home_service_salons"], params, store)
