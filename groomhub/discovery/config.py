from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class DiscoveryConfig:
    salon_radius_km: float = float(os.getenv("GROOMHUB_SALON_RADIUS_KM", "10"))
    professional_radius_km: float = float(os.getenv("GROOMHUB_PRO_RADIUS_KM", "50"))
    listing_page_size: int = int(os.getenv("GROOMHUB_PAGE_SIZE", "5"))
    admin_page_size: int = int(os.getenv("GROOMHUB_ADMIN_PAGE_SIZE", "20"))
    category_page_size: int = 10
    featured_limit: int = 10
    home_service_radius_km: float = float(os.getenv("GROOMHUB_HOME_SERVICE_RADIUS_KM", "50"))
    home_service_limit: int = 20
    max_page_size: int = int(os.getenv("GROOMHUB_MAX_PAGE_SIZE", "50"))
    top_services_limit: int = 3
    top_specializations_limit: int = 3
    top_service_categories_limit: int = 3
    require_verified_salons: bool = _env_bool("GROOMHUB_REQUIRE_VERIFIED", False)


DEFAULT_DISCOVERY_CONFIG = DiscoveryConfig()
