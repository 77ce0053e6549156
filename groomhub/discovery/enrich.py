from __future__ import annotations

import pandas as pd

from ..store.data_store import DataStore
from ..store.schema import ProviderKind
from .config import DEFAULT_DISCOVERY_CONFIG, DiscoveryConfig
from .errors import InvalidQueryError
from .providers import variant_for

# Requested category -> provider affinities it admits. A unisex request
# admits everyone; a gendered request admits that gender plus unisex.
ELIGIBLE_AFFINITIES: dict[str, tuple[str, ...]] = {
    "men": ("men", "unisex"),
    "women": ("women", "unisex"),
    "unisex": ("men", "women", "unisex"),
}


def eligible_affinities(requested_category: str) -> tuple[str, ...]:
    try:
        return ELIGIBLE_AFFINITIES[str(requested_category)]
    except KeyError:
        raise InvalidQueryError(
            f"Invalid category {requested_category!r}. Allowed: men | women | unisex"
        ) from None


def enrich(
    store: DataStore,
    candidates: pd.DataFrame,
    requested_category: str,
    kind: ProviderKind,
    config: DiscoveryConfig = DEFAULT_DISCOVERY_CONFIG,
    home_service_only: bool = False,
) -> pd.DataFrame:
    """Drop incompatible providers and attach rating and service aggregates."""
    allowed = eligible_affinities(requested_category)
    variant = variant_for(kind)

    mask = candidates[variant.affinity_field].isin(allowed)
    if variant.verification_field and config.require_verified_salons:
        mask &= candidates[variant.verification_field].astype(bool)
    if home_service_only and variant.home_service_field:
        mask &= candidates[variant.home_service_field].astype(bool)
    eligible = candidates.loc[mask].reset_index(drop=True)

    ids = eligible["id"].tolist()
    stats = store.review_stats(kind, ids)
    eligible["average_rating"] = eligible["id"].map(stats["average_rating"]).fillna(0.0).astype(float)
    eligible["review_count"] = eligible["id"].map(stats["review_count"]).fillna(0).astype(int)

    services = store.top_services(kind, ids, config.top_services_limit)
    eligible["top_services"] = pd.Series(
        [services.get(pid, []) for pid in ids], index=eligible.index, dtype=object,
    )

    if variant.lists_service_categories:
        offered = store.service_category_names(kind, ids, config.top_service_categories_limit)
        eligible["service_category_names"] = pd.Series(
            [offered.get(pid, []) for pid in ids], index=eligible.index, dtype=object,
        )

    if variant.specializations_field:
        specs = eligible[variant.specializations_field]
        names = store.category_names({c for cats in specs for c in cats or []})
        eligible["specialization_names"] = pd.Series(
            [
                [names[c] for c in (cats or []) if c in names][: config.top_specializations_limit]
                for cats in specs
            ],
            index=eligible.index,
            dtype=object,
        )

    return eligible
