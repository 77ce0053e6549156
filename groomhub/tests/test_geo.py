from __future__ import annotations

import math

import numpy as np
import pytest

from groomhub.discovery.errors import InvalidQueryError
from groomhub.discovery.geo import Origin, filter_by_proximity, validate_origin
from groomhub.store.data_store import DataStore
from groomhub.store.schema import ProviderKind
from groomhub.store.spatial import EARTH_RADIUS_M, haversine_m

from .factories import ORIGIN_LAT, ORIGIN_LNG, professional, salon

ORIGIN = Origin(lon=ORIGIN_LNG, lat=ORIGIN_LAT)


def test_haversine_one_hundredth_degree_of_latitude():
    expected = EARTH_RADIUS_M * math.radians(0.01)
    result = haversine_m(77.2, 28.61, np.array([77.2]), np.array([28.62]))
    assert result[0] == pytest.approx(expected, rel=1e-9)


def test_haversine_zero_for_same_point():
    result = haversine_m(77.2, 28.61, np.array([77.2]), np.array([28.61]))
    assert result[0] == pytest.approx(0.0, abs=1e-6)


def test_every_candidate_is_within_radius(scenario_store):
    for radius_km in (0.5, 2.0, 5.0, 10.0, 25.0):
        hits = filter_by_proximity(scenario_store, ORIGIN, radius_km, ProviderKind.salon)
        assert (hits["distance_m"] <= radius_km * 1000).all()


def test_radius_excludes_far_providers(scenario_store):
    hits = filter_by_proximity(scenario_store, ORIGIN, 10, ProviderKind.salon)
    ids = set(hits["id"])
    assert {f"in-{k}" for k in range(1, 9)} <= ids
    assert not ids & {"out-12", "out-15", "out-20"}


def test_kinds_are_queried_separately():
    store = DataStore.from_records(
        salons=[salon("s", ORIGIN_LAT, ORIGIN_LNG, "men")],
        professionals=[professional("p", ORIGIN_LAT, ORIGIN_LNG, "men")],
    )
    salons = filter_by_proximity(store, ORIGIN, 1, ProviderKind.salon)
    pros = filter_by_proximity(store, ORIGIN, 1, ProviderKind.professional)
    assert salons["id"].tolist() == ["s"]
    assert pros["id"].tolist() == ["p"]


def test_providers_without_coordinates_are_skipped():
    store = DataStore.from_records(salons=[
        salon("located", ORIGIN_LAT, ORIGIN_LNG, "men"),
        {"id": "nowhere", "shop_name": "Nowhere", "salon_category": "men"},
    ])
    hits = filter_by_proximity(store, ORIGIN, 5, ProviderKind.salon)
    assert hits["id"].tolist() == ["located"]


def test_empty_collection_returns_empty_frame():
    store = DataStore.from_records()
    hits = filter_by_proximity(store, ORIGIN, 5, ProviderKind.professional)
    assert hits.empty
    assert "distance_m" in hits.columns


class TestOriginValidation:
    @pytest.mark.parametrize("lon,lat", [
        (181.0, 28.6),
        (-180.5, 28.6),
        (77.2, 90.1),
        (77.2, -91.0),
        (float("nan"), 28.6),
        (77.2, float("inf")),
    ])
    def test_out_of_range_origin(self, lon, lat):
        with pytest.raises(InvalidQueryError):
            validate_origin(Origin(lon=lon, lat=lat), 10)

    @pytest.mark.parametrize("radius", [0, -1, float("nan"), float("inf")])
    def test_bad_radius(self, radius):
        with pytest.raises(InvalidQueryError):
            validate_origin(ORIGIN, radius)

    def test_string_coordinates_rejected(self):
        with pytest.raises(InvalidQueryError):
            validate_origin(Origin(lon="77.2", lat=28.6), 10)

    def test_boundaries_accepted(self):
        validate_origin(Origin(lon=180.0, lat=-90.0), 0.001)
