from __future__ import annotations

import pytest

from groomhub.analytics.store import clear_events
from groomhub.store.data_store import DataStore, set_store

from .factories import ORIGIN_LAT, ORIGIN_LNG, salon


@pytest.fixture(autouse=True)
def _fresh_state():
    """Every test starts from the bundled seed and an empty event log."""
    set_store(None)
    clear_events()
    yield
    set_store(None)


@pytest.fixture
def scenario_store() -> DataStore:
    """
    Eight men/unisex salons spaced ~1.1 km apart due north of the origin,
    two women salons inside the radius and three men salons outside it.
    """
    affinities = ["men", "unisex", "men", "men", "unisex", "men", "unisex", "men"]
    salons = [
        salon(f"in-{k}", ORIGIN_LAT + k * 0.01, ORIGIN_LNG, category)
        for k, category in enumerate(affinities, start=1)
    ]
    salons += [
        salon("women-1", ORIGIN_LAT - 0.015, ORIGIN_LNG, "women"),
        salon("women-2", ORIGIN_LAT, ORIGIN_LNG + 0.02, "women"),
    ]
    salons += [
        salon(f"out-{k}", ORIGIN_LAT + k * 0.01, ORIGIN_LNG, "men")
        for k in (12, 15, 20)
    ]
    return DataStore.from_records(salons=salons)
