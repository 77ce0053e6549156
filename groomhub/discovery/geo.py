from __future__ import annotations

import math
from dataclasses import dataclass

import pandas as pd

from ..store.data_store import DataStore
from ..store.schema import ProviderKind
from .errors import InvalidQueryError


@dataclass(frozen=True)
class Origin:
    lon: float
    lat: float


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_origin(origin: Origin, radius_km: float) -> None:
    if not (_is_number(origin.lon) and -180.0 <= origin.lon <= 180.0):
        raise InvalidQueryError("Invalid longitude: expected a number between -180 and 180")
    if not (_is_number(origin.lat) and -90.0 <= origin.lat <= 90.0):
        raise InvalidQueryError("Invalid latitude: expected a number between -90 and 90")
    if not (_is_number(radius_km) and radius_km > 0):
        raise InvalidQueryError("Invalid radius: expected a positive number of kilometres")


def filter_by_proximity(
    store: DataStore,
    origin: Origin,
    radius_km: float,
    kind: ProviderKind,
) -> pd.DataFrame:
    """
    Providers of ``kind`` within ``radius_km`` of ``origin``.

    Each row carries ``distance_m``. Row order is whatever the store returns;
    ranking happens downstream.
    """
    validate_origin(origin, radius_km)
    return store.near(kind, origin.lon, origin.lat, radius_km * 1000.0)
