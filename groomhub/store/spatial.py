from __future__ import annotations

import numpy as np

# Equatorial earth radius.
EARTH_RADIUS_M = 6378100.0


def haversine_m(
    lon: float,
    lat: float,
    lons: np.ndarray,
    lats: np.ndarray,
) -> np.ndarray:
    """Great-circle distance in metres from one point to arrays of points."""
    lon1, lat1 = np.radians(lon), np.radians(lat)
    lon2, lat2 = np.radians(lons), np.radians(lats)

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = np.sin(dlat / 2.0) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2.0) ** 2
    return 2.0 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
