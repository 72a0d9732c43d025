"""Small geodesy helpers for working with fingerprint coordinates.

Fingerprints are keyed by latitude/longitude in decimal degrees. Position
errors and survey grids are easier to reason about in meters, so this
module converts between the two on a spherical Earth, which is accurate to
well under a meter at the scale of a single site.

Reference: WGS84 mean radius R = 6371008.8 m
"""

from typing import Tuple, Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

EARTH_RADIUS_M = 6371008.8  # WGS84 mean radius (m)


def haversine_distance(
    lat1: ArrayLike,
    lon1: ArrayLike,
    lat2: ArrayLike,
    lon2: ArrayLike,
) -> Union[float, NDArray[np.float64]]:
    """Great-circle distance between points given in decimal degrees.

    Args:
        lat1, lon1: First point(s), degrees.
        lat2, lon2: Second point(s), degrees. Broadcast against the first.

    Returns:
        Distance in meters (float for scalar inputs, array otherwise).

    Example:
        >>> round(haversine_distance(0.0, 0.0, 0.0, 1.0))
        111195
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = phi2 - phi1
    dlmb = np.radians(np.asarray(lon2) - np.asarray(lon1))

    a = np.sin(dphi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2.0) ** 2
    d = 2.0 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))
    if np.ndim(d) == 0:
        return float(d)
    return d


def offset_to_latlon(
    lat0: float, lon0: float, east_m: float, north_m: float
) -> Tuple[float, float]:
    """Shift a reference point by a local east/north offset in meters.

    Uses the local tangent-plane approximation, valid for offsets of a few
    kilometers.

    Args:
        lat0, lon0: Reference point, degrees.
        east_m: Offset towards east (m).
        north_m: Offset towards north (m).

    Returns:
        (latitude, longitude) in degrees.
    """
    dlat = np.degrees(north_m / EARTH_RADIUS_M)
    dlon = np.degrees(east_m / (EARTH_RADIUS_M * np.cos(np.radians(lat0))))
    return float(lat0 + dlat), float(lon0 + dlon)
