"""
MDAD Geometry Utilities
=======================
Great-circle distance, temporal proximity, and cluster center / radius.

The center is the plain arithmetic mean of latitudes and longitudes,
not a spherical centroid. Adequate for cluster radii of tens of km.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .mdad_types import Signal

# ===== CONSTANTS =====
EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 25.0       # Used when a cluster has <= 1 distance sample
MIN_RADIUS_KM = 15.0
RADIUS_PERCENTILE = 0.9
RADIUS_MARGIN = 1.2


# ===== DISTANCE =====

def haversine_km(lat1, lon1, lat2, lon2):
    """Great circle distance between geodetic points on a 6371 km sphere.

    Args:
        lat1, lon1, lat2, lon2: Degrees. Scalars or broadcastable arrays.

    Returns:
        Distance in km (float for scalar input, ndarray otherwise).
    """
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = np.sin(dlat/2)**2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon/2)**2
    a = np.clip(a, 0.0, 1.0)
    d = 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    if np.ndim(d) == 0:
        return float(d)
    return d


def distances_from(lat: float, lon: float, signals: Sequence[Signal]) -> np.ndarray:
    """Distance (km) from one point to every signal, in signal order."""
    if not signals:
        return np.empty(0)
    lats = np.fromiter((s.latitude for s in signals), dtype=float, count=len(signals))
    lons = np.fromiter((s.longitude for s in signals), dtype=float, count=len(signals))
    return np.atleast_1d(haversine_km(lat, lon, lats, lons))


# ===== TIME =====

def within_temporal_window(a: Signal, b: Signal, window_hours: float) -> bool:
    """Symmetric test: |a.t - b.t| <= window (inclusive)."""
    diff_s = abs((a.timestamp - b.timestamp).total_seconds())
    return diff_s <= window_hours * 3600.0


# ===== CLUSTER GEOMETRY =====

def cluster_center(signals: Sequence[Signal]) -> Tuple[float, float]:
    """Unweighted mean of member latitudes and longitudes."""
    coords = np.array([[s.latitude, s.longitude] for s in signals], dtype=float)
    lat, lon = coords.mean(axis=0)
    return float(lat), float(lon)


def cluster_radius(signals: Sequence[Signal], center: Tuple[float, float]) -> float:
    """Operational radius: 90th-percentile member distance x 1.2, min 15 km.

    The percentile is the sorted sample at index floor(n * 0.9), not an
    interpolated percentile.
    """
    if len(signals) <= 1:
        return DEFAULT_RADIUS_KM

    d = np.sort(distances_from(center[0], center[1], signals))
    idx = int(np.floor(len(d) * RADIUS_PERCENTILE))
    return float(max(d[idx] * RADIUS_MARGIN, MIN_RADIUS_KM))
