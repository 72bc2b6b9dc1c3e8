"""SpatialIndex - Nearest-neighbour and radius queries over road vertices.

Coordinates are projected to the UTM zone of the indexed points' centroid
so that planar k-d tree distances are in meters. Planar results are only
used to pick candidates; reported distances are always great-circle.
"""

from collections.abc import Hashable, Sequence
from math import floor
from typing import Optional

import numpy as np
import pyproj
from scipy.spatial import cKDTree

from campus_navigator.constants import GraphConfig
from campus_navigator.core.geo_calculator import GeoCalculator


def get_utm_zone(lon: float, lat: float) -> str:
    """Get UTM zone EPSG code for given coordinates."""
    zone_number = min(floor((lon + 180) / 6) + 1, 60)
    if lat >= 0:
        return f"EPSG:326{zone_number:02d}"
    return f"EPSG:327{zone_number:02d}"


def _planar_radius(radius_m: float) -> float:
    """Padded planar radius so no great-circle match is lost to projection scale."""
    return radius_m * GraphConfig.PLANAR_PADDING_RATIO + GraphConfig.PLANAR_PADDING_MARGIN_M


class SpatialIndex:
    """Immutable k-d tree over (lat, lon) points with hashable keys.

    Example:
        index = SpatialIndex(keys=["a", "b"], points=[(21.10, 79.00), (21.11, 79.01)])
        key, dist_m = index.nearest(lat=21.1001, lon=79.0001)
    """

    def __init__(
        self,
        keys: Sequence[Hashable],
        points: Sequence[tuple[float, float]],
        candidates: int = GraphConfig.NEAREST_CANDIDATES,
    ) -> None:
        if len(keys) != len(points):
            raise ValueError(f"Got {len(keys)} keys for {len(points)} points")
        if candidates < 1:
            raise ValueError(f"candidates must be positive, got {candidates}")

        self.keys = list(keys)
        self._points = list(points)
        self._candidates = candidates
        self._tree: Optional[cKDTree] = None
        self._to_utm = None

        if not self._points:
            return

        lats = np.array([p[0] for p in self._points], dtype=float)
        lons = np.array([p[1] for p in self._points], dtype=float)
        utm_crs = get_utm_zone(lon=float(lons.mean()), lat=float(lats.mean()))
        self._to_utm = pyproj.Transformer.from_crs(
            pyproj.CRS("EPSG:4326"), pyproj.CRS(utm_crs), always_xy=True
        ).transform
        xs, ys = self._to_utm(lons, lats)
        self._tree = cKDTree(np.column_stack([xs, ys]))

    def __len__(self) -> int:
        return len(self.keys)

    def _project(self, lat: float, lon: float) -> tuple[float, float]:
        x, y = self._to_utm(lon, lat)
        return float(x), float(y)

    def nearest(self, lat: float, lon: float) -> Optional[tuple[Hashable, float]]:
        """Find the indexed point closest to (lat, lon).

        Returns:
            Tuple (key, great-circle distance in meters), or None if the index is empty.
        """
        if self._tree is None:
            return None

        k = min(self._candidates, len(self.keys))
        _, idx = self._tree.query(self._project(lat=lat, lon=lon), k=k)

        best: Optional[tuple[Hashable, float]] = None
        # Lower index wins ties so results follow insertion order
        for i in sorted(int(i) for i in np.atleast_1d(idx)):
            p_lat, p_lon = self._points[i]
            dist = GeoCalculator.haversine_distance_m(lat1=lat, lon1=lon, lat2=p_lat, lon2=p_lon)
            if best is None or dist < best[1]:
                best = (self.keys[i], dist)
        return best

    def pairs_within(self, radius_m: float) -> list[tuple[Hashable, Hashable, float]]:
        """All key pairs within radius_m (great-circle) of each other.

        Returns:
            List of (key_a, key_b, distance_m), ordered by insertion order of key_a then key_b.
        """
        if self._tree is None or radius_m <= 0:
            return []
        pairs = self._tree.query_pairs(r=_planar_radius(radius_m=radius_m), output_type="ndarray")
        result = []
        for a, b in sorted((min(int(a), int(b)), max(int(a), int(b))) for a, b in pairs):
            a_lat, a_lon = self._points[a]
            b_lat, b_lon = self._points[b]
            dist = GeoCalculator.haversine_distance_m(lat1=a_lat, lon1=a_lon, lat2=b_lat, lon2=b_lon)
            if dist <= radius_m:
                result.append((self.keys[a], self.keys[b], dist))
        return result
