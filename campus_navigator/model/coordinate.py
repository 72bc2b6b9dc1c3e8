"""Coordinate and NodeId - The geometry atom and the graph key.

A Coordinate is a single (lat, lon) position in decimal degrees.
A NodeId is the typed key of a graph node. Road vertex IDs are derived
from the coordinate rounded to CoordinateConfig.NODE_ID_DECIMALS, so two
coordinates are the same vertex only if they agree at that precision.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np

from campus_navigator.constants import CoordinateConfig, EntityPrefixes
from campus_navigator.core.geo_calculator import GeoCalculator


@dataclass(frozen=True)
class Coordinate:
    """An immutable WGS84 position without altitude.

    Attributes:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees

    Example:
        gate = Coordinate(lat=21.10311, lon=79.00397)
        gate.distance_to(Coordinate(lat=21.10359, lon=79.00497))  # ~117m
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if np.isnan(self.lat) or np.isnan(self.lon):
            raise ValueError(f"Coordinate cannot be NaN: ({self.lat}, {self.lon})")
        lat_min, lat_max = CoordinateConfig.LAT_RANGE
        lon_min, lon_max = CoordinateConfig.LON_RANGE
        if not lat_min <= self.lat <= lat_max:
            raise ValueError(f"Latitude {self.lat} outside [{lat_min}, {lat_max}]")
        if not lon_min <= self.lon <= lon_max:
            raise ValueError(f"Longitude {self.lon} outside [{lon_min}, {lon_max}]")

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.lat, self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON/Shapely order."""
        return (self.lon, self.lat)

    def distance_to(self, other: "Coordinate") -> float:
        """Great-circle distance to another coordinate in meters."""
        return GeoCalculator.haversine_distance_m(lat1=self.lat, lon1=self.lon, lat2=other.lat, lon2=other.lon)

    def bearing_to(self, other: "Coordinate") -> float:
        """Initial bearing towards another coordinate (0-360, clockwise from North)."""
        return GeoCalculator.initial_bearing_deg(lat1=self.lat, lon1=self.lon, lat2=other.lat, lon2=other.lon)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Coordinate":
        """Create Coordinate from dictionary. Accepts "lon" or "lng"."""
        lon = data["lon"] if "lon" in data else data["lng"]
        return cls(lat=float(data["lat"]), lon=float(lon))

    def __repr__(self) -> str:
        return f"Coordinate(lat={self.lat:.6f}, lon={self.lon:.6f})"


def _rounded(value: float, decimals: int) -> str:
    # + 0.0 folds -0.0 into 0.0 so both format identically
    return f"{round(value, decimals) + 0.0:.{decimals}f}"


@dataclass(frozen=True, order=True)
class NodeId:
    """Typed identifier of a graph node.

    Construct through the factory classmethods, never from raw strings,
    so the ID format stays an implementation detail.

    Attributes:
        key: Opaque string key (prefix + payload)
    """

    key: str

    @classmethod
    def for_road_vertex(
        cls,
        coordinate: Coordinate,
        decimals: int = CoordinateConfig.NODE_ID_DECIMALS,
    ) -> "NodeId":
        """ID of the road vertex at coordinate (deterministic, rounded)."""
        lat = _rounded(coordinate.lat, decimals)
        lon = _rounded(coordinate.lon, decimals)
        return cls(key=f"{EntityPrefixes.ROAD}:{lat}_{lon}")

    @classmethod
    def for_poi(cls, poi_id: str) -> "NodeId":
        """ID of the node representing a point of interest."""
        return cls(key=f"{EntityPrefixes.POI}:{poi_id}")

    @classmethod
    def for_position(cls) -> "NodeId":
        """ID of the synthetic node for an ad-hoc start position."""
        return cls(key=f"{EntityPrefixes.POSITION}:position")

    @property
    def is_road_vertex(self) -> bool:
        return self.key.startswith(f"{EntityPrefixes.ROAD}:")

    @property
    def is_poi(self) -> bool:
        return self.key.startswith(f"{EntityPrefixes.POI}:")

    @property
    def is_position(self) -> bool:
        return self.key.startswith(f"{EntityPrefixes.POSITION}:")

    def __str__(self) -> str:
        return self.key
