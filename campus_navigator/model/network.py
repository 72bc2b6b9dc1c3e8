"""Network model - Points of interest and the road polylines connecting them.

The network is static input: it is created once from configuration and
never mutated by the routing engine. Road segments are authored
independently; segments meeting at "the same" point are joined later by
coordinate proximity, not by shared identifiers.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from campus_navigator.constants import CategoryConfig
from campus_navigator.model.coordinate import Coordinate


class PoiCategory(Enum):
    """Kind of point of interest. Order here is the display order."""

    GATE = "gate"
    ACADEMIC = "academic"
    AMENITY = "amenity"
    RECREATION = "recreation"
    RELIGIOUS = "religious"
    ADMIN = "admin"

    @property
    def label(self) -> str:
        """Human-friendly category name."""
        return CategoryConfig.LABELS[self.value]


assert {c.value for c in PoiCategory} == set(CategoryConfig.CATEGORIES)


@dataclass(frozen=True)
class PointOfInterest:
    """A named, addressable destination.

    Attributes:
        id: Unique identifier used in route queries (e.g., "main-gate")
        name: Display name
        coordinate: Location of the POI
        category: PoiCategory
        description: Optional free text shown with the POI
    """

    id: str
    name: str
    coordinate: Coordinate
    category: PoiCategory
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PointOfInterest":
        """Create PointOfInterest from dictionary.

        Accepts either a nested "coordinate" dict or flat "lat"/"lon" keys.
        """
        coordinate = Coordinate.from_dict(data=data.get("coordinate", data))
        return cls(
            id=data["id"],
            name=data["name"],
            coordinate=coordinate,
            category=PoiCategory(data["category"]),
            description=data.get("description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "coordinate": {"lat": self.coordinate.lat, "lon": self.coordinate.lon},
            "category": self.category.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class RoadSegment:
    """A walkable polyline.

    Attributes:
        id: Identifier of the segment (for diagnostics only)
        coordinates: Ordered points, at least 2
    """

    id: str
    coordinates: tuple[Coordinate, ...]

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if len(self.coordinates) < 2:
            raise ValueError(f"Road segment {self.id} needs at least 2 coordinates, got {len(self.coordinates)}")

    @property
    def length_m(self) -> float:
        """Sum of great-circle distances along the polyline."""
        return sum(a.distance_to(b) for a, b in zip(self.coordinates, self.coordinates[1:]))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RoadSegment":
        """Create RoadSegment from dictionary."""
        return cls(
            id=data["id"],
            coordinates=tuple(Coordinate.from_dict(data=c) for c in data["coordinates"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "coordinates": [{"lat": c.lat, "lon": c.lon} for c in self.coordinates],
        }


@dataclass(frozen=True)
class NetworkModel:
    """The complete pedestrian network.

    Attributes:
        points_of_interest: All POIs, unique by id
        road_segments: All road polylines

    Example:
        network = NetworkModel(points_of_interest=(gate,), road_segments=(main_road,))
        network.search("gate")  # [gate]
    """

    points_of_interest: tuple[PointOfInterest, ...] = ()
    road_segments: tuple[RoadSegment, ...] = ()
    _poi_by_id: dict[str, PointOfInterest] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        poi_by_id: dict[str, PointOfInterest] = {}
        for poi in self.points_of_interest:
            if poi.id in poi_by_id:
                raise ValueError(f"Duplicate point of interest id: {poi.id}")
            poi_by_id[poi.id] = poi
        object.__setattr__(self, "_poi_by_id", poi_by_id)

    def get_poi(self, poi_id: str) -> Optional[PointOfInterest]:
        """Find a POI by id, or None if unknown."""
        return self._poi_by_id.get(poi_id)

    def search(self, query: str) -> list[PointOfInterest]:
        """Case-insensitive substring search over name, description and id.

        An empty query returns every POI.
        """
        needle = query.strip().lower()
        if not needle:
            return list(self.points_of_interest)
        return [
            poi
            for poi in self.points_of_interest
            if needle in poi.name.lower() or needle in poi.description.lower() or needle in poi.id.lower()
        ]

    def by_category(self) -> dict[PoiCategory, list[PointOfInterest]]:
        """Group POIs by category in display order, omitting empty categories."""
        groups: dict[PoiCategory, list[PointOfInterest]] = {category: [] for category in PoiCategory}
        for poi in self.points_of_interest:
            groups[poi.category].append(poi)
        return {category: pois for category, pois in groups.items() if pois}

    @property
    def bounds(self) -> Optional[tuple[float, float, float, float]]:
        """Envelope (min_lon, min_lat, max_lon, max_lat) of all geometry, None if empty."""
        coords = [poi.coordinate for poi in self.points_of_interest]
        coords.extend(c for seg in self.road_segments for c in seg.coordinates)
        if not coords:
            return None
        lons = [c.lon for c in coords]
        lats = [c.lat for c in coords]
        return (min(lons), min(lats), max(lons), max(lats))

    def contains(self, coordinate: Coordinate) -> bool:
        """Whether coordinate lies inside the network envelope."""
        bounds = self.bounds
        if bounds is None:
            return False
        min_lon, min_lat, max_lon, max_lat = bounds
        return min_lon <= coordinate.lon <= max_lon and min_lat <= coordinate.lat <= max_lat

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetworkModel":
        """Create NetworkModel from a JSON-compatible dict."""
        return cls(
            points_of_interest=tuple(PointOfInterest.from_dict(data=p) for p in data["points_of_interest"]),
            road_segments=tuple(RoadSegment.from_dict(data=s) for s in data["road_segments"]),
        )

    @classmethod
    def from_json_file(cls, path: Path | str) -> "NetworkModel":
        """Load a network from a JSON file in the from_dict shape."""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(data=json.load(f))

    def to_dict(self) -> dict[str, Any]:
        """Serialize network to JSON-compatible dict."""
        return {
            "points_of_interest": [poi.to_dict() for poi in self.points_of_interest],
            "road_segments": [seg.to_dict() for seg in self.road_segments],
        }
