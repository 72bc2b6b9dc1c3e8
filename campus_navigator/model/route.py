"""Route results, direction steps and route failures.

Everything here is produced fresh per query and never mutated afterwards.
A missing route is an expected outcome, so failures are returned as
RouteFailure values instead of being raised.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from math import ceil
from typing import Any, Optional

from shapely.geometry import LineString

from campus_navigator.constants import WalkingConfig
from campus_navigator.model.coordinate import Coordinate, NodeId


class Maneuver(Enum):
    """Kind of direction step."""

    START = "start"
    STRAIGHT = "straight"
    BEAR_LEFT = "bear_left"
    TURN_LEFT = "turn_left"
    SHARP_LEFT = "sharp_left"
    BEAR_RIGHT = "bear_right"
    TURN_RIGHT = "turn_right"
    SHARP_RIGHT = "sharp_right"
    ARRIVE = "arrive"

    @property
    def phrase(self) -> str:
        """Instruction verb phrase, e.g. "Turn left"."""
        return {
            Maneuver.START: "Start",
            Maneuver.STRAIGHT: "Continue straight",
            Maneuver.BEAR_LEFT: "Bear left",
            Maneuver.TURN_LEFT: "Turn left",
            Maneuver.SHARP_LEFT: "Sharp left",
            Maneuver.BEAR_RIGHT: "Bear right",
            Maneuver.TURN_RIGHT: "Turn right",
            Maneuver.SHARP_RIGHT: "Sharp right",
            Maneuver.ARRIVE: "Arrive",
        }[self]


@dataclass(frozen=True)
class DirectionStep:
    """A single turn-by-turn instruction.

    Attributes:
        instruction: Human-readable text
        distance_m: Distance walked since the previous step (total distance for ARRIVE)
        maneuver: Kind of step
        coordinate: Where the step happens
    """

    instruction: str
    distance_m: float
    maneuver: Maneuver
    coordinate: Optional[Coordinate] = None


@dataclass(frozen=True)
class RouteResult:
    """A found walking route.

    Attributes:
        path: Ordered node IDs from start to destination
        coordinates: Ordered route geometry without consecutive duplicates
        total_distance_m: Sum of edge weights along path
        directions: Ordered direction steps (start, turns, arrival)
    """

    path: tuple[NodeId, ...]
    coordinates: tuple[Coordinate, ...]
    total_distance_m: float
    directions: tuple[DirectionStep, ...] = ()

    @property
    def walking_time_min(self) -> int:
        """Estimated walking time in whole minutes (rounded up)."""
        return ceil(self.total_distance_m / WalkingConfig.SPEED_M_PER_MIN)

    def to_linestring(self) -> LineString:
        """Get Shapely LineString for route geometry in (lon, lat) order.

        A single-point route yields a degenerate two-point line.
        """
        points = [c.lon_lat for c in self.coordinates]
        if len(points) == 1:
            points = points * 2
        return LineString(points)

    def to_geojson(self) -> dict[str, Any]:
        """GeoJSON Feature of the route for map rendering."""
        return {
            "type": "Feature",
            "properties": {
                "distance_m": self.total_distance_m,
                "walking_time_min": self.walking_time_min,
                "steps": len(self.directions),
            },
            "geometry": self.to_linestring().__geo_interface__,
        }


# =============================================================================
# Route Failures
# =============================================================================


@dataclass(frozen=True)
class RouteFailure(ABC):
    """Abstract base class for typed "no route" outcomes.

    Use isinstance() to tell failures apart; never raised.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable reason the route could not be computed."""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class UnknownNode(RouteFailure):
    """Start or destination ID is not in the graph.

    Attributes:
        node_id: The ID that could not be found (POI id or node key)
        role: "start" or "end"
    """

    node_id: str
    role: str

    @property
    def message(self) -> str:
        return f"Unknown {self.role} location: {self.node_id}"


@dataclass(frozen=True)
class NoPath(RouteFailure):
    """Both endpoints exist but no route connects them."""

    start_id: str
    end_id: str

    @property
    def message(self) -> str:
        return f"No walking route between {self.start_id} and {self.end_id}"


@dataclass(frozen=True)
class UnreachableFromCoordinate(RouteFailure):
    """No road vertex within the snap radius of a raw position.

    Attributes:
        coordinate: The supplied position
        nearest_distance_m: Distance to the nearest road vertex (None if no roads exist)
        snap_radius_m: Snap radius in effect
    """

    coordinate: Coordinate
    nearest_distance_m: Optional[float]
    snap_radius_m: float

    @property
    def message(self) -> str:
        if self.nearest_distance_m is None:
            return f"No roads to route from {self.coordinate}"
        return (
            f"Position {self.coordinate} is {self.nearest_distance_m:.0f}m from the nearest road, "
            f"beyond the {self.snap_radius_m:.0f}m limit"
        )
