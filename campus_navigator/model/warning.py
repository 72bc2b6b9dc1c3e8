"""Warning - Data-quality warnings raised while building the road graph.

Warnings never stop a build. The graph still serves every query it can;
the warnings are attached to RoadGraph.warnings for the caller to surface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BuildWarning(ABC):
    """Abstract base class for graph build warnings.

    Subclasses store specific parameters and compute message as property.
    Use isinstance() to check warning type.
    Each subclass has a warning_type field for serialization.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable warning message with emoji prefix."""

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class DisconnectedPoiWarning(BuildWarning):
    """POI with no road vertex within the snap radius.

    The POI node exists in the graph but has no edges, so every route
    to or from it ends in NoPath.

    Attributes:
        poi_id: ID of the disconnected POI
        poi_name: Display name of the POI
        nearest_distance_m: Distance to the nearest road vertex (None if the network has no roads)
        snap_radius_m: Snap radius in effect for the build
        warning_type: Type identifier for serialization
    """

    poi_id: str
    poi_name: str
    nearest_distance_m: Optional[float]
    snap_radius_m: float
    warning_type: str = "DisconnectedPoiWarning"

    @property
    def message(self) -> str:
        if self.nearest_distance_m is None:
            return f"📍 Disconnected POI: {self.poi_name} ({self.poi_id}) - network has no road vertices"
        return (
            f"📍 Disconnected POI: {self.poi_name} ({self.poi_id}) is {self.nearest_distance_m:.0f}m "
            f"from the nearest road, beyond the {self.snap_radius_m:.0f}m snap radius - unreachable"
        )


@dataclass(frozen=True)
class EmptyNetworkWarning(BuildWarning):
    """Network without road segments.

    Attributes:
        poi_count: Number of POIs that could not be connected
        warning_type: Type identifier for serialization
    """

    poi_count: int
    warning_type: str = "EmptyNetworkWarning"

    @property
    def message(self) -> str:
        return f"🚧 Empty Network Warning: no road segments, {self.poi_count} POI(s) cannot be routed"
