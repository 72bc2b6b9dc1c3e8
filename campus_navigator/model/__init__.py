"""Data model classes for the pedestrian network and routing results.

Follows the separation of Geometry (where things are) vs Topology (how things connect):
- Coordinate: Geometry atom (lat, lon)
- NodeId: Typed graph key derived from a coordinate or POI id
- PointOfInterest, RoadSegment, NetworkModel: Static network input
- GraphNode, GraphEdge, RoadGraph: Routable graph
- BuildWarning: Data-quality warnings from graph construction
- RouteResult, DirectionStep, RouteFailure: Query output
"""

from campus_navigator.model.coordinate import Coordinate, NodeId
from campus_navigator.model.graph import GraphEdge, GraphNode, RoadGraph
from campus_navigator.model.network import (
    NetworkModel,
    PoiCategory,
    PointOfInterest,
    RoadSegment,
)
from campus_navigator.model.route import (
    DirectionStep,
    Maneuver,
    NoPath,
    RouteFailure,
    RouteResult,
    UnknownNode,
    UnreachableFromCoordinate,
)
from campus_navigator.model.warning import (
    BuildWarning,
    DisconnectedPoiWarning,
    EmptyNetworkWarning,
)

__all__ = [
    "Coordinate",
    "NodeId",
    "PointOfInterest",
    "PoiCategory",
    "RoadSegment",
    "NetworkModel",
    "GraphNode",
    "GraphEdge",
    "RoadGraph",
    "BuildWarning",
    "DisconnectedPoiWarning",
    "EmptyNetworkWarning",
    "Maneuver",
    "DirectionStep",
    "RouteResult",
    "RouteFailure",
    "UnknownNode",
    "NoPath",
    "UnreachableFromCoordinate",
]
