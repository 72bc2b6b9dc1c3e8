"""Routing engine: graph construction, shortest paths and directions.

Provides:
- GraphBuilder: NetworkModel → frozen RoadGraph (snapping, merging)
- PathFinder: Dijkstra between nodes or from a raw position
- DirectionSynthesizer: route polyline → turn-by-turn steps
- NetworkHandle / load_network / route / route_from_coordinate: public surface
"""

from campus_navigator.routing.directions import DirectionSynthesizer, synthesize_directions
from campus_navigator.routing.engine import (
    NetworkHandle,
    load_network,
    load_network_file,
    route,
    route_from_coordinate,
)
from campus_navigator.routing.graph_builder import GraphBuilder, build_graph
from campus_navigator.routing.path_finder import (
    FoundPath,
    PathFinder,
    shortest_path,
    shortest_path_from_coordinate,
)

__all__ = [
    # Graph construction
    "GraphBuilder",
    "build_graph",
    # Search
    "PathFinder",
    "FoundPath",
    "shortest_path",
    "shortest_path_from_coordinate",
    # Directions
    "DirectionSynthesizer",
    "synthesize_directions",
    # Engine
    "NetworkHandle",
    "load_network",
    "load_network_file",
    "route",
    "route_from_coordinate",
]
