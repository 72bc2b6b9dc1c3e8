"""Campus Navigator - Walking routes and turn-by-turn directions on a fixed pedestrian network.

Builds a routable graph from road polylines and points of interest,
finds shortest walking paths (between POIs or from a live position),
and turns the resulting polyline into human-readable directions.

Modules:
    core: Foundation classes (geodesic calculations, spatial index)
    model: Data structures (Coordinate, NetworkModel, RoadGraph, RouteResult)
    routing: Graph builder, path finder, direction synthesizer, engine surface

Example:
    from campus_navigator import load_network, route
    from campus_navigator.model import RouteFailure

    network = load_network(points_of_interest=pois, road_segments=roads)
    result = route(network, "main-gate", "library")
    if not isinstance(result, RouteFailure):
        for step in result.directions:
            print(step.instruction)
"""

from campus_navigator.routing.engine import (
    NetworkHandle,
    load_network,
    load_network_file,
    route,
    route_from_coordinate,
)

__all__ = [
    "NetworkHandle",
    "load_network",
    "load_network_file",
    "route",
    "route_from_coordinate",
]
