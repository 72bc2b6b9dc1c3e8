"""PathFinder - Single-source shortest paths over a frozen RoadGraph.

Dijkstra with a binary heap. The search stops as soon as the destination
is settled, which is valid because every edge weight is non-negative.

Ad-hoc starts (e.g. a GPS fix) never touch the shared graph: the synthetic
start node and its two hops live in a per-query overlay that is consulted
alongside the graph's own adjacency lists and discarded afterwards.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass
from math import inf
from typing import Optional, Union

from campus_navigator.constants import PositionConfig
from campus_navigator.model.coordinate import Coordinate, NodeId
from campus_navigator.model.graph import GraphEdge, RoadGraph
from campus_navigator.model.route import NoPath, RouteFailure, UnknownNode, UnreachableFromCoordinate

logger = logging.getLogger(__name__)

Overlay = dict[NodeId, list[GraphEdge]]


@dataclass(frozen=True)
class FoundPath:
    """Raw search result before direction synthesis.

    Attributes:
        path: Ordered node IDs from start to destination
        coordinates: Route geometry with consecutive duplicates removed
        total_distance_m: Sum of hop weights
        hops: The edges walked, in order
    """

    path: tuple[NodeId, ...]
    coordinates: tuple[Coordinate, ...]
    total_distance_m: float
    hops: tuple[GraphEdge, ...]


SearchOutcome = Union[FoundPath, RouteFailure]


class PathFinder:
    """Shortest-path queries against one RoadGraph.

    Safe to share between threads: searches only read the graph.

    Example:
        finder = PathFinder(graph=graph)
        result = finder.shortest_path(start=NodeId.for_poi("main-gate"), end=NodeId.for_poi("library"))
        if isinstance(result, FoundPath):
            print(result.total_distance_m)
    """

    def __init__(
        self,
        graph: RoadGraph,
        position_snap_radius_m: float = PositionConfig.SNAP_RADIUS_M,
    ) -> None:
        if position_snap_radius_m <= 0:
            raise ValueError(f"position_snap_radius_m must be positive, got {position_snap_radius_m}")
        self.graph = graph
        self.position_snap_radius_m = position_snap_radius_m

    # =========================================================================
    # Public Queries
    # =========================================================================

    def shortest_path(self, start: NodeId, end: NodeId) -> SearchOutcome:
        """Shortest path between two graph nodes.

        Returns:
            FoundPath, or UnknownNode / NoPath.
        """
        if start not in self.graph.nodes:
            return UnknownNode(node_id=str(start), role="start")
        if end not in self.graph.nodes:
            return UnknownNode(node_id=str(end), role="end")

        found = self._search(
            start=start,
            end=end,
            start_coordinate=self.graph.nodes[start].coordinate,
            overlay={},
        )
        if found is None:
            return NoPath(start_id=str(start), end_id=str(end))
        return found

    def shortest_path_from_coordinate(self, coordinate: Coordinate, end: NodeId) -> SearchOutcome:
        """Shortest path from an arbitrary position to a graph node.

        The position is joined to its nearest road vertex by a temporary hop
        of the great-circle distance between them. The first route coordinate
        is the raw position, not the snapped vertex.

        Returns:
            FoundPath, or UnknownNode / UnreachableFromCoordinate / NoPath.
        """
        if end not in self.graph.nodes:
            return UnknownNode(node_id=str(end), role="end")

        nearest = self.graph.nearest_road_vertex(coordinate=coordinate)
        if nearest is None or nearest[1] > self.position_snap_radius_m:
            return UnreachableFromCoordinate(
                coordinate=coordinate,
                nearest_distance_m=None if nearest is None else nearest[1],
                snap_radius_m=self.position_snap_radius_m,
            )

        vertex, dist = nearest
        start = NodeId.for_position()
        hop = GraphEdge(
            source=start,
            target=vertex.id,
            weight_m=dist,
            geometry=(coordinate, vertex.coordinate),
        )
        overlay: Overlay = {start: [hop], vertex.id: [hop.reversed()]}
        logger.debug(f"Position {coordinate} snapped to {vertex.id} ({dist:.1f}m)")

        found = self._search(start=start, end=end, start_coordinate=coordinate, overlay=overlay)
        if found is None:
            return NoPath(start_id=str(start), end_id=str(end))
        return found

    # =========================================================================
    # Search
    # =========================================================================

    def _hops(self, node_id: NodeId, overlay: Overlay) -> list[GraphEdge]:
        extra = overlay.get(node_id)
        if not extra:
            return self.graph.neighbors(node_id)
        return self.graph.neighbors(node_id) + extra

    def _search(
        self,
        start: NodeId,
        end: NodeId,
        start_coordinate: Coordinate,
        overlay: Overlay,
    ) -> Optional[FoundPath]:
        """Run Dijkstra from start until end is settled.

        Returns:
            FoundPath, or None if end is unreachable.
        """
        dist: dict[NodeId, float] = {start: 0.0}
        previous: dict[NodeId, GraphEdge] = {}
        settled: set[NodeId] = set()
        # Counter breaks ties without comparing NodeIds
        counter = itertools.count()
        frontier = [(0.0, next(counter), start)]

        while frontier:
            d, _, node = heapq.heappop(frontier)
            if node in settled:
                continue
            settled.add(node)
            if node == end:
                break
            for edge in self._hops(node_id=node, overlay=overlay):
                if edge.target in settled:
                    continue
                alt = d + edge.weight_m
                if alt < dist.get(edge.target, inf):
                    dist[edge.target] = alt
                    previous[edge.target] = edge
                    heapq.heappush(frontier, (alt, next(counter), edge.target))

        logger.debug(f"Search {start} → {end}: settled {len(settled)} node(s)")

        if end not in settled:
            return None

        hops = self._reconstruct(start=start, end=end, previous=previous)
        if hops is None:
            return None

        return FoundPath(
            path=(start, *(hop.target for hop in hops)),
            coordinates=self._hop_coordinates(start_coordinate=start_coordinate, hops=hops),
            total_distance_m=dist[end],
            hops=tuple(hops),
        )

    @staticmethod
    def _reconstruct(start: NodeId, end: NodeId, previous: dict[NodeId, GraphEdge]) -> Optional[list[GraphEdge]]:
        """Walk predecessor links back from end.

        Returns:
            Hops in travel order, or None if the chain does not reach start.
        """
        hops: list[GraphEdge] = []
        node = end
        while node != start:
            edge = previous.get(node)
            if edge is None or len(hops) > len(previous):
                logger.warning(f"Predecessor chain from {end} does not reach {start}")
                return None
            hops.append(edge)
            node = edge.source
        hops.reverse()
        return hops

    @staticmethod
    def _hop_coordinates(start_coordinate: Coordinate, hops: list[GraphEdge]) -> tuple[Coordinate, ...]:
        """Concatenate hop geometries, dropping consecutive duplicates."""
        coordinates = [start_coordinate]
        for hop in hops:
            for coord in hop.geometry:
                if coord != coordinates[-1]:
                    coordinates.append(coord)
        return tuple(coordinates)


def shortest_path(graph: RoadGraph, start: NodeId, end: NodeId) -> SearchOutcome:
    """Shortest path between two nodes of graph."""
    return PathFinder(graph=graph).shortest_path(start=start, end=end)


def shortest_path_from_coordinate(
    graph: RoadGraph,
    coordinate: Coordinate,
    end: NodeId,
    position_snap_radius_m: float = PositionConfig.SNAP_RADIUS_M,
) -> SearchOutcome:
    """Shortest path from a raw position to a node of graph."""
    finder = PathFinder(graph=graph, position_snap_radius_m=position_snap_radius_m)
    return finder.shortest_path_from_coordinate(coordinate=coordinate, end=end)
