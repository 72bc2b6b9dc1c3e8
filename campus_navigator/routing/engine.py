"""Routing engine - The public surface used by map and UI collaborators.

A NetworkHandle owns one NetworkModel and the RoadGraph built from it.
The graph is built lazily on the first query and cached for the lifetime
of the handle; callers pass the handle explicitly to every query, so
several networks can be loaded side by side.

Operations:
    load_network(points_of_interest, road_segments) -> NetworkHandle
    load_network_file(path) -> NetworkHandle
    route(network, start_id, end_id) -> RouteResult | RouteFailure
    route_from_coordinate(network, coordinate, end_id) -> RouteResult | RouteFailure
"""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from campus_navigator.constants import PositionConfig
from campus_navigator.model.coordinate import Coordinate, NodeId
from campus_navigator.model.graph import RoadGraph
from campus_navigator.model.network import NetworkModel, PointOfInterest, RoadSegment
from campus_navigator.model.route import NoPath, RouteFailure, RouteResult, UnknownNode
from campus_navigator.model.warning import BuildWarning
from campus_navigator.routing.directions import DirectionSynthesizer
from campus_navigator.routing.graph_builder import GraphBuilder
from campus_navigator.routing.path_finder import FoundPath, PathFinder

logger = logging.getLogger(__name__)

RouteOutcome = Union[RouteResult, RouteFailure]


class NetworkHandle:
    """A loaded network with its lazily built, cached road graph.

    Example:
        network = load_network(points_of_interest=pois, road_segments=roads)
        result = network.route(start_id="main-gate", end_id="library")
        if isinstance(result, RouteFailure):
            print(result.message)
    """

    def __init__(
        self,
        model: NetworkModel,
        builder: Optional[GraphBuilder] = None,
        synthesizer: Optional[DirectionSynthesizer] = None,
        position_snap_radius_m: float = PositionConfig.SNAP_RADIUS_M,
    ) -> None:
        """Initialize handle; no graph is built until the first query."""
        self.model = model
        self.builder = builder or GraphBuilder()
        self.synthesizer = synthesizer or DirectionSynthesizer()
        self.position_snap_radius_m = position_snap_radius_m

        self._graph: Optional[RoadGraph] = None
        self._finder: Optional[PathFinder] = None
        self._build_lock = threading.Lock()

    @property
    def is_built(self) -> bool:
        """Check if the road graph has been built."""
        return self._finder is not None

    def _ensure_built(self) -> PathFinder:
        """Build graph on first access (thread-safe)."""
        # Fast path: already built
        finder = self._finder
        if finder is not None:
            return finder

        with self._build_lock:
            # Double-check after acquiring lock
            if self._finder is not None:
                return self._finder

            graph = self.builder.build(network=self.model)
            self._graph = graph
            # Set _finder LAST - this is what is_built checks
            self._finder = PathFinder(graph=graph, position_snap_radius_m=self.position_snap_radius_m)
            return self._finder

    @property
    def graph(self) -> RoadGraph:
        """The road graph, built on first access."""
        return self._ensure_built().graph

    @property
    def warnings(self) -> list[BuildWarning]:
        """Data-quality warnings from the graph build."""
        return list(self.graph.warnings)

    # =========================================================================
    # Queries
    # =========================================================================

    def route(self, start_id: str, end_id: str) -> RouteOutcome:
        """Walking route between two POIs.

        Args:
            start_id: POI id of the origin
            end_id: POI id of the destination

        Returns:
            RouteResult, or UnknownNode / NoPath.
        """
        finder = self._ensure_built()

        start_poi = self.model.get_poi(start_id)
        if start_poi is None:
            return self._fail(UnknownNode(node_id=start_id, role="start"))
        end_poi = self.model.get_poi(end_id)
        if end_poi is None:
            return self._fail(UnknownNode(node_id=end_id, role="end"))

        outcome = finder.shortest_path(start=NodeId.for_poi(poi_id=start_id), end=NodeId.for_poi(poi_id=end_id))
        if isinstance(outcome, NoPath):
            return self._fail(NoPath(start_id=start_id, end_id=end_id))
        if isinstance(outcome, RouteFailure):
            return self._fail(outcome)

        return self._to_result(found=outcome, start_label=start_poi.name, end_poi=end_poi)

    def route_from_coordinate(self, coordinate: Coordinate, end_id: str) -> RouteOutcome:
        """Walking route from a raw position (e.g. a GPS fix) to a POI.

        Args:
            coordinate: Current position
            end_id: POI id of the destination

        Returns:
            RouteResult, or UnknownNode / UnreachableFromCoordinate / NoPath.
        """
        finder = self._ensure_built()

        end_poi = self.model.get_poi(end_id)
        if end_poi is None:
            return self._fail(UnknownNode(node_id=end_id, role="end"))

        outcome = finder.shortest_path_from_coordinate(coordinate=coordinate, end=NodeId.for_poi(poi_id=end_id))
        if isinstance(outcome, NoPath):
            return self._fail(NoPath(start_id=str(coordinate), end_id=end_id))
        if isinstance(outcome, RouteFailure):
            return self._fail(outcome)

        return self._to_result(found=outcome, start_label=None, end_poi=end_poi)

    def _to_result(self, found: FoundPath, start_label: Optional[str], end_poi: PointOfInterest) -> RouteResult:
        directions = self.synthesizer.synthesize(
            coordinates=found.coordinates,
            start_label=start_label,
            end_label=end_poi.name,
        )
        logger.debug(
            f"Route to {end_poi.id}: {found.total_distance_m:.0f}m, {len(found.path)} nodes, {len(directions)} steps"
        )
        return RouteResult(
            path=found.path,
            coordinates=found.coordinates,
            total_distance_m=found.total_distance_m,
            directions=tuple(directions),
        )

    @staticmethod
    def _fail(failure: RouteFailure) -> RouteFailure:
        logger.info(f"Route not found: {failure.message}")
        return failure

    def __repr__(self) -> str:
        return (
            f"NetworkHandle({len(self.model.points_of_interest)} POIs, "
            f"{len(self.model.road_segments)} segments, built={self.is_built})"
        )


def load_network(
    points_of_interest: Iterable[PointOfInterest],
    road_segments: Iterable[RoadSegment],
    builder: Optional[GraphBuilder] = None,
    synthesizer: Optional[DirectionSynthesizer] = None,
    position_snap_radius_m: float = PositionConfig.SNAP_RADIUS_M,
) -> NetworkHandle:
    """Wrap network data in a handle. Identical input always yields identical routes.

    Raises:
        ValueError: If POI ids are not unique.
    """
    model = NetworkModel(points_of_interest=tuple(points_of_interest), road_segments=tuple(road_segments))
    return NetworkHandle(
        model=model,
        builder=builder,
        synthesizer=synthesizer,
        position_snap_radius_m=position_snap_radius_m,
    )


def load_network_file(path: Path | str, **handle_kwargs) -> NetworkHandle:
    """Load a handle from a JSON file (see NetworkModel.from_dict for the shape)."""
    model = NetworkModel.from_json_file(path=path)
    logger.info(
        f"Loaded network from {Path(path).name}: "
        f"{len(model.points_of_interest)} POIs, {len(model.road_segments)} road segments"
    )
    return NetworkHandle(model=model, **handle_kwargs)


def route(network: NetworkHandle, start_id: str, end_id: str) -> RouteOutcome:
    """Walking route between two POIs of network."""
    return network.route(start_id=start_id, end_id=end_id)


def route_from_coordinate(network: NetworkHandle, coordinate: Coordinate, end_id: str) -> RouteOutcome:
    """Walking route from a raw position to a POI of network."""
    return network.route_from_coordinate(coordinate=coordinate, end_id=end_id)
