"""Integration tests for the routing engine: load_network, route, route_from_coordinate.

Property tests run on one module-level handle over the 3x3 grid network
(function-scoped fixtures do not mix with Hypothesis).
"""

import json
from pathlib import Path

import pytest
from conftest import at, grid_network_model, poi
from hypothesis import given, settings
from hypothesis import strategies as st

from campus_navigator import load_network, load_network_file, route, route_from_coordinate
from campus_navigator.model.coordinate import NodeId
from campus_navigator.model.network import NetworkModel, PoiCategory, PointOfInterest
from campus_navigator.model.route import (
    Maneuver,
    NoPath,
    RouteFailure,
    RouteResult,
    UnknownNode,
    UnreachableFromCoordinate,
)
from campus_navigator.model.warning import DisconnectedPoiWarning
from campus_navigator.routing.directions import DirectionSynthesizer
from campus_navigator.routing.engine import NetworkHandle
from campus_navigator.routing.graph_builder import GraphBuilder

_GRID_MODEL = grid_network_model()
_GRID = load_network(points_of_interest=_GRID_MODEL.points_of_interest, road_segments=_GRID_MODEL.road_segments)
_GRID_IDS = [p.id for p in _GRID_MODEL.points_of_interest]


class TestRoute:
    """Routes between POIs."""

    def test_l_shaped_route(self, l_shaped_network: NetworkHandle) -> None:
        """Two POIs on a 25m + 40m road: 65m, 3 coordinates, one right turn."""
        result = route(l_shaped_network, "gate", "library")

        assert isinstance(result, RouteResult)
        assert result.total_distance_m == pytest.approx(65.0, abs=1e-6)
        assert result.coordinates == (at(0, 0), at(25, 0), at(25, 40))
        assert result.path[0] == NodeId.for_poi("gate")
        assert result.path[-1] == NodeId.for_poi("library")
        assert [s.instruction for s in result.directions] == [
            "Start from Main Gate and head north",
            "Turn right and continue east",
            "Arrive at Library",
        ]
        assert result.directions[1].distance_m == pytest.approx(25.0, abs=1e-6)
        assert result.walking_time_min == 1

    def test_route_to_self(self, l_shaped_network: NetworkHandle) -> None:
        result = route(l_shaped_network, "library", "library")

        assert result.path == (NodeId.for_poi("library"),)
        assert result.total_distance_m == 0.0
        assert len(result.directions) == 1
        assert result.directions[0].maneuver == Maneuver.ARRIVE
        assert result.directions[0].instruction == "You are already at Library"

    def test_unknown_ids(self, l_shaped_network: NetworkHandle) -> None:
        unknown_start = route(l_shaped_network, "stadium", "library")
        unknown_end = route(l_shaped_network, "gate", "stadium")

        assert isinstance(unknown_start, UnknownNode)
        assert unknown_start.node_id == "stadium" and unknown_start.role == "start"
        assert isinstance(unknown_end, UnknownNode)
        assert unknown_end.role == "end"

    def test_road_vertex_key_is_not_a_poi(self, l_shaped_network: NetworkHandle) -> None:
        vertex_key = str(NodeId.for_road_vertex(coordinate=at(25, 0)))
        assert isinstance(route(l_shaped_network, vertex_key, "library"), UnknownNode)

    def test_disconnected_poi(self, far_poi_network_model: NetworkModel) -> None:
        network = load_network(
            points_of_interest=far_poi_network_model.points_of_interest,
            road_segments=far_poi_network_model.road_segments,
        )

        result = route(network, "near", "far")

        assert isinstance(result, NoPath)
        assert (result.start_id, result.end_id) == ("near", "far")
        assert isinstance(network.warnings[0], DisconnectedPoiWarning)

    def test_straight_walk_across_stitched_roads(self, straight_stitched_network_model: NetworkModel) -> None:
        """The 1m merge jog between two northbound roads produces no turn steps."""
        network = load_network(
            points_of_interest=straight_stitched_network_model.points_of_interest,
            road_segments=straight_stitched_network_model.road_segments,
        )

        result = route(network, "a", "b")

        assert network.graph.merge_edge_count == 1
        assert result.total_distance_m == pytest.approx(201.0, abs=1e-6)
        assert [s.instruction for s in result.directions] == ["Start from A and head north", "Arrive at B"]
        assert result.directions[-1].distance_m == pytest.approx(201.0, abs=1e-6)

    def test_geojson_export(self, l_shaped_network: NetworkHandle) -> None:
        feature = route(l_shaped_network, "gate", "library").to_geojson()
        assert feature["geometry"]["type"] == "LineString"
        assert len(feature["geometry"]["coordinates"]) == 3
        assert feature["properties"]["steps"] == 3


class TestRouteFromCoordinate:
    """Routes from a raw position."""

    def test_position_route(self, l_shaped_network: NetworkHandle) -> None:
        position = at(-20, 0)
        result = route_from_coordinate(l_shaped_network, position, "library")

        assert isinstance(result, RouteResult)
        assert result.coordinates[0] == position
        assert result.total_distance_m == pytest.approx(85.0, abs=1e-6)
        assert result.directions[0].instruction == "Head north towards Library"
        assert result.directions[-1].instruction == "Arrive at Library"

    def test_position_too_far(self, l_shaped_network: NetworkHandle) -> None:
        result = route_from_coordinate(l_shaped_network, at(0, 500), "library")
        assert isinstance(result, UnreachableFromCoordinate)

    def test_unknown_destination(self, l_shaped_network: NetworkHandle) -> None:
        result = route_from_coordinate(l_shaped_network, at(0, 0), "stadium")
        assert isinstance(result, UnknownNode)

    def test_graph_unchanged_after_position_queries(self, l_shaped_network: NetworkHandle) -> None:
        stats_before = l_shaped_network.graph.get_stats()
        route_from_coordinate(l_shaped_network, at(5, 5), "library")
        route_from_coordinate(l_shaped_network, at(0, 500), "library")
        assert l_shaped_network.graph.get_stats() == stats_before


class TestNetworkHandle:
    """Handle lifecycle and configuration."""

    def test_graph_is_built_lazily(self, l_shaped_road) -> None:
        network = load_network(
            points_of_interest=[poi("gate", 0, 0), poi("library", 25, 40)],
            road_segments=[l_shaped_road],
        )
        assert not network.is_built
        route(network, "gate", "library")
        assert network.is_built
        first_graph = network.graph
        route(network, "library", "gate")
        assert network.graph is first_graph

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError):
            load_network(points_of_interest=[poi("a", 0, 0), poi("a", 5, 5)], road_segments=[])

    def test_handles_are_independent(self, l_shaped_network: NetworkHandle) -> None:
        """Two loaded networks answer their own queries."""
        other = load_network(points_of_interest=[poi("gate", 0, 0)], road_segments=[])

        assert isinstance(route(l_shaped_network, "gate", "library"), RouteResult)
        assert isinstance(route(other, "gate", "library"), UnknownNode)

    def test_custom_builder_and_synthesizer(self, far_poi_network_model: NetworkModel) -> None:
        network = load_network(
            points_of_interest=far_poi_network_model.points_of_interest,
            road_segments=far_poi_network_model.road_segments,
            builder=GraphBuilder(snap_radius_m=300.0),
            synthesizer=DirectionSynthesizer(turn_threshold_deg=100.0),
        )

        result = route(network, "near", "far")

        assert result.total_distance_m == pytest.approx(350.0, abs=1e-6)
        assert network.warnings == []

    def test_custom_position_radius(self, l_shaped_road) -> None:
        network = load_network(
            points_of_interest=[poi("library", 25, 40)],
            road_segments=[l_shaped_road],
            position_snap_radius_m=10.0,
        )
        assert isinstance(route_from_coordinate(network, at(-20, 0), "library"), UnreachableFromCoordinate)

    def test_load_network_file(self, tmp_path: Path, l_shaped_road) -> None:
        model = NetworkModel(
            points_of_interest=(
                PointOfInterest(id="gate", name="Main Gate", coordinate=at(0, 0), category=PoiCategory.GATE),
                PointOfInterest(id="library", name="Library", coordinate=at(25, 40), category=PoiCategory.ACADEMIC),
            ),
            road_segments=(l_shaped_road,),
        )
        path = tmp_path / "campus.json"
        path.write_text(json.dumps(model.to_dict()), encoding="utf-8")

        network = load_network_file(path)
        result = route(network, "gate", "library")

        assert result.total_distance_m == pytest.approx(65.0, abs=1e-6)

    def test_load_network_file_missing_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"points_of_interest": []}), encoding="utf-8")
        with pytest.raises(KeyError):
            load_network_file(path)


class TestRouteProperties:
    """Invariants over all POI pairs of the grid network."""

    @given(start=st.sampled_from(_GRID_IDS), end=st.sampled_from(_GRID_IDS))
    @settings(max_examples=30)
    def test_symmetric(self, start: str, end: str) -> None:
        forward = route(_GRID, start, end)
        backward = route(_GRID, end, start)
        assert forward.total_distance_m == pytest.approx(backward.total_distance_m, abs=1e-6)

    @given(a=st.sampled_from(_GRID_IDS), b=st.sampled_from(_GRID_IDS), c=st.sampled_from(_GRID_IDS))
    @settings(max_examples=30)
    def test_triangle_inequality(self, a: str, b: str, c: str) -> None:
        direct = route(_GRID, a, c).total_distance_m
        via = route(_GRID, a, b).total_distance_m + route(_GRID, b, c).total_distance_m
        assert direct <= via + 1e-6

    @given(start=st.sampled_from(_GRID_IDS), end=st.sampled_from(_GRID_IDS))
    @settings(max_examples=30)
    def test_never_shorter_than_straight_line(self, start: str, end: str) -> None:
        result = route(_GRID, start, end)
        straight = _GRID_MODEL.get_poi(start).coordinate.distance_to(_GRID_MODEL.get_poi(end).coordinate)
        assert result.total_distance_m >= straight - 1e-6

    @given(start=st.sampled_from(_GRID_IDS), end=st.sampled_from(_GRID_IDS))
    @settings(max_examples=30)
    def test_identical_input_identical_routes(self, start: str, end: str) -> None:
        other = load_network(
            points_of_interest=_GRID_MODEL.points_of_interest, road_segments=_GRID_MODEL.road_segments
        )
        first = route(_GRID, start, end)
        second = route(other, start, end)
        assert first.total_distance_m == second.total_distance_m
        assert first.directions == second.directions

    @given(
        north=st.floats(min_value=-50, max_value=250),
        east=st.floats(min_value=-50, max_value=250),
        end=st.sampled_from(_GRID_IDS),
    )
    @settings(max_examples=30)
    def test_position_queries_leave_graph_unchanged(self, north: float, east: float, end: str) -> None:
        node_count = _GRID.graph.node_count
        edge_count = _GRID.graph.edge_count

        result = route_from_coordinate(_GRID, at(north, east), end)

        assert not isinstance(result, RouteFailure)
        assert result.coordinates[0] == at(north, east)
        assert _GRID.graph.node_count == node_count
        assert _GRID.graph.edge_count == edge_count
