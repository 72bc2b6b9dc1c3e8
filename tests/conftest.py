"""Shared pytest fixtures for campus_navigator tests.

Provides small, hand-checkable networks for graph, search and direction tests.
All fixtures use explicit values with documented rationale.

COORDINATE SYSTEM:
    Tests use coordinates near the equator (lat~0) and prime meridian (lon~0).
    at(north_m, east_m) converts meter offsets to degrees using the spherical
    Earth radius, so distances along a meridian or the equator are exact and
    everything else in the few-hundred-meter test area is exact to well below 1mm.
"""

from math import pi

import pytest

from campus_navigator.core.geo_calculator import EARTH_RADIUS_M
from campus_navigator.model.coordinate import Coordinate
from campus_navigator.model.network import NetworkModel, PoiCategory, PointOfInterest, RoadSegment
from campus_navigator.routing.engine import NetworkHandle, load_network

# Meters per degree along a meridian (and along the equator)
M = EARTH_RADIUS_M * pi / 180


def at(north_m: float, east_m: float) -> Coordinate:
    """Coordinate north_m meters north and east_m meters east of (0, 0)."""
    return Coordinate(lat=north_m / M, lon=east_m / M)


def poi(poi_id: str, north_m: float, east_m: float, category: PoiCategory = PoiCategory.ACADEMIC) -> PointOfInterest:
    """POI named after its id, for compact fixtures."""
    return PointOfInterest(
        id=poi_id,
        name=poi_id.replace("-", " ").title(),
        coordinate=at(north_m, east_m),
        category=category,
    )


def grid_network_model() -> NetworkModel:
    """3x3 street grid with 100m blocks and five POIs near intersections.

    Streets are authored as separate segments (3 east-west, 3 north-south)
    that share exact intersection coordinates, plus a diagonal footpath from
    (0, 0) to (100, 100). Each POI sits 5-10m off an intersection:
    - gate: 10m south of (0, 0)
    - hall: 10m east of (100, 100)
    - lake: 10m north of (200, 200)
    - cafe: 5m east of (0, 200)
    - gym:  5m west of (200, 0)

    Not a fixture so Hypothesis tests can build it at module level.
    """
    roads = []
    for i in range(3):
        roads.append(RoadSegment(id=f"street-ew-{i}", coordinates=tuple(at(i * 100, j * 100) for j in range(3))))
        roads.append(RoadSegment(id=f"street-ns-{i}", coordinates=tuple(at(j * 100, i * 100) for j in range(3))))
    roads.append(RoadSegment(id="diagonal", coordinates=(at(0, 0), at(50, 50), at(100, 100))))

    pois = (
        poi("gate", -10, 0, PoiCategory.GATE),
        poi("hall", 100, 110),
        poi("lake", 210, 200, PoiCategory.RECREATION),
        poi("cafe", 0, 205, PoiCategory.AMENITY),
        poi("gym", 200, -5, PoiCategory.RECREATION),
    )
    return NetworkModel(points_of_interest=pois, road_segments=tuple(roads))


# =============================================================================
# NETWORK FIXTURES
# =============================================================================


@pytest.fixture
def l_shaped_road() -> RoadSegment:
    """One 3-point road: 25m north from origin, then 40m east (90° right turn)."""
    return RoadSegment(id="road-l", coordinates=(at(0, 0), at(25, 0), at(25, 40)))


@pytest.fixture
def l_shaped_network(l_shaped_road: RoadSegment) -> NetworkHandle:
    """Two POIs exactly on the ends of the L-shaped road (total 65m).

    - gate at (0, 0), the road start
    - library at (25, 40), the road end
    """
    return load_network(
        points_of_interest=[
            PointOfInterest(id="gate", name="Main Gate", coordinate=at(0, 0), category=PoiCategory.GATE),
            PointOfInterest(id="library", name="Library", coordinate=at(25, 40), category=PoiCategory.ACADEMIC),
        ],
        road_segments=[l_shaped_road],
    )


@pytest.fixture
def stitched_network_model() -> NetworkModel:
    """Two independently authored roads whose ends are 1m apart.

    - west-road: (0, 0) → (0, 100), 100m east
    - north-road: (1, 100) → (101, 100), starts 1m north of west-road's end
    Only the merge pass connects them: west → north is 100 + 1 + 100 = 201m.
    """
    return NetworkModel(
        points_of_interest=(poi("west", 0, 0), poi("north", 101, 100)),
        road_segments=(
            RoadSegment(id="west-road", coordinates=(at(0, 0), at(0, 100))),
            RoadSegment(id="north-road", coordinates=(at(1, 100), at(101, 100))),
        ),
    )


@pytest.fixture
def straight_stitched_network_model() -> NetworkModel:
    """Two northbound roads whose ends are offset 1m sideways.

    - south-road: (0, 0) → (100, 0)
    - upper-road: (100, 1) → (200, 1)
    Walking a → b goes straight north apart from the 1m merge jog.
    """
    return NetworkModel(
        points_of_interest=(poi("a", 0, 0), poi("b", 200, 1)),
        road_segments=(
            RoadSegment(id="south-road", coordinates=(at(0, 0), at(100, 0))),
            RoadSegment(id="upper-road", coordinates=(at(100, 1), at(200, 1))),
        ),
    )


@pytest.fixture
def far_poi_network_model() -> NetworkModel:
    """A 100m road with one POI on it and one POI 250m beyond its east end.

    With the default 200m snap radius the far POI stays disconnected.
    """
    return NetworkModel(
        points_of_interest=(poi("near", 0, 0), poi("far", 0, 350)),
        road_segments=(RoadSegment(id="short-road", coordinates=(at(0, 0), at(0, 100))),),
    )


@pytest.fixture
def grid_network() -> NetworkHandle:
    """Handle over grid_network_model()."""
    model = grid_network_model()
    return load_network(points_of_interest=model.points_of_interest, road_segments=model.road_segments)
