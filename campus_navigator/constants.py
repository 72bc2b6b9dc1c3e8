"""Configuration constants for Campus Navigator.

All configurable parameters are centralized here for easy tuning.
Components take each value as a keyword argument that defaults to the
constant, so a denser or sparser network can be tuned per call site.

Classes:
    EntityPrefixes: Node ID prefixes
    CoordinateConfig: Coordinate precision and validation ranges
    GraphConfig: Graph construction (snapping, merging)
    PositionConfig: Ad-hoc position snapping
    DirectionConfig: Turn detection thresholds and compass words
    WalkingConfig: Walking speed for time estimates
    CategoryConfig: Point-of-interest category labels
"""


class EntityPrefixes:
    """ID prefixes for graph nodes."""

    ROAD = "R"
    POI = "P"
    POSITION = "X"


class CoordinateConfig:
    """Configuration for coordinate handling and comparison.

    STRICT: Road vertex identity uses the rounded key below,
    NEVER == on raw lat/lon floats!
    """

    # Decimal places for coordinate-derived node IDs (8 decimals ≈ 1mm precision)
    NODE_ID_DECIMALS: int = 8

    LAT_RANGE = (-90.0, 90.0)
    LON_RANGE = (-180.0, 180.0)


class GraphConfig:
    """Graph construction parameters."""

    # Max distance for connecting a POI to its nearest road vertex
    SNAP_RADIUS_M = 200.0

    # Road vertices closer than this are treated as one physical location
    # ~0.00002 degrees of latitude ≈ 2.2 meters
    MERGE_TOLERANCE_M = 2.0

    # Weight of a merge edge between coincident vertices (never zero)
    MERGE_FLOOR_M = 0.5

    # Planar candidates re-ranked by great-circle distance in nearest lookups
    NEAREST_CANDIDATES = 8

    # Planar search radius = radius * RATIO + MARGIN_M (UTM scale error is ~0.1% in-zone)
    PLANAR_PADDING_RATIO = 1.01
    PLANAR_PADDING_MARGIN_M = 0.01


class PositionConfig:
    """Ad-hoc start position (e.g. a GPS fix) parameters."""

    # Max distance from a raw position to the nearest road vertex
    SNAP_RADIUS_M = 200.0


class DirectionConfig:
    """Turn detection thresholds and compass naming.

    Bearing change buckets (absolute degrees):
        < BEAR_MIN_DEG          continue straight
        BEAR_MIN_DEG - BEAR_MAX_DEG   bear left/right
        BEAR_MAX_DEG - TURN_MAX_DEG   turn left/right
        >= TURN_MAX_DEG         sharp left/right
    """

    # Bearing change that produces a visible direction step
    TURN_THRESHOLD_DEG = 30.0

    BEAR_MIN_DEG = 30.0
    BEAR_MAX_DEG = 60.0
    TURN_MAX_DEG = 120.0

    # Legs shorter than this (merge jogs between stitched segments) never set a heading
    MIN_LEG_M = GraphConfig.MERGE_TOLERANCE_M

    # 8-point compass words, 45° buckets centered on each direction
    COMPASS_DIRECTIONS = {
        "north": (337.5, 22.5),
        "northeast": (22.5, 67.5),
        "east": (67.5, 112.5),
        "southeast": (112.5, 157.5),
        "south": (157.5, 202.5),
        "southwest": (202.5, 247.5),
        "west": (247.5, 292.5),
        "northwest": (292.5, 337.5),
    }
    assert len(COMPASS_DIRECTIONS) == 8

    DEFAULT_START_LABEL = "your location"
    DEFAULT_END_LABEL = "your destination"


assert DirectionConfig.BEAR_MIN_DEG < DirectionConfig.BEAR_MAX_DEG < DirectionConfig.TURN_MAX_DEG, (
    "Turn buckets must be strictly increasing"
)


class WalkingConfig:
    """Walking time estimation."""

    # Average walking speed (4.8 km/h)
    SPEED_M_PER_MIN = 80.0


class CategoryConfig:
    """Point-of-interest categories and display labels."""

    LABELS = {
        "gate": "Entrance",
        "academic": "Academic",
        "amenity": "Amenities",
        "recreation": "Recreation",
        "religious": "Religious",
        "admin": "Administration",
    }
    CATEGORIES = list(LABELS.keys())
