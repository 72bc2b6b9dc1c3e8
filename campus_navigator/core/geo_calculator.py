"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for walking route computation:
- Distance calculation (Haversine formula)
- Bearing calculation (initial heading between points)
- Signed bearing difference and compass naming

All calculations use WGS84 spherical Earth approximation (R = 6,371 km).
"""

from math import atan2, cos, degrees, radians, sin, sqrt

from campus_navigator.constants import DirectionConfig

# Earth's radius in meters (WGS84 spherical approximation)
EARTH_RADIUS_M = 6_371_000


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    All methods use WGS84 spherical Earth model (R = 6,371 km).
    Coordinates are in decimal degrees (WGS84).
    Bearings are in degrees clockwise from North (0-360).
    Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate initial bearing from point 1 to point 2.

        The bearing is the compass direction to travel from start to end,
        measured clockwise from true North.

        Returns:
            Bearing in degrees (0-360, clockwise from North).
        """
        lat1_rad, lat2_rad = radians(lat1), radians(lat2)
        dlon = radians(lon2 - lon1)
        y = sin(dlon) * cos(lat2_rad)
        x = cos(lat1_rad) * sin(lat2_rad) - sin(lat1_rad) * cos(lat2_rad) * cos(dlon)
        return (degrees(atan2(y, x)) + 360) % 360

    @staticmethod
    def bearing_difference_deg(from_bearing: float, to_bearing: float) -> float:
        """Signed change of heading, normalized to [-180, 180].

        Positive values turn clockwise (right), negative counter-clockwise (left).
        """
        diff = (to_bearing - from_bearing) % 360
        if diff > 180:
            diff -= 360
        return diff

    @staticmethod
    def compass_direction(bearing_deg: float) -> str:
        """Get compass direction word from bearing.

        Args:
            bearing_deg: Bearing in degrees (any range, wrapped to 0-360)

        Returns:
            One of: north, northeast, east, southeast, south, southwest, west, northwest
        """
        brg = bearing_deg % 360
        for direction, (low, high) in DirectionConfig.COMPASS_DIRECTIONS.items():
            if low > high:
                if brg >= low or brg < high:
                    return direction
            elif low <= brg < high:
                return direction
        raise ValueError(f"Invalid bearing: {bearing_deg}")
