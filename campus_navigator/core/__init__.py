"""Core foundation classes for geodesic calculations and spatial lookup.

This module provides the mathematical backbone for walking route computation:
- GeoCalculator: Geodesic calculations (distances, bearings, compass words)
- SpatialIndex: Projected k-d tree for nearest-vertex and coincidence queries
"""

from campus_navigator.core.geo_calculator import GeoCalculator
from campus_navigator.core.spatial_index import SpatialIndex

__all__ = [
    "GeoCalculator",
    "SpatialIndex",
]
