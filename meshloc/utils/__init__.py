"""Utility functions shared across meshloc.

Modules:
    geodesy: great-circle distance and local metric offsets
    logging: console logging configuration
"""

from .geodesy import EARTH_RADIUS_M, haversine_distance, offset_to_latlon
from .logging import configure_logging, get_logger

__all__ = [
    "EARTH_RADIUS_M",
    "haversine_distance",
    "offset_to_latlon",
    "configure_logging",
    "get_logger",
]
