"""Simulation utilities: synthetic site surveys and live scans."""

from .survey import (
    Emitter,
    Room,
    default_site,
    generate_queries,
    generate_site_survey,
    log_distance_path_loss,
    simulate_scan,
)

__all__ = [
    "Emitter",
    "Room",
    "default_site",
    "generate_queries",
    "generate_site_survey",
    "log_distance_path_loss",
    "simulate_scan",
]
