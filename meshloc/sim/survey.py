"""Synthetic site surveys for exercising the fingerprint engine.

Generates a labeled fingerprint database for a small site (a grid of named
rooms) heard by a set of BLE beacons and LoRa nodes, and noisy live scans
taken at arbitrary positions. RSSI follows the log-distance path-loss model
with log-normal shadowing; emitters weaker than the receiver sensitivity
are not heard, so fingerprints carry uneven sets of emitter ids just like a
real survey.

Model: P(d) = P0 - 10*n*log10(d/d0) + X_sigma

Author: Navigation Engineer
Date: 2026
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..fingerprinting.types import FingerprintDatabase, Sample
from ..utils.geodesy import offset_to_latlon


@dataclass(frozen=True)
class Emitter:
    """A fixed radio source in local site coordinates.

    Attributes:
        id: Emitter id as reported by the scanner.
        east_m, north_m: Position relative to the site origin (m).
        p0: Received power at the reference distance d0 = 1 m (dBm).
        n: Path-loss exponent (2.0 free space, 2-4 indoor).
    """

    id: str
    east_m: float
    north_m: float
    p0: float = -45.0
    n: float = 2.5


@dataclass(frozen=True)
class Room:
    """A labeled rectangular area surveyed on a regular grid."""

    name: str
    east_m: float
    north_m: float
    width_m: float = 10.0
    depth_m: float = 10.0

    def contains(self, east_m: float, north_m: float) -> bool:
        return (
            self.east_m <= east_m < self.east_m + self.width_m
            and self.north_m <= north_m < self.north_m + self.depth_m
        )


def log_distance_path_loss(
    d: float,
    p0: float = -45.0,
    d0: float = 1.0,
    n: float = 2.5,
    sigma: float = 0.0,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Compute RSS using the log-distance path-loss model.

    Args:
        d: Distance from emitter to receiver (m).
        p0: Reference power at distance d0 (dBm).
        d0: Reference distance (m).
        n: Path-loss exponent.
        sigma: Shadow fading standard deviation (dB); 0 disables it.
        rng: Random generator used for the shadowing term.

    Returns:
        RSS in dBm.
    """
    d = max(d, 0.1)  # avoid the singularity at the emitter
    rss = p0 - 10.0 * n * np.log10(d / d0)
    if sigma > 0:
        if rng is None:
            rng = np.random.default_rng()
        rss += rng.normal(0.0, sigma)
    return float(rss)


def default_site() -> Tuple[List[Room], List[Emitter]]:
    """
    A 3x2 block of 10 m rooms with six BLE beacons and two LoRa nodes.

    Returns:
        (rooms, emitters)
    """
    names = ["Entrance", "Office", "Lab", "Storage", "Kitchen", "Lobby"]
    rooms = [
        Room(name, east_m=10.0 * (i % 3), north_m=10.0 * (i // 3))
        for i, name in enumerate(names)
    ]
    emitters = [
        Emitter("C0:FF:EE:00:00:01", 5.0, 5.0),
        Emitter("C0:FF:EE:00:00:02", 15.0, 5.0),
        Emitter("C0:FF:EE:00:00:03", 25.0, 5.0),
        Emitter("C0:FF:EE:00:00:04", 5.0, 15.0),
        Emitter("C0:FF:EE:00:00:05", 15.0, 15.0),
        Emitter("C0:FF:EE:00:00:06", 25.0, 15.0),
        # LoRa: strong transmitters further away, low exponent outdoors
        Emitter("!a1b2c3d4", -80.0, 40.0, p0=-30.0, n=2.2),
        Emitter("!0badcafe", 120.0, -30.0, p0=-30.0, n=2.2),
    ]
    return rooms, emitters


def simulate_scan(
    east_m: float,
    north_m: float,
    emitters: Sequence[Emitter],
    rng: np.random.Generator,
    sigma: float = 4.0,
    sensitivity: float = -95.0,
) -> List[Sample]:
    """
    Simulate one live scan at a local position.

    Emitters whose simulated RSSI falls below ``sensitivity`` are not
    reported.

    Returns:
        List of Sample with integer RSSI (as radios report it).
    """
    scan = []
    for e in emitters:
        d = float(np.hypot(east_m - e.east_m, north_m - e.north_m))
        rss = log_distance_path_loss(d, p0=e.p0, n=e.n, sigma=sigma, rng=rng)
        if rss >= sensitivity:
            scan.append(Sample(e.id, int(round(rss))))
    return scan


def generate_site_survey(
    origin: Tuple[float, float] = (52.5200, 13.4050),
    rooms: Optional[Sequence[Room]] = None,
    emitters: Optional[Sequence[Emitter]] = None,
    grid_spacing: float = 5.0,
    n_scans_per_site: int = 1,
    sigma: float = 4.0,
    sensitivity: float = -95.0,
    seed: int = 42,
) -> FingerprintDatabase:
    """
    Generate a labeled fingerprint database for a site.

    Each room is surveyed on a grid with ``grid_spacing`` (offset by half a
    step from the room walls). At every grid point ``n_scans_per_site``
    scans are merged into the same fingerprint, so sites surveyed more than
    once hold repeated observations of the same emitters.

    Args:
        origin: (latitude, longitude) of the site's local origin.
        rooms: Rooms to survey (``default_site()`` rooms by default).
        emitters: Radio sources (``default_site()`` emitters by default).
        grid_spacing: Distance between survey points (m).
        n_scans_per_site: Scans merged at each survey point.
        sigma: Shadow fading standard deviation (dB).
        sensitivity: Receiver sensitivity floor (dBm).
        seed: Random seed for reproducibility.

    Returns:
        FingerprintDatabase keyed by survey point coordinates, labeled with
        room names.
    """
    if rooms is None or emitters is None:
        default_rooms, default_emitters = default_site()
        rooms = default_rooms if rooms is None else rooms
        emitters = default_emitters if emitters is None else emitters
    if grid_spacing <= 0:
        raise ValueError(f"grid_spacing must be positive, got {grid_spacing}")
    if n_scans_per_site < 1:
        raise ValueError(f"n_scans_per_site must be >= 1, got {n_scans_per_site}")

    rng = np.random.default_rng(seed)
    lat0, lon0 = origin
    db = FingerprintDatabase()

    for room in rooms:
        easts = np.arange(grid_spacing / 2, room.width_m, grid_spacing) + room.east_m
        norths = np.arange(grid_spacing / 2, room.depth_m, grid_spacing) + room.north_m
        for e in easts:
            for n in norths:
                lat, lon = offset_to_latlon(lat0, lon0, float(e), float(n))
                for _ in range(n_scans_per_site):
                    for s in simulate_scan(e, n, emitters, rng, sigma, sensitivity):
                        db.add_sample(s.id, s.rssi, lat, lon, room.name)

    return db


def generate_queries(
    n_queries: int = 100,
    origin: Tuple[float, float] = (52.5200, 13.4050),
    rooms: Optional[Sequence[Room]] = None,
    emitters: Optional[Sequence[Emitter]] = None,
    sigma: float = 4.0,
    sensitivity: float = -95.0,
    seed: int = 7,
) -> Tuple[List[List[Sample]], np.ndarray, List[str]]:
    """
    Generate live scans at random positions inside the rooms.

    Returns:
        Tuple of (scans, true_latlon, true_labels):
            scans: list of N scans
            true_latlon: true positions, shape (N, 2)
            true_labels: room name per query
    """
    if rooms is None or emitters is None:
        default_rooms, default_emitters = default_site()
        rooms = default_rooms if rooms is None else rooms
        emitters = default_emitters if emitters is None else emitters

    rng = np.random.default_rng(seed)
    lat0, lon0 = origin
    scans = []
    truth = np.zeros((n_queries, 2))
    labels = []

    for i in range(n_queries):
        room = rooms[rng.integers(len(rooms))]
        e = room.east_m + rng.uniform(0.0, room.width_m)
        n = room.north_m + rng.uniform(0.0, room.depth_m)
        scans.append(simulate_scan(e, n, emitters, rng, sigma, sensitivity))
        truth[i] = offset_to_latlon(lat0, lon0, e, n)
        labels.append(room.name)

    return scans, truth, labels
