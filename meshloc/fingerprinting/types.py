"""Type definitions and data structures for RSSI fingerprint localization.

This module defines the core data structures used by the fingerprinting
engine: single signal observations (samples), labeled site records
(fingerprints), the merge-on-insert fingerprint database, and the result
type returned by the localizer.

Author: Navigation Engineer
Date: 2026
"""

from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Sample:
    """
    A single (emitter id, received-signal-strength) observation.

    Attributes:
        id: Opaque identifier of the signal source. BLE observations usually
            carry a MAC address ("AA:BB:CC:DD:EE:FF"), LoRa observations a
            node id ("!a1b2c3d4"), anchors "ANCHOR:<nodeId>". The data model
            does not distinguish the origins; callers namespace ids if
            collisions across radios must be avoided.
        rssi: Received signal strength in dBm (signed integer).

    Examples:
        >>> s = Sample("AA:BB:CC:DD:EE:FF", -70)
        >>> s.rssi
        -70
    """

    id: str
    rssi: int


ScanSnapshot = Tuple[Sample, ...]


@dataclass
class Fingerprint:
    """
    A labeled site record pairing one coordinate with its signal observations.

    Attributes:
        latitude: Latitude in decimal degrees (identity key, exact match).
        longitude: Longitude in decimal degrees (identity key, exact match).
        name: Optional human-readable label ("" when unlabeled). Write-once:
              once non-empty it is never replaced.
        samples: Observations made at this site, in arrival order. Repeated
                 observations of the same emitter are kept as separate
                 entries.
    """

    latitude: float
    longitude: float
    name: str = ""
    samples: List[Sample] = field(default_factory=list)

    @property
    def key(self) -> Tuple[float, float]:
        """Identity key (latitude, longitude)."""
        return (self.latitude, self.longitude)

    @property
    def n_samples(self) -> int:
        """Number of samples stored at this site."""
        return len(self.samples)

    def emitter_ids(self) -> List[str]:
        """Distinct emitter ids in first-seen order."""
        return list(dict.fromkeys(s.id for s in self.samples))


class LocationEstimate(NamedTuple):
    """
    Result of a localization query.

    Behaves like a plain ``(latitude, longitude, name)`` tuple. The exact
    triple ``(0.0, 0.0, "")`` is the "no fix" sentinel (see ``NO_FIX``) and
    must never be read as a position at the origin; use ``has_fix``.
    """

    latitude: float
    longitude: float
    name: str

    @property
    def has_fix(self) -> bool:
        """False only for the no-fix sentinel."""
        return tuple(self) != tuple(NO_FIX)


NO_FIX = LocationEstimate(0.0, 0.0, "")


class FingerprintDatabase:
    """
    Insertion-ordered fingerprint database with merge-on-insert semantics.

    At most one Fingerprint exists per exact ``(latitude, longitude)`` key.
    Lookups are linear scans, which is adequate for the fingerprint count of
    a single site. No capacity bound is imposed; constrained deployments
    bound the database externally.

    Examples:
        >>> db = FingerprintDatabase()
        >>> _ = db.add_sample("b1", -70, 10.001, 20.002, "Office")
        >>> _ = db.add_sample("b2", -80, 10.001, 20.002, "Lobby")
        >>> len(db), db.n_samples, db.fingerprints[0].name
        (1, 2, 'Office')

    Notes:
        - Coordinates are compared with exact float equality. Quantize them
          before insertion if samples taken at approximately the same place
          should merge.
        - The database is not thread-safe; the owner serializes access.
    """

    def __init__(self, fingerprints: Optional[Sequence[Fingerprint]] = None) -> None:
        self._fingerprints: List[Fingerprint] = []
        for fp in fingerprints or ():
            for sample in fp.samples:
                self.add_sample(sample.id, sample.rssi, fp.latitude, fp.longitude, fp.name)

    @property
    def fingerprints(self) -> Tuple[Fingerprint, ...]:
        """Read-only view of the fingerprints in insertion order."""
        return tuple(self._fingerprints)

    @property
    def n_samples(self) -> int:
        """Total number of samples across all fingerprints."""
        return sum(fp.n_samples for fp in self._fingerprints)

    def __len__(self) -> int:
        return len(self._fingerprints)

    def __iter__(self) -> Iterator[Fingerprint]:
        return iter(self._fingerprints)

    def find(self, latitude: float, longitude: float) -> Optional[Fingerprint]:
        """Return the fingerprint with exactly this key, or None."""
        for fp in self._fingerprints:
            if fp.latitude == latitude and fp.longitude == longitude:
                return fp
        return None

    def add_sample(
        self,
        id: str,
        rssi: int,
        latitude: float,
        longitude: float,
        name: str = "",
    ) -> Fingerprint:
        """
        Merge one observation into the database.

        Finds the fingerprint whose key equals ``(latitude, longitude)``,
        creating it if none exists, and appends ``Sample(id, rssi)`` to it.
        Duplicate ids are not deduplicated. The name is set only when the
        fingerprint is still unlabeled and ``name`` is non-empty; a later,
        different name for the same key is discarded.

        Args:
            id: Emitter identifier.
            rssi: Received signal strength (dBm).
            latitude: Site latitude.
            longitude: Site longitude.
            name: Optional site label.

        Returns:
            The fingerprint the sample was appended to.
        """
        fp = self.find(latitude, longitude)
        if fp is None:
            fp = Fingerprint(latitude=latitude, longitude=longitude, name=name or "")
            self._fingerprints.append(fp)
        elif not fp.name and name:
            fp.name = name
        fp.samples.append(Sample(id, int(rssi)))
        return fp

    def clear(self) -> None:
        """Remove every fingerprint. There is no per-fingerprint deletion."""
        self._fingerprints.clear()

    def __repr__(self) -> str:
        return (
            f"FingerprintDatabase("
            f"n_fingerprints={len(self)}, "
            f"n_samples={self.n_samples})"
        )
