"""Fingerprinting engine: one database, one live scan, one position.

The engine ties the fingerprinting components together for a node:

    radio collectors ──► ScanBuffer ──► knn_localize ──► LocationEstimate
                              │                ▲
                     collect_data()            │
                              ▼                │
    CSV file / anchors ──► FingerprintDatabase ┘

Every node constructs its own engine and hands it by reference to whatever
needs it (e.g. a DistressReporter); there is no process-wide instance. The
engine is single-threaded and synchronous: if scanning and localization run
on different threads, the host serializes access.

Author: Navigation Engineer
Date: 2026
"""

import logging
import warnings
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from .config import EngineConfig
from .exceptions import MeshlocError
from .fingerprinting.anchors import (
    ANCHOR_RSSI,
    parse_anchor_info,
    serialize_anchor_info,
)
from .fingerprinting.dataset import export_database, import_database
from .fingerprinting.deterministic import knn_localize
from .fingerprinting.scan import ScanBuffer, ScanCollector
from .fingerprinting.types import FingerprintDatabase, LocationEstimate, Sample, ScanSnapshot

logger = logging.getLogger(__name__)


class FingerprintingEngine:
    """
    Owns a fingerprint database and a live scan buffer.

    Args:
        config: Engine tunables (defaults to ``EngineConfig()``).
        collectors: Scan collectors run by ``trigger_new_scan``, short-range
                    (BLE) first, then long-range (LoRa).
        database: Existing database to take ownership of (a new empty one
                  by default).

    Examples:
        >>> engine = FingerprintingEngine()
        >>> engine.set_current_position(10.0, 10.0)
        >>> engine.add_ble_sample("AP1", -60)
        >>> engine.collect_data("Office")
        1
        >>> engine.localize([Sample("AP1", -62)])
        LocationEstimate(latitude=10.0, longitude=10.0, name='Office')
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        collectors: Sequence[ScanCollector] = (),
        database: Optional[FingerprintDatabase] = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.collectors = list(collectors)
        self.database = database if database is not None else FingerprintDatabase()
        self.scan_buffer = ScanBuffer()
        self.current_position: Optional[Tuple[float, float]] = None
        self.anchor_mode = False

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    def add_sample(
        self, id: str, rssi: int, latitude: float, longitude: float, name: str = ""
    ) -> None:
        """Merge one observation into the database (see FingerprintDatabase.add_sample)."""
        self.database.add_sample(id, rssi, latitude, longitude, name)

    def clear_database(self) -> None:
        self.database.clear()

    def import_database(self, path: Union[str, Path]) -> bool:
        """
        Replace the database with the contents of a CSV file.

        Returns:
            False if the file could not be opened (the database is then left
            untouched), True otherwise.
        """
        result = import_database(self.database, path, max_field_bytes=self.config.max_field_bytes)
        if result["ok"]:
            logger.info(
                "Loaded %d record(s) into %d fingerprint(s) from %s (%d malformed line(s) skipped)",
                result["n_records"],
                len(self.database),
                path,
                result["n_skipped"],
            )
        return result["ok"]

    def export_database(self, path: Union[str, Path]) -> bool:
        """Write the database to a CSV file. Returns False on I/O failure."""
        return export_database(self.database, path, max_field_bytes=self.config.max_field_bytes)

    def localize(self, scan: Sequence[Sample], k: Optional[int] = None) -> LocationEstimate:
        """
        Estimate position and site label for a scan.

        Args:
            scan: Scan snapshot to match.
            k: Number of neighbors (defaults to ``config.k``).

        Returns:
            LocationEstimate, or ``NO_FIX`` when no neighbor is available.
        """
        if k is None:
            k = self.config.k
        estimate = knn_localize(scan, self.database, k=k, missing_rssi=self.config.missing_rssi)
        logger.debug("Localized %d-sample scan with k=%d: %s", len(scan), k, estimate)
        return estimate

    # ------------------------------------------------------------------
    # Live scan
    # ------------------------------------------------------------------

    def add_ble_sample(self, id: str, rssi: int) -> None:
        self.scan_buffer.add_ble_sample(id, rssi)

    def add_lora_sample(self, id: str, rssi: int) -> None:
        self.scan_buffer.add_lora_sample(id, rssi)

    def trigger_new_scan(self) -> ScanSnapshot:
        """Clear the live scan and repopulate it from the configured collectors."""
        snapshot = self.scan_buffer.trigger_new_scan(self.collectors)
        logger.debug("New scan from %d collector(s): %d sample(s)", len(self.collectors), len(snapshot))
        return snapshot

    def get_current_scan_results(self) -> ScanSnapshot:
        """Read-only view of the live scan, valid until the next mutating call."""
        return self.scan_buffer.samples

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def set_current_position(self, latitude: float, longitude: float) -> None:
        """Set the ground-truth position used by ``collect_data`` and anchor broadcasts."""
        self.current_position = (latitude, longitude)

    def configure_anchor(self, latitude: float, longitude: float) -> None:
        """Mark this node as a fixed anchor at a known position."""
        self.anchor_mode = True
        self.set_current_position(latitude, longitude)
        logger.info("Anchor mode enabled at (%r, %r)", latitude, longitude)

    def collect_data(self, label: Optional[str] = None) -> int:
        """
        Learn the live scan as a fingerprint at the current position.

        Every buffered sample is merged at ``current_position`` under
        ``label`` (``config.collect_label`` when omitted), then the buffer is
        cleared.

        If no position has been set yet, nothing is learned: a
        RuntimeWarning is issued and the buffer is kept for a later call.

        Returns:
            Number of samples merged (0 if the buffer was empty or no
            position is set).
        """
        if label is None:
            label = self.config.collect_label
        if self.current_position is None:
            warnings.warn(
                f"No current position set; keeping {len(self.scan_buffer)} buffered "
                f"sample(s) unlearned",
                RuntimeWarning,
            )
            return 0
        latitude, longitude = self.current_position

        samples = self.scan_buffer.snapshot()
        for sample in samples:
            self.database.add_sample(sample.id, sample.rssi, latitude, longitude, label)
        self.scan_buffer.clear()

        if samples:
            logger.info(
                "Learned %d sample(s) at (%r, %r) as %r", len(samples), latitude, longitude, label
            )
        return len(samples)

    # ------------------------------------------------------------------
    # Anchors
    # ------------------------------------------------------------------

    def serialize_anchor_info(self) -> str:
        """
        Anchor broadcast for this node: ``ANCHOR,<nodeId>,<lat>,<lon>``.

        Raises:
            MeshlocError: If no position has been set.
        """
        if self.current_position is None:
            raise MeshlocError("Cannot broadcast anchor info before a position is set")
        latitude, longitude = self.current_position
        return serialize_anchor_info(self.config.node_id, latitude, longitude)

    def process_anchor_info(self, msg: str) -> bool:
        """
        Fold a received anchor broadcast into the database.

        Returns:
            True if the message was a well-formed anchor broadcast and was
            merged; False if it was ignored.
        """
        anchor = parse_anchor_info(msg)
        if anchor is None:
            logger.debug("Ignoring malformed anchor message: %r", msg)
            return False
        self.database.add_sample(
            anchor.sample_id,
            ANCHOR_RSSI,
            anchor.latitude,
            anchor.longitude,
            self.config.anchor_label,
        )
        return True
