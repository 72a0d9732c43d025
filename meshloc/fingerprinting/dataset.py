"""Dataset utilities for saving, loading, and validating fingerprint databases.

This module provides the line-oriented CSV codec used to persist a
FingerprintDatabase, plus validation and summary helpers.

File format (no header), one line per (fingerprint, sample) pair:

    <lat>,<lon>,<name>,<id>,<rssi>

A fingerprint with three samples emits three lines sharing the same
coordinate and name fields. Floats are written with ``repr`` (shortest
round-trip form) so that an exported database re-imports to identical
distances.

Author: Navigation Engineer
Date: 2026
"""

import logging
import math
import warnings
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

from .types import Fingerprint, FingerprintDatabase, Sample

logger = logging.getLogger(__name__)

#: Maximum encoded length (UTF-8 bytes) of the name and id fields.
MAX_FIELD_BYTES = 31

Record = Tuple[float, float, str, str, int]


def _field_fits(value: str, max_bytes: int) -> bool:
    return not any(c in value for c in ",\r\n") and len(value.encode("utf-8")) <= max_bytes


def encode_record(fp: Fingerprint, sample: Sample) -> str:
    """
    Encode one (fingerprint, sample) pair as a CSV line (without newline).

    Examples:
        >>> fp = Fingerprint(10.1, 20.2, "Entrance")
        >>> encode_record(fp, Sample("beacon_A", -55))
        '10.1,20.2,Entrance,beacon_A,-55'
    """
    return f"{fp.latitude!r},{fp.longitude!r},{fp.name},{sample.id},{int(sample.rssi)}"


def decode_record(line: str, max_field_bytes: int = MAX_FIELD_BYTES) -> Optional[Record]:
    """
    Decode one CSV line into ``(lat, lon, name, id, rssi)``.

    The line must split on commas into exactly five fields: two finite
    floats, a name of at most ``max_field_bytes`` UTF-8 bytes (may be
    empty), a non-empty id of at most ``max_field_bytes`` bytes, and a
    signed integer RSSI.

    Args:
        line: One line of the file; a trailing newline is ignored.
        max_field_bytes: Byte limit for the name and id fields.

    Returns:
        The decoded record, or None if the line is malformed.

    Examples:
        >>> decode_record("10.1,20.2,Entrance,beacon_A,-55\\n")
        (10.1, 20.2, 'Entrance', 'beacon_A', -55)
        >>> decode_record("10.1,20.2,beacon_A") is None
        True
    """
    fields = line.rstrip("\r\n").split(",")
    if len(fields) != 5:
        return None

    lat_str, lon_str, name, emitter_id, rssi_str = fields
    try:
        lat = float(lat_str)
        lon = float(lon_str)
        rssi = int(rssi_str.strip())
    except ValueError:
        return None

    # NaN never equals itself, so it could not serve as a merge key
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    if not emitter_id or len(emitter_id.encode("utf-8")) > max_field_bytes:
        return None
    if len(name.encode("utf-8")) > max_field_bytes:
        return None

    return lat, lon, name, emitter_id, rssi


def export_database(
    db: FingerprintDatabase,
    path: Union[str, Path],
    max_field_bytes: int = MAX_FIELD_BYTES,
) -> bool:
    """
    Write the database to a CSV file, one line per (fingerprint, sample).

    Records whose name or id contains a comma or line break, or exceeds
    ``max_field_bytes`` are still written, but will be skipped by
    ``import_database``; a RuntimeWarning reports how many.

    Args:
        db: FingerprintDatabase to save.
        path: Destination file (overwritten).
        max_field_bytes: Byte limit checked for the name and id fields.

    Returns:
        True if the file was written completely, False on an I/O error (a
        RuntimeWarning is issued; no exception propagates).

    Examples:
        >>> export_database(db, 'fp_log.csv')  # doctest: +SKIP
        True
    """
    path = Path(path)
    n_lossy = 0
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for fp in db:
                for sample in fp.samples:
                    if not (
                        _field_fits(fp.name, max_field_bytes)
                        and _field_fits(sample.id, max_field_bytes)
                    ):
                        n_lossy += 1
                    f.write(encode_record(fp, sample) + "\n")
    except OSError as exc:
        warnings.warn(
            f"Failed to export fingerprint database to {path}: {exc}",
            RuntimeWarning,
        )
        return False

    if n_lossy:
        warnings.warn(
            f"{n_lossy} record(s) in {path} have a name or id with a comma, a line break, "
            f"or more than {max_field_bytes} bytes; they will not re-import",
            RuntimeWarning,
        )
    logger.debug("Exported %d fingerprint(s) / %d sample(s) to %s", len(db), db.n_samples, path)
    return True


def import_database(
    db: FingerprintDatabase,
    path: Union[str, Path],
    max_field_bytes: int = MAX_FIELD_BYTES,
) -> dict:
    """
    Replace the database contents with the records of a CSV file.

    The file is opened before anything is cleared: if it cannot be opened,
    the in-memory database is left untouched. Otherwise the database is
    cleared and each line is decoded independently; malformed lines,
    including lines that are not valid UTF-8, are skipped and the parser moves on. Every decoded record is merged with
    ``FingerprintDatabase.add_sample``.

    Args:
        db: Database to load into (modified in place).
        path: Source CSV file.
        max_field_bytes: Byte limit for the name and id fields.

    Returns:
        Dictionary with import results:
            {
                'ok': bool (False if the file could not be opened),
                'n_records': number of records merged,
                'n_skipped': number of malformed lines skipped
            }

    Examples:
        >>> result = import_database(db, 'fp_log.csv')  # doctest: +SKIP
        >>> result['ok'], result['n_skipped']  # doctest: +SKIP
        (True, 0)
    """
    path = Path(path)
    result = {"ok": False, "n_records": 0, "n_skipped": 0}

    try:
        f = open(path, "rb")
    except OSError as exc:
        warnings.warn(
            f"Failed to open fingerprint database {path}: {exc}; keeping current database",
            RuntimeWarning,
        )
        return result

    with f:
        db.clear()
        for line_no, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                result["n_skipped"] += 1
                logger.debug("Skipping undecodable line %d in %s: %r", line_no, path, raw)
                continue
            if not line.strip():
                continue
            record = decode_record(line, max_field_bytes=max_field_bytes)
            if record is None:
                result["n_skipped"] += 1
                logger.debug("Skipping malformed line %d in %s: %r", line_no, path, line)
                continue
            lat, lon, name, emitter_id, rssi = record
            db.add_sample(emitter_id, rssi, lat, lon, name)
            result["n_records"] += 1

    result["ok"] = True
    logger.debug(
        "Imported %d record(s) from %s (%d skipped)",
        result["n_records"],
        path,
        result["n_skipped"],
    )
    return result


def load_fingerprint_database(
    path: Union[str, Path], max_field_bytes: int = MAX_FIELD_BYTES
) -> FingerprintDatabase:
    """
    Load a CSV file into a new database.

    Unlike ``import_database`` this raises if the file does not exist,
    which suits scripts that cannot proceed without data.

    Raises:
        FileNotFoundError: If the file is missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Fingerprint database not found: {path}")
    db = FingerprintDatabase()
    import_database(db, path, max_field_bytes=max_field_bytes)
    return db


def validate_database(db: FingerprintDatabase, strict: bool = True) -> dict:
    """
    Perform data quality checks on a fingerprint database.

    Checks include:
    - Empty database and unlabeled fingerprints
    - Fingerprints with a single sample (weak matches)
    - Duplicate emitter ids within one fingerprint
    - Optional strict checks: RSSI ranges and field lengths

    Args:
        db: FingerprintDatabase to validate.
        strict: If True, perform additional checks on value ranges.

    Returns:
        Dictionary with validation results and warnings:
            {
                'valid': bool,
                'errors': list of error messages,
                'warnings': list of warning messages,
                'stats': dict with database statistics
            }

    Examples:
        >>> result = validate_database(db)  # doctest: +SKIP
        >>> if not result['valid']:  # doctest: +SKIP
        ...     print("Errors:", result['errors'])
    """
    errors = []
    warnings_list = []
    stats = {}

    stats["n_fingerprints"] = len(db)
    stats["n_samples"] = db.n_samples
    stats["n_emitters"] = len({s.id for fp in db for s in fp.samples})
    stats["n_labeled"] = sum(1 for fp in db if fp.name)

    if len(db) == 0:
        errors.append("Database is empty; localization will never produce a fix")
        return {"valid": False, "errors": errors, "warnings": warnings_list, "stats": stats}

    # Check 1: labels
    n_unlabeled = len(db) - stats["n_labeled"]
    if n_unlabeled:
        warnings_list.append(f"{n_unlabeled} fingerprint(s) have no name")

    # Check 2: sparse fingerprints
    sparse = [fp.key for fp in db if fp.n_samples < 2]
    if sparse:
        warnings_list.append(
            f"{len(sparse)} fingerprint(s) have a single sample; "
            f"matches against them are weak"
        )

    # Check 3: repeated emitters (only the first one is used for matching)
    n_repeated = sum(1 for fp in db if len(fp.emitter_ids()) < fp.n_samples)
    if n_repeated:
        warnings_list.append(
            f"{n_repeated} fingerprint(s) hold repeated observations of an emitter; "
            f"only the first observation is used for matching"
        )

    # Check 4: strict value checks (optional)
    if strict:
        rssi = np.array([s.rssi for fp in db for s in fp.samples], dtype=float)
        stats["rssi_min"] = float(np.min(rssi))
        stats["rssi_max"] = float(np.max(rssi))
        # anchors are stored with rssi 0, so only strictly positive values are suspect
        if np.any(rssi > 0):
            warnings_list.append("Some RSSI values are positive (unusual for dBm)")
        if np.any(rssi < -120):
            warnings_list.append("Some RSSI values below -120 dBm (very weak signal)")

        for fp in db:
            if not (-90.0 <= fp.latitude <= 90.0 and -180.0 <= fp.longitude <= 180.0):
                errors.append(f"Coordinate out of range: {fp.key}")
            if not _field_fits(fp.name, MAX_FIELD_BYTES):
                errors.append(f"Name {fp.name!r} cannot be stored in the CSV format")
            for s in fp.samples:
                if not _field_fits(s.id, MAX_FIELD_BYTES):
                    errors.append(f"Emitter id {s.id!r} cannot be stored in the CSV format")

    valid = len(errors) == 0

    return {
        "valid": valid,
        "errors": errors,
        "warnings": warnings_list,
        "stats": stats,
    }


def print_database_summary(db: FingerprintDatabase) -> None:
    """
    Print a human-readable summary of the database.

    Examples:
        >>> print_database_summary(db)  # doctest: +SKIP
        Fingerprint Database Summary
        ==================================================
        Fingerprints:     12
        Samples:          87
        ...
    """
    print("Fingerprint Database Summary")
    print("=" * 50)
    print(f"Fingerprints:     {len(db)}")
    print(f"Samples:          {db.n_samples}")
    print(f"Emitters:         {len({s.id for fp in db for s in fp.samples})}")
    print()

    if len(db) == 0:
        return

    # Per-label breakdown
    print("Fingerprints per Label:")
    counts = {}
    for fp in db:
        label = fp.name or "<unlabeled>"
        counts[label] = counts.get(label, 0) + 1
    for label, count in counts.items():
        print(f"  {label}: {count}")
    print()

    # RSSI statistics
    rssi = np.array([s.rssi for fp in db for s in fp.samples], dtype=float)
    print("RSSI Statistics (dBm):")
    print(f"  Mean: {np.mean(rssi):.1f}  Std: {np.std(rssi):.1f}")
    print(f"  Range: [{np.min(rssi):.0f}, {np.max(rssi):.0f}]")
    print()

    # Location bounds
    lats = np.array([fp.latitude for fp in db])
    lons = np.array([fp.longitude for fp in db])
    print("Location Bounds:")
    print(f"  Latitude:  [{lats.min():.6f}, {lats.max():.6f}]")
    print(f"  Longitude: [{lons.min():.6f}, {lons.max():.6f}]")
