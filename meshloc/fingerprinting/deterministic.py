"""Deterministic fingerprinting: RSSI distance and k-nearest-neighbor localization.

This module implements the distance metric between a live scan and a stored
fingerprint, and the k-NN localizer that derives a coordinate (unweighted
mean of the k nearest sites) and a site label (plurality vote).

Key rules:
    - D(z, f) = sqrt( Σ_{s ∈ z} (rssi_s - ref_f(s))² ),
      ref_f(s) = rssi of the first sample in f with id(s), else -100 dBm
    - Neighbors are ranked by a stable sort on D (ties keep insertion order)
    - x̂ = (1/k) Σ_{i ∈ K(z)} x_i

Author: Navigation Engineer
Date: 2026
"""

from typing import Dict, Iterable, Optional, Sequence

import numpy as np

from .types import NO_FIX, FingerprintDatabase, LocationEstimate, Sample

#: Reference value used when a fingerprint has never heard a scanned emitter.
MISSING_RSSI = -100


def distance(
    scan: Iterable[Sample],
    fingerprint_samples: Iterable[Sample],
    missing_rssi: int = MISSING_RSSI,
) -> float:
    """
    Compute distance D(z, f) between a live scan and a fingerprint.

    For every sample in the scan, the reference value is the RSSI of the
    first fingerprint sample with the same id; if the fingerprint has no
    such sample, ``missing_rssi`` is used instead (meaning "not heard
    here", not a measurement). The result is the Euclidean norm of the
    differences.

    **Asymmetry:**
    Only scan samples contribute. A fingerprint sample whose id is absent
    from the scan adds nothing, so an emitter the scan did not report is not
    penalized while an emitter the site never heard is.

    Args:
        scan: Live scan samples.
        fingerprint_samples: Samples stored in a fingerprint.
        missing_rssi: Reference RSSI for ids the fingerprint never heard.

    Returns:
        Distance as a non-negative float. An empty scan yields 0.0.

    Examples:
        >>> fp = [Sample("AP1", -60), Sample("AP2", -65)]
        >>> distance([Sample("AP1", -62), Sample("AP2", -67)], fp)  # doctest: +ELLIPSIS
        2.828...
        >>> distance([Sample("AP9", -60)], fp)
        40.0
    """
    reference: Dict[str, int] = {}
    for s in fingerprint_samples:
        # first match wins when an emitter was recorded several times
        reference.setdefault(s.id, s.rssi)

    diffs = np.array(
        [s.rssi - reference.get(s.id, missing_rssi) for s in scan], dtype=float
    )
    if diffs.size == 0:
        return 0.0
    return float(np.sqrt(np.sum(diffs**2)))


def pairwise_distances(
    scan: Sequence[Sample],
    db: FingerprintDatabase,
    missing_rssi: int = MISSING_RSSI,
) -> np.ndarray:
    """
    Compute distances D(z, f_i) for all fingerprints f_i in the database.

    Args:
        scan: Live scan samples.
        db: Fingerprint database with M fingerprints.
        missing_rssi: Reference RSSI for ids a fingerprint never heard.

    Returns:
        Array of distances, shape (M,), in database insertion order.
    """
    scan = list(scan)
    return np.array(
        [distance(scan, fp.samples, missing_rssi=missing_rssi) for fp in db],
        dtype=float,
    )


def rank_neighbors(
    scan: Sequence[Sample],
    db: FingerprintDatabase,
    k: int,
    missing_rssi: int = MISSING_RSSI,
) -> np.ndarray:
    """
    Indices of the k nearest fingerprints, nearest first.

    Uses a stable sort, so fingerprints at equal distance keep their
    database insertion order. Returns an empty array when ``k <= 0`` or the
    database is empty; returns all M indices when ``k > M``.
    """
    if k <= 0 or len(db) == 0:
        return np.array([], dtype=int)
    distances = pairwise_distances(scan, db, missing_rssi=missing_rssi)
    order = np.argsort(distances, kind="stable")
    return order[: min(k, len(order))]


def vote_label(names: Iterable[str]) -> str:
    """
    Plurality vote over non-empty names.

    Ties go to the name that was encountered first; empty names do not
    vote. Returns "" if nobody voted.
    """
    tallies: Dict[str, int] = {}
    for name in names:
        if name:
            tallies[name] = tallies.get(name, 0) + 1

    best_name = ""
    best_votes = 0
    for name, votes in tallies.items():
        if votes > best_votes:
            best_name, best_votes = name, votes
    return best_name


def knn_localize(
    scan: Sequence[Sample],
    db: FingerprintDatabase,
    k: int = 3,
    missing_rssi: int = MISSING_RSSI,
) -> LocationEstimate:
    """
    k-nearest-neighbor fingerprinting with majority-vote labeling.

    Steps:
        1. D(z, f_i) for every fingerprint.
        2. Stable ascending sort by distance.
        3. First min(k, M) fingerprints are the neighbors K(z).
        4. x̂ = unweighted mean latitude/longitude over K(z).
        5. Label = most frequent non-empty name in K(z), ties broken by
           first appearance in sorted order.

    Args:
        scan: Live scan samples (query).
        db: FingerprintDatabase to search.
        k: Number of neighbors. ``k <= 0`` selects none.
        missing_rssi: Reference RSSI for ids a fingerprint never heard.

    Returns:
        LocationEstimate (latitude, longitude, name). When no neighbor was
        selected (empty database or ``k <= 0``) the ``NO_FIX`` sentinel
        ``(0.0, 0.0, "")`` is returned. This function never raises for
        those cases.

    Examples:
        >>> db = FingerprintDatabase()
        >>> _ = db.add_sample("b1", -70, 10.001, 20.002, "Office")
        >>> _ = db.add_sample("b1", -65, 30.003, 40.004, "Room A")
        >>> knn_localize([Sample("b1", -72)], db, k=1)
        LocationEstimate(latitude=10.001, longitude=20.002, name='Office')
    """
    neighbors = rank_neighbors(scan, db, k, missing_rssi=missing_rssi)
    if neighbors.size == 0:
        return NO_FIX

    fingerprints = db.fingerprints
    selected = [fingerprints[i] for i in neighbors]

    # Implements: x̂ = (1/k) Σ x_i
    locations = np.array([[fp.latitude, fp.longitude] for fp in selected], dtype=float)
    lat_hat, lon_hat = locations.mean(axis=0)

    name = vote_label(fp.name for fp in selected)
    return LocationEstimate(float(lat_hat), float(lon_hat), name)


def nn_localize(
    scan: Sequence[Sample],
    db: FingerprintDatabase,
    missing_rssi: int = MISSING_RSSI,
) -> LocationEstimate:
    """Nearest-neighbor fingerprinting: ``knn_localize`` with k=1."""
    return knn_localize(scan, db, k=1, missing_rssi=missing_rssi)


def localize_many(
    scans: Sequence[Sequence[Sample]],
    db: FingerprintDatabase,
    k: int = 3,
    missing_rssi: Optional[int] = None,
) -> np.ndarray:
    """
    Localize a batch of scans.

    Returns:
        Array of shape (N, 2) with (latitude, longitude) per scan. Scans
        without a fix are returned as NaN rows.
    """
    if missing_rssi is None:
        missing_rssi = MISSING_RSSI
    out = np.full((len(scans), 2), np.nan)
    for i, scan in enumerate(scans):
        est = knn_localize(scan, db, k=k, missing_rssi=missing_rssi)
        if est.has_fix:
            out[i] = (est.latitude, est.longitude)
    return out
