"""RSSI fingerprint database and k-NN matching engine.

This package implements offline localization from ambient BLE/LoRa signal
strengths: a live scan is matched against a learned database of labeled
site fingerprints.

Main components:
    - Sample, Fingerprint, FingerprintDatabase: data model and merge rules
    - export_database / import_database: CSV persistence codec
    - distance, pairwise_distances: asymmetric RSSI distance (-100 dBm floor)
    - knn_localize, nn_localize: k-NN position + majority-vote label
    - ScanBuffer, ScanCollector: live scan accumulation
    - parse_anchor_info / serialize_anchor_info: anchor broadcast codec

Example usage:
    >>> from meshloc.fingerprinting import (
    ...     FingerprintDatabase,
    ...     Sample,
    ...     knn_localize,
    ... )
    >>> db = FingerprintDatabase()
    >>> _ = db.add_sample("AP1", -60, 10.0, 10.0, "Office")
    >>> knn_localize([Sample("AP1", -62)], db, k=3)
    LocationEstimate(latitude=10.0, longitude=10.0, name='Office')

Author: Navigation Engineer
Date: 2026
"""

from .anchors import AnchorInfo, parse_anchor_info, serialize_anchor_info
from .dataset import (
    MAX_FIELD_BYTES,
    decode_record,
    encode_record,
    export_database,
    import_database,
    load_fingerprint_database,
    print_database_summary,
    validate_database,
)
from .deterministic import (
    MISSING_RSSI,
    distance,
    knn_localize,
    localize_many,
    nn_localize,
    pairwise_distances,
    rank_neighbors,
    vote_label,
)
from .scan import ScanBuffer, ScanCollector, StaticCollector
from .types import (
    NO_FIX,
    Fingerprint,
    FingerprintDatabase,
    LocationEstimate,
    Sample,
    ScanSnapshot,
)

__all__ = [
    # Core types
    "Sample",
    "Fingerprint",
    "FingerprintDatabase",
    "LocationEstimate",
    "ScanSnapshot",
    "NO_FIX",
    # Persistence
    "MAX_FIELD_BYTES",
    "encode_record",
    "decode_record",
    "export_database",
    "import_database",
    "load_fingerprint_database",
    "validate_database",
    "print_database_summary",
    # Deterministic methods
    "MISSING_RSSI",
    "distance",
    "pairwise_distances",
    "rank_neighbors",
    "vote_label",
    "knn_localize",
    "nn_localize",
    "localize_many",
    # Live scan
    "ScanBuffer",
    "ScanCollector",
    "StaticCollector",
    # Anchors
    "AnchorInfo",
    "parse_anchor_info",
    "serialize_anchor_info",
]
