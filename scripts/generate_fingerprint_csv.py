"""
Generate a synthetic fingerprint database CSV.

Creates a labeled RSSI fingerprint database for a small site with:
    - 6 rooms (3x2 block, 10 m each) surveyed on a regular grid
    - 6 BLE beacons and 2 distant LoRa nodes
    - Log-distance path-loss model with shadow fading
    - Receiver sensitivity floor (weak emitters are not heard)

Saves to: data/sim/site_fingerprints.csv (one line per fingerprint sample)

Usage:
    python scripts/generate_fingerprint_csv.py
    python scripts/generate_fingerprint_csv.py --preset dense --output fp_log.csv

Author: Navigation Engineer
Date: 2026
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from meshloc.fingerprinting import export_database, print_database_summary, validate_database
from meshloc.sim import generate_site_survey


# ============================================================================
# PRESET CONFIGURATIONS
# ============================================================================

PRESETS = {
    "baseline": {
        "description": "5 m grid, one scan per site, 4 dB shadowing",
        "grid_spacing": 5.0,
        "n_scans_per_site": 1,
        "sigma": 4.0,
        "sensitivity": -95.0,
    },
    "dense": {
        "description": "2.5 m grid, three scans per site",
        "grid_spacing": 2.5,
        "n_scans_per_site": 3,
        "sigma": 4.0,
        "sensitivity": -95.0,
    },
    "noisy": {
        "description": "5 m grid, 8 dB shadowing, deaf receiver",
        "grid_spacing": 5.0,
        "n_scans_per_site": 1,
        "sigma": 8.0,
        "sensitivity": -85.0,
    },
}


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic RSSI fingerprint database CSV"
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="baseline",
        help="Survey preset (default: baseline)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("data/sim/site_fingerprints.csv"),
        help="Output CSV path",
    )
    parser.add_argument("--lat", type=float, default=52.5200, help="Site origin latitude")
    parser.add_argument("--lon", type=float, default=13.4050, help="Site origin longitude")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    params = {k: v for k, v in PRESETS[args.preset].items() if k != "description"}

    print(f"\n{'='*60}")
    print("Generating Fingerprint Database")
    print(f"{'='*60}")
    print(f"Preset: {args.preset} ({PRESETS[args.preset]['description']})")
    print(f"Origin: ({args.lat}, {args.lon})")

    db = generate_site_survey(origin=(args.lat, args.lon), seed=args.seed, **params)

    print()
    print_database_summary(db)

    report = validate_database(db)
    for msg in report["warnings"]:
        print(f"  Warning: {msg}")
    for msg in report["errors"]:
        print(f"  Error: {msg}")

    args.output.parent.mkdir(parents=True, exist_ok=True)
    if not export_database(db, args.output):
        print(f"Failed to write {args.output}")
        return 1

    meta_path = args.output.with_suffix(".json")
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(
            {"preset": args.preset, "origin": [args.lat, args.lon], "seed": args.seed, **params},
            f,
            indent=2,
        )

    print(f"\nSaved {db.n_samples} records to {args.output}")
    print(f"Saved survey parameters to {meta_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
