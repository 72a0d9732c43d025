"""
Localize a scan against a fingerprint database CSV.

The scan is given as id=rssi pairs on the command line. Prints the estimate
and, with --sos, the distress message that would be broadcast.

Usage:
    python scripts/localize_scan.py data/sim/site_fingerprints.csv \
        C0:FF:EE:00:00:01=-58 C0:FF:EE:00:00:02=-71 --k 3

Author: Navigation Engineer
Date: 2026
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from meshloc import EngineConfig, FingerprintingEngine, load_config
from meshloc.distress import format_distress_message
from meshloc.fingerprinting import Sample
from meshloc.utils.logging import configure_logging


def parse_sample(text: str) -> Sample:
    """Parse ``id=rssi``; the id may itself contain colons."""
    emitter_id, sep, rssi = text.rpartition("=")
    if not sep or not emitter_id:
        raise argparse.ArgumentTypeError(f"expected id=rssi, got {text!r}")
    try:
        return Sample(emitter_id, int(rssi))
    except ValueError:
        raise argparse.ArgumentTypeError(f"rssi must be an integer in {text!r}") from None


def main() -> int:
    parser = argparse.ArgumentParser(description="Localize a scan with k-NN fingerprinting")
    parser.add_argument("database", type=Path, help="Fingerprint database CSV")
    parser.add_argument("samples", nargs="+", type=parse_sample, help="Scan samples as id=rssi")
    parser.add_argument("--k", type=int, default=None, help="Number of neighbors")
    parser.add_argument("--config", type=Path, default=None, help="Engine config JSON")
    parser.add_argument("--sos", action="store_true", help="Print the SOS message")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    args = parser.parse_args()

    configure_logging(level=args.log_level)

    config = load_config(args.config) if args.config else EngineConfig()
    engine = FingerprintingEngine(config=config)
    if not engine.import_database(args.database):
        print(f"Could not open {args.database}")
        return 1

    estimate = engine.localize(args.samples, k=args.k)
    if estimate.has_fix:
        print(f"Latitude:  {estimate.latitude:.6f}")
        print(f"Longitude: {estimate.longitude:.6f}")
        print(f"Site:      {estimate.name or '<unlabeled>'}")
    else:
        print("No fix")

    if args.sos:
        print(format_distress_message(estimate))
    return 0 if estimate.has_fix else 2


if __name__ == "__main__":
    sys.exit(main())
