"""
Example: Learning Sites and Sending an SOS

Walks one node through its life cycle:
    1. Survey: at known positions, scan and learn each site by name
    2. Anchors: fold in coordinates broadcast by fixed anchor nodes
    3. Persist the database and reload it
    4. Emergency: the SOS trigger scans, localizes, and broadcasts

The radios are stood in by StaticCollector / LoRaPacketCollector fed from
the site simulator.

Author: Navigation Engineer
Date: 2026
"""

import sys
import tempfile
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from meshloc import EngineConfig, FingerprintingEngine
from meshloc.distress import DistressReporter
from meshloc.fingerprinting import StaticCollector
from meshloc.radio import LoRaPacketCollector
from meshloc.sim import default_site, simulate_scan
from meshloc.utils.geodesy import offset_to_latlon
from meshloc.utils.logging import configure_logging

ORIGIN = (52.5200, 13.4050)


def main():
    configure_logging(level="INFO")
    rng = np.random.default_rng(3)
    rooms, emitters = default_site()

    print("=" * 70)
    print("Site learning and SOS reporting")
    print("=" * 70)

    # 1. Survey each room at its center
    engine = FingerprintingEngine(config=EngineConfig(node_id="!00c0ffee"))
    print("\n1. Learning sites...")
    for room in rooms:
        east = room.east_m + room.width_m / 2
        north = room.north_m + room.depth_m / 2
        engine.set_current_position(*offset_to_latlon(*ORIGIN, east, north))
        for _ in range(3):
            for s in simulate_scan(east, north, emitters, rng):
                engine.add_ble_sample(s.id, s.rssi)
        n = engine.collect_data(room.name)
        print(f"   {room.name:<10} {n} samples")

    # 2. Anchor broadcasts received over the mesh
    print("\n2. Processing anchor broadcasts...")
    for msg in ("ANCHOR,!a1b2c3d4,52.52036,13.40382", "ANCHOR,garbled"):
        accepted = engine.process_anchor_info(msg)
        print(f"   {msg!r}: {'merged' if accepted else 'ignored'}")

    # 3. Persist and reload
    print("\n3. Persisting database...")
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "fp_log.csv"
        engine.export_database(path)
        engine.clear_database()
        engine.import_database(path)
    print(f"   {engine.database}")

    # 4. Emergency in the Lab
    print("\n4. SOS from the Lab...")
    lab = next(r for r in rooms if r.name == "Lab")
    east, north = lab.east_m + 3.0, lab.north_m + 6.0
    live = simulate_scan(east, north, emitters, rng)

    lora = LoRaPacketCollector.from_config(engine.config, own_node_num=0x00C0FFEE)
    lora.on_packet(0xA1B2C3D4, -97)
    engine.collectors = [
        StaticCollector([(s.id, s.rssi) for s in live if not s.id.startswith("!")]),
        lora,
    ]

    sent = []
    reporter = DistressReporter(engine, send=sent.append)
    reporter.trigger()

    print(f"   Broadcast: {sent[-1]}")
    print(f"   Truth:     Lab {offset_to_latlon(*ORIGIN, east, north)}")


if __name__ == "__main__":
    main()
