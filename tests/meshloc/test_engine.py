"""Unit tests for meshloc.engine module.

Tests the FingerprintingEngine workflow: learning, persistence, anchors and
scan collection.

Author: Navigation Engineer
Date: 2026
"""

import pytest

from meshloc import (
    NO_FIX,
    EngineConfig,
    FingerprintDatabase,
    FingerprintingEngine,
    MeshlocError,
    Sample,
)
from meshloc.fingerprinting import StaticCollector


@pytest.fixture
def engine():
    return FingerprintingEngine(config=EngineConfig(node_id="!00c0ffee"))


class TestDatabaseOperations:
    """Test suite for add_sample / localize / clear_database."""

    def test_add_and_localize(self, engine):
        engine.add_sample("b1", -70, 10.001, 20.002, "Office")
        engine.add_sample("b1", -65, 30.003, 40.004, "Room A")
        assert engine.localize([Sample("b1", -72)], k=1) == (10.001, 20.002, "Office")

    def test_default_k_from_config(self):
        engine = FingerprintingEngine(config=EngineConfig(k=1))
        engine.add_sample("AP1", -60, 0.0, 1.0, "A")
        engine.add_sample("AP1", -70, 0.0, 3.0, "B")
        assert engine.localize([Sample("AP1", -60)]) == (0.0, 1.0, "A")

    def test_missing_rssi_from_config(self):
        """The floor decides how much an unheard emitter costs."""
        scan = [Sample("AP1", -60), Sample("AP2", -60)]
        db = FingerprintDatabase()
        db.add_sample("AP1", -60, 1.0, 1.0, "OnlyAP1")
        db.add_sample("AP1", -90, 2.0, 2.0, "Both")
        db.add_sample("AP2", -60, 2.0, 2.0, "Both")

        # -100 floor: d(OnlyAP1) = 40, d(Both) = 30
        default = FingerprintingEngine(config=EngineConfig(k=1), database=db)
        assert default.localize(scan).name == "Both"

        # -70 floor: d(OnlyAP1) = 10, d(Both) = 30
        shallow = FingerprintingEngine(config=EngineConfig(k=1, missing_rssi=-70), database=db)
        assert shallow.localize(scan).name == "OnlyAP1"

    def test_empty_database_no_fix(self, engine):
        assert engine.localize([Sample("b1", -60)]) == NO_FIX

    def test_clear_database(self, engine):
        engine.add_sample("b1", -70, 1.0, 2.0)
        engine.clear_database()
        assert len(engine.database) == 0

    def test_takes_existing_database(self):
        db = FingerprintDatabase()
        db.add_sample("b1", -70, 1.0, 2.0, "Lab")
        engine = FingerprintingEngine(database=db)
        assert engine.database is db

    def test_engines_do_not_share_state(self):
        a = FingerprintingEngine()
        b = FingerprintingEngine()
        a.add_sample("b1", -70, 1.0, 2.0)
        a.add_ble_sample("b1", -70)
        assert len(b.database) == 0
        assert b.get_current_scan_results() == ()


class TestPersistence:
    """Test suite for import_database / export_database."""

    def test_round_trip(self, engine, tmp_path):
        engine.add_sample("beacon_A", -55, 10.1, 20.2, "Entrance")
        engine.add_sample("beacon_C", -70, 30.3, 40.4, "Lab")
        path = tmp_path / "fp_log.csv"

        assert engine.export_database(path)

        other = FingerprintingEngine()
        assert other.import_database(path)
        assert [fp.key for fp in other.database] == [(10.1, 20.2), (30.3, 40.4)]

    def test_import_missing_file(self, engine, tmp_path):
        engine.add_sample("b1", -70, 1.0, 2.0, "Keep")
        with pytest.warns(RuntimeWarning):
            assert engine.import_database(tmp_path / "missing.csv") is False
        assert engine.database.fingerprints[0].name == "Keep"

    def test_field_limit_from_config(self, tmp_path):
        path = tmp_path / "fp_log.csv"
        path.write_text("1.0,2.0,LongerName,b1,-60\n")

        config = EngineConfig(max_field_bytes=8, node_id="n", collect_label="Here")
        strict = FingerprintingEngine(config=config)
        assert strict.import_database(path)
        assert len(strict.database) == 0


class TestScanning:
    """Test suite for the live scan buffer."""

    def test_manual_samples(self, engine):
        engine.add_ble_sample("AA:BB:CC:DD:EE:FF", -60)
        engine.add_lora_sample("!a1b2c3d4", -95)
        assert engine.get_current_scan_results() == (
            Sample("AA:BB:CC:DD:EE:FF", -60),
            Sample("!a1b2c3d4", -95),
        )

    def test_trigger_new_scan_uses_collectors(self):
        engine = FingerprintingEngine(
            collectors=[StaticCollector([("b1", -60)]), StaticCollector([("!a1b2c3d4", -95)])]
        )
        engine.add_ble_sample("stale", -40)

        snap = engine.trigger_new_scan()

        assert snap == (Sample("b1", -60), Sample("!a1b2c3d4", -95))
        assert engine.get_current_scan_results() == snap


class TestLearning:
    """Test suite for set_current_position / collect_data."""

    def test_collect_data(self, engine):
        engine.set_current_position(52.52, 13.405)
        engine.add_ble_sample("b1", -60)
        engine.add_lora_sample("!a1b2c3d4", -95)

        n = engine.collect_data("Kitchen")

        assert n == 2
        assert engine.get_current_scan_results() == ()
        fp = engine.database.find(52.52, 13.405)
        assert fp.name == "Kitchen"
        assert fp.samples == [Sample("b1", -60), Sample("!a1b2c3d4", -95)]

    def test_collect_data_default_label(self, engine):
        engine.set_current_position(0.0, 0.0)
        engine.add_ble_sample("b1", -60)
        engine.collect_data()
        assert engine.database.fingerprints[0].name == "CollectedLocation"
        assert engine.database.fingerprints[0].key == (0.0, 0.0)

    def test_collect_without_position_keeps_buffer(self, engine):
        engine.add_ble_sample("b1", -60)

        with pytest.warns(RuntimeWarning, match="No current position"):
            n = engine.collect_data("Kitchen")

        assert n == 0
        assert len(engine.database) == 0
        assert engine.get_current_scan_results() == (Sample("b1", -60),)

        engine.set_current_position(52.52, 13.405)
        assert engine.collect_data("Kitchen") == 1
        assert engine.database.find(52.52, 13.405).name == "Kitchen"

    def test_collect_empty_buffer(self, engine):
        engine.set_current_position(1.0, 2.0)
        assert engine.collect_data("Lab") == 0
        assert len(engine.database) == 0

    def test_collect_twice_merges(self, engine):
        engine.set_current_position(1.0, 2.0)
        engine.add_ble_sample("b1", -60)
        engine.collect_data("Lab")
        engine.add_ble_sample("b2", -70)
        engine.collect_data("Office")

        assert len(engine.database) == 1
        assert engine.database.fingerprints[0].name == "Lab"
        assert engine.database.fingerprints[0].n_samples == 2


class TestAnchors:
    """Test suite for anchor configuration and broadcasts."""

    def test_serialize(self, engine):
        engine.configure_anchor(52.52, 13.405)
        assert engine.anchor_mode
        assert engine.serialize_anchor_info() == "ANCHOR,!00c0ffee,52.52,13.405"

    def test_process(self, engine):
        assert engine.process_anchor_info("ANCHOR,!a1b2c3d4,52.52036,13.40382")

        fp = engine.database.find(52.52036, 13.40382)
        assert fp.name == "Anchor"
        assert fp.samples == [Sample("ANCHOR:!a1b2c3d4", 0)]

    def test_malformed_ignored(self, engine):
        assert not engine.process_anchor_info("ANCHOR,!a1b2c3d4,52.52036")
        assert len(engine.database) == 0

    def test_non_finite_ignored(self, engine):
        for _ in range(3):
            assert not engine.process_anchor_info("ANCHOR,n,nan,nan")
        assert not engine.process_anchor_info("ANCHOR,n,1e400,1.0")
        assert len(engine.database) == 0

    def test_serialize_requires_position(self, engine):
        with pytest.raises(MeshlocError, match="before a position is set"):
            engine.serialize_anchor_info()

    def test_anchor_exchange_between_nodes(self):
        anchor = FingerprintingEngine(config=EngineConfig(node_id="anchor1"))
        anchor.configure_anchor(-33.8688, 151.2093)

        node = FingerprintingEngine()
        assert node.process_anchor_info(anchor.serialize_anchor_info())
        assert node.database.fingerprints[0].key == (-33.8688, 151.2093)

    def test_custom_anchor_label(self):
        engine = FingerprintingEngine(config=EngineConfig(anchor_label="Beacon"))
        engine.process_anchor_info("ANCHOR,n,1.0,2.0")
        assert engine.database.fingerprints[0].name == "Beacon"
