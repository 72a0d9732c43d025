"""Unit tests for meshloc.fingerprinting.scan module."""

import pytest

from meshloc.fingerprinting import Sample, ScanBuffer, ScanCollector, StaticCollector


class FailingCollector:
    def collect(self):
        raise OSError("adapter not found")


class TestStaticCollector:
    """Test suite for StaticCollector."""

    def test_collect_returns_copy(self):
        c = StaticCollector([("b1", -70), ("b2", -81)])
        first = c.collect()
        first.append(("junk", 0))
        assert c.collect() == [("b1", -70), ("b2", -81)]

    def test_satisfies_protocol(self):
        assert isinstance(StaticCollector([]), ScanCollector)
        assert not isinstance(object(), ScanCollector)


class TestScanBuffer:
    """Test suite for ScanBuffer."""

    def test_ble_and_lora_share_one_sequence(self):
        buf = ScanBuffer()
        buf.add_ble_sample("AA:BB:CC:DD:EE:FF", -60)
        buf.add_lora_sample("!a1b2c3d4", -95)
        buf.add_ble_sample("11:22:33:44:55:66", -75)

        assert buf.samples == (
            Sample("AA:BB:CC:DD:EE:FF", -60),
            Sample("!a1b2c3d4", -95),
            Sample("11:22:33:44:55:66", -75),
        )
        assert len(buf) == 3

    def test_snapshot_is_detached(self):
        buf = ScanBuffer()
        buf.add_sample("b1", -60)
        snap = buf.snapshot()
        buf.clear()
        assert snap == (Sample("b1", -60),)
        assert buf.samples == ()

    def test_trigger_new_scan_replaces_contents(self):
        buf = ScanBuffer()
        buf.add_sample("stale", -50)

        snap = buf.trigger_new_scan(
            [StaticCollector([("b1", -60)]), StaticCollector([("!0badcafe", -99)])]
        )

        assert snap == (Sample("b1", -60), Sample("!0badcafe", -99))
        assert buf.samples == snap

    def test_trigger_new_scan_without_collectors(self):
        buf = ScanBuffer()
        buf.add_sample("stale", -50)
        assert buf.trigger_new_scan([]) == ()

    def test_failing_collector_is_skipped(self):
        buf = ScanBuffer()
        with pytest.warns(RuntimeWarning, match="FailingCollector failed: adapter not found"):
            snap = buf.trigger_new_scan([FailingCollector(), StaticCollector([("b1", -60)])])
        assert snap == (Sample("b1", -60),)
