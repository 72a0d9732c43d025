"""Unit tests for meshloc.radio.ble module.

The bleak scanner is replaced by a fake discover() so no adapter is needed.
"""

from types import SimpleNamespace

import pytest

bleak = pytest.importorskip("bleak")

from meshloc import EngineConfig  # noqa: E402
from meshloc.radio import BleakScanCollector  # noqa: E402


def _fake_discovery(devices, calls):
    async def discover(**kwargs):
        calls.append(kwargs)
        return {
            address: (SimpleNamespace(address=address), SimpleNamespace(rssi=rssi))
            for address, rssi in devices
        }

    return discover


@pytest.fixture
def fake_scanner(monkeypatch):
    calls = []
    devices = [
        ("AA:AA:AA:AA:AA:01", -80),
        ("AA:AA:AA:AA:AA:02", -55),
        ("AA:AA:AA:AA:AA:03", -67),
    ]
    monkeypatch.setattr(bleak.BleakScanner, "discover", _fake_discovery(devices, calls))
    return calls


class TestBleakScanCollector:
    """Test suite for BleakScanCollector."""

    def test_collect_sorted_strongest_first(self, fake_scanner):
        readings = BleakScanCollector(timeout=1.0).collect()
        assert readings == [
            ("AA:AA:AA:AA:AA:02", -55),
            ("AA:AA:AA:AA:AA:03", -67),
            ("AA:AA:AA:AA:AA:01", -80),
        ]
        assert fake_scanner == [{"timeout": 1.0, "return_adv": True}]

    def test_max_results(self, fake_scanner):
        readings = BleakScanCollector(max_results=1).collect()
        assert readings == [("AA:AA:AA:AA:AA:02", -55)]

    def test_adapter_passed_through(self, fake_scanner):
        BleakScanCollector(adapter="hci1").collect()
        assert fake_scanner[0]["adapter"] == "hci1"

    def test_from_config(self):
        c = BleakScanCollector.from_config(EngineConfig(ble_scan_seconds=3.0), max_results=10)
        assert c.timeout == 3.0
        assert c.max_results == 10
