"""Unit tests for meshloc.radio.lora module."""

import pytest

from meshloc import EngineConfig
from meshloc.fingerprinting import ScanBuffer, ScanCollector
from meshloc.radio import LoRaPacketCollector, format_node_id

OWN = 0x00C0FFEE


class TestFormatNodeId:
    """Test suite for format_node_id()."""

    @pytest.mark.parametrize(
        "node_num, expected",
        [
            (0xA1B2C3D4, "!a1b2c3d4"),
            (0x0BADCAFE, "!0badcafe"),
            (1, "!00000001"),
        ],
    )
    def test_format(self, node_num, expected):
        assert format_node_id(node_num) == expected


class TestLoRaPacketCollector:
    """Test suite for LoRaPacketCollector."""

    def test_is_scan_collector(self):
        assert isinstance(LoRaPacketCollector(OWN), ScanCollector)

    def test_collect_drains(self):
        c = LoRaPacketCollector(OWN)
        assert c.on_packet(0xA1B2C3D4, -97)
        assert c.on_packet(0x0BADCAFE, -110)

        assert c.collect() == [("!a1b2c3d4", -97), ("!0badcafe", -110)]
        assert c.collect() == []
        assert len(c) == 0

    def test_ignores_own_and_unknown_sender(self):
        c = LoRaPacketCollector(OWN)
        assert not c.on_packet(OWN, -20)
        assert not c.on_packet(0, -90)
        assert c.collect() == []

    def test_capacity(self):
        c = LoRaPacketCollector(OWN, capacity=2)
        c.on_packet(1, -90)
        c.on_packet(2, -91)

        with pytest.warns(RuntimeWarning, match="buffer full"):
            assert not c.on_packet(3, -92)

        assert c.n_dropped == 1
        assert len(c.collect()) == 2
        assert c.on_packet(3, -92)

    def test_invalid_capacity(self):
        with pytest.raises(ValueError, match="capacity"):
            LoRaPacketCollector(OWN, capacity=0)

    def test_from_config(self):
        c = LoRaPacketCollector.from_config(EngineConfig(lora_capacity=50), own_node_num=OWN)
        assert c.capacity == 50
        assert c.own_node_num == OWN

    def test_feeds_scan_buffer(self):
        c = LoRaPacketCollector(OWN)
        c.on_packet(0xA1B2C3D4, -97)
        buf = ScanBuffer()
        snap = buf.trigger_new_scan([c])
        assert [(s.id, s.rssi) for s in snap] == [("!a1b2c3d4", -97)]
