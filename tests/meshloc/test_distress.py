"""Unit tests for meshloc.distress module.

Author: Navigation Engineer
Date: 2026
"""

import pytest

from meshloc import NO_FIX, FingerprintingEngine, LocationEstimate, TransportError
from meshloc.distress import DistressReporter, format_distress_message
from meshloc.fingerprinting import StaticCollector


class TestFormatDistressMessage:
    """Test suite for format_distress_message()."""

    def test_named_location(self):
        msg = format_distress_message(LocationEstimate(12.345, -67.89, "Test Room"))
        assert msg == "SOS! Last known location: Test Room (Lat: 12.345, Lon: -67.890)"

    def test_unnamed_location(self):
        msg = format_distress_message(LocationEstimate(1.234, -5.678, ""))
        assert msg == "SOS! Last known location: (Lat: 1.234, Lon: -5.678)"

    def test_unknown_location(self):
        assert format_distress_message(NO_FIX) == "SOS! Location unknown."

    def test_rounding(self):
        msg = format_distress_message(LocationEstimate(52.52036, 13.40382, "Lab"))
        assert msg == "SOS! Last known location: Lab (Lat: 52.520, Lon: 13.404)"

    def test_named_origin_is_reported(self):
        msg = format_distress_message(LocationEstimate(0.0, 0.0, "Anchor"))
        assert msg == "SOS! Last known location: Anchor (Lat: 0.000, Lon: 0.000)"


class TestDistressReporter:
    """Test suite for DistressReporter."""

    @pytest.fixture
    def engine(self):
        engine = FingerprintingEngine(
            collectors=[StaticCollector([("AP1", -62), ("AP2", -67)])]
        )
        engine.add_sample("AP1", -60, 10.0, 10.0, "Office")
        engine.add_sample("AP2", -65, 10.0, 10.0, "Office")
        return engine

    def test_trigger_sends_located_message(self, engine):
        sent = []
        reporter = DistressReporter(engine, send=sent.append)

        msg = reporter.trigger()

        assert msg == "SOS! Last known location: Office (Lat: 10.000, Lon: 10.000)"
        assert sent == [msg]
        assert reporter.last_estimate == (10.0, 10.0, "Office")

    def test_trigger_refreshes_scan(self, engine):
        engine.add_ble_sample("stale", -30)
        DistressReporter(engine, send=lambda m: None).trigger()
        assert [s.id for s in engine.get_current_scan_results()] == ["AP1", "AP2"]

    def test_trigger_without_database(self):
        sent = []
        reporter = DistressReporter(FingerprintingEngine(), send=sent.append)
        reporter.trigger()
        assert sent == ["SOS! Location unknown."]
        assert reporter.last_estimate == NO_FIX

    def test_k_override(self, engine):
        engine.add_sample("AP1", -61, 20.0, 20.0, "Lobby")
        reporter = DistressReporter(engine, send=lambda m: None, k=2)
        reporter.trigger()
        assert reporter.last_estimate.latitude == pytest.approx(15.0)

    def test_transport_failure(self, engine):
        def send(message):
            raise ConnectionError("radio busy")

        reporter = DistressReporter(engine, send=send)
        with pytest.raises(TransportError, match="radio busy"):
            reporter.trigger()
        assert reporter.last_estimate.name == "Office"
