"""Distress (SOS) reporting: localize now and broadcast the result.

The reporter is what a panic button (or any other trigger) calls. It takes
a fresh scan, localizes it against the node's fingerprint database, formats
a short text message, and hands it to the mesh transport as a broadcast.
Button debouncing and interrupt handling belong to the host.
"""

import logging
from typing import Callable, Optional

from .engine import FingerprintingEngine
from .exceptions import TransportError
from .fingerprinting.types import LocationEstimate

logger = logging.getLogger(__name__)


def format_distress_message(estimate: LocationEstimate) -> str:
    """
    Render a location estimate as an SOS text message.

    Examples:
        >>> format_distress_message(LocationEstimate(12.345, -67.89, "Test Room"))
        'SOS! Last known location: Test Room (Lat: 12.345, Lon: -67.890)'
        >>> format_distress_message(LocationEstimate(1.234, -5.678, ""))
        'SOS! Last known location: (Lat: 1.234, Lon: -5.678)'
        >>> format_distress_message(LocationEstimate(0.0, 0.0, ""))
        'SOS! Location unknown.'
    """
    if not estimate.has_fix:
        return "SOS! Location unknown."
    if not estimate.name:
        return (
            f"SOS! Last known location: "
            f"(Lat: {estimate.latitude:.3f}, Lon: {estimate.longitude:.3f})"
        )
    return (
        f"SOS! Last known location: {estimate.name} "
        f"(Lat: {estimate.latitude:.3f}, Lon: {estimate.longitude:.3f})"
    )


class DistressReporter:
    """
    Runs the SOS workflow against one engine.

    Args:
        engine: The node's fingerprinting engine.
        send: Transport callback taking the message text (broadcast, no ack).
        k: Neighbors used for the estimate; defaults to the engine config.
    """

    def __init__(
        self,
        engine: FingerprintingEngine,
        send: Callable[[str], None],
        k: Optional[int] = None,
    ) -> None:
        self.engine = engine
        self.send = send
        self.k = k
        self.last_estimate: Optional[LocationEstimate] = None

    def trigger(self) -> str:
        """
        Scan, localize, and broadcast an SOS message.

        Returns:
            The message that was sent.

        Raises:
            TransportError: If the transport rejected the message.
        """
        logger.info("SOS triggered")
        self.engine.trigger_new_scan()
        scan = self.engine.get_current_scan_results()
        logger.info("Scan for SOS yielded %d result(s)", len(scan))

        estimate = self.engine.localize(scan, k=self.k)
        self.last_estimate = estimate
        message = format_distress_message(estimate)

        logger.info("Sending SOS message: %s", message)
        try:
            self.send(message)
        except Exception as exc:
            raise TransportError(f"Failed to send SOS message: {exc}") from exc
        return message
