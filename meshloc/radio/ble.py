"""BLE scan collector backed by ``bleak``.

One ``collect()`` call runs a single discovery pass of ``timeout`` seconds
and reports every advertising device with its RSSI. ``bleak`` is asyncio
based; ``collect`` drives its own event loop and therefore must not be
called from inside a running loop.

Requires the ``ble`` extra (``pip install meshloc[ble]``).
"""

import asyncio
import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class BleakScanCollector:
    """
    Short-range collector: one BLE discovery pass per scan.

    Args:
        timeout: Scan duration in seconds.
        max_results: Keep at most this many devices (strongest first);
                     None keeps all.
        adapter: Optional adapter name (e.g. "hci0") on Linux.
    """

    def __init__(
        self,
        timeout: float = 5.0,
        max_results: Optional[int] = None,
        adapter: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.max_results = max_results
        self.adapter = adapter

    @classmethod
    def from_config(cls, config, **kwargs) -> "BleakScanCollector":
        """Build a collector scanning for ``config.ble_scan_seconds``."""
        return cls(timeout=config.ble_scan_seconds, **kwargs)

    async def _discover(self) -> List[Tuple[str, int]]:
        from bleak import BleakScanner

        kwargs = {"timeout": self.timeout, "return_adv": True}
        if self.adapter:
            kwargs["adapter"] = self.adapter
        found = await BleakScanner.discover(**kwargs)
        return [(device.address, int(adv.rssi)) for device, adv in found.values()]

    def collect(self) -> List[Tuple[str, int]]:
        """Run one discovery pass and return ``(address, rssi)`` pairs."""
        readings = asyncio.run(self._discover())
        readings.sort(key=lambda r: r[1], reverse=True)
        if self.max_results is not None and len(readings) > self.max_results:
            logger.debug(
                "BLE scan found %d devices; keeping the %d strongest",
                len(readings),
                self.max_results,
            )
            readings = readings[: self.max_results]
        logger.debug("BLE scan: %d device(s)", len(readings))
        return readings
