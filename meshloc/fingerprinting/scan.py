"""Live scan buffer and the collector interface used to fill it.

Radio front-ends (BLE, LoRa) report ``(id, rssi)`` pairs. They are pushed
into a ScanBuffer, either directly by the caller or by running the scan
collectors through ``trigger_new_scan``. The buffer contents are the query
for a localization, or the samples learned by ``collect_data``.

Author: Navigation Engineer
Date: 2026
"""

import warnings
from typing import Iterable, List, Protocol, Sequence, Tuple, runtime_checkable

from .types import Sample, ScanSnapshot


@runtime_checkable
class ScanCollector(Protocol):
    """A radio front-end that reports the emitters it currently hears."""

    def collect(self) -> Iterable[Tuple[str, int]]:
        """Run one scan pass and return ``(id, rssi)`` pairs."""
        ...


class StaticCollector:
    """
    Collector that reports a fixed list of observations.

    Used for bench testing, replaying a recorded scan, or feeding samples
    from a source that is polled elsewhere.

    Examples:
        >>> c = StaticCollector([("b1", -70), ("b2", -81)])
        >>> list(c.collect())
        [('b1', -70), ('b2', -81)]
    """

    def __init__(self, samples: Sequence[Tuple[str, int]]) -> None:
        self.samples = [(str(i), int(r)) for i, r in samples]

    def collect(self) -> List[Tuple[str, int]]:
        return list(self.samples)


class ScanBuffer:
    """
    Accumulates live samples from the radio front-ends.

    BLE and LoRa samples share one sequence and are not tagged by origin.
    The buffer is exclusively owned by one engine and is not thread-safe.
    """

    def __init__(self) -> None:
        self._samples: List[Sample] = []

    def add_sample(self, id: str, rssi: int) -> None:
        """Append one observation to the current scan."""
        self._samples.append(Sample(id, int(rssi)))

    def add_ble_sample(self, id: str, rssi: int) -> None:
        """Append a short-range (BLE) observation; id is usually a MAC address."""
        self.add_sample(id, rssi)

    def add_lora_sample(self, id: str, rssi: int) -> None:
        """Append a long-range (LoRa) observation; id is usually a node id."""
        self.add_sample(id, rssi)

    @property
    def samples(self) -> ScanSnapshot:
        """Read-only snapshot of the current scan."""
        return tuple(self._samples)

    def snapshot(self) -> ScanSnapshot:
        """Freeze the current scan into a tuple owned by the caller."""
        return tuple(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)

    def trigger_new_scan(self, collectors: Iterable[ScanCollector]) -> ScanSnapshot:
        """
        Replace the current scan with fresh observations.

        Clears the buffer, then runs each collector in order (short-range
        first, then long-range, as passed in) and appends everything they
        report. A collector that fails is skipped with a RuntimeWarning so
        the other radios still contribute.

        Args:
            collectors: Scan collectors to run.

        Returns:
            Snapshot of the refreshed scan.
        """
        self.clear()
        for collector in collectors:
            try:
                observations = list(collector.collect())
            except Exception as exc:
                warnings.warn(
                    f"Scan collector {type(collector).__name__} failed: {exc}",
                    RuntimeWarning,
                )
                continue
            for emitter_id, rssi in observations:
                self.add_sample(emitter_id, rssi)
        return self.snapshot()
