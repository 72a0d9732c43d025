"""LoRa scan collector fed by received mesh packets.

LoRa nodes are not actively scanned: every packet the radio receives from
another node carries an RSSI. The mesh router hands each packet to
``on_packet``; the next scan drains what was heard since the previous one.
"""

import logging
import warnings
from typing import List, Tuple

logger = logging.getLogger(__name__)


def format_node_id(node_num: int) -> str:
    """
    Format a numeric node id the way the mesh displays it.

    Examples:
        >>> format_node_id(0xA1B2C3D4)
        '!a1b2c3d4'
    """
    return f"!{node_num & 0xFFFFFFFF:08x}"


class LoRaPacketCollector:
    """
    Buffers RSSI readings from recently received LoRa packets.

    Args:
        own_node_num: This node's numeric id; its own packets are ignored.
        capacity: Maximum readings held between scans. Readings arriving
                  while the buffer is full are dropped.
    """

    def __init__(self, own_node_num: int, capacity: int = 20) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.own_node_num = own_node_num
        self.capacity = capacity
        self._recent: List[Tuple[str, int]] = []
        self.n_dropped = 0

    @classmethod
    def from_config(cls, config, own_node_num: int) -> "LoRaPacketCollector":
        """Build a collector sized by ``config.lora_capacity``."""
        return cls(own_node_num, capacity=config.lora_capacity)

    def on_packet(self, from_node: int, rssi: int) -> bool:
        """
        Record the RSSI of a received packet.

        Returns:
            True if the reading was stored.
        """
        if from_node == 0 or from_node == self.own_node_num:
            return False
        if len(self._recent) >= self.capacity:
            self.n_dropped += 1
            warnings.warn(
                f"LoRa buffer full ({self.capacity}); dropping reading from "
                f"{format_node_id(from_node)}",
                RuntimeWarning,
            )
            return False
        self._recent.append((format_node_id(from_node), int(rssi)))
        logger.debug("LoRa reading from %s (RSSI %d)", format_node_id(from_node), rssi)
        return True

    def __len__(self) -> int:
        return len(self._recent)

    def collect(self) -> List[Tuple[str, int]]:
        """Return and clear the readings heard since the previous scan."""
        readings, self._recent = self._recent, []
        return readings
