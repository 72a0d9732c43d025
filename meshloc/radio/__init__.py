"""Radio scan collectors.

Modules:
    ble: BleakScanCollector, one BLE discovery pass per scan (needs ``bleak``)
    lora: LoRaPacketCollector, RSSI of recently received mesh packets
"""

from .ble import BleakScanCollector
from .lora import LoRaPacketCollector, format_node_id

__all__ = [
    "BleakScanCollector",
    "LoRaPacketCollector",
    "format_node_id",
]
