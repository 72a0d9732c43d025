"""meshloc: offline RSSI fingerprint localization for mesh radio nodes.

This package contains the components for estimating a node's position from
ambient BLE/LoRa signal strengths:
- fingerprinting: data model, CSV codec, distance metric, k-NN localizer,
  scan buffer and anchor codec
- engine: FingerprintingEngine, the per-node owner of database and scan
- radio: BLE and LoRa scan collectors
- distress: SOS message formatting and reporting
- eval: error metrics and plots
- sim: synthetic site surveys
"""

from .config import EngineConfig, load_config
from .engine import FingerprintingEngine
from .exceptions import ConfigError, MeshlocError, TransportError
from .fingerprinting import NO_FIX, FingerprintDatabase, LocationEstimate, Sample

__all__ = [
    "EngineConfig",
    "load_config",
    "FingerprintingEngine",
    "FingerprintDatabase",
    "LocationEstimate",
    "Sample",
    "NO_FIX",
    "MeshlocError",
    "ConfigError",
    "TransportError",
]

__version__ = "0.1.0"
