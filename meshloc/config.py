"""Engine configuration.

``EngineConfig`` holds the tunables of a FingerprintingEngine. Named presets
cover common deployments; a JSON file can override any field.

Example:
    >>> cfg = EngineConfig.from_preset("dense_indoor", node_id="!a1b2c3d4")
    >>> cfg.k
    5
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

from .exceptions import ConfigError
from .fingerprinting.dataset import MAX_FIELD_BYTES
from .fingerprinting.deterministic import MISSING_RSSI


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for a FingerprintingEngine.

    Attributes:
        k: Default number of neighbors for localization.
        missing_rssi: Reference RSSI (dBm) for emitters a fingerprint never heard.
        collect_label: Site label used by ``collect_data`` when none is given.
        anchor_label: Site label given to fingerprints created from anchor
                      broadcasts.
        node_id: This node's id, sent in anchor broadcasts.
        max_field_bytes: Byte limit for name/id fields in the CSV format.
        lora_capacity: Maximum LoRa packets held between two scans.
        ble_scan_seconds: Duration of one BLE scan pass.
    """

    k: int = 3
    missing_rssi: int = MISSING_RSSI
    collect_label: str = "CollectedLocation"
    anchor_label: str = "Anchor"
    node_id: str = "myNodeId"
    max_field_bytes: int = MAX_FIELD_BYTES
    lora_capacity: int = 20
    ble_scan_seconds: float = 5.0

    def __post_init__(self) -> None:
        """Validate field values."""
        if isinstance(self.k, bool) or not isinstance(self.k, int) or self.k < 0:
            raise ConfigError(f"k must be a non-negative integer, got {self.k!r}")
        if isinstance(self.missing_rssi, bool) or not isinstance(self.missing_rssi, int):
            raise ConfigError(f"missing_rssi must be an integer, got {self.missing_rssi!r}")
        if self.max_field_bytes < 1:
            raise ConfigError(f"max_field_bytes must be >= 1, got {self.max_field_bytes}")
        for name in ("collect_label", "anchor_label", "node_id"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"{name} must be a non-empty string, got {value!r}")
            if "," in value:
                raise ConfigError(f"{name} must not contain a comma, got {value!r}")
            if len(value.encode("utf-8")) > self.max_field_bytes:
                raise ConfigError(
                    f"{name} longer than {self.max_field_bytes} bytes: {value!r}"
                )
        if self.lora_capacity < 1:
            raise ConfigError(f"lora_capacity must be >= 1, got {self.lora_capacity}")
        if self.ble_scan_seconds <= 0:
            raise ConfigError(f"ble_scan_seconds must be positive, got {self.ble_scan_seconds}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """Build a config from a mapping; unknown keys raise ConfigError."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")
        return cls(**data)

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "EngineConfig":
        """Build a config from a named preset with optional overrides."""
        if name not in PRESETS:
            raise ConfigError(
                f"Unknown preset '{name}'. Available presets: {', '.join(PRESETS)}"
            )
        data = {k: v for k, v in PRESETS[name].items() if k != "description"}
        data.update(overrides)
        return cls.from_dict(data)

    def with_overrides(self, **overrides: Any) -> "EngineConfig":
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================================
# PRESET CONFIGURATIONS
# ============================================================================

PRESETS: Dict[str, Dict[str, Any]] = {
    "default": {
        "description": "Node defaults: k=3, -100 dBm floor",
    },
    "dense_indoor": {
        "description": "Many closely spaced BLE beacons; average more neighbors",
        "k": 5,
        "ble_scan_seconds": 3.0,
    },
    "sparse_outdoor": {
        "description": "Few LoRa anchors over a wide area; trust the nearest site",
        "k": 1,
        "missing_rssi": -120,
        "lora_capacity": 50,
        "ble_scan_seconds": 8.0,
    },
}


def load_config(path: Union[str, Path]) -> EngineConfig:
    """
    Load an EngineConfig from a JSON file.

    The file holds an object with any EngineConfig fields, plus an optional
    ``"preset"`` key naming the preset to start from.

    Raises:
        FileNotFoundError: If the file is missing.
        ConfigError: If the file is not a JSON object or has invalid values.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    preset = data.pop("preset", "default")
    return EngineConfig.from_preset(preset, **data)
