"""Anchor broadcast codec.

An anchor is a fixed reference node that knows its own coordinates and
broadcasts them over the mesh as

    ANCHOR,<nodeId>,<lat>,<lon>

Receiving nodes fold each anchor into their fingerprint database as a
zero-RSSI sample with id ``ANCHOR:<nodeId>``. Broadcasts are trusted at face
value; there is no authentication.

Author: Navigation Engineer
Date: 2026
"""

import math
from typing import NamedTuple, Optional

ANCHOR_PREFIX = "ANCHOR,"
ANCHOR_ID_PREFIX = "ANCHOR:"
ANCHOR_RSSI = 0


class AnchorInfo(NamedTuple):
    node_id: str
    latitude: float
    longitude: float

    @property
    def sample_id(self) -> str:
        """Emitter id under which the anchor is stored in the database."""
        return f"{ANCHOR_ID_PREFIX}{self.node_id}"


def serialize_anchor_info(node_id: str, latitude: float, longitude: float) -> str:
    """
    Build the anchor broadcast message.

    Examples:
        >>> serialize_anchor_info("node7", 52.52, 13.405)
        'ANCHOR,node7,52.52,13.405'
    """
    return f"{ANCHOR_PREFIX}{node_id},{latitude!r},{longitude!r}"


def parse_anchor_info(msg: str) -> Optional[AnchorInfo]:
    """
    Parse an anchor broadcast message.

    The message must start with ``ANCHOR,`` and contain two further commas.
    The node id runs from the end of the prefix to the next comma, the next
    field is the latitude, and the remainder is the longitude.

    Returns:
        AnchorInfo, or None if the message is not a well-formed anchor
        broadcast (missing separator, unparseable or non-finite coordinate). Malformed
        messages are ignored entirely.

    Examples:
        >>> parse_anchor_info("ANCHOR,node7,52.52,13.405")
        AnchorInfo(node_id='node7', latitude=52.52, longitude=13.405)
        >>> parse_anchor_info("ANCHOR,node7,52.52") is None
        True
    """
    if not msg.startswith(ANCHOR_PREFIX):
        return None

    start = len(ANCHOR_PREFIX)
    p1 = msg.find(",", start)
    if p1 < 0:
        return None
    p2 = msg.find(",", p1 + 1)
    if p2 < 0:
        return None

    node_id = msg[start:p1]
    try:
        latitude = float(msg[p1 + 1 : p2])
        longitude = float(msg[p2 + 1 :])
    except ValueError:
        return None
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        return None
    return AnchorInfo(node_id, latitude, longitude)
