"""
Cross-chain event correlation: pull the event id out of a finalized
transaction and hand it to the relay.
"""

from __future__ import annotations

from .extract import OK_HEX, extract_event_id, parse_event_id
from .notify import TRANSFER_EVENT_PATH, EventNotifier, RelayConfig

__all__ = [
    "OK_HEX",
    "extract_event_id",
    "parse_event_id",
    "EventNotifier",
    "RelayConfig",
    "TRANSFER_EVENT_PATH",
]
