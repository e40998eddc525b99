"""
Event identifier extraction from contract results.

The minter answers a bridge call with an asynchronous call result whose data
is `@6f6b@<hex id>`: an empty leading part, hex("ok"), and the identifier.
Results with nonce 0 are the top-level call itself and are never considered.
"""

from __future__ import annotations

import binascii
import string
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..errors import ExtractionError
from ..types.results import ContractResultRecord

OK_HEX = binascii.hexlify(b"ok").decode("ascii")  # "6f6b"
HEX_DIGITS = frozenset(string.hexdigits)

RecordLike = Union[ContractResultRecord, Mapping[str, object]]


def _as_record(rec: RecordLike) -> ContractResultRecord:
    if isinstance(rec, ContractResultRecord):
        return rec
    return ContractResultRecord.from_gateway(rec)


def parse_event_id(data: str) -> Optional[int]:
    """Identifier carried by one result's data, or None when it does not follow `@6f6b@<hex>`."""
    parts = data.split("@")
    if len(parts) != 3 or parts[0] != "" or parts[1] != OK_HEX:
        return None
    if not parts[2] or any(c not in HEX_DIGITS for c in parts[2]):
        return None
    return int(parts[2], 16)


def extract_event_id(records: Iterable[RecordLike], *, tx_hash: Optional[str] = None) -> int:
    """
    First event identifier among `records`, scanned in order.

    Raises ExtractionError when no record qualifies.
    """
    seen: Sequence[ContractResultRecord] = [_as_record(r) for r in records]
    for rec in seen:
        if rec.nonce == 0:
            continue
        event_id = parse_event_id(rec.data)
        if event_id is not None:
            return event_id
    raise ExtractionError("no contract result carries an event id", records=seen, tx_hash=tx_hash)


__all__ = ["OK_HEX", "parse_event_id", "extract_event_id"]
