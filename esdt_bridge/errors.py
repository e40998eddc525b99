"""
Typed error classes for the bridge adapter.

Every failure mode of a bridge operation maps onto one class so callers can
catch a specific stage while still being able to catch the base `BridgeError`:

- SubmissionError  : nonce sync, signing or broadcast rejected
- FinalityError    : terminal on-chain failure or malformed status envelope
- FinalityTimeout  : pending state outlived the configured deadline
- ExtractionError  : no contract result carried an event identifier
- NotificationError: relay unreachable or rejected the event
- ProxyError       : gateway transport/envelope failure on read paths

None of these are retried internally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

__all__ = [
    "BridgeError",
    "ProxyError",
    "SubmissionError",
    "FinalityError",
    "FinalityTimeout",
    "ExtractionError",
    "NotificationError",
]


class BridgeError(Exception):
    """Base class for all bridge errors."""


@dataclass
class ProxyError(BridgeError):
    """Raised when the ledger gateway is unreachable or answers with a non-successful envelope."""

    message: str
    path: Optional[str] = None
    code: Optional[str] = None
    http_status: Optional[int] = None
    data: Optional[Any] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"Proxy[{self.path or '-'}] {self.message}"]
        if self.code is not None:
            parts.append(f"code={self.code!r}")
        if self.http_status is not None:
            parts.append(f"http={self.http_status}")
        return " ".join(parts)


@dataclass
class SubmissionError(BridgeError):
    """
    Raised when a transaction cannot be signed or the gateway rejects the broadcast.

    Fields:
      - message: human-readable description
      - sender: bech32 address of the signer, if known
      - nonce: account nonce that was attached, if it got that far
    """

    message: str
    sender: Optional[str] = None
    nonce: Optional[int] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        who = f" sender={self.sender}" if self.sender else ""
        nonce = f" nonce={self.nonce}" if self.nonce is not None else ""
        return f"SubmissionError{who}{nonce}: {self.message}"


@dataclass
class FinalityError(BridgeError):
    """
    Raised when a transaction finalizes as failed, or when the status query
    returns something other than a well-formed successful envelope.
    """

    message: str
    tx_hash: Optional[str] = None
    status: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.tx_hash}" if self.tx_hash else ""
        status = f" status={self.status}" if self.status is not None else ""
        return f"FinalityError{suffix}{status}: {self.message}"


@dataclass
class FinalityTimeout(FinalityError):
    """Raised when a transaction is still pending once the watch deadline passes."""

    timeout_s: Optional[float] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"FinalityTimeout tx={self.tx_hash} timeout_s={self.timeout_s}: {self.message}"


@dataclass
class ExtractionError(BridgeError):
    """
    Raised when none of the contract results of a finalized transaction carry
    an `@6f6b@<hex>` event identifier.
    """

    message: str
    records: Sequence[Any] = ()
    tx_hash: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx={self.tx_hash}" if self.tx_hash else ""
        return f"ExtractionError{suffix}: {self.message} (records={list(self.records)!r})"


@dataclass
class NotificationError(BridgeError):
    """
    Raised when the relay could not be told about an event.

    The on-chain transfer has completed at this point; the event id is kept on
    the error so the caller can reconcile.
    """

    message: str
    event_id: Optional[int] = None
    http_status: Optional[int] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        http = f" http={self.http_status}" if self.http_status is not None else ""
        return f"NotificationError id={self.event_id}{http}: {self.message}"
