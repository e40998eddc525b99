from __future__ import annotations

"""
Core ledger types for the bridge adapter.

- `Transaction`: immutable transaction with the canonical sign-bytes and the
  gateway send dict (`to_send_dict`).
- `TransactionHandle`: audit record of a broadcast transaction.
- `NetworkConfig`: chain id / min gas price / tx version synced from the gateway.
- `Signer`: the signing capability consumed by the submitter.

Nothing here performs network I/O.
"""

import base64
import json
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Protocol, runtime_checkable

# --- Common aliases ----------------------------------------------------------

Address = str  # bech32 (erd1...)
TxHash = str  # lowercase hex, no prefix
EventId = int


@runtime_checkable
class Signer(Protocol):
    """
    Minimal signing capability. Key management lives outside this package.
    """

    @property
    def address(self) -> Address: ...

    def sign(self, message: bytes) -> bytes: ...


@dataclass(frozen=True)
class NetworkConfig:
    chain_id: str
    min_gas_price: int = 1_000_000_000
    tx_version: int = 1

    @staticmethod
    def from_gateway(config: Dict[str, Any]) -> "NetworkConfig":
        return NetworkConfig(
            chain_id=str(config["erd_chain_id"]),
            min_gas_price=int(config.get("erd_min_gas_price", 1_000_000_000)),
            tx_version=int(config.get("erd_min_transaction_version", 1)),
        )


@dataclass(frozen=True)
class Transaction:
    receiver: Address
    gas_limit: int
    data: bytes
    chain_id: str
    gas_price: int
    version: int = 1
    value: int = 0
    nonce: int = 0
    sender: Optional[Address] = None
    signature: Optional[bytes] = None

    @property
    def is_signed(self) -> bool:
        return self.signature is not None

    def with_sender(self, sender: Address, nonce: int) -> "Transaction":
        """Copy bound to `sender` at account nonce `nonce`; drops any old signature."""
        return replace(self, sender=sender, nonce=int(nonce), signature=None)

    def with_signature(self, signature: bytes) -> "Transaction":
        return replace(self, signature=bytes(signature))

    def _fields(self) -> Dict[str, Any]:
        # Field order is part of the signed message.
        d: Dict[str, Any] = {
            "nonce": self.nonce,
            "value": str(self.value),
            "receiver": self.receiver,
            "sender": self.sender or "",
            "gasPrice": self.gas_price,
            "gasLimit": self.gas_limit,
        }
        if self.data:
            d["data"] = base64.b64encode(self.data).decode("ascii")
        d["chainID"] = self.chain_id
        d["version"] = self.version
        return d

    def sign_bytes(self) -> bytes:
        """Canonical serialization the signer signs over."""
        if not self.sender:
            raise ValueError("transaction has no sender; bind it with with_sender() first")
        return json.dumps(self._fields(), separators=(",", ":")).encode("utf-8")

    def to_send_dict(self) -> Dict[str, Any]:
        """Body for `POST /transaction/send`."""
        if self.signature is None:
            raise ValueError("transaction is not signed")
        d = self._fields()
        d["signature"] = self.signature.hex()
        return d


@dataclass(frozen=True)
class TransactionHandle:
    """A broadcast transaction: its hash and the signed form that was sent."""

    tx_hash: TxHash
    transaction: Transaction

    @property
    def raw(self) -> Dict[str, Any]:
        return self.transaction.to_send_dict()

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.tx_hash


__all__ = [
    "Address",
    "TxHash",
    "EventId",
    "Signer",
    "NetworkConfig",
    "Transaction",
    "TransactionHandle",
]
