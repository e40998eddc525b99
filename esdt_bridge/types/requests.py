"""
Caller-facing parameter types for bridge operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Tuple, Union

EsdtRole = Literal["ESDTRoleNFTCreate", "ESDTRoleNFTBurn", "ESDTRoleNFTAddQuantity"]

ESDT_ROLES: Tuple[str, ...] = ("ESDTRoleNFTCreate", "ESDTRoleNFTBurn", "ESDTRoleNFTAddQuantity")


@dataclass(frozen=True)
class NftInfo:
    """Locates one NFT: its token identifier and nonce."""

    token: str
    nonce: int


@dataclass(frozen=True)
class NftIssueArgs:
    """
    Arguments for `ESDTNFTCreate`.

    quantity defaults to 1 and royalties to 0; hash and attrs are sent as
    empty arguments when unset.
    """

    identifier: str
    name: str
    uris: Tuple[str, ...] = ()
    quantity: Optional[int] = None
    royalties: Optional[int] = None
    hash: Optional[str] = None
    attrs: Optional[str] = None


class TransferKind(str, Enum):
    LOCK_NATIVE = "lock_native"
    UNLOCK_WRAPPED = "unlock_wrapped"
    LOCK_NFT = "lock_nft"
    UNLOCK_NFT = "unlock_nft"


@dataclass(frozen=True)
class TransferRequest:
    """
    One bridge transfer as requested by the caller.

    - LOCK_NATIVE:    chain_nonce, to, amount
    - UNLOCK_WRAPPED: chain_nonce, to, amount
    - LOCK_NFT:       chain_nonce, to, nft
    - UNLOCK_NFT:     to, wrapped_nonce
    """

    kind: TransferKind
    to: str
    chain_nonce: Optional[int] = None
    amount: Optional[Union[int, str]] = None
    nft: Optional[NftInfo] = None
    wrapped_nonce: Optional[int] = None

    def require(self, name: str):
        value = getattr(self, name)
        if value is None:
            raise ValueError(f"{self.kind.value} transfer requires {name!r}")
        return value


__all__ = [
    "EsdtRole",
    "ESDT_ROLES",
    "NftInfo",
    "NftIssueArgs",
    "TransferKind",
    "TransferRequest",
]
