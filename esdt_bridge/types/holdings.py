"""
Token holdings of an account, as reported by `GET /address/{addr}/esdt`.

The gateway returns one loosely-shaped dict per holding; NFT-only fields may
or may not be there. `decode_holding` settles the shape once into either a
`FungibleHolding` or an `NftHolding` so later code never inspects raw fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class FungibleHolding:
    token_identifier: str
    balance: str
    nonce: Optional[int] = None
    kind: Literal["fungible"] = "fungible"

    @property
    def amount(self) -> int:
        return int(self.balance)


@dataclass(frozen=True)
class NftHolding:
    token_identifier: str
    balance: str
    creator: str
    name: str = ""
    nonce: int = 0
    royalties: str = "0"
    uris: Tuple[str, ...] = ()
    attributes: Optional[str] = None
    kind: Literal["nft"] = "nft"

    @property
    def amount(self) -> int:
        return int(self.balance)


Holding = Union[FungibleHolding, NftHolding]


def is_nft(raw: Mapping[str, Any]) -> bool:
    """A holding is an NFT iff its balance is exactly "1" and a creator is set."""
    return raw.get("creator") is not None and str(raw.get("balance")) == "1"


def decode_holding(key: str, raw: Mapping[str, Any]) -> Holding:
    ident = str(raw.get("tokenIdentifier") or key)
    nonce = raw.get("nonce")
    if is_nft(raw):
        return NftHolding(
            token_identifier=ident,
            balance=str(raw["balance"]),
            creator=str(raw["creator"]),
            name=str(raw.get("name") or ""),
            nonce=int(nonce or 0),
            royalties=str(raw.get("royalties") or "0"),
            uris=tuple(raw.get("uris") or ()),
            attributes=raw.get("attributes"),
        )
    return FungibleHolding(
        token_identifier=ident,
        balance=str(raw.get("balance", "0")),
        nonce=int(nonce) if nonce is not None else None,
    )


__all__ = ["FungibleHolding", "NftHolding", "Holding", "is_nft", "decode_holding"]
