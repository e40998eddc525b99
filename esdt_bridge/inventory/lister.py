"""
Account holdings: list, classify, and look up locked NFTs.

- `list_esdt(owner)`    : every holding, decoded once into Fungible/Nft variants
- `list_nft(owner)`     : only the NFT holdings
- `get_locked_nft(info)`: one NFT inside the minter's holdings
- `balance_wrapped_batch(address, chain_nonces)`: wrapped balance per foreign chain
- `balance(address)`    : native balance

Wrapped fungible tokens are SFTs: the collection is the wrapped ESDT of the
chain (see `BridgeSettings.wrapped_collection`) and the nonce is the foreign
chain nonce. A holding counts toward chain `c` only when both its nonce is `c`
and its identifier lies in the collection mapped to `c`.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional, Union

from ..logging import get_logger
from ..rpc.proxy import ProxyClient
from ..types.holdings import Holding, NftHolding, decode_holding
from ..types.requests import NftInfo

log = get_logger(__name__)

CollectionFor = Callable[[int], str]


def locked_nft_key(token: str, nonce: Union[int, str]) -> str:
    """
    Holdings-map key of NFT `nonce` in collection `token`.

    The "-0" + lowercase hex shape matches the key the ledger uses for the
    minter's locked NFTs, e.g. ("ABC-1a2b", 10) -> "ABC-1a2b-0a".
    """
    return f"{token}-0{int(nonce):x}"


def in_collection(token_identifier: str, collection: str) -> bool:
    return bool(collection) and token_identifier.startswith(collection + "-")


class InventoryLister:
    def __init__(self, proxy: ProxyClient, minter_address: str, collection_for: CollectionFor) -> None:
        self._proxy = proxy
        self._minter = minter_address
        self._collection_for = collection_for

    async def list_esdt(self, owner: str) -> Dict[str, Holding]:
        raw = await self._proxy.get_esdts(owner)
        return {key: decode_holding(key, info) for key, info in raw.items()}

    async def list_nft(self, owner: str) -> Dict[str, NftHolding]:
        holdings = await self.list_esdt(owner)
        return {key: h for key, h in holdings.items() if isinstance(h, NftHolding)}

    async def get_locked_nft(self, info: NftInfo) -> Optional[NftHolding]:
        nfts = await self.list_nft(self._minter)
        return nfts.get(locked_nft_key(info.token, info.nonce))

    async def balance(self, address: str) -> int:
        return await self._proxy.get_balance(address)

    async def balance_wrapped_batch(self, address: str, chain_nonces: Iterable[int]) -> Dict[int, int]:
        """
        Wrapped balance of `address` for each requested chain nonce.

        Every requested chain is present in the result; chains with no
        matching holding report 0.
        """
        res: Dict[int, int] = {int(c): 0 for c in chain_nonces}
        holdings = await self.list_esdt(address)
        for h in holdings.values():
            if h.nonce is None or h.nonce not in res:
                continue
            if in_collection(h.token_identifier, self._collection_for(h.nonce)):
                res[h.nonce] = h.amount
        log.debug("wrapped_balances", address=address, balances=res)
        return res


__all__ = ["InventoryLister", "locked_nft_key", "in_collection"]
