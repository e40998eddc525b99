"""
Bridge operations for the ESDT ledger.

`BridgeHelper` composes the builders, submitter, finality watcher, event
extractor and relay notifier into one call per bridge operation:

    build (pure) → submit → wait for finality → [extract id → notify relay]

Transfer kinds (lock native, unlock wrapped, lock NFT, unlock NFT) return
`(TransactionHandle, event_id)`. Administrative kinds (mint, issue, roles)
have no paired foreign-chain action and return the handle alone.

Every operation has an `unsigned_*` twin that only builds the transaction,
for wallets that sign and broadcast themselves. Once such a transaction is on
chain, `handle_txn_event(tx_hash)` runs the finality/extract/notify tail.

Example
-------
    settings = BridgeSettings()
    async with await bridge_helper_factory(settings) as bridge:
        handle, event_id = await bridge.transfer_native_to_foreign(
            signer, chain_nonce=2, to="0xabc...", value=10**18
        )
"""

from __future__ import annotations

import asyncio
import time
from typing import Dict, Optional, Sequence, Tuple

import httpx

from .config import BridgeSettings, get_settings
from .events.extract import extract_event_id
from .events.notify import EventNotifier, RelayConfig
from .inventory.lister import InventoryLister
from .logging import get_logger, op_context
from .rpc.proxy import ProxyClient, ProxyConfig
from .tx.build import EasyBalance, TxBuilder
from .tx.send import SignerLocks, TransactionSubmitter
from .tx.watch import ClockFn, FinalityWatcher, SleepFn
from .types.core import Address, EventId, NetworkConfig, Signer, Transaction, TransactionHandle
from .types.holdings import Holding, NftHolding
from .types.requests import EsdtRole, NftInfo, NftIssueArgs, TransferKind, TransferRequest
from .types.results import FinalityResult

log = get_logger(__name__)

TransferResult = Tuple[TransactionHandle, EventId]


class BridgeHelper:
    def __init__(
        self,
        settings: BridgeSettings,
        network: NetworkConfig,
        *,
        proxy: ProxyClient,
        notifier: EventNotifier,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
        signer_locks: Optional[SignerLocks] = None,
    ) -> None:
        self.settings = settings
        self.network = network
        self.builder = TxBuilder.from_settings(settings, network)
        self._proxy = proxy
        self._notifier = notifier
        self._submitter = TransactionSubmitter(proxy)
        self._watcher = FinalityWatcher(proxy, settings.finality, sleep=sleep, clock=clock)
        self._inventory = InventoryLister(proxy, settings.minter_address, settings.wrapped_collection)
        self._locks = signer_locks

    # ---------- lifecycle ----------

    async def aclose(self) -> None:
        await self._notifier.close()
        await self._proxy.close()

    async def __aenter__(self) -> "BridgeHelper":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ---------- pipeline ----------

    async def _send(self, signer: Signer, tx: Transaction) -> TransactionHandle:
        if self._locks is None:
            return await self._submitter.submit(signer, tx)
        async with self._locks.hold(signer.address):
            return await self._submitter.submit(signer, tx)

    async def _send_and_wait(self, signer: Signer, tx: Transaction) -> TransactionHandle:
        handle = await self._send(signer, tx)
        await self._watcher.wait_success(handle.tx_hash)
        return handle

    async def _transfer(self, signer: Signer, tx: Transaction) -> TransferResult:
        handle = await self._send(signer, tx)
        event_id = await self.handle_txn_event(handle.tx_hash)
        return handle, event_id

    async def raw_txn_result(self, tx_hash: str) -> FinalityResult:
        """
        Terminal result of an already broadcast transaction, raising
        FinalityError if it failed. Polls at once, without the settle delay.
        """
        return await self._watcher.wait_success(tx_hash, settle=False)

    async def handle_txn_event(self, tx_hash: str) -> EventId:
        """
        Wait for `tx_hash` to succeed, pull its event id and notify the relay.

        Must be called exactly once per transfer transaction; the relay is not
        idempotent.
        """
        result = await self._watcher.wait_success(tx_hash)
        event_id = extract_event_id(result.records, tx_hash=tx_hash)
        log.info("event_extracted", tx_hash=tx_hash, event_id=event_id)
        await self._notifier.notify(event_id)
        return event_id

    # ---------- unsigned builders ----------

    def unsigned_transfer_txn(self, chain_nonce: int, to: str, value: EasyBalance) -> Transaction:
        return self.builder.transfer(chain_nonce, to, value)

    def unsigned_unfreeze_txn(self, chain_nonce: int, address: Address, to: str, value: EasyBalance) -> Transaction:
        return self.builder.unfreeze(chain_nonce, address, to, value)

    def unsigned_transfer_nft_txn(self, chain_nonce: int, address: Address, to: str, info: NftInfo) -> Transaction:
        return self.builder.transfer_nft(chain_nonce, address, to, info)

    def unsigned_unfreeze_nft_txn(self, address: Address, to: str, wrapped_nonce: int) -> Transaction:
        return self.builder.unfreeze_nft(address, to, wrapped_nonce)

    def unsigned_mint_nft_txn(self, owner: Address, args: NftIssueArgs) -> Transaction:
        return self.builder.mint_nft(owner, args)

    def unsigned_issue_esdt_nft(
        self,
        name: str,
        ticker: str,
        can_freeze: Optional[bool] = None,
        can_wipe: Optional[bool] = None,
        can_transfer_nft_create_role: Optional[bool] = None,
    ) -> Transaction:
        return self.builder.issue_esdt_nft(name, ticker, can_freeze, can_wipe, can_transfer_nft_create_role)

    def unsigned_set_esdt_roles(self, token: str, target: Address, roles: Sequence[EsdtRole]) -> Transaction:
        return self.builder.set_esdt_roles(token, target, roles)

    # ---------- transfer operations ----------

    async def transfer_native_to_foreign(
        self, sender: Signer, chain_nonce: int, to: str, value: EasyBalance
    ) -> TransferResult:
        with op_context(op=TransferKind.LOCK_NATIVE.value, sender=sender.address):
            return await self._transfer(sender, self.unsigned_transfer_txn(chain_nonce, to, value))

    async def unfreeze_wrapped(
        self, sender: Signer, chain_nonce: int, to: str, value: EasyBalance
    ) -> TransferResult:
        with op_context(op=TransferKind.UNLOCK_WRAPPED.value, sender=sender.address):
            tx = self.unsigned_unfreeze_txn(chain_nonce, sender.address, to, value)
            return await self._transfer(sender, tx)

    async def transfer_nft_to_foreign(
        self, sender: Signer, chain_nonce: int, to: str, info: NftInfo
    ) -> TransferResult:
        with op_context(op=TransferKind.LOCK_NFT.value, sender=sender.address):
            tx = self.unsigned_transfer_nft_txn(chain_nonce, sender.address, to, info)
            return await self._transfer(sender, tx)

    async def unfreeze_wrapped_nft(self, sender: Signer, to: str, wrapped_nonce: int) -> TransferResult:
        with op_context(op=TransferKind.UNLOCK_NFT.value, sender=sender.address):
            tx = self.unsigned_unfreeze_nft_txn(sender.address, to, wrapped_nonce)
            return await self._transfer(sender, tx)

    async def execute(self, sender: Signer, request: TransferRequest) -> TransferResult:
        """Dispatch a `TransferRequest` to the matching transfer operation."""
        kind = request.kind
        if kind is TransferKind.LOCK_NATIVE:
            return await self.transfer_native_to_foreign(
                sender, request.require("chain_nonce"), request.to, request.require("amount")
            )
        if kind is TransferKind.UNLOCK_WRAPPED:
            return await self.unfreeze_wrapped(
                sender, request.require("chain_nonce"), request.to, request.require("amount")
            )
        if kind is TransferKind.LOCK_NFT:
            return await self.transfer_nft_to_foreign(
                sender, request.require("chain_nonce"), request.to, request.require("nft")
            )
        if kind is TransferKind.UNLOCK_NFT:
            return await self.unfreeze_wrapped_nft(sender, request.to, request.require("wrapped_nonce"))
        raise ValueError(f"unsupported transfer kind: {kind!r}")

    # ---------- administrative operations ----------

    async def issue_esdt_nft(
        self,
        sender: Signer,
        name: str,
        ticker: str,
        can_freeze: Optional[bool] = None,
        can_wipe: Optional[bool] = None,
        can_transfer_nft_create_role: Optional[bool] = None,
    ) -> TransactionHandle:
        with op_context(op="issue_esdt_nft", sender=sender.address):
            tx = self.unsigned_issue_esdt_nft(name, ticker, can_freeze, can_wipe, can_transfer_nft_create_role)
            return await self._send_and_wait(sender, tx)

    async def mint_nft(self, owner: Signer, args: NftIssueArgs) -> TransactionHandle:
        with op_context(op="mint_nft", sender=owner.address):
            return await self._send_and_wait(owner, self.unsigned_mint_nft_txn(owner.address, args))

    async def set_esdt_roles(
        self, manager: Signer, token: str, target: Address, roles: Sequence[EsdtRole]
    ) -> TransactionHandle:
        with op_context(op="set_esdt_roles", sender=manager.address):
            return await self._send_and_wait(manager, self.unsigned_set_esdt_roles(token, target, roles))

    # ---------- inventory ----------

    async def balance(self, address: Address) -> int:
        return await self._inventory.balance(address)

    async def balance_wrapped_batch(self, address: Address, chain_nonces: Sequence[int]) -> Dict[int, int]:
        return await self._inventory.balance_wrapped_batch(address, chain_nonces)

    async def list_esdt(self, owner: Address) -> Dict[str, Holding]:
        return await self._inventory.list_esdt(owner)

    async def list_nft(self, owner: Address) -> Dict[str, NftHolding]:
        return await self._inventory.list_nft(owner)

    async def get_locked_nft(self, info: NftInfo) -> Optional[NftHolding]:
        return await self._inventory.get_locked_nft(info)


async def bridge_helper_factory(
    settings: Optional[BridgeSettings] = None,
    *,
    proxy_transport: Optional[httpx.AsyncBaseTransport] = None,
    relay_transport: Optional[httpx.AsyncBaseTransport] = None,
    sleep: SleepFn = asyncio.sleep,
    clock: ClockFn = time.monotonic,
    signer_locks: Optional[SignerLocks] = None,
) -> BridgeHelper:
    """
    Open the gateway and relay clients, sync the network config and return a
    ready `BridgeHelper`. The helper owns both clients; close it with
    `aclose()` or `async with`.
    """
    settings = settings or get_settings()
    headers = settings.http_headers()
    proxy = ProxyClient(
        ProxyConfig(url=settings.node_uri, timeout_s=settings.request_timeout, headers=headers),
        transport=proxy_transport,
    )
    notifier = EventNotifier(
        RelayConfig(url=settings.middleware_uri, timeout_s=settings.request_timeout, headers=headers),
        transport=relay_transport,
    )
    await proxy.start()
    try:
        network = await proxy.get_network_config()
    except BaseException:
        await proxy.close()
        raise
    await notifier.start()
    log.info("bridge_ready", node=settings.node_uri, chain_id=network.chain_id, minter=settings.minter_address)
    return BridgeHelper(
        settings,
        network,
        proxy=proxy,
        notifier=notifier,
        sleep=sleep,
        clock=clock,
        signer_locks=signer_locks,
    )


__all__ = ["BridgeHelper", "bridge_helper_factory", "TransferResult"]
