"""
esdt_bridge.tx.send
===================

Sign and broadcast pre-built transactions.

`TransactionSubmitter.submit(signer, tx)`:
  1. fetch the signer's current account nonce from the gateway
  2. bind sender + nonce onto the transaction
  3. sign the canonical sign-bytes
  4. broadcast via `POST /transaction/send`

Every failure along the way raises `SubmissionError`; nothing is retried.

The nonce fetch and the broadcast are not atomic. Two concurrent submissions
from the same signer can read the same nonce and one of them will be rejected.
Callers that submit concurrently wrap each submission in the signer's lock
from `SignerLocks`.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from ..errors import ProxyError, SubmissionError
from ..logging import get_logger
from ..rpc.proxy import ProxyClient
from ..types.core import Signer, Transaction, TransactionHandle

log = get_logger(__name__)


class SignerLocks:
    """
    One `asyncio.Lock` per signer address with submissions in flight.

        async with locks.hold(signer.address):
            await submitter.submit(signer, tx)

    A lock is created when the first task asks for it and dropped when the
    last holder or waiter leaves, so the map only holds active signers.
    Only serializes submissions inside one event loop; other processes using
    the same account are not covered.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, address: str) -> AsyncIterator[None]:
        lock = self._locks.get(address)
        if lock is None:
            lock = self._locks[address] = asyncio.Lock()
        self._users[address] = self._users.get(address, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[address] -= 1
            if not self._users[address]:
                del self._users[address]
                del self._locks[address]

    def __len__(self) -> int:
        return len(self._locks)


class TransactionSubmitter:
    def __init__(self, proxy: ProxyClient) -> None:
        self._proxy = proxy

    async def sync_nonce(self, signer: Signer) -> int:
        try:
            return await self._proxy.get_nonce(signer.address)
        except ProxyError as exc:
            raise SubmissionError(f"could not sync account nonce: {exc}", sender=signer.address) from exc

    def sign(self, signer: Signer, tx: Transaction, nonce: int) -> Transaction:
        bound = tx.with_sender(signer.address, nonce)
        try:
            signature = signer.sign(bound.sign_bytes())
        except Exception as exc:
            raise SubmissionError(f"signing failed: {exc}", sender=signer.address, nonce=nonce) from exc
        if not signature:
            raise SubmissionError("signer returned an empty signature", sender=signer.address, nonce=nonce)
        return bound.with_signature(signature)

    async def submit(self, signer: Signer, tx: Transaction) -> TransactionHandle:
        nonce = await self.sync_nonce(signer)
        signed = self.sign(signer, tx, nonce)
        try:
            tx_hash = await self._proxy.send_transaction(signed.to_send_dict())
        except ProxyError as exc:
            raise SubmissionError(f"broadcast rejected: {exc}", sender=signer.address, nonce=nonce) from exc

        log.info("tx_broadcast", tx_hash=tx_hash, sender=signer.address, nonce=nonce, receiver=tx.receiver)
        return TransactionHandle(tx_hash=tx_hash, transaction=signed)


__all__ = ["SignerLocks", "TransactionSubmitter"]
