"""
esdt_bridge.tx
==============

Transaction helpers: build, send, watch.

Submodules
----------
- payload: `function@arg@arg` contract-call encoding.
- build  : Pure builders for every bridge operation (`TxBuilder`).
- send   : Nonce sync, signing and broadcast (`TransactionSubmitter`, `SignerLocks`).
- watch  : Poll the gateway until a transaction is final (`FinalityWatcher`).

Typical usage
-------------
    from esdt_bridge.tx import TxBuilder, TransactionSubmitter, FinalityWatcher

    tx = builder.transfer(chain_nonce=2, to="0xabc...", value=10**18)
    handle = await submitter.submit(signer, tx)
    result = await watcher.wait_success(handle.tx_hash)
"""

from __future__ import annotations

from .build import ESDT_ISSUE_ADDR, ESDT_ISSUE_COST, TxBuilder
from .payload import ContractCall
from .send import SignerLocks, TransactionSubmitter
from .watch import FinalityWatcher

__all__ = [
    "ContractCall",
    "TxBuilder",
    "ESDT_ISSUE_ADDR",
    "ESDT_ISSUE_COST",
    "SignerLocks",
    "TransactionSubmitter",
    "FinalityWatcher",
]
