"""
Typed views of ledger objects and bridge requests.
"""

from __future__ import annotations

from .core import (Address, EventId, NetworkConfig, Signer, Transaction,
                   TransactionHandle, TxHash)
from .holdings import FungibleHolding, Holding, NftHolding, decode_holding, is_nft
from .requests import (ESDT_ROLES, EsdtRole, NftInfo, NftIssueArgs,
                       TransferKind, TransferRequest)
from .results import (ContractResultRecord, FinalityResult, FinalityStatus,
                      parse_records)

__all__ = [
    "Address",
    "EventId",
    "TxHash",
    "NetworkConfig",
    "Signer",
    "Transaction",
    "TransactionHandle",
    "FungibleHolding",
    "NftHolding",
    "Holding",
    "decode_holding",
    "is_nft",
    "ESDT_ROLES",
    "EsdtRole",
    "NftInfo",
    "NftIssueArgs",
    "TransferKind",
    "TransferRequest",
    "ContractResultRecord",
    "FinalityResult",
    "FinalityStatus",
    "parse_records",
]
