"""
ESDT bridge adapter
Convenience exports for the most common bridge APIs.
"""

from .version import __version__  # noqa: F401

# Config & errors
from .config import BridgeSettings, FinalityConfig, GasConfig, get_settings  # noqa: F401
from .errors import (  # noqa: F401
    BridgeError,
    ExtractionError,
    FinalityError,
    FinalityTimeout,
    NotificationError,
    ProxyError,
    SubmissionError,
)

# Logging
from .logging import get_logger, setup_logging  # noqa: F401

# Facade
from .bridge import BridgeHelper, bridge_helper_factory  # noqa: F401

# Components
from .rpc.proxy import ProxyClient, ProxyConfig  # noqa: F401
from .tx.build import TxBuilder  # noqa: F401
from .tx.send import SignerLocks, TransactionSubmitter  # noqa: F401
from .tx.watch import FinalityWatcher  # noqa: F401
from .events.extract import extract_event_id  # noqa: F401
from .events.notify import EventNotifier, RelayConfig  # noqa: F401
from .inventory.lister import InventoryLister  # noqa: F401

# Types
from .types import (  # noqa: F401
    FinalityResult,
    FinalityStatus,
    FungibleHolding,
    NftHolding,
    NftInfo,
    NftIssueArgs,
    Signer,
    Transaction,
    TransactionHandle,
    TransferKind,
    TransferRequest,
)

# Addresses
from .utils.bech32 import decode_address, encode_address  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "BridgeSettings", "FinalityConfig", "GasConfig", "get_settings",
    "BridgeError", "ProxyError", "SubmissionError", "FinalityError",
    "FinalityTimeout", "ExtractionError", "NotificationError",
    "setup_logging", "get_logger",
    # Facade
    "BridgeHelper", "bridge_helper_factory",
    # Components
    "ProxyClient", "ProxyConfig",
    "TxBuilder", "TransactionSubmitter", "SignerLocks", "FinalityWatcher",
    "extract_event_id", "EventNotifier", "RelayConfig", "InventoryLister",
    # Types
    "FinalityResult", "FinalityStatus", "FungibleHolding", "NftHolding",
    "NftInfo", "NftIssueArgs", "Signer", "Transaction", "TransactionHandle",
    "TransferKind", "TransferRequest",
    # Address
    "encode_address", "decode_address",
]
