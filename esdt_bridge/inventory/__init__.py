"""
Holdings queries for bridge accounts.
"""

from __future__ import annotations

from .lister import InventoryLister, in_collection, locked_nft_key

__all__ = ["InventoryLister", "in_collection", "locked_nft_key"]
