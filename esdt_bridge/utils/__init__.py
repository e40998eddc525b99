"""
Small pure helpers shared by the builders and the inventory lister.
"""

from __future__ import annotations

from .bech32 import Bech32Error, decode_address, encode_address, is_valid_address

__all__ = ["Bech32Error", "decode_address", "encode_address", "is_valid_address"]
