"""
Ledger gateway transport.
"""

from __future__ import annotations

from .proxy import SUCCESS_CODE, ProxyClient, ProxyConfig

__all__ = ["ProxyClient", "ProxyConfig", "SUCCESS_CODE"]
