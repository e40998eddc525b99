"""
Version helpers for esdt-bridge.
We keep a static __version__ (PEP 440) and a small helper used to build the
default User-Agent for gateway and relay requests.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"


def user_agent() -> str:
    """Default User-Agent, e.g. 'esdt-bridge-py/0.1.0'."""
    return f"esdt-bridge-py/{__version__}"


__all__ = ["__version__", "user_agent"]
