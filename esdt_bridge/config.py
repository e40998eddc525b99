from __future__ import annotations

"""
Configuration loader for the bridge adapter.

- Reads environment variables (optionally from `.env`) via pydantic-settings.
- Provides typed sub-configs for finality polling and gas limits.
- Exposes a cached `get_settings()` accessor.

Environment variables (high-level):
    BRIDGE_NODE_URI               (str)                   Ledger REST gateway
    BRIDGE_MINTER_ADDRESS         (bech32, no default)    Escrow/minter contract
    BRIDGE_MIDDLEWARE_URI         (str)                   Relay (event middleware) REST API
    BRIDGE_ESDT                   (str, no default)       Wrapped fungible ESDT collection
    BRIDGE_ESDT_NFT               (str, no default)       Wrapped NFT collection
    BRIDGE_REQUEST_TIMEOUT        (float, default 10)     HTTP timeout in seconds

Wrapped tokens:
    BRIDGE_WRAPPED_TOKENS         (json mapping|csv)      {"2": "WBSC-1a2b3c"} or "2=WBSC-1a2b3c,3=WETH-..."
                                                          Chains not listed use BRIDGE_ESDT.

Finality (nested, `__` delimiter):
    BRIDGE_FINALITY__SETTLE_DELAY_S       (float, default 3)
    BRIDGE_FINALITY__POLL_INTERVAL_S      (float, default 5)
    BRIDGE_FINALITY__MAX_POLL_INTERVAL_S  (float, default 5)
    BRIDGE_FINALITY__BACKOFF              (float, default 1.0)
    BRIDGE_FINALITY__TIMEOUT_S            (float|"none", default 600)

Gas (nested):
    BRIDGE_GAS__TRANSFER / BRIDGE_GAS__NFT / BRIDGE_GAS__MINT / BRIDGE_GAS__ISSUE / BRIDGE_GAS__ROLES
"""

import json
from functools import lru_cache
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .utils.bech32 import decode_address
from .version import user_agent

# ----------------------------- Helpers & Models ------------------------------ #


def _ensure_scheme(url: str, allowed: tuple[str, ...] = ("http", "https")) -> str:
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url.rstrip("/")


def _parse_wrapped_tokens(val: Any) -> Dict[int, str]:
    """
    Accepts a dict, a JSON object string or a CSV of `chain=token` pairs.
    Keys are coerced to int chain nonces.
    """
    if val is None:
        return {}
    if isinstance(val, dict):
        return {int(k): str(v) for k, v in val.items()}
    s = str(val).strip()
    if not s:
        return {}
    if s.startswith("{"):
        try:
            data = json.loads(s)
        except json.JSONDecodeError as e:
            raise ValueError("BRIDGE_WRAPPED_TOKENS must be a JSON object or csv of chain=token") from e
        return {int(k): str(v) for k, v in data.items()}
    out: Dict[int, str] = {}
    for pair in s.split(","):
        if not pair.strip():
            continue
        chain, _, token = pair.partition("=")
        if not token:
            raise ValueError(f"invalid wrapped token pair: {pair!r}")
        out[int(chain.strip())] = token.strip()
    return out


class FinalityConfig(BaseModel):
    """Polling behaviour of the finality watcher."""

    settle_delay_s: float = Field(3.0, ge=0, description="Wait before the first status poll.")
    poll_interval_s: float = Field(5.0, gt=0, description="Delay between polls while pending.")
    max_poll_interval_s: float = Field(5.0, gt=0, description="Upper bound when backoff > 1.")
    backoff: float = Field(1.0, ge=1.0, description="Multiplier applied to the interval after each pending poll.")
    timeout_s: Optional[float] = Field(
        600.0, gt=0, description="Deadline for a transaction to leave the pending state; None waits forever."
    )

    @field_validator("timeout_s", mode="before")
    @classmethod
    def _none_means_unbounded(cls, v):
        if isinstance(v, str) and v.strip().lower() in ("", "none", "null", "off"):
            return None
        return v


class GasConfig(BaseModel):
    """Fixed gas limits per call family."""

    transfer: int = Field(50_000_000, gt=0)
    nft: int = Field(70_000_000, gt=0)
    mint: int = Field(70_000_000, gt=0)
    issue: int = Field(60_000_000, gt=0)
    roles: int = Field(70_000_000, gt=0)


# --------------------------------- Settings ---------------------------------- #


class BridgeSettings(BaseSettings):
    # Endpoints
    node_uri: str = Field("http://127.0.0.1:7950", description="Ledger REST gateway")
    middleware_uri: str = Field("http://127.0.0.1:8000", description="Relay REST API")
    request_timeout: float = Field(10.0, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field(default_factory=user_agent)

    # Bridge contracts & tokens
    minter_address: str = Field(..., description="bech32 address of the minter contract")
    esdt: str = Field(..., min_length=1, description="Wrapped fungible ESDT collection identifier")
    esdt_nft: str = Field(..., min_length=1, description="Wrapped NFT collection identifier")
    wrapped_tokens: Annotated[Dict[int, str], NoDecode] = Field(
        default_factory=dict, description="Per-chain override of the wrapped collection"
    )

    # Sub-configs
    finality: FinalityConfig = Field(default_factory=FinalityConfig)
    gas: GasConfig = Field(default_factory=GasConfig)

    model_config = SettingsConfigDict(
        env_prefix="BRIDGE_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("node_uri", "middleware_uri", mode="after")
    @classmethod
    def _check_url(cls, v: str) -> str:
        return _ensure_scheme(v)

    @field_validator("minter_address", mode="after")
    @classmethod
    def _check_minter(cls, v: str) -> str:
        decode_address(v)
        return v

    @field_validator("wrapped_tokens", mode="before")
    @classmethod
    def _coerce_wrapped(cls, v):
        return _parse_wrapped_tokens(v)

    def wrapped_collection(self, chain_nonce: int) -> str:
        """Collection that holds wrapped balances for `chain_nonce`."""
        return self.wrapped_tokens.get(int(chain_nonce), self.esdt)

    def with_overrides(self, **overrides: Any) -> "BridgeSettings":
        """
        Copy with keyword overrides; unknown keys are ignored.
        Validation runs again on the merged data.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if k in data})
        return type(self).model_validate(data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }


@lru_cache(maxsize=1)
def get_settings() -> BridgeSettings:
    """Process-wide settings loaded once from the environment."""
    return BridgeSettings()


__all__ = ["BridgeSettings", "FinalityConfig", "GasConfig", "get_settings"]
