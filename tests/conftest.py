from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from esdt_bridge.config import BridgeSettings
from esdt_bridge.types.core import NetworkConfig
from esdt_bridge.utils.bech32 import encode_address

NODE = "http://gateway.test"
RELAY = "http://relay.test"

ALICE = encode_address(bytes([1]) * 32)
MINTER = encode_address(bytes([2]) * 32)
BOB = encode_address(bytes([3]) * 32)

ESDT = "WBRG-abcdef"
ESDT_NFT = "WNFT-123456"


def envelope(data: Optional[Dict[str, Any]], *, code: str = "successful", error: str = "") -> Dict[str, Any]:
    """Gateway response body."""
    return {"data": data, "error": error, "code": code}


def tx_status(status: str, results: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    tx: Dict[str, Any] = {"status": status}
    if results is not None:
        tx["smartContractResults"] = results
    return envelope({"transaction": tx})


class FakeSigner:
    """Deterministic signer that records every message it signs."""

    def __init__(self, address: str = ALICE, signature: bytes = b"\x5a" * 64) -> None:
        self._address = address
        self._signature = signature
        self.messages: List[bytes] = []

    @property
    def address(self) -> str:
        return self._address

    def sign(self, message: bytes) -> bytes:
        self.messages.append(message)
        return self._signature


class FakeTime:
    """Virtual clock; `sleep` records the delay and advances `now` instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


@pytest.fixture()
def settings() -> BridgeSettings:
    return BridgeSettings(
        _env_file=None,
        node_uri=NODE,
        middleware_uri=RELAY,
        minter_address=MINTER,
        esdt=ESDT,
        esdt_nft=ESDT_NFT,
        wrapped_tokens={3: "WETH-aa11bb"},
    )


@pytest.fixture()
def network() -> NetworkConfig:
    return NetworkConfig(chain_id="D", min_gas_price=1_000_000_000, tx_version=1)


@pytest.fixture()
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()
