"""
esdt_bridge.tx.payload
======================

Contract-call payloads in the ledger's `function@arg@arg...` convention.

Every argument is hex encoded with its top-level encoding:
- unsigned integers: minimal big-endian bytes, zero is the empty argument
- bytes / strings / token identifiers: raw bytes
- addresses: the 32-byte public key behind the bech32 string

`ContractCall` is immutable; each `add_*` returns a new call so a partially
built payload can be shared between builders.

Example
-------
    data = (
        ContractCall("freezeSend")
        .add_u64(2)
        .add_str("0xabc...")
        .build()
    )
    # b"freezeSend@02@30786162632e2e2e"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from ..utils.bech32 import decode_address

SEPARATOR = "@"


def encode_uint(value: Union[int, str]) -> str:
    n = int(value)
    if n < 0:
        raise ValueError(f"unsigned argument must be non-negative, got {n}")
    if n == 0:
        return ""
    h = format(n, "x")
    return h if len(h) % 2 == 0 else "0" + h


def encode_bytes(value: Union[bytes, bytearray, str], encoding: str = "utf-8") -> str:
    if isinstance(value, str):
        value = value.encode(encoding)
    return bytes(value).hex()


def encode_address(address: str) -> str:
    return decode_address(address).hex()


@dataclass(frozen=True)
class ContractCall:
    function: str
    args: Tuple[str, ...] = ()

    def _with(self, arg: str) -> "ContractCall":
        return ContractCall(self.function, self.args + (arg,))

    def add_u64(self, value: Union[int, str]) -> "ContractCall":
        if int(value) >= 1 << 64:
            raise ValueError(f"u64 argument out of range: {value}")
        return self._with(encode_uint(value))

    def add_biguint(self, value: Union[int, str]) -> "ContractCall":
        return self._with(encode_uint(value))

    def add_str(self, value: str, encoding: str = "utf-8") -> "ContractCall":
        return self._with(encode_bytes(value, encoding))

    def add_token(self, identifier: str) -> "ContractCall":
        return self._with(encode_bytes(identifier))

    def add_address(self, address: str) -> "ContractCall":
        return self._with(encode_address(address))

    def build(self) -> bytes:
        return SEPARATOR.join((self.function,) + self.args).encode("ascii")


__all__ = ["ContractCall", "encode_uint", "encode_bytes", "encode_address", "SEPARATOR"]
