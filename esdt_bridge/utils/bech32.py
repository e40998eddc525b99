"""
Ledger addresses: classic Bech32 (BIP-173) over 32-byte public keys.

Accounts and contracts are rendered as `erd1...`. Contract-call arguments
carry the raw public key instead, so the payload builders decode addresses
here before hex-encoding them.

>>> pk = bytes(32)
>>> decode_address(encode_address(pk)) == pk
True

Only the classic Bech32 checksum constant is accepted; Bech32m strings fail
the checksum.
"""

from __future__ import annotations

import string
from typing import Iterable, List, Sequence, Tuple

__all__ = [
    "Bech32Error",
    "DEFAULT_HRP",
    "PUBKEY_LEN",
    "encode",
    "decode",
    "convertbits",
    "encode_address",
    "decode_address",
    "is_valid_address",
]

DEFAULT_HRP = "erd"
PUBKEY_LEN = 32
CHECKSUM_LEN = 6

ALPHABET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_ALPHABET_INDEX = {ch: idx for idx, ch in enumerate(ALPHABET)}
_HRP_CHARS = frozenset(string.ascii_lowercase + string.digits)
_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


class Bech32Error(ValueError):
    """Malformed Bech32 string or address."""


def _polymod(values: Iterable[int]) -> int:
    acc = 1
    for value in values:
        top = acc >> 25
        acc = ((acc & 0x1FFFFFF) << 5) ^ value
        for bit, gen in enumerate(_GENERATOR):
            if (top >> bit) & 1:
                acc ^= gen
    return acc


def _expand_hrp(hrp: str) -> List[int]:
    high = [ord(ch) >> 5 for ch in hrp]
    low = [ord(ch) & 31 for ch in hrp]
    return high + [0] + low


def _checksum(hrp: str, data: Sequence[int]) -> List[int]:
    pm = _polymod(_expand_hrp(hrp) + list(data) + [0] * CHECKSUM_LEN) ^ 1
    return [(pm >> (5 * (CHECKSUM_LEN - 1 - i))) & 31 for i in range(CHECKSUM_LEN)]


def _check_hrp(hrp: str) -> None:
    if not hrp or not set(hrp) <= _HRP_CHARS:
        raise Bech32Error(f"bad human-readable part: {hrp!r}")


def encode(hrp: str, data5: Iterable[int]) -> str:
    _check_hrp(hrp)
    groups = list(data5)
    if any(not 0 <= g < 32 for g in groups):
        raise Bech32Error("5-bit groups must lie in 0..31")
    return hrp + "1" + "".join(ALPHABET[g] for g in groups + _checksum(hrp, groups))


def decode(addr: str) -> Tuple[str, List[int]]:
    """Split a Bech32 string into its HRP and 5-bit data groups (checksum stripped)."""
    if not addr or any(not 33 <= ord(ch) <= 126 for ch in addr):
        raise Bech32Error("address contains non-printable characters")
    if addr != addr.lower() and addr != addr.upper():
        raise Bech32Error("mixed-case address")
    hrp, sep, payload = addr.lower().rpartition("1")
    if not sep:
        raise Bech32Error("no '1' separator in address")
    _check_hrp(hrp)
    if len(payload) < CHECKSUM_LEN:
        raise Bech32Error("data part shorter than the checksum")
    try:
        groups = [_ALPHABET_INDEX[ch] for ch in payload]
    except KeyError as exc:
        raise Bech32Error(f"character {exc.args[0]!r} is not in the Bech32 alphabet") from None
    if _polymod(_expand_hrp(hrp) + groups) != 1:
        raise Bech32Error("checksum mismatch")
    return hrp, groups[:-CHECKSUM_LEN]


def convertbits(data: Iterable[int], from_bits: int, to_bits: int, *, pad: bool = True) -> List[int]:
    """Regroup a bit stream, e.g. bytes (8) into Bech32 groups (5) and back."""
    out: List[int] = []
    buf = 0
    nbits = 0
    mask = (1 << to_bits) - 1
    for value in data:
        if value < 0 or value >= 1 << from_bits:
            raise Bech32Error(f"value {value} does not fit in {from_bits} bits")
        buf = (buf << from_bits) | value
        nbits += from_bits
        while nbits >= to_bits:
            nbits -= to_bits
            out.append((buf >> nbits) & mask)
        buf &= (1 << nbits) - 1
    if pad:
        if nbits:
            out.append((buf << (to_bits - nbits)) & mask)
    elif nbits >= from_bits or buf:
        raise Bech32Error("non-zero padding bits")
    return out


def encode_address(pubkey: bytes, hrp: str = DEFAULT_HRP) -> str:
    if len(pubkey) != PUBKEY_LEN:
        raise Bech32Error(f"public key must be {PUBKEY_LEN} bytes, got {len(pubkey)}")
    return encode(hrp, convertbits(pubkey, 8, 5))


def decode_address(addr: str, expected_hrp: str = DEFAULT_HRP) -> bytes:
    """`erd1...` to the 32-byte public key; checksum, HRP and length are all checked."""
    hrp, groups = decode(addr)
    if hrp != expected_hrp:
        raise Bech32Error(f"HRP mismatch: expected {expected_hrp!r}, got {hrp!r}")
    pubkey = bytes(convertbits(groups, 5, 8, pad=False))
    if len(pubkey) != PUBKEY_LEN:
        raise Bech32Error(f"address decodes to {len(pubkey)} bytes, expected {PUBKEY_LEN}")
    return pubkey


def is_valid_address(addr: str, expected_hrp: str = DEFAULT_HRP) -> bool:
    try:
        decode_address(addr, expected_hrp)
    except Bech32Error:
        return False
    return True
