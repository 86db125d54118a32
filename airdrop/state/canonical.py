"""
Deterministic canonical encoding primitives.

Every hash the claim engine computes is over bytes produced here, so the
helpers are strict: fixed widths, no whitespace, no implicit coercions.
"""

from __future__ import annotations

import re
from typing import Any, Union

from eth_utils import is_hex_address, keccak, to_checksum_address


UINT256_MAX = 2**256 - 1
HASH_NBYTES = 32
ADDRESS_NBYTES = 20

_HEX_CHARS_RE = re.compile(r"^[0-9a-fA-F]+$")

Address = str  # EIP-55 checksum address (0x + 40 hex chars)
Hash32 = bytes  # 32-byte Keccak-256 digest
AddressLike = Union[str, bytes]
HashLike = Union[str, bytes]


def keccak256(data: bytes) -> bytes:
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError("keccak256 input must be bytes")
    return keccak(bytes(data))


def is_hex_digits(body: str) -> bool:
    """True iff `body` is one or more hex digits, with no prefix, sign, underscores or whitespace."""
    return isinstance(body, str) and _HEX_CHARS_RE.fullmatch(body) is not None


def hex_to_bytes_fixed(hex_str: str, *, nbytes: int, name: str) -> bytes:
    if not isinstance(hex_str, str):
        raise TypeError(f"{name} must be a str")
    if not isinstance(nbytes, int) or isinstance(nbytes, bool) or nbytes <= 0:
        raise ValueError("nbytes must be a positive int")
    expected_len = 2 + 2 * nbytes
    if not hex_str.startswith(("0x", "0X")) or len(hex_str) != expected_len:
        raise ValueError(f"{name} must be a 0x-prefixed {nbytes}-byte hex string")
    body = hex_str[2:]
    # bytes.fromhex() tolerates whitespace; the regex does not.
    if not _HEX_CHARS_RE.fullmatch(body):
        raise ValueError(f"{name} must be valid hex")
    out = bytes.fromhex(body)
    if len(out) != nbytes:
        raise ValueError(f"{name} must decode to exactly {nbytes} bytes")
    return out


def to_hash32(value: HashLike, *, name: str = "hash") -> Hash32:
    """Coerce a 32-byte hash given as raw bytes or 0x-prefixed hex."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != HASH_NBYTES:
            raise ValueError(f"{name} must be exactly {HASH_NBYTES} bytes, got {len(value)}")
        return bytes(value)
    if isinstance(value, str):
        return hex_to_bytes_fixed(value, nbytes=HASH_NBYTES, name=name)
    raise TypeError(f"{name} must be bytes or a hex string, got {type(value).__name__}")


def to_address(value: AddressLike, *, name: str = "account") -> Address:
    """
    Canonicalize an address to its EIP-55 checksum form.

    Accepts 20 raw bytes or a 0x-prefixed hex string. Mixed-case strings must
    carry a valid checksum; all-lowercase and all-uppercase are accepted as-is.
    """
    if isinstance(value, (bytes, bytearray)):
        if len(value) != ADDRESS_NBYTES:
            raise ValueError(f"{name} must be exactly {ADDRESS_NBYTES} bytes")
        return to_checksum_address(bytes(value))
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a hex string or 20 bytes, got {type(value).__name__}")
    body = value[2:] if value.startswith(("0x", "0X")) else ""
    if len(body) != 2 * ADDRESS_NBYTES or not _HEX_CHARS_RE.fullmatch(body):
        raise ValueError(f"{name} must be a 0x-prefixed 20-byte hex address")
    if not is_hex_address(value):
        raise ValueError(f"{name} is not a valid address")
    has_lower = any(c.islower() for c in body)
    has_upper = any(c.isupper() for c in body)
    checksummed = to_checksum_address("0x" + body.lower())
    if has_lower and has_upper and checksummed[2:] != body:
        raise ValueError(f"{name} has an invalid EIP-55 checksum")
    return checksummed


def require_uint256(value: Any, *, name: str = "amount") -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > UINT256_MAX:
        raise ValueError(f"{name} must fit in uint256")
    return int(value)


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()
