"""
secp256k1 signer recovery for claim authorizations.

Signatures travel as 65 bytes ``r || s || v`` (Ethereum wire order). Parsing
is strict and happens before any curve arithmetic:

- length must be 65 bytes,
- ``v`` must be 27 or 28,
- ``1 <= r < n``,
- ``1 <= s <= n/2`` (low-s only, so a signature has exactly one valid form).

Structural failures and "recovered some other address" are reported
separately so callers and tests can tell them apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Mapping, Optional, Tuple, Union

from py_ecc.secp256k1 import N as SECP256K1_N
from py_ecc.secp256k1 import ecdsa_raw_recover

from ..state.canonical import Address, AddressLike, is_hex_digits, keccak256, to_address
from .errors import SignatureParseError


SIGNATURE_NBYTES = 65
SECP256K1_HALF_N = SECP256K1_N // 2


@unique
class RecoveryError(Enum):
    INVALID_LENGTH = "invalid_length"
    INVALID_ENCODING = "invalid_encoding"
    INVALID_V = "invalid_v"
    INVALID_R = "invalid_r"
    INVALID_S = "invalid_s"
    UNRECOVERABLE = "unrecoverable"


@dataclass(frozen=True)
class Signature:
    """A parsed, range-checked ECDSA signature."""

    v: int
    r: int
    s: int

    def __post_init__(self) -> None:
        for name in ("v", "r", "s"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"signature {name} must be an int")
        if self.v not in (27, 28):
            raise SignatureParseError(RecoveryError.INVALID_V, f"signature v must be 27 or 28, got {self.v}")
        if not 1 <= self.r < SECP256K1_N:
            raise SignatureParseError(RecoveryError.INVALID_R, "signature r out of range")
        if not 1 <= self.s <= SECP256K1_HALF_N:
            raise SignatureParseError(RecoveryError.INVALID_S, "signature s out of range (high-s is rejected)")

    @property
    def recovery_id(self) -> int:
        return self.v - 27

    @classmethod
    def from_bytes(cls, data: bytes) -> "Signature":
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("signature must be bytes")
        if len(data) != SIGNATURE_NBYTES:
            raise SignatureParseError(
                RecoveryError.INVALID_LENGTH,
                f"signature must be {SIGNATURE_NBYTES} bytes, got {len(data)}",
            )
        r = int.from_bytes(data[0:32], "big")
        s = int.from_bytes(data[32:64], "big")
        return cls(v=data[64], r=r, s=s)

    @classmethod
    def from_hex(cls, hex_str: str) -> "Signature":
        if not isinstance(hex_str, str):
            raise TypeError("signature must be a hex string")
        body = hex_str[2:] if hex_str.startswith(("0x", "0X")) else hex_str
        if len(body) != 2 * SIGNATURE_NBYTES:
            raise SignatureParseError(
                RecoveryError.INVALID_LENGTH,
                f"signature must be {SIGNATURE_NBYTES} bytes (hex length {2 * SIGNATURE_NBYTES})",
            )
        if not is_hex_digits(body):
            raise SignatureParseError(RecoveryError.INVALID_ENCODING, "signature must be valid hex")
        return cls.from_bytes(bytes.fromhex(body))

    @classmethod
    def from_parts(cls, parts: Mapping[str, Any]) -> "Signature":
        """Build from a ``{"v", "r", "s"}`` mapping; r and s may be ints or 32-byte hex."""
        try:
            v, r, s = parts["v"], parts["r"], parts["s"]
        except KeyError as exc:
            raise SignatureParseError(RecoveryError.INVALID_ENCODING, f"signature missing field {exc}") from exc
        return cls(v=_scalar(v, name="v"), r=_scalar(r, name="r"), s=_scalar(s, name="s"))

    def to_bytes(self) -> bytes:
        return self.r.to_bytes(32, "big") + self.s.to_bytes(32, "big") + bytes([self.v])

    def to_hex(self) -> str:
        return "0x" + self.to_bytes().hex()

    def vrs(self) -> Tuple[int, int, int]:
        return (self.v, self.r, self.s)


def _scalar(value: Any, *, name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.startswith(("0x", "0X")) and len(value) <= 66 and is_hex_digits(value[2:]):
        return int(value[2:], 16)
    raise SignatureParseError(RecoveryError.INVALID_ENCODING, f"signature {name} must be an int or 0x-hex")


SignatureLike = Union[Signature, bytes, bytearray, str, Mapping[str, Any]]


def parse_signature(value: SignatureLike) -> Signature:
    """Parse any accepted wire form; raises SignatureParseError on malformed input."""
    if isinstance(value, Signature):
        return value
    if isinstance(value, (bytes, bytearray)):
        return Signature.from_bytes(bytes(value))
    if isinstance(value, str):
        return Signature.from_hex(value)
    if isinstance(value, Mapping):
        return Signature.from_parts(value)
    raise TypeError(f"unsupported signature type: {type(value).__name__}")


@dataclass(frozen=True)
class RecoveryResult:
    ok: bool
    signer: Optional[Address] = None
    error: Optional[RecoveryError] = None


def public_key_to_address(x: int, y: int) -> Address:
    pub = x.to_bytes(32, "big") + y.to_bytes(32, "big")
    return to_address(keccak256(pub)[-20:])


def recover_signer(digest: bytes, signature: SignatureLike) -> RecoveryResult:
    """
    Recover the address that produced `signature` over `digest`.

    Adversarial signature content never raises; it yields ``ok=False`` with
    the reason. A digest that is not 32 bytes is a caller bug and raises.
    """
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != 32:
        raise ValueError("digest must be 32 bytes")
    try:
        sig = parse_signature(signature)
    except SignatureParseError as exc:
        return RecoveryResult(ok=False, error=exc.reason)
    except TypeError:
        return RecoveryResult(ok=False, error=RecoveryError.INVALID_ENCODING)

    try:
        x, y = ecdsa_raw_recover(bytes(digest), sig.vrs())
    except ValueError:
        # r is not the x coordinate of any curve point.
        return RecoveryResult(ok=False, error=RecoveryError.UNRECOVERABLE)
    if x == 0 and y == 0:
        # Point at infinity.
        return RecoveryResult(ok=False, error=RecoveryError.UNRECOVERABLE)
    return RecoveryResult(ok=True, signer=public_key_to_address(x, y))


def signature_matches(digest: bytes, signature: SignatureLike, expected: AddressLike) -> bool:
    result = recover_signer(digest, signature)
    return result.ok and result.signer == to_address(expected, name="expected")
