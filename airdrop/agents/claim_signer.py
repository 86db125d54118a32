"""
Holder-side helpers: sign a claim authorization and package a submission.

A third party (a relayer paying submission costs) may send the resulting
request; only the signature ties it to the entitled account.
"""

from __future__ import annotations

from typing import Sequence, Union

from py_ecc.secp256k1 import N as SECP256K1_N
from py_ecc.secp256k1 import ecdsa_raw_sign, privtopub

from ..core.merkle import normalize_proof
from ..core.signatures import Signature, public_key_to_address
from ..core.typed_data import AuthorizationDigestBuilder
from ..core.types import ClaimRequest
from ..state.canonical import Address, AddressLike, HashLike, hex_to_bytes_fixed, require_uint256, to_address


PrivateKey = Union[bytes, str, int]


def _private_key_bytes(key: PrivateKey) -> bytes:
    if isinstance(key, int) and not isinstance(key, bool):
        if not 0 < key < SECP256K1_N:
            raise ValueError("private key out of range")
        return key.to_bytes(32, "big")
    if isinstance(key, str):
        key = hex_to_bytes_fixed(key, nbytes=32, name="private_key")
    if not isinstance(key, (bytes, bytearray)) or len(key) != 32:
        raise ValueError("private key must be 32 bytes")
    if not 0 < int.from_bytes(key, "big") < SECP256K1_N:
        raise ValueError("private key out of range")
    return bytes(key)


def address_from_private_key(key: PrivateKey) -> Address:
    x, y = privtopub(_private_key_bytes(key))
    return public_key_to_address(x, y)


def sign_digest(digest: bytes, key: PrivateKey) -> Signature:
    """Deterministic (RFC 6979) low-s signature over a 32-byte digest."""
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != 32:
        raise ValueError("digest must be 32 bytes")
    v, r, s = ecdsa_raw_sign(bytes(digest), _private_key_bytes(key))
    return Signature(v=v, r=r, s=s)


def sign_claim(
    builder: AuthorizationDigestBuilder,
    account: AddressLike,
    amount: int,
    key: PrivateKey,
) -> Signature:
    """
    Sign the typed-data digest for (account, amount).

    Raises:
        ValueError: If `key` does not control `account`
    """
    addr = to_address(account)
    signer = address_from_private_key(key)
    if signer != addr:
        raise ValueError(f"private key controls {signer}, not {addr}")
    return sign_digest(builder.digest(addr, require_uint256(amount)), key)


def create_claim_request(
    builder: AuthorizationDigestBuilder,
    account: AddressLike,
    amount: int,
    proof: Sequence[HashLike],
    key: PrivateKey,
) -> ClaimRequest:
    addr = to_address(account)
    return ClaimRequest(
        account=addr,
        amount=require_uint256(amount),
        proof=tuple(normalize_proof(proof)),
        signature=sign_claim(builder, addr, amount, key),
    )
