"""
Entitlement leaf encoding.

leaf = keccak256(keccak256(abi.encode(address account, uint256 amount)))

The encoding must match the offline tree builder byte for byte; a mismatch
makes every proof fail without any other symptom. Hashing twice keeps a leaf
from ever being mistaken for a 64-byte internal node preimage.
"""

from __future__ import annotations

from dataclasses import dataclass

from eth_abi import encode as abi_encode

from ..state.canonical import Address, AddressLike, Hash32, keccak256, require_uint256, to_address


LEAF_ABI_TYPES = ("address", "uint256")


def encode_entitlement(account: AddressLike, amount: int) -> bytes:
    """ABI-encode (account, amount) as two left-padded 32-byte words."""
    addr = to_address(account)
    amt = require_uint256(amount)
    return abi_encode(list(LEAF_ABI_TYPES), [addr, amt])


def leaf_hash(account: AddressLike, amount: int) -> Hash32:
    return keccak256(keccak256(encode_entitlement(account, amount)))


@dataclass(frozen=True)
class Entitlement:
    """One (recipient, amount) record committed to by the campaign root."""

    account: Address
    amount: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "account", to_address(self.account))
        require_uint256(self.amount)

    def leaf(self) -> Hash32:
        return leaf_hash(self.account, self.amount)
