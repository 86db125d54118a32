"""
EIP-712 typed-data digests for claim authorizations.

digest = keccak256(0x1901 || domainSeparator || structHash)

    domainSeparator = keccak256(abi.encode(
        DOMAIN_TYPEHASH, keccak256(name), keccak256(version), chainId, verifyingContract))
    structHash = keccak256(abi.encode(CLAIM_TYPEHASH, account, amount))

The domain pins a signature to one deployed campaign on one network, and the
struct pins it to one exact (account, amount) pair.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from eth_abi import encode as abi_encode

from ..state.canonical import Address, AddressLike, Hash32, keccak256, require_uint256, to_address


EIP712_PREFIX = b"\x19\x01"

DOMAIN_TYPE = "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
CLAIM_TYPE = "AirdropClaim(address account,uint256 amount)"

DOMAIN_TYPEHASH: Hash32 = keccak256(DOMAIN_TYPE.encode("ascii"))
CLAIM_TYPEHASH: Hash32 = keccak256(CLAIM_TYPE.encode("ascii"))

DEFAULT_DOMAIN_NAME = "MerkleAirdrop"
DEFAULT_DOMAIN_VERSION = "1"

# EIP-5267 field bitmap: name | version | chainId | verifyingContract.
_DOMAIN_FIELDS = b"\x0f"


@dataclass(frozen=True)
class TypedDataDomain:
    """Instance-binding context baked into every authorization digest."""

    chain_id: int
    verifying_contract: Address
    name: str = DEFAULT_DOMAIN_NAME
    version: str = DEFAULT_DOMAIN_VERSION

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("domain name must be a non-empty str")
        if not isinstance(self.version, str) or not self.version:
            raise ValueError("domain version must be a non-empty str")
        require_uint256(self.chain_id, name="chain_id")
        object.__setattr__(
            self, "verifying_contract", to_address(self.verifying_contract, name="verifying_contract")
        )

    def separator(self) -> Hash32:
        return keccak256(
            abi_encode(
                ["bytes32", "bytes32", "bytes32", "uint256", "address"],
                [
                    DOMAIN_TYPEHASH,
                    keccak256(self.name.encode("utf-8")),
                    keccak256(self.version.encode("utf-8")),
                    self.chain_id,
                    self.verifying_contract,
                ],
            )
        )

    def describe(self) -> Tuple[bytes, str, str, int, Address, bytes, Tuple[int, ...]]:
        """EIP-5267 `eip712Domain()` view: what a wallet needs to rebuild the domain."""
        return (_DOMAIN_FIELDS, self.name, self.version, self.chain_id, self.verifying_contract, b"\x00" * 32, ())


def claim_struct_hash(account: AddressLike, amount: int) -> Hash32:
    return keccak256(
        abi_encode(
            ["bytes32", "address", "uint256"],
            [CLAIM_TYPEHASH, to_address(account), require_uint256(amount)],
        )
    )


def typed_data_digest(domain_separator: Hash32, struct_hash: Hash32) -> Hash32:
    if len(domain_separator) != 32 or len(struct_hash) != 32:
        raise ValueError("domain separator and struct hash must be 32 bytes")
    return keccak256(EIP712_PREFIX + domain_separator + struct_hash)


class AuthorizationDigestBuilder:
    """
    Builds the digest an account holder signs to authorize one claim.

    The domain separator is computed once; `digest()` is pure and cheap.
    """

    __slots__ = ("_domain", "_separator")

    def __init__(self, domain: TypedDataDomain) -> None:
        if not isinstance(domain, TypedDataDomain):
            raise TypeError("domain must be a TypedDataDomain")
        self._domain = domain
        self._separator = domain.separator()

    @property
    def domain(self) -> TypedDataDomain:
        return self._domain

    @property
    def domain_separator(self) -> Hash32:
        return self._separator

    def digest(self, account: AddressLike, amount: int) -> Hash32:
        return typed_data_digest(self._separator, claim_struct_hash(account, amount))
