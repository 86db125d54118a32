"""
Merkle inclusion verification against a committed root.

Pair rule (protocol constant, shared with the offline tree builder):

    parent = keccak256(min(a, b) || max(a, b))

Sorting each pair means a proof is just the ordered list of sibling hashes
from leaf to root; no left/right flags are carried. Changing the rule
invalidates every proof already issued for a campaign.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from ..state.canonical import Hash32, HashLike, keccak256, to_hash32


def hash_pair(a: Hash32, b: Hash32) -> Hash32:
    # Lexicographic order on equal-length big-endian bytes is uint256 order.
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def normalize_proof(proof: Iterable[HashLike]) -> List[Hash32]:
    if isinstance(proof, (str, bytes, bytearray)):
        raise TypeError("proof must be a sequence of hashes, not a single value")
    return [to_hash32(p, name=f"proof[{i}]") for i, p in enumerate(proof)]


def process_proof(proof: Sequence[HashLike], leaf: HashLike) -> Hash32:
    """Rebuild the root implied by `leaf` and its sibling path."""
    current = to_hash32(leaf, name="leaf")
    for sibling in normalize_proof(proof):
        current = hash_pair(current, sibling)
    return current


def verify(proof: Sequence[HashLike], root: HashLike, leaf: HashLike) -> bool:
    """
    Return True iff `proof` links `leaf` to `root`.

    An empty proof verifies only when the leaf is the root (single-entry tree).
    Malformed elements raise ValueError/TypeError rather than returning False.
    """
    return process_proof(proof, leaf) == to_hash32(root, name="root")


class MerkleVerifier:
    """Binds `verify` to one fixed root."""

    __slots__ = ("_root",)

    def __init__(self, root: HashLike) -> None:
        self._root = to_hash32(root, name="root")

    @property
    def root(self) -> Hash32:
        return self._root

    def verify(self, proof: Sequence[HashLike], leaf: HashLike) -> bool:
        return process_proof(proof, leaf) == self._root

    def __repr__(self) -> str:
        return f"MerkleVerifier(root=0x{self._root.hex()})"
