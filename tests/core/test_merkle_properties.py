"""Property tests: any single-bit mutation of a leaf or proof breaks verification."""

from __future__ import annotations

import importlib.util

import pytest

if importlib.util.find_spec("hypothesis") is None:  # pragma: no cover
    pytest.skip("hypothesis not installed", allow_module_level=True)

import hypothesis.strategies as st
from hypothesis import given, settings

from airdrop.core.merkle import verify
from airdrop.state.canonical import keccak256

from airdrop_fixtures import build_tree


def _flip(data: bytes, bit: int) -> bytes:
    out = bytearray(data)
    out[bit // 8] ^= 1 << (bit % 8)
    return bytes(out)


@st.composite
def trees(draw):
    n = draw(st.integers(min_value=2, max_value=16))
    seed = draw(st.binary(min_size=1, max_size=8))
    leaves = [keccak256(seed + i.to_bytes(2, "big")) for i in range(n)]
    index = draw(st.integers(min_value=0, max_value=n - 1))
    root, proofs = build_tree(leaves)
    return leaves, root, proofs, index


@settings(max_examples=200, deadline=None)
@given(tree=trees(), bit=st.integers(min_value=0, max_value=255))
def test_leaf_bit_flip_fails(tree, bit) -> None:
    leaves, root, proofs, index = tree
    assert verify(proofs[index], root, leaves[index])
    assert not verify(proofs[index], root, _flip(leaves[index], bit))


@settings(max_examples=200, deadline=None)
@given(tree=trees(), bit=st.integers(min_value=0, max_value=255), data=st.data())
def test_sibling_bit_flip_fails(tree, bit, data) -> None:
    leaves, root, proofs, index = tree
    proof = list(proofs[index])
    pos = data.draw(st.integers(min_value=0, max_value=len(proof) - 1))
    proof[pos] = _flip(proof[pos], bit)
    assert not verify(proof, root, leaves[index])


@settings(max_examples=100, deadline=None)
@given(tree=trees(), data=st.data())
def test_permuted_proof_fails_unless_identical(tree, data) -> None:
    leaves, root, proofs, index = tree
    proof = proofs[index]
    permuted = data.draw(st.permutations(proof))
    if list(permuted) == list(proof):
        assert verify(permuted, root, leaves[index])
    else:
        assert not verify(permuted, root, leaves[index])
