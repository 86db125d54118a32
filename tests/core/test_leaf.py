# [TESTER] v1

from __future__ import annotations

import pytest

from airdrop.core.leaf import Entitlement, encode_entitlement, leaf_hash
from airdrop.state.canonical import UINT256_MAX, keccak256


ACCOUNT = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"


def test_keccak_is_ethereum_keccak_not_sha3() -> None:
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_encoding_is_two_left_padded_words() -> None:
    enc = encode_entitlement(ACCOUNT, 25)
    assert len(enc) == 64
    assert enc[:12] == b"\x00" * 12
    assert enc[12:32] == bytes.fromhex(ACCOUNT[2:])
    assert enc[32:] == (25).to_bytes(32, "big")


def test_leaf_is_hash_of_hash() -> None:
    enc = encode_entitlement(ACCOUNT, 25)
    assert leaf_hash(ACCOUNT, 25) == keccak256(keccak256(enc))
    assert leaf_hash(ACCOUNT, 25) != keccak256(enc)


def test_leaf_ignores_address_casing() -> None:
    assert leaf_hash(ACCOUNT, 25) == leaf_hash(ACCOUNT.lower(), 25)
    assert leaf_hash(ACCOUNT, 25) == leaf_hash(bytes.fromhex(ACCOUNT[2:]), 25)


def test_leaf_binds_amount_and_account() -> None:
    other = "0x" + "11" * 20
    assert leaf_hash(ACCOUNT, 25) != leaf_hash(ACCOUNT, 26)
    assert leaf_hash(ACCOUNT, 25) != leaf_hash(other, 25)


def test_uint256_bounds() -> None:
    assert len(leaf_hash(ACCOUNT, 0)) == 32
    assert len(leaf_hash(ACCOUNT, UINT256_MAX)) == 32
    with pytest.raises(ValueError):
        leaf_hash(ACCOUNT, UINT256_MAX + 1)
    with pytest.raises(ValueError):
        leaf_hash(ACCOUNT, -1)
    with pytest.raises(TypeError):
        leaf_hash(ACCOUNT, True)


@pytest.mark.parametrize(
    "bad",
    [
        "0x" + "11" * 19,
        "11" * 20,
        "0x" + "zz" * 20,
        "0x7e5F4552091A69125d5DfCb7b8C2659029395Bdf",  # broken checksum
        b"\x11" * 19,
    ],
)
def test_rejects_malformed_accounts(bad) -> None:
    with pytest.raises(ValueError):
        leaf_hash(bad, 1)


def test_entitlement_canonicalizes_and_hashes() -> None:
    e = Entitlement(account=ACCOUNT.lower(), amount=25)
    assert e.account == ACCOUNT
    assert e.leaf() == leaf_hash(ACCOUNT, 25)
    with pytest.raises(ValueError):
        Entitlement(account=ACCOUNT, amount=-5)
