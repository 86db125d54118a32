# [TESTER] v1

from __future__ import annotations

import pytest

from airdrop.agents.claim_signer import create_claim_request
from airdrop.integration.operations import claim_request_to_dict, parse_claim_request

from airdrop_fixtures import default_campaign


def _valid_dict() -> dict:
    c = default_campaign()
    return {
        "account": c.account(1).lower(),
        "amount": "25",
        "proof": ["0x" + p.hex() for p in c.proofs[1]],
        "signature": c.sign(1).to_hex(),
    }


def test_parses_valid_request() -> None:
    c = default_campaign()
    req = parse_claim_request(_valid_dict())
    assert req.account == c.account(1)
    assert req.amount == 25
    assert req.proof == tuple(c.proofs[1])
    assert req.signature == c.sign(1).to_hex()


def test_amount_may_be_int() -> None:
    d = _valid_dict()
    d["amount"] = 25
    assert parse_claim_request(d).amount == 25


def test_signature_parts_object_is_passed_through() -> None:
    d = _valid_dict()
    d["signature"] = {"v": 27, "r": "0x01", "s": "0x02"}
    assert parse_claim_request(d).signature == {"v": 27, "r": "0x01", "s": "0x02"}


def test_malformed_signature_is_left_for_the_engine() -> None:
    # The parser only checks shape; the engine reports InvalidSignature.
    d = _valid_dict()
    d["signature"] = "0x1234"
    assert parse_claim_request(d).signature == "0x1234"


@pytest.mark.parametrize(
    "field,value,match",
    [
        ("account", "0x1234", "account"),
        ("amount", "-1", "amount"),
        ("amount", "1e3", "amount"),
        ("amount", 1.5, "amount"),
        ("amount", True, "amount"),
        ("amount", str(2**256), "amount"),
        ("proof", "0x" + "00" * 32, "proof"),
        ("proof", ["0x" + "00" * 31], "proof"),
        ("signature", 27, "signature"),
        ("signature", {"v": 27, "r": 1, "s": 2, "extra": 0}, "signature"),
    ],
)
def test_rejects_malformed_fields(field, value, match) -> None:
    d = _valid_dict()
    d[field] = value
    with pytest.raises(ValueError, match=match):
        parse_claim_request(d)


def test_rejects_missing_fields_and_non_objects() -> None:
    d = _valid_dict()
    del d["proof"]
    with pytest.raises(ValueError, match="missing"):
        parse_claim_request(d)
    with pytest.raises(ValueError):
        parse_claim_request([1, 2, 3])


def test_proof_length_is_bounded() -> None:
    d = _valid_dict()
    d["proof"] = ["0x" + "00" * 32] * 5
    with pytest.raises(ValueError, match="too long"):
        parse_claim_request(d, max_proof_len=4)


def test_dict_roundtrip_from_signer() -> None:
    c = default_campaign()
    req = create_claim_request(c.builder, c.account(2), 100, c.proofs[2], 2)
    out = claim_request_to_dict(req)
    assert out["amount"] == "100"
    assert out["signature"] == c.sign(2).to_hex()
    assert parse_claim_request(out).proof == req.proof
