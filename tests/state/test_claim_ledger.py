# [TESTER] v1

from __future__ import annotations

import pytest

from airdrop.core.errors import ClaimStateError
from airdrop.state.claims import ClaimLedger


A = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"
B = "0x2B5AD5c4795c026514f8317c7a215E218DcCD6cF"


def test_unclaimed_by_default() -> None:
    ledger = ClaimLedger()
    assert not ledger.has_claimed(A)
    assert len(ledger) == 0


def test_mark_is_one_way_and_per_account() -> None:
    ledger = ClaimLedger()
    assert ledger.mark_claimed(A.lower()) == A
    assert ledger.has_claimed(A)
    assert not ledger.has_claimed(B)
    assert A in ledger
    assert A.lower() in ledger
    assert 42 not in ledger


def test_second_mark_is_a_logic_error() -> None:
    ledger = ClaimLedger()
    ledger.mark_claimed(A)
    with pytest.raises(ClaimStateError):
        ledger.mark_claimed(A.lower())
    assert ledger.claimed_accounts() == (A,)


def test_staged_claim_commits_on_success() -> None:
    ledger = ClaimLedger()
    with ledger.staged_claim(A) as addr:
        assert addr == A
        assert ledger.has_claimed(A)
    assert ledger.has_claimed(A)


def test_staged_claim_rolls_back_on_error() -> None:
    ledger = ClaimLedger()
    ledger.mark_claimed(B)
    with pytest.raises(RuntimeError, match="payout failed"):
        with ledger.staged_claim(A):
            raise RuntimeError("payout failed")
    assert not ledger.has_claimed(A)
    assert ledger.has_claimed(B)


def test_staged_claim_refuses_claimed_account() -> None:
    ledger = ClaimLedger()
    ledger.mark_claimed(A)
    with pytest.raises(ClaimStateError):
        with ledger.staged_claim(A):
            pass  # pragma: no cover
    assert ledger.has_claimed(A)


def test_claimed_accounts_sorted_snapshot() -> None:
    ledger = ClaimLedger()
    ledger.mark_claimed(A)
    ledger.mark_claimed(B)
    snap = ledger.claimed_accounts()
    assert snap == tuple(sorted((A, B)))
    ledger._claimed.clear()
    assert snap == tuple(sorted((A, B)))
