"""Data types shared by the claim engine.

All types are frozen dataclasses (immutable).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import TYPE_CHECKING, Optional, Tuple

from ..state.canonical import Address, Hash32

if TYPE_CHECKING:
    from .signatures import SignatureLike


@unique
class Event(Enum):
    CLAIMED = "Claim"


@unique
class Rejection(Enum):
    """One member per terminal claim failure."""

    ALREADY_CLAIMED = "already_claimed"
    INVALID_SIGNATURE = "invalid_signature"
    INVALID_PROOF = "invalid_proof"
    TRANSFER_FAILED = "transfer_failed"


@dataclass(frozen=True)
class ClaimEvent:
    """Claim-completed signal for external indexers and auditors."""

    account: Address
    amount: int
    sequence: int
    event: Event = Event.CLAIMED

    def to_dict(self) -> dict:
        return {
            "event": self.event.value,
            "account": self.account,
            "amount": self.amount,
            "sequence": self.sequence,
        }


@dataclass(frozen=True)
class ClaimReceipt:
    """Returned by a successful claim."""

    account: Address
    amount: int
    leaf: Hash32
    event: ClaimEvent


@dataclass(frozen=True)
class ClaimResult:
    """Result of `ClaimAuthority.try_claim()`."""

    ok: bool
    receipt: Optional[ClaimReceipt] = None
    rejection: Optional[Rejection] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ClaimRequest:
    """
    A parsed claim submission.

    The signature is kept in its wire form; judging it is the engine's job,
    so a malformed signature surfaces as `InvalidSignature`, not a parse error.
    """

    account: Address
    amount: int
    proof: Tuple[Hash32, ...]
    signature: "SignatureLike"
