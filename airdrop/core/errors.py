"""Exception types for the claim engine.

``ClaimAuthority.claim()`` raises the ``ClaimError`` subclasses; callers that
prefer inspecting a result use ``ClaimAuthority.try_claim()`` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .signatures import RecoveryError


class ClaimError(Exception):
    """Base class for terminal claim rejections."""

    code = "claim_error"

    def __init__(self, message: str, *, account: Optional[str] = None) -> None:
        self.account = account
        super().__init__(message)


class AlreadyClaimed(ClaimError):
    """The account already has a recorded claim."""

    code = "already_claimed"


class InvalidSignature(ClaimError):
    """Signature malformed, unrecoverable, or signed by someone other than the account.

    ``reason`` is the ``RecoveryError`` when recovery itself failed, and
    ``None`` when a signer was recovered but does not match the account.
    """

    code = "invalid_signature"

    def __init__(
        self,
        message: str,
        *,
        account: Optional[str] = None,
        reason: Optional["RecoveryError"] = None,
        recovered: Optional[str] = None,
    ) -> None:
        self.reason = reason
        self.recovered = recovered
        super().__init__(message, account=account)


class InvalidProof(ClaimError):
    """The recomputed root does not equal the committed root."""

    code = "invalid_proof"


class TransferFailed(ClaimError):
    """The token collaborator declined or failed the payout."""

    code = "transfer_failed"


class ClaimStateError(RuntimeError):
    """Raised when the claim ledger is driven through an illegal transition."""


class SignatureParseError(ValueError):
    """Raised when a signature is structurally invalid (before any recovery)."""

    def __init__(self, reason: "RecoveryError", message: str) -> None:
        self.reason = reason
        super().__init__(message)
