"""
Claim orchestration: the imperative shell around the pure verification core.

`claim(account, amount, proof, signature)` runs, in this order:

1. ledger check            -> AlreadyClaimed
2. typed-data signature    -> InvalidSignature
3. leaf + Merkle proof     -> InvalidProof
4. mark claimed            (before any external effect)
5. token transfer          -> TransferFailed, mark rolled back
6. Claim event              (listener failures are logged, not raised)

Cheap state check first, curve arithmetic second, the tree walk last. Step 4
precedes step 5 so that a transfer which calls back into `claim` for the same
account is rejected at step 1.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.errors import AlreadyClaimed, ClaimError, InvalidProof, InvalidSignature, TransferFailed
from ..core.leaf import leaf_hash
from ..core.merkle import MerkleVerifier, normalize_proof
from ..core.signatures import SignatureLike, recover_signer
from ..core.typed_data import AuthorizationDigestBuilder, TypedDataDomain
from ..core.types import ClaimEvent, ClaimReceipt, ClaimRequest, ClaimResult, Rejection
from ..state.balances import TransferCapability
from ..state.canonical import Address, AddressLike, Hash32, HashLike, require_uint256, to_address
from ..state.claims import ClaimLedger
from .config import AirdropConfig


logger = logging.getLogger(__name__)

ClaimListener = Callable[[ClaimEvent], None]

_REJECTIONS = {
    AlreadyClaimed: Rejection.ALREADY_CLAIMED,
    InvalidSignature: Rejection.INVALID_SIGNATURE,
    InvalidProof: Rejection.INVALID_PROOF,
    TransferFailed: Rejection.TRANSFER_FAILED,
}


class ClaimAuthority:
    """
    Owns the committed root and the claimed-set for one campaign.

    Calls are serialized by a re-entrant lock: a transfer collaborator may
    call back into `claim` from the same thread and will observe the
    in-flight claim as already recorded.
    """

    def __init__(
        self,
        config: AirdropConfig,
        token: TransferCapability,
        *,
        ledger: Optional[ClaimLedger] = None,
    ) -> None:
        if not isinstance(config, AirdropConfig):
            raise TypeError("config must be an AirdropConfig")
        if not callable(getattr(token, "transfer", None)):
            raise TypeError("token must provide transfer(to, amount) -> bool")
        self._config = config
        self._token = token
        self._verifier = MerkleVerifier(config.merkle_root)
        self._digests = AuthorizationDigestBuilder(config.domain)
        self._ledger = ledger if ledger is not None else ClaimLedger()
        self._lock = threading.RLock()
        self._events: List[ClaimEvent] = []
        self._listeners: List[ClaimListener] = []

    # -- read-only accessors -------------------------------------------------

    @property
    def merkle_root(self) -> Hash32:
        return self._verifier.root

    @property
    def domain(self) -> TypedDataDomain:
        return self._digests.domain

    @property
    def token(self) -> TransferCapability:
        return self._token

    @property
    def events(self) -> Tuple[ClaimEvent, ...]:
        with self._lock:
            return tuple(self._events)

    def has_claimed(self, account: AddressLike) -> bool:
        with self._lock:
            return self._ledger.has_claimed(account)

    def message_hash(self, account: AddressLike, amount: int) -> Hash32:
        """The digest `account` must sign to authorize claiming `amount`."""
        return self._digests.digest(account, amount)

    def subscribe(self, listener: ClaimListener) -> None:
        if not callable(listener):
            raise TypeError("listener must be callable")
        with self._lock:
            self._listeners.append(listener)

    # -- claim ---------------------------------------------------------------

    def claim(
        self,
        account: AddressLike,
        amount: int,
        proof: Sequence[HashLike],
        signature: SignatureLike,
    ) -> ClaimReceipt:
        """
        Release `amount` to `account` once, or raise a `ClaimError`.

        Malformed `account`/`amount` values raise ValueError/TypeError before
        any check runs; they cannot name an entitlement.
        """
        addr = to_address(account)
        amt = require_uint256(amount)

        with self._lock:
            if self._ledger.has_claimed(addr):
                raise AlreadyClaimed(f"{addr} has already claimed", account=addr)

            self._check_signature(addr, amt, signature)
            leaf = self._check_proof(addr, amt, proof)

            with self._ledger.staged_claim(addr):
                self._pay(addr, amt)
                event = ClaimEvent(account=addr, amount=amt, sequence=len(self._events))
                self._events.append(event)

            logger.info("claim %s amount=%d seq=%d", addr, amt, event.sequence)
            self._notify(event)
            return ClaimReceipt(account=addr, amount=amt, leaf=leaf, event=event)

    def claim_request(self, request: ClaimRequest) -> ClaimReceipt:
        return self.claim(request.account, request.amount, request.proof, request.signature)

    def try_claim(
        self,
        account: AddressLike,
        amount: int,
        proof: Sequence[HashLike],
        signature: SignatureLike,
    ) -> ClaimResult:
        """Like `claim()` but returns a `ClaimResult` instead of raising on rejection."""
        try:
            receipt = self.claim(account, amount, proof, signature)
        except ClaimError as exc:
            logger.debug("claim rejected: %s", exc)
            return ClaimResult(ok=False, rejection=_REJECTIONS.get(type(exc)), error=str(exc))
        return ClaimResult(ok=True, receipt=receipt)

    def _check_signature(self, addr: Address, amt: int, signature: SignatureLike) -> None:
        digest = self._digests.digest(addr, amt)
        result = recover_signer(digest, signature)
        if not result.ok:
            raise InvalidSignature(
                f"signature rejected: {result.error.value if result.error else 'unknown'}",
                account=addr,
                reason=result.error,
            )
        if result.signer != addr:
            raise InvalidSignature(
                f"signature is by {result.signer}, not {addr}",
                account=addr,
                recovered=result.signer,
            )

    def _check_proof(self, addr: Address, amt: int, proof: Sequence[HashLike]) -> Hash32:
        try:
            siblings = normalize_proof(proof)
        except (TypeError, ValueError) as exc:
            raise InvalidProof(f"malformed proof: {exc}", account=addr) from exc
        if len(siblings) > self._config.max_proof_len:
            raise InvalidProof(f"proof longer than {self._config.max_proof_len}", account=addr)
        leaf = leaf_hash(addr, amt)
        if not self._verifier.verify(siblings, leaf):
            raise InvalidProof(f"proof does not reach the committed root for {addr}", account=addr)
        return leaf

    def _pay(self, addr: Address, amt: int) -> None:
        try:
            ok = self._token.transfer(addr, amt)
        except Exception as exc:
            logger.warning("transfer to %s raised; claim rolled back: %s", addr, exc)
            raise TransferFailed(f"transfer to {addr} raised: {exc}", account=addr) from exc
        if not ok:
            logger.warning("transfer to %s declined; claim rolled back", addr)
            raise TransferFailed(f"transfer of {amt} to {addr} was declined", account=addr)

    def _notify(self, event: ClaimEvent) -> None:
        # The claim has committed; listener failures are logged, never raised.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("claim listener %r failed for %s seq=%d", listener, event.account, event.sequence)

    def __repr__(self) -> str:
        return f"ClaimAuthority(root=0x{self.merkle_root.hex()}, claimed={len(self._ledger)})"
