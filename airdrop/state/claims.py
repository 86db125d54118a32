"""
Claimed-set for replay protection.

One bit per account, monotone: Unclaimed -> Claimed, never back. The only
exception is `staged_claim`, which withdraws a mark that was never committed
because the payout behind it failed.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Set, Tuple

from ..core.errors import ClaimStateError
from .canonical import Address, AddressLike, to_address


@dataclass
class ClaimLedger:
    """
    Mutable set of accounts that have claimed.

    `mark_claimed` is deliberately not idempotent: callers check
    `has_claimed` first, and a second mark means that check was skipped.
    """

    _claimed: Set[Address] = field(default_factory=set)

    def has_claimed(self, account: AddressLike) -> bool:
        return to_address(account) in self._claimed

    def mark_claimed(self, account: AddressLike) -> Address:
        addr = to_address(account)
        if addr in self._claimed:
            raise ClaimStateError(f"account already marked claimed: {addr}")
        self._claimed.add(addr)
        return addr

    @contextmanager
    def staged_claim(self, account: AddressLike) -> Iterator[Address]:
        """
        Mark `account` claimed for the duration of the block.

        If the block raises, the mark is removed and the exception re-raised,
        so no claim is recorded without its payout.
        """
        addr = self.mark_claimed(account)
        try:
            yield addr
        except BaseException:
            self._claimed.discard(addr)
            raise

    def claimed_accounts(self) -> Tuple[Address, ...]:
        return tuple(sorted(self._claimed))

    def __contains__(self, account: object) -> bool:
        if not isinstance(account, (str, bytes, bytearray)):
            return False
        return self.has_claimed(account)

    def __len__(self) -> int:
        return len(self._claimed)

    def __repr__(self) -> str:
        return f"ClaimLedger({len(self._claimed)} claimed)"
