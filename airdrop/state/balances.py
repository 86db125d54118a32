"""
Single-asset token balances and the transfer capability the claim engine consumes.

The engine only ever sees `TransferCapability`; `TokenLedger` is the in-memory
implementation used by the HTTP surface, the offline tools and the tests.
"""

from __future__ import annotations

from typing import Dict, Protocol, runtime_checkable

from .canonical import Address, AddressLike, to_address


@runtime_checkable
class TransferCapability(Protocol):
    """Pays `amount` to `to` from the campaign's funds. A falsy return means declined."""

    def transfer(self, to: Address, amount: int) -> bool:
        ...


class TokenLedger:
    """
    Balance table mapping address -> amount for one token.

    `holder` is the account the campaign pays out from. Zero balances are
    dropped to keep the table sparse.
    """

    def __init__(self, holder: AddressLike, *, symbol: str = "TOKEN"):
        self._holder: Address = to_address(holder, name="holder")
        self._symbol = symbol
        self._balances: Dict[Address, int] = {}

    @property
    def holder(self) -> Address:
        return self._holder

    @property
    def symbol(self) -> str:
        return self._symbol

    def balance_of(self, account: AddressLike) -> int:
        return self._balances.get(to_address(account), 0)

    def _set(self, account: Address, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def mint(self, account: AddressLike, amount: int) -> None:
        """
        Credit `amount` to `account`.

        Raises:
            ValueError: If amount is negative
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"mint amount must be a non-negative int: {amount!r}")
        addr = to_address(account)
        self._set(addr, self.balance_of(addr) + amount)

    def transfer(self, to: AddressLike, amount: int) -> bool:
        """
        Move `amount` from the holder to `to`.

        Returns False (and changes nothing) when the holder cannot cover it.
        """
        if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValueError(f"transfer amount must be a non-negative int: {amount!r}")
        recipient = to_address(to, name="to")
        available = self.balance_of(self._holder)
        if available < amount:
            return False
        self._set(self._holder, available - amount)
        self._set(recipient, self.balance_of(recipient) + amount)
        return True

    def total_supply(self) -> int:
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Address, int]:
        return dict(self._balances)

    def __repr__(self) -> str:
        return f"TokenLedger({self._symbol}, {len(self._balances)} entries)"
