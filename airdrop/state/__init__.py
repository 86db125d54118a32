"""
Campaign state: the claimed-set and the token ledger collaborator.
"""

from .balances import TokenLedger, TransferCapability
from .claims import ClaimLedger

__all__ = [
    "TokenLedger",
    "TransferCapability",
    "ClaimLedger",
]
