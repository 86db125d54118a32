"""
Off-chain helpers for account holders and relayers.
"""

from .claim_signer import (
    address_from_private_key,
    create_claim_request,
    sign_claim,
    sign_digest,
)

__all__ = [
    "address_from_private_key",
    "create_claim_request",
    "sign_claim",
    "sign_digest",
]
