"""
Claim verification core: pure functions, no state.
"""

from .errors import (
    AlreadyClaimed,
    ClaimError,
    ClaimStateError,
    InvalidProof,
    InvalidSignature,
    SignatureParseError,
    TransferFailed,
)
from .leaf import Entitlement, encode_entitlement, leaf_hash
from .merkle import MerkleVerifier, hash_pair, process_proof, verify
from .signatures import RecoveryError, RecoveryResult, Signature, parse_signature, recover_signer
from .typed_data import AuthorizationDigestBuilder, TypedDataDomain, claim_struct_hash
from .types import ClaimEvent, ClaimReceipt, ClaimRequest, ClaimResult, Event, Rejection

__all__ = [
    "AlreadyClaimed",
    "ClaimError",
    "ClaimStateError",
    "InvalidProof",
    "InvalidSignature",
    "SignatureParseError",
    "TransferFailed",
    "Entitlement",
    "encode_entitlement",
    "leaf_hash",
    "MerkleVerifier",
    "hash_pair",
    "process_proof",
    "verify",
    "RecoveryError",
    "RecoveryResult",
    "Signature",
    "parse_signature",
    "recover_signer",
    "AuthorizationDigestBuilder",
    "TypedDataDomain",
    "claim_struct_hash",
    "ClaimEvent",
    "ClaimReceipt",
    "ClaimRequest",
    "ClaimResult",
    "Event",
    "Rejection",
]
