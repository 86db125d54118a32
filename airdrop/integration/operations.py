"""
Claim request parsing for JSON transports.

Accepted shape:

    {
      "account": "0x...",              # 20-byte address
      "amount": 25 | "25",             # uint256, decimal string allowed for JS clients
      "proof": ["0x...", ...],         # 32-byte sibling hashes, leaf to root
      "signature": "0x..." | {"v": 27, "r": "0x...", "s": "0x..."}
    }
"""

from collections.abc import Mapping
from typing import Any, Dict, List

from ..core.merkle import normalize_proof
from ..core.signatures import Signature
from ..core.types import ClaimRequest
from ..state.canonical import require_uint256, to_address, to_hex
from .config import DEFAULT_MAX_PROOF_LEN


_MAX_AMOUNT_DIGITS = 78  # len(str(2**256 - 1))
_MAX_SIGNATURE_HEX_LEN = 2 + 2 * 65


def _require_amount(value: Any) -> int:
    if isinstance(value, str):
        if not value or len(value) > _MAX_AMOUNT_DIGITS or not value.isdigit() or not value.isascii():
            raise ValueError("amount must be a decimal string")
        value = int(value, 10)
    return require_uint256(value, name="amount")


def _require_signature(value: Any) -> Any:
    if isinstance(value, str):
        if len(value) > _MAX_SIGNATURE_HEX_LEN + 8:
            raise ValueError("signature too large")
        return value
    if isinstance(value, Mapping):
        extra = set(value.keys()) - {"v", "r", "s"}
        if extra:
            raise ValueError(f"signature has unexpected fields: {sorted(extra)}")
        return dict(value)
    raise ValueError("signature must be a hex string or a {v, r, s} object")


def parse_claim_request(data: Any, *, max_proof_len: int = DEFAULT_MAX_PROOF_LEN) -> ClaimRequest:
    """
    Parse a JSON-decoded claim submission.

    Raises:
        ValueError: If any field is missing or malformed
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"claim request must be an object, got {type(data).__name__}")
    missing = [k for k in ("account", "amount", "proof", "signature") if k not in data]
    if missing:
        raise ValueError(f"claim request missing fields: {missing}")

    try:
        account = to_address(data["account"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"account: {e}") from e
    try:
        amount = _require_amount(data["amount"])
    except (TypeError, ValueError) as e:
        raise ValueError(f"amount: {e}") from e

    proof_data = data["proof"]
    if not isinstance(proof_data, list):
        raise ValueError(f"proof must be a list, got {type(proof_data).__name__}")
    if len(proof_data) > max_proof_len:
        raise ValueError(f"proof too long: {len(proof_data)} > {max_proof_len}")
    try:
        proof = tuple(normalize_proof(proof_data))
    except (TypeError, ValueError) as e:
        raise ValueError(f"proof: {e}") from e

    signature = _require_signature(data["signature"])
    return ClaimRequest(account=account, amount=amount, proof=proof, signature=signature)


def claim_request_to_dict(request: ClaimRequest) -> Dict[str, Any]:
    sig = request.signature
    if isinstance(sig, Signature):
        sig_out: Any = sig.to_hex()
    elif isinstance(sig, (bytes, bytearray)):
        sig_out = to_hex(bytes(sig))
    else:
        sig_out = sig
    proof: List[str] = [to_hex(p) for p in request.proof]
    return {
        "account": request.account,
        "amount": str(request.amount),
        "proof": proof,
        "signature": sig_out,
    }
