#!/usr/bin/env python3
"""Offline claim checker.

Runs the signature and proof checks of a claim against a root and domain,
without a ledger or a transfer. Useful for support tickets ("why does my
claim fail?") and for spot-checking a proof file before a campaign opens.

    python tools/verify_claim.py claim.json --root 0x... --contract 0x... --chain-id 1

Exit status: 0 both checks pass, 1 a check fails, 2 malformed input.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from airdrop.core.leaf import leaf_hash
from airdrop.core.merkle import process_proof
from airdrop.core.signatures import recover_signer
from airdrop.core.typed_data import (
    DEFAULT_DOMAIN_NAME,
    DEFAULT_DOMAIN_VERSION,
    AuthorizationDigestBuilder,
    TypedDataDomain,
)
from airdrop.integration.operations import parse_claim_request
from airdrop.state.canonical import to_hash32, to_hex


def check_claim(request_obj: object, *, root: bytes, domain: TypedDataDomain) -> dict:
    request = parse_claim_request(request_obj)
    digest = AuthorizationDigestBuilder(domain).digest(request.account, request.amount)
    recovery = recover_signer(digest, request.signature)
    leaf = leaf_hash(request.account, request.amount)
    computed_root = process_proof(request.proof, leaf)
    signature_ok = recovery.ok and recovery.signer == request.account
    proof_ok = computed_root == root
    return {
        "account": request.account,
        "amount": request.amount,
        "digest": to_hex(digest),
        "recovered": recovery.signer,
        "recovery_error": recovery.error.value if recovery.error else None,
        "signature_ok": signature_ok,
        "leaf": to_hex(leaf),
        "computed_root": to_hex(computed_root),
        "proof_ok": proof_ok,
        "ok": signature_ok and proof_ok,
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Check an airdrop claim offline")
    parser.add_argument("claim", type=Path, help="Claim JSON file ({account, amount, proof, signature})")
    parser.add_argument("--root", required=True, help="Committed Merkle root (0x-hex)")
    parser.add_argument("--contract", required=True, help="EIP-712 verifyingContract address")
    parser.add_argument("--chain-id", type=int, default=1, help="EIP-712 chainId")
    parser.add_argument("--name", default=DEFAULT_DOMAIN_NAME, help="EIP-712 domain name")
    parser.add_argument("--version", default=DEFAULT_DOMAIN_VERSION, help="EIP-712 domain version")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args(argv)

    try:
        claim_obj = json.loads(args.claim.read_text(encoding="utf-8"))
        root = to_hash32(args.root, name="root")
        domain = TypedDataDomain(
            chain_id=args.chain_id,
            verifying_contract=args.contract,
            name=args.name,
            version=args.version,
        )
        report = check_claim(claim_obj, root=root, domain=domain)
    except (OSError, TypeError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report, indent=2, sort_keys=True))
    else:
        print(f"account:   {report['account']}")
        print(f"amount:    {report['amount']}")
        sig_line = "ok" if report["signature_ok"] else f"FAIL (recovered={report['recovered']}, error={report['recovery_error']})"
        print(f"signature: {sig_line}")
        proof_line = "ok" if report["proof_ok"] else f"FAIL (computed root {report['computed_root']})"
        print(f"proof:     {proof_line}")
    return 0 if report["ok"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
