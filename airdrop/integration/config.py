"""
Campaign configuration.

The root and the domain are commitment data: they are read once at startup
and never change for the lifetime of a campaign. There are no defaults for
them; a missing value is an error rather than a silently different campaign.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.typed_data import DEFAULT_DOMAIN_NAME, DEFAULT_DOMAIN_VERSION, TypedDataDomain
from ..state.canonical import Hash32, to_hash32


DEFAULT_MAX_PROOF_LEN = 256


@dataclass(frozen=True)
class AirdropConfig:
    merkle_root: Hash32
    domain: TypedDataDomain

    token_symbol: str = "TOKEN"

    # DoS bound applied before any hashing. 256 levels covers 2**256 leaves.
    max_proof_len: int = DEFAULT_MAX_PROOF_LEN

    def __post_init__(self) -> None:
        object.__setattr__(self, "merkle_root", to_hash32(self.merkle_root, name="merkle_root"))
        if not isinstance(self.domain, TypedDataDomain):
            raise TypeError("domain must be a TypedDataDomain")
        if (
            not isinstance(self.max_proof_len, int)
            or isinstance(self.max_proof_len, bool)
            or not 0 < self.max_proof_len <= DEFAULT_MAX_PROOF_LEN
        ):
            raise ValueError(f"max_proof_len must be in [1, {DEFAULT_MAX_PROOF_LEN}]")


def _env_int(environ: Mapping[str, str], name: str, default: int, *, lo: int, hi: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip(), 0)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if v < lo or v > hi:
        raise ValueError(f"{name} must be in [{lo}, {hi}], got {v}")
    return v


def _env_str(environ: Mapping[str, str], name: str, default: str) -> str:
    raw = environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _env_required(environ: Mapping[str, str], name: str) -> str:
    v = _env_str(environ, name, "")
    if not v:
        raise ValueError(f"{name} must be set")
    return v


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> AirdropConfig:
    """
    Build an `AirdropConfig` from AIRDROP_* environment variables.

    Required: AIRDROP_MERKLE_ROOT, AIRDROP_VERIFYING_CONTRACT.
    Optional: AIRDROP_CHAIN_ID (default 1), AIRDROP_DOMAIN_NAME,
    AIRDROP_DOMAIN_VERSION, AIRDROP_TOKEN_SYMBOL, AIRDROP_MAX_PROOF_LEN.
    """
    env = os.environ if environ is None else environ
    domain = TypedDataDomain(
        chain_id=_env_int(env, "AIRDROP_CHAIN_ID", 1, lo=0, hi=2**256 - 1),
        verifying_contract=_env_required(env, "AIRDROP_VERIFYING_CONTRACT"),
        name=_env_str(env, "AIRDROP_DOMAIN_NAME", DEFAULT_DOMAIN_NAME),
        version=_env_str(env, "AIRDROP_DOMAIN_VERSION", DEFAULT_DOMAIN_VERSION),
    )
    return AirdropConfig(
        merkle_root=_env_required(env, "AIRDROP_MERKLE_ROOT"),
        domain=domain,
        token_symbol=_env_str(env, "AIRDROP_TOKEN_SYMBOL", "TOKEN"),
        max_proof_len=_env_int(env, "AIRDROP_MAX_PROOF_LEN", DEFAULT_MAX_PROOF_LEN, lo=1, hi=DEFAULT_MAX_PROOF_LEN),
    )
