"""
Imperative shell: configuration, orchestration and transports.
"""

from .authority import ClaimAuthority
from .config import AirdropConfig, load_config_from_env
from .operations import claim_request_to_dict, parse_claim_request

__all__ = [
    "ClaimAuthority",
    "AirdropConfig",
    "load_config_from_env",
    "claim_request_to_dict",
    "parse_claim_request",
]
