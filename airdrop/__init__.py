"""
Merkle airdrop claim engine.

A campaign commits to (account, amount) entitlements through one Merkle root;
each account redeems once with a proof and an EIP-712 authorization signature.
"""

__version__ = "0.1.0"
