"""
Minimal HTTP API for a claim campaign.

Stdlib only. Routes:
- GET  /health
- GET  /root                 committed Merkle root and EIP-712 domain
- GET  /claimed/<address>    per-account claimed flag
- POST /claim                submit {account, amount, proof, signature}

Security posture:
- Default-deny CORS (no wildcard by default)
- Basic rate limiting (per-IP, token bucket)
- Tight request parsing and bounded request sizes
"""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Optional, Sequence, Set, Tuple

from ..core.errors import AlreadyClaimed, ClaimError, InvalidProof, InvalidSignature, TransferFailed
from ..state.balances import TokenLedger
from ..state.canonical import to_address, to_hex
from .authority import ClaimAuthority
from .config import _env_int, _env_str, load_config_from_env
from .operations import parse_claim_request


MAX_BODY_BYTES = 32_000

_CLAIM_ERROR_STATUS = {
    AlreadyClaimed: 409,
    InvalidSignature: 401,
    InvalidProof: 422,
    TransferFailed: 502,
}


def _parse_cors_origins(value: str) -> Set[str]:
    """
    Parse CORS origins list. Supports comma-separated values.

    '*' is ignored: operators must list trusted origins explicitly.
    """
    out: Set[str] = set()
    s = (value or "").strip()
    if not s:
        return out
    for item in s.split(","):
        origin = item.strip()
        if not origin or origin == "*":
            continue
        out.add(origin)
    return out


@dataclass
class RateLimitBucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """Per-IP token bucket. O(1) per request."""

    def __init__(self, *, rpm: int) -> None:
        self._rpm = int(max(0, rpm))
        self._capacity = float(max(1, rpm)) if rpm > 0 else 0.0
        self._refill_per_s = float(rpm) / 60.0 if rpm > 0 else 0.0
        self._buckets: dict[str, RateLimitBucket] = {}

    def allow(self, key: str) -> bool:
        if self._rpm <= 0:
            return True
        now = time.time()
        b = self._buckets.get(key)
        if b is None:
            self._buckets[key] = RateLimitBucket(tokens=self._capacity - 1.0, updated_at=now)
            return True
        dt = max(0.0, now - float(b.updated_at))
        b.tokens = min(self._capacity, float(b.tokens) + dt * self._refill_per_s)
        b.updated_at = now
        if b.tokens >= 1.0:
            b.tokens -= 1.0
            return True
        return False


def claim_error_response(exc: ClaimError) -> Tuple[int, dict]:
    status = _CLAIM_ERROR_STATUS.get(type(exc), 400)
    return status, {"ok": False, "error": exc.code, "detail": str(exc)}


class _Handler(BaseHTTPRequestHandler):
    server_version = "AirdropClaimApi/1"

    max_requestline = 8192
    max_headers = 100

    def _authority(self) -> ClaimAuthority:
        return getattr(self.server, "authority")  # type: ignore[attr-defined]

    def _client_ip(self) -> str:
        # X-Forwarded-For is not trusted.
        return str(self.client_address[0]) if self.client_address else "unknown"

    def _allowed_cors_origin_or_none(self) -> Optional[str]:
        allowed: Set[str] = getattr(self.server, "cors_origins")  # type: ignore[attr-defined]
        origin = self.headers.get("Origin")
        if not isinstance(origin, str) or not origin:
            return None
        return origin if origin in allowed else None

    def _write_json(self, status: int, obj: object, *, cors_origin: Optional[str]) -> None:
        body = json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        self.send_response(int(status))
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Cache-Control", "no-store")
        self.send_header("Content-Length", str(len(body)))
        if cors_origin is not None:
            self.send_header("Access-Control-Allow-Origin", cors_origin)
            self.send_header("Vary", "Origin")
        self.end_headers()
        self.wfile.write(body)

    def _maybe_rate_limit(self) -> bool:
        limiter: TokenBucketRateLimiter = getattr(self.server, "rate_limiter")  # type: ignore[attr-defined]
        return limiter.allow(self._client_ip())

    def do_OPTIONS(self) -> None:  # noqa: N802
        cors_origin = self._allowed_cors_origin_or_none()
        self.send_response(204)
        if cors_origin is not None:
            self.send_header("Access-Control-Allow-Origin", cors_origin)
            self.send_header("Access-Control-Allow-Methods", "GET,POST,OPTIONS")
            self.send_header("Access-Control-Allow-Headers", "Content-Type")
            self.send_header("Access-Control-Max-Age", "600")
            self.send_header("Vary", "Origin")
        self.end_headers()

    def do_GET(self) -> None:  # noqa: N802
        if not self._maybe_rate_limit():
            self._write_json(429, {"ok": False, "error": "rate_limited"}, cors_origin=None)
            return

        cors_origin = self._allowed_cors_origin_or_none()
        path = (self.path or "").split("?", 1)[0]
        authority = self._authority()

        if path == "/health":
            self._write_json(200, {"status": "healthy", "service": "airdrop-api"}, cors_origin=cors_origin)
            return

        if path == "/root":
            domain = authority.domain
            self._write_json(
                200,
                {
                    "merkle_root": to_hex(authority.merkle_root),
                    "domain": {
                        "name": domain.name,
                        "version": domain.version,
                        "chain_id": domain.chain_id,
                        "verifying_contract": domain.verifying_contract,
                    },
                },
                cors_origin=cors_origin,
            )
            return

        if path.startswith("/claimed/"):
            try:
                account = to_address(path[len("/claimed/"):])
            except (TypeError, ValueError) as exc:
                self._write_json(400, {"ok": False, "error": "bad_request", "detail": str(exc)}, cors_origin=cors_origin)
                return
            self._write_json(
                200,
                {"account": account, "claimed": authority.has_claimed(account)},
                cors_origin=cors_origin,
            )
            return

        self._write_json(404, {"ok": False, "error": "not_found"}, cors_origin=cors_origin)

    def do_POST(self) -> None:  # noqa: N802
        if not self._maybe_rate_limit():
            self._write_json(429, {"ok": False, "error": "rate_limited"}, cors_origin=None)
            return

        cors_origin = self._allowed_cors_origin_or_none()
        path = (self.path or "").split("?", 1)[0]
        if path != "/claim":
            self._write_json(404, {"ok": False, "error": "not_found"}, cors_origin=cors_origin)
            return

        try:
            length = int(self.headers.get("Content-Length", ""))
        except ValueError:
            self._write_json(411, {"ok": False, "error": "length_required"}, cors_origin=cors_origin)
            return
        if length < 0 or length > MAX_BODY_BYTES:
            self._write_json(413, {"ok": False, "error": "body_too_large"}, cors_origin=cors_origin)
            return

        try:
            payload = json.loads(self.rfile.read(length).decode("utf-8"))
            request = parse_claim_request(payload)
        except (UnicodeDecodeError, ValueError) as exc:
            self._write_json(400, {"ok": False, "error": "bad_request", "detail": str(exc)}, cors_origin=cors_origin)
            return

        try:
            receipt = self._authority().claim_request(request)
        except ClaimError as exc:
            status, body = claim_error_response(exc)
            self._write_json(status, body, cors_origin=cors_origin)
            return

        self._write_json(
            200,
            {"ok": True, "event": receipt.event.to_dict(), "leaf": to_hex(receipt.leaf)},
            cors_origin=cors_origin,
        )

    def log_message(self, fmt: str, *args: object) -> None:
        # Request line without the query string; no headers.
        msg = fmt % args if args else fmt
        line = f"{self.command} {self.path.split('?', 1)[0]} => {msg}"
        print(line)


def make_server(
    authority: ClaimAuthority,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
    cors_origins: Optional[Set[str]] = None,
    rpm: int = 600,
) -> ThreadingHTTPServer:
    httpd = ThreadingHTTPServer((host, port), _Handler)
    httpd.authority = authority  # type: ignore[attr-defined]
    httpd.cors_origins = set(cors_origins or ())  # type: ignore[attr-defined]
    httpd.rate_limiter = TokenBucketRateLimiter(rpm=rpm)  # type: ignore[attr-defined]
    return httpd


def main(argv: Optional[Sequence[str]] = None) -> int:
    _ = argv
    env = os.environ
    config = load_config_from_env(env)
    token = TokenLedger(config.domain.verifying_contract, symbol=config.token_symbol)
    token.mint(token.holder, _env_int(env, "AIRDROP_FUNDING", 0, lo=0, hi=2**256 - 1))
    authority = ClaimAuthority(config, token)

    host = _env_str(env, "API_HOST", "127.0.0.1")
    port = _env_int(env, "API_PORT", 8000, lo=1, hi=65535)
    cors_origins = _parse_cors_origins(_env_str(env, "CORS_ORIGINS", ""))
    rpm = _env_int(env, "RATE_LIMIT_RPM", 600, lo=0, hi=1_000_000)

    httpd = make_server(authority, host=host, port=port, cors_origins=cors_origins, rpm=rpm)
    print(f"airdrop-api listening on http://{host}:{port} (root={to_hex(config.merkle_root)}, rpm={rpm})")
    httpd.serve_forever(poll_interval=0.25)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
