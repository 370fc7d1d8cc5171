"""Políticas de admissão: origem, rate limit e idempotência.

Funções e classes sem IO próprio além do store injetado.
"""

from app.policies.idempotency import IDEMPOTENCY_TTL_SECONDS, IdempotencyGuard, payload_fingerprint
from app.policies.origin import matches_origin, normalize_host
from app.policies.rate_limit import RATE_WINDOW_MS, SlidingWindowRateLimiter

__all__ = [
    "IDEMPOTENCY_TTL_SECONDS",
    "RATE_WINDOW_MS",
    "IdempotencyGuard",
    "SlidingWindowRateLimiter",
    "matches_origin",
    "normalize_host",
    "payload_fingerprint",
]
