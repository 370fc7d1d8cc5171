"""Deduplicação de submissões por token de idempotência.

O token vem do header `Idempotency-Key` ou do fingerprint dos campos
normalizados. Marcador `idem:<token>` vive 300 s.

Leitura seguida de escrita: duas submissões idênticas simultâneas
podem passar ambas. É um redutor de duplicatas, não uma barreira
transacional.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

IDEMPOTENCY_TTL_SECONDS = 300
IDEMPOTENCY_KEY_PREFIX = "idem:"


def payload_fingerprint(fields: Mapping[str, str]) -> str:
    """Gera hash SHA-256 (hex) determinístico dos campos.

    JSON compacto com chaves ordenadas: independe da ordem de inserção.
    """
    body = json.dumps(dict(fields), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


class IdempotencyGuard:
    """Marca tokens vistos e detecta repetições dentro do TTL."""

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        ttl_seconds: int = IDEMPOTENCY_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._ttl_seconds = ttl_seconds

    async def is_duplicate(self, token: str) -> bool:
        """Retorna True se o token já foi visto; caso contrário, marca-o.

        Token vazio nunca é duplicado.
        """
        if not token:
            return False

        key = f"{IDEMPOTENCY_KEY_PREFIX}{token}"
        if await self._store.get(key):
            logger.info("idempotency_duplicate_detected", extra={"key": token[:8] + "..."})
            return True

        await self._store.put(key, "1", ttl_seconds=self._ttl_seconds)
        return False
