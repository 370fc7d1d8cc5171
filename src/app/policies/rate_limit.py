"""Rate limit por janela deslizante sobre store chave-valor.

Cada identificador guarda `{"timestamps": [ms, ...]}` em `rate:<id>`,
com TTL de 60 s a partir da última escrita.

Leitura seguida de escrita sem lock: requisições concorrentes do
mesmo identificador podem perder um append e subcontar
temporariamente. Tentativas bloqueadas não são registradas.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

RATE_WINDOW_MS = 60_000
RATE_ENTRY_TTL_SECONDS = 60
RATE_KEY_PREFIX = "rate:"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _decode_timestamps(raw: str | None) -> list[int]:
    if not raw:
        return []
    try:
        data = json.loads(raw)
        timestamps = data.get("timestamps", [])
        return [int(ts) for ts in timestamps]
    except (ValueError, TypeError, AttributeError):
        logger.warning("rate_limit_entry_corrupt")
        return []


class SlidingWindowRateLimiter:
    """Limita requisições por identificador numa janela de 60 s.

    Args:
        store: Store do rate limit
        window_ms: Tamanho da janela em ms
        clock_ms: Fonte de tempo em ms (injetável em testes)
    """

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        window_ms: int = RATE_WINDOW_MS,
        clock_ms: Callable[[], int] = _now_ms,
    ) -> None:
        self._store = store
        self._window_ms = window_ms
        self._clock_ms = clock_ms

    async def check_and_record(self, identifier: str, limit_per_minute: int) -> bool:
        """Verifica o limite e registra a requisição se aceita.

        Args:
            identifier: Identificador do cliente (ex.: IP)
            limit_per_minute: Máximo de requisições aceitas na janela

        Returns:
            True se limitado (requisição não registrada); False se aceita.
        """
        key = f"{RATE_KEY_PREFIX}{identifier}"
        now = self._clock_ms()
        cutoff = now - self._window_ms

        timestamps = [ts for ts in _decode_timestamps(await self._store.get(key)) if ts > cutoff]

        if len(timestamps) >= limit_per_minute:
            logger.info(
                "rate_limit_exceeded",
                extra={"window_count": len(timestamps), "limit": limit_per_minute},
            )
            return True

        timestamps.append(now)
        await self._store.put(
            key,
            json.dumps({"timestamps": timestamps}),
            ttl_seconds=RATE_ENTRY_TTL_SECONDS,
        )
        return False
