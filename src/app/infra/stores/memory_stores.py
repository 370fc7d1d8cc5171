"""Stores em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios
e sem compartilhamento entre processos/instâncias.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from app.protocols.key_value_store import KeyValueStoreProtocol

if TYPE_CHECKING:
    from collections.abc import Callable


class MemoryKeyValueStore(KeyValueStoreProtocol):
    """Store chave-valor em memória com TTL, apenas para dev/test.

    Args:
        namespace: Prefixo aplicado às chaves
        clock: Fonte de tempo em segundos (injetável em testes)
    """

    def __init__(
        self,
        namespace: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._namespace = namespace
        self._clock = clock
        self._store: dict[str, tuple[str, float | None]] = {}  # key -> (value, expires_at)

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def _cleanup_expired(self) -> None:
        """Remove entradas expiradas."""
        now = self._clock()
        expired = [
            k for k, (_, expires_at) in self._store.items()
            if expires_at is not None and expires_at <= now
        ]
        for k in expired:
            del self._store[k]

    async def get(self, key: str) -> str | None:
        """Lê valor se presente e não expirado."""
        self._cleanup_expired()
        entry = self._store.get(self._key(key))
        return entry[0] if entry is not None else None

    async def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Grava valor com expiração opcional."""
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._store[self._key(key)] = (value, expires_at)

    def __len__(self) -> int:
        self._cleanup_expired()
        return len(self._store)
