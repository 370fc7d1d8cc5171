"""Redis Key-Value Store: persistência com TTL para o relay.

Atende os três stores lógicos (rate limit, idempotência, configuração),
cada um com seu namespace de chaves.

Contrato de Keys:
    Chaves são IPs, hashes SHA-256, ids de chat ou nomes fixos de
    configuração. Nunca conteúdo do formulário.
    Keys são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.key_value_store import KeyValueStoreProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


def _mask(key: str) -> str:
    return key[:8] + "..." if len(key) > 8 else key


class RedisKeyValueStore(KeyValueStoreProtocol):
    """Store chave-valor usando Redis (Upstash compatível).

    Falhas do cliente são convertidas em RedisConnectionError; cabe
    ao chamador decidir entre propagar ou aplicar fallback.

    Args:
        async_redis_client: Cliente Redis assíncrono
        namespace: Prefixo aplicado às chaves
    """

    def __init__(
        self,
        async_redis_client: AsyncRedis[bytes] | None,
        namespace: str = "",
    ) -> None:
        self._async_redis = async_redis_client
        self._namespace = namespace

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._namespace}{key}"

    def _client(self) -> AsyncRedis[bytes]:
        if self._async_redis is None:
            msg = "Async Redis client não configurado"
            raise RuntimeError(msg)
        return self._async_redis

    async def get(self, key: str) -> str | None:
        """Lê valor da chave (decodificado como UTF-8)."""
        client = self._client()
        try:
            raw = await client.get(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao ler chave no Redis") from exc
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    async def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Grava valor com EX quando ttl_seconds informado."""
        client = self._client()
        try:
            if ttl_seconds:
                await client.set(self._key(key), value, ex=ttl_seconds)
            else:
                await client.set(self._key(key), value)
        except Exception as exc:
            raise RedisConnectionError("Falha ao gravar chave no Redis") from exc
        logger.debug("kv_put", extra={"key": _mask(key), "ttl": ttl_seconds})
