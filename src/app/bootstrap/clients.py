"""Cliente Redis compartilhado pelos stores chave-valor."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings, get_store_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis[bytes]:
    """Singleton do processo; fechado pelo lifespan no shutdown.

    Raises:
        ValueError: REDIS_URL vazia.
    """
    from redis.asyncio import Redis as AsyncRedis

    redis_url = get_base_settings().redis_url
    if not redis_url:
        raise ValueError("REDIS_URL não configurado")

    timeout = get_store_settings().redis_timeout_seconds
    client: AsyncRedis[bytes] = AsyncRedis.from_url(
        redis_url,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )
    logger.info("redis_client_created", extra={"timeout_seconds": timeout})
    return client
