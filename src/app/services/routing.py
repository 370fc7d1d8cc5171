"""Resolução de destino (bot + chat) por domínio de origem.

Regra por hostname, com fallback para as credenciais padrão. O cache de
migração (`migrated_chat:<chat_id>`) tem precedência sobre o chat
configurado, de modo que a configuração pode continuar apontando para
o id original do grupo após a migração para supergrupo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.models import RouteTarget
from config.logging import log_fallback

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

MIGRATED_CHAT_PREFIX = "migrated_chat:"
MIGRATION_TTL_SECONDS = 60 * 60 * 24 * 365


class ChatRouter:
    """Resolve RouteTarget para um hostname.

    Args:
        config_store: Store de configuração (cache de migração)
        routing_table: hostname -> {"chat_id", "bot_token"}
        default_bot_token: Token padrão
        default_chat_id: Chat padrão
    """

    def __init__(
        self,
        config_store: KeyValueStoreProtocol,
        routing_table: Mapping[str, Mapping[str, str]],
        default_bot_token: str,
        default_chat_id: str,
    ) -> None:
        self._store = config_store
        self._routing_table = routing_table
        self._default_bot_token = default_bot_token
        self._default_chat_id = default_chat_id

    async def resolve(self, host: str) -> RouteTarget:
        """Resolve credencial e chat para o host, aplicando migração."""
        rule = self._routing_table.get(host, {})
        chat_id = rule.get("chat_id") or self._default_chat_id
        bot_token = rule.get("bot_token") or self._default_bot_token

        configured_chat_id = chat_id
        if chat_id:
            chat_id = await self._apply_migration(chat_id)

        return RouteTarget(
            bot_token=bot_token,
            chat_id=chat_id,
            configured_chat_id=configured_chat_id,
        )

    async def _apply_migration(self, chat_id: str) -> str:
        try:
            migrated = await self._store.get(f"{MIGRATED_CHAT_PREFIX}{chat_id}")
        except Exception as exc:
            log_fallback(
                logger,
                "chat_migration_cache",
                reason="config_read_failed",
                error_type=type(exc).__name__,
            )
            return chat_id
        if migrated:
            logger.debug("chat_migration_applied")
            return migrated
        return chat_id

    async def remember_migration(self, original_chat_id: str, migrated_chat_id: str) -> None:
        """Persiste o novo chat id para o id original."""
        await self._store.put(
            f"{MIGRATED_CHAT_PREFIX}{original_chat_id}",
            migrated_chat_id,
            ttl_seconds=MIGRATION_TTL_SECONDS,
        )
        logger.info("chat_migration_cached")
