"""Protocolo de store chave-valor com expiração.

Contrato consumido por rate limit, idempotência e configuração.
Implementações não oferecem transações: leitura seguida de escrita
pode perder atualizações concorrentes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStoreProtocol(ABC):
    """Contrato mínimo assíncrono para stores chave-valor com TTL.

    Métodos canônicos:
    - get(key) -> str | None
    - put(key, value, ttl_seconds=None) -> None
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Lê valor da chave.

        Returns:
            Valor armazenado ou None se ausente/expirado.
        """

    @abstractmethod
    async def put(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Grava valor, substituindo o anterior.

        Args:
            key: Chave (sem namespace; o store aplica o prefixo)
            value: Valor serializado
            ttl_seconds: Expiração em segundos; None = sem expiração
        """
