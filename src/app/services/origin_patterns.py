"""Provedor dos padrões de origem permitidos.

Mescla o documento dinâmico `allowed_origins` do store de configuração
com a lista estática de ALLOWED_ORIGINS. Lido a cada admissão, sem
cache, para refletir alterações da API administrativa imediatamente.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from config.logging import log_fallback

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.protocols.key_value_store import KeyValueStoreProtocol

logger = logging.getLogger(__name__)

ORIGINS_CONFIG_KEY = "allowed_origins"


def normalize_patterns(patterns: Iterable[Any]) -> list[str]:
    """Aplica trim + lower-case e descarta padrões vazios."""
    normalized = (str(pattern).strip().lower() for pattern in patterns)
    return [pattern for pattern in normalized if pattern]


@dataclass(slots=True)
class OriginsDocument:
    """Documento persistido com os padrões dinâmicos."""

    patterns: list[str] = field(default_factory=list)
    updated_at: str | None = None

    def to_json(self) -> str:
        return json.dumps({"patterns": self.patterns, "updatedAt": self.updated_at})

    @classmethod
    def from_json(cls, raw: str) -> OriginsDocument:
        """Deserializa documento; levanta ValueError se malformado."""
        data = json.loads(raw)
        if not isinstance(data, dict) or not isinstance(data.get("patterns"), list):
            raise ValueError("origins_document_malformed")
        return cls(
            patterns=[str(p) for p in data["patterns"]],
            updated_at=data.get("updatedAt"),
        )


class OriginPatternProvider:
    """Lê e grava o conjunto de origens permitidas.

    Args:
        config_store: Store de configuração
        static_patterns: Padrões de ALLOWED_ORIGINS (já normalizados)
    """

    def __init__(
        self,
        config_store: KeyValueStoreProtocol,
        static_patterns: Iterable[str] = (),
    ) -> None:
        self._store = config_store
        self._static_patterns = list(static_patterns)

    @property
    def static_patterns(self) -> list[str]:
        return list(self._static_patterns)

    async def load_patterns(self) -> list[str]:
        """Retorna padrões dinâmicos + estáticos, sem repetição.

        Documento ausente, vazio ou ilegível resulta apenas nos estáticos.
        """
        try:
            document = await self.load_document()
        except Exception as exc:
            log_fallback(
                logger,
                "origin_patterns",
                reason="config_read_failed",
                error_type=type(exc).__name__,
            )
            return self.static_patterns

        if document is None or not document.patterns:
            return self.static_patterns

        return list(dict.fromkeys([*document.patterns, *self._static_patterns]))

    async def load_document(self) -> OriginsDocument | None:
        """Lê o documento dinâmico; None se ausente.

        Raises:
            ValueError: Documento malformado.
            InfrastructureError: Falha do store.
        """
        raw = await self._store.get(ORIGINS_CONFIG_KEY)
        if not raw:
            return None
        return OriginsDocument.from_json(raw)

    async def save_patterns(self, patterns: Iterable[str]) -> OriginsDocument:
        """Substitui os padrões dinâmicos, atualizando updatedAt."""
        document = OriginsDocument(
            patterns=list(patterns),
            updated_at=datetime.now(UTC).isoformat(),
        )
        await self._store.put(ORIGINS_CONFIG_KEY, document.to_json())
        logger.info("origin_patterns_saved", extra={"pattern_count": len(document.patterns)})
        return document
