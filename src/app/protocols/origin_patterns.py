"""Protocolo do provedor de padrões de origem permitidos."""

from __future__ import annotations

from typing import Protocol


class OriginPatternProviderProtocol(Protocol):
    """Fornece a lista mesclada (dinâmica + estática) de padrões.

    Lista vazia significa "todas as origens permitidas".
    """

    async def load_patterns(self) -> list[str]: ...
