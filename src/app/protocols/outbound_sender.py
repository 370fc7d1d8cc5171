"""Protocolos de envio outbound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import DeliveryResult


class MessageDeliveryProtocol(Protocol):
    """Contrato mínimo para entregar texto a um chat com retry."""

    async def deliver(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
    ) -> DeliveryResult: ...
