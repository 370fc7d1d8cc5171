"""Protocolo de verificação de captcha."""

from __future__ import annotations

from typing import Protocol


class CaptchaVerifierProtocol(Protocol):
    """Contrato mínimo para verificação server-side de desafio humano."""

    async def verify(self, token: str, secret: str) -> bool: ...
