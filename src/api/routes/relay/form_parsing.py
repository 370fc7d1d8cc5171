"""Leitura do corpo de POST /send (JSON ou form-encoded)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.models import ContactFormData

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fastapi import Request

logger = logging.getLogger(__name__)


def resolve_client_ip(headers: Mapping[str, str]) -> str:
    """Identificador do cliente para rate limit.

    Prioridade: CF-Connecting-IP, X-Forwarded-For, "unknown".
    """
    return (
        headers.get("cf-connecting-ip")
        or headers.get("x-forwarded-for")
        or "unknown"
    )


async def read_contact_form(request: Request) -> ContactFormData:
    """Parseia o corpo conforme Content-Type.

    JSON malformado ou que não seja objeto, e Content-Type desconhecido,
    resultam em formulário vazio.
    """
    content_type = request.headers.get("content-type", "").lower()

    if "application/json" in content_type:
        try:
            data = await request.json()
        except ValueError:
            logger.info("relay_body_invalid_json")
            return ContactFormData()
        if not isinstance(data, dict):
            logger.info("relay_body_not_object", extra={"body_type": type(data).__name__})
            return ContactFormData()
        return ContactFormData.from_mapping(data)

    if "form" in content_type:
        form = await request.form()
        # Uploads são ignorados; só campos texto interessam
        fields = {key: value for key, value in form.items() if isinstance(value, str)}
        return ContactFormData.from_mapping(fields)

    return ContactFormData()
