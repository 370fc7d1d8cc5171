"""Sanitização dos campos do formulário e montagem da mensagem.

Transformações puras, que nunca falham. Todo texto do usuário
interpolado na mensagem passa por escape de `&`, `<` e `>`, pois a
mensagem é enviada com parse_mode=HTML.
"""

from __future__ import annotations

import re

NAME_MAX_LENGTH = 256
EMAIL_MAX_LENGTH = 256
HANDLE_MAX_LENGTH = 64
MESSAGE_MAX_LENGTH = 5000

PROFILE_URL_BASE = "https://t.me/"

_HANDLE_PREFIX_RE = re.compile(r"^@*(?:https?://t\.me/)?@*", re.IGNORECASE)


def trim_and_bound(value: str | None, max_length: int) -> str:
    """Remove espaços das bordas e trunca em max_length caracteres."""
    return (value or "").strip()[:max_length]


def normalize_handle(value: str | None) -> str:
    """Reduz `@user`, `https://t.me/user/` e variações ao handle puro."""
    handle = _HANDLE_PREFIX_RE.sub("", (value or "").strip(), count=1)
    return handle.rstrip("/")


def escape_html(text: str) -> str:
    """Escapa os três caracteres significativos do HTML do Telegram."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def render_message(
    name: str,
    email: str,
    handle: str,
    body: str,
    origin_host: str,
) -> str:
    """Monta o texto HTML enviado ao chat.

    A linha do Telegram só aparece com handle; a seção de mensagem
    (rótulo + corpo) só aparece com corpo.
    """
    lines = [
        "<b>New Contact Request</b>",
        f"<b>Origin:</b> {escape_html(origin_host) or '-'}",
        f"<b>Name:</b> {escape_html(name) or '-'}",
        f"<b>Email:</b> {escape_html(email) or '-'}",
    ]

    if handle:
        lines.append(f"<b>Telegram:</b> {PROFILE_URL_BASE}{escape_html(handle)}")

    if body:
        lines.append("<b>Message:</b>")
        lines.append(escape_html(body))

    return "\n".join(lines)
