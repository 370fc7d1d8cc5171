"""Conector Telegram - adapter de borda para a Bot API.

Único ponto de IO com api.telegram.org.
"""

from .api_errors import parse_send_response
from .http_client import TelegramHttpClient, create_telegram_http_client

__all__ = [
    "TelegramHttpClient",
    "create_telegram_http_client",
    "parse_send_response",
]
