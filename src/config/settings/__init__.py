"""Agregador de settings do Contact Relay.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    KeyValueBackend,
    StoreSettings,
    get_base_settings,
    get_store_settings,
)

# Relay settings
from config.settings.relay import (
    TURNSTILE_VERIFY_URL,
    RelaySettings,
    get_relay_settings,
    parse_allowed_origins,
)

# Channel-specific settings
from config.settings.telegram import (
    TELEGRAM_API_BASE_URL,
    TelegramSettings,
    get_telegram_settings,
    parse_routing_json,
)

__all__ = [
    # Constants
    "TELEGRAM_API_BASE_URL",
    "TURNSTILE_VERIFY_URL",
    # Base
    "BaseSettings",
    "Environment",
    "KeyValueBackend",
    # Relay
    "RelaySettings",
    "StoreSettings",
    # Channels
    "TelegramSettings",
    "get_base_settings",
    "get_relay_settings",
    "get_store_settings",
    "get_telegram_settings",
    "parse_allowed_origins",
    "parse_routing_json",
]
