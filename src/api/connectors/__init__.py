"""Connectors: adapters de borda para APIs externas.

Estrutura:
- http_base.py: cliente HTTP (httpx) compartilhado
- telegram/: Telegram Bot API (sendMessage)
- turnstile/: Cloudflare Turnstile (siteverify)

Cada API tem seu próprio connector, garantindo SRP e isolamento de falhas.
"""

__all__: list[str] = []
