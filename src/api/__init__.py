"""API: camada de borda: rotas HTTP, middlewares e connectors.

Responsabilidades:
- Receber submissões do formulário e chamadas administrativas
- Aplicar CORS dinâmico por origem
- Falar com APIs externas (Telegram Bot API, Turnstile)

Subpastas:
- connectors/: adapters HTTP para serviços externos
- middleware/: middlewares ASGI
- routes/: endpoints HTTP (relay, admin, health)

NÃO PODE conter: políticas de admissão, roteamento, orquestração de use cases.
"""
