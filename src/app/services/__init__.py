"""Serviços de aplicação.

Unidades reutilizáveis do relay: sanitização, origens, roteamento e
entrega. Implementações concretas de IO ficam em app/infra/ e api/connectors/.
"""
