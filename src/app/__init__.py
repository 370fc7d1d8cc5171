"""App: coração do sistema: orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: pipeline de admissão do relay
- services/: sanitização, roteamento, origens e entrega
- infra/: implementações concretas de IO (stores)
- protocols/: contratos/interfaces e modelos
- policies/: políticas (origem, rate limit, idempotência)
- observability/: correlation_id e métricas em logs estruturados

Padrão: app executa; api adapta; config configura; utils apoia.
"""
