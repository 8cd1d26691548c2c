"""App — bootstrap da sessão: orquestração, reset de contexto e apresentação.

Subpastas:
- bootstrap/: composition root e orquestrador de inicialização
- sessions/: sessão corrente e ciclo de vida (sign-in/logout)
- resets/: registro de reset de containers e coordenação de logout
- containers/: stores de dados com escopo de usuário
- presentation/: controller do splash
- infra/: implementações concretas de IO (API de conteúdo)
- protocols/: contratos/interfaces dos colaboradores
- domain/: modelos de conteúdo
- observability/: run_id e métricas em log

Padrão: app executa; fsm governa; config configura; utils apoia.
"""
