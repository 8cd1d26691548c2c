"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente pelo backend de logs.

Métricas suportadas:
- Latência: tempo de cada tarefa de bootstrap
- Resultado: contagem de execuções por estado final
- Reset: callbacks executados/falhos no logout
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_run_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    run_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "bootstrap")
        operation: Nome da operação (ex: "refresh_user")
        latency_ms: Latência em milissegundos
        run_id: ID da execução (usa o do contexto se None)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "run_id": run_id or get_run_id(),
        },
    )


def record_bootstrap_outcome(
    final_state: str,
    task_count: int,
    failed_task: str | None = None,
) -> None:
    """Registra o estado final de uma execução de bootstrap.

    Args:
        final_state: Estado terminal alcançado (COMPLETED/FAILED)
        task_count: Quantidade de tarefas executadas
        failed_task: Nome da tarefa crítica que falhou (se houver)
    """
    logger.info(
        "metric_bootstrap_outcome",
        extra={
            "metric_type": "counter",
            "final_state": final_state,
            "task_count": task_count,
            "failed_task": failed_task,
        },
    )


def record_reset(invoked: int, failed: int) -> None:
    """Registra o resultado de um reset geral de contextos."""
    logger.info(
        "metric_context_reset",
        extra={
            "metric_type": "counter",
            "invoked": invoked,
            "failed": failed,
        },
    )
