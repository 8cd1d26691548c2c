"""Observabilidade — run_id de bootstrap e métricas.

Uso:
    from app.observability import get_run_id, set_run_id, reset_run_id
    from app.observability import record_latency, record_bootstrap_outcome
"""

from app.observability.correlation import (
    generate_run_id,
    get_run_id,
    reset_run_id,
    set_run_id,
)
from app.observability.metrics import (
    record_bootstrap_outcome,
    record_latency,
    record_reset,
)

__all__ = [
    "generate_run_id",
    "get_run_id",
    "record_bootstrap_outcome",
    "record_latency",
    "record_reset",
    "reset_run_id",
    "set_run_id",
]
