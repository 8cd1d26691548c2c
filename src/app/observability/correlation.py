"""Gerenciamento do run_id da execução de bootstrap.

O run_id identifica uma execução de `initialize()` e é injetado
nos logs pelo RunIdFilter. Usa ContextVar para ser async-safe:
cada execução roda na sua própria task e herda uma cópia do contexto.

Uso:
    token = set_run_id()
    try:
        # executar tarefas de bootstrap
    finally:
        reset_run_id(token)
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_run_id: ContextVar[str] = ContextVar("bootstrap_run_id", default="")


def get_run_id() -> str:
    """Retorna o run_id do contexto atual (string vazia se não definido)."""
    return _run_id.get()


def set_run_id(run_id: str | None = None) -> Token[str]:
    """Define o run_id no contexto atual.

    Args:
        run_id: ID a definir. Se None, gera um novo.

    Returns:
        Token para reset posterior via reset_run_id().
    """
    return _run_id.set(run_id or generate_run_id())


def reset_run_id(token: Token[str]) -> None:
    """Restaura o run_id ao valor anterior."""
    _run_id.reset(token)


def generate_run_id() -> str:
    """Gera um novo run_id curto (12 hex)."""
    return uuid.uuid4().hex[:12]
