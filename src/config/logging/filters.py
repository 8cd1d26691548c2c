"""Filters de logging para injeção de contexto.

Campos injetados:
- run_id: ID da execução de bootstrap corrente
- service: Nome do serviço
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class RunIdFilter(logging.Filter):
    """Injeta run_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        run_id_getter: Função que retorna o run_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        run_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_run_id = run_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona run_id e service ao record.

        Se run_id já foi passado via `extra`, preserva o valor.

        Returns:
            True sempre (não filtra, apenas enriquece).
        """
        existing = getattr(record, "run_id", None)
        record.run_id = existing if existing else self._get_run_id()
        record.service = self._service_name
        return True
