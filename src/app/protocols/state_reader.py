"""Contrato de leitura do estado de inicialização.

Consumidores (splash, navegação) recebem apenas esta visão:
snapshot + assinatura. Somente o orquestrador escreve na máquina.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from fsm.types.transition import InitializationSnapshot


class InitializationStateReader(Protocol):
    """Visão somente-leitura da máquina de inicialização."""

    def get_snapshot(self) -> InitializationSnapshot: ...

    def subscribe(
        self,
        listener: Callable[[InitializationSnapshot], None],
    ) -> Callable[[], None]: ...
