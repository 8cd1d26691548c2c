"""Contratos dos colaboradores externos invocados pelo bootstrap.

Cada operação é assumida idempotente (at-least-once); o bootstrap
não faz retry, apenas classifica a falha como crítica ou não.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.content import ScreenDefinition
    from app.domain.profile import UserProfile


class ContentServiceProtocol(ABC):
    """Fonte das definições de onboarding (caminho não autenticado)."""

    @abstractmethod
    async def fetch_onboarding_flow(self) -> list[ScreenDefinition]:
        """Retorna as telas de onboarding.

        Raises:
            ContentLoadError: Falha não fatal; o chamador aplica fallback.
        """


class UserServiceProtocol(ABC):
    """Perfil do usuário autenticado."""

    @abstractmethod
    async def refresh(self) -> UserProfile | None:
        """Recarrega o perfil.

        Returns:
            Perfil atualizado; `squad_id` ausente indica usuário sem squad

        Raises:
            NetworkError: Falha de rede.
            AuthError: Credencial rejeitada.
        """


class SquadServiceProtocol(ABC):
    """Dados do squad do usuário autenticado."""

    @abstractmethod
    async def refresh(self, squad_id: str) -> None:
        """Recarrega o squad informado no perfil.

        Raises:
            NetworkError: Falha de rede.
        """


class TimezoneServiceProtocol(ABC):
    """Registro da timezone do dispositivo no backend."""

    @abstractmethod
    async def update(self, timezone: str) -> None: ...


class HabitServiceProtocol(ABC):
    """Hábitos do usuário (carga opcional no bootstrap autenticado)."""

    @abstractmethod
    async def load(self) -> None: ...


class ProgressServiceProtocol(ABC):
    """Histórico de progresso (carga opcional no bootstrap autenticado)."""

    @abstractmethod
    async def load_history(self) -> None: ...
