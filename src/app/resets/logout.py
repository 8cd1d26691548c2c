"""Coordenador de logout.

Sequência:
    1. Resolve um cold start pendente como "sem sessão" e aguarda a
       execução de bootstrap em andamento (se houver)
    2. reset_all() em todos os containers registrados
    3. Limpa o SessionStore
    4. Volta a máquina para IDLE
    5. [opcional] Reexecuta o bootstrap no caminho sem sessão
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.bootstrap.orchestrator import BootstrapOrchestrator
    from app.resets.registry import ContextResetRegistry, ResetSummary
    from app.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class LogoutCoordinator:
    """Único chamador de `ContextResetRegistry.reset_all()`."""

    __slots__ = ("_orchestrator", "_registry", "_session_store")

    def __init__(
        self,
        registry: ContextResetRegistry,
        session_store: SessionStore,
        orchestrator: BootstrapOrchestrator,
    ) -> None:
        self._registry = registry
        self._session_store = session_store
        self._orchestrator = orchestrator

    async def logout(self, *, reinitialize: bool = True) -> ResetSummary:
        """Executa o logout local.

        Args:
            reinitialize: Se True, reexecuta o bootstrap sem sessão para
                pré-carregar o conteúdo do próximo usuário

        Returns:
            ResetSummary do reset dos containers
        """
        logger.info("logout_started", extra={"reinitialize": reinitialize})

        # Um cold start pendente nunca será resolvido após o sign-out
        if not self._session_store.is_resolved:
            self._session_store.resolve(None)

        await self._orchestrator.wait_for_active_run()

        summary = self._registry.reset_all()
        self._session_store.clear()
        self._orchestrator.reset_initialization()

        logger.info(
            "logout_finished",
            extra={
                "reset_ok": summary.ok,
                "failed_owners": list(summary.failed_owners),
            },
        )

        if reinitialize:
            await self._orchestrator.initialize()
        return summary
