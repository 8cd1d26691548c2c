"""SessionLifecycle — reação a mudanças de sessão do provedor de auth.

Traduz eventos de autenticação (cold start, sign-in, sign-out) em
chamadas ao orquestrador e ao coordenador de logout. Mudanças que
preservam o mesmo user_id (ex: refresh de token) não reiniciam o
bootstrap.

Cada mudança efetiva registra um AuthContext:
    - cold start sem sessão / sign-out -> INITIAL_LOAD
    - cold start com sessão restaurada -> SESSION_RESTORE
    - sign-in fora do onboarding       -> LOGIN_EXISTING_USER
    - sign-in durante o onboarding     -> POST_ONBOARDING

Durante o onboarding o bootstrap fica bloqueado; `finish_onboarding()`
libera e executa a inicialização pendente.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.sessions.models import AuthContext

if TYPE_CHECKING:
    from app.bootstrap.orchestrator import BootstrapOrchestrator
    from app.resets.logout import LogoutCoordinator
    from app.sessions.models import Session
    from app.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class SessionLifecycle:
    """Dispara o bootstrap a cada mudança efetiva de sessão."""

    __slots__ = ("_auth_context", "_logout", "_orchestrator", "_session_store")

    def __init__(
        self,
        session_store: SessionStore,
        orchestrator: BootstrapOrchestrator,
        logout: LogoutCoordinator,
    ) -> None:
        self._session_store = session_store
        self._orchestrator = orchestrator
        self._logout = logout
        self._auth_context = AuthContext.INITIAL_LOAD

    @property
    def auth_context(self) -> AuthContext:
        return self._auth_context

    @property
    def onboarding_in_progress(self) -> bool:
        return self._orchestrator.onboarding_in_progress

    def begin_onboarding(self) -> None:
        """Marca o início do fluxo de onboarding (bloqueia o bootstrap)."""
        self._orchestrator.set_onboarding_in_progress(True)

    async def finish_onboarding(self) -> None:
        """Encerra o onboarding e executa a inicialização adiada, se houver."""
        self._orchestrator.set_onboarding_in_progress(False)
        await self._orchestrator.initialize()

    async def start(self, initial_session: Session | None) -> None:
        """Cold start: conclui a restauração da sessão e executa o bootstrap."""
        self._set_auth_context(
            AuthContext.SESSION_RESTORE if initial_session else AuthContext.INITIAL_LOAD
        )
        self._session_store.resolve(initial_session)
        await self._orchestrator.initialize()

    async def on_session_changed(self, session: Session | None) -> None:
        """Processa uma notificação do provedor de autenticação.

        Args:
            session: Nova sessão (None = sign-out)
        """
        if not self._session_store.is_resolved:
            # Primeira notificação do provedor conclui o cold start
            await self.start(session)
            return

        current = self._session_store.get_session()
        previous_user = current.user_id if current else None
        new_user = session.user_id if session else None

        if previous_user == new_user:
            if session is not None:
                # Mesmo usuário: apenas atualiza a credencial
                self._session_store.set_session(session)
            logger.debug("session_change_ignored", extra={"user_id": new_user})
            return

        if session is None:
            logger.info("session_signed_out", extra={"user_id": previous_user})
            self._set_auth_context(AuthContext.INITIAL_LOAD)
            await self._logout.logout()
            return

        if previous_user is not None:
            # Troca direta de usuário: limpa o estado do anterior antes
            await self._logout.logout(reinitialize=False)

        self._set_auth_context(
            AuthContext.POST_ONBOARDING
            if self.onboarding_in_progress
            else AuthContext.LOGIN_EXISTING_USER
        )
        logger.info(
            "session_signed_in",
            extra={
                "user_id": new_user,
                "previous_user_id": previous_user,
                "auth_context": self._auth_context.value,
            },
        )
        # A sessão é registrada antes de aguardar: uma execução parada em
        # WAITING_FOR_SESSION só retoma após a resolução
        self._session_store.set_session(session)
        await self._orchestrator.wait_for_active_run()

        report = self._orchestrator.last_report
        snapshot = self._orchestrator.state.get_snapshot()
        if (
            snapshot.is_ready
            and report is not None
            and report.authenticated
            and report.user_id == new_user
        ):
            logger.debug("session_bootstrap_already_done", extra={"user_id": new_user})
            return

        self._orchestrator.reset_initialization()
        await self._orchestrator.initialize()

    def _set_auth_context(self, context: AuthContext) -> None:
        if context == self._auth_context:
            return
        logger.info(
            "auth_context_changed",
            extra={
                "previous_context": self._auth_context.value,
                "auth_context": context.value,
            },
        )
        self._auth_context = context
