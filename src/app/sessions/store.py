"""SessionStore — detentor da sessão autenticada corrente.

No cold start a sessão é restaurada de forma assíncrona pelo provedor
de autenticação; até lá o store fica "não resolvido" e o bootstrap
aguarda em WAITING_FOR_SESSION.
"""

from __future__ import annotations

import asyncio
import logging

from app.sessions.models import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Guarda a sessão corrente (ou nenhuma).

    Ciclo de vida ligado aos eventos de sign-in/sign-out. Lido pelo
    orquestrador, escrito apenas pelo fluxo de autenticação.
    """

    __slots__ = ("_resolved", "_session")

    def __init__(
        self,
        session: Session | None = None,
        *,
        resolved: bool = True,
    ) -> None:
        """Inicializa o store.

        Args:
            session: Sessão inicial (None = sem sessão)
            resolved: False enquanto a restauração da sessão está pendente
        """
        self._session = session
        self._resolved = asyncio.Event()
        if resolved:
            self._resolved.set()

    @property
    def is_resolved(self) -> bool:
        """True quando a presença/ausência de sessão já é conhecida."""
        return self._resolved.is_set()

    def get_session(self) -> Session | None:
        """Retorna a sessão corrente; sessões expiradas contam como ausentes."""
        session = self._session
        if session is not None and session.is_expired:
            return None
        return session

    def has_session(self) -> bool:
        """Atalho para `get_session() is not None`."""
        return self.get_session() is not None

    async def wait_resolved(self) -> Session | None:
        """Aguarda a resolução da sessão e a retorna."""
        await self._resolved.wait()
        return self.get_session()

    def resolve(self, session: Session | None) -> None:
        """Conclui a restauração do cold start com a sessão encontrada."""
        self._session = session
        self._resolved.set()
        logger.debug("session_resolved", extra={"has_session": session is not None})

    def set_session(self, session: Session) -> None:
        """Registra a sessão após sign-in."""
        self._session = session
        self._resolved.set()
        logger.info("session_set", extra=session.to_log_dict())

    def clear(self) -> None:
        """Remove a sessão após sign-out."""
        session = self._session
        if session is not None and session.is_expired:
            logger.info("session_expired", extra={"user_id": session.user_id})
        self._session = None
        self._resolved.set()
        logger.info("session_cleared", extra={"had_session": session is not None})
