"""Módulo de sessão autenticada.

Exporta o modelo, o store e o ciclo de vida de sessão.
"""

from app.sessions.lifecycle import SessionLifecycle
from app.sessions.models import AuthContext, Session
from app.sessions.store import SessionStore

__all__ = [
    "AuthContext",
    "Session",
    "SessionLifecycle",
    "SessionStore",
]
