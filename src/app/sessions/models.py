"""Modelo de sessão autenticada.

A sessão é criada no sign-in e destruída no sign-out ou na expiração.
O bootstrap apenas lê a sessão; nunca a altera.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class AuthContext(StrEnum):
    """Motivo da última mudança de sessão (qual bootstrap está em curso)."""

    INITIAL_LOAD = "initial_load"
    SESSION_RESTORE = "session_restore"
    LOGIN_EXISTING_USER = "login_existing_user"
    POST_ONBOARDING = "post_onboarding"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Session:
    """Sessão autenticada do usuário.

    Atributos:
        user_id: Identificador do usuário no provedor de autenticação
        credential_handle: Handle opaco da credencial (nunca logar)
        issued_at: Momento de emissão
        expires_at: Momento de expiração (None = sem expiração conhecida)
    """

    user_id: str
    credential_handle: str = field(repr=False)
    issued_at: datetime = field(default_factory=_utcnow)
    expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.user_id or not self.user_id.strip():
            raise ValueError("user_id não pode ser vazio")

    @property
    def is_expired(self) -> bool:
        """True se a sessão passou do momento de expiração."""
        if self.expires_at is None:
            return False
        return _utcnow() >= self.expires_at

    def to_log_dict(self) -> dict[str, Any]:
        """Representação segura para logs (sem credencial)."""
        return {
            "user_id": self.user_id,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "is_expired": self.is_expired,
        }
