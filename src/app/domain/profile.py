"""Perfil do usuário retornado pelo serviço de usuário no bootstrap."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """Dados mínimos do perfil usados para decidir os próximos passos."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    user_id: str = Field(..., min_length=1)
    squad_id: str | None = None
