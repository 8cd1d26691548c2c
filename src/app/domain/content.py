"""Definições de conteúdo de onboarding recebidas da API de conteúdo.

O bootstrap não interpreta o conteúdo; apenas valida o formato
mínimo e entrega as telas ao container de onboarding.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ScreenOption(BaseModel):
    """Opção de escolha de uma tela."""

    model_config = ConfigDict(extra="ignore")

    label: str
    value: str
    description: str | None = None


class ScreenDefinition(BaseModel):
    """Tela do fluxo de onboarding."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    next_screen: str | None = Field(default=None, alias="nextScreen")
    options: list[ScreenOption] = Field(default_factory=list)
