"""Modelos de domínio da aplicação."""

from app.domain.content import ScreenDefinition, ScreenOption
from app.domain.profile import UserProfile

__all__ = [
    "ScreenDefinition",
    "ScreenOption",
    "UserProfile",
]
