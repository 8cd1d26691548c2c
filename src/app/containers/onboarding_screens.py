"""Container das telas de onboarding pré-carregadas.

Container de estado independente: guarda apenas as próprias telas e
registra o próprio reset no ContextResetRegistry na construção.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.content import ScreenDefinition
    from app.resets.registry import ContextResetRegistry

logger = logging.getLogger(__name__)

OWNER_ID = "onboarding_screens"


class OnboardingScreensStore:
    """Telas de onboarding disponíveis para o fluxo não autenticado."""

    __slots__ = ("_loaded", "_screens")

    def __init__(self, registry: ContextResetRegistry | None = None) -> None:
        self._screens: tuple[ScreenDefinition, ...] = ()
        self._loaded = False
        if registry is not None:
            registry.register(OWNER_ID, self.clear)

    @property
    def screens(self) -> tuple[ScreenDefinition, ...]:
        return self._screens

    @property
    def is_loaded(self) -> bool:
        """True após a primeira entrega (mesmo que vazia)."""
        return self._loaded

    def set_screens(self, screens: list[ScreenDefinition]) -> None:
        self._screens = tuple(screens)
        self._loaded = True
        logger.debug("onboarding_screens_set", extra={"count": len(self._screens)})

    def get_screen(self, screen_id: str) -> ScreenDefinition | None:
        for screen in self._screens:
            if screen.id == screen_id:
                return screen
        return None

    def clear(self) -> None:
        self._screens = ()
        self._loaded = False
