"""Camada de apresentação acoplada ao estado de inicialização."""

from app.presentation.splash import (
    DEFAULT_BRANDED_MIN_DURATION,
    DEFAULT_INITIAL_DURATION,
    SplashPhase,
    SplashPresentationController,
    SplashView,
)

__all__ = [
    "DEFAULT_BRANDED_MIN_DURATION",
    "DEFAULT_INITIAL_DURATION",
    "SplashPhase",
    "SplashPresentationController",
    "SplashView",
]
