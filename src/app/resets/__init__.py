"""Reset coordenado de containers de estado no logout."""

from app.resets.logout import LogoutCoordinator
from app.resets.registry import ContextResetRegistry, ResetFn, ResetSummary

__all__ = [
    "ContextResetRegistry",
    "LogoutCoordinator",
    "ResetFn",
    "ResetSummary",
]
