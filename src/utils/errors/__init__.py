"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AuthError,
    BootstrapError,
    ContentLoadError,
    CriticalBootstrapError,
    NetworkError,
    ResetCallbackError,
)

__all__ = [
    "AuthError",
    "BootstrapError",
    "ContentLoadError",
    "CriticalBootstrapError",
    "NetworkError",
    "ResetCallbackError",
]
