"""Agregador de settings da aplicação.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.bootstrap import (
    DEFAULT_CONTENT_API_URL,
    BootstrapSettings,
    get_bootstrap_settings,
)

__all__ = [
    "DEFAULT_CONTENT_API_URL",
    "BaseSettings",
    "BootstrapSettings",
    "Environment",
    "get_base_settings",
    "get_bootstrap_settings",
]
