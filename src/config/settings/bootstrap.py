"""Settings do bootstrap e da apresentação do splash.

Durações são configuradas em milissegundos e expostas em segundos,
que é a unidade usada por asyncio.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_CONTENT_API_URL = "https://api.example.com"


@dataclass(frozen=True)
class BootstrapSettings:
    """Configurações do bootstrap.

    Attributes:
        splash_initial_ms: Duração mínima do splash inicial (T1)
        splash_branded_min_ms: Duração mínima do splash de marca (T2)
        timezone: Timezone IANA enviada ao serviço de timezone
        content_api_url: URL base da API de conteúdo de onboarding
        content_timeout_seconds: Timeout da busca de conteúdo
    """

    splash_initial_ms: int = 1500
    splash_branded_min_ms: int = 1000
    timezone: str = "UTC"
    content_api_url: str = DEFAULT_CONTENT_API_URL
    content_timeout_seconds: float = 10.0

    @property
    def splash_initial_seconds(self) -> float:
        """T1 em segundos."""
        return self.splash_initial_ms / 1000

    @property
    def splash_branded_min_seconds(self) -> float:
        """T2 em segundos."""
        return self.splash_branded_min_ms / 1000

    def validate(self) -> list[str]:
        """Valida configurações do bootstrap.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.splash_initial_ms < 0:
            errors.append("SPLASH_INITIAL_MS deve ser >= 0")

        if self.splash_branded_min_ms < 0:
            errors.append("SPLASH_BRANDED_MIN_MS deve ser >= 0")

        if not self.timezone:
            errors.append("APP_TIMEZONE não pode ser vazio")

        if not self.content_api_url.startswith(("http://", "https://")):
            errors.append(f"CONTENT_API_URL inválida: {self.content_api_url}")

        if self.content_timeout_seconds <= 0:
            errors.append("CONTENT_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_bootstrap_from_env() -> BootstrapSettings:
    """Carrega BootstrapSettings de variáveis de ambiente."""
    return BootstrapSettings(
        splash_initial_ms=int(os.getenv("SPLASH_INITIAL_MS", "1500")),
        splash_branded_min_ms=int(os.getenv("SPLASH_BRANDED_MIN_MS", "1000")),
        timezone=os.getenv("APP_TIMEZONE", "UTC"),
        content_api_url=os.getenv("CONTENT_API_URL", DEFAULT_CONTENT_API_URL).rstrip("/"),
        content_timeout_seconds=float(os.getenv("CONTENT_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_bootstrap_settings() -> BootstrapSettings:
    """Retorna instância cacheada de BootstrapSettings."""
    return _load_bootstrap_from_env()
