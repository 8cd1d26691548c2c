"""Factories de dependências — criação de implementações concretas.

Centraliza a criação de colaboradores a partir das settings de
ambiente. Serviços de usuário/squad/hábitos são fornecidos pelo
host da aplicação; aqui só existe a implementação HTTP de conteúdo.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.infra.content import HttpContentService
from config.settings import BootstrapSettings, get_bootstrap_settings

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from app.protocols.services import ContentServiceProtocol

logger = logging.getLogger(__name__)


def create_content_service(
    settings: BootstrapSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ContentServiceProtocol:
    """Cria o serviço de conteúdo HTTP configurado por env.

    Args:
        settings: Settings de bootstrap (default: lidas do ambiente)
        transport: Transporte httpx customizado (testes)
    """
    settings = settings or get_bootstrap_settings()
    service = HttpContentService(
        settings.content_api_url,
        timeout_seconds=settings.content_timeout_seconds,
        transport=transport,
    )
    logger.info(
        "content_service_created",
        extra={
            "backend": "http",
            "timeout_seconds": settings.content_timeout_seconds,
        },
    )
    return service


def create_timezone_provider(
    settings: BootstrapSettings | None = None,
) -> Callable[[], str]:
    """Retorna provider da timezone IANA configurada (APP_TIMEZONE)."""
    settings = settings or get_bootstrap_settings()
    timezone = settings.timezone
    return lambda: timezone
