"""Implementações concretas do serviço de conteúdo."""

from app.infra.content.http_content_service import (
    ONBOARDING_FLOW_PATH,
    HttpContentService,
)

__all__ = [
    "ONBOARDING_FLOW_PATH",
    "HttpContentService",
]
