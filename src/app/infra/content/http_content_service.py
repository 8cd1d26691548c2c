"""Cliente HTTP da API de conteúdo de onboarding.

Sem retry: a operação é idempotente e a falha é tratada pelo
bootstrap como não crítica (fallback para conteúdo vazio).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from app.domain.content import ScreenDefinition
from app.protocols.services import ContentServiceProtocol
from utils.errors import ContentLoadError

logger = logging.getLogger(__name__)

ONBOARDING_FLOW_PATH = "/onboarding/flow"

_SCREENS_ADAPTER = TypeAdapter(list[ScreenDefinition])


class HttpContentService(ContentServiceProtocol):
    """Busca as telas de onboarding via GET {base_url}/onboarding/flow."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Inicializa o cliente.

        Args:
            base_url: URL base da API de conteúdo
            timeout_seconds: Timeout total da requisição
            transport: Transporte httpx customizado (testes)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    async def fetch_onboarding_flow(self) -> list[ScreenDefinition]:
        url = f"{self._base_url}{ONBOARDING_FLOW_PATH}"
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._timeout,
                headers={"Content-Type": "application/json"},
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.warning(
                "content_fetch_failed",
                extra={"reason": "transport", "error_type": type(exc).__name__},
            )
            raise ContentLoadError(f"content_transport_error: {type(exc).__name__}") from exc

        if response.status_code >= 400:
            logger.warning(
                "content_fetch_failed",
                extra={"reason": "status", "status_code": response.status_code},
            )
            raise ContentLoadError(f"content_http_status_{response.status_code}")

        screens = _parse_screens(response)
        logger.info("content_fetched", extra={"screen_count": len(screens)})
        return screens


def _parse_screens(response: httpx.Response) -> list[ScreenDefinition]:
    try:
        payload: Any = response.json()
    except ValueError as exc:
        raise ContentLoadError("content_invalid_json") from exc

    # A API pode devolver a lista direto ou envelopada em {"screens": [...]}
    if isinstance(payload, dict):
        payload = payload.get("screens", [])

    try:
        return _SCREENS_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ContentLoadError(
            f"content_schema_invalid: {exc.error_count()} error(s)"
        ) from exc
