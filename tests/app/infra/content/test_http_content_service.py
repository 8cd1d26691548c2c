"""Testes do HttpContentService com transporte httpx simulado."""

from __future__ import annotations

import httpx
import pytest

from app.bootstrap.dependencies import create_content_service
from app.infra.content import ONBOARDING_FLOW_PATH, HttpContentService
from config.settings import BootstrapSettings
from utils.errors import ContentLoadError

BASE_URL = "https://content.test"

SCREENS_PAYLOAD = [
    {
        "id": "welcome",
        "type": "intro",
        "title": "Bem-vindo",
        "nextScreen": "goals",
        "unknown_field": "ignored",
    },
    {
        "id": "goals",
        "type": "choice",
        "options": [{"label": "Saúde", "value": "health"}],
    },
]


def _service(handler) -> HttpContentService:
    return HttpContentService(
        BASE_URL + "/",
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestHttpContentService:
    @pytest.mark.asyncio
    async def test_fetches_and_parses_screens(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=SCREENS_PAYLOAD)

        screens = await _service(handler).fetch_onboarding_flow()

        assert str(requests[0].url) == f"{BASE_URL}{ONBOARDING_FLOW_PATH}"
        assert requests[0].method == "GET"
        assert [s.id for s in screens] == ["welcome", "goals"]
        assert screens[0].next_screen == "goals"
        assert screens[1].options[0].value == "health"

    @pytest.mark.asyncio
    async def test_accepts_enveloped_payload(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"screens": SCREENS_PAYLOAD[:1]})

        screens = await _service(handler).fetch_onboarding_flow()

        assert [s.id for s in screens] == ["welcome"]

    @pytest.mark.asyncio
    async def test_non_2xx_raises_content_load_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, text="unavailable")

        with pytest.raises(ContentLoadError, match="content_http_status_503"):
            await _service(handler).fetch_onboarding_flow()

    @pytest.mark.asyncio
    async def test_transport_error_raises_content_load_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ContentLoadError) as exc_info:
            await _service(handler).fetch_onboarding_flow()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_invalid_json_raises_content_load_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        with pytest.raises(ContentLoadError, match="content_invalid_json"):
            await _service(handler).fetch_onboarding_flow()

    @pytest.mark.asyncio
    async def test_schema_violation_raises_content_load_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"title": "sem id"}])

        with pytest.raises(ContentLoadError, match="content_schema_invalid"):
            await _service(handler).fetch_onboarding_flow()


class TestCreateContentService:
    @pytest.mark.asyncio
    async def test_factory_uses_settings(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=[])

        settings = BootstrapSettings(content_api_url="https://cms.local")
        service = create_content_service(settings, transport=httpx.MockTransport(handler))

        assert await service.fetch_onboarding_flow() == []
        assert seen == ["https://cms.local/onboarding/flow"]
