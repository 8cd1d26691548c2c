"""Testes do composition root (app.bootstrap)."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.bootstrap import (
    build_application,
    initialize_test_app,
    validate_runtime_settings,
)
from app.containers import OWNER_ID
from app.presentation import SplashPhase
from app.sessions import Session
from config.logging import RunIdFilter
from config.settings import BootstrapSettings, get_base_settings, get_bootstrap_settings
from fsm import InitializationState
from tests.fakes.fake_bootstrap_services import make_services


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_base_settings.cache_clear()
    get_bootstrap_settings.cache_clear()
    yield
    get_base_settings.cache_clear()
    get_bootstrap_settings.cache_clear()


def _fast_settings() -> BootstrapSettings:
    return BootstrapSettings(splash_initial_ms=0, splash_branded_min_ms=0)


class TestBuildApplication:
    def test_wires_single_registry_with_onboarding_container(self) -> None:
        app = build_application(make_services(), settings=_fast_settings())

        assert OWNER_ID in app.reset_registry
        assert app.orchestrator.state is app.state_machine
        assert app.session_store.is_resolved is False

    @pytest.mark.asyncio
    async def test_cold_start_releases_splash(self) -> None:
        app = build_application(make_services(), settings=_fast_settings())

        splash_task = asyncio.create_task(app.splash.run())
        await app.lifecycle.start(None)
        await splash_task

        assert app.state_machine.current_state == InitializationState.COMPLETED
        assert app.onboarding_screens.is_loaded
        assert app.splash.phase == SplashPhase.HIDDEN

    @pytest.mark.asyncio
    async def test_full_sign_in_and_logout_cycle(self) -> None:
        calls: list[str] = []
        app = build_application(make_services(calls=calls), settings=_fast_settings())
        await app.lifecycle.start(None)

        await app.lifecycle.on_session_changed(
            Session(user_id="user-1", credential_handle="tok")
        )
        assert app.orchestrator.last_report.authenticated is True

        await app.lifecycle.on_session_changed(None)

        assert calls == ["content", "user", "squad", "timezone", "content"]
        assert app.session_store.get_session() is None
        assert app.state_machine.current_state == InitializationState.COMPLETED


class TestRuntimeSetup:
    def test_initialize_test_app_installs_run_id_filter(self) -> None:
        initialize_test_app()
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert any(isinstance(f, RunIdFilter) for f in root.handlers[0].filters)

    def test_validate_runtime_settings_warns_in_development(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("CONTENT_API_URL", "not-a-url")
        validate_runtime_settings()

    def test_validate_runtime_settings_fails_fast_in_production(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("CONTENT_API_URL", "not-a-url")
        with pytest.raises(RuntimeError, match="Configuração inválida para production"):
            validate_runtime_settings()

    def test_validate_runtime_settings_ok(self, monkeypatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.delenv("CONTENT_API_URL", raising=False)
        validate_runtime_settings()
