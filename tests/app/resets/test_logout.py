"""Testes do LogoutCoordinator."""

from __future__ import annotations

import asyncio

import pytest

from app.bootstrap.orchestrator import BootstrapOrchestrator
from app.containers import OnboardingScreensStore
from app.domain.content import ScreenDefinition
from app.resets import ContextResetRegistry, LogoutCoordinator
from app.sessions import Session, SessionStore
from fsm import InitializationState, InitializationStateMachine
from tests.fakes.fake_bootstrap_services import make_services


def _wire(store: SessionStore, services=None):
    registry = ContextResetRegistry()
    onboarding = OnboardingScreensStore(registry)
    machine = InitializationStateMachine(name="logout")
    orchestrator = BootstrapOrchestrator(
        machine,
        store,
        services or make_services(),
        on_content_loaded=onboarding.set_screens,
    )
    logout = LogoutCoordinator(registry, store, orchestrator)
    return registry, onboarding, machine, orchestrator, logout


class TestLogoutCoordinator:
    @pytest.mark.asyncio
    async def test_logout_clears_state_and_reinitializes_anonymous(self) -> None:
        calls: list[str] = []
        store = SessionStore(Session(user_id="u1", credential_handle="tok"))
        registry, onboarding, machine, orchestrator, logout = _wire(
            store, make_services(calls=calls)
        )
        user_state = {"name": "Ana"}
        registry.register("user", user_state.clear)
        await orchestrator.initialize()
        calls.clear()

        summary = await logout.logout()

        assert summary.ok
        assert set(summary.invoked) == {"onboarding_screens", "user"}
        assert user_state == {}
        assert store.get_session() is None
        assert calls == ["content"]
        assert machine.current_state == InitializationState.COMPLETED
        assert orchestrator.last_report.authenticated is False
        assert onboarding.is_loaded

    @pytest.mark.asyncio
    async def test_logout_without_reinitialize_leaves_idle(self) -> None:
        store = SessionStore(Session(user_id="u1", credential_handle="tok"))
        _, onboarding, machine, orchestrator, logout = _wire(store)
        onboarding.set_screens([ScreenDefinition(id="s1", type="intro")])
        await orchestrator.initialize()

        await logout.logout(reinitialize=False)

        assert machine.current_state == InitializationState.IDLE
        assert onboarding.screens == ()
        assert onboarding.is_loaded is False

    @pytest.mark.asyncio
    async def test_failing_reset_callback_does_not_abort_logout(self) -> None:
        store = SessionStore(Session(user_id="u1", credential_handle="tok"))
        registry, _, machine, orchestrator, logout = _wire(store)

        def broken() -> None:
            raise RuntimeError("boom")

        registry.register("habits", broken)
        await orchestrator.initialize()

        summary = await logout.logout()

        assert summary.failed_owners == ("habits",)
        assert store.get_session() is None
        assert machine.current_state == InitializationState.COMPLETED

    @pytest.mark.asyncio
    async def test_logout_waits_for_active_run(self) -> None:
        gate = asyncio.Event()
        store = SessionStore(Session(user_id="u1", credential_handle="tok"))
        _, _, machine, orchestrator, logout = _wire(store, make_services(gate=gate))

        runner = asyncio.create_task(orchestrator.initialize())
        for _ in range(5):
            await asyncio.sleep(0)
        pending_logout = asyncio.create_task(logout.logout(reinitialize=False))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not pending_logout.done()

        gate.set()
        await runner
        await pending_logout

        assert machine.current_state == InitializationState.IDLE
        assert store.get_session() is None

    @pytest.mark.asyncio
    async def test_logout_during_cold_start_does_not_hang(self) -> None:
        """Sign-out enquanto o bootstrap aguarda a restauração da sessão."""
        store = SessionStore(resolved=False)
        _, onboarding, machine, orchestrator, logout = _wire(store)

        runner = asyncio.create_task(orchestrator.initialize())
        for _ in range(5):
            await asyncio.sleep(0)
        assert machine.current_state == InitializationState.WAITING_FOR_SESSION

        await asyncio.wait_for(logout.logout(reinitialize=False), timeout=1.0)
        await runner

        assert store.is_resolved
        assert store.get_session() is None
        assert machine.current_state == InitializationState.IDLE
        assert orchestrator.last_report.authenticated is False
        assert onboarding.is_loaded is False
