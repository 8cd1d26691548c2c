"""Testes do BootstrapOrchestrator.

Cobre: single-flight, caminhos com e sem sessão, política de falha
(crítica vs. não crítica), espera pela sessão, retry e cancelamento.
"""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from app.bootstrap.orchestrator import BootstrapOrchestrator
from app.bootstrap.tasks import BootstrapServices
from app.domain.content import ScreenDefinition
from app.domain.profile import UserProfile
from app.protocols import (
    ContentServiceProtocol,
    SquadServiceProtocol,
    TimezoneServiceProtocol,
    UserServiceProtocol,
)
from app.sessions import Session, SessionStore
from fsm import InitializationEvent, InitializationState, InitializationStateMachine
from tests.fakes.fake_bootstrap_services import make_services
from utils.errors import ContentLoadError, NetworkError

S = InitializationState


async def _settle(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


def _session(user_id: str = "user-1") -> Session:
    return Session(user_id=user_id, credential_handle="opaque-token")


def _build(services, store: SessionStore | None = None, sink=None, tz="UTC"):
    machine = InitializationStateMachine(name="test")
    orchestrator = BootstrapOrchestrator(
        machine,
        store if store is not None else SessionStore(),
        services,
        timezone_provider=lambda: tz,
        on_content_loaded=sink,
    )
    return machine, orchestrator


# ──────────────────────────────────────────────────────────────────────────────
# Caminho sem sessão
# ──────────────────────────────────────────────────────────────────────────────


class TestAnonymousPath:
    @pytest.mark.asyncio
    async def test_prefetches_content_and_completes(self) -> None:
        delivered: list[list[ScreenDefinition]] = []
        services = make_services()
        machine, orchestrator = _build(services, sink=delivered.append)

        await orchestrator.initialize()

        snapshot = machine.get_snapshot()
        assert snapshot.state == S.COMPLETED
        assert snapshot.progress.step == "Initialization complete"
        assert snapshot.progress.completed is True
        assert [s.id for s in delivered[0]] == ["welcome"]
        assert machine.history[-1].event == InitializationEvent.NO_SESSION
        assert orchestrator.last_report.authenticated is False
        assert orchestrator.last_report.completed_tasks == ("prefetch_content",)

    @pytest.mark.asyncio
    async def test_content_failure_is_not_critical(self) -> None:
        delivered: list[list[ScreenDefinition]] = []
        steps: list[str] = []
        services = make_services(content_error=ContentLoadError("content_http_status_503"))
        machine, orchestrator = _build(services, sink=delivered.append)
        machine.subscribe(lambda snap: steps.append(snap.progress.step))

        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        assert delivered == [[]]
        assert "Onboarding screens loaded (with warnings)" in steps
        assert orchestrator.last_report.degraded_tasks == ("prefetch_content",)
        assert machine.get_snapshot().error is None

    @pytest.mark.asyncio
    async def test_failing_fallback_is_contained(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Sink quebrado na pré-carga e no fallback não derruba a execução."""

        def broken_sink(_: list[ScreenDefinition]) -> None:
            raise ValueError("sink quebrado")

        machine, orchestrator = _build(make_services(), sink=broken_sink)

        with caplog.at_level(logging.ERROR, logger="app.bootstrap.orchestrator"):
            await orchestrator.initialize()

        snapshot = machine.get_snapshot()
        assert snapshot.state == S.COMPLETED
        assert snapshot.error is None
        assert orchestrator.last_report.degraded_tasks == ("prefetch_content",)
        failures = [r for r in caplog.records if r.getMessage() == "fallback_failed"]
        assert len(failures) == 1
        assert failures[0].task == "prefetch_content"

    @pytest.mark.asyncio
    async def test_unexpected_error_ends_failed_without_raising(self) -> None:
        """Falha fora da política de tarefas vira FAILED, sem propagar."""

        class BrokenStore(SessionStore):
            def get_session(self):
                raise RuntimeError("store indisponível")

        machine, orchestrator = _build(make_services(), BrokenStore())

        await orchestrator.initialize()

        snapshot = machine.get_snapshot()
        assert snapshot.state == S.FAILED
        assert snapshot.error == "store indisponível"
        assert orchestrator.is_running is False


# ──────────────────────────────────────────────────────────────────────────────
# Caminho autenticado
# ──────────────────────────────────────────────────────────────────────────────


class TestAuthenticatedPath:
    @pytest.mark.asyncio
    async def test_runs_tasks_in_order(self) -> None:
        calls: list[str] = []
        services = make_services(calls=calls, with_optional=True)
        machine, orchestrator = _build(
            services, SessionStore(_session()), tz="America/Sao_Paulo"
        )

        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        assert calls == ["user", "squad", "habits", "progress", "timezone"]
        assert services.timezone.timezones == ["America/Sao_Paulo"]
        assert machine.history[-1].event == InitializationEvent.ALL_TASKS_OK
        report = orchestrator.last_report
        assert report.authenticated is True
        assert report.user_id == "user-1"
        assert report.failed_task is None

    @pytest.mark.asyncio
    async def test_collaborators_are_awaited_with_device_timezone(self) -> None:
        services = BootstrapServices(
            content=AsyncMock(spec=ContentServiceProtocol),
            user=AsyncMock(spec=UserServiceProtocol),
            squad=AsyncMock(spec=SquadServiceProtocol),
            timezone=AsyncMock(spec=TimezoneServiceProtocol),
        )
        services.user.refresh.return_value = UserProfile(user_id="user-1", squad_id="squad-9")
        machine, orchestrator = _build(services, SessionStore(_session()), tz="Europe/Lisbon")

        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        services.user.refresh.assert_awaited_once()
        services.squad.refresh.assert_awaited_once_with("squad-9")
        services.timezone.update.assert_awaited_once_with("Europe/Lisbon")
        services.content.fetch_onboarding_flow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_progress_labels_are_published(self) -> None:
        steps: list[str] = []
        machine, orchestrator = _build(make_services(), SessionStore(_session()))
        machine.subscribe(lambda snap: steps.append(snap.progress.step))

        await orchestrator.initialize()

        assert steps.index("Loading user profile") < steps.index("Loading squad data")
        assert steps.index("Loading squad data") < steps.index("Updating timezone")
        assert steps[-1] == "Initialization complete"

    @pytest.mark.asyncio
    async def test_user_failure_fails_run_and_skips_rest(self) -> None:
        calls: list[str] = []
        services = make_services(calls=calls, user_error=NetworkError("user service down"))
        machine, orchestrator = _build(services, SessionStore(_session()))

        await orchestrator.initialize()

        snapshot = machine.get_snapshot()
        assert snapshot.state == S.FAILED
        assert snapshot.error == "user service down"
        assert calls == ["user"]
        assert services.squad.call_count == 0
        report = orchestrator.last_report
        assert report.failed_task == "refresh_user"
        assert report.skipped_tasks == ("refresh_squad", "update_timezone")
        assert isinstance(report.error.__cause__, NetworkError)

    @pytest.mark.asyncio
    async def test_user_without_squad_skips_squad_refresh(self) -> None:
        calls: list[str] = []
        services = make_services(calls=calls, squad_id=None)
        machine, orchestrator = _build(services, SessionStore(_session()))

        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        assert calls == ["user", "timezone"]
        assert services.squad.squad_ids == []

    @pytest.mark.asyncio
    async def test_squad_refresh_uses_profile_squad_id(self) -> None:
        services = make_services(squad_id="squad-42")
        _, orchestrator = _build(services, SessionStore(_session()))

        await orchestrator.initialize()

        assert services.squad.squad_ids == ["squad-42"]

    @pytest.mark.asyncio
    async def test_squad_failure_fails_run(self) -> None:
        services = make_services(squad_error=NetworkError("timeout"))
        machine, orchestrator = _build(services, SessionStore(_session()))

        await orchestrator.initialize()

        assert machine.current_state == S.FAILED
        assert orchestrator.last_report.failed_task == "refresh_squad"
        assert services.timezone.call_count == 0

    @pytest.mark.asyncio
    async def test_timezone_failure_still_completes(self) -> None:
        services = make_services(timezone_error=NetworkError("timezone down"))
        machine, orchestrator = _build(services, SessionStore(_session()))

        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        assert machine.get_snapshot().error is None
        assert orchestrator.last_report.degraded_tasks == ("update_timezone",)


# ──────────────────────────────────────────────────────────────────────────────
# Single-flight e ciclo de vida da execução
# ──────────────────────────────────────────────────────────────────────────────


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_concurrent_initialize_runs_once(self) -> None:
        gate = asyncio.Event()
        services = make_services(gate=gate)
        machine, orchestrator = _build(services)

        callers = [asyncio.create_task(orchestrator.initialize()) for _ in range(3)]
        await _settle()
        assert orchestrator.is_running

        gate.set()
        await asyncio.gather(*callers)

        assert services.content.call_count == 1
        assert machine.current_state == S.COMPLETED
        begins = [t for t in machine.history if t.event == InitializationEvent.BEGIN]
        assert len(begins) == 1

    @pytest.mark.asyncio
    async def test_initialize_when_completed_is_noop(self) -> None:
        services = make_services()
        machine, orchestrator = _build(services)

        await orchestrator.initialize()
        await orchestrator.initialize()

        assert services.content.call_count == 1
        assert len(machine.history) == 2

    @pytest.mark.asyncio
    async def test_reset_then_initialize_runs_again(self) -> None:
        services = make_services()
        machine, orchestrator = _build(services)
        await orchestrator.initialize()

        assert orchestrator.reset_initialization() is True
        assert machine.current_state == S.IDLE
        await orchestrator.initialize()

        assert services.content.call_count == 2
        assert [t.to_state for t in machine.history[-3:]] == [
            S.IDLE,
            S.INITIALIZING,
            S.COMPLETED,
        ]

    @pytest.mark.asyncio
    async def test_reset_is_noop_in_idle(self) -> None:
        machine, orchestrator = _build(make_services())
        assert orchestrator.reset_initialization() is True
        assert machine.history == []

    @pytest.mark.asyncio
    async def test_reset_rejected_during_active_run(self) -> None:
        gate = asyncio.Event()
        machine, orchestrator = _build(make_services(gate=gate))

        runner = asyncio.create_task(orchestrator.initialize())
        await _settle()

        assert machine.current_state == S.INITIALIZING
        assert orchestrator.reset_initialization() is False
        assert machine.current_state == S.INITIALIZING

        gate.set()
        await runner
        assert machine.current_state == S.COMPLETED

    @pytest.mark.asyncio
    async def test_initialize_from_failed_retries(self) -> None:
        services = make_services(user_error=NetworkError("offline"))
        machine, orchestrator = _build(services, SessionStore(_session()))
        await orchestrator.initialize()
        assert machine.current_state == S.FAILED

        services.user.error = None
        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        assert machine.get_snapshot().error is None
        assert services.user.call_count == 2

    @pytest.mark.asyncio
    async def test_wait_for_active_run_without_run_returns(self) -> None:
        _, orchestrator = _build(make_services())
        await orchestrator.wait_for_active_run()
        assert orchestrator.is_running is False

    @pytest.mark.asyncio
    async def test_shutdown_cancels_run_and_fails(self) -> None:
        gate = asyncio.Event()
        machine, orchestrator = _build(make_services(gate=gate))

        runner = asyncio.create_task(orchestrator.initialize())
        await _settle()
        await orchestrator.shutdown()

        with pytest.raises(asyncio.CancelledError):
            await runner
        snapshot = machine.get_snapshot()
        assert snapshot.state == S.FAILED
        assert snapshot.error == "cancelled"
        assert orchestrator.is_running is False


# ──────────────────────────────────────────────────────────────────────────────
# Espera pela sessão
# ──────────────────────────────────────────────────────────────────────────────


class TestWaitingForSession:
    @pytest.mark.asyncio
    async def test_waits_until_session_is_resolved(self) -> None:
        calls: list[str] = []
        store = SessionStore(resolved=False)
        machine, orchestrator = _build(make_services(calls=calls), store)

        runner = asyncio.create_task(orchestrator.initialize())
        await _settle()

        assert machine.current_state == S.WAITING_FOR_SESSION
        assert machine.get_snapshot().progress.step == "Waiting for session"
        assert calls == []

        store.resolve(_session())
        await runner

        assert machine.current_state == S.COMPLETED
        assert calls == ["user", "squad", "timezone"]
        events = [t.event for t in machine.history]
        assert events == [
            InitializationEvent.BEGIN,
            InitializationEvent.AWAIT_SESSION,
            InitializationEvent.SESSION_RESOLVED,
            InitializationEvent.ALL_TASKS_OK,
        ]

    @pytest.mark.asyncio
    async def test_resolved_without_session_takes_anonymous_path(self) -> None:
        calls: list[str] = []
        store = SessionStore(resolved=False)
        machine, orchestrator = _build(make_services(calls=calls), store)

        runner = asyncio.create_task(orchestrator.initialize())
        await _settle()
        store.resolve(None)
        await runner

        assert calls == ["content"]
        assert machine.history[-1].event == InitializationEvent.NO_SESSION

    @pytest.mark.asyncio
    async def test_cancel_while_waiting_fails_run(self) -> None:
        store = SessionStore(resolved=False)
        machine, orchestrator = _build(make_services(), store)

        runner = asyncio.create_task(orchestrator.initialize())
        await _settle()
        await orchestrator.shutdown()

        with pytest.raises(asyncio.CancelledError):
            await runner
        assert machine.current_state == S.FAILED
        last = machine.history[-1]
        assert last.from_state == S.WAITING_FOR_SESSION
        assert last.event == InitializationEvent.CRITICAL_TASK_FAILED
        assert machine.get_snapshot().error == "cancelled"
        assert orchestrator.last_report.completed_tasks == ()


# ──────────────────────────────────────────────────────────────────────────────
# Bloqueio durante o onboarding
# ──────────────────────────────────────────────────────────────────────────────


class TestOnboardingGate:
    @pytest.mark.asyncio
    async def test_initialize_is_skipped_while_onboarding(self) -> None:
        calls: list[str] = []
        machine, orchestrator = _build(make_services(calls=calls), SessionStore(_session()))
        orchestrator.set_onboarding_in_progress(True)

        await orchestrator.initialize()

        assert orchestrator.onboarding_in_progress is True
        assert machine.current_state == S.IDLE
        assert machine.history == []
        assert calls == []
        assert orchestrator.last_report is None

    @pytest.mark.asyncio
    async def test_initialize_runs_after_onboarding_ends(self) -> None:
        calls: list[str] = []
        machine, orchestrator = _build(make_services(calls=calls), SessionStore(_session()))
        orchestrator.set_onboarding_in_progress(True)
        await orchestrator.initialize()

        orchestrator.set_onboarding_in_progress(False)
        await orchestrator.initialize()

        assert machine.current_state == S.COMPLETED
        assert calls == ["user", "squad", "timezone"]

    @pytest.mark.asyncio
    async def test_active_run_is_joined_even_with_gate_on(self) -> None:
        gate = asyncio.Event()
        services = make_services(gate=gate)
        machine, orchestrator = _build(services)

        runner = asyncio.create_task(orchestrator.initialize())
        await _settle()
        orchestrator.set_onboarding_in_progress(True)
        joiner = asyncio.create_task(orchestrator.initialize())
        await _settle()
        assert not joiner.done()

        gate.set()
        await asyncio.gather(runner, joiner)

        assert machine.current_state == S.COMPLETED
        assert services.content.call_count == 1
