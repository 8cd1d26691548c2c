"""BootstrapOrchestrator — execução single-flight do bootstrap.

Lê o SessionStore, escolhe a lista de tarefas do caminho (com ou sem
sessão), executa as tarefas em sequência e conduz as transições da
máquina de inicialização. É o único escritor da máquina.

Fluxo:
    1. Adquire o guard single-flight (task em andamento)
    2. BEGIN -> INITIALIZING
    3. [sessão pendente] AWAIT_SESSION -> aguarda -> SESSION_RESOLVED
    4. Executa tarefas; crítica falha -> CRITICAL_TASK_FAILED
    5. Sucesso -> NO_SESSION / ALL_TASKS_OK
    6. Libera o guard em qualquer saída
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.bootstrap.tasks import (
    BootstrapReport,
    BootstrapServices,
    BootstrapTask,
    ContentSink,
    build_anonymous_tasks,
    build_authenticated_tasks,
)
from app.observability import (
    get_run_id,
    record_bootstrap_outcome,
    record_latency,
    reset_run_id,
    set_run_id,
)
from config.logging import log_fallback
from fsm import (
    ACTIVE_STATES,
    InitializationEvent,
    InitializationState,
    InitializationStateMachine,
)
from utils.errors import CriticalBootstrapError

if TYPE_CHECKING:
    from app.protocols.state_reader import InitializationStateReader
    from app.sessions.store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"


@dataclass(slots=True)
class _RunOutcome:
    completed: list[str] = field(default_factory=list)
    degraded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: CriticalBootstrapError | None = None


class BootstrapOrchestrator:
    """Conduz a inicialização da aplicação a cada mudança de sessão.

    Garante no máximo uma execução ativa: chamadas concorrentes a
    `initialize()` aguardam a execução em andamento em vez de iniciar
    outra.
    """

    __slots__ = (
        "_clock",
        "_inflight",
        "_last_report",
        "_machine",
        "_on_content_loaded",
        "_onboarding_in_progress",
        "_services",
        "_session_store",
        "_timezone_provider",
    )

    def __init__(
        self,
        state_machine: InitializationStateMachine,
        session_store: SessionStore,
        services: BootstrapServices,
        *,
        timezone_provider: Callable[[], str] | None = None,
        on_content_loaded: ContentSink | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Inicializa o orquestrador.

        Args:
            state_machine: Máquina de inicialização (escrita apenas aqui)
            session_store: Fonte da sessão corrente
            services: Colaboradores externos
            timezone_provider: Fornece a timezone IANA do dispositivo
            on_content_loaded: Recebe as telas de onboarding pré-carregadas
            clock: Relógio monotônico em segundos (medição de latência)
        """
        self._machine = state_machine
        self._session_store = session_store
        self._services = services
        self._timezone_provider = timezone_provider or (lambda: DEFAULT_TIMEZONE)
        self._on_content_loaded = on_content_loaded
        self._clock = clock
        self._inflight: asyncio.Task[None] | None = None
        self._last_report: BootstrapReport | None = None
        self._onboarding_in_progress = False

    @property
    def state(self) -> InitializationStateReader:
        """Visão somente-leitura da máquina para os consumidores."""
        return self._machine

    @property
    def is_running(self) -> bool:
        """True enquanto existe execução em andamento."""
        return self._inflight is not None and not self._inflight.done()

    @property
    def last_report(self) -> BootstrapReport | None:
        """Resumo da última execução concluída."""
        return self._last_report

    @property
    def onboarding_in_progress(self) -> bool:
        """True enquanto o usuário percorre o fluxo de onboarding."""
        return self._onboarding_in_progress

    def set_onboarding_in_progress(self, active: bool) -> None:
        """Liga/desliga o bloqueio de inicialização durante o onboarding.

        Enquanto ativo, `initialize()` não inicia novas execuções; uma
        execução já em andamento segue normalmente.
        """
        if active == self._onboarding_in_progress:
            return
        self._onboarding_in_progress = active
        logger.info("bootstrap_onboarding_gate", extra={"active": active})

    async def initialize(self) -> None:
        """Dispara o bootstrap (idempotente).

        Se uma execução já está ativa, aguarda a mesma execução.
        Em COMPLETED não faz nada; em FAILED aplica RESET e executa
        novamente (recuperação iniciada pelo chamador). Com o onboarding
        em andamento nenhuma execução nova é iniciada.

        Falhas de tarefa não são levantadas: ficam no estado da máquina.
        Apenas cancelamento da execução é propagado.
        """
        if self.is_running:
            logger.info("bootstrap_already_running", extra={"action": "join"})
            await asyncio.shield(self._inflight)
            return

        if self._onboarding_in_progress:
            logger.info("bootstrap_skipped", extra={"reason": "onboarding_in_progress"})
            return

        current = self._machine.current_state
        if current == InitializationState.COMPLETED:
            logger.debug("bootstrap_skipped", extra={"reason": "already_completed"})
            return
        if current == InitializationState.FAILED:
            self._apply(InitializationEvent.RESET, {"reason": "retry_after_failure"})

        task = asyncio.create_task(self._run(), name="bootstrap-run")
        self._inflight = task
        await asyncio.shield(task)

    def reset_initialization(self) -> bool:
        """Força a máquina de volta a IDLE sem tocar no guard.

        Usado após sign-in/logout para que o próximo `initialize()`
        execute o caminho correto. Em IDLE é no-op; durante uma
        execução ativa é rejeitado (aguarde `wait_for_active_run()`).

        Returns:
            True se a máquina está em IDLE ao final da chamada
        """
        current = self._machine.current_state
        if current == InitializationState.IDLE:
            return True

        if self.is_running or current in ACTIVE_STATES:
            logger.warning(
                "bootstrap_reset_rejected",
                extra={"state": current.name, "reason": "run_active"},
            )
            return False

        return self._apply(InitializationEvent.RESET, {"reason": "explicit_reset"})

    async def wait_for_active_run(self) -> None:
        """Aguarda a execução em andamento (se houver) sem propagar seu resultado."""
        task = self._inflight
        if task is not None and not task.done():
            await asyncio.wait({task})

    async def shutdown(self) -> None:
        """Cancela a execução em andamento (encerramento da aplicação)."""
        task = self._inflight
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.wait({task})

    # ──────────────────────────────────────────────────────────────────────
    # Execução
    # ──────────────────────────────────────────────────────────────────────

    async def _run(self) -> None:
        token = set_run_id()
        started = self._clock()
        authenticated = False
        user_id: str | None = None
        outcome = _RunOutcome()
        tasks: list[BootstrapTask] = []

        try:
            self._apply(InitializationEvent.BEGIN)
            self._machine.set_progress("Starting initialization")

            if not self._session_store.is_resolved:
                self._apply(InitializationEvent.AWAIT_SESSION)
                self._machine.set_progress("Waiting for session")
                await self._session_store.wait_resolved()
                self._apply(InitializationEvent.SESSION_RESOLVED)

            session = self._session_store.get_session()
            authenticated = session is not None
            user_id = session.user_id if session else None
            if authenticated:
                tasks = build_authenticated_tasks(self._services, self._timezone_provider)
                final_event = InitializationEvent.ALL_TASKS_OK
            else:
                tasks = build_anonymous_tasks(self._services, self._on_content_loaded)
                final_event = InitializationEvent.NO_SESSION

            logger.info(
                "bootstrap_started",
                extra={
                    "authenticated": authenticated,
                    "user_id": user_id,
                    "tasks": [t.name for t in tasks],
                },
            )

            outcome = await self._run_tasks(tasks)

            if outcome.error is not None:
                self._fail(str(outcome.error), task_name=outcome.error.task_name)
            else:
                self._apply(final_event)
                self._machine.set_progress("Initialization complete", completed=True)
                logger.info(
                    "bootstrap_completed",
                    extra={
                        "authenticated": authenticated,
                        "degraded_tasks": outcome.degraded,
                    },
                )
        except asyncio.CancelledError:
            logger.warning("bootstrap_cancelled")
            self._fail("cancelled")
            raise
        except Exception as exc:
            logger.exception("bootstrap_unexpected_error")
            self._fail(str(exc) or type(exc).__name__)
        finally:
            duration_ms = (self._clock() - started) * 1000
            final_state = self._machine.current_state
            self._last_report = BootstrapReport(
                run_id=get_run_id(),
                final_state=final_state,
                authenticated=authenticated,
                user_id=user_id,
                completed_tasks=tuple(outcome.completed),
                degraded_tasks=tuple(outcome.degraded),
                skipped_tasks=tuple(outcome.skipped),
                failed_task=outcome.error.task_name if outcome.error else None,
                error=outcome.error,
                duration_ms=round(duration_ms, 2),
            )
            record_bootstrap_outcome(
                final_state=final_state.name,
                task_count=len(outcome.completed) + len(outcome.degraded),
                failed_task=self._last_report.failed_task,
            )
            reset_run_id(token)
            self._inflight = None

    async def _run_tasks(self, tasks: list[BootstrapTask]) -> _RunOutcome:
        """Executa as tarefas em ordem, aplicando a política de falha."""
        outcome = _RunOutcome()

        for index, task in enumerate(tasks):
            self._machine.set_progress(task.progress_label)
            started = self._clock()
            try:
                await task.run()
            except Exception as exc:
                elapsed_ms = (self._clock() - started) * 1000
                if task.critical:
                    error = CriticalBootstrapError(
                        task.name,
                        str(exc) or f"{task.name} failed ({type(exc).__name__})",
                    )
                    error.__cause__ = exc
                    outcome.error = error
                    outcome.skipped = [t.name for t in tasks[index + 1:]]
                    logger.error(
                        "bootstrap_task_failed",
                        extra={
                            "task": task.name,
                            "critical": True,
                            "error_type": type(exc).__name__,
                            "skipped_tasks": outcome.skipped,
                        },
                    )
                    return outcome

                logger.warning(
                    "bootstrap_task_failed",
                    extra={
                        "task": task.name,
                        "critical": False,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
                log_fallback(
                    logger,
                    task.name,
                    reason=type(exc).__name__,
                    elapsed_ms=round(elapsed_ms, 2),
                )
                if task.fallback is not None:
                    try:
                        task.fallback()
                    except Exception:
                        logger.exception("fallback_failed", extra={"task": task.name})
                outcome.degraded.append(task.name)
                self._machine.set_progress(
                    f"{task.progress_done_label} (with warnings)", completed=True
                )
                continue

            record_latency("bootstrap", task.name, (self._clock() - started) * 1000)
            outcome.completed.append(task.name)
            self._machine.set_progress(task.progress_done_label, completed=True)

        return outcome

    def _fail(self, message: str, task_name: str | None = None) -> None:
        if not self._machine.can_handle(InitializationEvent.CRITICAL_TASK_FAILED):
            return
        self._apply(
            InitializationEvent.CRITICAL_TASK_FAILED,
            {"task": task_name} if task_name else None,
            error=message,
        )
        self._machine.set_progress("Initialization failed", completed=True)

    def _apply(
        self,
        event: InitializationEvent,
        metadata: dict[str, object] | None = None,
        *,
        error: str | None = None,
    ) -> bool:
        result = self._machine.transition(event, metadata=metadata, error=error)
        if not result.success:
            logger.warning(
                "bootstrap_transition_rejected",
                extra={"event": event.name, "reason": result.error_reason},
            )
        return result.success
