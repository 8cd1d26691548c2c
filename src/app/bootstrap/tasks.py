"""Tarefas de bootstrap e montagem da lista ordenada por caminho.

Dois caminhos:
- sem sessão: apenas pré-carga do conteúdo de onboarding (não crítica)
- com sessão: usuário, squad, [hábitos, progresso], timezone
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.content import ScreenDefinition
    from app.domain.profile import UserProfile
    from app.protocols.services import (
        ContentServiceProtocol,
        HabitServiceProtocol,
        ProgressServiceProtocol,
        SquadServiceProtocol,
        TimezoneServiceProtocol,
        UserServiceProtocol,
    )
    from fsm.states import InitializationState
    from utils.errors import CriticalBootstrapError

TaskFn = Callable[[], Awaitable[None]]
ContentSink = Callable[[list["ScreenDefinition"]], None]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BootstrapTask:
    """Passo discreto e assíncrono do bootstrap.

    Atributos:
        name: Identificador estável (logs e métricas)
        run: Coroutine function sem argumentos
        critical: Falha encerra a execução em FAILED
        label: Rótulo de progresso exibido antes do passo
        done_label: Rótulo de progresso exibido após sucesso
        fallback: Chamado quando um passo não crítico falha
    """

    name: str
    run: TaskFn
    critical: bool = True
    label: str = ""
    done_label: str = ""
    fallback: Callable[[], None] | None = None

    @property
    def progress_label(self) -> str:
        return self.label or self.name

    @property
    def progress_done_label(self) -> str:
        return self.done_label or f"{self.progress_label} done"


@dataclass(frozen=True, slots=True)
class BootstrapServices:
    """Colaboradores externos usados pelas tarefas."""

    content: ContentServiceProtocol
    user: UserServiceProtocol
    squad: SquadServiceProtocol
    timezone: TimezoneServiceProtocol
    habits: HabitServiceProtocol | None = None
    progress: ProgressServiceProtocol | None = None


@dataclass(frozen=True, slots=True)
class BootstrapReport:
    """Resumo da última execução (para diagnóstico e testes)."""

    run_id: str
    final_state: InitializationState
    authenticated: bool
    user_id: str | None = None
    completed_tasks: tuple[str, ...] = ()
    degraded_tasks: tuple[str, ...] = ()
    skipped_tasks: tuple[str, ...] = ()
    failed_task: str | None = None
    error: CriticalBootstrapError | None = field(default=None, compare=False)
    duration_ms: float = 0.0


def build_anonymous_tasks(
    services: BootstrapServices,
    on_content_loaded: ContentSink | None = None,
) -> list[BootstrapTask]:
    """Monta a lista do caminho sem sessão.

    Falha no conteúdo não é crítica: o container recebe lista vazia
    e a interface mostra o estado "sem conteúdo".
    """

    async def prefetch_content() -> None:
        screens = await services.content.fetch_onboarding_flow()
        if on_content_loaded is not None:
            on_content_loaded(list(screens))

    def empty_content() -> None:
        if on_content_loaded is not None:
            on_content_loaded([])

    return [
        BootstrapTask(
            name="prefetch_content",
            run=prefetch_content,
            critical=False,
            label="Loading onboarding screens",
            done_label="Onboarding screens loaded",
            fallback=empty_content,
        ),
    ]


def build_authenticated_tasks(
    services: BootstrapServices,
    timezone_provider: Callable[[], str],
) -> list[BootstrapTask]:
    """Monta a lista ordenada do caminho autenticado.

    Ordem: usuário -> squad -> [hábitos] -> [progresso] -> timezone.
    Apenas timezone é não crítica. O squad só é recarregado quando o
    perfil recém-carregado tem `squad_id`.
    """
    profile: UserProfile | None = None

    async def refresh_user() -> None:
        nonlocal profile
        profile = await services.user.refresh()

    async def refresh_squad() -> None:
        squad_id = profile.squad_id if profile is not None else None
        if not squad_id:
            logger.info("squad_refresh_skipped", extra={"reason": "no_squad_id"})
            return
        await services.squad.refresh(squad_id)

    async def update_timezone() -> None:
        await services.timezone.update(timezone_provider())

    tasks = [
        BootstrapTask(
            name="refresh_user",
            run=refresh_user,
            label="Loading user profile",
            done_label="User profile loaded",
        ),
        BootstrapTask(
            name="refresh_squad",
            run=refresh_squad,
            label="Loading squad data",
            done_label="Squad data loaded",
        ),
    ]
    if services.habits is not None:
        tasks.append(
            BootstrapTask(
                name="load_habits",
                run=services.habits.load,
                label="Loading user habits",
                done_label="User habits loaded",
            )
        )
    if services.progress is not None:
        tasks.append(
            BootstrapTask(
                name="load_progress_history",
                run=services.progress.load_history,
                label="Loading progress history",
                done_label="Progress history loaded",
            )
        )
    tasks.append(
        BootstrapTask(
            name="update_timezone",
            run=update_timezone,
            critical=False,
            label="Updating timezone",
            done_label="Timezone updated",
        )
    )
    return tasks
