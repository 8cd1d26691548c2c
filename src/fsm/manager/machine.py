"""
Máquina de estados (InitializationStateMachine) da inicialização.

Fonte única de verdade para "a aplicação está pronta". Mantém estado,
progresso e último erro, valida transições, guarda histórico e
notifica observadores na ordem exata em que as mudanças acontecem.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fsm.events.initialization import InitializationEvent
from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.initialization import (
    DEFAULT_INITIAL_STATE,
    InitializationState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_events, resolve_transition
from fsm.types.transition import (
    InitializationSnapshot,
    Progress,
    StateTransition,
    TransitionResult,
)

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[InitializationSnapshot], None]


class InitializationStateMachine:
    """
    Máquina de estados observável da inicialização.

    Apenas o orquestrador de bootstrap chama `transition` e
    `set_progress`; os demais componentes leem snapshots ou assinam
    mudanças via `subscribe`.

    Attributes:
        current_state: Estado atual da máquina
        history: Histórico de transições realizadas
    """

    __slots__ = ("_error", "_history", "_listeners", "_name", "_progress", "_state")

    def __init__(self, name: str = "app") -> None:
        """
        Inicializa a máquina em IDLE (único estado inicial).

        Args:
            name: Identificador da máquina para logs
        """
        self._state = DEFAULT_INITIAL_STATE
        self._progress = Progress()
        self._error: str | None = None
        self._history: list[StateTransition] = []
        self._listeners: list[SnapshotListener] = []
        self._name = name

    @property
    def current_state(self) -> InitializationState:
        """Estado atual da máquina."""
        return self._state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        """Verifica se está em estado terminal."""
        return is_terminal(self._state)

    def get_snapshot(self) -> InitializationSnapshot:
        """Retorna o estado observável atual."""
        return InitializationSnapshot(
            state=self._state,
            progress=self._progress,
            error=self._error,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Registra um observador de mudanças.

        Args:
            listener: Chamado com o snapshot após cada mudança

        Returns:
            Função que cancela a assinatura (idempotente)
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def can_handle(self, event: InitializationEvent) -> bool:
        """Verifica se o evento é aceito no estado atual."""
        if resolve_transition(self._state, event) is None:
            return False
        return evaluate_guards(self._state, event).allowed

    def get_valid_events(self) -> frozenset[InitializationEvent]:
        """Retorna eventos aceitos a partir do estado atual."""
        return get_valid_events(self._state)

    def transition(
        self,
        event: InitializationEvent,
        *,
        metadata: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> TransitionResult:
        """
        Tenta aplicar um evento à máquina.

        Args:
            event: Evento a aplicar
            metadata: Dados adicionais para auditoria
            error: Mensagem de erro (usada com CRITICAL_TASK_FAILED)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        target = resolve_transition(self._state, event)
        if target is None:
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._state.name} --{event}-->"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._state, event)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._state,
            to_state=target,
            event=event,
            metadata=metadata or {},
        )

        self._state = target
        self._history.append(transition)

        if event == InitializationEvent.BEGIN:
            self._error = None
        elif event == InitializationEvent.CRITICAL_TASK_FAILED:
            self._error = error or "Initialization failed"
        elif event == InitializationEvent.RESET:
            self._error = None
            self._progress = Progress()

        logger.debug(
            "init_state_transition",
            extra={"machine": self._name, **transition.to_log_dict()},
        )
        self._notify()
        return TransitionResult(success=True, transition=transition)

    def set_progress(self, step: str, completed: bool = False) -> None:
        """
        Atualiza o passo legível da execução e notifica observadores.

        Args:
            step: Rótulo do passo (ex: "Loading user profile")
            completed: Se o passo foi concluído
        """
        self._progress = Progress(step=step, completed=completed)
        self._notify()

    def _notify(self) -> None:
        """Entrega o snapshot atual a cada observador, isolando falhas."""
        snapshot = self.get_snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(
                    "init_listener_failed",
                    extra={"machine": self._name, "state": snapshot.state.name},
                )

    def get_state_summary(self) -> dict[str, Any]:
        """
        Retorna resumo do estado atual para observability.

        Returns:
            Dict com informações do estado (seguro para logs)
        """
        return {
            "machine": self._name,
            "current_state": self._state.name,
            "is_terminal": self.is_terminal,
            "progress_step": self._progress.step,
            "has_error": self._error is not None,
            "transition_count": len(self._history),
            "valid_events": sorted(e.name for e in self.get_valid_events()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_state_machine(name: str = "app") -> InitializationStateMachine:
    """
    Factory function para criar a máquina de inicialização.

    Args:
        name: Identificador da máquina para logs

    Returns:
        InitializationStateMachine em IDLE
    """
    return InitializationStateMachine(name=name)


INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATE})
