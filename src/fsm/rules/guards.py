"""
Guards e invariantes para transições de estado.

Guards são regras adicionais avaliadas depois da tabela de transições.
Qualquer guard que negue bloqueia a transição.
"""

from collections.abc import Callable

from fsm.events.initialization import InitializationEvent
from fsm.states.initialization import TERMINAL_STATES, InitializationState


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[InitializationState, InitializationEvent], GuardResult]


def guard_valid_input(
    state: InitializationState,
    event: InitializationEvent,
) -> GuardResult:
    """
    Guard: Estado e evento precisam ser membros dos respectivos enums.

    Args:
        state: Estado de origem
        event: Evento recebido

    Returns:
        GuardResult indicando se transição é permitida
    """
    if not isinstance(state, InitializationState):
        return GuardResult.deny(f"Estado de origem inválido: {state}")

    if not isinstance(event, InitializationEvent):
        return GuardResult.deny(f"Evento inválido: {event}")

    return GuardResult.allow()


def guard_terminal_state(
    state: InitializationState,
    event: InitializationEvent,
) -> GuardResult:
    """
    Guard: Estados terminais só saem via RESET explícito.

    Args:
        state: Estado de origem
        event: Evento recebido

    Returns:
        GuardResult indicando se transição é permitida
    """
    if state in TERMINAL_STATES and event != InitializationEvent.RESET:
        return GuardResult.deny(
            f"Estado {state.name} é terminal, apenas RESET é aceito"
        )
    return GuardResult.allow()


def guard_reset_not_from_active(
    state: InitializationState,
    event: InitializationEvent,
) -> GuardResult:
    """Guard: RESET nunca interrompe uma execução em andamento."""
    if event == InitializationEvent.RESET and state not in TERMINAL_STATES:
        return GuardResult.deny(
            f"RESET só é aceito em estado terminal, estado atual: {state.name}"
        )
    return GuardResult.allow()


# Aplicados em ordem; todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_input,
    guard_terminal_state,
    guard_reset_not_from_active,
]


def evaluate_guards(
    state: InitializationState,
    event: InitializationEvent,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        state: Estado de origem
        event: Evento recebido
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(state, event)
        if not result.allowed:
            return result

    return GuardResult.allow()
