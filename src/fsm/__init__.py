"""
Módulo FSM — Máquina de Estados da inicialização da aplicação.

Este módulo implementa a FSM determinística que governa o ciclo
de vida de uma execução de bootstrap.

Estrutura:
    - states/: Definições dos estados (InitializationState enum)
    - events/: Eventos que disparam transições (InitializationEvent)
    - transitions/: Tabela de transições (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina observável (InitializationStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult, snapshot)
"""

from fsm.events import InitializationEvent

# Manager
from fsm.manager import (
    INITIAL_STATES,
    InitializationStateMachine,
    SnapshotListener,
    create_state_machine,
)

# Guards/Rules
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)

# Estados
from fsm.states import (
    ACTIVE_STATES,
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    InitializationState,
    is_active,
    is_terminal,
    is_valid_state,
)

# Transições
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_events,
    get_valid_targets,
    is_transition_valid,
    resolve_transition,
    validate_transition_map,
)

# Types
from fsm.types import (
    INITIAL_PROGRESS_STEP,
    InitializationSnapshot,
    Progress,
    StateTransition,
    TransitionResult,
)

__all__ = [
    "ACTIVE_STATES",
    "DEFAULT_INITIAL_STATE",
    "INITIAL_PROGRESS_STEP",
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "GuardResult",
    "InitializationEvent",
    "InitializationSnapshot",
    "InitializationState",
    "InitializationStateMachine",
    "Progress",
    "SnapshotListener",
    "StateTransition",
    "TransitionResult",
    "create_state_machine",
    "evaluate_guards",
    "get_valid_events",
    "get_valid_targets",
    "is_active",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "resolve_transition",
    "validate_transition_map",
]
