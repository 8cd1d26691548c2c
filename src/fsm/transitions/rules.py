"""
Regras de transição válidas entre estados da máquina de inicialização.

Este módulo define o grafo de transições como uma tabela
(estado de origem, evento) -> estado de destino. A resolução é pura:
não depende de nenhum estado externo.
"""

from fsm.events.initialization import InitializationEvent
from fsm.states.initialization import (
    TERMINAL_STATES,
    InitializationState,
)

# Tipagem explícita do mapa de transições
TransitionMap = dict[
    InitializationState,
    dict[InitializationEvent, InitializationState],
]

# Mapa de transições válidas
# Chave: estado de origem
# Valor: evento -> estado de destino
VALID_TRANSITIONS: TransitionMap = {
    # IDLE: Só pode iniciar uma execução
    InitializationState.IDLE: {
        InitializationEvent.BEGIN: InitializationState.INITIALIZING,
    },

    # INITIALIZING: Conclui, falha ou aguarda a sessão
    InitializationState.INITIALIZING: {
        InitializationEvent.NO_SESSION: InitializationState.COMPLETED,
        InitializationEvent.ALL_TASKS_OK: InitializationState.COMPLETED,
        InitializationEvent.CRITICAL_TASK_FAILED: InitializationState.FAILED,
        InitializationEvent.AWAIT_SESSION: InitializationState.WAITING_FOR_SESSION,
    },

    # WAITING_FOR_SESSION: Nunca terminal; reentra em INITIALIZING quando a
    # sessão resolve. CRITICAL_TASK_FAILED aqui só ocorre no cancelamento da
    # execução (shutdown) antes da resolução; nenhuma tarefa roda neste estado
    InitializationState.WAITING_FOR_SESSION: {
        InitializationEvent.SESSION_RESOLVED: InitializationState.INITIALIZING,
        InitializationEvent.CRITICAL_TASK_FAILED: InitializationState.FAILED,
    },

    # Estados terminais: saída apenas via RESET
    InitializationState.COMPLETED: {
        InitializationEvent.RESET: InitializationState.IDLE,
    },
    InitializationState.FAILED: {
        InitializationEvent.RESET: InitializationState.IDLE,
    },
}


def resolve_transition(
    state: InitializationState,
    event: InitializationEvent,
) -> InitializationState | None:
    """
    Função de transição pura: (estado, evento) -> próximo estado.

    Args:
        state: Estado de origem
        event: Evento recebido

    Returns:
        Estado de destino, ou None se a transição não é permitida
    """
    return VALID_TRANSITIONS.get(state, {}).get(event)


def get_valid_events(state: InitializationState) -> frozenset[InitializationEvent]:
    """
    Retorna os eventos aceitos a partir de um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de eventos aceitos
    """
    return frozenset(VALID_TRANSITIONS.get(state, {}))


def get_valid_targets(state: InitializationState) -> frozenset[InitializationState]:
    """Retorna os estados de destino alcançáveis a partir de um estado."""
    return frozenset(VALID_TRANSITIONS.get(state, {}).values())


def is_transition_valid(
    state: InitializationState,
    event: InitializationEvent,
) -> bool:
    """
    Verifica se um evento é aceito no estado informado.

    Args:
        state: Estado de origem
        event: Evento recebido

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return resolve_transition(state, event) is not None


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais só aceitam RESET
    - Nenhum estado não-IDLE alcança COMPLETED/FAILED sem passar por INITIALIZING
    - WAITING_FOR_SESSION nunca é terminal

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in InitializationState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        events = set(VALID_TRANSITIONS.get(state, {}))
        if events != {InitializationEvent.RESET}:
            errors.append(
                f"Estado terminal {state.name} deveria aceitar apenas RESET: {events}"
            )

    for target in VALID_TRANSITIONS.get(InitializationState.IDLE, {}).values():
        if target in TERMINAL_STATES:
            errors.append(f"IDLE não pode alcançar {target.name} diretamente")

    if not VALID_TRANSITIONS.get(InitializationState.WAITING_FOR_SESSION):
        errors.append("WAITING_FOR_SESSION não pode ser terminal")

    for from_state, mapping in VALID_TRANSITIONS.items():
        for event, target in mapping.items():
            if not isinstance(event, InitializationEvent):
                errors.append(f"Evento inválido em {from_state.name}: {event}")
            if not isinstance(target, InitializationState):
                errors.append(
                    f"Transição {from_state.name} --{event}--> {target}: destino inválido"
                )

    return errors
