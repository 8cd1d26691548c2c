"""
Estados canônicos da inicialização da aplicação.

Este módulo define os estados que o bootstrap pode assumir durante
uma execução. Estados são determinísticos e explícitos.
"""

from enum import StrEnum


class InitializationState(StrEnum):
    """
    Estados canônicos de uma execução de bootstrap.

    Estados não-terminais:
        - IDLE: Nenhuma execução iniciada (único estado inicial)
        - INITIALIZING: Tarefas de bootstrap em execução
        - WAITING_FOR_SESSION: Aguardando resolução assíncrona da sessão

    Estados terminais (saída apenas via RESET):
        - COMPLETED: Todas as tarefas críticas concluídas
        - FAILED: Uma tarefa crítica falhou
    """

    # Estados não-terminais
    IDLE = "IDLE"
    INITIALIZING = "INITIALIZING"
    WAITING_FOR_SESSION = "WAITING_FOR_SESSION"

    # Estados terminais
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, a máquina só volta a IDLE via RESET explícito
TERMINAL_STATES: frozenset[InitializationState] = frozenset({
    InitializationState.COMPLETED,
    InitializationState.FAILED,
})

# Estados em que existe uma execução ativa
ACTIVE_STATES: frozenset[InitializationState] = frozenset({
    InitializationState.INITIALIZING,
    InitializationState.WAITING_FOR_SESSION,
})

DEFAULT_INITIAL_STATE: InitializationState = InitializationState.IDLE


def is_terminal(state: InitializationState) -> bool:
    """
    Verifica se o estado é terminal (execução encerrada).

    Args:
        state: Estado a ser verificado

    Returns:
        True se o estado é terminal, False caso contrário
    """
    return state in TERMINAL_STATES


def is_active(state: InitializationState) -> bool:
    """Verifica se o estado indica execução em andamento."""
    return state in ACTIVE_STATES


def is_valid_state(state: InitializationState) -> bool:
    """
    Verifica se o valor é um estado válido do enum.

    Args:
        state: Estado a ser verificado

    Returns:
        True se é um InitializationState válido
    """
    return isinstance(state, InitializationState)
