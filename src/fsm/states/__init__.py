"""
Exports públicos do módulo fsm/states.

Estados canônicos da inicialização da aplicação.
"""

from fsm.states.initialization import (
    ACTIVE_STATES,
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    InitializationState,
    is_active,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "ACTIVE_STATES",
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "InitializationState",
    "is_active",
    "is_terminal",
    "is_valid_state",
]
