"""
Exports públicos do módulo fsm/types.

Tipos e estruturas de dados para transições de estado.
"""

from fsm.types.transition import (
    INITIAL_PROGRESS_STEP,
    InitializationSnapshot,
    Progress,
    StateTransition,
    TransitionResult,
)

__all__ = [
    "INITIAL_PROGRESS_STEP",
    "InitializationSnapshot",
    "Progress",
    "StateTransition",
    "TransitionResult",
]
