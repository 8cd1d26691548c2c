"""
Exports públicos do módulo fsm/transitions.

Regras de transição válidas entre estados da máquina de inicialização.
"""

from fsm.transitions.rules import (
    VALID_TRANSITIONS,
    TransitionMap,
    get_valid_events,
    get_valid_targets,
    is_transition_valid,
    resolve_transition,
    validate_transition_map,
)

__all__ = [
    "VALID_TRANSITIONS",
    "TransitionMap",
    "get_valid_events",
    "get_valid_targets",
    "is_transition_valid",
    "resolve_transition",
    "validate_transition_map",
]
