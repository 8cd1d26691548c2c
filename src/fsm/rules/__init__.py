"""
Exports públicos do módulo fsm/rules.

Guards e invariantes para transições de estado.
"""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    Guard,
    GuardResult,
    evaluate_guards,
    guard_reset_not_from_active,
    guard_terminal_state,
    guard_valid_input,
)

__all__ = [
    "DEFAULT_GUARDS",
    "Guard",
    "GuardResult",
    "evaluate_guards",
    "guard_reset_not_from_active",
    "guard_terminal_state",
    "guard_valid_input",
]
