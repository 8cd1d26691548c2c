"""
Exports públicos do módulo fsm/manager.

Máquina de estados observável (InitializationStateMachine).
"""

from fsm.manager.machine import (
    INITIAL_STATES,
    InitializationStateMachine,
    SnapshotListener,
    create_state_machine,
)

__all__ = [
    "INITIAL_STATES",
    "InitializationStateMachine",
    "SnapshotListener",
    "create_state_machine",
]
