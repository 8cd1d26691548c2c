"""
Exports públicos do módulo fsm/events.

Eventos que disparam transições de estado.
"""

from fsm.events.initialization import InitializationEvent

__all__ = [
    "InitializationEvent",
]
