"""Protocolos e contratos do core da aplicação."""

from .services import (
    ContentServiceProtocol,
    HabitServiceProtocol,
    ProgressServiceProtocol,
    SquadServiceProtocol,
    TimezoneServiceProtocol,
    UserServiceProtocol,
)
from .state_reader import InitializationStateReader

__all__ = [
    "ContentServiceProtocol",
    "HabitServiceProtocol",
    "InitializationStateReader",
    "ProgressServiceProtocol",
    "SquadServiceProtocol",
    "TimezoneServiceProtocol",
    "UserServiceProtocol",
]
