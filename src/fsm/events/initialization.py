"""
Eventos que disparam transições na máquina de inicialização.

Cada evento corresponde a um fato observado pelo orquestrador
(início de execução, ausência de sessão, falha crítica, etc.).
"""

from enum import StrEnum


class InitializationEvent(StrEnum):
    """
    Eventos aceitos pela máquina de inicialização.

    - BEGIN: Nova execução iniciada
    - NO_SESSION: Caminho não autenticado concluído (apenas conteúdo)
    - AWAIT_SESSION: Sessão ainda em resolução assíncrona
    - SESSION_RESOLVED: Sessão resolvida, execução retomada
    - ALL_TASKS_OK: Todas as tarefas críticas concluídas
    - CRITICAL_TASK_FAILED: Tarefa crítica falhou
    - RESET: Retorno explícito a IDLE
    """

    BEGIN = "BEGIN"
    NO_SESSION = "NO_SESSION"
    AWAIT_SESSION = "AWAIT_SESSION"
    SESSION_RESOLVED = "SESSION_RESOLVED"
    ALL_TASKS_OK = "ALL_TASKS_OK"
    CRITICAL_TASK_FAILED = "CRITICAL_TASK_FAILED"
    RESET = "RESET"

    def __str__(self) -> str:
        return self.value
