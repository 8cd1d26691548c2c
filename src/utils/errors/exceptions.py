"""Exceções de domínio da inicialização e do logout."""

from __future__ import annotations


class BootstrapError(RuntimeError):
    """Base para falhas observadas durante bootstrap ou reset."""


class ContentLoadError(BootstrapError):
    """Falha ao carregar conteúdo de onboarding (não fatal)."""


class NetworkError(BootstrapError):
    """Falha de rede/timeout em um colaborador externo."""


class AuthError(BootstrapError):
    """Credencial rejeitada ou expirada pelo provedor de autenticação."""


class CriticalBootstrapError(BootstrapError):
    """Falha de tarefa crítica; encerra a execução atual em FAILED."""

    def __init__(self, task_name: str, message: str) -> None:
        super().__init__(message)
        self.task_name = task_name


class ResetCallbackError(BootstrapError):
    """Falha isolada de um callback de reset durante o logout."""

    def __init__(self, owner_id: str, message: str) -> None:
        super().__init__(f"{owner_id}: {message}")
        self.owner_id = owner_id
