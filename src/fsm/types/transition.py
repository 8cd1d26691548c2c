"""
Tipos e estruturas de dados da máquina de inicialização.

Define os registros imutáveis de transição, o resultado de uma
tentativa de transição e o snapshot observável pelos consumidores.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.events.initialization import InitializationEvent
from fsm.states.initialization import InitializationState

INITIAL_PROGRESS_STEP = "Starting..."


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Representa uma transição de estado na máquina.

    Attributes:
        from_state: Estado de origem da transição
        to_state: Estado de destino da transição
        event: Evento que causou a transição
        metadata: Dados adicionais para auditoria (nunca credenciais)
        timestamp: Momento da transição (UTC)
    """

    from_state: InitializationState
    to_state: InitializationState
    event: InitializationEvent
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )

    def to_log_dict(self) -> dict[str, Any]:
        """
        Retorna representação segura para logs.

        Returns:
            Dict com dados seguros para logging estruturado
        """
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "event": self.event.name,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi bem-sucedida
        transition: Dados da transição (se success=True)
        error_reason: Motivo da falha (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        """Valida consistência do resultado."""
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")


@dataclass(frozen=True, slots=True)
class Progress:
    """Passo legível da execução atual."""

    step: str = INITIAL_PROGRESS_STEP
    completed: bool = False


@dataclass(frozen=True, slots=True)
class InitializationSnapshot:
    """
    Visão imutável do estado observável da inicialização.

    Attributes:
        state: Estado atual da máquina
        progress: Passo atual (rótulo legível)
        error: Mensagem do último erro crítico, se houver
    """

    state: InitializationState
    progress: Progress = field(default_factory=Progress)
    error: str | None = None

    @property
    def is_ready(self) -> bool:
        """True quando a aplicação pode liberar a interface."""
        return self.state == InitializationState.COMPLETED
