"""ContextResetRegistry — reset coordenado dos containers de estado.

Containers independentes (usuário, squad, hábitos, telas de onboarding...)
registram um callback de reset idempotente. No logout, `reset_all()`
chama cada callback exatamente uma vez, isolando falhas individuais.

A instância é criada uma única vez pelo composition root e injetada
em cada container e no coordenador de logout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

from app.observability.metrics import record_reset
from utils.errors import ResetCallbackError

logger = logging.getLogger(__name__)

ResetFn = Callable[[], None]


@dataclass(frozen=True, slots=True)
class ResetSummary:
    """Resultado agregado de um `reset_all()`.

    Atributos:
        invoked: Owners cujo callback foi chamado (com ou sem sucesso)
        failures: Falhas isoladas, uma por owner
    """

    invoked: tuple[str, ...] = ()
    failures: tuple[ResetCallbackError, ...] = ()

    @property
    def ok(self) -> bool:
        """True se nenhum callback falhou."""
        return not self.failures

    @property
    def failed_owners(self) -> tuple[str, ...]:
        """Owners cujo callback levantou exceção."""
        return tuple(error.owner_id for error in self.failures)


class ContextResetRegistry:
    """Registro owner_id -> callback de reset (último registro vence)."""

    __slots__ = ("_callbacks",)

    def __init__(self) -> None:
        self._callbacks: dict[str, ResetFn] = {}

    def __len__(self) -> int:
        return len(self._callbacks)

    def __contains__(self, owner_id: object) -> bool:
        return owner_id in self._callbacks

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._callbacks))

    @property
    def owners(self) -> tuple[str, ...]:
        """Owners registrados no momento."""
        return tuple(self._callbacks)

    def register(self, owner_id: str, reset_fn: ResetFn) -> None:
        """Registra (ou substitui) o callback de reset de um owner.

        Args:
            owner_id: Identificador do container dono do estado
            reset_fn: Callback síncrono que limpa apenas o próprio estado

        Raises:
            ValueError: owner_id vazio
            TypeError: reset_fn não chamável
        """
        if not owner_id or not owner_id.strip():
            raise ValueError("owner_id não pode ser vazio")
        if not callable(reset_fn):
            raise TypeError(f"reset_fn de {owner_id} não é chamável")

        replaced = owner_id in self._callbacks
        self._callbacks[owner_id] = reset_fn
        logger.debug(
            "reset_callback_registered",
            extra={"owner_id": owner_id, "replaced": replaced},
        )

    def register_context_setters(self, setters: Mapping[str, ResetFn]) -> None:
        """Registra vários callbacks de uma vez (forma em lote de `register`)."""
        for owner_id, reset_fn in setters.items():
            self.register(owner_id, reset_fn)

    def unregister(self, owner_id: str) -> bool:
        """Remove o callback de um owner. Retorna False se não havia registro."""
        return self._callbacks.pop(owner_id, None) is not None

    def reset_all(self) -> ResetSummary:
        """Chama todos os callbacks registrados, uma vez cada.

        A ordem entre owners não é garantida. Falhas são capturadas,
        logadas e agregadas; este método nunca levanta exceção.

        Returns:
            ResetSummary com owners chamados e falhas
        """
        snapshot = list(self._callbacks.items())
        invoked: list[str] = []
        failures: list[ResetCallbackError] = []

        logger.info("context_reset_started", extra={"owner_count": len(snapshot)})

        for owner_id, reset_fn in snapshot:
            invoked.append(owner_id)
            try:
                reset_fn()
            except Exception as exc:
                error = ResetCallbackError(owner_id, str(exc) or type(exc).__name__)
                error.__cause__ = exc
                failures.append(error)
                logger.warning(
                    "context_reset_callback_failed",
                    extra={
                        "owner_id": owner_id,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )

        record_reset(invoked=len(invoked), failed=len(failures))
        logger.info(
            "context_reset_finished",
            extra={"invoked": len(invoked), "failed": len(failures)},
        )
        return ResetSummary(invoked=tuple(invoked), failures=tuple(failures))
