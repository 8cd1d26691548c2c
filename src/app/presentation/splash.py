"""SplashPresentationController — liberação da interface sem flicker.

Fases:
    SHOWING_INITIAL -> (T1 incondicional) -> SHOWING_BRANDED -> HIDDEN

HIDDEN só acontece quando a inicialização está COMPLETED e pelo menos
T2 se passou desde a entrada em SHOWING_BRANDED. A transição para
HIDDEN acontece no máximo uma vez e nunca é revertida.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from fsm import InitializationSnapshot, InitializationState

if TYPE_CHECKING:
    from app.protocols.state_reader import InitializationStateReader

logger = logging.getLogger(__name__)

DEFAULT_INITIAL_DURATION = 1.5
DEFAULT_BRANDED_MIN_DURATION = 1.0


class SplashPhase(StrEnum):
    """Fases do splash."""

    SHOWING_INITIAL = "SHOWING_INITIAL"
    SHOWING_BRANDED = "SHOWING_BRANDED"
    HIDDEN = "HIDDEN"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class SplashView:
    """O que a interface deve renderizar agora."""

    phase: SplashPhase
    step: str | None = None
    error: str | None = None

    @property
    def visible(self) -> bool:
        return self.phase != SplashPhase.HIDDEN


PhaseListener = Callable[[SplashPhase], None]


class SplashPresentationController:
    """Acopla o splash ao estado de inicialização com durações mínimas."""

    def __init__(
        self,
        state: InitializationStateReader,
        *,
        initial_duration: float = DEFAULT_INITIAL_DURATION,
        branded_min_duration: float = DEFAULT_BRANDED_MIN_DURATION,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Inicializa o controller em SHOWING_INITIAL.

        Args:
            state: Visão somente-leitura da máquina de inicialização
            initial_duration: T1 em segundos
            branded_min_duration: T2 em segundos
            clock: Relógio monotônico em segundos
            sleep: Função de espera (injetável para testes)
        """
        if initial_duration < 0 or branded_min_duration < 0:
            raise ValueError("durações do splash devem ser >= 0")

        self._state = state
        self._initial_duration = initial_duration
        self._branded_min_duration = branded_min_duration
        self._clock = clock
        self._sleep = sleep
        self._phase = SplashPhase.SHOWING_INITIAL
        self._branded_at: float | None = None
        self._hidden_at: float | None = None
        self._completed = asyncio.Event()
        self._listeners: list[PhaseListener] = []

    @property
    def phase(self) -> SplashPhase:
        return self._phase

    @property
    def branded_at(self) -> float | None:
        """Instante (clock) de entrada em SHOWING_BRANDED."""
        return self._branded_at

    @property
    def hidden_at(self) -> float | None:
        """Instante (clock) da transição para HIDDEN."""
        return self._hidden_at

    def subscribe(self, listener: PhaseListener) -> Callable[[], None]:
        """Assina mudanças de fase; retorna função de cancelamento."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def view(self) -> SplashView:
        """Retorna o que deve ser exibido; SHOWING_BRANDED expõe progresso e erro ao vivo."""
        if self._phase != SplashPhase.SHOWING_BRANDED:
            return SplashView(phase=self._phase)
        snapshot = self._state.get_snapshot()
        return SplashView(
            phase=self._phase,
            step=snapshot.progress.step,
            error=snapshot.error,
        )

    async def run(self) -> None:
        """Conduz as fases até HIDDEN.

        Permanece em SHOWING_INITIAL por T1 independente do backend,
        depois aguarda COMPLETED e o mínimo T2 em SHOWING_BRANDED.
        """
        if self._phase == SplashPhase.HIDDEN:
            return

        unsubscribe = self._state.subscribe(self._on_snapshot)
        try:
            self._on_snapshot(self._state.get_snapshot())

            await self._sleep(self._initial_duration)
            self._branded_at = self._clock()
            self._set_phase(SplashPhase.SHOWING_BRANDED)

            while True:
                await self._completed.wait()

                elapsed = self._clock() - self._branded_at
                remaining = self._branded_min_duration - elapsed
                if remaining > 0:
                    await self._sleep(remaining)

                # Um RESET durante a espera reabre a inicialização
                if self._state.get_snapshot().state == InitializationState.COMPLETED:
                    break

            self._hide()
        finally:
            unsubscribe()

    def _on_snapshot(self, snapshot: InitializationSnapshot) -> None:
        # Eventos repetidos de conclusão são no-op: Event.set é idempotente
        if snapshot.state == InitializationState.COMPLETED:
            self._completed.set()
        else:
            self._completed.clear()

    def _hide(self) -> None:
        if self._phase == SplashPhase.HIDDEN:
            return
        self._hidden_at = self._clock()
        self._set_phase(SplashPhase.HIDDEN)

    def _set_phase(self, phase: SplashPhase) -> None:
        self._phase = phase
        logger.info("splash_phase_changed", extra={"phase": phase.name})
        for listener in list(self._listeners):
            try:
                listener(phase)
            except Exception:
                logger.exception("splash_listener_failed", extra={"phase": phase.name})
