"""Testes do OnboardingScreensStore."""

from __future__ import annotations

from app.containers import OWNER_ID, OnboardingScreensStore
from app.domain.content import ScreenDefinition
from app.resets import ContextResetRegistry


def _screens() -> list[ScreenDefinition]:
    return [
        ScreenDefinition(id="welcome", type="intro", nextScreen="goals"),
        ScreenDefinition(id="goals", type="choice"),
    ]


class TestOnboardingScreensStore:
    def test_registers_own_reset_on_construction(self) -> None:
        registry = ContextResetRegistry()
        OnboardingScreensStore(registry)
        assert OWNER_ID in registry

    def test_set_and_lookup(self) -> None:
        store = OnboardingScreensStore()
        store.set_screens(_screens())

        assert store.is_loaded
        assert [s.id for s in store.screens] == ["welcome", "goals"]
        assert store.get_screen("welcome").next_screen == "goals"
        assert store.get_screen("missing") is None

    def test_empty_delivery_counts_as_loaded(self) -> None:
        store = OnboardingScreensStore()
        store.set_screens([])
        assert store.is_loaded
        assert store.screens == ()

    def test_registry_reset_clears_only_own_state(self) -> None:
        registry = ContextResetRegistry()
        store = OnboardingScreensStore(registry)
        store.set_screens(_screens())

        summary = registry.reset_all()

        assert summary.invoked == (OWNER_ID,)
        assert store.screens == ()
        assert store.is_loaded is False
