"""Containers de estado que participam do reset no logout."""

from app.containers.onboarding_screens import OWNER_ID, OnboardingScreensStore

__all__ = [
    "OWNER_ID",
    "OnboardingScreensStore",
]
