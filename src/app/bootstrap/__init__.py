"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings
e conecta máquina de inicialização, orquestrador, registro de reset,
containers, splash e ciclo de vida da sessão.

O ContextResetRegistry é criado uma única vez aqui e injetado em
quem precisa; não existe singleton global.

Uso:
    from app.bootstrap import build_application, initialize_app

    initialize_app()
    app = build_application(services)
    await app.lifecycle.start(restored_session)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.bootstrap.dependencies import create_content_service, create_timezone_provider
from app.bootstrap.orchestrator import BootstrapOrchestrator
from app.bootstrap.tasks import BootstrapReport, BootstrapServices, BootstrapTask
from app.containers import OnboardingScreensStore
from app.observability import get_run_id
from app.presentation import SplashPresentationController
from app.resets import ContextResetRegistry, LogoutCoordinator
from app.sessions import SessionLifecycle, SessionStore
from config.logging import configure_logging
from config.settings import (
    BootstrapSettings,
    get_base_settings,
    get_bootstrap_settings,
)
from fsm import InitializationStateMachine

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado JSON com run_id.

    Deve ser chamada uma vez no início do processo.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name,
        run_id_getter=get_run_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    base = get_base_settings()
    configure_logging(
        level="DEBUG",
        service_name=f"{base.service_name}_test",
        run_id_getter=get_run_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"bootstrap: {error}" for error in get_bootstrap_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


@dataclass(frozen=True, slots=True)
class Application:
    """Grafo de objetos conectado pelo composition root."""

    state_machine: InitializationStateMachine
    session_store: SessionStore
    reset_registry: ContextResetRegistry
    onboarding_screens: OnboardingScreensStore
    orchestrator: BootstrapOrchestrator
    splash: SplashPresentationController
    logout: LogoutCoordinator
    lifecycle: SessionLifecycle


def build_application(
    services: BootstrapServices,
    *,
    settings: BootstrapSettings | None = None,
    session_store: SessionStore | None = None,
) -> Application:
    """Conecta todos os componentes do bootstrap.

    Args:
        services: Colaboradores externos (conteúdo, usuário, squad...)
        settings: Settings de bootstrap (default: lidas do ambiente)
        session_store: Store de sessão; default começa não resolvido
            (restauração da sessão persistida ainda em andamento)

    Returns:
        Application pronta; chame `lifecycle.start()` e `splash.run()`
    """
    settings = settings or get_bootstrap_settings()
    machine = InitializationStateMachine(name="app")
    store = session_store if session_store is not None else SessionStore(resolved=False)
    registry = ContextResetRegistry()
    onboarding = OnboardingScreensStore(registry)

    orchestrator = BootstrapOrchestrator(
        machine,
        store,
        services,
        timezone_provider=create_timezone_provider(settings),
        on_content_loaded=onboarding.set_screens,
    )
    splash = SplashPresentationController(
        orchestrator.state,
        initial_duration=settings.splash_initial_seconds,
        branded_min_duration=settings.splash_branded_min_seconds,
    )
    logout = LogoutCoordinator(registry, store, orchestrator)
    lifecycle = SessionLifecycle(store, orchestrator, logout)

    logger.info(
        "application_built",
        extra={
            "reset_owners": list(registry.owners),
            "splash_initial_ms": settings.splash_initial_ms,
            "splash_branded_min_ms": settings.splash_branded_min_ms,
        },
    )
    return Application(
        state_machine=machine,
        session_store=store,
        reset_registry=registry,
        onboarding_screens=onboarding,
        orchestrator=orchestrator,
        splash=splash,
        logout=logout,
        lifecycle=lifecycle,
    )


__all__ = [
    "Application",
    "BootstrapOrchestrator",
    "BootstrapReport",
    "BootstrapServices",
    "BootstrapTask",
    "build_application",
    "create_content_service",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
