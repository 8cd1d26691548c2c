"""Formatters de logging estruturado.

Define o formatter JSON com os campos obrigatórios:
- run_id
- service
- timestamp (asctime)
- level
- logger (name)
- message

Logs nunca incluem credenciais de sessão.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "run_id",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Returns:
        JsonFormatter configurado para logs estruturados.

    Exemplo de output:
        {
            "asctime": "2026-10-17T10:30:00",
            "level": "INFO",
            "logger": "app.bootstrap.orchestrator",
            "message": "bootstrap_completed",
            "run_id": "3f9c0a...",
            "service": "session_bootstrap"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
