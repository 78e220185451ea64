# backoffice/config.py
"""
Configurações globais e valores padrão do back-office.
"""

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path


# Diretório padrão dos logs (pode ser sobrescrito por variável de ambiente)
LOGS_DIR = Path(os.environ.get("BACKOFFICE_LOG_DIR", Path(__file__).parent / "logs"))

# Sentinela usada pelos filtros de status e de período
ALL = "all"


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass
class DefaultConfig:
    """Valores padrão para telas e formulários."""
    page_size: int = 20                   # itens por página nos históricos
    submit_delay_s: float = 1.0           # atraso simulado do "salvar"
    email_delay_s: float = 2.0            # atraso simulado do envio de e-mail
    date_range: str = "3months"           # período inicial dos históricos
    reference_date: date = date(2025, 4, 12)  # "hoje" das fixtures
    customer_name: str = "A商事株式会社"


# Instância global dos valores padrão
DEFAULTS = DefaultConfig(
    submit_delay_s=_env_float("BACKOFFICE_SUBMIT_DELAY", 1.0),
    email_delay_s=_env_float("BACKOFFICE_EMAIL_DELAY", 2.0),
)
