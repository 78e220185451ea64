# backoffice/infra/logger.py
"""
Sistema de logging do back-office.

Este módulo configura e fornece loggers para registrar as consultas das
telas de histórico/programação, os envios (simulados) de formulários e
eventos gerais do sistema.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from backoffice.config import LOGS_DIR


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_FILES = {
    "queries": "queries.log",
    "submissions": "submissions.log",
    "system": "system.log",
}

_loggers: Dict[str, logging.Logger] = {}


def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger específico com arquivo de saída.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    # Cria o diretório de logs se não existir
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Remove handlers anteriores (reconfiguração em testes)
    while logger.handlers:
        handler = logger.handlers[0]
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger


def get_logger(log_type: str) -> logging.Logger:
    """Devolve (criando na primeira chamada) o logger de ``log_type``."""
    if log_type not in LOG_FILES:
        raise KeyError(f"tipo de log desconhecido: {log_type}")
    if log_type not in _loggers:
        _loggers[log_type] = setup_logger(
            f"backoffice.{log_type}",
            str(Path(LOGS_DIR) / LOG_FILES[log_type]),
        )
    return _loggers[log_type]


def _enabled() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_query(view: str, criteria: Dict[str, Any], matched: int, total: int) -> None:
    """
    Registra uma consulta (filtro/paginação) de uma tela.

    Args:
        view: Nome da tela (history, customer-history, schedule)
        criteria: Termo, status, período e página usados
        matched: Quantidade de registros após o filtro
        total: Quantidade de registros na fonte
    """
    if not _enabled():
        return
    log_data = {"view": view, "criteria": criteria, "matched": matched, "total": total}
    get_logger("queries").info(f"QUERY: {log_data}")


def log_submission(kind: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra um envio de formulário/pedido.

    Args:
        kind: Tipo do registro (product, material, supplier, pallet-jpr, ...)
        data: Dados enviados
        result: Confirmação recebida (opcional)
        error: Mensagem de erro (opcional)
    """
    if not _enabled():
        return
    logger = get_logger("submissions")
    if error:
        logger.error(f"SUBMIT_FAILED: {kind} - {error} - Data: {data}")
    else:
        logger.info(f"SUBMIT_SUCCESS: {kind} - Result: {result} - Data: {data}")


def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _enabled():
        return
    log_data = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "details": details or {},
    }
    logger = get_logger("system")
    log_method = getattr(logger, level.lower(), logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")


def get_log_summary(log_type: str = "system", lines: int = 100) -> Optional[str]:
    """
    Obtém um resumo dos logs recentes.

    Args:
        log_type: Tipo de log (queries, submissions, system)
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string
    """
    if not _enabled():
        return None

    name = LOG_FILES.get(log_type)
    log_file = Path(LOGS_DIR) / name if name else None
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
        return ''.join(all_lines[-lines:])
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
