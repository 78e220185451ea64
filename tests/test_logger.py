"""
Testes do sistema de logging (arquivos por tipo de log).
"""

import pytest

from backoffice.infra import logger


@pytest.fixture
def logs_on(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "ENABLE_LOGGING", True)
    monkeypatch.setattr(logger, "LOGS_DIR", tmp_path)
    monkeypatch.setattr(logger, "_loggers", {})
    return tmp_path


def test_logging_disabled_by_default():
    assert logger.get_log_summary("system") is None


def test_log_files_are_written(logs_on):
    logger.log_system_event("test_start", {"test_id": "logging"})
    logger.log_query("history", {"term": "お茶"}, matched=2, total=5)
    logger.log_submission("product", {"code": "P-1"}, result="product-1")
    logger.log_submission("product", {"code": ""}, error="必須です")

    assert "test_start" in logger.get_log_summary("system")
    assert "'matched': 2" in logger.get_log_summary("queries")
    submissions = logger.get_log_summary("submissions")
    assert "SUBMIT_SUCCESS: product" in submissions
    assert "SUBMIT_FAILED: product - 必須です" in submissions
    assert sorted(p.name for p in logs_on.iterdir()) == ["queries.log", "submissions.log", "system.log"]


def test_log_summary_limits_lines(logs_on):
    for i in range(10):
        logger.log_system_event(f"event_{i}")
    tail = logger.get_log_summary("system", lines=3)
    assert tail.count("SYSTEM_EVENT") == 3
    assert "event_9" in tail


def test_missing_log_file(logs_on):
    assert logger.get_log_summary("queries") == "Log queries não encontrado."


def test_unknown_log_type(logs_on):
    with pytest.raises(KeyError):
        logger.get_logger("database")


def test_print_system_respects_flag(monkeypatch, capsys):
    logger.print_system("oculto")
    monkeypatch.setattr(logger, "ENABLE_OUTPUT", True)
    logger.print_system("visível")
    assert capsys.readouterr().out == "visível\n"
