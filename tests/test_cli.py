import json
from pathlib import Path

import pandas as pd
import pytest
from rich.console import Console
from typer.testing import CliRunner

from backoffice.adapters import cli
from backoffice.adapters.cli import app
from backoffice.config import DEFAULTS

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_delays(monkeypatch):
    monkeypatch.setattr(DEFAULTS, "submit_delay_s", 0)
    monkeypatch.setattr(DEFAULTS, "email_delay_s", 0)
    # largura fixa para as tabelas não quebrarem as linhas
    monkeypatch.setattr(cli, "console", Console(width=200))


def test_cli_history_json():
    result = runner.invoke(app, ["history", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["stats"]["total_shipments"] == 5
    assert data["stats"]["total_cases"] == 165
    assert data["total_pages"] == 1
    assert len(data["items"]) == 5
    assert data["message"] is None


def test_cli_history_status_alias():
    result = runner.invoke(app, ["history", "--status", "in-transit", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert [i["id"] for i in data["items"]] == ["SH-005"]
    assert data["items"][0]["status"] == "配送中"


def test_cli_history_page_is_clamped():
    result = runner.invoke(app, ["history", "--page", "99", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["page"] == 1


def test_cli_history_invalid_range():
    result = runner.invoke(app, ["history", "--range", "forever"])
    assert result.exit_code != 0


def test_cli_history_empty_state():
    result = runner.invoke(app, ["history", "--search", "存在しない"])
    assert result.exit_code == 0, result.output
    assert "出荷履歴が見つかりません" in result.stdout


def test_cli_customer_history_average_price():
    result = runner.invoke(app, ["customer-history", "--search", "ミネラル", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["stats"]["total_shipments"] == 3
    assert data["average_unit_price"] == 120


def test_cli_customer_history_table():
    result = runner.invoke(app, ["customer-history", "--customer-name", "B物産株式会社"])
    assert result.exit_code == 0, result.output
    assert "B物産株式会社" in result.stdout
    assert "統計サマリー" in result.stdout


def test_cli_export(tmp_path: Path):
    out = tmp_path / "hist.csv"
    result = runner.invoke(app, ["export", str(out), "--customer"])
    assert result.exit_code == 0, result.output
    assert "8 linhas exportadas" in result.stdout
    assert len(pd.read_csv(out, encoding="utf-8-sig")) == 8


def test_cli_schedule():
    result = runner.invoke(app, ["schedule", "--week-of", "2025-04-10", "--seed", "1"])
    assert result.exit_code == 0, result.output
    assert "2025-04-07" in result.stdout
    assert "製品A" in result.stdout


def test_cli_schedule_no_match():
    result = runner.invoke(app, ["schedule", "--search", "該当なし"])
    assert result.exit_code == 0, result.output
    assert "該当する製品がありません" in result.stdout


def test_cli_master_product_generated_code():
    result = runner.invoke(app, ["master", "product", "--name", "炭酸水", "--category", "飲料", "--generate-code"])
    assert result.exit_code == 0, result.output
    assert "保存しました" in result.stdout


def test_cli_master_product_missing_fields():
    result = runner.invoke(app, ["master", "product", "--name", "炭酸水"])
    assert result.exit_code == 1
    assert "製品コード、製品名、カテゴリーは必須です" in result.stdout


def test_cli_master_supplier_with_materials():
    result = runner.invoke(app, [
        "master", "supplier", "--code", "SUP-001", "--name", "鈴木商事",
        "--material", "鉄板", "--material", "ボルト",
    ])
    assert result.exit_code == 0, result.output


def test_cli_master_list():
    result = runner.invoke(app, ["master", "list", "product", "--search", "A004"])
    assert result.exit_code == 0, result.output
    assert "PROD-A004" in result.stdout

    result = runner.invoke(app, ["master", "list", "customer"])
    assert result.exit_code == 1


def test_cli_pallet_jpr_send():
    result = runner.invoke(app, ["pallet", "jpr", "--item", "1:80", "--item", "2:20:2025-04-20", "--send"])
    assert result.exit_code == 0, result.output
    assert "メールを送信しました" in result.stdout
    assert "合計数量: 100個" in result.stdout


def test_cli_pallet_spr_invalid_quantity():
    result = runner.invoke(app, ["pallet", "spr", "--item", "1:0"])
    assert result.exit_code == 1
    assert "数量を正しく入力してください" in result.stdout


def test_cli_pallet_invalid_urgency():
    result = runner.invoke(app, ["pallet", "jpr", "--urgency", "asap"])
    assert result.exit_code == 1
    assert "Pedido inválido" in result.stdout


def test_cli_pallet_unknown_pallet_type():
    result = runner.invoke(app, ["pallet", "spr", "--item", "木箱:10"])
    assert result.exit_code == 1
    assert "tipo de palete inválido: 木箱" in result.stdout
