import asyncio

import pytest

from backoffice.infra.repositories import MasterDataRepo
from backoffice.usecases.master_data import MasterFormSession, run_master_submit


def _session(kind="product", delay_s=0):
    return MasterFormSession(kind, repo=MasterDataRepo(kind, delay_s=delay_s))


def test_unknown_kind():
    with pytest.raises(ValueError):
        MasterFormSession("customer")


def test_submit_success_appends_and_acks():
    session = _session()
    session.update_many({"code": "PROD-X1", "name": "炭酸水 500ml", "category": "飲料", "standard_price": "130"})
    ack = asyncio.run(session.submit())
    assert ack is not None
    assert ack.id == "product-6"   # 5 produtos já cadastrados
    assert session.ack == ack
    assert session.error is None
    assert not session.saving
    assert [p.code for p in session.repo.list("PROD-X1")] == ["PROD-X1"]


def test_submitted_record_is_a_copy():
    session = _session("material")
    session.update_many({"code": "MAT-1", "name": "鉄板", "category": "部品"})
    asyncio.run(session.submit())
    session.set_field("name", "アルミ板")
    assert session.repo.list("MAT-1")[0].name == "鉄板"


def test_validation_error_is_kept_inline():
    session = _session()
    session.set_field("name", "炭酸水")
    ack = asyncio.run(session.submit())
    assert ack is None
    assert session.error == "製品コード、製品名、カテゴリーは必須です"
    assert len(session.repo.list()) == 5


def test_repository_failure_is_kept_inline():
    session = _session("supplier")
    session.update_many({"code": "SUP-1", "name": "鈴木商事", "materials": ["鉄板", "ボルト"]})
    session.repo.fail_with = "サーバーに接続できません"
    ack = asyncio.run(session.submit())
    assert ack is None
    assert session.error == "サーバーに接続できません"
    assert not session.saving
    assert session.repo.list() == []

    # a sessão continua utilizável depois do erro
    ack = asyncio.run(session.submit())
    assert ack is not None
    assert session.error is None
    assert session.repo.list()[0].materials == ["鉄板", "ボルト"]


def test_close_cancels_pending_submit():
    session = _session("supplier", delay_s=0.5)
    session.update_many({"code": "SUP-2", "name": "山田産業"})

    async def scenario():
        pending = asyncio.get_running_loop().create_task(session.submit())
        await asyncio.sleep(0.01)
        assert session.saving
        session.close()
        return await pending

    assert asyncio.run(scenario()) is None
    assert session.ack is None
    assert session.error is None
    assert session.repo.list() == []
    # fechada, não envia mais nada
    assert asyncio.run(session.submit()) is None


def test_generate_code_depends_on_kind():
    session = _session("material")
    session.set_field("category", "工具")
    assert session.generate_code(now_ms=1000123) == "MAT-T123"
    assert session.form.code == "MAT-T123"
    assert _session("supplier").generate_code(now_ms=42) == "SUP-42"


def test_run_master_submit_with_generated_code():
    repo = MasterDataRepo("product", delay_s=0)
    res = run_master_submit("product", {"name": "炭酸水", "category": "飲料"}, generate_code=True, repo=repo)
    assert res["ok"] is True
    assert res["form"]["code"].startswith("PROD-")
    assert res["ack"].kind == "product"


def test_run_master_submit_rejects_invalid_choice():
    repo = MasterDataRepo("product", delay_s=0)
    res = run_master_submit("product", {"code": "P-1", "name": "水", "category": "家電"}, repo=repo)
    assert res["ok"] is False
    assert "category" in res["error"]
    assert len(repo.list()) == 5
