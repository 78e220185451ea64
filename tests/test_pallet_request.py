import asyncio
from datetime import date

import pytest

from backoffice.adapters.parsers import parse_pallet_item
from backoffice.config import DEFAULTS
from backoffice.domain.errors import FieldUpdateError
from backoffice.domain.models import PALLET_TYPES, Urgency
from backoffice.infra.repositories import PalletRequestRepo
from backoffice.usecases.pallet_request import (
    PalletRequestEditor,
    fill_items,
    format_jp_date,
    run_pallet_request,
)

TODAY = date(2025, 4, 12)


@pytest.fixture(autouse=True)
def no_email_delay(monkeypatch):
    monkeypatch.setattr(DEFAULTS, "email_delay_s", 0)


def _editor(variant="jpr", delay_s=0):
    return PalletRequestEditor(variant, today=TODAY, repo=PalletRequestRepo(variant, delay_s=delay_s))


def test_format_jp_date():
    assert format_jp_date("2025-04-05") == "2025年4月5日"


def test_new_request_defaults():
    jpr = _editor()
    assert jpr.request.request_number == "JPR-20250412-001"
    assert jpr.email.to == "jpr-support@jpr-pallet.co.jp"
    assert jpr.email.subject.endswith("JPR-20250412-001")
    [item] = jpr.request.items
    assert (item.id, item.quantity, item.delivery_date) == ("1", 80, "2025-04-15")
    assert _editor("spr").request.items[0].quantity == 100


def test_unknown_variant():
    with pytest.raises(ValueError):
        PalletRequestEditor("xpr")


def test_item_ids_are_max_plus_one():
    editor = _editor()
    assert editor.add_item().id == "2"
    editor.remove_item("1")
    assert editor.add_item().id == "3"
    assert [i.id for i in editor.request.items] == ["2", "3"]


def test_update_item_is_typed():
    editor = _editor()
    editor.update_item("1", quantity=120, pallet_type=PALLET_TYPES[3])
    assert editor.total_quantity() == 120
    with pytest.raises(FieldUpdateError):
        editor.update_item("1", quantity="120")
    with pytest.raises(FieldUpdateError):
        editor.update_item("1", delivery_date=20250420)
    with pytest.raises(FieldUpdateError):
        editor.update_item("9", quantity=1)
    with pytest.raises(FieldUpdateError):
        editor.update_item("1", colour="red")


def test_update_request_urgency():
    editor = _editor()
    editor.update_request(urgency="urgent", notes="午前中希望")
    assert editor.request.urgency is Urgency.URGENT
    with pytest.raises(ValueError):
        editor.update_request(urgency="asap")
    with pytest.raises(FieldUpdateError):
        editor.update_request(items=[])
    with pytest.raises(FieldUpdateError):
        editor.update_request(notes=123)
    with pytest.raises(FieldUpdateError):
        editor.update_request(contact_phone=None)
    assert editor.request.notes == "午前中希望"


def test_pallet_type_must_be_a_known_option():
    editor = _editor()
    with pytest.raises(FieldUpdateError):
        editor.update_item("1", pallet_type="木箱")
    assert editor.request.items[0].pallet_type == PALLET_TYPES[0]
    with pytest.raises(FieldUpdateError):
        fill_items(editor, [parse_pallet_item("木箱:10")])
    fill_items(editor, [parse_pallet_item("2:10")])
    assert editor.request.items[0].pallet_type == PALLET_TYPES[1]


def test_email_body_lists_items_and_total():
    editor = _editor()
    editor.add_item()
    editor.update_item("2", pallet_type=PALLET_TYPES[1], quantity=20)
    body = editor.generate_email_body()
    assert "【依頼番号】JPR-20250412-001" in body
    assert "【緊急度】通常" in body
    assert f"・{PALLET_TYPES[0]}: 80個 (配送希望日: 2025年4月15日)" in body
    assert f"・{PALLET_TYPES[1]}: 20個" in body
    assert "【合計数量】100個" in body
    assert "【備考】" not in body
    assert editor.email_text().startswith("To: jpr-support@jpr-pallet.co.jp\nCC: \nSubject: ")


def test_spr_document_text():
    editor = _editor("spr")
    editor.update_request(notes="フォークリフト必要")
    text = editor.document_text()
    assert text.splitlines()[0] == "SPRパレット引取手配依頼書"
    assert "合計数量: 100個" in text
    assert "備考: フォークリフト必要" in text


def test_save_and_send():
    editor = _editor()
    ack = asyncio.run(editor.save())
    assert ack.id == "pallet-jpr-1"
    assert not editor.loading

    # e-mail sem corpo não é enviado
    assert asyncio.run(editor.send_email()) is False
    assert editor.error == "メール本文を入力してください"

    editor.generate_email_body()
    assert asyncio.run(editor.send_email()) is True
    assert editor.email_sent
    assert editor.error is None


def test_save_validation_error():
    editor = _editor()
    editor.remove_item("1")
    assert asyncio.run(editor.save()) is None
    assert editor.error == "依頼項目を追加してください"
    assert editor.repo.list() == []


def test_spr_cannot_send_email():
    editor = _editor("spr")
    assert asyncio.run(editor.send_email()) is False
    assert editor.error == "メール送信はJPR依頼のみ対応しています"


def test_repository_failure_is_reported():
    editor = _editor()
    editor.repo.fail_with = "タイムアウト"
    assert asyncio.run(editor.save()) is None
    assert editor.error == "タイムアウト"
    assert not editor.loading


def test_only_the_latest_task_is_kept():
    editor = _editor()
    asyncio.run(editor.save())
    first = editor._task
    editor.generate_email_body()
    asyncio.run(editor.send_email())
    assert editor._task is not first
    assert not editor._task.running
    editor.close()
    assert not editor._task.cancelled


def test_close_cancels_save():
    editor = _editor(delay_s=0.5)

    async def scenario():
        pending = asyncio.get_running_loop().create_task(editor.save())
        await asyncio.sleep(0.01)
        editor.close()
        return await pending

    assert asyncio.run(scenario()) is None
    assert editor.saved is None
    assert editor.error is None
    assert editor.repo.list() == []


def test_run_pallet_request_jpr_sends():
    repo = PalletRequestRepo("jpr", delay_s=0)
    res = run_pallet_request(
        "jpr", [(PALLET_TYPES[1], 40, "2025-04-20"), (PALLET_TYPES[2], 10, None)],
        values={"urgency": "low"}, send=True, today=TODAY, repo=repo,
    )
    assert res["ok"] is True
    assert res["email_sent"] is True
    assert res["total_quantity"] == 50
    assert "配送希望日: 2025年4月20日" in res["text"]
    assert "【緊急度】低" in res["text"]
    assert len(repo.list()) == 1


def test_run_pallet_request_spr_invalid_quantity():
    repo = PalletRequestRepo("spr", delay_s=0)
    res = run_pallet_request("spr", [(PALLET_TYPES[0], 0, None)], today=TODAY, repo=repo)
    assert res["ok"] is False
    assert res["error"] == "数量を正しく入力してください"
    assert res["email_sent"] is False
    assert res["text"].startswith("SPRパレット引取手配依頼書")
