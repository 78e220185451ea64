# backoffice/usecases/pallet_request.py
"""
UC: Pedido de retirada de paletes (JPR por e-mail, SPR como documento).

O editor mantém o cabeçalho do pedido, as linhas de itens e, no caso
JPR, o rascunho do e-mail. Salvar e enviar simulam a latência da API
com tarefas canceláveis; fechar o editor cancela o que estiver pendente.
"""

from __future__ import annotations

import asyncio
import copy
from dataclasses import fields
from datetime import date, timedelta
from typing import Any, Callable, Dict, Optional

from backoffice.config import DEFAULTS
from backoffice.domain.errors import BackofficeError, FieldUpdateError, ValidationError
from backoffice.domain.models import PALLET_TYPES, EmailDraft, PalletRequest, PalletRequestItem, Urgency
from backoffice.domain.policies import urgency_label, validate_email, validate_pallet_request
from backoffice.infra.logger import log_submission, log_system_event
from backoffice.infra.repositories import Ack, PalletRequestRepo, as_dict
from backoffice.infra.tasks import SubmissionTask, simulated_delay

VARIANTS = {
    "jpr": {"prefix": "JPR", "title": "JPRパレット引取手配依頼", "default_quantity": 80,
            "email_to": "jpr-support@jpr-pallet.co.jp"},
    "spr": {"prefix": "SPR", "title": "SPRパレット引取手配依頼書", "default_quantity": 100,
            "email_to": ""},
}

DELIVERY_LEAD_DAYS = 3


def format_jp_date(iso: str) -> str:
    """'2025-04-15' -> '2025年4月15日'."""
    d = date.fromisoformat(iso)
    return f"{d.year}年{d.month}月{d.day}日"


class PalletRequestEditor:
    """Editor de um pedido de retirada de paletes."""

    def __init__(self, variant: str = "jpr", today: Optional[date] = None,
                 repo: Optional[PalletRequestRepo] = None):
        if variant not in VARIANTS:
            raise ValueError(f"variante desconhecida: {variant}")
        self.variant = variant
        self.today = today or date.today()
        conf = VARIANTS[variant]
        self.request = PalletRequest(
            request_number=f"{conf['prefix']}-{self.today:%Y%m%d}-001",
            request_date=self.today.isoformat(),
        )
        self.request.items.append(self._new_item("1", quantity=conf["default_quantity"],
                                                 location="工場A 入荷口", notes="通常配送"))
        self.email = EmailDraft(
            to=conf["email_to"],
            subject=f"{conf['title']} - {self.request.request_number}",
        )
        self.repo = repo or PalletRequestRepo(variant)
        self.error: Optional[str] = None
        self.loading = False
        self.email_sent = False
        self.saved: Optional[Ack] = None
        self.closed = False
        self._task: Optional[SubmissionTask] = None

    # ------------------
    # itens
    # ------------------

    def _new_item(self, item_id: str, quantity: int = 0, location: str = "", notes: str = "") -> PalletRequestItem:
        return PalletRequestItem(
            id=item_id,
            quantity=quantity,
            request_date=self.today.isoformat(),
            delivery_date=(self.today + timedelta(days=DELIVERY_LEAD_DAYS)).isoformat(),
            delivery_location=location,
            notes=notes,
        )

    def add_item(self) -> PalletRequestItem:
        next_id = max((int(i.id) for i in self.request.items if i.id.isdigit()), default=0) + 1
        item = self._new_item(str(next_id))
        self.request.items.append(item)
        return item

    def remove_item(self, item_id: str) -> None:
        self.request.items = [i for i in self.request.items if i.id != item_id]

    def update_item(self, item_id: str, **values: Any) -> PalletRequestItem:
        """Atualiza campos de uma linha; ``quantity`` precisa ser inteiro e
        ``pallet_type`` um dos tipos de ``PALLET_TYPES``."""
        item = next((i for i in self.request.items if i.id == item_id), None)
        if item is None:
            raise FieldUpdateError(f"item inexistente: {item_id}")
        known = {f.name for f in fields(PalletRequestItem)} - {"id"}
        for name, value in values.items():
            if name not in known:
                raise FieldUpdateError(f"campo desconhecido: {name}")
            if name == "quantity":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise FieldUpdateError("quantity exige inteiro")
            elif not isinstance(value, str):
                raise FieldUpdateError(f"{name} exige texto")
            elif name == "pallet_type" and value not in PALLET_TYPES:
                raise FieldUpdateError(f"tipo de palete inválido: {value}")
            setattr(item, name, value)
        return item

    def update_request(self, **values: Any) -> None:
        known = {f.name for f in fields(PalletRequest)} - {"items"}
        for name, value in values.items():
            if name not in known:
                raise FieldUpdateError(f"campo desconhecido: {name}")
            if name == "urgency":
                value = Urgency(value)
            elif not isinstance(value, str):
                raise FieldUpdateError(f"{name} exige texto")
            setattr(self.request, name, value)

    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.request.items)

    # ------------------
    # documento / e-mail
    # ------------------

    def items_text(self) -> str:
        return "\n".join(
            f"・{i.pallet_type}: {i.quantity}個 (配送希望日: {format_jp_date(i.delivery_date)})"
            for i in self.request.items
        )

    def generate_email_body(self) -> str:
        r = self.request
        notes = f"【備考】\n{r.notes}" if r.notes else ""
        body = f"""
JPRパレット様

いつもお世話になっております。
{r.company_name} {r.department} の {r.requestor_name} です。

下記の通り、パレットの引取手配をお願いいたします。

【依頼番号】{r.request_number}
【依頼日】{format_jp_date(r.request_date)}
【緊急度】{urgency_label(r.urgency)}

【依頼者情報】
会社名: {r.company_name}
部署: {r.department}
担当者: {r.requestor_name}
電話番号: {r.contact_phone}
メール: {r.contact_email}

【配送先】
{r.delivery_address}

【依頼内容】
{self.items_text()}

【合計数量】{self.total_quantity()}個

{notes}

ご確認のほど、よろしくお願いいたします。

--
{r.requestor_name}
{r.company_name} {r.department}
TEL: {r.contact_phone}
Email: {r.contact_email}
""".strip()
        self.email.body = body
        return body

    def email_text(self) -> str:
        """Conteúdo completo do e-mail (para copiar)."""
        e = self.email
        return f"To: {e.to}\nCC: {e.cc}\nSubject: {e.subject}\n\n{e.body}"

    def document_text(self) -> str:
        """Versão imprimível do pedido (SPR)."""
        r = self.request
        lines = [
            VARIANTS[self.variant]["title"],
            f"依頼番号: {r.request_number}",
            f"依頼日: {format_jp_date(r.request_date)}",
            f"緊急度: {urgency_label(r.urgency)}",
            f"会社名: {r.company_name} / 部署: {r.department} / 担当者: {r.requestor_name}",
            f"電話番号: {r.contact_phone} / メール: {r.contact_email}",
            f"配送先: {r.delivery_address}",
            "依頼内容:",
            self.items_text(),
            f"合計数量: {self.total_quantity()}個",
        ]
        if r.notes:
            lines.append(f"備考: {r.notes}")
        return "\n".join(lines)

    # ------------------
    # salvar / enviar
    # ------------------

    async def _run(self, kind: str, factory: Callable, on_done: Callable) -> bool:
        self.error = None
        self.loading = True
        task = SubmissionTask(factory, on_done=on_done, name=f"{kind}-{self.variant}")
        self._task = task
        try:
            await task.wait()
            return True
        except asyncio.CancelledError:
            return False
        except BackofficeError as e:
            self._fail(str(e))
            return False
        except Exception as e:
            log_system_event("pallet_request_error", {"kind": kind, "error": str(e)}, level="error")
            self._fail(str(e) or "エラーが発生しました")
            return False

    def _fail(self, message: str) -> None:
        if self.closed:
            return
        self.error = message
        self.loading = False

    def _on_saved(self, ack: Ack) -> None:
        if self.closed:
            return
        self.saved = ack
        self.loading = False

    def _on_sent(self, _result: Any) -> None:
        if self.closed:
            return
        self.email_sent = True
        self.loading = False

    async def save(self) -> Optional[Ack]:
        if self.closed:
            return None
        try:
            validate_pallet_request(self.request)
        except ValidationError as e:
            self.error = str(e)
            log_submission(self.repo.kind, as_dict(self.request), error=self.error)
            return None
        record = copy.deepcopy(self.request)
        ok = await self._run("save", lambda: self.repo.submit(record), self._on_saved)
        return self.saved if ok else None

    async def send_email(self) -> bool:
        if self.closed:
            return False
        if self.variant != "jpr":
            self.error = "メール送信はJPR依頼のみ対応しています"
            return False
        try:
            validate_email(self.email)
        except ValidationError as e:
            self.error = str(e)
            return False
        draft = copy.deepcopy(self.email)

        async def _send() -> Dict[str, Any]:
            # placeholder da API de e-mail
            await simulated_delay(DEFAULTS.email_delay_s)
            log_submission("email", as_dict(draft), result="sent")
            return {"to": draft.to, "subject": draft.subject}

        return await self._run("email", _send, self._on_sent)

    def close(self) -> None:
        self.closed = True
        if self._task is not None:
            self._task.cancel()


def fill_items(editor: PalletRequestEditor, items: list) -> None:
    """Substitui as linhas do pedido. ``items``: [(tipo, qtd, data_entrega|None)]."""
    editor.request.items = []
    for pallet_type, quantity, delivery in items:
        item = editor.add_item()
        editor.update_item(item.id, pallet_type=pallet_type, quantity=quantity)
        if delivery:
            editor.update_item(item.id, delivery_date=delivery)


async def save_and_send(editor: PalletRequestEditor, send: bool = False) -> None:
    """Salva o pedido; no JPR gera o e-mail e, se pedido, envia após salvar."""
    ack = await editor.save()
    if editor.variant == "jpr":
        editor.generate_email_body()
        if ack is not None and send:
            await editor.send_email()


def request_result(editor: PalletRequestEditor) -> Dict[str, Any]:
    return {
        "variant": editor.variant,
        "ok": editor.error is None,
        "error": editor.error,
        "ack": editor.saved,
        "email_sent": editor.email_sent,
        "total_quantity": editor.total_quantity(),
        "text": editor.email_text() if editor.variant == "jpr" else editor.document_text(),
    }


def run_pallet_request(variant: str, items: list, values: Optional[Dict[str, Any]] = None,
                       send: bool = False, today: Optional[date] = None,
                       repo: Optional[PalletRequestRepo] = None) -> Dict[str, Any]:
    """Monta, salva e (JPR) envia um pedido (uso pela CLI)."""
    log_system_event("pallet_request_start", {"variant": variant, "items": len(items)})
    editor = PalletRequestEditor(variant, today=today, repo=repo)
    if values:
        editor.update_request(**{k: v for k, v in values.items() if v is not None})
    if items:
        fill_items(editor, items)
    asyncio.run(save_and_send(editor, send))
    return request_result(editor)
