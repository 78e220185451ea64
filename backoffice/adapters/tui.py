from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical, ScrollableContainer
from textual.widgets import (
    Button, Header, Footer, Static, Tree, Input, DataTable, Label,
    Checkbox
)
from textual.screen import ModalScreen, Screen

from backoffice.config import DEFAULTS
from backoffice.adapters.parsers import parse_int, parse_pallet_item, parse_status, split_list
from backoffice.domain.errors import FieldUpdateError
from backoffice.domain.forms import RemoveMaterial
from backoffice.domain.models import PALLET_TYPES, ShipmentHistoryRecord
from backoffice.infra import logger
from backoffice.infra.logger import LOG_FILES, log_system_event, get_log_summary
from backoffice.infra.repositories import MASTER_FORMS, MasterDataRepo, PalletRequestRepo, as_dict
from backoffice.usecases.master_data import GENERIC_ERROR, MasterFormSession
from backoffice.usecases.pallet_request import (
    PalletRequestEditor,
    fill_items,
    request_result,
    save_and_send,
)
from backoffice.usecases.shipment_history import ShipmentHistoryView, export_history_csv
from backoffice.usecases.shipment_schedule import ShipmentScheduleView


HISTORY_COLUMNS = ["製品", "伝票番号", "出荷数量", "出荷日・納品日", "納品先・運送会社", "金額", "ステータス"]

FIELD_LABELS = {
    "code": "コード",
    "name": "名称",
    "category": "カテゴリー",
    "unit": "単位",
    "standard_price": "標準価格",
    "standard_cost": "標準原価",
    "supplier": "サプライヤー",
    "lead_time": "リードタイム（日）",
    "location": "保管場所",
    "description": "説明",
    "status": "ステータス",
    "contact_person": "担当者",
    "phone": "電話番号",
    "email": "メールアドレス",
    "address": "住所",
    "payment_terms": "支払条件",
    "materials": "取扱資材",
    "notes": "備考",
}

MASTER_TITLES = {
    "product": "🏷️ 製品登録",
    "material": "🧱 資材登録",
    "supplier": "🏭 サプライヤー登録",
}

MASTER_LIST_TITLES = {
    "product": "🔎 製品一覧",
    "material": "🔎 資材一覧",
    "supplier": "🔎 サプライヤー一覧",
}

PALLET_TITLES = {
    "jpr": "🚚 JPRパレット引取依頼",
    "spr": "📄 SPRパレット引取依頼",
}

LOG_TITLES = {
    "queries": "🔎 検索ログ",
    "submissions": "💾 送信ログ",
    "system": "⚙️ システムログ",
}


# -----------------------
# formatação
# -----------------------

def _yen(val: Optional[float]) -> str:
    return "N/A" if val is None else f"¥{val:,.0f}"


def stats_text(snap: Dict[str, Any]) -> str:
    """Cartões de resumo do histórico em texto corrido."""
    stats = snap["stats"]
    parts = [
        f"総出荷件数: {stats.total_shipments}",
        f"総出荷金額: {_yen(stats.total_amount)}",
        f"総出荷数（c/s）: {stats.total_cases:,}",
        f"総出荷数（本）: {stats.total_pieces:,}",
    ]
    if snap.get("customer") is not None:
        parts.append(f"平均単価: {_yen(snap['average_unit_price'])}")
    return "  |  ".join(parts)


def history_table_rows(records: List[ShipmentHistoryRecord]) -> List[List[str]]:
    return [
        [
            f"{r.product_name} ({r.product_code})",
            f"{r.delivery_note_no} / {r.order_no}",
            f"{r.shipment_quantity_cases:,} c/s / {r.shipment_quantity_pieces:,} 本",
            f"{r.shipment_date.replace('-', '/')} → {r.delivery_date.replace('-', '/')}",
            f"{r.delivery_destination} / {r.shipping_company}",
            f"{_yen(r.total_amount)} (@{_yen(r.unit_price)})",
            r.status.value,
        ]
        for r in records
    ]


def page_footer(snap: Dict[str, Any]) -> str:
    page = snap["page"]
    if page.is_empty:
        return ""
    end = min(page.start_index + page.page_size, page.total_items)
    return f"{page.start_index + 1} - {end} / {page.total_items} 件 (ページ {page.page}/{page.total_pages})"


def schedule_table_rows(table: Dict[str, Any]) -> List[List[str]]:
    """Linhas da programação com recuo por nível (produto > cliente > destino)."""
    indent = {"product": "", "customer": "  ", "destination": "    "}
    out = []
    for row in table["rows"]:
        price = _yen(row["unit_price"]) if row["unit_price"] is not None else ""
        out.append(
            [indent[row["level"]] + row["label"], price]
            + [f"{v:,}" for v in row["values"]]
            + [f"{row['total']:,}"]
        )
    return out


def status_lines() -> List[str]:
    info = [
        "✅ Logging: Ativo" if logger.ENABLE_LOGGING else "❌ Logging: Desativado",
        "✅ Output: Ativo" if logger.ENABLE_OUTPUT else "❌ Output: Desativado",
        f"📅 基準日: {DEFAULTS.reference_date.isoformat()}",
        f"📄 1ページの件数: {DEFAULTS.page_size}",
        f"⏱️ 保存遅延: {DEFAULTS.submit_delay_s}s / メール遅延: {DEFAULTS.email_delay_s}s",
        f"📁 Logs: {logger.LOGS_DIR}",
    ]
    return info


# -----------------------
# telas de saída
# -----------------------

class OutputDataTableScreen(Screen):
    """Screen to display a DataTable with query results."""
    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
    ]

    def __init__(self, heading: str, columns: list, rows: list) -> None:
        super().__init__()
        self.heading = heading
        self.columns = columns
        self.rows = rows

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.heading}", classes="output-title")
            dt = DataTable(zebra_stripes=True)
            dt.add_columns(*self.columns)
            for row in self.rows:
                dt.add_row(*[str(cell) if cell is not None else "" for cell in row])
            yield dt
        yield Footer()


class OutputScreen(Screen):
    """Screen to display text output."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
    ]

    def __init__(self, heading: str, content: str) -> None:
        super().__init__()
        self.heading = heading
        self.content = content

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.heading}", classes="output-title")
            yield Static(self.content, markup=False)
        yield Footer()


class StatusDisplay(Static):
    """Display current system status."""

    def __init__(self) -> None:
        super().__init__("\n".join(status_lines()))

    def refresh_status(self) -> None:
        self.update("\n".join(status_lines()))


# -----------------------
# menu
# -----------------------

class MenuTreeWidget(Tree):
    """Main navigation tree widget."""

    def __init__(self) -> None:
        super().__init__("📦 出荷・マスタ管理 - メニュー")
        self.setup_menu_tree()

    def setup_menu_tree(self) -> None:
        history_node = self.root.add("📦 出荷履歴", data="history-menu")
        history_node.add_leaf("📋 出荷履歴一覧", data="history")
        history_node.add_leaf("👤 顧客別出荷履歴", data="customer-history")
        history_node.add_leaf("💾 CSVエクスポート", data="export")

        schedule_node = self.root.add("📅 出荷予定", data="schedule-menu")
        schedule_node.add_leaf("🗓️ 週間出荷予定", data="schedule")

        master_node = self.root.add("🗂️ マスタ登録", data="master-menu")
        for kind in MASTER_FORMS:
            master_node.add_leaf(MASTER_TITLES[kind], data=f"master-{kind}")
        for kind in MASTER_FORMS:
            master_node.add_leaf(MASTER_LIST_TITLES[kind], data=f"list-{kind}")

        pallet_node = self.root.add("🚚 パレット引取依頼", data="pallet-menu")
        pallet_node.add_leaf(PALLET_TITLES["jpr"], data="pallet-jpr")
        pallet_node.add_leaf(PALLET_TITLES["spr"], data="pallet-spr")

        sys_node = self.root.add("⚙️ システム", data="sistema")
        for log_type in LOG_FILES:
            sys_node.add_leaf(LOG_TITLES[log_type], data=f"log-{log_type}")
        sys_node.add_leaf("📊 ログ概要", data="log-summary")


# -----------------------
# histórico
# -----------------------

class HistoryFilterForm(ModalScreen):
    """Modal form for the history search criteria."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Cancel"),
    ]

    def __init__(self, view: ShipmentHistoryView) -> None:
        super().__init__()
        self.view = view
        self.inputs: Dict[str, Input] = {}

    def compose(self) -> ComposeResult:
        with Container(id="history-filter-modal"):
            yield Static("🔍 絞り込み", classes="modal-title")

            with Vertical():
                yield Label("検索（製品名・コード・伝票番号・納品先）:")
                self.inputs["search"] = Input(value=self.view.term, id="search-input")
                yield self.inputs["search"]

                yield Label("ステータス（all / 出荷済み / 配送中 / 納品完了 / キャンセル / 返品）:")
                self.inputs["status"] = Input(value=self.view.status, id="status-input")
                yield self.inputs["status"]

                yield Label("期間（1month / 3months / 6months / 1year / all）:")
                self.inputs["range"] = Input(value=self.view.date_range, id="range-input")
                yield self.inputs["range"]

                yield Label("ページ:")
                self.inputs["page"] = Input(value=str(self.view.current_page), id="page-input")
                yield self.inputs["page"]

                with Horizontal():
                    yield Button("🔍 適用", variant="primary", id="apply-btn")
                    yield Button("❌ キャンセル", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "apply-btn":
            self.dismiss({name: widget.value.strip() for name, widget in self.inputs.items()})
        elif event.button.id == "cancel-btn":
            self.app.pop_screen()


class HistoryScreen(Screen):
    """Histórico paginado com cartões de resumo."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("q", "app.pop_screen", "Back"),
        ("n", "next_page", "Next page"),
        ("p", "prev_page", "Prev page"),
        ("f", "filter", "Filter"),
    ]

    def __init__(self, view: ShipmentHistoryView, heading: str) -> None:
        super().__init__()
        self.view = view
        self.heading = heading

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static(f"📋 {self.heading}", classes="output-title")
            customer = self.view.customer
            if customer is not None:
                yield Static(
                    f"{customer.customer_name}  ({customer.customer_code})\n"
                    f"担当者: {customer.contact_person} | 電話: {customer.phone} | メール: {customer.email}",
                    classes="info-panel",
                )
            yield Static("", id="history-stats", classes="info-panel")
            yield Static("", id="history-empty")
            dt = DataTable(zebra_stripes=True, id="history-table")
            dt.add_columns(*HISTORY_COLUMNS)
            yield dt
            yield Static("", id="history-footer")
            with Horizontal():
                yield Button("◀ 前へ", id="prev-btn")
                yield Button("次へ ▶", id="next-btn")
                yield Button("🔍 絞り込み", variant="primary", id="filter-btn")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        snap = self.view.snapshot()
        self.query_one("#history-stats", Static).update(stats_text(snap))
        self.query_one("#history-empty", Static).update(snap["message"] or "")
        table = self.query_one("#history-table", DataTable)
        table.clear()
        for row in history_table_rows(snap["page"].items):
            table.add_row(*row)
        self.query_one("#history-footer", Static).update(page_footer(snap))

    def action_next_page(self) -> None:
        self.view.next_page()
        self.refresh_view()

    def action_prev_page(self) -> None:
        self.view.prev_page()
        self.refresh_view()

    def action_filter(self) -> None:
        self.app.push_screen(HistoryFilterForm(self.view), self.on_filter_result)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "next-btn":
            self.action_next_page()
        elif event.button.id == "prev-btn":
            self.action_prev_page()
        elif event.button.id == "filter-btn":
            self.action_filter()

    def on_filter_result(self, params: Optional[Dict[str, str]]) -> None:
        if not params:
            return
        try:
            self.view.set_date_range(params.get("range") or DEFAULTS.date_range)
        except ValueError as e:
            self.notify(f"❌ {e}", severity="warning")
            return
        self.view.set_search(params.get("search", ""))
        self.view.set_status(parse_status(params.get("status")))
        self.view.go_to_page(parse_int(params.get("page")) or self.view.current_page)
        self.refresh_view()


class ExportForm(ModalScreen):
    """Modal form for CSV export."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Cancel"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.file_input: Optional[Input] = None

    def compose(self) -> ComposeResult:
        with Container(id="export-modal"):
            yield Static("💾 CSVエクスポート", classes="modal-title")

            with Vertical():
                yield Label("出力ファイル (.csv):")
                self.file_input = Input(placeholder="shipment_history.csv", id="file-input")
                yield self.file_input
                yield Checkbox("顧客別出荷履歴", id="customer-checkbox")

                with Horizontal():
                    yield Button("実行", variant="primary", id="execute-btn")
                    yield Button("キャンセル", id="cancel-btn")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "execute-btn":
            file_path = self.file_input.value.strip() if self.file_input else ""
            if not file_path:
                self.notify("❌ ファイル名を入力してください", severity="warning")
                return
            customer = self.query_one("#customer-checkbox", Checkbox).value
            self.dismiss({"file": file_path, "customer": customer})
        elif event.button.id == "cancel-btn":
            self.app.pop_screen()


# -----------------------
# programação
# -----------------------

class ScheduleScreen(Screen):
    """Programação semanal com navegação entre semanas."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
    ]

    def __init__(self, view: Optional[ShipmentScheduleView] = None) -> None:
        super().__init__()
        self.view = view or ShipmentScheduleView()

    def compose(self) -> ComposeResult:
        yield Header()
        with ScrollableContainer():
            yield Static("", id="schedule-title", classes="output-title")
            yield Input(placeholder="製品・顧客で検索 (Enter)", id="schedule-search")
            with Horizontal():
                yield Button("◀ 前週", id="prev-week-btn")
                yield Button("今週", id="this-week-btn")
                yield Button("次週 ▶", id="next-week-btn")
            yield Static("", id="schedule-empty")
            yield DataTable(zebra_stripes=True, id="schedule-table")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        data = self.view.table()
        self.query_one("#schedule-title", Static).update(
            f"📅 出荷予定 {self.view.week_start} - {self.view.week_end}"
        )
        self.query_one("#schedule-empty", Static).update("該当する製品がありません" if data["empty"] else "")
        table = self.query_one("#schedule-table", DataTable)
        table.clear(columns=True)
        table.add_columns(
            "製品 / 出荷顧客 / 出荷先", "単価",
            *[d[5:].replace("-", "/") for d in data["dates"]], "合計",
        )
        for row in schedule_table_rows(data):
            table.add_row(*row)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.view.set_search(event.value)
        self.refresh_view()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "prev-week-btn":
            self.view.prev_week()
        elif event.button.id == "next-week-btn":
            self.view.next_week()
        elif event.button.id == "this-week-btn":
            self.view.current_week()
        self.refresh_view()


# -----------------------
# cadastros
# -----------------------

def _initial(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(value)
    return "" if value is None else str(value)


class MasterEntryForm(ModalScreen):
    """Modal form for product, material and supplier entries."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(self, kind: str, repo: Optional[MasterDataRepo] = None) -> None:
        super().__init__()
        self.session = MasterFormSession(kind, repo=repo)
        self.inputs: Dict[str, Input] = {}

    def compose(self) -> ComposeResult:
        with Container(id="master-modal"):
            yield Static(MASTER_TITLES[self.session.kind], classes="modal-title")

            with ScrollableContainer():
                for f in fields(self.session.form):
                    options = f.metadata.get("options")
                    placeholder = " / ".join(options) if options else ""
                    if f.metadata.get("kind") == "list":
                        placeholder = "カンマ区切り"
                    yield Label(f"{FIELD_LABELS.get(f.name, f.name)}:")
                    self.inputs[f.name] = Input(
                        value=_initial(getattr(self.session.form, f.name)),
                        placeholder=placeholder,
                        id=f"{f.name}-input",
                    )
                    yield self.inputs[f.name]

                yield Static("", id="form-error", classes="form-error")

                with Horizontal():
                    yield Button("🔢 コード生成", id="generate-btn")
                    yield Button("💾 保存", variant="primary", id="save-btn")
                    yield Button("❌ キャンセル", id="cancel-btn")

    def set_error(self, message: str) -> None:
        self.query_one("#form-error", Static).update(f"❌ {message}" if message else "")

    def collect(self) -> bool:
        """Copia os campos digitados para o formulário da sessão."""
        form = self.session.form
        try:
            for name, widget in self.inputs.items():
                if name == "materials":
                    wanted = split_list(widget.value)
                    for current in list(form.materials):
                        if current not in wanted:
                            self.session.apply(RemoveMaterial(current))
                    for item in wanted:
                        self.session.set_field(name, item)
                else:
                    self.session.set_field(name, widget.value)
        except FieldUpdateError as e:
            self.set_error(str(e))
            return False
        return True

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save()
        elif event.button.id == "generate-btn":
            if self.collect():
                self.inputs["code"].value = self.session.generate_code()
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_save(self) -> None:
        if self.session.saving or not self.collect():
            return
        self.set_error("")
        self.run_worker(self._submit(), exclusive=True, group="submit")

    async def _submit(self) -> None:
        save_btn = self.query_one("#save-btn", Button)
        save_btn.disabled = True
        ack = await self.session.submit()
        if self.session.closed:
            return
        save_btn.disabled = False
        if ack is None:
            self.set_error(self.session.error or GENERIC_ERROR)
            return
        self.dismiss({"kind": self.session.kind, "ack": ack, "form": as_dict(self.session.form)})

    def action_cancel(self) -> None:
        self.session.close()
        self.dismiss(None)

    def on_unmount(self) -> None:
        self.session.close()


# -----------------------
# paletes
# -----------------------

def item_token(item) -> str:
    """Linha do pedido no formato aceito por ``parse_pallet_item``."""
    idx = PALLET_TYPES.index(item.pallet_type) + 1 if item.pallet_type in PALLET_TYPES else item.pallet_type
    return f"{idx}:{item.quantity}:{item.delivery_date}"


class PalletRequestForm(ModalScreen):
    """Modal form for a pallet pickup request."""

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(self, variant: str, repo: Optional[PalletRequestRepo] = None) -> None:
        super().__init__()
        self.editor = PalletRequestEditor(variant, repo=repo)
        self.items_input: Optional[Input] = None
        self.urgency_input: Optional[Input] = None
        self.notes_input: Optional[Input] = None

    def compose(self) -> ComposeResult:
        with Container(id="pallet-modal"):
            yield Static(PALLET_TITLES[self.editor.variant], classes="modal-title")

            with Vertical():
                yield Static(f"依頼番号: {self.editor.request.request_number}")
                types = " / ".join(f"{i}={t}" for i, t in enumerate(PALLET_TYPES, 1))
                yield Label(f"依頼項目 TIPO:QTD[:AAAA-MM-DD] ; 区切り ({types}):")
                self.items_input = Input(
                    value="; ".join(item_token(i) for i in self.editor.request.items),
                    id="items-input",
                )
                yield self.items_input

                yield Label("緊急度 (urgent / normal / low):")
                self.urgency_input = Input(value=self.editor.request.urgency.value, id="urgency-input")
                yield self.urgency_input

                yield Label("備考:")
                self.notes_input = Input(value=self.editor.request.notes, id="notes-input")
                yield self.notes_input

                if self.editor.variant == "jpr":
                    yield Checkbox("保存後にメールを送信", id="send-checkbox")

                yield Static("", id="form-error", classes="form-error")

                with Horizontal():
                    yield Button("👁️ プレビュー", id="preview-btn")
                    yield Button("💾 保存", variant="primary", id="save-btn")
                    yield Button("❌ キャンセル", id="cancel-btn")

    def set_error(self, message: str) -> None:
        self.query_one("#form-error", Static).update(f"❌ {message}" if message else "")

    def collect(self) -> bool:
        try:
            items = [parse_pallet_item(s) for s in split_list(self.items_input.value)]
            fill_items(self.editor, items)
            self.editor.update_request(
                urgency=self.urgency_input.value.strip() or "normal",
                notes=self.notes_input.value,
            )
        except (ValueError, FieldUpdateError) as e:
            self.set_error(str(e))
            return False
        return True

    def preview_text(self) -> str:
        if self.editor.variant == "jpr":
            self.editor.generate_email_body()
            return self.editor.email_text()
        return self.editor.document_text()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-btn":
            self.action_save()
        elif event.button.id == "preview-btn":
            if self.collect():
                self.set_error("")
                self.app.push_screen(OutputScreen("プレビュー", self.preview_text()))
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_save(self) -> None:
        if self.editor.loading or not self.collect():
            return
        self.set_error("")
        send = False
        if self.editor.variant == "jpr":
            send = self.query_one("#send-checkbox", Checkbox).value
        self.run_worker(self._submit(send), exclusive=True, group="submit")

    async def _submit(self, send: bool) -> None:
        save_btn = self.query_one("#save-btn", Button)
        save_btn.disabled = True
        await save_and_send(self.editor, send)
        if self.editor.closed:
            return
        save_btn.disabled = False
        if self.editor.error:
            self.set_error(self.editor.error)
            return
        self.dismiss(request_result(self.editor))

    def action_cancel(self) -> None:
        self.editor.close()
        self.dismiss(None)

    def on_unmount(self) -> None:
        self.editor.close()


# -----------------------
# aplicação
# -----------------------

class BackofficeApp(App):

    """Main TUI Application for the shipment back-office."""

    CSS = """
    Screen {
        background: #001122;
    }

    .modal-title {
        background: #003366;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    .output-title {
        background: #004488;
        color: #ffffff;
        text-align: center;
        padding: 1;
        margin-bottom: 1;
    }

    .info-panel {
        padding: 1;
    }

    .form-error {
        color: #ff5555;
    }

    Container#history-filter-modal {
        background: #112233;
        border: solid #00aaff;
        width: 70;
        height: 26;
        margin: 2;
    }

    Container#export-modal {
        background: #112233;
        border: solid #00aaff;
        width: 60;
        height: 16;
        margin: 2;
    }

    Container#master-modal {
        background: #112233;
        border: solid #00aaff;
        width: 70;
        height: 90%;
        margin: 2;
    }

    Container#pallet-modal {
        background: #112233;
        border: solid #00aaff;
        width: 90;
        height: 30;
        margin: 2;
    }

    Tree {
        background: #001a33;
        color: #ccddff;
    }

    StatusDisplay {
        background: #003366;
        color: #ffffff;
        padding: 1;
    }

    Button {
        margin: 1;
    }
    """

    TITLE = "📦 出荷・マスタ管理 - Back-office Terminal UI"
    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh Status"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self.menu_tree: Optional[MenuTreeWidget] = None
        self.status_display: Optional[StatusDisplay] = None
        # repositórios compartilhados entre telas para que os cadastros apareçam nas listas
        self.master_repos = {kind: MasterDataRepo(kind) for kind in MASTER_FORMS}
        self.pallet_repos = {variant: PalletRequestRepo(variant) for variant in PALLET_TITLES}

    def compose(self) -> ComposeResult:
        """Compose the main UI layout."""
        yield Header()

        with Horizontal():
            with Container(classes="left-panel"):
                self.menu_tree = MenuTreeWidget()
                yield self.menu_tree

            with Vertical(classes="right-panel"):
                self.status_display = StatusDisplay()
                yield self.status_display

                yield Static("""
📦 出荷・マスタ管理 BACK-OFFICE

Como usar:
- Use as setas ↑↓ para navegar no menu
- Pressione ENTER para executar uma ação
- Nas telas de histórico: n/p mudam de página, f abre o filtro
- Pressione 'r' para atualizar o status
- Pressione 'q' para sair
                """, classes="info-panel")

        yield Footer()

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        """Handle menu tree node selection."""
        if not event.node.data:
            return
        self.execute_action(event.node.data)

    def execute_action(self, action: str) -> None:
        """Executa a ação selecionada no menu."""
        log_system_event("tui_action_start", {"action": action})

        try:
            if action == "history":
                self.push_screen(HistoryScreen(ShipmentHistoryView(), "出荷履歴"))
            elif action == "customer-history":
                self.push_screen(HistoryScreen(ShipmentHistoryView.for_customer(), "顧客別出荷履歴"))
            elif action == "export":
                self.push_screen(ExportForm(), self.on_export_result)
            elif action == "schedule":
                self.push_screen(ScheduleScreen())
            elif action.startswith("master-"):
                kind = action[len("master-"):]
                self.push_screen(MasterEntryForm(kind, repo=self.master_repos[kind]), self.on_master_result)
            elif action.startswith("list-"):
                self.show_master_table(action[len("list-"):])
            elif action.startswith("pallet-"):
                variant = action[len("pallet-"):]
                self.push_screen(PalletRequestForm(variant, repo=self.pallet_repos[variant]), self.on_pallet_result)
            elif action == "log-summary":
                self.show_log_summary()
            elif action.startswith("log-"):
                self.show_log_content(action[len("log-"):])
        except Exception as e:
            log_system_event("tui_action_error", {"action": action, "error": str(e)}, level="error")
            self.notify(f"❌ Erro: {str(e)}", severity="error")

    def on_export_result(self, result: Optional[Dict[str, Any]]) -> None:
        if not result:
            return
        view = ShipmentHistoryView.for_customer() if result.get("customer") else ShipmentHistoryView()
        try:
            resultado = export_history_csv(view, result["file"])
        except OSError as e:
            self.push_screen(OutputScreen("エクスポート失敗", str(e)))
            return
        rows = [[key, str(value)] for key, value in resultado.items()]
        self.push_screen(OutputDataTableScreen("CSVエクスポート", ["項目", "値"], rows))

    def on_master_result(self, result: Optional[Dict[str, Any]]) -> None:
        if result:
            self.notify(f"✅ 保存しました: {result['ack'].id}")

    def on_pallet_result(self, result: Optional[Dict[str, Any]]) -> None:
        if not result:
            return
        ack = result.get("ack")
        status = "メール送信済み" if result.get("email_sent") else "保存済み"
        self.push_screen(OutputScreen(f"{ack.id if ack else ''} ({status})", result["text"]))
        self.notify(f"✅ {status}: 合計 {result['total_quantity']}個")

    def show_master_table(self, kind: str) -> None:
        records = self.master_repos[kind].list()
        columns = [f.name for f in fields(MASTER_FORMS[kind])]
        rows = [[_initial(as_dict(r)[c]) for c in columns] for r in records]
        labels = [FIELD_LABELS.get(c, c) for c in columns]
        self.push_screen(OutputDataTableScreen(f"{MASTER_LIST_TITLES[kind]} ({len(rows)}件)", labels, rows))

    def action_refresh(self) -> None:
        """Refresh the status display."""
        if self.status_display:
            self.status_display.refresh_status()
        self.notify("🔄 Status atualizado!", timeout=2)

    def show_log_content(self, log_type: str) -> None:
        """Show the content of a specific log type."""
        log_system_event("view_logs", {"log_type": log_type})
        content = get_log_summary(log_type, lines=500)
        if content is None:
            content = "Logging desativado (ENABLE_LOGGING / ENABLE_OUTPUT)."
        self.push_screen(OutputScreen(LOG_TITLES.get(log_type, f"📋 Logs - {log_type}"), content))

    def show_log_summary(self) -> None:
        """Show a summary of all log activity."""
        log_system_event("view_log_summary")
        summary_text = "📊 RESUMO DOS LOGS\n\n"
        for log_type, filename in LOG_FILES.items():
            log_path = Path(logger.LOGS_DIR) / filename
            if log_path.exists():
                size_kb = log_path.stat().st_size / 1024
                with open(log_path, 'r', encoding='utf-8') as f:
                    lines = len(f.readlines())
                summary_text += f"✅ {LOG_TITLES[log_type]}: {lines} linhas ({size_kb:.1f} KB)\n"
            else:
                summary_text += f"❌ {LOG_TITLES[log_type]}: Arquivo não encontrado\n"
        summary_text += f"\n📁 Diretório de logs: {logger.LOGS_DIR}\n"
        self.push_screen(OutputScreen("Resumo dos Logs", summary_text))


def main() -> None:
    """Run the back-office TUI application."""
    app = BackofficeApp()
    app.run()


if __name__ == "__main__":
    main()
