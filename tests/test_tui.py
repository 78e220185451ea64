"""
Tests for the back-office Textual TUI.
"""

import asyncio
from datetime import date

from textual.widgets import DataTable

from backoffice.adapters.tui import (
    BackofficeApp,
    ExportForm,
    HistoryScreen,
    MasterEntryForm,
    MenuTreeWidget,
    PalletRequestForm,
    StatusDisplay,
    history_table_rows,
    item_token,
    page_footer,
    schedule_table_rows,
    stats_text,
    status_lines,
)
from backoffice.domain.models import PALLET_TYPES
from backoffice.usecases.shipment_history import ShipmentHistoryView
from backoffice.usecases.shipment_schedule import ShipmentScheduleView


class TestStatusDisplay:
    """Test the status display widget."""

    def test_status_display_creation(self):
        status = StatusDisplay()
        assert status is not None

    def test_status_lines(self):
        lines = status_lines()
        assert any("Logging" in line for line in lines)
        assert any("2025-04-12" in line for line in lines)


class TestMenuTreeWidget:
    """Test the menu tree widget."""

    def test_menu_structure(self):
        tree = MenuTreeWidget()
        category_labels = [str(child.label) for child in tree.root.children]
        for expected in ["出荷履歴", "出荷予定", "マスタ登録", "パレット引取依頼", "システム"]:
            assert any(expected in label for label in category_labels)

    def test_menu_actions(self):
        tree = MenuTreeWidget()
        actions = [leaf.data for node in tree.root.children for leaf in node.children]
        for expected in ["history", "customer-history", "export", "schedule",
                         "master-product", "master-material", "master-supplier",
                         "list-product", "pallet-jpr", "pallet-spr", "log-system", "log-summary"]:
            assert expected in actions


class TestForms:
    """Test modal form construction."""

    def test_master_form_creation(self):
        form = MasterEntryForm("material")
        assert form.session.kind == "material"
        assert form.session.form.lead_time == 7

    def test_pallet_form_creation(self):
        form = PalletRequestForm("spr")
        assert form.editor.variant == "spr"
        assert item_token(form.editor.request.items[0]).startswith("1:100:")

    def test_export_form_creation(self):
        assert ExportForm() is not None


class TestFormatting:
    """Test the text helpers used by the screens."""

    def test_history_rows_and_stats(self):
        view = ShipmentHistoryView.for_customer(page_size=3)
        snap = view.snapshot()
        rows = history_table_rows(snap["page"].items)
        assert len(rows) == 3
        assert rows[0][0] == "ミネラルウォーター 500ml (PROD-A001)"
        assert rows[0][-1] == "納品完了"
        assert "平均単価: ¥147" in stats_text(snap)
        assert page_footer(snap) == "1 - 3 / 8 件 (ページ 1/3)"

    def test_general_stats_have_no_average(self):
        snap = ShipmentHistoryView().snapshot()
        assert "平均単価" not in stats_text(snap)
        assert "総出荷金額: ¥592,800" in stats_text(snap)

    def test_empty_footer(self):
        view = ShipmentHistoryView()
        view.set_search("存在しない")
        assert page_footer(view.snapshot()) == ""

    def test_schedule_rows_are_indented(self):
        table = ShipmentScheduleView(anchor=date(2025, 4, 10), seed=5).table()
        rows = schedule_table_rows(table)
        assert rows[0][0] == "製品A (PROD-A)"
        assert rows[1][0] == "  A商事株式会社"
        assert rows[1][1] == "¥1,500"
        assert rows[2][0].startswith("    ")
        assert len(rows[0]) == 2 + 7 + 1

    def test_item_token_uses_type_index(self):
        form = PalletRequestForm("jpr")
        item = form.editor.request.items[0]
        item.pallet_type = PALLET_TYPES[3]
        assert item_token(item).startswith("4:80:")


class TestApp:
    """Test the application with Textual's pilot."""

    def test_app_creation(self):
        app = BackofficeApp()
        assert set(app.master_repos) == {"product", "material", "supplier"}

    def test_history_screen_shows_first_page(self):
        async def scenario():
            app = BackofficeApp()
            async with app.run_test() as pilot:
                app.execute_action("history")
                await pilot.pause()
                assert isinstance(app.screen, HistoryScreen)
                assert app.screen.query_one("#history-table", DataTable).row_count == 5
        asyncio.run(scenario())
