# backoffice/usecases/shipment_history.py
"""
UC: Consultar histórico de expedição (geral e por cliente).

A tela mantém apenas o estado da consulta (termo, status, período e
página); tabela, cartões de resumo e paginação são recalculados a cada
alteração a partir do repositório.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from backoffice.config import ALL, DEFAULTS
from backoffice.domain.models import CustomerInfo, ShipmentHistoryRecord, ShipmentStats
from backoffice.domain.queries import (
    DATE_RANGES,
    Page,
    average_unit_price,
    clamp_page,
    paginate,
    shipment_stats,
    total_pages,
)
from backoffice.infra.fixtures import default_customer
from backoffice.infra.logger import log_query, log_system_event
from backoffice.infra.repositories import ShipmentFilter, ShipmentHistoryRepo

EMPTY_TITLE = "出荷履歴が見つかりません"
EMPTY_HINT = "検索条件を変更してください"

EXPORT_COLUMNS = {
    "id": "ID",
    "product_code": "製品コード",
    "product_name": "製品名",
    "delivery_note_no": "納品書番号",
    "order_no": "注文書番号",
    "shipment_quantity_cases": "出荷数(c/s)",
    "shipment_quantity_pieces": "出荷数(本)",
    "shipment_date": "出荷日",
    "delivery_date": "納品日",
    "delivery_destination": "納品先",
    "shipping_company": "運送会社",
    "order_source": "発注元",
    "unit_price": "単価",
    "total_amount": "金額",
    "status": "ステータス",
}


class ShipmentHistoryView:
    """Estado e consultas de uma tela de histórico de expedição."""

    def __init__(
        self,
        repo: Optional[ShipmentHistoryRepo] = None,
        customer: Optional[CustomerInfo] = None,
        page_size: int = DEFAULTS.page_size,
        date_range: str = DEFAULTS.date_range,
        today: Optional[date] = None,
    ):
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.customer = customer
        self.repo = repo or ShipmentHistoryRepo(
            customer=customer is not None,
            customer_name=customer.customer_name if customer else "",
        )
        self.page_size = page_size
        self.today = today or DEFAULTS.reference_date
        self.term = ""
        self.status = ALL
        self.date_range = ALL
        self.current_page = 1
        self.set_date_range(date_range)

    @classmethod
    def for_customer(cls, customer_id: str = "", customer_name: str = "", **kwargs) -> "ShipmentHistoryView":
        return cls(customer=default_customer(customer_id, customer_name), **kwargs)

    # ------------------
    # alterações de estado
    # ------------------

    def set_search(self, term: str) -> None:
        self.term = term or ""
        self._clamp_current_page()

    def set_status(self, status: str) -> None:
        self.status = status or ALL
        self._clamp_current_page()

    def set_date_range(self, date_range: str) -> None:
        if date_range != ALL and date_range not in DATE_RANGES:
            raise ValueError(f"unknown date range: {date_range!r}")
        self.date_range = date_range
        self._clamp_current_page()

    def _clamp_current_page(self) -> None:
        # o filtro pode encolher o resultado; a página guardada é a exibida
        self.current_page = clamp_page(self.current_page, total_pages(len(self.filtered()), self.page_size))

    def go_to_page(self, page: int) -> int:
        """Muda de página, limitando ao intervalo existente."""
        pages = total_pages(len(self.filtered()), self.page_size)
        self.current_page = clamp_page(page, pages)
        return self.current_page

    def next_page(self) -> int:
        return self.go_to_page(self.current_page + 1)

    def prev_page(self) -> int:
        return self.go_to_page(self.current_page - 1)

    # ------------------
    # consultas
    # ------------------

    def criteria(self) -> ShipmentFilter:
        return ShipmentFilter(self.term, self.status, self.date_range, self.today)

    def filtered(self) -> List[ShipmentHistoryRecord]:
        return self.repo.list(self.criteria())

    def stats(self) -> ShipmentStats:
        return shipment_stats(self.filtered())

    def page(self) -> Page:
        return paginate(self.filtered(), self.current_page, self.page_size)

    def snapshot(self) -> Dict[str, Any]:
        """Tudo o que a camada de apresentação precisa para desenhar a tela."""
        rows = self.filtered()
        stats = shipment_stats(rows)
        page = paginate(rows, self.current_page, self.page_size)
        log_query(
            "customer-history" if self.customer else "history",
            {"term": self.term, "status": self.status, "date_range": self.date_range, "page": page.page},
            matched=len(rows),
            total=len(self.repo.list()),
        )
        return {
            "customer": self.customer,
            "stats": stats,
            "average_unit_price": average_unit_price(stats),
            "page": page,
            "empty": page.is_empty,
            "message": f"{EMPTY_TITLE}\n{EMPTY_HINT}" if page.is_empty else None,
        }


def history_rows(records: List[ShipmentHistoryRecord]) -> List[Dict[str, Any]]:
    out = []
    for r in records:
        row = asdict(r)
        row["status"] = r.status.value
        row.pop("notes", None)
        out.append(row)
    return out


def export_history_csv(view: ShipmentHistoryView, path: str) -> Dict[str, Any]:
    """Exporta o histórico filtrado (todas as páginas) para CSV."""
    log_system_event("export_history_start", {"path": path})
    try:
        rows = history_rows(view.filtered())
        df = pd.DataFrame(rows, columns=list(EXPORT_COLUMNS))
        df = df.rename(columns=EXPORT_COLUMNS)
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        # utf-8-sig para planilhas abrirem o texto japonês corretamente
        df.to_csv(path, index=False, encoding="utf-8-sig")
        result = {"arquivo": path, "linhas_exportadas": len(rows)}
        log_system_event("export_history_success", result)
        return result
    except Exception as e:
        log_system_event("export_history_error", {"path": path, "error": str(e)}, level="error")
        raise
