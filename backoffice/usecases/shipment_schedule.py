# backoffice/usecases/shipment_schedule.py
"""
UC: Programação semanal de expedição (produto → cliente → destino).

A semana começa na segunda-feira. As quantidades são geradas uma vez
por semana exibida e não mudam enquanto a tela estiver aberta.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from backoffice.domain.models import ScheduleProduct
from backoffice.domain.queries import (
    customer_total_for_date,
    filter_schedule,
    product_total_for_date,
    product_week_total,
    week_dates,
)
from backoffice.infra.fixtures import build_schedule
from backoffice.infra.logger import log_query


class ShipmentScheduleView:
    """Estado da tela de programação de expedição."""

    def __init__(self, anchor: Optional[date] = None, seed: Optional[int] = None):
        self.seed = seed
        self.term = ""
        self.anchor = anchor or date.today()
        self._cache: Dict[str, List[ScheduleProduct]] = {}

    @property
    def dates(self) -> List[str]:
        return week_dates(self.anchor)

    @property
    def week_start(self) -> str:
        return self.dates[0]

    @property
    def week_end(self) -> str:
        return self.dates[-1]

    def set_search(self, term: str) -> None:
        self.term = term or ""

    def prev_week(self) -> None:
        self.anchor -= timedelta(weeks=1)

    def next_week(self) -> None:
        self.anchor += timedelta(weeks=1)

    def current_week(self, today: Optional[date] = None) -> None:
        self.anchor = today or date.today()

    def items(self) -> List[ScheduleProduct]:
        """Produtos da semana exibida (gerados na primeira consulta da semana)."""
        key = self.week_start
        if key not in self._cache:
            self._cache[key] = build_schedule(self.dates, seed=self.seed)
        return self._cache[key]

    def filtered(self) -> List[ScheduleProduct]:
        return filter_schedule(self.items(), self.term)

    def table(self) -> Dict[str, Any]:
        """Linhas da tabela hierárquica já com os totais por dia."""
        dates = self.dates
        products = self.filtered()
        rows: List[Dict[str, Any]] = []
        for p in products:
            rows.append({
                "level": "product",
                "label": f"{p.product_name} ({p.product_id})",
                "unit_price": None,
                "values": [product_total_for_date(p, d) for d in dates],
                "total": product_week_total(p, dates),
            })
            for c in p.customers:
                rows.append({
                    "level": "customer",
                    "label": c.customer_name,
                    "unit_price": c.unit_price,
                    "values": [customer_total_for_date(c, d) for d in dates],
                    "total": sum(customer_total_for_date(c, d) for d in dates),
                })
                for dest in c.destinations:
                    values = [dest.daily_shipment.get(d, 0) for d in dates]
                    rows.append({
                        "level": "destination",
                        "label": dest.destination_name,
                        "unit_price": None,
                        "values": values,
                        "total": sum(values),
                    })
        log_query("schedule", {"term": self.term, "week": self.week_start}, matched=len(products), total=len(self.items()))
        return {"dates": dates, "rows": rows, "empty": not products}
