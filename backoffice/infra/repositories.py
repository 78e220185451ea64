# backoffice/infra/repositories.py
"""
Repositórios em memória que fazem o papel da futura camada de API.

Contrato (``Repository``):
- ``await submit(record) -> Ack``  (levanta ``SubmissionError``)
- ``list(filtro) -> list``

Classes:
- InMemoryRepository   (genérico: guarda o que recebe)
- ShipmentHistoryRepo  (fixtures de histórico de expedição)
- MasterDataRepo       (produtos, materiais e fornecedores)
- PalletRequestRepo    (pedidos de retirada de paletes)
"""

from __future__ import annotations

import itertools
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, TypeVar

from backoffice.config import ALL, DEFAULTS
from backoffice.domain.errors import SubmissionError
from backoffice.domain.models import (
    MaterialForm,
    ProductForm,
    ShipmentHistoryRecord,
    SupplierForm,
)
from backoffice.domain.queries import filter_by_date_range, filter_records
from backoffice.infra.fixtures import (
    CUSTOMER_HISTORY_ROWS,
    HISTORY_ROWS,
    PRODUCT_ROWS,
    record_from_row,
)
from backoffice.infra.logger import log_submission, print_system
from backoffice.infra.tasks import simulated_delay

R = TypeVar("R")


# -------------------------
# Helpers
# -------------------------

def as_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, dict):
        return row
    if is_dataclass(row):
        return asdict(row)
    raise TypeError("row must be dict or dataclass")


@dataclass(frozen=True)
class Ack:
    """Confirmação de recebimento de um registro."""
    id: str
    kind: str
    received_at: str


class Repository(Protocol[R]):
    async def submit(self, record: R) -> Ack: ...

    def list(self, criteria: Any = None) -> List[R]: ...


# -------------------------
# Genérico
# -------------------------

class InMemoryRepository(Generic[R]):
    """Guarda em memória os registros recebidos.

    ``fail_with`` faz o próximo ``submit`` falhar com a mensagem dada,
    simulando erro da API.
    """

    def __init__(self, kind: str, delay_s: Optional[float] = None, records: Optional[List[R]] = None):
        self.kind = kind
        self.delay_s = DEFAULTS.submit_delay_s if delay_s is None else delay_s
        self._records: List[R] = list(records or [])
        self._ids = itertools.count(len(self._records) + 1)
        self.fail_with: Optional[str] = None

    async def submit(self, record: R) -> Ack:
        data = as_dict(record)
        # placeholder do envio real à API
        print_system(f"Saving {self.kind} data:", data)
        await simulated_delay(self.delay_s)
        if self.fail_with:
            error, self.fail_with = self.fail_with, None
            log_submission(self.kind, data, error=error)
            raise SubmissionError(error)
        self._records.append(record)
        ack = Ack(
            id=f"{self.kind}-{next(self._ids)}",
            kind=self.kind,
            received_at=datetime.now().isoformat(timespec="seconds"),
        )
        log_submission(self.kind, data, result=ack.id)
        return ack

    def list(self, criteria: Optional[Callable[[R], bool]] = None) -> List[R]:
        if criteria is None:
            return list(self._records)
        return [r for r in self._records if criteria(r)]


# -------------------------
# Histórico de expedição
# -------------------------

@dataclass(frozen=True)
class ShipmentFilter:
    term: str = ""
    status: str = ALL
    date_range: str = ALL
    today: Optional[date] = None


class ShipmentHistoryRepo(InMemoryRepository[ShipmentHistoryRecord]):
    """Histórico de expedição carregado das fixtures.

    ``customer`` escolhe a fixture de um cliente (8 registros); sem ele,
    usa o histórico geral (5 registros). O nome do cliente, quando
    informado, substitui a contraparte das linhas.
    """

    def __init__(self, customer: bool = False, customer_name: str = "", delay_s: Optional[float] = None):
        rows = CUSTOMER_HISTORY_ROWS if customer else HISTORY_ROWS
        records = [record_from_row(r, customer_name or None) for r in rows]
        super().__init__("shipment", delay_s=delay_s, records=records)

    def list(self, criteria: Optional[ShipmentFilter] = None) -> List[ShipmentHistoryRecord]:
        if criteria is None:
            return list(self._records)
        rows = filter_by_date_range(self._records, criteria.date_range, criteria.today)
        return filter_records(rows, criteria.term, criteria.status)


# -------------------------
# Cadastros
# -------------------------

MASTER_FORMS = {
    "product": ProductForm,
    "material": MaterialForm,
    "supplier": SupplierForm,
}


class MasterDataRepo(InMemoryRepository):
    """Cadastros de um tipo (``product``, ``material`` ou ``supplier``)."""

    def __init__(self, kind: str, delay_s: Optional[float] = None, seed: bool = True):
        if kind not in MASTER_FORMS:
            raise ValueError(f"tipo de cadastro desconhecido: {kind}")
        records = []
        if seed and kind == "product":
            records = [ProductForm(**row) for row in PRODUCT_ROWS]
        super().__init__(kind, delay_s=delay_s, records=records)

    def list(self, criteria: Optional[str] = None) -> List[Any]:
        """Lista os cadastros cujo código ou nome contém ``criteria``."""
        needle = (criteria or "").lower()
        return [r for r in self._records if needle in r.code.lower() or needle in r.name.lower()]


class PalletRequestRepo(InMemoryRepository):
    def __init__(self, variant: str = "jpr", delay_s: Optional[float] = None):
        super().__init__(f"pallet-{variant}", delay_s=delay_s)
