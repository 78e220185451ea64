# backoffice/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Registros de histórico e itens de programação são imutáveis (frozen);
  são criados uma vez a partir das fixtures e descartados com a tela.
- Formulários de cadastro são mutáveis, mas só devem ser alterados
  através dos comandos de ``backoffice.domain.forms``. O tipo de cada
  campo está declarado em ``metadata["kind"]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class ShipmentStatus(str, Enum):
    SHIPPED = "出荷済み"
    IN_TRANSIT = "配送中"
    DELIVERED = "納品完了"
    CANCELLED = "キャンセル"
    RETURNED = "返品"


class Urgency(str, Enum):
    URGENT = "urgent"
    NORMAL = "normal"
    LOW = "low"


URGENCY_LABELS = {
    Urgency.URGENT: "緊急",
    Urgency.NORMAL: "通常",
    Urgency.LOW: "低",
}

PRODUCT_CATEGORIES: Tuple[str, ...] = ("飲料", "食品", "日用品", "化粧品", "医薬品", "その他")
PRODUCT_UNITS: Tuple[str, ...] = ("個", "本", "箱", "ケース", "セット", "kg", "g", "リットル", "ml")
MATERIAL_CATEGORIES: Tuple[str, ...] = ("原材料", "部品", "工具", "パーツ", "消耗品", "その他")
MATERIAL_UNITS: Tuple[str, ...] = ("kg", "g", "個", "本", "セット", "箱", "リットル", "ml", "m", "cm")
MASTER_STATUSES: Tuple[str, ...] = ("アクティブ", "廃止")
SUPPLIER_STATUSES: Tuple[str, ...] = ("アクティブ", "非アクティブ")
PALLET_TYPES: Tuple[str, ...] = (
    "標準パレット（1100×1100）",
    "大型パレット（1200×1000）",
    "小型パレット（800×600）",
    "特殊パレット",
)


def _text(default: str = "") -> str:
    return field(default=default, metadata={"kind": "text"})


def _choice(default: str, options: Tuple[str, ...]) -> str:
    return field(default=default, metadata={"kind": "choice", "options": options})


# -------------------------
# Histórico de expedição
# -------------------------

@dataclass(frozen=True)
class ShipmentHistoryRecord:
    """Linha do histórico de expedição (cabeçalho de nota de entrega)."""
    id: str
    product_code: str
    product_name: str
    delivery_note_no: str
    order_no: str
    shipment_quantity_cases: int     # c/s
    shipment_quantity_pieces: int    # 本
    shipment_date: str               # ISO YYYY-MM-DD
    delivery_date: str
    delivery_destination: str
    shipping_company: str
    order_source: str                # nome da contraparte
    unit_price: float
    total_amount: float              # não recalculado; ver amount_mismatches
    status: ShipmentStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class CustomerInfo:
    customer_id: str
    customer_code: str
    customer_name: str
    contact_person: str
    phone: str
    email: str


@dataclass(frozen=True)
class ShipmentStats:
    total_shipments: int = 0
    total_amount: float = 0
    total_cases: int = 0
    total_pieces: int = 0


# -------------------------
# Programação semanal (produto -> cliente -> destino)
# -------------------------

@dataclass(frozen=True)
class ScheduleDestination:
    destination_name: str
    daily_shipment: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ScheduleCustomer:
    customer_name: str
    unit_price: float
    destinations: Tuple[ScheduleDestination, ...] = ()


@dataclass(frozen=True)
class ScheduleProduct:
    id: str
    product_id: str
    product_name: str
    category: str
    unit: str
    customers: Tuple[ScheduleCustomer, ...] = ()


# -------------------------
# Formulários de cadastro
# -------------------------

@dataclass
class ProductForm:
    """Cadastro de produto."""
    code: str = _text()
    name: str = _text()
    category: str = _choice("", PRODUCT_CATEGORIES)
    unit: str = _choice("個", PRODUCT_UNITS)
    standard_price: float = field(default=0.0, metadata={"kind": "number"})
    description: str = _text()
    status: str = _choice("アクティブ", MASTER_STATUSES)


@dataclass
class MaterialForm:
    """Cadastro de material (insumo)."""
    code: str = _text()
    name: str = _text()
    category: str = _choice("", MATERIAL_CATEGORIES)
    unit: str = _choice("kg", MATERIAL_UNITS)
    standard_cost: float = field(default=0.0, metadata={"kind": "number"})
    supplier: str = _text()
    lead_time: int = field(default=7, metadata={"kind": "int"})   # dias
    location: str = _text()
    description: str = _text()
    status: str = _choice("アクティブ", MASTER_STATUSES)


@dataclass
class SupplierForm:
    """Cadastro de fornecedor."""
    code: str = _text()
    name: str = _text()
    contact_person: str = _text()
    phone: str = _text()
    email: str = _text()
    address: str = _text()
    payment_terms: str = _text()
    materials: List[str] = field(default_factory=list, metadata={"kind": "list"})
    notes: str = _text()
    status: str = _choice("アクティブ", SUPPLIER_STATUSES)


# -------------------------
# Pedido de retirada de paletes
# -------------------------

@dataclass
class PalletRequestItem:
    id: str
    pallet_type: str = PALLET_TYPES[0]
    quantity: int = 0
    request_date: str = ""
    delivery_date: str = ""
    delivery_location: str = ""
    notes: str = ""


@dataclass
class PalletRequest:
    request_number: str
    request_date: str
    company_name: str = "株式会社製造業"
    department: str = "生産部"
    requestor_name: str = "山田太郎"
    contact_phone: str = "03-1234-5678"
    contact_email: str = "yamada@example.com"
    delivery_address: str = "東京都千代田区丸の内1-1-1 工場A"
    urgency: Urgency = Urgency.NORMAL
    notes: str = ""
    items: List[PalletRequestItem] = field(default_factory=list)


@dataclass
class EmailDraft:
    to: str = ""
    cc: str = ""
    subject: str = ""
    body: str = ""
