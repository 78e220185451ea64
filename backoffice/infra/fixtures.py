# backoffice/infra/fixtures.py
"""
Fixtures estáticas que fazem o papel da fonte de dados.

- HISTORY_ROWS: histórico geral de expedição (5 registros)
- CUSTOMER_HISTORY_ROWS: histórico de um cliente (8 registros)
- PRODUCT_ROWS: produtos cadastrados exibidos na listagem de cadastros
- build_schedule(): programação semanal com quantidades aleatórias

As linhas ficam como dicionários (formato "cru" da fonte); os
repositórios convertem para dataclasses.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Sequence

from backoffice.config import DEFAULTS
from backoffice.domain.models import (
    CustomerInfo,
    ScheduleCustomer,
    ScheduleDestination,
    ScheduleProduct,
    ShipmentHistoryRecord,
    ShipmentStatus,
)


def _row(id, code, name, dn, order, cases, pieces, ship, deliv, dest, carrier, price, total, status):
    return {
        "id": id,
        "product_code": code,
        "product_name": name,
        "delivery_note_no": dn,
        "order_no": order,
        "shipment_quantity_cases": cases,
        "shipment_quantity_pieces": pieces,
        "shipment_date": ship,
        "delivery_date": deliv,
        "delivery_destination": dest,
        "shipping_company": carrier,
        "unit_price": price,
        "total_amount": total,
        "status": status,
    }


HQ = "東京都港区本社"
KOTO = "東京都江東区倉庫"

HISTORY_ROWS: List[Dict[str, Any]] = [
    _row("SH-001", "PROD-A001", "ミネラルウォーター 500ml", "DN-2025-001", "ORD-2025-001",
         50, 1200, "2025-04-08", "2025-04-09", HQ, "ヤマト運輸", 120, 144000, "納品完了"),
    _row("SH-002", "PROD-A002", "お茶 350ml", "DN-2025-002", "ORD-2025-002",
         30, 720, "2025-04-07", "2025-04-08", KOTO, "佐川急便", 150, 108000, "納品完了"),
    _row("SH-003", "PROD-A003", "スポーツドリンク 500ml", "DN-2025-003", "ORD-2025-003",
         40, 960, "2025-04-06", "2025-04-07", HQ, "ヤマト運輸", 180, 172800, "納品完了"),
    _row("SH-004", "PROD-A001", "ミネラルウォーター 500ml", "DN-2025-004", "ORD-2025-004",
         25, 600, "2025-04-05", "2025-04-06", KOTO, "西濃運輸", 120, 72000, "納品完了"),
    _row("SH-005", "PROD-A004", "コーヒー 250ml", "DN-2025-005", "ORD-2025-005",
         20, 480, "2025-04-10", "2025-04-11", HQ, "ヤマト運輸", 200, 96000, "配送中"),
]

CUSTOMER_HISTORY_ROWS: List[Dict[str, Any]] = [
    _row("SH-2025-001", "PROD-A001", "ミネラルウォーター 500ml", "DN-2025-0410-001", "ORD-2025-0408-001",
         50, 1200, "2025-04-10", "2025-04-11", HQ, "ヤマト運輸", 120, 144000, "納品完了"),
    _row("SH-2025-002", "PROD-A002", "お茶 350ml", "DN-2025-0409-002", "ORD-2025-0407-002",
         30, 720, "2025-04-09", "2025-04-10", KOTO, "佐川急便", 150, 108000, "納品完了"),
    _row("SH-2025-003", "PROD-A003", "スポーツドリンク 500ml", "DN-2025-0408-003", "ORD-2025-0406-003",
         40, 960, "2025-04-08", "2025-04-09", HQ, "ヤマト運輸", 180, 172800, "納品完了"),
    _row("SH-2025-004", "PROD-A001", "ミネラルウォーター 500ml", "DN-2025-0407-004", "ORD-2025-0405-004",
         60, 1440, "2025-04-07", "2025-04-08", KOTO, "佐川急便", 120, 172800, "納品完了"),
    _row("SH-2025-005", "PROD-A004", "コーヒー 250ml", "DN-2025-0406-005", "ORD-2025-0404-005",
         25, 600, "2025-04-06", "2025-04-07", HQ, "ヤマト運輸", 200, 120000, "納品完了"),
    _row("SH-2025-006", "PROD-A002", "お茶 350ml", "DN-2025-0405-006", "ORD-2025-0403-006",
         35, 840, "2025-04-05", "2025-04-06", KOTO, "佐川急便", 150, 126000, "納品完了"),
    _row("SH-2025-007", "PROD-A003", "スポーツドリンク 500ml", "DN-2025-0404-007", "ORD-2025-0402-007",
         45, 1080, "2025-04-04", "2025-04-05", HQ, "ヤマト運輸", 180, 194400, "納品完了"),
    _row("SH-2025-008", "PROD-A001", "ミネラルウォーター 500ml", "DN-2025-0403-008", "ORD-2025-0401-008",
         55, 1320, "2025-04-03", "2025-04-04", KOTO, "佐川急便", 120, 158400, "納品完了"),
]

PRODUCT_ROWS: List[Dict[str, Any]] = [
    {"code": "PROD-A001", "name": "ミネラルウォーター 500ml", "category": "飲料", "unit": "本",
     "standard_price": 120, "description": "天然水を使用したミネラルウォーター", "status": "アクティブ"},
    {"code": "PROD-A002", "name": "お茶 350ml", "category": "飲料", "unit": "本",
     "standard_price": 150, "description": "国産茶葉を使用した緑茶", "status": "アクティブ"},
    {"code": "PROD-A003", "name": "スポーツドリンク 500ml", "category": "飲料", "unit": "本",
     "standard_price": 180, "description": "イオン補給に最適なスポーツドリンク", "status": "アクティブ"},
    {"code": "PROD-A004", "name": "コーヒー 250ml", "category": "飲料", "unit": "本",
     "standard_price": 200, "description": "アラビカ豆100%使用のブラックコーヒー", "status": "アクティブ"},
    {"code": "PROD-A005", "name": "フルーツジュース 1L", "category": "飲料", "unit": "本",
     "standard_price": 350, "description": "100%果汁のミックスフルーツジュース", "status": "廃止"},
]

# produto -> [(cliente, preço, [(destino, mínimo, amplitude)])]
SCHEDULE_LAYOUT = [
    ("prod-1", "PROD-A", "製品A", [
        ("A商事株式会社", 1500, [("東京都港区本社", 50, 100), ("東京都江東区倉庫", 30, 80)]),
        ("X流通株式会社", 1450, [("神奈川県横浜市", 60, 120)]),
    ]),
    ("prod-2", "PROD-B", "製品B", [
        ("B流通株式会社", 2200, [("大阪府大阪市本店", 80, 150), ("大阪府堺市支店", 20, 60)]),
    ]),
    ("prod-3", "PROD-C", "製品C", [
        ("Cマート", 3800, [("愛知県名古屋市店舗", 40, 90)]),
        ("Y商事", 3650, [("静岡県浜松市", 20, 50)]),
    ]),
]


def record_from_row(row: Dict[str, Any], order_source: Optional[str] = None) -> ShipmentHistoryRecord:
    data = dict(row)
    data["status"] = ShipmentStatus(data["status"])
    # o nome do cliente consultado substitui o da fixture
    data["order_source"] = order_source or data.get("order_source") or DEFAULTS.customer_name
    return ShipmentHistoryRecord(**data)


def default_customer(customer_id: str = "", customer_name: str = "") -> CustomerInfo:
    return CustomerInfo(
        customer_id=customer_id,
        customer_code="CUST-001",
        customer_name=customer_name or DEFAULTS.customer_name,
        contact_person="田中一郎",
        phone="03-1234-5678",
        email="tanaka@a-shoji.co.jp",
    )


def build_schedule(dates: Sequence[str], seed: Optional[int] = None) -> List[ScheduleProduct]:
    """Gera a programação de expedição com quantidades aleatórias por data.

    Cada destino recebe ``randint(mínimo, mínimo + amplitude - 1)`` por dia.
    Com ``seed`` informado o resultado é reprodutível.
    """
    rng = random.Random(seed)
    products: List[ScheduleProduct] = []
    for pid, product_id, name, customers in SCHEDULE_LAYOUT:
        built_customers = []
        for customer_name, price, destinations in customers:
            built_dest = tuple(
                ScheduleDestination(
                    destination_name=dest,
                    daily_shipment={d: rng.randrange(low, low + span) for d in dates},
                )
                for dest, low, span in destinations
            )
            built_customers.append(ScheduleCustomer(customer_name, price, built_dest))
        products.append(
            ScheduleProduct(
                id=pid,
                product_id=product_id,
                product_name=name,
                category="製品",
                unit="個",
                customers=tuple(built_customers),
            )
        )
    return products
