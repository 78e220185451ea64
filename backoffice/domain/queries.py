"""
Query, aggregation and pagination functions for the history and
schedule screens.

Every screen recomputes its table from the same three stages: filter the
in-memory records, reduce the filtered subset into summary figures, and
slice it into a fixed-size page window. The schedule screen adds a
nested per-date sum over customers and destinations.

All functions are pure: they depend solely on their inputs and never
mutate them, so the screens can call them on every keystroke.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from math import ceil
from typing import Iterable, List, Optional, Sequence, TypeVar

from backoffice.config import ALL, DEFAULTS
from backoffice.domain.models import (
    ScheduleCustomer,
    ScheduleProduct,
    ShipmentHistoryRecord,
    ShipmentStats,
)

T = TypeVar("T")

# Days covered by each option of the period dropdown.
DATE_RANGES = {
    "1month": 30,
    "3months": 90,
    "6months": 180,
    "1year": 365,
}


# ----------------------
# filter
# ----------------------

def _search_fields(record: ShipmentHistoryRecord) -> tuple:
    return (
        record.product_name,
        record.product_code,
        record.delivery_note_no,
        record.order_no,
        record.delivery_destination,
    )


def matches_term(record: ShipmentHistoryRecord, term: str) -> bool:
    """Return True when ``term`` is a case-insensitive substring of any
    searchable field. An empty term matches every record."""
    needle = (term or "").lower()
    return any(needle in value.lower() for value in _search_fields(record))


def matches_status(record: ShipmentHistoryRecord, status: str) -> bool:
    if status == ALL:
        return True
    # exact match against the raw value; an unknown status simply matches nothing
    return record.status.value == str(status)


def filter_records(
    records: Iterable[ShipmentHistoryRecord],
    term: str = "",
    status: str = ALL,
) -> List[ShipmentHistoryRecord]:
    """Filter shipment records by free-text term and status.

    Parameters
    ----------
    records:
        Source collection. Its order is preserved in the result.
    term:
        Case-insensitive substring looked up in product name, product
        code, delivery note number, order number and destination.
    status:
        ``"all"`` or the exact status value to keep.

    Returns
    -------
    list
        The ordered subsequence of matching records.
    """
    return [r for r in records if matches_term(r, term) and matches_status(r, status)]


def filter_by_date_range(
    records: Iterable[ShipmentHistoryRecord],
    date_range: str,
    today: Optional[date] = None,
) -> List[ShipmentHistoryRecord]:
    """Keep records shipped within the selected period ending on ``today``."""
    if date_range == ALL:
        return list(records)
    if date_range not in DATE_RANGES:
        raise ValueError(f"unknown date range: {date_range!r}")
    today = today or DEFAULTS.reference_date
    start = today - timedelta(days=DATE_RANGES[date_range])
    return [r for r in records if start <= date.fromisoformat(r.shipment_date) <= today]


# ----------------------
# aggregation
# ----------------------

def shipment_stats(records: Iterable[ShipmentHistoryRecord]) -> ShipmentStats:
    """Count and sum the filtered records for the summary cards."""
    count = 0
    amount: float = 0
    cases = 0
    pieces = 0
    for r in records:
        count += 1
        amount += r.total_amount
        cases += r.shipment_quantity_cases
        pieces += r.shipment_quantity_pieces
    return ShipmentStats(
        total_shipments=count,
        total_amount=amount,
        total_cases=cases,
        total_pieces=pieces,
    )


def average_unit_price(stats: ShipmentStats) -> Optional[int]:
    """Average price per piece, rounded to the yen.

    Returns ``None`` when no pieces were shipped; callers render it as
    ``N/A`` instead of a non-finite number.
    """
    if not stats.total_pieces:
        return None
    # round half up, like the screens always did
    return int(stats.total_amount / stats.total_pieces + 0.5)


def amount_mismatches(records: Iterable[ShipmentHistoryRecord]) -> List[ShipmentHistoryRecord]:
    """Records whose total amount differs from unit price × pieces.

    The total is a supplied field and is never recomputed; this only
    reports the drift.
    """
    return [
        r for r in records
        if abs(r.unit_price * r.shipment_quantity_pieces - r.total_amount) > 1e-6
    ]


# ----------------------
# pagination
# ----------------------

@dataclass(frozen=True)
class Page:
    items: List
    page: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def start_index(self) -> int:
        return (self.page - 1) * self.page_size


def total_pages(total_items: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    return ceil(total_items / page_size)


def clamp_page(page: int, pages: int) -> int:
    """Clamp a requested page into ``[1, pages]`` (1 when there are no pages)."""
    return max(1, min(int(page), max(pages, 1)))


def paginate(records: Sequence[T], page: int = 1, page_size: int = DEFAULTS.page_size) -> Page:
    """Slice ``records`` into the requested page window.

    Out-of-range pages are clamped; an empty collection yields a page with
    ``total_pages == 0`` and no items.
    """
    pages = total_pages(len(records), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return Page(
        items=list(records[start:start + page_size]),
        page=current,
        total_pages=pages,
        total_items=len(records),
        page_size=page_size,
    )


# ----------------------
# shipment schedule
# ----------------------

def week_dates(anchor: date) -> List[str]:
    """The seven ISO dates of the Monday-starting week containing ``anchor``."""
    monday = anchor - timedelta(days=anchor.weekday())
    return [(monday + timedelta(days=i)).isoformat() for i in range(7)]


def customer_total_for_date(customer: ScheduleCustomer, day: str) -> int:
    return sum(dest.daily_shipment.get(day, 0) for dest in customer.destinations)


def product_total_for_date(product: ScheduleProduct, day: str) -> int:
    """Sum of every destination of every customer for ``day``.

    Missing dates count as zero; a product without customers totals 0.
    """
    return sum(customer_total_for_date(c, day) for c in product.customers)


def product_week_total(product: ScheduleProduct, dates: Iterable[str]) -> int:
    return sum(product_total_for_date(product, d) for d in dates)


def filter_schedule(products: Iterable[ScheduleProduct], term: str = "") -> List[ScheduleProduct]:
    """Keep products whose name or id, or any customer name, contains ``term``."""
    needle = (term or "").lower()
    return [
        p for p in products
        if needle in p.product_name.lower()
        or needle in p.product_id.lower()
        or any(needle in c.customer_name.lower() for c in p.customers)
    ]
