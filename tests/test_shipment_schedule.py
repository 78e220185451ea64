from datetime import date

from backoffice.usecases.shipment_schedule import ShipmentScheduleView


def test_week_navigation():
    view = ShipmentScheduleView(anchor=date(2025, 4, 10), seed=7)
    assert (view.week_start, view.week_end) == ("2025-04-07", "2025-04-13")
    view.next_week()
    assert view.week_start == "2025-04-14"
    view.prev_week()
    view.prev_week()
    assert view.week_start == "2025-03-31"
    view.current_week(today=date(2025, 4, 12))
    assert view.week_start == "2025-04-07"


def test_quantities_are_stable_while_the_week_is_shown():
    view = ShipmentScheduleView(anchor=date(2025, 4, 10))
    first = view.items()
    assert view.items() is first
    view.next_week()
    view.prev_week()
    assert view.items() is first


def test_table_rows_sum_up_the_hierarchy():
    view = ShipmentScheduleView(anchor=date(2025, 4, 10), seed=3)
    data = view.table()
    assert not data["empty"]
    assert len(data["dates"]) == 7
    rows = data["rows"]
    assert [r["level"] for r in rows[:4]] == ["product", "customer", "destination", "destination"]

    product, customer, dest1, dest2 = rows[:4]
    assert customer["values"] == [a + b for a, b in zip(dest1["values"], dest2["values"])]
    # produto A: cliente A (2 destinos) + cliente X (1 destino)
    x_dest = rows[5]
    assert product["values"] == [c + x for c, x in zip(customer["values"], x_dest["values"])]
    assert product["total"] == sum(product["values"])
    assert customer["unit_price"] == 1500
    assert product["unit_price"] is None


def test_search_filters_products():
    view = ShipmentScheduleView(anchor=date(2025, 4, 10), seed=3)
    view.set_search("Y商事")
    data = view.table()
    assert [r["label"] for r in data["rows"] if r["level"] == "product"] == ["製品C (PROD-C)"]
    view.set_search("該当なし")
    assert view.table() == {"dates": view.dates, "rows": [], "empty": True}
