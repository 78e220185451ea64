import pytest

from backoffice.adapters.parsers import (
    parse_field_input,
    parse_int,
    parse_number,
    parse_pallet_item,
    parse_status,
    split_list,
)
from backoffice.domain.errors import FieldUpdateError
from backoffice.domain.forms import AddMaterial, SetChoice, SetInt, SetNumber, SetText
from backoffice.domain.models import MaterialForm, PALLET_TYPES, SupplierForm


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("1500", 1500.0),
        ("12,5", 12.5),
        ("99円", 99.0),
        ("  -3.25", -3.25),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
    ],
)
def test_parse_number(txt, expected):
    assert parse_number(txt) == expected


@pytest.mark.parametrize("txt,expected", [("7", 7), ("14日", 14), ("3.9", 3), ("x", 0), (None, 0)])
def test_parse_int(txt, expected):
    assert parse_int(txt) == expected


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("", "all"),
        (None, "all"),
        ("in-transit", "配送中"),
        ("Delivered", "納品完了"),
        ("返品", "返品"),
        ("desconhecido", "desconhecido"),
    ],
)
def test_parse_status(txt, expected):
    assert parse_status(txt) == expected


def test_split_list():
    assert split_list("鉄板, ボルト、ナット;;") == ["鉄板", "ボルト", "ナット"]
    assert split_list("") == []
    assert split_list(None) == []


def test_parse_field_input_builds_typed_commands():
    form = MaterialForm()
    assert parse_field_input(form, "name", "鉄板") == SetText("name", "鉄板")
    assert parse_field_input(form, "category", " 部品 ") == SetChoice("category", "部品")
    assert parse_field_input(form, "standard_cost", "1,5") == SetNumber("standard_cost", 1.5)
    assert parse_field_input(form, "lead_time", "10日") == SetInt("lead_time", 10)
    assert parse_field_input(SupplierForm(), "materials", " 鉄板 ") == AddMaterial("鉄板", field="materials")


def test_parse_field_input_unknown_field():
    with pytest.raises(FieldUpdateError):
        parse_field_input(MaterialForm(), "colour", "red")


@pytest.mark.parametrize(
    "txt,expected",
    [
        ("1:80", (PALLET_TYPES[0], 80, None)),
        ("3:20:2025-04-20", (PALLET_TYPES[2], 20, "2025-04-20")),
        ("特殊パレット:5", ("特殊パレット", 5, None)),
        ("2", (PALLET_TYPES[1], 0, None)),
    ],
)
def test_parse_pallet_item(txt, expected):
    assert parse_pallet_item(txt) == expected


def test_parse_pallet_item_empty():
    with pytest.raises(ValueError):
        parse_pallet_item("  ")
