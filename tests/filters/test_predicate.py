import pytest

from fera_backoffice.core.enums import AreaStatus
from fera_backoffice.core.exceptions import ValidationError
from fera_backoffice.filters.predicate import (
    DateRange,
    apply_filter,
    area_status_filter,
    build_predicate,
    inventory_status_filter,
)
from fera_backoffice.inventory.model import InventoryItem
from fera_backoffice.production.model import Area

ENTRIES = [
    {"name": "Combustível trator", "category": "Combustível", "date": "2025-01-05"},
    {"name": "Pagamento Ana", "category": "Pagamento Funcionários", "date": "2025-01-31T18:00:00"},
    {"name": "1ª parcela prefeitura", "category": "Faturamento", "date": "2025-02-01"},
]


def _names(records):
    return [r["name"] for r in records]


def test_no_filter_matches_everything():
    assert apply_filter(ENTRIES, build_predicate()) == ENTRIES


def test_text_is_case_insensitive_substring():
    assert _names(apply_filter(ENTRIES, build_predicate("  PAGAMENTO "))) == ["Pagamento Ana"]


def test_categories_are_a_set():
    predicate = build_predicate(categories={"Combustível", "Faturamento"})

    assert _names(apply_filter(ENTRIES, predicate)) == ["Combustível trator", "1ª parcela prefeitura"]


def test_date_range_is_inclusive_and_ignores_time():
    predicate = build_predicate(date_range=DateRange.of("2025-01-05", "2025-01-31"))

    assert _names(apply_filter(ENTRIES, predicate)) == ["Combustível trator", "Pagamento Ana"]


def test_half_open_range():
    assert len(apply_filter(ENTRIES, build_predicate(date_range=DateRange.of("2025-01-06", None)))) == 2
    assert len(apply_filter(ENTRIES, build_predicate(date_range=DateRange.of(None, "2025-01-05")))) == 1


def test_checks_are_combined_with_and():
    predicate = build_predicate("a", {"Faturamento"}, DateRange.of("2025-01-01", "2025-01-31"))

    assert apply_filter(ENTRIES, predicate) == []


def test_each_check_narrows_independently():
    full = build_predicate("a", {"Pagamento Funcionários", "Faturamento"}, DateRange.of("2025-01-01", "2025-01-31"))
    expected = [
        e
        for e in ENTRIES
        if build_predicate("a")(e)
        and build_predicate(categories={"Pagamento Funcionários", "Faturamento"})(e)
        and build_predicate(date_range=DateRange.of("2025-01-01", "2025-01-31"))(e)
    ]

    assert apply_filter(ENTRIES, full) == expected


def test_inverted_range_is_rejected():
    with pytest.raises(ValidationError):
        DateRange.of("2025-02-01", "2025-01-01")


def test_enum_fields_compare_by_value():
    areas = [
        Area(id="a1", company_id="fera", name="Centro", start_date="2025-01-01", start_reference="x"),
        Area(id="a2", company_id="fera", name="Norte", start_date="2025-01-01", start_reference="x", status=AreaStatus.FINISHED),
    ]
    predicate = build_predicate(categories={"finished"}, category_field="status", date_field="start_date")

    assert [a.id for a in apply_filter(areas, predicate)] == ["a2"]
    assert [a.id for a in apply_filter(areas, area_status_filter("open"))] == ["a1"]
    assert [a.id for a in apply_filter(areas, area_status_filter("closed"))] == ["a2"]


def test_inventory_status_filter():
    items = [
        InventoryItem(id="i1", company_id="fera", name="Luva", category="EPIs", current_qty=10, min_qty=2),
        InventoryItem(id="i2", company_id="fera", name="Fio", category="insumos", current_qty=2, min_qty=2),
    ]

    assert [i.id for i in apply_filter(items, inventory_status_filter("critical"))] == ["i2"]
    assert [i.id for i in apply_filter(items, inventory_status_filter("ok"))] == ["i1"]
    assert len(apply_filter(items, inventory_status_filter())) == 2
    with pytest.raises(ValidationError):
        inventory_status_filter("baixo")
