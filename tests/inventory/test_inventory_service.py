from datetime import date

import pytest

from fera_backoffice.core.enums import MovementKind
from fera_backoffice.core.exceptions import ValidationError
from fera_backoffice.core.result import Err, Ok
from fera_backoffice.inventory.model import InventoryItem, InventoryMovement
from fera_backoffice.inventory.service import InventoryService, apply_movement, default_observation, reverse_movement

DAY = date(2025, 3, 10)


def _item(qty=10.0):
    return InventoryItem(id="i1", company_id="fera", name="Luva", category="EPIs", current_qty=qty, min_qty=2)


@pytest.mark.parametrize("kind,qty", [(MovementKind.ENTRY, 4), (MovementKind.EXIT, 7), (MovementKind.EXIT, 10)])
def test_reverse_restores_the_previous_quantity(kind, qty):
    item = _item()
    moved = apply_movement(item, kind, qty)
    assert isinstance(moved, Ok)

    movement = InventoryMovement(id="m1", company_id="fera", item_id="i1", quantity=qty, date="2025-03-10", kind=kind)
    restored = reverse_movement(moved.value, movement)

    assert restored.value.current_qty == item.current_qty


def test_exit_beyond_stock_is_refused():
    assert isinstance(apply_movement(_item(3), MovementKind.EXIT, 4), Err)


@pytest.mark.parametrize("qty", [0, -1, None])
def test_quantity_must_be_positive(qty):
    assert isinstance(apply_movement(_item(), MovementKind.ENTRY, qty), Err)


def test_reversing_an_entry_that_was_consumed_is_refused():
    entry = InventoryMovement(id="m1", company_id="fera", item_id="i1", quantity=5, date="2025-03-10", kind=MovementKind.ENTRY)

    assert isinstance(reverse_movement(_item(2), entry), Err)


def test_default_observation():
    assert default_observation(MovementKind.ENTRY, 3) == "ENTRADA MANUAL (+3)"
    assert default_observation(MovementKind.EXIT, 2.5) == "SAÍDA MANUAL (-2.5)"


def test_register_exit_updates_item_and_ledger(runner):
    service = InventoryService(runner)

    movement = service.register_movement("i-luva", "saida", "3", day=DAY)

    assert movement.kind == MovementKind.EXIT
    assert movement.destination == "EQUIPE DE CAMPO"
    assert movement.observation == "SAÍDA MANUAL (-3)"
    assert runner.snapshot.item("i-luva").current_qty == 7
    assert len(runner.snapshot.movements) == 1


def test_register_refuses_overdraw_without_writing(runner, store):
    service = InventoryService(runner)

    with pytest.raises(ValidationError):
        service.register_movement("i-fio", "saida", "2", day=DAY)

    assert store.fetch_company_snapshot("fera", False)["inventoryExits"] == []


def test_register_rejects_unknown_kind(runner):
    with pytest.raises(ValidationError):
        InventoryService(runner).register_movement("i-luva", "perda", "1")


def test_reverse_movement_deletes_the_row(runner):
    service = InventoryService(runner)
    movement = service.register_movement("i-luva", "entrada", "5", day=DAY, destination="Depósito 2")
    assert movement.destination == "Depósito 2"

    item = service.reverse_movement(movement.id)

    assert item.current_qty == 10
    assert runner.snapshot.item("i-luva").current_qty == 10
    assert runner.snapshot.movements == ()


def test_create_item(runner):
    service = InventoryService(runner)

    item = service.create_item({"name": "Capacete", "category": "EPIs", "currentQty": "4", "minQty": "1"})

    assert item.id
    assert not item.is_critical
    with pytest.raises(ValidationError):
        service.create_item({"name": "Capacete", "currentQty": "-1"})
    with pytest.raises(ValidationError):
        service.create_item({"name": ""})


@pytest.mark.parametrize(
    "observation,kind",
    [
        ("SAÍDA MANUAL (-3)", MovementKind.EXIT),
        ("saida p/ equipe", MovementKind.EXIT),
        ("ENTRADA MANUAL (+3)", MovementKind.ENTRY),
        ("compra - lote 2", MovementKind.ENTRY),
        ("", MovementKind.ENTRY),
    ],
)
def test_rows_without_movement_type_are_classified_by_their_note(observation, kind):
    row = {"id": "m1", "companyId": "fera", "itemId": "i-luva", "quantity": 3, "date": "2025-03-10", "observation": observation}

    assert InventoryMovement.from_row(row).kind == kind
