from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..common.datetime_utils import today_local
from ..common.numbers import parse_number, parse_or
from ..common.validators import require_non_empty
from ..core.constants import ENTRY_DESTINATION, EXIT_DESTINATION
from ..core.enums import Collection, MovementKind
from ..core.exceptions import ValidationError
from ..core.result import Err, Ok, Result, unwrap_or_raise
from ..store.protocol import RecordStore
from ..sync.runner import SyncRunner
from .model import InventoryItem, InventoryMovement


def apply_movement(item: InventoryItem, kind: MovementKind, quantity: Optional[float]) -> Result[InventoryItem]:
    if quantity is None or quantity <= 0:
        return Err("Quantidade inválida")
    delta = quantity if kind == MovementKind.ENTRY else -quantity
    new_qty = item.current_qty + delta
    if new_qty < 0:
        return Err(f"Estoque insuficiente para {item.name}")
    return Ok(item.with_changes(current_qty=new_qty))


def reverse_movement(item: InventoryItem, movement: InventoryMovement) -> Result[InventoryItem]:
    """Undo a movement with the exact inverse delta."""
    if movement.item_id != item.id:
        return Err("Movimentação não pertence ao item")
    new_qty = item.current_qty - movement.delta
    if new_qty < 0:
        return Err(f"Estorno deixaria {item.name} com estoque negativo")
    return Ok(item.with_changes(current_qty=new_qty))


def default_observation(kind: MovementKind, quantity: float) -> str:
    if kind == MovementKind.ENTRY:
        return f"ENTRADA MANUAL (+{quantity:g})"
    return f"SAÍDA MANUAL (-{quantity:g})"


def _kind(raw: Any) -> MovementKind:
    try:
        return MovementKind(raw)
    except ValueError as exc:
        raise ValidationError("Tipo de movimentação inválido") from exc


class InventoryService:
    def __init__(self, runner: SyncRunner):
        self._runner = runner

    def _item(self, item_id: str) -> InventoryItem:
        item = self._runner.snapshot.item(item_id)
        if item is None:
            raise ValidationError("Item não encontrado")
        return item

    def create_item(self, payload: dict[str, Any]) -> InventoryItem:
        if not self._runner.company_id:
            raise ValidationError("Usuário sem empresa vinculada")
        current_qty = parse_or(payload.get("currentQty"), 0.0)
        min_qty = parse_or(payload.get("minQty"), 0.0)
        if current_qty < 0 or min_qty < 0:
            raise ValidationError("Quantidade inválida")
        item = InventoryItem(
            id=None,
            company_id=self._runner.company_id,
            name=require_non_empty(payload.get("name"), "Nome do item"),
            category=(payload.get("category") or "outros").strip(),
            current_qty=current_qty,
            min_qty=min_qty,
            unit_value=parse_or(payload.get("unitValue"), 0.0),
        )

        def _write(store: RecordStore) -> InventoryItem:
            return InventoryItem.from_row(store.save(Collection.INVENTORY, item.to_row()))

        return self._runner.run("inventory:new", _write)

    def register_movement(
        self,
        item_id: str,
        raw_kind: Any,
        raw_quantity: Any,
        *,
        day: Optional[date] = None,
        destination: str = "",
        observation: str = "",
    ) -> InventoryMovement:
        item = self._item(item_id)
        kind = _kind(raw_kind)
        quantity = parse_number(raw_quantity)
        updated = unwrap_or_raise(apply_movement(item, kind, quantity))

        movement = InventoryMovement(
            id=None,
            company_id=item.company_id,
            item_id=str(item.id),
            quantity=quantity,
            date=(day or today_local()).isoformat(),
            kind=kind,
            destination=(destination or "").strip() or (ENTRY_DESTINATION if kind == MovementKind.ENTRY else EXIT_DESTINATION),
            observation=(observation or "").strip() or default_observation(kind, quantity),
        )

        def _write(store: RecordStore) -> InventoryMovement:
            saved = store.save(Collection.INVENTORY_MOVEMENTS, movement.to_row())
            store.save(
                Collection.INVENTORY,
                {"id": item.id, "companyId": item.company_id, "currentQty": updated.current_qty},
            )
            return InventoryMovement.from_row(saved)

        return self._runner.run(f"inventory:{item_id}", _write)

    def reverse_movement(self, movement_id: str) -> InventoryItem:
        movement = self._runner.snapshot.movement(movement_id)
        if movement is None:
            raise ValidationError("Movimentação não encontrada")
        item = self._item(movement.item_id)
        restored = unwrap_or_raise(reverse_movement(item, movement))

        def _write(store: RecordStore) -> InventoryItem:
            row = store.save(
                Collection.INVENTORY,
                {"id": item.id, "companyId": item.company_id, "currentQty": restored.current_qty},
            )
            store.delete(Collection.INVENTORY_MOVEMENTS, movement_id)
            return InventoryItem.from_row(row)

        return self._runner.run(f"inventory:{item.id}", _write)
