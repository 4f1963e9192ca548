from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from ..common.numbers import parse_or
from ..core.enums import MovementKind

_EXIT_PREFIXES = ("SAÍDA", "SAIDA")


def _legacy_kind(observation: str) -> MovementKind:
    """Kind of a row saved before ``movementType`` existed.

    Those rows only carry the generated note, "SAÍDA MANUAL (-3)" or
    "ENTRADA MANUAL (+3)".
    """
    note = observation.strip().upper()
    if note.startswith(_EXIT_PREFIXES) or note.startswith("(-"):
        return MovementKind.EXIT
    return MovementKind.ENTRY


@dataclass(frozen=True)
class InventoryItem:
    id: Optional[str]
    company_id: str
    name: str
    category: str
    current_qty: float
    min_qty: float
    unit_value: float = 0.0

    @property
    def is_critical(self) -> bool:
        return self.current_qty <= self.min_qty

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "InventoryItem":
        return cls(
            id=row.get("id"),
            company_id=str(row["companyId"]),
            name=row.get("name") or "",
            category=row.get("category") or "",
            current_qty=parse_or(row.get("currentQty"), 0.0),
            min_qty=parse_or(row.get("minQty"), 0.0),
            unit_value=parse_or(row.get("unitValue"), 0.0),
        )

    def to_row(self) -> dict[str, Any]:
        row = {
            "companyId": self.company_id,
            "name": self.name,
            "category": self.category,
            "currentQty": self.current_qty,
            "minQty": self.min_qty,
            "unitValue": self.unit_value,
        }
        if self.id:
            row["id"] = self.id
        return row

    def with_changes(self, **changes) -> "InventoryItem":
        return replace(self, **changes)


@dataclass(frozen=True)
class InventoryMovement:
    """Immutable ledger row; the only source of ``current_qty`` drift."""

    id: Optional[str]
    company_id: str
    item_id: str
    quantity: float
    date: str
    kind: MovementKind
    destination: str = ""
    observation: str = ""

    @property
    def delta(self) -> float:
        return self.quantity if self.kind == MovementKind.ENTRY else -self.quantity

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "InventoryMovement":
        observation = row.get("observation") or ""
        raw_kind = row.get("movementType")
        if raw_kind:
            kind = MovementKind(raw_kind)
        else:
            kind = _legacy_kind(observation)
        return cls(
            id=row.get("id"),
            company_id=str(row["companyId"]),
            item_id=str(row["itemId"]),
            quantity=parse_or(row.get("quantity"), 0.0),
            date=str(row.get("date") or "")[:10],
            kind=kind,
            destination=row.get("destination") or "",
            observation=observation,
        )

    def to_row(self) -> dict[str, Any]:
        row = {
            "companyId": self.company_id,
            "itemId": self.item_id,
            "quantity": self.quantity,
            "date": self.date,
            "movementType": self.kind.value,
            "destination": self.destination,
            "observation": self.observation,
        }
        if self.id:
            row["id"] = self.id
        return row
