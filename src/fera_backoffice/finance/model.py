from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.numbers import parse_or


@dataclass(frozen=True)
class CashEntry:
    """Flat ledger entry (entrada or saída de caixa).

    The only link between entries is the free ``reference`` string.
    """

    id: Optional[str]
    company_id: str
    date: str
    value: float
    category: str
    reference: str = ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "CashEntry":
        return cls(
            id=row.get("id"),
            company_id=str(row["companyId"]),
            date=str(row.get("date") or "")[:10],
            value=parse_or(row.get("value"), 0.0),
            category=row.get("type") or row.get("category") or "",
            reference=row.get("reference") or "",
        )

    def to_row(self) -> dict[str, Any]:
        row = {
            "companyId": self.company_id,
            "date": self.date,
            "value": self.value,
            "type": self.category,
            "reference": self.reference,
        }
        if self.id:
            row["id"] = self.id
        return row
