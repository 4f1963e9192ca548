from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..finance.model import CashEntry


@dataclass(frozen=True)
class Settlement:
    """Totals of the pending records of one employee for a closed range."""

    total_base: float = 0.0
    total_discounts: float = 0.0
    total_bonuses: float = 0.0
    total_to_pay: float = 0.0
    record_ids: tuple[str, ...] = ()

    def as_dict(self) -> dict[str, float]:
        return {
            "totalBase": self.total_base,
            "totalDiscounts": self.total_discounts,
            "totalBonuses": self.total_bonuses,
            "totalToPay": self.total_to_pay,
        }


@dataclass(frozen=True)
class SettlementOutcome:
    cash_out_entry: CashEntry
    updated_records: tuple[AttendanceRecord, ...]
    settlement: Settlement
    informational: bool = False


@dataclass(frozen=True)
class MonthlySummary:
    total_value: float
    total_days: int
    total_paid: float
    total_pending: float


@dataclass(frozen=True)
class EmployeeMonthStats:
    present_days: int
    total_value: float
    total_pending: float
    total_records: int


@dataclass(frozen=True)
class StatementRow:
    date: str
    shorthand: str
    status: str
    value: float
    bonus_value: float
    discount_value: float
    net_value: float
    payment_status: str
    observation: str = ""


@dataclass(frozen=True)
class AttendanceStatement:
    employee_id: str
    employee_name: str
    start: str
    end: str
    rows: list[StatementRow] = field(default_factory=list)
    settlement: Optional[Settlement] = None
