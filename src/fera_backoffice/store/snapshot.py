from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..attendance.model import AttendanceRecord
from ..company.model import CompanyConfig
from ..employees.model import Employee
from ..finance.model import CashEntry
from ..inventory.model import InventoryItem, InventoryMovement
from ..production.model import Area, MonthlyGoal


@dataclass(frozen=True)
class AppSnapshot:
    """Read-only view of a company's data as fetched from the store.

    A snapshot is never patched: after a write the whole company payload is
    refetched and a new snapshot replaces the old reference.
    """

    company_id: str
    areas: tuple[Area, ...] = ()
    employees: tuple[Employee, ...] = ()
    attendance: tuple[AttendanceRecord, ...] = ()
    inventory: tuple[InventoryItem, ...] = ()
    movements: tuple[InventoryMovement, ...] = ()
    cash_in: tuple[CashEntry, ...] = ()
    cash_out: tuple[CashEntry, ...] = ()
    monthly_goals: tuple[MonthlyGoal, ...] = ()
    config: Optional[CompanyConfig] = None
    version: int = 0
    _goals_by_period: Mapping[str, MonthlyGoal] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_goals_by_period", {g.period: g for g in self.monthly_goals})
        if self.config is None:
            object.__setattr__(self, "config", CompanyConfig(company_id=self.company_id))

    @classmethod
    def from_payload(cls, company_id: str, payload: Mapping[str, Any], *, version: int = 0) -> "AppSnapshot":
        goals = payload.get("monthlyGoals") or []
        if isinstance(goals, Mapping):
            # {"2025-01": {"production": .., "revenue": ..}}
            goals = [{"period": period, **values} for period, values in goals.items()]

        return cls(
            company_id=company_id,
            areas=tuple(Area.from_row(r) for r in payload.get("areas") or ()),
            employees=tuple(Employee.from_row(r) for r in payload.get("employees") or ()),
            attendance=tuple(AttendanceRecord.from_row(r) for r in payload.get("attendanceRecords") or ()),
            inventory=tuple(InventoryItem.from_row(r) for r in payload.get("inventory") or ()),
            movements=tuple(InventoryMovement.from_row(r) for r in payload.get("inventoryExits") or ()),
            cash_in=tuple(CashEntry.from_row(r) for r in payload.get("cashIn") or ()),
            cash_out=tuple(CashEntry.from_row(r) for r in payload.get("cashOut") or ()),
            monthly_goals=tuple(MonthlyGoal.from_row(r) for r in goals),
            config=CompanyConfig.from_row(company_id, payload.get("settings")),
            version=version,
        )

    @property
    def goals_by_period(self) -> Mapping[str, MonthlyGoal]:
        return self._goals_by_period

    def goal_for(self, period: str) -> MonthlyGoal:
        return self._goals_by_period.get(period) or MonthlyGoal(period=period)

    def employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None)

    def active_employees(self) -> list[Employee]:
        return [e for e in self.employees if e.is_active]

    def area(self, area_id: str) -> Optional[Area]:
        return next((a for a in self.areas if a.id == area_id), None)

    def item(self, item_id: str) -> Optional[InventoryItem]:
        return next((i for i in self.inventory if i.id == item_id), None)

    def movement(self, movement_id: str) -> Optional[InventoryMovement]:
        return next((m for m in self.movements if m.id == movement_id), None)

    def attendance_record(self, record_id: str) -> Optional[AttendanceRecord]:
        return next((r for r in self.attendance if r.id == record_id), None)

    def record_for(self, employee_id: str, day: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.attendance if r.employee_id == employee_id and r.date == day), None)

    def attendance_between(self, employee_id: str, start: date, end: date) -> list[AttendanceRecord]:
        rows = [r for r in self.attendance if r.employee_id == employee_id and start <= r.date <= end]
        return sorted(rows, key=lambda r: r.date)
