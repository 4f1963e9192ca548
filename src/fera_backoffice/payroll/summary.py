"""Read-only attendance views for a month or a closed range."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from ..attendance import codec
from ..attendance.model import AttendanceRecord
from ..common.numbers import money
from ..core.enums import PaymentStatus, StoredStatus
from ..employees.model import Employee
from .calculator.standard_calculator import compute_settlement
from .model import AttendanceStatement, EmployeeMonthStats, MonthlySummary, StatementRow

_WORKED = (StoredStatus.PRESENT, StoredStatus.PARTIAL)


def _worked_in_month(records: Iterable[AttendanceRecord], period: str) -> list[AttendanceRecord]:
    return [r for r in records if r.date.isoformat().startswith(period) and r.status in _WORKED]


def monthly_attendance_summary(records: Iterable[AttendanceRecord], period: str) -> MonthlySummary:
    """Company-wide totals for worked days (present or partial) in ``period``."""
    worked = _worked_in_month(records, period)
    return MonthlySummary(
        total_value=money(sum(r.value for r in worked)),
        total_days=len(worked),
        total_paid=money(sum(r.value for r in worked if r.is_paid)),
        total_pending=money(sum(r.value for r in worked if not r.is_paid)),
    )


def employee_month_stats(records: Iterable[AttendanceRecord], employee_id: str, period: str) -> EmployeeMonthStats:
    own = [r for r in records if r.employee_id == employee_id and r.date.isoformat().startswith(period)]
    worked = [r for r in own if r.status in _WORKED]
    return EmployeeMonthStats(
        present_days=len(worked),
        total_value=money(sum(r.value for r in worked)),
        total_pending=money(sum(r.value for r in worked if not r.is_paid)),
        total_records=len(own),
    )


def attendance_statement(
    employee: Employee,
    records: Iterable[AttendanceRecord],
    start: date,
    end: date,
) -> AttendanceStatement:
    """Print view of an employee's records in [start, end] with the settlement totals."""
    selected = sorted(
        (r for r in records if r.employee_id == employee.id and start <= r.date <= end),
        key=lambda r: r.date,
    )
    rows = [
        StatementRow(
            date=r.date.isoformat(),
            shorthand=codec.status_to_shorthand(r.virtual_status),
            status=r.virtual_status.value,
            value=r.value,
            bonus_value=r.bonus_value,
            discount_value=r.discount_value,
            net_value=money(r.net_value),
            payment_status=PaymentStatus(r.payment_status).value,
            observation=r.observation,
        )
        for r in selected
    ]
    return AttendanceStatement(
        employee_id=str(employee.id),
        employee_name=employee.name,
        start=start.isoformat(),
        end=end.isoformat(),
        rows=rows,
        settlement=compute_settlement(selected),
    )
