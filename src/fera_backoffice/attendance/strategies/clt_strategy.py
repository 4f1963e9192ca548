from __future__ import annotations

from ...core.enums import VirtualStatus
from ...employees.model import Employee
from .base import PaymentStrategy


class CltStrategy(PaymentStrategy):
    """Salaried worker with fixed shift.

    Every paid day carries the monthly reference; the per-day figure is
    informational, payroll is not discharged day by day.
    """

    supports_simple_toggle = False
    settles_per_day = False

    def toggle_value(self, employee: Employee, status: VirtualStatus) -> float:
        return self.point_value(employee, status)
