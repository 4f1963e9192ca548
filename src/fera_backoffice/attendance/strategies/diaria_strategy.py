from __future__ import annotations

from ...core.enums import VirtualStatus
from ...employees.model import Employee
from .base import PaymentStrategy


class DiariaStrategy(PaymentStrategy):
    """Daily/autonomous worker: paid per worked or half day."""

    supports_simple_toggle = True
    settles_per_day = True

    def toggle_value(self, employee: Employee, status: VirtualStatus) -> float:
        if status == VirtualStatus.PRESENT:
            return employee.default_value
        if status == VirtualStatus.PARTIAL:
            return employee.default_value / 2
        return 0.0
