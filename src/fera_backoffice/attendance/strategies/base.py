from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import VirtualStatus
from ...employees.model import Employee
from .. import codec


class PaymentStrategy(ABC):
    """Strategy Pattern: how a payment modality values an attendance day."""

    #: whether the calendar click cycle (present -> partial -> absent -> none) applies
    supports_simple_toggle: bool = False
    #: whether a day's net value is discharged on its own or only informs the payroll
    settles_per_day: bool = True

    @abstractmethod
    def toggle_value(self, employee: Employee, status: VirtualStatus) -> float:
        raise NotImplementedError

    def point_value(self, employee: Employee, status: VirtualStatus) -> float:
        """Value attributed by point registration: full reference on any paid day."""
        return employee.default_value if codec.counts_as_paid(status) else 0.0
