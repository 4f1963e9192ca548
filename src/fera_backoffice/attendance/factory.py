from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import PaymentModality
from ..employees.model import Employee
from .strategies.base import PaymentStrategy
from .strategies.clt_strategy import CltStrategy
from .strategies.diaria_strategy import DiariaStrategy


@dataclass
class PaymentStrategyFactory:
    """Factory Pattern: choose the payment strategy from the employee's modality."""

    def for_employee(self, employee: Employee) -> PaymentStrategy:
        if employee.payment_modality == PaymentModality.CLT:
            return CltStrategy()
        return DiariaStrategy()
