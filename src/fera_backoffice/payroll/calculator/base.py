from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceRecord
from ..model import Settlement


class SettlementCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, records: Iterable[AttendanceRecord]) -> Settlement:
        raise NotImplementedError
