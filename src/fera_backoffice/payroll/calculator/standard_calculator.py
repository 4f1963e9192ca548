from __future__ import annotations

from typing import Iterable

from ...attendance.model import AttendanceRecord
from ...common.numbers import money
from ..model import Settlement
from .base import SettlementCalculator


class StandardSettlementCalculator(SettlementCalculator):
    """Standard rule: base + bonuses - discounts over records not yet paid."""

    def compute(self, records: Iterable[AttendanceRecord]) -> Settlement:
        pending = [r for r in records if not r.is_paid]
        total_base = money(sum(r.value for r in pending))
        total_discounts = money(sum(r.discount_value for r in pending))
        total_bonuses = money(sum(r.bonus_value for r in pending))
        return Settlement(
            total_base=total_base,
            total_discounts=total_discounts,
            total_bonuses=total_bonuses,
            total_to_pay=money(total_base + total_bonuses - total_discounts),
            record_ids=tuple(sorted(str(r.id) for r in pending if r.id)),
        )


def compute_settlement(records: Iterable[AttendanceRecord]) -> Settlement:
    return StandardSettlementCalculator().compute(records)
