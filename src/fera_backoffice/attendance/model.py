from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, time
from enum import Enum
from typing import Any, Iterable, Optional

from ..common.datetime_utils import format_clock, parse_clock, parse_iso_date
from ..common.numbers import parse_or
from ..core.enums import LeaveKind, PaymentStatus, StoredStatus, VirtualStatus
from . import codec

# Columns each write touches on an existing row; paymentStatus only changes
# through the payment toggle and settlement.
TOGGLE_FIELDS = ("status", "value", "discountObservation")
POINT_FIELDS = ("status", "value", "discountObservation", "clockIn", "breakStart", "breakEnd", "clockOut")
EDIT_FIELDS = ("value", "bonusValue", "discountValue", "discountObservation")
PAYMENT_FIELDS = ("paymentStatus",)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (employee, date).

    ``observation`` is the human-editable note; the leave prefix is only added
    by ``to_row`` when the record goes back to the store.
    """

    id: Optional[str]
    company_id: str
    employee_id: str
    date: date
    status: StoredStatus
    value: float = 0.0
    bonus_value: float = 0.0
    discount_value: float = 0.0
    observation: str = ""
    leave_kind: LeaveKind = LeaveKind.NONE
    payment_status: PaymentStatus = PaymentStatus.PENDING
    clock_in: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    clock_out: Optional[time] = None

    @property
    def virtual_status(self) -> VirtualStatus:
        return codec.virtual_for(self.status, self.leave_kind)

    @property
    def net_value(self) -> float:
        return self.value + self.bonus_value - self.discount_value

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def period(self) -> str:
        return self.date.isoformat()[:7]

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AttendanceRecord":
        virtual = codec.decode_virtual_status(row)
        raw_date = row["date"]
        return cls(
            id=row.get("id"),
            company_id=str(row["companyId"]),
            employee_id=str(row["employeeId"]),
            date=raw_date if isinstance(raw_date, date) else parse_iso_date(str(raw_date)[:10]),
            status=StoredStatus(row.get("status") or StoredStatus.ABSENT.value),
            value=parse_or(row.get("value"), 0.0),
            bonus_value=parse_or(row.get("bonusValue"), 0.0),
            discount_value=parse_or(row.get("discountValue"), 0.0),
            observation=codec.decode_observation_text(row.get("discountObservation")),
            leave_kind=codec.leave_kind_for(virtual),
            payment_status=PaymentStatus(row.get("paymentStatus") or PaymentStatus.PENDING.value),
            clock_in=parse_clock(row.get("clockIn")),
            break_start=parse_clock(row.get("breakStart")),
            break_end=parse_clock(row.get("breakEnd")),
            clock_out=parse_clock(row.get("clockOut")),
        )

    def to_row(self) -> dict[str, Any]:
        row = {
            "companyId": self.company_id,
            "employeeId": self.employee_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "value": self.value,
            "bonusValue": self.bonus_value,
            "discountValue": self.discount_value,
            "discountObservation": codec.compose_observation(self.virtual_status, self.observation),
            "paymentStatus": self.payment_status.value,
            "clockIn": format_clock(self.clock_in),
            "breakStart": format_clock(self.break_start),
            "breakEnd": format_clock(self.break_end),
            "clockOut": format_clock(self.clock_out),
        }
        if self.id:
            row["id"] = self.id
        return row

    def to_partial_row(self, fields: Iterable[str]) -> dict[str, Any]:
        """Row carrying only ``fields`` plus the keys that locate the record."""
        full = self.to_row()
        row = {"id": self.id, "companyId": self.company_id}
        row.update((name, full[name]) for name in fields)
        return row

    def with_changes(self, **changes) -> "AttendanceRecord":
        return replace(self, **changes)


@dataclass(frozen=True)
class PointForm:
    """Point registration form (CLT clock times, or a leave entry for anyone)."""

    status: VirtualStatus
    clock_in: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    clock_out: Optional[time] = None
    observation: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PointForm":
        return cls(
            status=VirtualStatus(payload.get("status") or VirtualStatus.PRESENT.value),
            clock_in=parse_clock(payload.get("clockIn")),
            break_start=parse_clock(payload.get("breakStart")),
            break_end=parse_clock(payload.get("breakEnd")),
            clock_out=parse_clock(payload.get("clockOut")),
            observation=payload.get("observation") or "",
        )


class ActionKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REJECTED = "rejected"


@dataclass(frozen=True)
class NextAction:
    """What a toggle asks the store to do next."""

    kind: ActionKind
    record: Optional[AttendanceRecord] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.kind != ActionKind.REJECTED
