"""Pure attendance rules: calendar toggle, point registration and value edits.

Nothing here touches the store; callers persist the returned records.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.numbers import parse_number
from ..core.enums import LeaveKind, PaymentStatus, StoredStatus, VirtualStatus
from ..employees.model import Employee
from . import codec
from .factory import PaymentStrategyFactory
from .model import ActionKind, AttendanceRecord, NextAction, PointForm

_DEFAULT_FACTORY = PaymentStrategyFactory()

# present -> partial -> absent -> (deleted)
_TOGGLE_CYCLE: dict[StoredStatus, Optional[StoredStatus]] = {
    StoredStatus.PRESENT: StoredStatus.PARTIAL,
    StoredStatus.PARTIAL: StoredStatus.ABSENT,
    StoredStatus.ABSENT: None,
}


def toggle_simple_attendance(
    employee: Employee,
    day: date,
    existing: Optional[AttendanceRecord],
    *,
    factory: PaymentStrategyFactory = _DEFAULT_FACTORY,
) -> NextAction:
    if not employee.is_active:
        return NextAction(ActionKind.REJECTED, reason="Funcionário inativo não pode receber lançamentos")

    strategy = factory.for_employee(employee)
    if not strategy.supports_simple_toggle:
        return NextAction(ActionKind.REJECTED, reason="Funcionários CLT usam o registro de ponto")

    if existing is None:
        record = AttendanceRecord(
            id=None,
            company_id=employee.company_id,
            employee_id=str(employee.id),
            date=day,
            status=StoredStatus.PRESENT,
            value=strategy.toggle_value(employee, VirtualStatus.PRESENT),
            payment_status=PaymentStatus.PENDING,
        )
        return NextAction(ActionKind.CREATE, record=record)

    next_status = _TOGGLE_CYCLE[existing.status]
    if next_status is None:
        return NextAction(ActionKind.DELETE, record=existing)

    virtual = VirtualStatus(next_status.value)
    record = existing.with_changes(
        status=next_status,
        leave_kind=LeaveKind.NONE,
        value=strategy.toggle_value(employee, virtual),
    )
    return NextAction(ActionKind.UPDATE, record=record)


def save_point_record(
    employee: Employee,
    day: date,
    form: PointForm,
    existing: Optional[AttendanceRecord] = None,
    *,
    factory: PaymentStrategyFactory = _DEFAULT_FACTORY,
) -> AttendanceRecord:
    """Build the record for a point/leave registration.

    Keeps ``id`` and ``payment_status`` of an existing record; new records
    start as ``pendente``.
    """
    note = codec.check_free_text(form.observation)
    strategy = factory.for_employee(employee)
    virtual = form.status
    with_clock = virtual in (VirtualStatus.PRESENT, VirtualStatus.PARTIAL)

    fields = dict(
        status=codec.stored_status_for(virtual),
        leave_kind=codec.leave_kind_for(virtual),
        value=strategy.point_value(employee, virtual),
        observation=note,
        clock_in=form.clock_in if with_clock else None,
        break_start=form.break_start if with_clock else None,
        break_end=form.break_end if with_clock else None,
        clock_out=form.clock_out if with_clock else None,
    )

    if existing is not None:
        return existing.with_changes(**fields)

    return AttendanceRecord(
        id=None,
        company_id=employee.company_id,
        employee_id=str(employee.id),
        date=day,
        payment_status=PaymentStatus.PENDING,
        **fields,
    )


def edit_record_values(
    record: AttendanceRecord,
    new_value,
    new_discount,
    new_bonus,
    new_observation: Optional[str] = None,
) -> AttendanceRecord:
    """Apply a value edit; each numeric field is parsed on its own.

    Unparseable value keeps the previous value, unparseable discount/bonus
    become zero. The leave prefix is carried by ``leave_kind`` and never
    typed by the user.
    """
    value = parse_number(new_value)
    discount = parse_number(new_discount)
    bonus = parse_number(new_bonus)
    observation = record.observation if new_observation is None else codec.check_free_text(new_observation)

    return record.with_changes(
        value=record.value if value is None else value,
        discount_value=0.0 if discount is None else discount,
        bonus_value=0.0 if bonus is None else bonus,
        observation=observation,
    )


def toggle_payment_status(record: AttendanceRecord) -> AttendanceRecord:
    new_status = PaymentStatus.PENDING if record.is_paid else PaymentStatus.PAID
    return record.with_changes(payment_status=new_status)
