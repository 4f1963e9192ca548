from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..core.enums import Collection
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..payroll.model import AttendanceStatement, EmployeeMonthStats, MonthlySummary
from ..payroll.summary import attendance_statement, employee_month_stats, monthly_attendance_summary
from ..store.protocol import RecordStore
from ..sync.runner import SyncRunner
from . import engine
from .factory import PaymentStrategyFactory
from .model import (
    EDIT_FIELDS,
    PAYMENT_FIELDS,
    POINT_FIELDS,
    TOGGLE_FIELDS,
    ActionKind,
    AttendanceRecord,
    NextAction,
    PointForm,
)

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, runner: SyncRunner, *, strategy_factory: PaymentStrategyFactory | None = None):
        self._runner = runner
        self._factory = strategy_factory or PaymentStrategyFactory()

    def _employee(self, employee_id: str) -> Employee:
        employee = self._runner.snapshot.employee(employee_id)
        if not employee:
            raise ValidationError("Funcionário não encontrado")
        return employee

    def _record(self, record_id: str) -> AttendanceRecord:
        record = self._runner.snapshot.attendance_record(record_id)
        if not record:
            raise ValidationError("Registro de presença não encontrado")
        return record

    def _save(self, control_key: str, record: AttendanceRecord, fields: Sequence[str]) -> AttendanceRecord:
        """Insert a new record whole; update an existing one with ``fields`` only."""
        row = record.to_row() if record.id is None else record.to_partial_row(fields)

        def _write(store: RecordStore) -> AttendanceRecord:
            return AttendanceRecord.from_row(store.save(Collection.ATTENDANCE, row))

        return self._runner.run(control_key, _write)

    def toggle(self, employee_id: str, day: date) -> NextAction:
        """Calendar click for a daily-paid employee."""
        employee = self._employee(employee_id)
        existing = self._runner.snapshot.record_for(employee_id, day)
        action = engine.toggle_simple_attendance(employee, day, existing, factory=self._factory)
        if not action.accepted:
            raise ValidationError(action.reason or "Operação não permitida")

        key = f"attendance:{employee_id}:{day.isoformat()}"
        if action.kind == ActionKind.DELETE:
            record_id = str(action.record.id)
            self._runner.run(key, lambda store: store.delete(Collection.ATTENDANCE, record_id))
            logger.debug("attendance %s removed by toggle", record_id)
            return action

        saved = self._save(key, action.record, TOGGLE_FIELDS)
        return NextAction(action.kind, record=saved)

    def save_point(self, employee_id: str, day: date, form: PointForm) -> AttendanceRecord:
        employee = self._employee(employee_id)
        existing = self._runner.snapshot.record_for(employee_id, day)
        if existing is None and not employee.is_active:
            raise ValidationError("Funcionário inativo não pode receber lançamentos")

        record = engine.save_point_record(employee, day, form, existing, factory=self._factory)
        return self._save(f"point:{employee_id}:{day.isoformat()}", record, POINT_FIELDS)

    def edit_values(self, record_id: str, value, discount, bonus, observation: str | None = None) -> AttendanceRecord:
        record = engine.edit_record_values(self._record(record_id), value, discount, bonus, observation)
        return self._save(f"edit:{record_id}", record, EDIT_FIELDS)

    def toggle_payment(self, record_id: str) -> AttendanceRecord:
        record = engine.toggle_payment_status(self._record(record_id))
        return self._save(f"payment:{record_id}", record, PAYMENT_FIELDS)

    def monthly_summary(self, period: str) -> MonthlySummary:
        return monthly_attendance_summary(self._runner.snapshot.attendance, period)

    def employee_stats(self, employee_id: str, period: str) -> EmployeeMonthStats:
        return employee_month_stats(self._runner.snapshot.attendance, employee_id, period)

    def statement(self, employee_id: str, start: date, end: date) -> AttendanceStatement:
        if start > end:
            raise ValidationError("Período inválido")
        return attendance_statement(self._employee(employee_id), self._runner.snapshot.attendance, start, end)
